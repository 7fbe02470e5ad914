"""Portfolio orchestration service."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Any

from intelli_investor.portfolio.data_loader import load_lot_frame, parse_lot_frame
from intelli_investor.portfolio.errors import NotFoundError, PortfolioValidationError
from intelli_investor.portfolio.models import InvestmentLot, Portfolio, ValidationIssue, utc_now
from intelli_investor.portfolio.price_refresh import PriceRefreshCoordinator, QuoteSource, RefreshResult
from intelli_investor.portfolio.repository import PortfolioRepository
from intelli_investor.portfolio.tax_lots import (
    CapitalGainsReport,
    HarvestCandidate,
    LotGain,
    calculate_capital_gains,
    classify_lots,
    select_harvest_candidates,
)
from intelli_investor.portfolio.validation import (
    parse_lot_changes,
    parse_lot_input,
    parse_portfolio_name,
    parse_tax_year,
    require_text,
)

LOGGER = logging.getLogger(__name__)


def holdings_snapshot(portfolio: Portfolio) -> list[dict[str, Any]]:
    """Per-lot view handed to the advisory oracle."""
    return [
        {
            "symbol": lot.symbol,
            "name": lot.display_name,
            "shares": lot.shares,
            "value": lot.market_value,
            "sector": lot.sector or "Unknown",
        }
        for lot in portfolio.investments
    ]


class PortfolioService:
    def __init__(self, repository: PortfolioRepository, quote_source: QuoteSource) -> None:
        self.repository = repository
        self.refresher = PriceRefreshCoordinator(quote_source)

    def _load(self, owner_id: str, portfolio_id: str) -> Portfolio:
        owner = require_text("owner_id", owner_id, "Owner id")
        portfolio = require_text("portfolio_id", portfolio_id, "Portfolio id")
        return self.repository.get(portfolio, owner)

    def create_portfolio(
        self,
        owner_id: str,
        name: str,
        description: str | None = None,
        is_default: bool = False,
    ) -> Portfolio:
        owner = require_text("owner_id", owner_id, "Owner id")
        portfolio = Portfolio(
            owner_id=owner,
            name=parse_portfolio_name(name),
            description=(description or "").strip() or None,
            is_default=bool(is_default),
        )
        return self.repository.save(portfolio)

    def list_portfolios(self, owner_id: str) -> list[Portfolio]:
        return self.repository.list_for_owner(require_text("owner_id", owner_id, "Owner id"))

    def get_portfolio(self, owner_id: str, portfolio_id: str) -> Portfolio:
        return self._load(owner_id, portfolio_id)

    def update_portfolio(
        self,
        owner_id: str,
        portfolio_id: str,
        name: str,
        description: str | None = None,
        is_default: bool | None = None,
    ) -> Portfolio:
        clean_name = parse_portfolio_name(name)
        portfolio = self._load(owner_id, portfolio_id)
        portfolio.name = clean_name
        portfolio.description = (description or "").strip() or None
        if is_default is not None:
            portfolio.is_default = bool(is_default)
        return self.repository.save(portfolio)

    def delete_portfolio(self, owner_id: str, portfolio_id: str) -> None:
        self.repository.delete(
            require_text("portfolio_id", portfolio_id, "Portfolio id"),
            require_text("owner_id", owner_id, "Owner id"),
        )

    async def add_investment(
        self,
        owner_id: str,
        portfolio_id: str,
        symbol: Any,
        shares: Any,
        purchase_price: Any,
        purchase_date: Any = None,
        name: str | None = None,
        sector: str | None = None,
        notes: str | None = None,
    ) -> Portfolio:
        lot_input = parse_lot_input(symbol, shares, purchase_price, purchase_date, name, sector, notes)
        portfolio = await asyncio.to_thread(self._load, owner_id, portfolio_id)

        live_price = await self.refresher.fetch_price(lot_input.symbol)
        lot = InvestmentLot(
            symbol=lot_input.symbol,
            name=lot_input.name or lot_input.symbol,
            shares=lot_input.shares,
            purchase_price=lot_input.purchase_price,
            purchase_date=lot_input.purchase_date,
            current_price=live_price if live_price is not None else lot_input.purchase_price,
            sector=lot_input.sector,
            notes=lot_input.notes,
        )
        portfolio.investments.append(lot)
        return await asyncio.to_thread(self.repository.save, portfolio)

    async def update_investment(
        self,
        owner_id: str,
        portfolio_id: str,
        investment_id: str,
        shares: Any = None,
        purchase_price: Any = None,
        purchase_date: Any = None,
        sector: str | None = None,
        notes: str | None = None,
    ) -> Portfolio:
        changes = parse_lot_changes(shares, purchase_price, purchase_date, sector, notes)
        portfolio = await asyncio.to_thread(self._load, owner_id, portfolio_id)
        lot = portfolio.find_investment(investment_id)
        if lot is None:
            raise NotFoundError("Investment", investment_id)

        if changes.shares is not None:
            lot.shares = changes.shares
        if changes.purchase_price is not None:
            lot.purchase_price = changes.purchase_price
        if changes.purchase_date is not None:
            lot.purchase_date = changes.purchase_date
        if changes.sector is not None:
            lot.sector = changes.sector
        if changes.notes is not None:
            lot.notes = changes.notes or None

        live_price = await self.refresher.fetch_price(lot.symbol)
        if live_price is not None:
            lot.apply_price(live_price)
        return await asyncio.to_thread(self.repository.save, portfolio)

    def remove_investment(self, owner_id: str, portfolio_id: str, investment_id: str) -> Portfolio:
        portfolio = self._load(owner_id, portfolio_id)
        if portfolio.find_investment(investment_id) is None:
            raise NotFoundError("Investment", investment_id)
        portfolio.investments = [lot for lot in portfolio.investments if lot.id != investment_id]
        return self.repository.save(portfolio)

    async def refresh_prices(self, owner_id: str, portfolio_id: str) -> RefreshResult:
        portfolio = await asyncio.to_thread(self._load, owner_id, portfolio_id)
        if not portfolio.investments:
            return RefreshResult(portfolio=portfolio)
        result = await self.refresher.refresh(portfolio)
        await asyncio.to_thread(self.repository.save, result.portfolio)
        if result.failed_symbols:
            LOGGER.info(
                "portfolio refresh partial: id=%s updated=%s failed=%s",
                portfolio.id,
                result.updated_symbols,
                result.failed_symbols,
            )
        return result

    async def import_investments(self, owner_id: str, portfolio_id: str, file_path: str) -> RefreshResult:
        try:
            frame = await asyncio.to_thread(load_lot_frame, file_path)
        except (OSError, ValueError, ImportError) as error:
            raise PortfolioValidationError(
                [ValidationIssue(field="file_path", code="file_error", message=str(error))]
            ) from error
        lot_inputs, issues = parse_lot_frame(frame)
        if issues:
            raise PortfolioValidationError(issues)
        portfolio = await asyncio.to_thread(self._load, owner_id, portfolio_id)

        imported_at = utc_now()
        for item in lot_inputs:
            portfolio.investments.append(
                InvestmentLot(
                    symbol=item.symbol,
                    name=item.name or item.symbol,
                    shares=item.shares,
                    purchase_price=item.purchase_price,
                    purchase_date=item.purchase_date,
                    current_price=item.purchase_price,
                    sector=item.sector,
                    notes=item.notes,
                    last_updated=imported_at,
                )
            )
        result = await self.refresher.refresh(portfolio)
        await asyncio.to_thread(self.repository.save, result.portfolio)
        return result

    def calculate_gains(
        self,
        owner_id: str,
        portfolio_id: str,
        year: Any,
        as_of: date | datetime | None = None,
    ) -> CapitalGainsReport:
        tax_year = parse_tax_year(year)
        portfolio = self._load(owner_id, portfolio_id)
        return calculate_capital_gains(portfolio.investments, tax_year, as_of)

    def harvest_candidates(self, owner_id: str, portfolio_id: str) -> list[HarvestCandidate]:
        return select_harvest_candidates(self._load(owner_id, portfolio_id).investments)

    def classified_investments(
        self,
        owner_id: str,
        portfolio_id: str,
        as_of: date | datetime | None = None,
    ) -> list[LotGain]:
        return classify_lots(self._load(owner_id, portfolio_id).investments, as_of)
