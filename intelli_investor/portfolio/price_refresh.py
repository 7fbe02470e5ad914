"""Apply fresh quotes across a portfolio's lots."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from intelli_investor.portfolio.errors import QuoteUnavailable
from intelli_investor.portfolio.models import Portfolio, utc_now
from intelli_investor.portfolio.valuation import apply_totals

LOGGER = logging.getLogger(__name__)


class QuoteSource(Protocol):
    def get_price(self, symbol: str) -> float:
        """Return a positive price or raise QuoteUnavailable."""
        ...


@dataclass
class RefreshResult:
    portfolio: Portfolio
    updated_symbols: list[str] = field(default_factory=list)
    failed_symbols: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "portfolio": self.portfolio.to_dict(),
            "updated_symbols": self.updated_symbols,
            "failed_symbols": self.failed_symbols,
        }


class PriceRefreshCoordinator:
    def __init__(self, quote_source: QuoteSource) -> None:
        self.quote_source = quote_source

    async def fetch_price(self, symbol: str) -> float | None:
        try:
            price = await asyncio.to_thread(self.quote_source.get_price, symbol)
        except QuoteUnavailable as error:
            LOGGER.warning("quote unavailable, keeping prior price: symbol=%s reason=%s", symbol, error.reason)
            return None
        except Exception:
            LOGGER.exception("quote lookup failed, keeping prior price: symbol=%s", symbol)
            return None
        if not isinstance(price, (int, float)) or isinstance(price, bool) or price <= 0:
            LOGGER.warning("quote rejected, keeping prior price: symbol=%s price=%r", symbol, price)
            return None
        return float(price)

    async def refresh(self, portfolio: Portfolio) -> RefreshResult:
        symbols = portfolio.symbols()
        prices = await asyncio.gather(*(self.fetch_price(symbol) for symbol in symbols))
        quotes = {symbol: price for symbol, price in zip(symbols, prices) if price is not None}

        refreshed_at = utc_now()
        for lot in portfolio.investments:
            price = quotes.get(lot.symbol)
            if price is not None:
                lot.apply_price(price, refreshed_at)

        apply_totals(portfolio, refreshed_at)
        return RefreshResult(
            portfolio=portfolio,
            updated_symbols=[symbol for symbol in symbols if symbol in quotes],
            failed_symbols=[symbol for symbol in symbols if symbol not in quotes],
        )
