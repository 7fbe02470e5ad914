"""Portfolio aggregate valuation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from intelli_investor.portfolio.models import InvestmentLot, Portfolio, utc_now


@dataclass(frozen=True)
class PortfolioTotals:
    total_cost: float
    total_value: float

    @property
    def unrealized_gain(self) -> float:
        return self.total_value - self.total_cost


def calculate_totals(lots: Iterable[InvestmentLot]) -> PortfolioTotals:
    total_cost = 0.0
    total_value = 0.0
    for lot in lots:
        total_cost += lot.purchase_price * lot.shares
        total_value += lot.effective_price * lot.shares
    return PortfolioTotals(total_cost=total_cost, total_value=total_value)


def apply_totals(portfolio: Portfolio, now: datetime | None = None) -> Portfolio:
    """Recompute derived totals in place; the only writer of total_cost/total_value."""
    totals = calculate_totals(portfolio.investments)
    portfolio.total_cost = totals.total_cost
    portfolio.total_value = totals.total_value
    portfolio.updated_at = now or utc_now()
    return portfolio


def lot_valuation(lot: InvestmentLot) -> dict[str, float | str]:
    cost = lot.cost_basis
    return {
        "id": lot.id,
        "symbol": lot.symbol,
        "cost_basis": cost,
        "market_value": lot.market_value,
        "unrealized_gain": lot.unrealized_gain,
        "return_percent": (lot.unrealized_gain / cost) * 100.0 if cost > 0 else 0.0,
    }


def portfolio_summary(portfolio: Portfolio) -> dict[str, object]:
    totals = calculate_totals(portfolio.investments)
    return {
        "portfolio_id": portfolio.id,
        "total_cost": totals.total_cost,
        "total_value": totals.total_value,
        "unrealized_gain": totals.unrealized_gain,
        "total_return_percent": (totals.unrealized_gain / totals.total_cost) * 100.0 if totals.total_cost > 0 else 0.0,
        "positions": [lot_valuation(lot) for lot in portfolio.investments],
    }
