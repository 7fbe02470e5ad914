"""Holding-period classification, capital-gains bucketing and loss harvesting.

Tax treatment here is a deliberate simplification: a lot is long-term once it
has been held strictly more than 365 calendar days, with no leap-year or
trade/settlement-date handling, and gains are unrealized mark-to-market
values rather than realized sales.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable

from intelli_investor.portfolio.models import InvestmentLot, utc_today

LONG_TERM_THRESHOLD_DAYS = 365


@dataclass(frozen=True)
class HoldingPeriod:
    is_long_term: bool
    holding_days: int


@dataclass
class LotGain:
    lot: InvestmentLot
    unrealized_gain: float
    holding: HoldingPeriod

    def to_dict(self) -> dict[str, Any]:
        return {
            "lot_id": self.lot.id,
            "symbol": self.lot.symbol,
            "name": self.lot.display_name,
            "shares": self.lot.shares,
            "purchase_price": self.lot.purchase_price,
            "purchase_date": self.lot.purchase_date.isoformat(),
            "current_price": self.lot.effective_price,
            "unrealized_gain": self.unrealized_gain,
            "holding_days": self.holding.holding_days,
            "is_long_term": self.holding.is_long_term,
        }


@dataclass
class CapitalGainsReport:
    year: int
    short_term_gains: float = 0.0
    long_term_gains: float = 0.0
    investments: list[LotGain] = field(default_factory=list)

    @property
    def total_gains(self) -> float:
        return self.short_term_gains + self.long_term_gains

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "short_term_gains": self.short_term_gains,
            "long_term_gains": self.long_term_gains,
            "total_gains": self.total_gains,
            "investments": [item.to_dict() for item in self.investments],
        }


@dataclass
class HarvestCandidate:
    lot: InvestmentLot
    total_loss: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "lot_id": self.lot.id,
            "symbol": self.lot.symbol,
            "name": self.lot.display_name,
            "shares": self.lot.shares,
            "purchase_price": self.lot.purchase_price,
            "current_price": self.lot.effective_price,
            "total_loss": self.total_loss,
            "purchase_date": self.lot.purchase_date.isoformat(),
            "sector": self.lot.sector or "Unknown",
        }


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def classify_holding_period(lot: InvestmentLot, as_of: date | datetime) -> HoldingPeriod:
    # Both ends are truncated to calendar dates before subtracting.
    holding_days = (_as_date(as_of) - _as_date(lot.purchase_date)).days
    return HoldingPeriod(is_long_term=holding_days > LONG_TERM_THRESHOLD_DAYS, holding_days=holding_days)


def calculate_capital_gains(
    lots: Iterable[InvestmentLot],
    year: int,
    as_of: date | datetime | None = None,
) -> CapitalGainsReport:
    """Bucket unrealized gains of lots held by the end of ``year``.

    Holding periods are measured to ``as_of`` (today by default), not to the
    end of ``year``; a past-year report therefore classifies lots by how long
    they have been held now.
    """
    evaluation_date = as_of if as_of is not None else utc_today()
    report = CapitalGainsReport(year=year)
    for lot in lots:
        if _as_date(lot.purchase_date).year > year:
            continue
        holding = classify_holding_period(lot, evaluation_date)
        item = LotGain(lot=lot, unrealized_gain=lot.unrealized_gain, holding=holding)
        if holding.is_long_term:
            report.long_term_gains += item.unrealized_gain
        else:
            report.short_term_gains += item.unrealized_gain
        report.investments.append(item)
    return report


def classify_lots(lots: Iterable[InvestmentLot], as_of: date | datetime | None = None) -> list[LotGain]:
    evaluation_date = as_of if as_of is not None else utc_today()
    return [
        LotGain(lot=lot, unrealized_gain=lot.unrealized_gain, holding=classify_holding_period(lot, evaluation_date))
        for lot in lots
    ]


def select_harvest_candidates(lots: Iterable[InvestmentLot]) -> list[HarvestCandidate]:
    candidates = [
        HarvestCandidate(lot=lot, total_loss=(lot.purchase_price - lot.effective_price) * lot.shares)
        for lot in lots
        if lot.effective_price < lot.purchase_price
    ]
    # sorted() is stable under reverse=True, so equal losses keep insertion order.
    return sorted(candidates, key=lambda candidate: candidate.total_loss, reverse=True)
