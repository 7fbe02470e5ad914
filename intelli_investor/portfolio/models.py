"""Typed portfolio models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def new_id() -> str:
    return uuid.uuid4().hex


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return utc_now()


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return utc_today()


@dataclass
class ValidationIssue:
    field: str
    message: str
    row: int | None = None
    code: str = "invalid_value"

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "row": self.row, "code": self.code}


@dataclass
class InvestmentLot:
    """One purchased position in a single ticker."""

    symbol: str
    shares: float
    purchase_price: float
    purchase_date: date = field(default_factory=utc_today)
    current_price: float | None = None
    name: str | None = None
    sector: str | None = None
    notes: str | None = None
    last_updated: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    @property
    def effective_price(self) -> float:
        """Live price when one is known and positive, else the cost basis per share."""
        if self.current_price is not None and self.current_price > 0:
            return self.current_price
        return self.purchase_price

    @property
    def cost_basis(self) -> float:
        return self.purchase_price * self.shares

    @property
    def market_value(self) -> float:
        return self.effective_price * self.shares

    @property
    def unrealized_gain(self) -> float:
        return (self.effective_price - self.purchase_price) * self.shares

    @property
    def display_name(self) -> str:
        return self.name or self.symbol

    def apply_price(self, price: float, at: datetime | None = None) -> None:
        self.current_price = price
        self.last_updated = at or utc_now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.display_name,
            "shares": self.shares,
            "purchase_price": self.purchase_price,
            "purchase_date": self.purchase_date.isoformat(),
            "current_price": self.current_price,
            "sector": self.sector,
            "notes": self.notes,
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InvestmentLot":
        current = data.get("current_price")
        return cls(
            id=str(data.get("id") or new_id()),
            symbol=str(data["symbol"]),
            name=data.get("name"),
            shares=float(data["shares"]),
            purchase_price=float(data["purchase_price"]),
            purchase_date=_parse_date(data.get("purchase_date")),
            current_price=float(current) if current is not None else None,
            sector=data.get("sector"),
            notes=data.get("notes"),
            last_updated=_parse_datetime(data.get("last_updated")),
        )


@dataclass
class Portfolio:
    owner_id: str
    name: str
    description: str | None = None
    investments: list[InvestmentLot] = field(default_factory=list)
    is_default: bool = False
    total_cost: float = 0.0
    total_value: float = 0.0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def find_investment(self, investment_id: str) -> InvestmentLot | None:
        for lot in self.investments:
            if lot.id == investment_id:
                return lot
        return None

    def symbols(self) -> list[str]:
        """Distinct lot symbols in first-seen order."""
        return list(dict.fromkeys(lot.symbol for lot in self.investments))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "description": self.description,
            "investments": [
                {
                    **lot.to_dict(),
                    "effective_price": lot.effective_price,
                    "market_value": lot.market_value,
                }
                for lot in self.investments
            ],
            "total_cost": self.total_cost,
            "total_value": self.total_value,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
