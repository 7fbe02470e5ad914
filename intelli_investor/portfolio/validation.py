"""Boundary validation for portfolio, lot and tax inputs.

Everything here runs before any aggregate computation. Validators collect
every problem into ``ValidationIssue`` rows; the ``parse_*`` helpers raise a
``PortfolioValidationError`` carrying all of them at once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from intelli_investor.portfolio.errors import PortfolioValidationError
from intelli_investor.portfolio.models import ValidationIssue, utc_today
from intelli_investor.services.base import validate_symbol

MAX_PORTFOLIO_NAME_LENGTH = 50
MIN_TAX_YEAR = 2000
MAX_TAX_YEAR = 2100
RISK_TOLERANCES = ("low", "moderate", "high")


@dataclass
class LotInput:
    symbol: str
    shares: float
    purchase_price: float
    purchase_date: date
    name: str | None = None
    sector: str | None = None
    notes: str | None = None


@dataclass
class LotChanges:
    shares: float | None = None
    purchase_price: float | None = None
    purchase_date: date | None = None
    sector: str | None = None
    notes: str | None = None


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _check_non_negative(field: str, label: str, value: Any, issues: list[ValidationIssue], row: int | None) -> float | None:
    number = _coerce_number(value)
    if number is None:
        issues.append(ValidationIssue(field=field, row=row, code=f"invalid_{field}", message=f"{label} must be numeric."))
        return None
    if number < 0:
        issues.append(ValidationIssue(field=field, row=row, code=f"negative_{field}", message=f"{label} cannot be negative."))
        return None
    return number


def _coerce_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                return None
    return None


def _check_date(value: Any, issues: list[ValidationIssue], row: int | None) -> date | None:
    parsed = _coerce_date(value)
    if parsed is None:
        issues.append(
            ValidationIssue(
                field="purchase_date",
                row=row,
                code="invalid_purchase_date",
                message="Purchase date must be an ISO date (YYYY-MM-DD).",
            )
        )
    return parsed


def validate_portfolio_name(name: Any) -> list[ValidationIssue]:
    text = _clean_text(name)
    if text is None:
        return [ValidationIssue(field="name", code="missing_name", message="Portfolio name is required.")]
    if len(text) > MAX_PORTFOLIO_NAME_LENGTH:
        return [
            ValidationIssue(
                field="name",
                code="name_too_long",
                message=f"Name cannot be more than {MAX_PORTFOLIO_NAME_LENGTH} characters.",
            )
        ]
    return []


def parse_portfolio_name(name: Any) -> str:
    issues = validate_portfolio_name(name)
    if issues:
        raise PortfolioValidationError(issues)
    return str(name).strip()


def validate_lot_fields(
    symbol: Any,
    shares: Any,
    purchase_price: Any,
    purchase_date: Any = None,
    row: int | None = None,
) -> tuple[list[ValidationIssue], LotInput | None]:
    issues: list[ValidationIssue] = []
    clean_symbol: str | None = None
    if _clean_text(symbol) is None:
        issues.append(ValidationIssue(field="symbol", row=row, code="missing_symbol", message="Stock symbol is required."))
    else:
        try:
            clean_symbol = validate_symbol(str(symbol))
        except ValueError as error:
            issues.append(ValidationIssue(field="symbol", row=row, code="invalid_symbol", message=str(error)))

    clean_shares = _check_non_negative("shares", "Number of shares", shares, issues, row)
    clean_price = _check_non_negative("purchase_price", "Purchase price", purchase_price, issues, row)
    clean_date = utc_today() if purchase_date is None or purchase_date == "" else _check_date(purchase_date, issues, row)

    if issues or clean_symbol is None or clean_shares is None or clean_price is None or clean_date is None:
        return issues, None
    return issues, LotInput(
        symbol=clean_symbol,
        shares=clean_shares,
        purchase_price=clean_price,
        purchase_date=clean_date,
    )


def parse_lot_input(
    symbol: Any,
    shares: Any,
    purchase_price: Any,
    purchase_date: Any = None,
    name: Any = None,
    sector: Any = None,
    notes: Any = None,
) -> LotInput:
    issues, lot = validate_lot_fields(symbol, shares, purchase_price, purchase_date)
    if lot is None:
        raise PortfolioValidationError(issues)
    lot.name = _clean_text(name)
    lot.sector = _clean_text(sector)
    lot.notes = _clean_text(notes)
    return lot


def parse_lot_changes(
    shares: Any = None,
    purchase_price: Any = None,
    purchase_date: Any = None,
    sector: Any = None,
    notes: Any = None,
) -> LotChanges:
    issues: list[ValidationIssue] = []
    changes = LotChanges(sector=_clean_text(sector), notes=notes if notes is None else str(notes).strip())
    if shares is not None:
        changes.shares = _check_non_negative("shares", "Number of shares", shares, issues, None)
    if purchase_price is not None:
        changes.purchase_price = _check_non_negative("purchase_price", "Purchase price", purchase_price, issues, None)
    if purchase_date is not None:
        changes.purchase_date = _check_date(purchase_date, issues, None)
    if issues:
        raise PortfolioValidationError(issues)
    return changes


def parse_tax_year(year: Any) -> int:
    if isinstance(year, bool):
        raise PortfolioValidationError.single("year", "Year must be an integer.", "invalid_year")
    try:
        value = int(str(year).strip())
    except ValueError:
        raise PortfolioValidationError.single("year", "Year must be an integer.", "invalid_year") from None
    if not MIN_TAX_YEAR <= value <= MAX_TAX_YEAR:
        raise PortfolioValidationError.single(
            "year",
            f"Year must be between {MIN_TAX_YEAR} and {MAX_TAX_YEAR}.",
            "year_out_of_range",
        )
    return value


def parse_risk_tolerance(value: Any) -> str:
    text = (_clean_text(value) or "").lower()
    if text not in RISK_TOLERANCES:
        raise PortfolioValidationError.single(
            "risk_tolerance",
            f"Risk tolerance must be one of {list(RISK_TOLERANCES)}.",
            "invalid_risk_tolerance",
        )
    return text


def require_text(field: str, value: Any, label: str | None = None) -> str:
    text = _clean_text(value)
    if text is None:
        raise PortfolioValidationError.single(field, f"{label or field} is required.", f"missing_{field}")
    return text
