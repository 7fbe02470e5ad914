"""Portfolio-domain error taxonomy."""

from __future__ import annotations

from intelli_investor.portfolio.models import ValidationIssue


class PortfolioError(Exception):
    code = "INTERNAL"


class NotFoundError(PortfolioError):
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class PortfolioValidationError(PortfolioError, ValueError):
    code = "VALIDATION_ERROR"

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues) or "invalid input"
        super().__init__(summary)

    @classmethod
    def single(cls, field: str, message: str, code: str = "invalid_value") -> "PortfolioValidationError":
        return cls([ValidationIssue(field=field, message=message, code=code)])


class QuoteUnavailable(PortfolioError):
    """A quote source could not price one symbol. Never fatal to a request."""

    code = "QUOTE_UNAVAILABLE"

    def __init__(self, symbol: str, reason: str = "no quote returned") -> None:
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Quote unavailable for {symbol}: {reason}")


class ConflictError(PortfolioError):
    """A concurrent write won; the caller may retry."""

    code = "CONFLICT"
