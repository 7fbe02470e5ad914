"""Live price lookups for portfolio lots."""

from __future__ import annotations

from intelli_investor.portfolio.errors import QuoteUnavailable
from intelli_investor.providers.models import NormalizedQuote
from intelli_investor.providers.yahoo_finance import YahooFinanceClient
from intelli_investor.providers.yfinance_client import YFinanceClient
from intelli_investor.services.base import ServiceContext, ServiceResult, run_with_cache, validate_symbol
from intelli_investor.services.fallback_manager import FallbackManager, ProviderAttempt
from intelli_investor.services.provider_status import ProviderStatus


class QuoteService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx
        status = self.ctx.get_provider("provider_status")
        if not isinstance(status, ProviderStatus):
            status = ProviderStatus()
            self.ctx.providers["provider_status"] = status
        self.provider_status = status
        self.fallback_manager = FallbackManager(ctx=self.ctx, provider_status=status)

    def _yahoo(self) -> YahooFinanceClient | None:
        client = self.ctx.get_provider("yahoo")
        return client if isinstance(client, YahooFinanceClient) else None

    def _yfinance(self) -> YFinanceClient | None:
        client = self.ctx.get_provider("yfinance")
        return client if isinstance(client, YFinanceClient) else None

    def get_quote(self, symbol: str) -> ServiceResult[NormalizedQuote]:
        clean = validate_symbol(symbol)
        return run_with_cache(
            self.ctx,
            f"quote:{clean}",
            lambda: self.fallback_manager.execute(
                operation="get_quote",
                symbol=clean,
                attempts=[
                    ProviderAttempt("yahoo", "Yahoo Finance", lambda: self._yahoo().get_quote(clean) if self._yahoo() else None),
                    ProviderAttempt("yfinance", "yfinance", lambda: self._yfinance().get_quote(clean) if self._yfinance() else None),
                ],
            ),
            ttl_seconds=self.ctx.quote_ttl_seconds,
        )

    def get_price(self, symbol: str) -> float:
        try:
            result = self.get_quote(symbol)
        except ValueError as error:
            raise QuoteUnavailable(symbol, str(error)) from error
        if result.data is None or result.data.price <= 0:
            reason = result.error.message if result.error else "no quote returned"
            raise QuoteUnavailable(symbol, reason)
        return result.data.price
