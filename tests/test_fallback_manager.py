import pytest

from intelli_investor.cache.ttl_cache import TTLCache
from intelli_investor.portfolio.errors import QuoteUnavailable
from intelli_investor.providers.http import ProviderError
from intelli_investor.providers.models import NormalizedQuote
from intelli_investor.providers.yahoo_finance import YahooFinanceClient
from intelli_investor.providers.yfinance_client import YFinanceClient
from intelli_investor.services.base import ServiceContext
from intelli_investor.services.fallback_manager import FallbackManager, ProviderAttempt
from intelli_investor.services.provider_status import ProviderStatus
from intelli_investor.services.quote_service import QuoteService
from intelli_investor.utils.rate_limit import RateLimiterRegistry


def _ctx(providers: dict[str, object] | None = None) -> ServiceContext:
    return ServiceContext(providers=providers or {}, cache=TTLCache(), rate_limiter=RateLimiterRegistry(0.0))


def _quote(symbol: str, price: float, source: str = "yfinance") -> NormalizedQuote:
    return NormalizedQuote(symbol=symbol, price=price, previous_close=None, timestamp=1700000000, source=source)


def test_fallback_manager_disables_rate_limited_provider_and_skips_while_disabled() -> None:
    status = ProviderStatus()
    manager = FallbackManager(ctx=_ctx(), provider_status=status, rate_limit_disable_seconds={"yahoo": 60})
    calls = {"yahoo": 0, "yfinance": 0}

    def yahoo_call():
        calls["yahoo"] += 1
        raise ProviderError("yahoo", "RATE_LIMIT", "Too Many Requests", 429)

    def yfinance_call():
        calls["yfinance"] += 1
        return _quote("AAPL", 123.0)

    attempts = [
        ProviderAttempt("yahoo", "Yahoo Finance", yahoo_call),
        ProviderAttempt("yfinance", "yfinance", yfinance_call),
    ]
    first = manager.execute(operation="get_quote", symbol="AAPL", attempts=attempts)
    assert first.data is not None
    assert first.source == "yfinance"
    assert first.warning == "Used fallback provider due to upstream issue."
    assert status.is_disabled("yahoo") is True

    second = manager.execute(operation="get_quote", symbol="AAPL", attempts=attempts)
    assert second.data is not None
    assert calls == {"yahoo": 1, "yfinance": 2}


def test_fallback_manager_returns_generic_error_without_upstream_leakage() -> None:
    manager = FallbackManager(ctx=_ctx(), provider_status=ProviderStatus())

    def failing_call():
        raise ProviderError("yahoo", "UPSTREAM", "sensitive upstream payload: api_key=secret")

    result = manager.execute(
        operation="get_quote",
        symbol="AAPL",
        attempts=[ProviderAttempt("yahoo", "Yahoo Finance", failing_call)],
    )
    assert result.data is None
    assert result.error is not None
    assert result.error.code == "UPSTREAM"
    assert result.error.message == "No quote provider returned data for AAPL."
    assert "secret" not in result.error.message


def test_quote_service_falls_back_to_yfinance_and_caches(monkeypatch) -> None:
    yahoo = YahooFinanceClient()
    history = YFinanceClient()
    calls = {"yfinance": 0}

    def _yahoo_fail(symbol):
        raise ProviderError("yahoo", "UPSTREAM", "quote endpoint failed", 502)

    def _history_quote(symbol):
        calls["yfinance"] += 1
        return _quote(symbol, 99.0)

    monkeypatch.setattr(yahoo, "get_quote", _yahoo_fail)
    monkeypatch.setattr(history, "get_quote", _history_quote)
    service = QuoteService(_ctx({"yahoo": yahoo, "yfinance": history}))

    assert service.get_price("aapl") == 99.0
    assert service.get_price("AAPL") == 99.0
    assert calls["yfinance"] == 1


def test_quote_service_raises_quote_unavailable_when_all_fail(monkeypatch) -> None:
    yahoo = YahooFinanceClient()
    monkeypatch.setattr(yahoo, "get_quote", lambda symbol: None)
    service = QuoteService(_ctx({"yahoo": yahoo}))

    with pytest.raises(QuoteUnavailable) as excinfo:
        service.get_price("AAPL")
    assert excinfo.value.symbol == "AAPL"
    assert service.ctx.cache.get("quote:AAPL") is None


def test_quote_service_wraps_invalid_symbols() -> None:
    with pytest.raises(QuoteUnavailable):
        QuoteService(_ctx()).get_price("not a symbol")
