import asyncio
from datetime import datetime, timezone

from intelli_investor.portfolio.errors import QuoteUnavailable
from intelli_investor.portfolio.models import InvestmentLot, Portfolio
from intelli_investor.portfolio.price_refresh import PriceRefreshCoordinator

EARLIER = datetime(2024, 1, 1, tzinfo=timezone.utc)


class _StubQuotes:
    def __init__(self, prices: dict[str, object]) -> None:
        self.prices = prices
        self.calls: list[str] = []

    def get_price(self, symbol: str) -> float:
        self.calls.append(symbol)
        value = self.prices.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise QuoteUnavailable(symbol)
        return value  # type: ignore[return-value]


def _portfolio() -> Portfolio:
    return Portfolio(
        owner_id="owner-1",
        name="Core",
        investments=[
            InvestmentLot(symbol="X", shares=10, purchase_price=10.0, current_price=11.0, last_updated=EARLIER),
            InvestmentLot(symbol="Y", shares=5, purchase_price=20.0, current_price=20.0, last_updated=EARLIER),
            InvestmentLot(symbol="Y", shares=1, purchase_price=30.0, current_price=None, last_updated=EARLIER),
        ],
    )


def test_refresh_keeps_failed_symbol_and_updates_successful_one() -> None:
    quotes = _StubQuotes({"Y": 25.0})
    result = asyncio.run(PriceRefreshCoordinator(quotes).refresh(_portfolio()))

    x_lot, y_lot, y_second = result.portfolio.investments
    assert x_lot.current_price == 11.0
    assert x_lot.last_updated == EARLIER
    assert y_lot.current_price == 25.0
    assert y_second.current_price == 25.0
    assert y_lot.last_updated == y_second.last_updated
    assert y_lot.last_updated > EARLIER
    assert result.updated_symbols == ["Y"]
    assert result.failed_symbols == ["X"]
    assert result.portfolio.total_cost == 100.0 + 100.0 + 30.0
    assert result.portfolio.total_value == 110.0 + 125.0 + 25.0


def test_refresh_fetches_each_symbol_once() -> None:
    quotes = _StubQuotes({"X": 12.0, "Y": 21.0})
    asyncio.run(PriceRefreshCoordinator(quotes).refresh(_portfolio()))
    assert sorted(quotes.calls) == ["X", "Y"]


def test_refresh_survives_unexpected_errors_and_bad_prices() -> None:
    quotes = _StubQuotes({"X": RuntimeError("boom"), "Y": 0.0})
    result = asyncio.run(PriceRefreshCoordinator(quotes).refresh(_portfolio()))
    assert result.updated_symbols == []
    assert result.failed_symbols == ["X", "Y"]
    assert [lot.current_price for lot in result.portfolio.investments] == [11.0, 20.0, None]
    assert result.portfolio.total_value == 110.0 + 100.0 + 30.0


def test_fetch_price_returns_none_for_unavailable_quote() -> None:
    coordinator = PriceRefreshCoordinator(_StubQuotes({}))
    assert asyncio.run(coordinator.fetch_price("ZZZ")) is None
