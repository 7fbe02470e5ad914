"""Yahoo Finance quote endpoint adapter."""

from __future__ import annotations

from urllib.parse import quote_plus

from intelli_investor.providers.http import fetch_json
from intelli_investor.providers.models import NormalizedQuote

QUOTE_URL = "https://query1.finance.yahoo.com/v7/finance/quote?symbols={symbols}"
HEADERS = {"User-Agent": "Mozilla/5.0 (intelli-investor)", "Accept": "application/json"}


class YahooFinanceClient:
    def __init__(self, timeout_seconds: float = 15.0) -> None:
        self.timeout_seconds = timeout_seconds

    def get_quote(self, symbol: str) -> NormalizedQuote | None:
        url = QUOTE_URL.format(symbols=quote_plus(symbol))
        data = fetch_json(url, provider="yahoo", timeout_seconds=self.timeout_seconds, headers=HEADERS)
        items = ((data or {}).get("quoteResponse") or {}).get("result") or []
        if not items or not isinstance(items[0], dict):
            return None
        item = items[0]
        price = item.get("regularMarketPrice")
        if not isinstance(price, (int, float)) or price <= 0:
            return None
        previous_close = item.get("regularMarketPreviousClose")
        return NormalizedQuote(
            symbol=symbol,
            price=float(price),
            previous_close=float(previous_close) if isinstance(previous_close, (int, float)) else None,
            timestamp=int(item["regularMarketTime"]) if isinstance(item.get("regularMarketTime"), int) else None,
            source="yahoo",
        )
