"""yfinance-backed last-close quote client."""

from __future__ import annotations

import yfinance as yf

from intelli_investor.providers.http import ProviderError
from intelli_investor.providers.models import NormalizedQuote


class YFinanceClient:
    """Uses the most recent daily close when the quote endpoint is unavailable."""

    def __init__(self, period: str = "5d") -> None:
        self.period = period

    def get_quote(self, symbol: str) -> NormalizedQuote | None:
        try:
            history = yf.Ticker(symbol).history(period=self.period)
        except Exception as error:
            raise ProviderError("yfinance", "UPSTREAM", f"yfinance history failed for {symbol}.") from error
        if history.empty or "Close" not in history:
            return None
        closes = history["Close"].dropna()
        if closes.empty:
            return None
        price = float(closes.iloc[-1])
        if price <= 0:
            return None
        previous_close = float(closes.iloc[-2]) if len(closes) > 1 else None
        return NormalizedQuote(
            symbol=symbol,
            price=price,
            previous_close=previous_close,
            timestamp=int(closes.index[-1].timestamp()),
            source="yfinance",
        )
