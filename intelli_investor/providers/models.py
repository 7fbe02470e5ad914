"""Normalized provider data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ProviderName = Literal["yahoo", "yfinance", "anthropic"]


@dataclass
class NormalizedQuote:
    symbol: str
    price: float
    previous_close: float | None
    timestamp: int | None
    source: ProviderName
