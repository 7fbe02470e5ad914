"""Per-provider minimum-interval limiter."""

from __future__ import annotations

import time
from threading import Lock


class RateLimiterRegistry:
    """Spaces out calls to the same quote provider."""

    def __init__(self, min_interval_seconds: float = 0.2) -> None:
        self.min_interval_seconds = max(0.0, min_interval_seconds)
        self._last_called: dict[str, float] = {}
        self._lock = Lock()

    def wait(self, provider: str) -> None:
        if self.min_interval_seconds <= 0:
            return
        with self._lock:
            last = self._last_called.get(provider)
            if last is not None:
                remaining = self.min_interval_seconds - (time.time() - last)
                if remaining > 0:
                    time.sleep(remaining)
            self._last_called[provider] = time.time()
