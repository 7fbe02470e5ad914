"""In-memory provider disable windows for fallback orchestration."""

from __future__ import annotations

import threading
import time


class ProviderStatus:
    """Tracks providers benched after a rate-limit response."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._disabled_until: dict[str, float] = {}

    def disable_provider(self, provider: str, ttl_seconds: int) -> float:
        until = time.time() + max(1, ttl_seconds)
        with self._lock:
            until = max(self._disabled_until.get(provider, 0.0), until)
            self._disabled_until[provider] = until
            return until

    def get_disabled_until(self, provider: str) -> float | None:
        with self._lock:
            until = self._disabled_until.get(provider)
            if until is None:
                return None
            if until <= time.time():
                del self._disabled_until[provider]
                return None
            return until

    def is_disabled(self, provider: str) -> bool:
        return self.get_disabled_until(provider) is not None

    def snapshot(self) -> dict[str, float]:
        with self._lock:
            now = time.time()
            return {name: until for name, until in self._disabled_until.items() if until > now}
