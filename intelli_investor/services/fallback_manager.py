"""Ordered provider fallback for quote lookups."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from intelli_investor.providers.http import ProviderError
from intelli_investor.services.base import ErrorEnvelope, ServiceContext, ServiceResult
from intelli_investor.services.provider_status import ProviderStatus

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)
RATE_LIMIT_PATTERNS = (
    "rate limit",
    "too many requests",
    "limit exceeded",
)
DEFAULT_RATE_LIMIT_DISABLE_SECONDS = 60 * 15


@dataclass(frozen=True)
class ProviderAttempt(Generic[T]):
    key: str
    label: str
    call: Callable[[], T | None]


class FallbackManager:
    def __init__(
        self,
        ctx: ServiceContext,
        provider_status: ProviderStatus,
        rate_limit_disable_seconds: dict[str, int] | None = None,
    ) -> None:
        self._ctx = ctx
        self._provider_status = provider_status
        self._rate_limit_disable_seconds = rate_limit_disable_seconds or {}

    def execute(self, operation: str, symbol: str, attempts: list[ProviderAttempt[T]]) -> ServiceResult[T]:
        had_fallback = False
        last_error: ProviderError | None = None
        for attempt in attempts:
            if self._provider_status.is_disabled(attempt.key):
                had_fallback = True
                LOGGER.info(
                    "provider skipped (disabled window): op=%s symbol=%s provider=%s disabled_until=%s",
                    operation,
                    symbol,
                    attempt.key,
                    self._provider_status.get_disabled_until(attempt.key),
                )
                continue

            started = time.perf_counter()
            try:
                self._ctx.rate_limiter.wait(attempt.key)
                value = attempt.call()
            except ProviderError as error:
                had_fallback = True
                last_error = error
                LOGGER.warning(
                    "provider attempt failed: op=%s symbol=%s provider=%s code=%s status=%s latency_ms=%s",
                    operation,
                    symbol,
                    attempt.key,
                    error.code,
                    error.status,
                    _elapsed_ms(started),
                )
                if self.is_rate_limited(error):
                    ttl_seconds = self._rate_limit_disable_seconds.get(attempt.key, DEFAULT_RATE_LIMIT_DISABLE_SECONDS)
                    disabled_until = self._provider_status.disable_provider(attempt.key, ttl_seconds)
                    LOGGER.warning(
                        "provider disabled after rate limit: provider=%s disabled_until=%s",
                        attempt.key,
                        disabled_until,
                    )
                continue
            except Exception:
                had_fallback = True
                LOGGER.exception(
                    "provider attempt unexpected failure: op=%s symbol=%s provider=%s latency_ms=%s",
                    operation,
                    symbol,
                    attempt.key,
                    _elapsed_ms(started),
                )
                continue

            LOGGER.debug(
                "provider attempt complete: op=%s symbol=%s provider=%s success=%s latency_ms=%s",
                operation,
                symbol,
                attempt.key,
                value is not None,
                _elapsed_ms(started),
            )
            if value is not None:
                return ServiceResult(
                    data=value,
                    source=attempt.label,
                    warning="Used fallback provider due to upstream issue." if had_fallback else None,
                    fetched_at=time.time(),
                )
            had_fallback = True

        return ServiceResult(
            data=None,
            error=ErrorEnvelope(
                code=last_error.code if last_error else "NOT_FOUND",
                message=f"No quote provider returned data for {symbol}.",
                retriable=last_error is not None,
                provider=last_error.provider if last_error else None,
            ),
        )

    @staticmethod
    def is_rate_limited(error: ProviderError) -> bool:
        if error.code == "RATE_LIMIT" or error.status == 429:
            return True
        message = (error.message or "").lower()
        return any(pattern in message for pattern in RATE_LIMIT_PATTERNS)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
