"""Response shaping helpers for MCP tools."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, is_dataclass
from typing import Any

from intelli_investor.portfolio.errors import PortfolioError, PortfolioValidationError
from intelli_investor.providers.http import ProviderError

DISCLAIMER = "Data is for informational purposes only and does not constitute financial advice."


def _convert_data(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, list):
        return [_convert_data(item) for item in data]
    if isinstance(data, dict):
        return {key: _convert_data(value) for key, value in data.items()}
    return data


def success_response(data: Any, source: str | None = None, warning: str | None = None) -> str:
    payload: dict[str, Any] = {
        "data": _convert_data(data),
        "timestamp": int(time.time()),
        "disclaimer": DISCLAIMER,
    }
    if source:
        payload["source"] = source
    if warning:
        payload["warning"] = warning
    return json.dumps(payload, ensure_ascii=True, default=str)


def error_response(code: str, message: str, issues: list[dict[str, Any]] | None = None) -> str:
    payload: dict[str, Any] = {
        "error": True,
        "code": code,
        "message": message,
        "timestamp": int(time.time()),
    }
    if issues:
        payload["issues"] = issues
    return json.dumps(payload, ensure_ascii=True, default=str)


def error_from_exception(error: Exception) -> str:
    if isinstance(error, PortfolioValidationError):
        return error_response(error.code, str(error), [issue.to_dict() for issue in error.issues])
    if isinstance(error, PortfolioError):
        return error_response(error.code, str(error))
    if isinstance(error, ProviderError):
        return error_response(error.code, error.message)
    return error_response("INVALID_INPUT", str(error))
