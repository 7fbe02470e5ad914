"""Shared tool-layer helpers."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from intelli_investor.portfolio.errors import PortfolioError
from intelli_investor.providers.http import ProviderError
from intelli_investor.runtime.response import error_from_exception, success_response

LOGGER = logging.getLogger(__name__)
TOOL_ERRORS = (PortfolioError, ProviderError, ValueError)


def run_tool(tool: str, call: Callable[[], Any]) -> str:
    try:
        return success_response(call())
    except TOOL_ERRORS as error:
        LOGGER.info("tool rejected: tool=%s error=%s", tool, error)
        return error_from_exception(error)


async def run_tool_async(tool: str, call: Callable[[], Awaitable[Any]]) -> str:
    try:
        return success_response(await call())
    except TOOL_ERRORS as error:
        LOGGER.info("tool rejected: tool=%s error=%s", tool, error)
        return error_from_exception(error)
