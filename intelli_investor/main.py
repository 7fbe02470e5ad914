"""Application entrypoint for the Intelli Investor MCP server."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP
from starlette.responses import JSONResponse, Response

from intelli_investor.cache.ttl_cache import TTLCache
from intelli_investor.config.settings import get_settings
from intelli_investor.portfolio.repository import PortfolioRepository
from intelli_investor.prompts.advisor_prompts import register_advisor_prompts
from intelli_investor.providers.anthropic_client import AnthropicClient
from intelli_investor.providers.yahoo_finance import YahooFinanceClient
from intelli_investor.providers.yfinance_client import YFinanceClient
from intelli_investor.resources.portfolio_resources import register_portfolio_resources
from intelli_investor.services.base import ServiceContext
from intelli_investor.tools.registry import build_tool_services, register_all_tools
from intelli_investor.utils.rate_limit import RateLimiterRegistry

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if os.getenv("RENDER") and configured_mode == "stdio":
        return "http"
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("RENDER") or os.getenv("PORT"):
        return "http"
    return "stdio"


def resolve_http_transport(configured_transport: str) -> str:
    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


async def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    yahoo_client = YahooFinanceClient(settings.request_timeout_seconds) if settings.yahoo_finance_enabled else None
    yfinance_client = YFinanceClient() if settings.yfinance_enabled else None
    anthropic_client = (
        AnthropicClient(
            settings.claude_api_key,
            settings.claude_model,
            max(settings.request_timeout_seconds, 30.0),
            settings.advisor_max_tokens,
        )
        if settings.claude_api_key and settings.advisor_enabled
        else None
    )
    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    service_ctx = ServiceContext(
        providers={
            "yahoo": yahoo_client,
            "yfinance": yfinance_client,
            "anthropic": anthropic_client,
        },
        cache=TTLCache(default_ttl_seconds=settings.cache_ttl_seconds),
        rate_limiter=RateLimiterRegistry(min_interval_seconds=settings.provider_min_interval_seconds),
        cache_ttl_seconds=settings.cache_ttl_seconds,
        quote_ttl_seconds=settings.cache_ttl_quote_seconds,
    )
    repository = PortfolioRepository.from_url(settings.database_url)
    services = build_tool_services(service_ctx, repository)
    register_all_tools(mcp, services)
    register_advisor_prompts(mcp)
    register_portfolio_resources(mcp, services)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: object) -> Response:
        tools = await mcp.list_tools()
        templates = await mcp.list_resource_templates()
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "mode": resolved_mode,
                "tool_count": len(tools),
                "resource_template_count": len(templates),
                "advisor_configured": anthropic_client is not None,
                "provider_status": services.quotes.provider_status.snapshot(),
            }
        )

    if not any([yahoo_client, yfinance_client]):
        LOGGER.warning("no quote providers enabled: prices fall back to purchase price")
    if anthropic_client is None:
        LOGGER.warning("advisor disabled: set CLAUDE_API_KEY to enable advisory tools")
    LOGGER.info("starting server: mode=%s http_transport=%s", resolved_mode, resolved_http_transport)
    if resolved_mode == "stdio":
        await mcp.run_stdio_async()
    elif resolved_http_transport == "streamable":
        await mcp.run_streamable_http_async()
    else:
        await mcp.run_sse_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
