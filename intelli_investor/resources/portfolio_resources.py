"""Portfolio resource definitions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from intelli_investor.portfolio.errors import NotFoundError
from intelli_investor.portfolio.portfolio_service import holdings_snapshot
from intelli_investor.portfolio.valuation import portfolio_summary

if TYPE_CHECKING:
    from intelli_investor.tools.registry import ToolServices

PORTFOLIO_SUMMARY_TEMPLATE_URI = "portfolio://{owner_id}/{portfolio_id}/summary"
PORTFOLIO_HOLDINGS_TEMPLATE_URI = "portfolio://{owner_id}/{portfolio_id}/holdings"


def register_portfolio_resources(mcp: FastMCP, services: "ToolServices") -> None:
    def _load(owner_id: str, portfolio_id: str):
        try:
            return services.portfolio.get_portfolio(owner_id, portfolio_id)
        except NotFoundError as error:
            raise ValueError(f"Portfolio resource not found: {error.identifier}") from error

    @mcp.resource(
        PORTFOLIO_SUMMARY_TEMPLATE_URI,
        name="portfolio-summary",
        title="Portfolio Valuation Summary",
        description="Stored totals, unrealized gain and per-lot valuation for one portfolio.",
        mime_type="application/json",
    )
    def portfolio_summary_resource(owner_id: str, portfolio_id: str) -> str:
        return json.dumps(portfolio_summary(_load(owner_id, portfolio_id)), ensure_ascii=True)

    @mcp.resource(
        PORTFOLIO_HOLDINGS_TEMPLATE_URI,
        name="portfolio-holdings",
        title="Portfolio Holdings Snapshot",
        description="Per-lot symbol, name, shares, value and sector for one portfolio.",
        mime_type="application/json",
    )
    def portfolio_holdings_resource(owner_id: str, portfolio_id: str) -> str:
        return json.dumps(holdings_snapshot(_load(owner_id, portfolio_id)), ensure_ascii=True)
