"""Regulation and compliance MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from intelli_investor.tools.common import run_tool

if TYPE_CHECKING:
    from intelli_investor.tools.registry import ToolServices


def register_regulation_tools(mcp: FastMCP, services: ToolServices) -> None:
    advisor = services.advisor

    @mcp.tool(description="Search financial regulations relevant to retail investors.")
    def search_regulations(query: str) -> str:
        return run_tool("search_regulations", lambda: advisor.regulation_search(query))

    @mcp.tool(description="Explain the important SEC filings for a ticker and how to access them.")
    def sec_filings_info(symbol: str) -> str:
        return run_tool("sec_filings_info", lambda: advisor.sec_filings(symbol))

    @mcp.tool(description="Check a portfolio for compliance issues and regulatory concerns.")
    def compliance_check(owner_id: str, portfolio_id: str) -> str:
        return run_tool("compliance_check", lambda: advisor.compliance_check(owner_id, portfolio_id))

    @mcp.tool(description="Insider trading rules and data sources for a ticker.")
    def insider_trading_info(symbol: str) -> str:
        return run_tool("insider_trading_info", lambda: advisor.insider_trading(symbol))

    @mcp.tool(description="Investment restrictions and reporting requirements for a country.")
    def country_restrictions(country: str) -> str:
        return run_tool("country_restrictions", lambda: advisor.country_restrictions(country))
