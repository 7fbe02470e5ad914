"""Tax-lot and tax-advisory MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from intelli_investor.tools.common import run_tool

if TYPE_CHECKING:
    from intelli_investor.tools.registry import ToolServices


def register_tax_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Unrealized short-term and long-term gains for lots bought on or before the tax year.")
    def calculate_capital_gains(owner_id: str, portfolio_id: str, year: int) -> str:
        return run_tool(
            "calculate_capital_gains",
            lambda: services.portfolio.calculate_gains(owner_id, portfolio_id, year),
        )

    @mcp.tool(description="List lots trading below cost basis, largest loss first, with advisory recommendations.")
    def tax_loss_harvesting(owner_id: str, portfolio_id: str) -> str:
        return run_tool(
            "tax_loss_harvesting",
            lambda: services.advisor.tax_loss_harvesting(owner_id, portfolio_id),
        )

    @mcp.tool(description="Suggest tax optimization strategies for a portfolio's holdings.")
    def tax_optimization(owner_id: str, portfolio_id: str) -> str:
        return run_tool("tax_optimization", lambda: services.advisor.tax_optimization(owner_id, portfolio_id))

    @mcp.tool(description="Investment tax rates for a country and year. Defaults to the United States.")
    def tax_rate_info(country: str | None = None, year: int | None = None) -> str:
        return run_tool("tax_rate_info", lambda: services.advisor.tax_rate_info(country, year))

    @mcp.tool(description="Estimate tax liability from every lot classified by holding period.")
    def estimate_tax_liability(
        owner_id: str,
        portfolio_id: str,
        year: int,
        country: str,
        income_level: str,
        filing_status: str = "Single",
    ) -> str:
        return run_tool(
            "estimate_tax_liability",
            lambda: services.advisor.estimate_tax_liability(
                owner_id, portfolio_id, year, country, income_level, filing_status
            ),
        )

    @mcp.tool(description="Personalized tax planning advice for a portfolio.")
    def tax_planning_advice(
        owner_id: str,
        portfolio_id: str,
        country: str | None = None,
        income_level: str | None = None,
    ) -> str:
        return run_tool(
            "tax_planning_advice",
            lambda: services.advisor.tax_planning_advice(owner_id, portfolio_id, country, income_level),
        )
