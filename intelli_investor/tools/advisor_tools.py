"""Investment advisory MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from intelli_investor.tools.common import run_tool

if TYPE_CHECKING:
    from intelli_investor.tools.registry import ToolServices


def register_advisor_tools(mcp: FastMCP, services: ToolServices) -> None:
    advisor = services.advisor

    @mcp.tool(description="Ask the investment advisor a free-form question.")
    def investment_advice(message: str) -> str:
        return run_tool("investment_advice", lambda: advisor.investment_advice(message))

    @mcp.tool(description="Continue a conversation with the advisor. Messages carry role (user/assistant) and content.")
    def advisor_chat(messages: list[dict[str, str]]) -> str:
        return run_tool("advisor_chat", lambda: advisor.chat(messages))

    @mcp.tool(description="Portfolio optimization advice for a risk tolerance of low, moderate or high.")
    def optimize_portfolio(owner_id: str, portfolio_id: str, risk_tolerance: str) -> str:
        return run_tool(
            "optimize_portfolio",
            lambda: advisor.optimize_portfolio(owner_id, portfolio_id, risk_tolerance),
        )

    @mcp.tool(description="Current market insights for retail investors.")
    def market_insights() -> str:
        return run_tool("market_insights", advisor.market_insights)

    @mcp.tool(description="Stock suggestions for criteria including risk_tolerance and investment_goals.")
    def stock_picks(criteria: dict[str, Any]) -> str:
        return run_tool("stock_picks", lambda: advisor.stock_picks(criteria))
