"""Portfolio-domain MCP tools."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from intelli_investor.runtime.response import error_response, success_response
from intelli_investor.services.base import validate_symbol
from intelli_investor.tools.common import run_tool, run_tool_async

if TYPE_CHECKING:
    from intelli_investor.tools.registry import ToolServices


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    portfolios = services.portfolio

    @mcp.tool(description="Create a portfolio for an owner. Setting is_default clears the owner's other default.")
    def create_portfolio(owner_id: str, name: str, description: str | None = None, is_default: bool = False) -> str:
        return run_tool(
            "create_portfolio",
            lambda: portfolios.create_portfolio(owner_id, name, description, is_default),
        )

    @mcp.tool(description="List an owner's portfolios with their lots and stored totals.")
    def list_portfolios(owner_id: str) -> str:
        return run_tool("list_portfolios", lambda: portfolios.list_portfolios(owner_id))

    @mcp.tool(description="Get one portfolio with per-lot market values.")
    def get_portfolio(owner_id: str, portfolio_id: str) -> str:
        return run_tool("get_portfolio", lambda: portfolios.get_portfolio(owner_id, portfolio_id))

    @mcp.tool(description="Rename a portfolio, edit its description, or change its default flag.")
    def update_portfolio(
        owner_id: str,
        portfolio_id: str,
        name: str,
        description: str | None = None,
        is_default: bool | None = None,
    ) -> str:
        return run_tool(
            "update_portfolio",
            lambda: portfolios.update_portfolio(owner_id, portfolio_id, name, description, is_default),
        )

    @mcp.tool(description="Delete a portfolio and all of its lots.")
    def delete_portfolio(owner_id: str, portfolio_id: str) -> str:
        def _delete() -> dict[str, object]:
            portfolios.delete_portfolio(owner_id, portfolio_id)
            return {"deleted": True, "portfolio_id": portfolio_id}

        return run_tool("delete_portfolio", _delete)

    @mcp.tool(description="Add a tax lot. The current price is looked up live and falls back to the purchase price.")
    async def add_investment(
        owner_id: str,
        portfolio_id: str,
        symbol: str,
        shares: float,
        purchase_price: float,
        purchase_date: str | None = None,
        name: str | None = None,
        sector: str | None = None,
        notes: str | None = None,
    ) -> str:
        return await run_tool_async(
            "add_investment",
            lambda: portfolios.add_investment(
                owner_id,
                portfolio_id,
                symbol,
                shares,
                purchase_price,
                purchase_date,
                name=name,
                sector=sector,
                notes=notes,
            ),
        )

    @mcp.tool(description="Edit a tax lot's shares, purchase price, purchase date, sector or notes.")
    async def update_investment(
        owner_id: str,
        portfolio_id: str,
        investment_id: str,
        shares: float | None = None,
        purchase_price: float | None = None,
        purchase_date: str | None = None,
        sector: str | None = None,
        notes: str | None = None,
    ) -> str:
        return await run_tool_async(
            "update_investment",
            lambda: portfolios.update_investment(
                owner_id,
                portfolio_id,
                investment_id,
                shares=shares,
                purchase_price=purchase_price,
                purchase_date=purchase_date,
                sector=sector,
                notes=notes,
            ),
        )

    @mcp.tool(description="Remove a tax lot from a portfolio.")
    def remove_investment(owner_id: str, portfolio_id: str, investment_id: str) -> str:
        return run_tool(
            "remove_investment",
            lambda: portfolios.remove_investment(owner_id, portfolio_id, investment_id),
        )

    @mcp.tool(description="Refresh live prices for every lot. Symbols without a quote keep their prior price.")
    async def refresh_portfolio_prices(owner_id: str, portfolio_id: str) -> str:
        return await run_tool_async(
            "refresh_portfolio_prices",
            lambda: portfolios.refresh_prices(owner_id, portfolio_id),
        )

    @mcp.tool(description="Import lots from a CSV or Excel file with symbol, shares and purchase_price columns.")
    async def import_investments(owner_id: str, portfolio_id: str, file_path: str) -> str:
        return await run_tool_async(
            "import_investments",
            lambda: portfolios.import_investments(owner_id, portfolio_id, file_path),
        )

    @mcp.tool(description="Get the latest traded price for a ticker symbol.")
    def get_stock_quote(symbol: str) -> str:
        try:
            result = services.quotes.get_quote(validate_symbol(symbol))
        except ValueError as error:
            return error_response("INVALID_INPUT", str(error))
        if result.data is None:
            message = result.error.message if result.error else "No quote returned."
            return error_response(result.error.code if result.error else "DATA_UNAVAILABLE", message)
        return success_response(asdict(result.data), result.source, result.warning)
