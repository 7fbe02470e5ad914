"""Tool service wiring and registration."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from intelli_investor.portfolio.portfolio_service import PortfolioService
from intelli_investor.portfolio.repository import PortfolioRepository
from intelli_investor.providers.anthropic_client import AnthropicClient
from intelli_investor.services.advisor_service import AdvisorService
from intelli_investor.services.base import ServiceContext
from intelli_investor.services.quote_service import QuoteService
from intelli_investor.tools.advisor_tools import register_advisor_tools
from intelli_investor.tools.portfolio_tools import register_portfolio_tools
from intelli_investor.tools.regulation_tools import register_regulation_tools
from intelli_investor.tools.tax_tools import register_tax_tools


@dataclass
class ToolServices:
    quotes: QuoteService
    portfolio: PortfolioService
    advisor: AdvisorService


def build_tool_services(ctx: ServiceContext, repository: PortfolioRepository) -> ToolServices:
    quotes = QuoteService(ctx)
    portfolio = PortfolioService(repository, quotes)
    oracle = ctx.get_provider("anthropic")
    advisor = AdvisorService(portfolio, oracle if isinstance(oracle, AnthropicClient) else None)
    return ToolServices(quotes=quotes, portfolio=portfolio, advisor=advisor)


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_portfolio_tools(mcp, services)
    register_tax_tools(mcp, services)
    register_advisor_tools(mcp, services)
    register_regulation_tools(mcp, services)
