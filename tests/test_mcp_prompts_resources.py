import asyncio
import json
from types import SimpleNamespace

import pytest
from mcp.server.fastmcp import FastMCP

from intelli_investor.portfolio.errors import NotFoundError
from intelli_investor.portfolio.models import InvestmentLot, Portfolio
from intelli_investor.prompts.advisor_prompts import register_advisor_prompts
from intelli_investor.resources.portfolio_resources import register_portfolio_resources


class _MockPortfolioService:
    def __init__(self) -> None:
        self.portfolio = Portfolio(
            id="p1",
            owner_id="owner-1",
            name="Core",
            investments=[InvestmentLot(symbol="AAA", shares=10, purchase_price=10.0, current_price=12.0)],
        )

    def get_portfolio(self, owner_id: str, portfolio_id: str) -> Portfolio:
        if owner_id != self.portfolio.owner_id or portfolio_id != self.portfolio.id:
            raise NotFoundError("Portfolio", portfolio_id)
        return self.portfolio


def test_harvest_review_prompt_renders_portfolio_name() -> None:
    mcp = FastMCP(name="test-prompts")
    register_advisor_prompts(mcp)

    prompts = asyncio.run(mcp.list_prompts())
    assert any(prompt.name == "tax_loss_harvest_review" for prompt in prompts)

    prompt_result = asyncio.run(mcp.get_prompt("tax_loss_harvest_review", {"portfolio": "US Core"}))
    rendered = str(prompt_result.messages[0].content.text)
    assert "US Core" in rendered
    assert "wash-sale" in rendered


def test_prompt_missing_required_argument() -> None:
    mcp = FastMCP(name="test-prompts-missing-arg")
    register_advisor_prompts(mcp)

    with pytest.raises(ValueError, match="Missing required arguments"):
        asyncio.run(mcp.get_prompt("tax_loss_harvest_review", {}))


def test_portfolio_resources_read_summary_and_holdings() -> None:
    mcp = FastMCP(name="test-resources")
    register_portfolio_resources(mcp, SimpleNamespace(portfolio=_MockPortfolioService()))

    templates = asyncio.run(mcp.list_resource_templates())
    uris = {template.uriTemplate for template in templates}
    assert uris == {"portfolio://{owner_id}/{portfolio_id}/summary", "portfolio://{owner_id}/{portfolio_id}/holdings"}

    contents = asyncio.run(mcp.read_resource("portfolio://owner-1/p1/summary"))
    assert contents[0].mime_type == "application/json"
    summary = json.loads(contents[0].content)
    assert summary["total_cost"] == 100.0
    assert summary["total_value"] == 120.0

    holdings = json.loads(asyncio.run(mcp.read_resource("portfolio://owner-1/p1/holdings"))[0].content)
    assert holdings == [{"symbol": "AAA", "name": "AAA", "shares": 10, "value": 120.0, "sector": "Unknown"}]


def test_portfolio_resource_not_found_for_other_owner() -> None:
    mcp = FastMCP(name="test-resources-not-found")
    register_portfolio_resources(mcp, SimpleNamespace(portfolio=_MockPortfolioService()))

    with pytest.raises(Exception) as exc:
        asyncio.run(mcp.read_resource("portfolio://owner-2/p1/summary"))
    assert "Portfolio resource not found" in str(exc.value)
