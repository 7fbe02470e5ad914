"""Advisory system prompts and MCP prompt definitions."""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp import FastMCP

INVESTMENT_ADVISOR = (
    "You are an expert financial advisor specializing in investment advice for retail investors. "
    "Provide professional, responsible, and actionable investment advice. Always include disclaimers "
    "about investment risks when appropriate. Base your advice on sound financial principles and avoid "
    "suggesting highly speculative or risky investments unless specifically asked."
)
MARKET_ANALYST = (
    "You are an expert financial analyst specializing in market analysis and insights. Provide a concise "
    "but comprehensive overview of current market conditions, key trends, and potential opportunities or "
    "risks for retail investors."
)
STOCK_PICKER = (
    "You are an expert financial advisor specializing in stock selection for retail investors. Provide "
    "thoughtful stock suggestions based on the user's criteria, with reasoning and risk considerations "
    "for each pick. Return a JSON object with a 'picks' array."
)
TAX_OPTIMIZER = (
    "You are a tax optimization expert for retail investors. Review the holdings and suggest tax-efficient "
    "strategies such as asset location, holding-period management and loss harvesting."
)
LOSS_HARVESTER = (
    "You are a tax optimization expert specializing in tax loss harvesting for retail investors. Provide "
    "actionable recommendations based on the positions provided. Focus on specific securities that could be "
    "sold to realize losses and suggest alternatives that maintain similar market exposure while avoiding "
    "wash sale rules."
)
TAX_EXPERT = (
    "You are a tax expert specializing in investment taxation. Provide detailed, structured information "
    "about capital gains, dividend and other investment taxes that retail investors can apply."
)
TAX_PLANNER = (
    "You are a tax planning expert specializing in investment tax optimization. Provide comprehensive, "
    "personalized tax planning advice covering tax-efficient strategies and tax-advantaged accounts."
)
REGULATION_EXPERT = (
    "You are an expert in financial regulations and compliance for retail investors. Provide accurate "
    "information about relevant laws, regulatory bodies, compliance requirements, and their practical "
    "implications."
)
SEC_FILINGS_EXPERT = (
    "You are a financial expert specializing in SEC filings and corporate disclosures. Explain the important "
    "filings for a company, what each reveals, and how to access them."
)
COMPLIANCE_ANALYST = (
    "You are a financial compliance expert for retail investors. Analyze the portfolio for potential "
    "compliance issues, conflicts, regulatory concerns, or risk exposures."
)
INSIDER_TRADING_EXPERT = (
    "You are a financial expert specializing in insider trading regulations and filings. Explain insider "
    "trading rules, Form 4 filings, and how retail investors can interpret insider activity."
)
INTERNATIONAL_REGULATION_EXPERT = (
    "You are a global financial regulations expert specializing in international investment law. Describe "
    "investment restrictions, tax implications, and reporting requirements for retail investors."
)


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


def optimization_system_prompt(risk_tolerance: str) -> str:
    return (
        "You are an expert portfolio manager specializing in portfolio optimization. "
        f"The user has a risk tolerance of {risk_tolerance}. Provide actionable advice covering rebalancing, "
        "diversification, and adjustments suited to that risk profile."
    )


def build_optimization_prompt(holdings: list[dict[str, Any]], risk_tolerance: str) -> str:
    return (
        f"Here is my current portfolio: {to_json(holdings)}. "
        f"Please provide optimization recommendations based on my {risk_tolerance} risk tolerance."
    )


def build_harvesting_prompt(candidates: list[dict[str, Any]]) -> str:
    return (
        "Please analyze these investment positions with unrealized losses and provide tax loss harvesting "
        f"recommendations: {to_json(candidates)}"
    )


def build_tax_liability_prompt(
    lots: list[dict[str, Any]],
    country: str,
    year: int,
    income_level: str,
    filing_status: str,
) -> str:
    return (
        f"Please estimate the tax liability for this portfolio in {country} for the tax year {year} "
        f"with an income level of {income_level} and filing status of {filing_status}:\n\n{to_json(lots)}"
    )


def _build_harvest_review_prompt(portfolio: str) -> str:
    portfolio_name = portfolio.strip()
    if not portfolio_name:
        raise ValueError("Missing required argument: portfolio.")
    return (
        "You are a tax-aware portfolio reviewer.\n"
        f"Review the portfolio named '{portfolio_name}' and provide:\n"
        "1) Lots trading below cost basis, largest loss first\n"
        "2) Short-term versus long-term exposure of those lots\n"
        "3) Replacement ideas that keep market exposure without wash-sale risk\n"
        "4) A prioritized harvesting plan for the current tax year."
    )


def register_advisor_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(
        name="tax_loss_harvest_review",
        title="Tax-Loss Harvest Review",
        description="Generate a structured tax-loss harvesting review prompt for a named portfolio.",
    )
    def tax_loss_harvest_review(portfolio: str) -> str:
        return _build_harvest_review_prompt(portfolio)
