"""Advisory requests built from deterministic portfolio snapshots."""

from __future__ import annotations

import logging
from typing import Any

from intelli_investor.portfolio.portfolio_service import PortfolioService, holdings_snapshot
from intelli_investor.portfolio.validation import parse_risk_tolerance, parse_tax_year, require_text
from intelli_investor.prompts import advisor_prompts as prompts
from intelli_investor.providers.anthropic_client import AnthropicClient
from intelli_investor.providers.http import ProviderError
from intelli_investor.services.base import validate_symbol

LOGGER = logging.getLogger(__name__)
CHAT_ROLES = {"user", "assistant"}


class AdvisorService:
    def __init__(self, portfolios: PortfolioService, oracle: AnthropicClient | None = None) -> None:
        self.portfolios = portfolios
        self.oracle = oracle

    def _oracle(self) -> AnthropicClient:
        if self.oracle is None:
            raise ProviderError("anthropic", "AUTH", "Advisory model is not configured. Set CLAUDE_API_KEY.")
        return self.oracle

    def investment_advice(self, message: str) -> dict[str, Any]:
        text = require_text("message", message, "Message")
        return {"advice": self._oracle().complete(prompts.INVESTMENT_ADVISOR, text)}

    def chat(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        if not isinstance(messages, list) or not messages:
            require_text("messages", None, "Messages array")
        cleaned = []
        for item in messages:
            role = str(item.get("role") or "").strip().lower() if isinstance(item, dict) else ""
            content = str(item.get("content") or "").strip() if isinstance(item, dict) else ""
            if role in CHAT_ROLES and content:
                cleaned.append({"role": role, "content": content})
        if not cleaned:
            require_text("messages", None, "At least one user or assistant message")
        return {"message": self._oracle().chat(prompts.INVESTMENT_ADVISOR, cleaned)}

    def market_insights(self) -> dict[str, Any]:
        prompt = (
            "Please provide current market insights for retail investors. Focus on major indices, sectors "
            "showing strength or weakness, significant economic factors, and upcoming events or data releases."
        )
        return {"insights": self._oracle().complete(prompts.MARKET_ANALYST, prompt)}

    def stock_picks(self, criteria: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(criteria, dict) or not criteria:
            require_text("criteria", None, "Criteria object")
        require_text("risk_tolerance", criteria.get("risk_tolerance"), "Risk tolerance")
        require_text("investment_goals", criteria.get("investment_goals"), "Investment goals")
        prompt = (
            f"Please suggest stock picks based on the following criteria: {prompts.to_json(criteria)}. "
            "For each suggestion include the ticker symbol, company name, sector, and why it fits."
        )
        return {"stock_picks": self._oracle().complete_json(prompts.STOCK_PICKER, prompt)}

    def optimize_portfolio(self, owner_id: str, portfolio_id: str, risk_tolerance: str) -> dict[str, Any]:
        tolerance = parse_risk_tolerance(risk_tolerance)
        holdings = holdings_snapshot(self.portfolios.get_portfolio(owner_id, portfolio_id))
        optimization = self._oracle().complete(
            prompts.optimization_system_prompt(tolerance),
            prompts.build_optimization_prompt(holdings, tolerance),
        )
        return {"risk_tolerance": tolerance, "holdings": holdings, "optimization": optimization}

    def tax_optimization(self, owner_id: str, portfolio_id: str) -> dict[str, Any]:
        holdings = holdings_snapshot(self.portfolios.get_portfolio(owner_id, portfolio_id))
        prompt = f"Please suggest tax optimization strategies for this portfolio: {prompts.to_json(holdings)}"
        return {"holdings": holdings, "advice": self._oracle().complete(prompts.TAX_OPTIMIZER, prompt)}

    def tax_loss_harvesting(self, owner_id: str, portfolio_id: str) -> dict[str, Any]:
        opportunities = [item.to_dict() for item in self.portfolios.harvest_candidates(owner_id, portfolio_id)]
        if not opportunities:
            return {"message": "No tax loss harvesting opportunities identified", "opportunities": []}
        payload: dict[str, Any] = {"opportunities": opportunities, "recommendations": None}
        try:
            payload["recommendations"] = self._oracle().complete_json(
                prompts.LOSS_HARVESTER,
                prompts.build_harvesting_prompt(opportunities),
            )
        except ProviderError as error:
            LOGGER.warning(
                "harvest recommendations unavailable: portfolio=%s code=%s message=%s",
                portfolio_id,
                error.code,
                error.message,
            )
            payload["warning"] = "Recommendations are unavailable; opportunities are listed without commentary."
        return payload

    def tax_rate_info(self, country: str | None = None, year: Any = None) -> dict[str, Any]:
        target_country = (country or "").strip() or "United States"
        target_year = parse_tax_year(year) if year not in (None, "") else None
        year_label = target_year if target_year is not None else "the current tax year"
        prompt = (
            f"What are the investment tax rates for {target_country} in {year_label}? Include short-term and "
            "long-term capital gains, qualified and ordinary dividends, and special investment taxes, organized "
            "by income bracket with specific percentages."
        )
        return {
            "country": target_country,
            "year": target_year,
            "tax_rate_info": self._oracle().complete_json(prompts.TAX_EXPERT, prompt),
        }

    def estimate_tax_liability(
        self,
        owner_id: str,
        portfolio_id: str,
        year: Any,
        country: str,
        income_level: str,
        filing_status: str | None = None,
    ) -> dict[str, Any]:
        tax_year = parse_tax_year(year)
        target_country = require_text("country", country, "Country")
        income = require_text("income_level", income_level, "Income level")
        status = (filing_status or "").strip() or "Single"
        lots = [item.to_dict() for item in self.portfolios.classified_investments(owner_id, portfolio_id)]
        liability = self._oracle().complete_json(
            prompts.TAX_EXPERT,
            prompts.build_tax_liability_prompt(lots, target_country, tax_year, income, status),
        )
        return {
            "year": tax_year,
            "country": target_country,
            "income_level": income,
            "filing_status": status,
            "investments": lots,
            "tax_liability": liability,
        }

    def tax_planning_advice(
        self,
        owner_id: str,
        portfolio_id: str,
        country: str | None = None,
        income_level: str | None = None,
    ) -> dict[str, Any]:
        portfolio = self.portfolios.get_portfolio(owner_id, portfolio_id)
        target_country = (country or "").strip() or "United States"
        income = (income_level or "").strip() or "moderate"
        lots = [lot.to_dict() for lot in portfolio.investments]
        prompt = (
            f"Please provide personalized tax planning advice for an investor in {target_country} with an "
            f"income level of {income} and the following portfolio:\n\n{prompts.to_json(lots)}"
        )
        return {
            "portfolio_id": portfolio.id,
            "country": target_country,
            "income_level": income,
            "advice": self._oracle().complete(prompts.TAX_PLANNER, prompt),
        }

    def regulation_search(self, query: str) -> dict[str, Any]:
        topic = require_text("query", query, "Search query")
        prompt = (
            f"I need information about financial regulations related to: {topic}. Include relevant laws, "
            "regulatory bodies, compliance requirements, and practical implications for retail investors."
        )
        return {"query": topic, "results": self._oracle().complete(prompts.REGULATION_EXPERT, prompt)}

    def sec_filings(self, symbol: str) -> dict[str, Any]:
        ticker = validate_symbol(require_text("symbol", symbol, "Stock symbol"))
        prompt = (
            f"I need information about SEC filings for the company with ticker symbol {ticker}. What are the "
            "important filings, what can I learn from each, and how do I access them?"
        )
        return {"symbol": ticker, "filing_info": self._oracle().complete_json(prompts.SEC_FILINGS_EXPERT, prompt)}

    def compliance_check(self, owner_id: str, portfolio_id: str) -> dict[str, Any]:
        holdings = holdings_snapshot(self.portfolios.get_portfolio(owner_id, portfolio_id))
        prompt = (
            "Please analyze this portfolio for compliance issues or regulatory concerns a retail investor "
            f"should be aware of: {prompts.to_json(holdings)}"
        )
        return {
            "portfolio_id": portfolio_id,
            "compliance_analysis": self._oracle().complete(prompts.COMPLIANCE_ANALYST, prompt),
        }

    def insider_trading(self, symbol: str) -> dict[str, Any]:
        ticker = validate_symbol(require_text("symbol", symbol, "Stock symbol"))
        prompt = (
            f"I need information about insider trading regulations and where to find insider trading data for "
            f"{ticker}. How do I track and interpret insider trading activity for this company?"
        )
        return {"symbol": ticker, "insider_trading_info": self._oracle().complete(prompts.INSIDER_TRADING_EXPERT, prompt)}

    def country_restrictions(self, country: str) -> dict[str, Any]:
        target = require_text("country", country, "Country")
        prompt = (
            f"What are the specific investment regulations, restrictions, and compliance requirements for retail "
            f"investors in {target}? Include unique rules, tax implications, reporting requirements, and limits."
        )
        return {"country": target, "restrictions": self._oracle().complete(prompts.INTERNATIONAL_REGULATION_EXPERT, prompt)}
