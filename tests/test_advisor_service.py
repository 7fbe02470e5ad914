import asyncio

import pytest

from intelli_investor.portfolio.errors import PortfolioValidationError, QuoteUnavailable
from intelli_investor.portfolio.portfolio_service import PortfolioService
from intelli_investor.portfolio.repository import PortfolioRepository
from intelli_investor.providers.http import ProviderError
from intelli_investor.services.advisor_service import AdvisorService


class _StubQuotes:
    def __init__(self, prices: dict[str, float]) -> None:
        self.prices = prices

    def get_price(self, symbol: str) -> float:
        if symbol not in self.prices:
            raise QuoteUnavailable(symbol)
        return self.prices[symbol]


class _StubOracle:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str, object]] = []

    def _record(self, kind: str, system: str, payload: object) -> None:
        self.calls.append((kind, system, payload))
        if self.fail:
            raise ProviderError("anthropic", "RATE_LIMIT", "Anthropic rate limit reached.", 429)

    def complete(self, system: str, prompt: str) -> str:
        self._record("text", system, prompt)
        return "advice text"

    def complete_json(self, system: str, prompt: str) -> dict[str, object]:
        self._record("json", system, prompt)
        return {"recommendations": ["sell BBB"]}

    def chat(self, system: str, messages: list[dict[str, str]]) -> str:
        self._record("chat", system, messages)
        return "chat reply"


def _setup(tmp_path, oracle: _StubOracle | None) -> tuple[AdvisorService, str]:
    repository = PortfolioRepository.from_url(f"sqlite:///{tmp_path / 'advisor.db'}")
    portfolios = PortfolioService(repository, _StubQuotes({"AAA": 15.0, "BBB": 12.0}))
    portfolio = portfolios.create_portfolio("owner-1", "Core")
    asyncio.run(portfolios.add_investment("owner-1", portfolio.id, "AAA", 100, 10.0, "2020-01-02", sector="Tech"))
    asyncio.run(portfolios.add_investment("owner-1", portfolio.id, "BBB", 50, 20.0, "2024-01-02"))
    return AdvisorService(portfolios, oracle), portfolio.id


def test_tax_loss_harvesting_sends_candidates_to_oracle(tmp_path) -> None:
    oracle = _StubOracle()
    advisor, portfolio_id = _setup(tmp_path, oracle)

    payload = advisor.tax_loss_harvesting("owner-1", portfolio_id)

    assert [item["symbol"] for item in payload["opportunities"]] == ["BBB"]
    assert payload["opportunities"][0]["total_loss"] == 400.0
    assert payload["recommendations"] == {"recommendations": ["sell BBB"]}
    kind, _, prompt = oracle.calls[0]
    assert kind == "json"
    assert '"symbol": "BBB"' in prompt
    assert "AAA" not in prompt


def test_tax_loss_harvesting_without_losses_skips_oracle(tmp_path) -> None:
    oracle = _StubOracle()
    repository = PortfolioRepository.from_url(f"sqlite:///{tmp_path / 'gains.db'}")
    portfolios = PortfolioService(repository, _StubQuotes({"AAA": 15.0}))
    portfolio = portfolios.create_portfolio("owner-1", "Winners")
    asyncio.run(portfolios.add_investment("owner-1", portfolio.id, "AAA", 1, 10.0))

    payload = AdvisorService(portfolios, oracle).tax_loss_harvesting("owner-1", portfolio.id)

    assert payload == {"message": "No tax loss harvesting opportunities identified", "opportunities": []}
    assert oracle.calls == []


def test_tax_loss_harvesting_keeps_opportunities_when_oracle_fails(tmp_path) -> None:
    advisor, portfolio_id = _setup(tmp_path, _StubOracle(fail=True))
    payload = advisor.tax_loss_harvesting("owner-1", portfolio_id)
    assert payload["recommendations"] is None
    assert len(payload["opportunities"]) == 1
    assert "warning" in payload


def test_optimize_portfolio_uses_holdings_snapshot(tmp_path) -> None:
    oracle = _StubOracle()
    advisor, portfolio_id = _setup(tmp_path, oracle)

    payload = advisor.optimize_portfolio("owner-1", portfolio_id, "Moderate")

    assert payload["risk_tolerance"] == "moderate"
    assert payload["holdings"][0] == {"symbol": "AAA", "name": "AAA", "shares": 100.0, "value": 1500.0, "sector": "Tech"}
    assert payload["holdings"][1]["sector"] == "Unknown"
    _, system, prompt = oracle.calls[0]
    assert "risk tolerance of moderate" in system
    assert '"value": 600.0' in prompt


def test_estimate_tax_liability_classifies_every_lot(tmp_path) -> None:
    oracle = _StubOracle()
    advisor, portfolio_id = _setup(tmp_path, oracle)

    payload = advisor.estimate_tax_liability("owner-1", portfolio_id, 2024, "United States", "high", None)

    assert payload["filing_status"] == "Single"
    assert [item["symbol"] for item in payload["investments"]] == ["AAA", "BBB"]
    assert payload["investments"][0]["is_long_term"] is True
    assert "filing status of Single" in oracle.calls[0][2]


def test_tax_rate_info_defaults_country(tmp_path) -> None:
    advisor, _ = _setup(tmp_path, _StubOracle())
    payload = advisor.tax_rate_info()
    assert payload["country"] == "United States"
    assert payload["year"] is None


def test_chat_filters_roles_and_requires_messages(tmp_path) -> None:
    oracle = _StubOracle()
    advisor, _ = _setup(tmp_path, oracle)
    payload = advisor.chat([{"role": "system", "content": "ignore"}, {"role": "user", "content": " hi "}])
    assert payload == {"message": "chat reply"}
    assert oracle.calls[0][2] == [{"role": "user", "content": "hi"}]
    with pytest.raises(PortfolioValidationError):
        advisor.chat([])


def test_stock_picks_requires_criteria_fields(tmp_path) -> None:
    advisor, _ = _setup(tmp_path, _StubOracle())
    with pytest.raises(PortfolioValidationError):
        advisor.stock_picks({"risk_tolerance": "high"})
    payload = advisor.stock_picks({"risk_tolerance": "high", "investment_goals": "growth"})
    assert payload["stock_picks"] == {"recommendations": ["sell BBB"]}


def test_regulation_lookups_validate_inputs(tmp_path) -> None:
    advisor, portfolio_id = _setup(tmp_path, _StubOracle())
    assert advisor.sec_filings("msft")["symbol"] == "MSFT"
    assert advisor.country_restrictions("Canada")["country"] == "Canada"
    assert advisor.compliance_check("owner-1", portfolio_id)["compliance_analysis"] == "advice text"
    with pytest.raises(PortfolioValidationError):
        advisor.regulation_search("   ")


def test_unconfigured_oracle_raises_provider_error(tmp_path) -> None:
    advisor, _ = _setup(tmp_path, None)
    with pytest.raises(ProviderError) as excinfo:
        advisor.investment_advice("Should I rebalance?")
    assert excinfo.value.code == "AUTH"
