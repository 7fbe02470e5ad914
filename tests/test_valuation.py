from intelli_investor.portfolio.models import InvestmentLot, Portfolio
from intelli_investor.portfolio.valuation import apply_totals, calculate_totals, portfolio_summary


def _lots() -> list[InvestmentLot]:
    return [
        InvestmentLot(symbol="AAA", shares=100, purchase_price=10.0, current_price=15.0),
        InvestmentLot(symbol="BBB", shares=50, purchase_price=20.0, current_price=12.0),
    ]


def test_calculate_totals_matches_lot_scenario() -> None:
    totals = calculate_totals(_lots())
    assert totals.total_cost == 2000.0
    assert totals.total_value == 2100.0
    assert totals.unrealized_gain == 100.0


def test_calculate_totals_empty_is_zero() -> None:
    totals = calculate_totals([])
    assert totals.total_cost == 0.0
    assert totals.total_value == 0.0


def test_effective_price_falls_back_to_purchase_price() -> None:
    missing = InvestmentLot(symbol="AAA", shares=2, purchase_price=10.0, current_price=None)
    zero = InvestmentLot(symbol="BBB", shares=3, purchase_price=5.0, current_price=0.0)
    negative = InvestmentLot(symbol="CCC", shares=1, purchase_price=7.0, current_price=-1.0)
    assert missing.effective_price == 10.0
    assert zero.effective_price == 5.0
    assert negative.effective_price == 7.0
    totals = calculate_totals([missing, zero, negative])
    assert totals.total_value == totals.total_cost == 42.0


def test_apply_totals_is_idempotent_and_order_independent() -> None:
    portfolio = Portfolio(owner_id="owner-1", name="Core", investments=_lots())
    apply_totals(portfolio)
    first = (portfolio.total_cost, portfolio.total_value)
    apply_totals(portfolio)
    assert (portfolio.total_cost, portfolio.total_value) == first

    portfolio.investments.reverse()
    apply_totals(portfolio)
    assert (portfolio.total_cost, portfolio.total_value) == first


def test_portfolio_summary_reports_return_percent() -> None:
    summary = portfolio_summary(Portfolio(owner_id="owner-1", name="Core", investments=_lots()))
    assert summary["total_return_percent"] == 5.0
    assert [row["unrealized_gain"] for row in summary["positions"]] == [500.0, -400.0]


def test_portfolio_summary_without_cost_has_zero_return() -> None:
    summary = portfolio_summary(Portfolio(owner_id="owner-1", name="Empty"))
    assert summary["total_return_percent"] == 0.0
    assert summary["positions"] == []
