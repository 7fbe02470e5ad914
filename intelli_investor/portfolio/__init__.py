"""Portfolio valuation and tax-lot domain package."""

from intelli_investor.portfolio.models import InvestmentLot, Portfolio
from intelli_investor.portfolio.portfolio_service import PortfolioService

__all__ = ["InvestmentLot", "Portfolio", "PortfolioService"]
