"""Portfolio risk engine."""
from .risk_engine import PortfolioRiskEngine, VarianceInfo

__all__ = ['PortfolioRiskEngine', 'VarianceInfo']
