"""Delta-equivalent variance of vanilla option portfolios."""
from .portfolio import OptionKind, OptionPosition, InvalidOptionParameters, MarketAssumptions
from .risk import PortfolioRiskEngine, VarianceInfo

__version__ = '0.1.0'

__all__ = [
    'OptionKind',
    'OptionPosition',
    'InvalidOptionParameters',
    'MarketAssumptions',
    'PortfolioRiskEngine',
    'VarianceInfo'
]
