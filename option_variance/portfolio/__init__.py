"""Option position records and market assumptions."""
from .option_position import OptionKind, OptionPosition, InvalidOptionParameters, validate_option
from .market_assumptions import MarketAssumptions, InvalidMarketAssumptions

__all__ = [
    'OptionKind',
    'OptionPosition',
    'InvalidOptionParameters',
    'validate_option',
    'MarketAssumptions',
    'InvalidMarketAssumptions'
]
