"""
Market parameters shared by every position in a portfolio.
"""
import logging
from dataclasses import dataclass
from typing import Dict

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_UNDERLYING_PRICE = 5000.0
DEFAULT_UNDERLYING_VOLATILITY = 0.20
DEFAULT_RISK_FREE_RATE = 0.05


class InvalidMarketAssumptions(ValueError):
    """Raised when the underlying price or volatility is unusable."""


@dataclass(frozen=True)
class MarketAssumptions:
    """
    Underlying price, volatility and rate, fixed for the life of an engine.
    """
    underlying_price: float = DEFAULT_UNDERLYING_PRICE
    underlying_volatility: float = DEFAULT_UNDERLYING_VOLATILITY  # Annualized
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE  # Annualized, may be negative

    def __post_init__(self):
        if not (np.isfinite(self.underlying_price) and self.underlying_price > 0):
            raise InvalidMarketAssumptions(
                f"Underlying price must be positive, got {self.underlying_price}")
        if not (np.isfinite(self.underlying_volatility) and self.underlying_volatility > 0):
            raise InvalidMarketAssumptions(
                f"Underlying volatility must be positive, got {self.underlying_volatility}")
        if not np.isfinite(self.risk_free_rate):
            raise InvalidMarketAssumptions(
                f"Risk-free rate must be finite, got {self.risk_free_rate}")

    @classmethod
    def from_config(cls, config: Dict) -> 'MarketAssumptions':
        """
        Build assumptions from the 'market' section of a config dictionary.

        Args:
            config: Configuration dictionary (see config/config.yaml)

        Returns:
            MarketAssumptions
        """
        market = config.get('market') or {}

        assumptions = cls(
            underlying_price=float(market.get('underlying_price', DEFAULT_UNDERLYING_PRICE)),
            underlying_volatility=float(market.get('underlying_volatility', DEFAULT_UNDERLYING_VOLATILITY)),
            risk_free_rate=float(market.get('risk_free_rate', DEFAULT_RISK_FREE_RATE))
        )
        logger.debug(f"Market assumptions: {assumptions}")
        return assumptions

    @property
    def variance(self) -> float:
        """Squared underlying volatility."""
        return self.underlying_volatility ** 2
