"""
Black-Scholes delta calculator.
"""
import logging

import numpy as np

from .normal_cdf import normal_cdf
from ..portfolio.option_position import OptionPosition, validate_option

logger = logging.getLogger(__name__)


class BlackScholesCalculator:
    """Black-Scholes delta for vanilla calls and puts."""

    def __init__(self, risk_free_rate: float = 0.05):
        """
        Initialize Black-Scholes calculator.

        Args:
            risk_free_rate: Annual risk-free rate (default 5%)
        """
        self.risk_free_rate = risk_free_rate

    def calculate_d1(self, spot: float, strike: float, time_to_expiry: float,
                     volatility: float) -> float:
        """
        Calculate the Black-Scholes d1 term.

        Args:
            spot: Current underlying price
            strike: Strike price
            time_to_expiry: Time to expiration in years
            volatility: Annualized volatility (as decimal, e.g., 0.20 for 20%)

        Returns:
            d1
        """
        d1 = (np.log(spot / strike) + (self.risk_free_rate + 0.5 * volatility**2) * time_to_expiry) / (volatility * np.sqrt(time_to_expiry))
        return float(d1)

    def calculate_delta(self, option: OptionPosition, spot: float, volatility: float) -> float:
        """
        Calculate option delta.

        The CDF term is multiplied by the rate discount factor exp(-rT)
        for both calls and puts.

        Args:
            option: Option to value
            spot: Current underlying price
            volatility: Annualized volatility

        Returns:
            Delta per unit position

        Raises:
            InvalidOptionParameters: If strike or time to expiry is not positive
        """
        validate_option(option)

        d1 = self.calculate_d1(spot, option.strike, option.time_to_expiry, volatility)
        discount = np.exp(-self.risk_free_rate * option.time_to_expiry)

        if option.is_call:
            delta = discount * normal_cdf(d1)
        else:
            delta = -discount * normal_cdf(-d1)

        return float(delta)
