"""
Delta-equivalent variance of option positions and portfolios.
"""
import logging
from typing import Iterable

from .black_scholes import BlackScholesCalculator
from ..portfolio.market_assumptions import MarketAssumptions
from ..portfolio.option_position import OptionPosition

logger = logging.getLogger(__name__)


class VarianceAggregator:
    """
    Converts option deltas into variance and sums them across a portfolio.

    Positions are treated as independent: portfolio variance is the sum of
    the per-position variances and no covariance terms are computed.
    """

    def __init__(self, assumptions: MarketAssumptions):
        """
        Initialize variance aggregator.

        Args:
            assumptions: Underlying price, volatility and risk-free rate
        """
        self.assumptions = assumptions
        self.bs_calculator = BlackScholesCalculator(assumptions.risk_free_rate)

    def calculate_delta(self, option: OptionPosition) -> float:
        """Delta of one unit of the option under the market assumptions."""
        return self.bs_calculator.calculate_delta(
            option,
            spot=self.assumptions.underlying_price,
            volatility=self.assumptions.underlying_volatility
        )

    def option_variance_contribution(self, option: OptionPosition) -> float:
        """
        Calculate the variance of one unit of an option.

        Args:
            option: Option to value

        Returns:
            delta^2 * volatility^2 (never negative)
        """
        delta = self.calculate_delta(option)
        return delta**2 * self.assumptions.variance

    def position_variance(self, option: OptionPosition) -> float:
        """Variance contribution scaled by the squared position multiplier."""
        return option.position_multiplier**2 * self.option_variance_contribution(option)

    def portfolio_variance(self, positions: Iterable[OptionPosition]) -> float:
        """
        Calculate portfolio variance under the independence assumption.

        Args:
            positions: Option positions

        Returns:
            Sum of position variances (0.0 for no positions)

        Raises:
            InvalidOptionParameters: If any position is invalid; no partial sum is returned
        """
        total_variance = 0.0
        count = 0

        for option in positions:
            total_variance += self.position_variance(option)
            count += 1

        logger.debug(f"Portfolio variance over {count} positions: {total_variance:.10g}")
        return total_variance
