"""
Portfolio risk engine holding option positions and their cached variance.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..portfolio.market_assumptions import MarketAssumptions
from ..portfolio.option_position import OptionPosition, InvalidOptionParameters, validate_option
from ..valuation.variance_aggregation import VarianceAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VarianceInfo:
    """Portfolio variance now and after a hypothetical purchase."""
    current_variance: float
    hypothetical_variance: float

    @property
    def change(self) -> float:
        return self.hypothetical_variance - self.current_variance


class PortfolioRiskEngine:
    """
    Tracks option positions and the variance of the portfolio.

    The cached variance is recomputed from the full position list after every
    mutation. All public methods hold the engine lock, so concurrent callers
    never observe a partially applied change.
    """

    def __init__(self, assumptions: MarketAssumptions = None):
        """
        Initialize risk engine.

        Args:
            assumptions: Market assumptions (defaults to MarketAssumptions())
        """
        self._assumptions = assumptions if assumptions is not None else MarketAssumptions()
        self._aggregator = VarianceAggregator(self._assumptions)
        self._lock = threading.Lock()

        self._positions: List[OptionPosition] = []
        self._cached_variance = 0.0

    @property
    def assumptions(self) -> MarketAssumptions:
        return self._assumptions

    @property
    def positions(self) -> Tuple[OptionPosition, ...]:
        """Snapshot of the positions in insertion order."""
        with self._lock:
            return tuple(self._positions)

    @property
    def cached_variance(self) -> float:
        with self._lock:
            return self._cached_variance

    def __len__(self) -> int:
        with self._lock:
            return len(self._positions)

    def add_option(self, option: OptionPosition) -> float:
        """
        Add an option to the portfolio.

        Args:
            option: Option position to add

        Returns:
            Portfolio variance including the new option

        Raises:
            InvalidOptionParameters: If the option is invalid; the portfolio is unchanged
        """
        self._check_option(option)

        with self._lock:
            positions = self._positions + [option]
            variance = self._aggregator.portfolio_variance(positions)

            self._positions = positions
            self._cached_variance = variance

        logger.debug(f"Added {option}, portfolio variance now {variance:.10g}")
        return variance

    def remove_option(self, index: int) -> float:
        """
        Remove the option at a position in the portfolio.

        Args:
            index: Index in insertion order (negative values count from the end)

        Returns:
            Portfolio variance without the removed option

        Raises:
            IndexError: If there is no option at index
        """
        with self._lock:
            positions = list(self._positions)
            removed = positions.pop(index)
            variance = self._aggregator.portfolio_variance(positions)

            self._positions = positions
            self._cached_variance = variance

        logger.debug(f"Removed {removed}, portfolio variance now {variance:.10g}")
        return variance

    def reset_portfolio(self):
        """Remove all positions and zero the cached variance."""
        with self._lock:
            count = len(self._positions)
            self._positions = []
            self._cached_variance = 0.0

        logger.debug(f"Portfolio reset, cleared {count} positions")

    def get_variance_if_purchased(self, option: OptionPosition) -> VarianceInfo:
        """
        Preview the portfolio variance after buying an option.

        The engine state is not modified.

        Args:
            option: Candidate option position

        Returns:
            VarianceInfo with current and hypothetical variance

        Raises:
            InvalidOptionParameters: If the candidate option is invalid
        """
        self._check_option(option)

        with self._lock:
            current_variance = self._cached_variance
            hypothetical_variance = self._aggregator.portfolio_variance(self._positions + [option])

        logger.debug(f"Variance if purchased {option}: {current_variance:.10g} -> {hypothetical_variance:.10g}")
        return VarianceInfo(current_variance, hypothetical_variance)

    def position_breakdown(self) -> List[Dict]:
        """
        Per-position delta and variance detail.

        Returns:
            List of dictionaries in insertion order
        """
        assumptions = self._assumptions
        calculator = self._aggregator.bs_calculator
        rows = []

        for option in self.positions:
            contribution = self._aggregator.option_variance_contribution(option)
            rows.append({
                'kind': option.kind.name.title(),
                'strike': option.strike,
                'time_to_expiry': option.time_to_expiry,
                'position_multiplier': option.position_multiplier,
                'd1': calculator.calculate_d1(assumptions.underlying_price, option.strike,
                                              option.time_to_expiry, assumptions.underlying_volatility),
                'delta': self._aggregator.calculate_delta(option),
                'contribution': contribution,
                'weighted_variance': option.position_multiplier**2 * contribution
            })

        return rows

    def _check_option(self, option: OptionPosition):
        try:
            validate_option(option)
        except InvalidOptionParameters as e:
            logger.warning(f"Rejected {option}: {e}")
            raise
