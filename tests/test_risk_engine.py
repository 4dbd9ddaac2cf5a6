"""
Unit tests for the portfolio risk engine.
"""
import math
import threading
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from option_variance.portfolio.market_assumptions import MarketAssumptions
from option_variance.portfolio.option_position import OptionKind, OptionPosition, InvalidOptionParameters
from option_variance.risk.risk_engine import PortfolioRiskEngine, VarianceInfo
from option_variance.valuation.variance_aggregation import VarianceAggregator


class TestPortfolioRiskEngine(unittest.TestCase):
    """Test portfolio risk engine."""

    def setUp(self):
        """Set up engine with the default assumptions (5000, 20%, 5%)."""
        self.assumptions = MarketAssumptions(underlying_price=5000, underlying_volatility=0.2,
                                             risk_free_rate=0.05)
        self.engine = PortfolioRiskEngine(self.assumptions)
        self.aggregator = VarianceAggregator(self.assumptions)

    def test_initial_state(self):
        """New engine is empty with zero variance."""
        self.assertEqual(self.engine.positions, ())
        self.assertEqual(self.engine.cached_variance, 0.0)
        self.assertEqual(len(self.engine), 0)

    def test_default_assumptions(self):
        engine = PortfolioRiskEngine()
        self.assertEqual(engine.assumptions, MarketAssumptions(5000, 0.20, 0.05))

    def test_add_call_and_put(self):
        """Long call and short put at strike 100."""
        call = OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=1.0, position_multiplier=1)
        put = OptionPosition(OptionKind.PUT, strike=100, time_to_expiry=1.0, position_multiplier=-1)

        first = self.engine.add_option(call)
        second = self.engine.add_option(put)

        expected = (self.aggregator.option_variance_contribution(call)
                    + self.aggregator.option_variance_contribution(put))
        self.assertEqual(second, self.engine.cached_variance)
        self.assertAlmostEqual(second, expected, places=15)
        self.assertAlmostEqual(second, 0.04 * math.exp(-0.1), places=15)
        self.assertAlmostEqual(first, second, places=15)
        self.assertEqual(self.engine.positions, (call, put))

    def test_preview_on_empty_engine(self):
        """Preview on an empty engine returns the candidate's contribution."""
        candidate = OptionPosition(OptionKind.CALL, strike=120, time_to_expiry=1.0, position_multiplier=1)

        info = self.engine.get_variance_if_purchased(candidate)

        self.assertIsInstance(info, VarianceInfo)
        self.assertEqual(info.current_variance, 0.0)
        self.assertAlmostEqual(info.hypothetical_variance,
                               self.aggregator.option_variance_contribution(candidate), places=15)
        self.assertEqual(len(self.engine), 0)

    def test_preview_does_not_mutate(self):
        """Repeated previews return the same values and leave positions alone."""
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=1.0))
        self.engine.add_option(OptionPosition(OptionKind.PUT, strike=100, time_to_expiry=1.0,
                                              position_multiplier=-1))
        positions = self.engine.positions
        candidate = OptionPosition(OptionKind.CALL, strike=120, time_to_expiry=1.0)

        first = self.engine.get_variance_if_purchased(candidate)
        second = self.engine.get_variance_if_purchased(candidate)

        self.assertEqual(first, second)
        self.assertEqual(first.current_variance, self.engine.cached_variance)
        self.assertEqual(self.engine.positions, positions)
        self.assertAlmostEqual(first.hypothetical_variance, 2 * 0.04 * math.exp(-0.1), places=15)
        self.assertAlmostEqual(first.change, 0.04 * math.exp(-0.1), places=15)

    def test_preview_matches_add(self):
        """Previewed variance equals the variance after actually adding."""
        self.engine.add_option(OptionPosition(OptionKind.PUT, strike=5100, time_to_expiry=0.25))
        candidate = OptionPosition(OptionKind.CALL, strike=4900, time_to_expiry=0.5, position_multiplier=-0.5)

        info = self.engine.get_variance_if_purchased(candidate)
        added = self.engine.add_option(candidate)

        self.assertEqual(info.hypothetical_variance, added)

    def test_invalid_strike_rejected(self):
        """Negative strike is rejected and the cache is untouched."""
        self.engine.add_option(OptionPosition(OptionKind.PUT, strike=5000, time_to_expiry=1.0))
        before = self.engine.cached_variance

        for kind in (OptionKind.CALL, OptionKind.PUT):
            for expiry in (0.1, 1.0, 5.0):
                with self.assertRaises(InvalidOptionParameters):
                    self.engine.add_option(OptionPosition(kind, strike=-100, time_to_expiry=expiry))

        self.assertEqual(self.engine.cached_variance, before)
        self.assertEqual(len(self.engine), 1)

    def test_invalid_expiry_rejected(self):
        with self.assertRaises(InvalidOptionParameters):
            self.engine.add_option(OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=0))

        self.assertEqual(self.engine.positions, ())
        self.assertEqual(self.engine.cached_variance, 0.0)

    def test_non_finite_option_rejected(self):
        """Infinite strike or expiry and NaN multipliers never reach the cache."""
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0))
        before = self.engine.cached_variance
        inf, nan = float('inf'), float('nan')

        bad_options = [
            OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=inf),
            OptionPosition(OptionKind.PUT, strike=inf, time_to_expiry=1.0),
            OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=1.0, position_multiplier=nan),
            OptionPosition(OptionKind.PUT, strike=100, time_to_expiry=1.0, position_multiplier=-inf),
        ]
        for option in bad_options:
            with self.assertRaises(InvalidOptionParameters):
                self.engine.add_option(option)
            with self.assertRaises(InvalidOptionParameters):
                self.engine.get_variance_if_purchased(option)

        self.assertEqual(len(self.engine), 1)
        self.assertEqual(self.engine.cached_variance, before)
        self.assertGreaterEqual(self.engine.cached_variance, 0.0)

        candidate = OptionPosition(OptionKind.PUT, strike=5000, time_to_expiry=1.0)
        self.assertGreaterEqual(self.engine.add_option(candidate), before)

    def test_invalid_preview_rejected(self):
        """Invalid candidate fails the preview without side effects."""
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=4800, time_to_expiry=1.0))
        before = self.engine.cached_variance

        with self.assertRaises(InvalidOptionParameters):
            self.engine.get_variance_if_purchased(
                OptionPosition(OptionKind.CALL, strike=100, time_to_expiry=-1.0))

        self.assertEqual(self.engine.cached_variance, before)
        self.assertEqual(len(self.engine), 1)

    def test_reset(self):
        """Reset, add several, reset again leaves an empty engine."""
        self.engine.reset_portfolio()

        for strike in (4500, 5000, 5500, 6000):
            self.engine.add_option(OptionPosition(OptionKind.PUT, strike=strike, time_to_expiry=0.5))

        self.assertEqual(len(self.engine), 4)
        self.assertGreater(self.engine.cached_variance, 0.0)

        self.engine.reset_portfolio()

        self.assertEqual(self.engine.positions, ())
        self.assertEqual(self.engine.cached_variance, 0.0)

    def test_variance_never_decreases_on_add(self):
        previous = self.engine.cached_variance
        for strike, kind in [(4000, 'C'), (5000, 'P'), (5000, 'C'), (7000, 'P')]:
            current = self.engine.add_option(OptionPosition(kind, strike=strike, time_to_expiry=0.75))
            self.assertGreaterEqual(current, previous)
            previous = current

    def test_cache_matches_recomputation(self):
        """Cached variance always equals a from-scratch sum."""
        options = [
            OptionPosition(OptionKind.CALL, strike=4900, time_to_expiry=0.1, position_multiplier=1),
            OptionPosition(OptionKind.PUT, strike=5100, time_to_expiry=0.3, position_multiplier=-2),
            OptionPosition(OptionKind.CALL, strike=5200, time_to_expiry=1.5, position_multiplier=0.25),
        ]
        for option in options:
            self.engine.add_option(option)
            self.assertEqual(self.engine.cached_variance,
                             self.aggregator.portfolio_variance(self.engine.positions))

    def test_remove_option(self):
        """Removing a position matches an engine that never held it."""
        options = [
            OptionPosition(OptionKind.CALL, strike=4900, time_to_expiry=0.5),
            OptionPosition(OptionKind.PUT, strike=5000, time_to_expiry=0.5, position_multiplier=-1),
            OptionPosition(OptionKind.PUT, strike=5200, time_to_expiry=1.0),
        ]
        for option in options:
            self.engine.add_option(option)

        variance = self.engine.remove_option(1)

        fresh = PortfolioRiskEngine(self.assumptions)
        fresh.add_option(options[0])
        fresh.add_option(options[2])

        self.assertEqual(self.engine.positions, (options[0], options[2]))
        self.assertEqual(variance, fresh.cached_variance)
        self.assertEqual(self.engine.cached_variance, fresh.cached_variance)

        self.engine.remove_option(-1)
        self.assertEqual(self.engine.positions, (options[0],))

    def test_remove_out_of_range(self):
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0))
        before = self.engine.cached_variance

        with self.assertRaises(IndexError):
            self.engine.remove_option(3)

        self.assertEqual(len(self.engine), 1)
        self.assertEqual(self.engine.cached_variance, before)

    def test_positions_snapshot_is_immutable(self):
        """The positions property is a copy, not the live list."""
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0))
        snapshot = self.engine.positions

        self.engine.add_option(OptionPosition(OptionKind.PUT, strike=5000, time_to_expiry=1.0))

        self.assertEqual(len(snapshot), 1)
        self.assertIsInstance(snapshot, tuple)

    def test_position_breakdown(self):
        """Breakdown rows add up to the cached variance."""
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0))
        self.engine.add_option(OptionPosition(OptionKind.PUT, strike=5000, time_to_expiry=0.5,
                                              position_multiplier=-2))

        rows = self.engine.position_breakdown()

        self.assertEqual([row['kind'] for row in rows], ['Call', 'Put'])
        self.assertAlmostEqual(rows[0]['d1'], 0.35, places=12)
        self.assertGreater(rows[0]['delta'], 0)
        self.assertLess(rows[1]['delta'], 0)
        self.assertAlmostEqual(rows[1]['weighted_variance'], 4 * rows[1]['contribution'], places=15)
        self.assertAlmostEqual(sum(row['weighted_variance'] for row in rows),
                               self.engine.cached_variance, places=15)

    def test_concurrent_adds(self):
        """Adds from several threads keep the cache consistent."""
        option = OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0)
        errors = []

        def worker():
            try:
                for _ in range(25):
                    self.engine.add_option(option)
                    self.engine.get_variance_if_purchased(option)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.engine), 100)
        self.assertEqual(self.engine.cached_variance,
                         self.aggregator.portfolio_variance(self.engine.positions))

    def test_engines_are_independent(self):
        other = PortfolioRiskEngine(self.assumptions)
        self.engine.add_option(OptionPosition(OptionKind.CALL, strike=5000, time_to_expiry=1.0))

        self.assertEqual(len(other), 0)
        self.assertEqual(other.cached_variance, 0.0)


if __name__ == '__main__':
    unittest.main()
