"""Valuation engine for option deltas and variance aggregation."""
from .normal_cdf import normal_cdf
from .black_scholes import BlackScholesCalculator
from .variance_aggregation import VarianceAggregator

__all__ = ['normal_cdf', 'BlackScholesCalculator', 'VarianceAggregator']
