"""
Standard normal cumulative distribution function.

Zelen-Severo rational approximation (Abramowitz & Stegun 26.2.17), absolute
error below 1e-7. Every delta and variance in the package inherits that bound.
"""
import numpy as np

GAMMA = 0.2316419
COEFFICIENTS = (0.319381530, -0.356563782, 1.781477937, -1.821255978, 1.330274429)
INV_SQRT_2PI = 1.0 / np.sqrt(2 * np.pi)


def normal_cdf(x: float) -> float:
    """
    Approximate N(x) for a standard normal variable.

    Args:
        x: Any real value

    Returns:
        Probability that a standard normal draw is <= x
    """
    if x < 0.0:
        return 1.0 - normal_cdf(-x)

    k = 1.0 / (1.0 + GAMMA * x)
    b1, b2, b3, b4, b5 = COEFFICIENTS
    poly = k * (b1 + k * (b2 + k * (b3 + k * (b4 + b5 * k))))

    return float(1.0 - INV_SQRT_2PI * np.exp(-0.5 * x * x) * poly)
