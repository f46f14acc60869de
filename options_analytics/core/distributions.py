"""
Standard normal distribution functions for the pricing kernel.

The CDF uses the Abramowitz & Stegun 7.1.26 rational approximation of the
error function (absolute error below 1.5e-7). Greeks fixtures are quoted
against this approximation, so it is used in place of a library routine.
"""

import math

from options_analytics.utils.constants import (
    AS_A1,
    AS_A2,
    AS_A3,
    AS_A4,
    AS_A5,
    AS_P,
    MAX_STANDARD_DEVIATIONS,
)


def normal_cdf(x: float) -> float:
    """
    Standard normal cumulative distribution function with bounds clamping.

    Computes Φ(x) = ½·(1 + erf(x/√2)) with erf from A&S 7.1.26:
        erf(z) ≈ 1 − (a1·t + a2·t² + a3·t³ + a4·t⁴ + a5·t⁵)·e^(−z²),  t = 1/(1 + p·z)
    using the odd symmetry of erf for negative arguments.

    Args:
        x: Value at which to evaluate the CDF

    Returns:
        Probability that a standard normal random variable is less than x

    Examples:
        >>> round(normal_cdf(0.0), 6)
        0.5
        >>> round(normal_cdf(1.96), 3)
        0.975
        >>> normal_cdf(10.0)  # Deep in tail
        1.0
    """
    if x > MAX_STANDARD_DEVIATIONS:
        return 1.0
    if x < -MAX_STANDARD_DEVIATIONS:
        return 0.0

    sign = -1.0 if x < 0 else 1.0
    z = abs(x) / math.sqrt(2.0)

    t = 1.0 / (1.0 + AS_P * z)
    poly = ((((AS_A5 * t + AS_A4) * t + AS_A3) * t + AS_A2) * t + AS_A1) * t
    erf_z = 1.0 - poly * math.exp(-z * z)

    return 0.5 * (1.0 + sign * erf_z)


def normal_pdf(x: float) -> float:
    """
    Standard normal probability density function with overflow protection.

    For |x| > 10, the PDF is negligible (< 2e-22) and is returned as zero.

    Notes:
        φ(x) = (1/√(2π)) * exp(-x²/2)
    """
    if abs(x) > 10.0:
        return 0.0

    return math.exp(-0.5 * x * x) / math.sqrt(2.0 * math.pi)
