"""
Implied volatility entry points.

``implied_volatility`` is the plain numeric contract: it always returns a
volatility rounded to four decimals and never raises on non-convergence.
``solve_implied_volatility`` returns the full solver result for callers
that want to know whether the estimate actually met the tolerance.
"""

from options_analytics.solvers.brent import brent_iv
from options_analytics.solvers.newton_raphson import newton_raphson_iv
from options_analytics.utils.constants import (
    DEFAULT_RISK_FREE_RATE,
    IV_DECIMALS,
    IV_MAX_ITERATIONS,
    IV_PRICE_TOLERANCE,
)
from options_analytics.utils.types import ImpliedVolResult, OptionType

SOLVER_METHODS = ("newton", "brent")


def solve_implied_volatility(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float = DEFAULT_RISK_FREE_RATE,
    option_type: OptionType = "call",
    max_iterations: int = IV_MAX_ITERATIONS,
    tolerance: float = IV_PRICE_TOLERANCE,
    method: str = "newton",
) -> ImpliedVolResult:
    """
    Solve for implied volatility and report how the solver finished.

    Args:
        market_price: Observed market price
        S: Spot price
        K: Strike price
        T: Time to expiration in years
        r: Risk-free rate (annualized, continuous)
        option_type: "call" or "put"
        max_iterations: Iteration cap
        tolerance: Price tolerance for convergence
        method: "newton" (default, starts at σ=0.2) or "brent"

    Returns:
        ImpliedVolResult; volatility is at full precision

    Raises:
        ValueError: If method is unknown
        DomainError: If S, K or T are outside the pricing domain
    """
    if method == "newton":
        return newton_raphson_iv(
            market_price,
            S,
            K,
            T,
            r,
            option_type,
            max_iterations=max_iterations,
            tolerance=tolerance,
        )
    if method == "brent":
        return brent_iv(
            market_price,
            S,
            K,
            T,
            r,
            option_type,
            tolerance=tolerance,
            max_iterations=max_iterations,
        )
    raise ValueError(f"method must be one of {SOLVER_METHODS}, got '{method}'")


def implied_volatility(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float = DEFAULT_RISK_FREE_RATE,
    option_type: OptionType = "call",
    max_iterations: int = IV_MAX_ITERATIONS,
    tolerance: float = IV_PRICE_TOLERANCE,
) -> float:
    """
    Solve for implied volatility with Newton-Raphson.

    Non-convergence is not an error: the last estimate is returned either
    way (a warning is logged by the solver).

    Examples:
        >>> implied_volatility(10.45, S=100, K=100, T=1.0, r=0.05)
        0.2

    Returns:
        Implied volatility rounded to 4 decimals
    """
    result = newton_raphson_iv(
        market_price,
        S,
        K,
        T,
        r,
        option_type,
        max_iterations=max_iterations,
        tolerance=tolerance,
    )
    return round(result.volatility, IV_DECIMALS)
