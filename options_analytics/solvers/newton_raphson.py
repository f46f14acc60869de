"""
Newton-Raphson method for implied volatility calculation.

This module implements the Newton-Raphson algorithm for solving
the Black-Scholes equation for volatility given a market price.
The method uses vega (∂V/∂σ) as the derivative.
"""

import logging

from options_analytics.core.black_scholes import calculate_greeks
from options_analytics.utils.constants import (
    DEFAULT_RISK_FREE_RATE,
    IV_INITIAL_GUESS,
    IV_MAX_ITERATIONS,
    IV_MAX_VOL,
    IV_MIN_VOL,
    IV_PRICE_TOLERANCE,
)
from options_analytics.utils.types import ImpliedVolResult, OptionSpec, OptionType

logger = logging.getLogger(__name__)


def newton_raphson_iv(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float = DEFAULT_RISK_FREE_RATE,
    option_type: OptionType = "call",
    initial_guess: float = IV_INITIAL_GUESS,
    max_iterations: int = IV_MAX_ITERATIONS,
    tolerance: float = IV_PRICE_TOLERANCE,
) -> ImpliedVolResult:
    """
    Solve for implied volatility using Newton-Raphson method.

    The Newton-Raphson update is:
        σ_{n+1} = σ_n - (BS(σ_n) - market_price) / vega(σ_n)

    where vega is the per-unit derivative (the per-point Greek times 100).
    After every update σ is kept inside the solver's range: a non-positive
    step is reset to IV_MIN_VOL and anything above IV_MAX_VOL is capped.

    Args:
        market_price: Observed market price of the option
        S, K, T, r: Standard Black-Scholes parameters
        option_type: "call" or "put"
        initial_guess: Starting volatility estimate
        max_iterations: Maximum number of iterations
        tolerance: Convergence tolerance for price difference

    Returns:
        ImpliedVolResult with the last σ. success is False when the loop
        stopped on zero vega or ran out of iterations; the estimate is
        still returned in that case.

    Raises:
        DomainError: If S, K or T are outside the pricing domain
    """
    spec = OptionSpec(S=S, K=K, T=T, sigma=initial_guess, r=r, option_type=option_type)
    sigma = initial_guess
    iterations = 0

    for _ in range(max_iterations):
        iterations += 1

        greeks = calculate_greeks(spec.with_volatility(sigma))
        price_diff = greeks.price - market_price

        if abs(price_diff) < tolerance:
            logger.debug("IV converged to %.6f after %d iterations", sigma, iterations)
            return ImpliedVolResult(
                volatility=sigma,
                iterations=iterations,
                method="newton-raphson",
                success=True,
                message=f"Converged in {iterations} iterations (price tol)",
            )

        # Undo the per-percentage-point scaling of the vega Greek
        vega_unit = greeks.vega * 100.0
        if vega_unit == 0:
            logger.warning(
                "IV solver stopped on zero vega at sigma=%.6f (iteration %d)", sigma, iterations
            )
            return ImpliedVolResult(
                volatility=sigma,
                iterations=iterations,
                method="newton-raphson",
                success=False,
                message=f"Vega is zero at iteration {iterations}, no further progress possible",
            )

        sigma = sigma - price_diff / vega_unit

        if sigma <= 0:
            sigma = IV_MIN_VOL
        if sigma > IV_MAX_VOL:
            sigma = IV_MAX_VOL

        logger.debug("IV iteration %d: diff=%.6f sigma=%.6f", iterations, price_diff, sigma)

    logger.warning(
        "IV solver did not converge in %d iterations, returning sigma=%.6f", max_iterations, sigma
    )
    return ImpliedVolResult(
        volatility=sigma,
        iterations=iterations,
        method="newton-raphson",
        success=False,
        message=f"Max iterations ({max_iterations}) reached without convergence",
    )
