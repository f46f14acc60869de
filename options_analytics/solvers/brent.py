"""
Brent's method for implied volatility calculation.

Brent's method (hybrid bisection / inverse quadratic interpolation) is an
opt-in alternative to Newton-Raphson. It is slower but converges whenever
the volatility bracket contains a root.
"""

import logging

from scipy.optimize import brentq

from options_analytics.core.black_scholes import black_scholes_price
from options_analytics.utils.constants import (
    DEFAULT_RISK_FREE_RATE,
    IV_MAX_ITERATIONS,
    IV_MAX_VOL,
    IV_MIN_VOL,
    IV_PRICE_TOLERANCE,
)
from options_analytics.utils.types import ImpliedVolResult, OptionSpec, OptionType

logger = logging.getLogger(__name__)


def brent_iv(
    market_price: float,
    S: float,
    K: float,
    T: float,
    r: float = DEFAULT_RISK_FREE_RATE,
    option_type: OptionType = "call",
    vol_lower: float = IV_MIN_VOL,
    vol_upper: float = IV_MAX_VOL,
    tolerance: float = IV_PRICE_TOLERANCE,
    max_iterations: int = IV_MAX_ITERATIONS,
) -> ImpliedVolResult:
    """
    Solve for implied volatility using Brent's method.

    Args:
        market_price: Observed market price of the option
        S, K, T, r: Standard Black-Scholes parameters
        option_type: "call" or "put"
        vol_lower: Lower bound for volatility search
        vol_upper: Upper bound for volatility search
        tolerance: Convergence tolerance on sigma
        max_iterations: Iteration cap handed to brentq

    Returns:
        ImpliedVolResult. When the bracket holds no root, success is False
        and volatility is the bound whose price is closest to the market.

    Raises:
        DomainError: If S, K or T are outside the pricing domain
    """
    # Validates S, K, T and option_type up front
    OptionSpec(S=S, K=K, T=T, sigma=vol_lower, r=r, option_type=option_type)

    def objective(sigma: float) -> float:
        """BS(σ) - market_price; we seek its zero."""
        return black_scholes_price(S, K, T, r, sigma, option_type) - market_price

    obj_lower = objective(vol_lower)
    obj_upper = objective(vol_upper)

    if obj_lower * obj_upper > 0:
        closest = vol_lower if abs(obj_lower) <= abs(obj_upper) else vol_upper
        message = (
            f"Brent method failed: objective function doesn't bracket a root. "
            f"obj({vol_lower:.4f}) = {obj_lower:.4f}, "
            f"obj({vol_upper:.4f}) = {obj_upper:.4f}. "
            f"Market price {market_price} may be outside the model's range."
        )
        logger.warning(message)
        return ImpliedVolResult(
            volatility=closest,
            iterations=0,
            method="brent",
            success=False,
            message=message,
        )

    implied_vol, info = brentq(
        objective,
        vol_lower,
        vol_upper,
        xtol=tolerance,
        rtol=1e-8,
        maxiter=max_iterations,
        full_output=True,
        disp=False,
    )

    price_error = abs(objective(implied_vol))
    return ImpliedVolResult(
        volatility=implied_vol,
        iterations=info.iterations,
        method="brent",
        success=bool(info.converged),
        message=f"{info.flag} with price error {price_error:.2e}",
    )
