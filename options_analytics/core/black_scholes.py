"""
Black-Scholes option pricing model for European options.

This module implements the classical Black-Scholes formula for European
options without dividends, together with the standard Greeks. Expired
options (T <= 0) are valued at intrinsic value on a separate path so the
σ√T denominator is never evaluated at zero.

Output scaling conventions:
    - theta is reported per calendar day (annual theta / 365)
    - vega is reported per one percentage point of volatility
    - rho is reported per one percentage point of interest rate

References:
    Black, F., & Scholes, M. (1973). The Pricing of Options and Corporate Liabilities.
    Journal of Political Economy, 81(3), 637-654.
"""

import math

from options_analytics.core.distributions import normal_cdf, normal_pdf
from options_analytics.utils.constants import DAYS_PER_YEAR
from options_analytics.utils.types import DomainError, Greeks, OptionSpec, OptionType


def _validate_inputs(S: float, K: float, T: float, sigma: float) -> None:
    """
    Validate option pricing inputs.

    Raises:
        DomainError: If any input is outside the pricing domain
    """
    if S <= 0:
        raise DomainError(f"Spot price must be positive, got S={S}")
    if K <= 0:
        raise DomainError(f"Strike price must be positive, got K={K}")
    if T < 0:
        raise DomainError(f"Time to expiration cannot be negative, got T={T}")
    if T > 0 and sigma <= 0:
        raise DomainError(f"Volatility must be positive before expiry, got sigma={sigma}")


def _check_option_type(option_type: str) -> None:
    if option_type not in ("call", "put"):
        raise DomainError(f"option_type must be 'call' or 'put', got '{option_type}'")


def intrinsic_value(S: float, K: float, option_type: OptionType) -> float:
    """Payoff of immediate exercise: max(0, S−K) for calls, max(0, K−S) for puts."""
    if option_type == "call":
        return max(0.0, S - K)
    return max(0.0, K - S)


def d1(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate d1 parameter in Black-Scholes formula.

    Args:
        S: Current spot price
        K: Strike price
        T: Time to expiration in years (must be > 0)
        r: Risk-free interest rate (annualized, continuous)
        sigma: Volatility (annualized standard deviation)

    Returns:
        The d1 parameter

    Formula:
        d1 = [ln(S/K) + (r + σ²/2)T] / (σ√T)
    """
    _validate_inputs(S, K, T, sigma)
    if T == 0:
        raise DomainError("d1 is undefined at expiry (T=0)")

    return (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / (sigma * math.sqrt(T))


def d2(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate d2 parameter in Black-Scholes formula.

    Formula:
        d2 = d1 - σ√T

    Notes:
        For a call, N(d2) is the risk-neutral probability of exercise.
    """
    return d1(S, K, T, r, sigma) - sigma * math.sqrt(T)


def black_scholes_call(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate European call option price.

    Formula:
        C = S·N(d1) - K·e^(-rT)·N(d2)

    Examples:
        >>> price = black_scholes_call(100, 100, 1.0, 0.05, 0.20)
        >>> abs(price - 10.4506) < 0.01
        True
    """
    _validate_inputs(S, K, T, sigma)
    if T <= 0:
        return intrinsic_value(S, K, "call")

    d1_value = d1(S, K, T, r, sigma)
    d2_value = d1_value - sigma * math.sqrt(T)

    return S * normal_cdf(d1_value) - K * math.exp(-r * T) * normal_cdf(d2_value)


def black_scholes_put(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate European put option price.

    Formula:
        P = K·e^(-rT)·N(-d2) - S·N(-d1)

    Examples:
        >>> price = black_scholes_put(100, 100, 1.0, 0.05, 0.20)
        >>> abs(price - 5.5735) < 0.01
        True
    """
    _validate_inputs(S, K, T, sigma)
    if T <= 0:
        return intrinsic_value(S, K, "put")

    d1_value = d1(S, K, T, r, sigma)
    d2_value = d1_value - sigma * math.sqrt(T)

    return K * math.exp(-r * T) * normal_cdf(-d2_value) - S * normal_cdf(-d1_value)


def black_scholes_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate European option price (call or put).

    Raises:
        DomainError: If option_type is not "call" or "put"
    """
    _check_option_type(option_type)
    if option_type == "call":
        return black_scholes_call(S, K, T, r, sigma)
    return black_scholes_put(S, K, T, r, sigma)


# ===========================
# Greeks Calculations
# ===========================


def delta(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate option delta (∂V/∂S).

    Formulas:
        Call delta: Δ_c = N(d1)
        Put delta:  Δ_p = N(d1) - 1

    At expiry delta is a step: 1 for an in-the-money call, -1 for an
    in-the-money put, 0 otherwise.
    """
    _validate_inputs(S, K, T, sigma)
    _check_option_type(option_type)

    if T <= 0:
        if option_type == "call":
            return 1.0 if S > K else 0.0
        return -1.0 if S < K else 0.0

    cdf_d1 = normal_cdf(d1(S, K, T, r, sigma))
    return cdf_d1 if option_type == "call" else cdf_d1 - 1.0


def gamma(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate option gamma (∂²V/∂S²), identical for calls and puts.

    Formula:
        Γ = φ(d1) / (S · σ · √T)
    """
    _validate_inputs(S, K, T, sigma)
    if T <= 0:
        return 0.0

    return normal_pdf(d1(S, K, T, r, sigma)) / (S * sigma * math.sqrt(T))


def vega(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """
    Calculate option vega, per one percentage point of volatility.

    Formula:
        ν = S · √T · φ(d1) / 100

    Interpretation:
        Vega of 0.35 means: for 20% → 21% volatility, the option price
        increases by $0.35. Multiply by 100 for the per-unit derivative.
    """
    _validate_inputs(S, K, T, sigma)
    if T <= 0:
        return 0.0

    return S * math.sqrt(T) * normal_pdf(d1(S, K, T, r, sigma)) / 100.0


def theta(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate option theta (∂V/∂t), reported per calendar day.

    Formulas (annualized, then divided by 365):
        Call: Θ_c = -S·φ(d1)·σ/(2√T) - r·K·e^(-rT)·N(d2)
        Put:  Θ_p = -S·φ(d1)·σ/(2√T) + r·K·e^(-rT)·N(-d2)
    """
    _validate_inputs(S, K, T, sigma)
    _check_option_type(option_type)
    if T <= 0:
        return 0.0

    sqrt_T = math.sqrt(T)
    d1_value = d1(S, K, T, r, sigma)
    d2_value = d1_value - sigma * sqrt_T
    discount_strike = K * math.exp(-r * T)

    # Diffusion term is the same for call and put
    term1 = -(S * normal_pdf(d1_value) * sigma) / (2.0 * sqrt_T)

    if option_type == "call":
        term2 = -r * discount_strike * normal_cdf(d2_value)
    else:
        term2 = r * discount_strike * normal_cdf(-d2_value)

    return (term1 + term2) / DAYS_PER_YEAR


def rho(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    option_type: OptionType = "call",
) -> float:
    """
    Calculate option rho (∂V/∂r), reported per one percentage point of rate.

    Formulas:
        Call rho: ρ_c = K·T·e^(-rT)·N(d2) / 100
        Put rho:  ρ_p = -K·T·e^(-rT)·N(-d2) / 100
    """
    _validate_inputs(S, K, T, sigma)
    _check_option_type(option_type)
    if T <= 0:
        return 0.0

    d2_value = d2(S, K, T, r, sigma)
    discount_strike = K * T * math.exp(-r * T)

    if option_type == "call":
        return discount_strike * normal_cdf(d2_value) / 100.0
    return -discount_strike * normal_cdf(-d2_value) / 100.0


def calculate_greeks(spec: OptionSpec) -> Greeks:
    """
    Calculate price and all Greeks for an option at full precision.

    Args:
        spec: Validated Black-Scholes inputs

    Returns:
        Greeks record with price, delta, gamma, theta, vega, rho

    Example:
        >>> greeks = calculate_greeks(OptionSpec(S=100, K=100, T=1.0, sigma=0.20))
        >>> print(f"Delta: {greeks.delta:.4f}")
        Delta: 0.6368
    """
    S, K, T, r, sigma, option_type = spec.S, spec.K, spec.T, spec.r, spec.sigma, spec.option_type

    if T <= 0:
        return Greeks(
            price=intrinsic_value(S, K, option_type),
            delta=delta(S, K, T, r, sigma, option_type),
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
        )

    return Greeks(
        price=black_scholes_price(S, K, T, r, sigma, option_type),
        delta=delta(S, K, T, r, sigma, option_type),
        gamma=gamma(S, K, T, r, sigma),
        theta=theta(S, K, T, r, sigma, option_type),
        vega=vega(S, K, T, r, sigma),
        rho=rho(S, K, T, r, sigma, option_type),
    )


def price_and_greeks(spec: OptionSpec) -> Greeks:
    """
    Price and Greeks rounded to presentation precision.

    Price, theta, vega and rho carry 2 decimals, delta 3, gamma 4.
    """
    return calculate_greeks(spec).rounded()
