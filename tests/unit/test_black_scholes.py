"""
Unit tests for Black-Scholes pricing and Greeks calculations.

This module validates:
1. Known analytical solutions from textbooks
2. Put-call parity relationship
3. The expiry branch and continuity as T → 0
4. Greeks accuracy via finite-difference comparison
5. Output scaling and presentation rounding
"""

import math

import pytest

from options_analytics.core.black_scholes import (
    black_scholes_call,
    black_scholes_price,
    black_scholes_put,
    calculate_greeks,
    d1,
    d2,
    delta,
    gamma,
    intrinsic_value,
    price_and_greeks,
    rho,
    theta,
    vega,
)
from options_analytics.utils.types import DomainError, OptionSpec


# ===========================
# Known Solutions Tests
# ===========================


def test_atm_call_known_solution(standard_params):
    """
    Hull's textbook example: S=100, K=100, T=1, r=5%, σ=20% → Call ≈ 10.4506
    """
    price = black_scholes_call(**standard_params)
    assert abs(price - 10.4506) < 0.01, f"Expected ~10.4506, got {price}"


def test_atm_put_known_solution(standard_params):
    """S=100, K=100, T=1, r=5%, σ=20% → Put ≈ 5.5735"""
    price = black_scholes_put(**standard_params)
    assert abs(price - 5.5735) < 0.01, f"Expected ~5.5735, got {price}"


def test_itm_call_known_solution():
    """S=120, K=100, T=0.5, r=5%, σ=20% → Call ≈ 22.95"""
    price = black_scholes_call(S=120, K=100, T=0.5, r=0.05, sigma=0.20)
    assert 22.5 < price < 23.5, f"Expected ~22.95, got {price}"


def test_otm_put_known_solution():
    """S=120, K=100, T=0.5, r=5%, σ=20% → Put ≈ 0.48"""
    price = black_scholes_put(S=120, K=100, T=0.5, r=0.05, sigma=0.20)
    assert 0.3 < price < 0.7, f"Expected ~0.48, got {price}"


def test_price_and_greeks_atm_call_fixture(standard_spec):
    """Rounded output for the textbook ATM call."""
    greeks = price_and_greeks(standard_spec)

    assert greeks.price == 10.45
    assert greeks.delta == 0.637
    assert greeks.gamma == 0.0188
    assert greeks.theta == -0.02
    assert greeks.vega == 0.38
    assert greeks.rho == 0.53


def test_price_and_greeks_atm_put_fixture(standard_params):
    """Rounded output for the textbook ATM put."""
    greeks = price_and_greeks(OptionSpec(**standard_params, option_type="put"))

    assert greeks.price == 5.57
    assert greeks.delta == -0.363
    assert greeks.gamma == 0.0188
    assert greeks.vega == 0.38
    assert greeks.rho == -0.42


# ===========================
# Put-Call Parity Tests
# ===========================


@pytest.mark.parametrize(
    "S,K,T,r,sigma",
    [
        (100, 100, 1.0, 0.05, 0.20),  # ATM
        (110, 100, 1.0, 0.05, 0.20),  # ITM call
        (90, 100, 1.0, 0.05, 0.20),  # OTM call
        (100, 100, 0.25, 0.05, 0.30),  # High vol, short expiry
        (100, 100, 2.0, 0.03, 0.15),  # Long expiry
    ],
)
def test_put_call_parity_parametrized(S, K, T, r, sigma):
    """C - P = S - K·e^(-rT) across parameter combinations."""
    call_price = black_scholes_call(S, K, T, r, sigma)
    put_price = black_scholes_put(S, K, T, r, sigma)

    lhs = call_price - put_price
    rhs = S - K * math.exp(-r * T)

    # A&S approximation error is ~1e-7 per CDF evaluation
    assert abs(lhs - rhs) < 1e-4


def test_put_call_parity_rounded_outputs(standard_params):
    """Parity also holds for the presentation prices within rounding."""
    call = price_and_greeks(OptionSpec(**standard_params, option_type="call"))
    put = price_and_greeks(OptionSpec(**standard_params, option_type="put"))

    rhs = standard_params["S"] - standard_params["K"] * math.exp(
        -standard_params["r"] * standard_params["T"]
    )
    assert abs((call.price - put.price) - rhs) <= 0.01


# ===========================
# Expiry Tests
# ===========================


@pytest.mark.parametrize(
    "S,K,option_type,expected_price,expected_delta",
    [
        (105.0, 100.0, "call", 5.0, 1.0),
        (95.0, 100.0, "call", 0.0, 0.0),
        (95.0, 100.0, "put", 5.0, -1.0),
        (105.0, 100.0, "put", 0.0, 0.0),
        (100.0, 100.0, "call", 0.0, 0.0),
        (100.0, 100.0, "put", 0.0, 0.0),
    ],
)
def test_expired_option_is_intrinsic(S, K, option_type, expected_price, expected_delta):
    """At T=0 the kernel returns intrinsic value and step delta."""
    greeks = calculate_greeks(OptionSpec(S=S, K=K, T=0.0, sigma=0.2, option_type=option_type))

    assert greeks.price == expected_price
    assert greeks.delta == expected_delta
    assert greeks.gamma == 0.0
    assert greeks.theta == 0.0
    assert greeks.vega == 0.0
    assert greeks.rho == 0.0


def test_expired_option_ignores_volatility():
    """σ is not needed once the option has expired."""
    greeks = calculate_greeks(OptionSpec(S=110.0, K=100.0, T=0.0, sigma=0.0))
    assert greeks.price == 10.0


@pytest.mark.parametrize(
    "S,K,option_type",
    [
        (105.0, 100.0, "call"),
        (95.0, 100.0, "call"),
        (95.0, 100.0, "put"),
        (105.0, 100.0, "put"),
    ],
)
def test_continuity_at_expiry(S, K, option_type):
    """price_and_greeks(T=ε) converges to the T=0 branch away from the money."""
    near = price_and_greeks(OptionSpec(S=S, K=K, T=1e-9, sigma=0.2, option_type=option_type))
    expired = price_and_greeks(OptionSpec(S=S, K=K, T=0.0, sigma=0.2, option_type=option_type))

    assert near.price == pytest.approx(expired.price, abs=0.01)
    assert near.delta == pytest.approx(expired.delta, abs=0.001)
    assert near.gamma == pytest.approx(0.0, abs=1e-4)
    assert near.vega == pytest.approx(0.0, abs=0.01)


def test_intrinsic_value():
    assert intrinsic_value(110, 100, "call") == 10
    assert intrinsic_value(90, 100, "call") == 0
    assert intrinsic_value(90, 100, "put") == 10
    assert intrinsic_value(110, 100, "put") == 0


def test_deep_itm_call():
    """Deep ITM call should approximate S - K·e^(-rT)."""
    S, K = 200.0, 100.0
    price = black_scholes_call(S, K, T=1.0, r=0.05, sigma=0.20)
    assert abs(price - (S - K * math.exp(-0.05))) < 0.01


def test_deep_otm_call():
    """Deep OTM call should be nearly worthless."""
    price = black_scholes_call(50.0, 100.0, T=1.0, r=0.05, sigma=0.20)
    assert price < 0.01


# ===========================
# d1 and d2 Tests
# ===========================


def test_d1_d2_relationship(standard_params):
    """Verify d2 = d1 - σ√T."""
    d1_val = d1(**standard_params)
    d2_val = d2(**standard_params)

    expected_d2 = d1_val - standard_params["sigma"] * math.sqrt(standard_params["T"])
    assert abs(d2_val - expected_d2) < 1e-12


def test_d1_known_value(standard_params):
    """d1 = (0 + (0.05 + 0.02)·1) / 0.2 = 0.35 for the ATM fixture."""
    assert d1(**standard_params) == pytest.approx(0.35)


def test_d1_undefined_at_expiry():
    with pytest.raises(DomainError):
        d1(S=100, K=100, T=0.0, r=0.05, sigma=0.2)


def test_d1_symmetry():
    """d1 is positive for S>K and negative for S<K."""
    assert d1(S=120, K=100, T=1.0, r=0.05, sigma=0.20) > 0
    assert d1(S=80, K=100, T=1.0, r=0.05, sigma=0.20) < 0


# ===========================
# Pricing Function Tests
# ===========================


def test_black_scholes_price_call(standard_params):
    price_generic = black_scholes_price(**standard_params, option_type="call")
    assert price_generic == black_scholes_call(**standard_params)


def test_black_scholes_price_put(standard_params):
    price_generic = black_scholes_price(**standard_params, option_type="put")
    assert price_generic == black_scholes_put(**standard_params)


def test_black_scholes_price_invalid_type(standard_params):
    """Unknown option_type is a domain error (and a ValueError)."""
    with pytest.raises(ValueError):
        black_scholes_price(**standard_params, option_type="straddle")


# ===========================
# Input Validation Tests
# ===========================


@pytest.mark.parametrize(
    "overrides",
    [
        {"S": -100.0},
        {"S": 0.0},
        {"K": -100.0},
        {"T": -1.0},
        {"sigma": 0.0},
        {"sigma": -0.2},
        {"option_type": "straddle"},
    ],
)
def test_option_spec_rejects_invalid_inputs(standard_params, overrides):
    params = {**standard_params, "option_type": "call", **overrides}
    with pytest.raises(DomainError):
        OptionSpec(**params)


def test_negative_spot_raises():
    with pytest.raises(DomainError):
        black_scholes_call(S=-100, K=100, T=1.0, r=0.05, sigma=0.20)


def test_zero_volatility_before_expiry_raises():
    """σ ≤ 0 with T > 0 would divide by zero in d1."""
    with pytest.raises(DomainError):
        black_scholes_call(S=100, K=100, T=1.0, r=0.05, sigma=0.0)


def test_domain_error_is_value_error():
    assert issubclass(DomainError, ValueError)


def test_option_spec_defaults():
    spec = OptionSpec(S=100, K=100, T=1.0, sigma=0.2)
    assert spec.r == 0.05
    assert spec.option_type == "call"


def test_with_volatility_returns_new_spec(standard_spec):
    bumped = standard_spec.with_volatility(0.3)
    assert bumped.sigma == 0.3
    assert standard_spec.sigma == 0.20


# ===========================
# Greeks Tests
# ===========================


def test_call_delta_range(standard_params):
    assert 0.0 <= delta(**standard_params, option_type="call") <= 1.0


def test_put_delta_is_call_delta_minus_one(standard_params):
    call_delta = delta(**standard_params, option_type="call")
    put_delta = delta(**standard_params, option_type="put")
    assert put_delta == pytest.approx(call_delta - 1.0)


def test_gamma_same_for_call_and_put(standard_params):
    call = calculate_greeks(OptionSpec(**standard_params, option_type="call"))
    put = calculate_greeks(OptionSpec(**standard_params, option_type="put"))
    assert call.gamma == put.gamma
    assert call.vega == put.vega


def test_call_theta_negative(standard_params):
    assert theta(**standard_params, option_type="call") < 0.0


def test_call_rho_positive(standard_params):
    assert rho(**standard_params, option_type="call") > 0.0


def test_put_rho_negative(standard_params):
    assert rho(**standard_params, option_type="put") < 0.0


# ===========================
# Greeks Finite-Difference Validation
# ===========================


def test_delta_finite_difference_call(standard_params):
    S = standard_params["S"]
    h = 0.01

    price_up = black_scholes_call(**{**standard_params, "S": S + h})
    price_down = black_scholes_call(**{**standard_params, "S": S - h})
    delta_numerical = (price_up - price_down) / (2 * h)

    assert abs(delta(**standard_params, option_type="call") - delta_numerical) < 1e-4


def test_gamma_finite_difference(standard_params):
    S = standard_params["S"]
    h = 1.0

    price = black_scholes_call(**standard_params)
    price_up = black_scholes_call(**{**standard_params, "S": S + h})
    price_down = black_scholes_call(**{**standard_params, "S": S - h})
    gamma_numerical = (price_up - 2 * price + price_down) / (h * h)

    assert abs(gamma(**standard_params) - gamma_numerical) < 1e-3


def test_vega_finite_difference_per_point(standard_params):
    """Vega is per 1% of volatility: 100·vega ≈ ∂V/∂σ."""
    sigma = standard_params["sigma"]
    h = 0.001

    price_up = black_scholes_call(**{**standard_params, "sigma": sigma + h})
    price_down = black_scholes_call(**{**standard_params, "sigma": sigma - h})
    vega_numerical = (price_up - price_down) / (2 * h)

    assert abs(vega(**standard_params) * 100 - vega_numerical) < 0.01


def test_theta_finite_difference_per_day(standard_params):
    """Theta is the value change over one calendar day."""
    T = standard_params["T"]
    h = 1.0 / 365.0

    price = black_scholes_call(**standard_params)
    price_next_day = black_scholes_call(**{**standard_params, "T": T - h})

    assert abs(theta(**standard_params, option_type="call") - (price_next_day - price)) < 0.01


def test_rho_finite_difference_per_point(standard_params):
    """Rho is per 1% of rate: 100·rho ≈ ∂V/∂r."""
    r = standard_params["r"]
    h = 0.01

    price_up = black_scholes_call(**{**standard_params, "r": r + h})
    price_down = black_scholes_call(**{**standard_params, "r": r - h})
    rho_numerical = (price_up - price_down) / (2 * h)

    assert abs(rho(**standard_params, option_type="call") * 100 - rho_numerical) < 0.5


# ===========================
# calculate_greeks() Tests
# ===========================


def test_calculate_greeks_consistency(standard_spec, standard_params):
    """calculate_greeks matches the individual functions at full precision."""
    greeks = calculate_greeks(standard_spec)

    assert greeks.price == black_scholes_call(**standard_params)
    assert greeks.delta == delta(**standard_params, option_type="call")
    assert greeks.gamma == gamma(**standard_params)
    assert greeks.vega == vega(**standard_params)
    assert greeks.theta == theta(**standard_params, option_type="call")
    assert greeks.rho == rho(**standard_params, option_type="call")


def test_rounded_applies_output_precision(standard_spec):
    full = calculate_greeks(standard_spec)
    rounded = full.rounded()

    assert rounded.price == round(full.price, 2)
    assert rounded.delta == round(full.delta, 3)
    assert rounded.gamma == round(full.gamma, 4)
    assert rounded == price_and_greeks(standard_spec)


def test_calculate_greeks_is_repeatable(standard_spec):
    """No hidden state: the same spec always yields the same record."""
    assert calculate_greeks(standard_spec) == calculate_greeks(standard_spec)


# ===========================
# Monotonicity Tests
# ===========================


def test_call_price_increases_with_spot():
    base_price = black_scholes_call(S=100, K=100, T=1.0, r=0.05, sigma=0.20)
    higher_price = black_scholes_call(S=105, K=100, T=1.0, r=0.05, sigma=0.20)
    assert higher_price > base_price


def test_call_price_increases_with_volatility():
    base_price = black_scholes_call(S=100, K=100, T=1.0, r=0.05, sigma=0.20)
    higher_price = black_scholes_call(S=100, K=100, T=1.0, r=0.05, sigma=0.25)
    assert higher_price > base_price


def test_put_price_increases_with_strike():
    base_price = black_scholes_put(S=100, K=100, T=1.0, r=0.05, sigma=0.20)
    higher_price = black_scholes_put(S=100, K=105, T=1.0, r=0.05, sigma=0.20)
    assert higher_price > base_price
