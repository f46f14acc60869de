"""
Strategy builders: expand named option strategies into position lists.

Builders are pure functions of their numeric arguments. The same inputs
always give the same legs in the same order. Strike ordering is not
checked: passing strikes out of order yields a strategy with inverted
economics rather than an error.

Premiums are per share; quantities are signed contract counts for
options (+ long, - short) and share counts for stock.
"""

from datetime import date
from enum import Enum
from typing import Callable

from options_analytics.utils.types import DomainError, OptionType, Position


class StrategyType(Enum):
    """Known option strategy templates"""
    LONG_CALL = "long_call"
    LONG_PUT = "long_put"
    COVERED_CALL = "covered_call"
    BULL_CALL_SPREAD = "bull_call_spread"
    BEAR_PUT_SPREAD = "bear_put_spread"
    LONG_STRADDLE = "long_straddle"
    LONG_STRANGLE = "long_strangle"
    IRON_CONDOR = "iron_condor"
    BUTTERFLY_SPREAD = "butterfly_spread"


def _option(
    option_type: OptionType, strike: float, premium: float, quantity: float, expiry: date
) -> Position:
    return Position(
        kind="option",
        option_type=option_type,
        strike=strike,
        premium=premium,
        quantity=quantity,
        expiry=expiry,
    )


def long_call(strike: float, premium: float, expiry: date) -> list[Position]:
    """Buy one call."""
    return [_option("call", strike, premium, 1, expiry)]


def long_put(strike: float, premium: float, expiry: date) -> list[Position]:
    """Buy one put."""
    return [_option("put", strike, premium, 1, expiry)]


def covered_call(
    stock_price: float, call_strike: float, call_premium: float, expiry: date
) -> list[Position]:
    """
    Long 100 shares bought at ``stock_price`` plus one short call.

    The stock leg's premium is its purchase price.
    """
    return [
        Position(kind="stock", premium=stock_price, quantity=100),
        _option("call", call_strike, call_premium, -1, expiry),
    ]


def bull_call_spread(
    lower_strike: float,
    lower_premium: float,
    upper_strike: float,
    upper_premium: float,
    expiry: date,
) -> list[Position]:
    """Long the lower-strike call, short the upper-strike call."""
    return [
        _option("call", lower_strike, lower_premium, 1, expiry),
        _option("call", upper_strike, upper_premium, -1, expiry),
    ]


def bear_put_spread(
    lower_strike: float,
    lower_premium: float,
    upper_strike: float,
    upper_premium: float,
    expiry: date,
) -> list[Position]:
    """Long the upper-strike put, short the lower-strike put."""
    return [
        _option("put", upper_strike, upper_premium, 1, expiry),
        _option("put", lower_strike, lower_premium, -1, expiry),
    ]


def long_straddle(
    strike: float, call_premium: float, put_premium: float, expiry: date
) -> list[Position]:
    """Long call and long put at the same strike."""
    return [
        _option("call", strike, call_premium, 1, expiry),
        _option("put", strike, put_premium, 1, expiry),
    ]


def long_strangle(
    put_strike: float,
    put_premium: float,
    call_strike: float,
    call_premium: float,
    expiry: date,
) -> list[Position]:
    """Long the lower-strike put and the upper-strike call."""
    return [
        _option("put", put_strike, put_premium, 1, expiry),
        _option("call", call_strike, call_premium, 1, expiry),
    ]


def iron_condor(
    put_lower: float,
    put_lower_premium: float,
    put_upper: float,
    put_upper_premium: float,
    call_lower: float,
    call_lower_premium: float,
    call_upper: float,
    call_upper_premium: float,
    expiry: date,
) -> list[Position]:
    """
    Bull put spread plus bear call spread, four legs in fixed order:

    1. long put at ``put_lower``
    2. short put at ``put_upper``
    3. short call at ``call_lower``
    4. long call at ``call_upper``
    """
    return [
        # Bull put spread (credit)
        _option("put", put_lower, put_lower_premium, 1, expiry),
        _option("put", put_upper, put_upper_premium, -1, expiry),
        # Bear call spread (credit)
        _option("call", call_lower, call_lower_premium, -1, expiry),
        _option("call", call_upper, call_upper_premium, 1, expiry),
    ]


def butterfly_spread(
    lower_strike: float,
    lower_premium: float,
    middle_strike: float,
    middle_premium: float,
    upper_strike: float,
    upper_premium: float,
    expiry: date,
    option_type: OptionType = "call",
) -> list[Position]:
    """Long one lower, short two middle, long one upper; one option type throughout."""
    return [
        _option(option_type, lower_strike, lower_premium, 1, expiry),
        _option(option_type, middle_strike, middle_premium, -2, expiry),
        _option(option_type, upper_strike, upper_premium, 1, expiry),
    ]


STRATEGY_BUILDERS: dict[StrategyType, Callable[..., list[Position]]] = {
    StrategyType.LONG_CALL: long_call,
    StrategyType.LONG_PUT: long_put,
    StrategyType.COVERED_CALL: covered_call,
    StrategyType.BULL_CALL_SPREAD: bull_call_spread,
    StrategyType.BEAR_PUT_SPREAD: bear_put_spread,
    StrategyType.LONG_STRADDLE: long_straddle,
    StrategyType.LONG_STRANGLE: long_strangle,
    StrategyType.IRON_CONDOR: iron_condor,
    StrategyType.BUTTERFLY_SPREAD: butterfly_spread,
}


def build_strategy(name: str, **kwargs) -> list[Position]:
    """
    Build a strategy by its registered name.

    Example:
        >>> legs = build_strategy(
        ...     "long_straddle", strike=50, call_premium=3, put_premium=2,
        ...     expiry=date(2026, 1, 16),
        ... )
        >>> [leg.option_type for leg in legs]
        ['call', 'put']

    Raises:
        DomainError: If the name is not a known strategy
    """
    try:
        strategy_type = StrategyType(name)
    except ValueError:
        known = ", ".join(t.value for t in StrategyType)
        raise DomainError(f"Unknown strategy '{name}'. Known strategies: {known}") from None

    return STRATEGY_BUILDERS[strategy_type](**kwargs)
