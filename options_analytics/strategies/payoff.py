"""
Payoff evaluation for stock and option positions.

Option legs are always valued at intrinsic value, before and at expiry
alike; no time value is priced in. Option P&L is scaled by the
100-share contract multiplier, stock P&L is not.
"""

from datetime import date
from typing import Sequence

from options_analytics.core.black_scholes import intrinsic_value
from options_analytics.utils.constants import (
    CONTRACT_MULTIPLIER,
    CURVE_RANGE_PERCENT,
    CURVE_STEPS,
    DAYS_PER_YEAR,
    PL_DECIMALS,
)
from options_analytics.utils.types import DomainError, Position, PricePoint


def time_to_expiry(expiry: date, as_of: date) -> float:
    """Years from ``as_of`` to ``expiry`` on a 365-day calendar, floored at zero."""
    return max(0.0, (expiry - as_of).days / DAYS_PER_YEAR)


def position_pl(position: Position, price: float, as_of: date) -> float:
    """
    Profit or loss of a single position at an underlying price.

    Args:
        position: Stock or option leg
        price: Underlying price to evaluate at
        as_of: Evaluation date

    Returns:
        Stock: (price - premium) × shares
        Option: (intrinsic - premium) × contracts × 100
    """
    if position.kind == "stock":
        return (price - position.premium) * position.quantity

    # Valued at intrinsic whatever the time_to_expiry(position.expiry, as_of)
    value = intrinsic_value(price, position.strike, position.option_type)
    return (value - position.premium) * position.quantity * CONTRACT_MULTIPLIER


def strategy_pl(
    positions: Sequence[Position], price_grid: Sequence[float], as_of: date
) -> list[PricePoint]:
    """
    Aggregate P&L of all positions at each grid price.

    Returns:
        One PricePoint per grid price, in grid order, P&L rounded to 2 decimals

    Raises:
        DomainError: If there are no positions or the grid is empty
    """
    if not positions:
        raise DomainError("Strategy must contain at least one position")
    if not price_grid:
        raise DomainError("Price grid must contain at least one price")

    return [
        PricePoint(
            price=price,
            pl=round(sum(position_pl(p, price, as_of) for p in positions), PL_DECIMALS),
        )
        for price in price_grid
    ]


def generate_price_range(
    center_price: float,
    percent_range: float = CURVE_RANGE_PERCENT,
    steps: int = CURVE_STEPS,
) -> list[float]:
    """
    Evenly spaced grid from center·(1 - f) to center·(1 + f) inclusive.

    Examples:
        >>> grid = generate_price_range(100, 0.2, 50)
        >>> len(grid), grid[0], grid[-1]
        (51, 80.0, 120.0)

    Returns:
        ``steps + 1`` prices, each rounded to 2 decimals

    Raises:
        DomainError: If the centre is not positive, steps < 1, or the
            range fraction is outside [0, 1)
    """
    if center_price <= 0:
        raise DomainError(f"Center price must be positive, got {center_price}")
    if steps < 1:
        raise DomainError(f"Price grid needs at least one step, got steps={steps}")
    if not 0 <= percent_range < 1:
        raise DomainError(f"Range fraction must be in [0, 1), got {percent_range}")

    min_price = center_price * (1 - percent_range)
    max_price = center_price * (1 + percent_range)
    step_size = (max_price - min_price) / steps

    return [round(min_price + i * step_size, PL_DECIMALS) for i in range(steps + 1)]
