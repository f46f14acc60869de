"""
Strategy analysis over a price grid.

The analyzer scans a ±30% grid (100 steps) around the spot price once and
derives the extremes, the breakeven crossings and the net premium. All
figures are bounded by the grid: an extreme found at the edge of the grid
is reported as a number even when the true risk is open-ended, and a
breakeven is the first grid price past the zero crossing, not an
interpolated root.
"""

import logging
import math
from datetime import date
from typing import Sequence

from options_analytics.strategies.payoff import generate_price_range, strategy_pl
from options_analytics.utils.constants import (
    ANALYSIS_RANGE_PERCENT,
    ANALYSIS_STEPS,
    CONTRACT_MULTIPLIER,
    PL_DECIMALS,
    UNBOUNDED,
)
from options_analytics.utils.types import (
    Bound,
    DomainError,
    Position,
    PricePoint,
    StrategyMetrics,
)

logger = logging.getLogger(__name__)


def net_premium(positions: Sequence[Position]) -> float:
    """
    Signed premium of the option legs: positive is a net debit, negative a net credit.

    Stock legs do not contribute.
    """
    total = sum(
        p.premium * p.quantity * CONTRACT_MULTIPLIER for p in positions if p.kind == "option"
    )
    return round(total, PL_DECIMALS)


def find_breakevens(pl_data: Sequence[PricePoint]) -> list[float]:
    """
    Grid prices where P&L changes sign, in scan order.

    A crossing is strictly negative → non-negative, or strictly
    positive → non-positive, between neighbouring points; the later
    point's price is reported.
    """
    breakevens = []
    for prev, point in zip(pl_data, pl_data[1:]):
        if (prev.pl < 0 <= point.pl) or (prev.pl > 0 >= point.pl):
            breakevens.append(round(point.price, PL_DECIMALS))
    return breakevens


def _bound(value: float) -> Bound:
    if math.isinf(value):
        return UNBOUNDED
    return round(value, PL_DECIMALS)


def analyze_strategy(
    positions: Sequence[Position],
    spot_price: float,
    expiry: date,
    percent_range: float = ANALYSIS_RANGE_PERCENT,
    steps: int = ANALYSIS_STEPS,
) -> StrategyMetrics:
    """
    Analyze a strategy and return its key metrics.

    Args:
        positions: Strategy legs (at least one)
        spot_price: Centre of the analysis grid
        expiry: Evaluation date for the payoff curve
        percent_range: Grid half-width as a fraction of spot
        steps: Number of grid intervals

    Returns:
        StrategyMetrics with max profit, max loss, breakevens, net premium
        and the payoff curve

    Raises:
        DomainError: On an empty strategy or an invalid grid

    Example:
        >>> from options_analytics.strategies.builders import bull_call_spread
        >>> legs = bull_call_spread(100, 5, 110, 2, date(2026, 1, 16))
        >>> metrics = analyze_strategy(legs, 105, date(2026, 1, 16))
        >>> metrics.max_profit, metrics.max_loss, metrics.net_premium
        (700.0, -300.0, 300.0)
    """
    if not positions:
        raise DomainError("Strategy must contain at least one position")

    price_range = generate_price_range(spot_price, percent_range, steps)
    pl_data = strategy_pl(positions, price_range, expiry)

    max_profit = -math.inf
    max_loss = math.inf
    for point in pl_data:
        max_profit = max(max_profit, point.pl)
        max_loss = min(max_loss, point.pl)

    metrics = StrategyMetrics(
        max_profit=_bound(max_profit),
        max_loss=_bound(max_loss),
        breakeven_points=find_breakevens(pl_data),
        net_premium=net_premium(positions),
        pl_data=pl_data,
    )
    logger.debug(
        "Analyzed %d-leg strategy around %.2f: max profit %s, max loss %s, breakevens %s",
        len(positions),
        spot_price,
        metrics.max_profit,
        metrics.max_loss,
        metrics.breakeven_points,
    )
    return metrics
