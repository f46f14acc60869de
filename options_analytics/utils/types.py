"""
Data types and structures for options analytics.

This module defines the immutable records that flow through the engine:
option inputs, Greeks, solver results, strategy positions and the
metrics produced by strategy analysis.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Literal, Optional, Union

from options_analytics.utils.constants import (
    DEFAULT_RISK_FREE_RATE,
    DELTA_DECIMALS,
    GAMMA_DECIMALS,
    PRICE_DECIMALS,
    RHO_DECIMALS,
    THETA_DECIMALS,
    VEGA_DECIMALS,
)

OptionType = Literal["call", "put"]
PositionKind = Literal["stock", "option"]
Bound = Union[float, Literal["unbounded"]]


class DomainError(ValueError):
    """Raised when numeric inputs fall outside the model's valid domain."""


@dataclass(frozen=True)
class OptionSpec:
    """
    Immutable container for Black-Scholes inputs.

    Attributes:
        S: Current spot price of the underlying asset
        K: Strike price
        T: Time to expiration in years (0 means expired)
        sigma: Annualized volatility, must be positive when T > 0
        r: Risk-free interest rate (annualized, continuous compounding)
        option_type: Either "call" or "put"
    """
    S: float
    K: float
    T: float
    sigma: float
    r: float = DEFAULT_RISK_FREE_RATE
    option_type: OptionType = "call"

    def __post_init__(self) -> None:
        """Validate parameters are inside the pricing domain."""
        if self.S <= 0:
            raise DomainError(f"Spot price must be positive, got S={self.S}")
        if self.K <= 0:
            raise DomainError(f"Strike price must be positive, got K={self.K}")
        if self.T < 0:
            raise DomainError(f"Time to expiration must be non-negative, got T={self.T}")
        if self.T > 0 and self.sigma <= 0:
            raise DomainError(
                f"Volatility must be positive before expiry, got sigma={self.sigma} with T={self.T}"
            )
        if self.option_type not in ("call", "put"):
            raise DomainError(f"Option type must be 'call' or 'put', got {self.option_type}")

    def with_volatility(self, sigma: float) -> "OptionSpec":
        """Return a copy of this spec priced at a different volatility."""
        return replace(self, sigma=sigma)


@dataclass(frozen=True)
class Greeks:
    """
    Theoretical price and sensitivities of a European option.

    Attributes:
        price: Theoretical option price per share
        delta: ∂V/∂S
        gamma: ∂²V/∂S²
        theta: ∂V/∂t, per calendar day
        vega: ∂V/∂σ, per one percentage point of volatility
        rho: ∂V/∂r, per one percentage point of rate
    """
    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    def rounded(self) -> "Greeks":
        """Presentation copy with the fixed output precision applied."""
        return Greeks(
            price=round(self.price, PRICE_DECIMALS),
            delta=round(self.delta, DELTA_DECIMALS),
            gamma=round(self.gamma, GAMMA_DECIMALS),
            theta=round(self.theta, THETA_DECIMALS),
            vega=round(self.vega, VEGA_DECIMALS),
            rho=round(self.rho, RHO_DECIMALS),
        )


@dataclass
class ImpliedVolResult:
    """
    Result from implied volatility solver.

    Attributes:
        volatility: Solved implied volatility (annualized)
        iterations: Number of iterations used
        method: Method used ('newton-raphson' or 'brent')
        success: Whether the solver met its price tolerance
        message: Additional information about convergence
    """
    volatility: float
    iterations: int
    method: Literal["newton-raphson", "brent"]
    success: bool
    message: str = ""


@dataclass(frozen=True)
class Position:
    """
    One leg of a strategy.

    The sign of ``quantity`` is the only direction indicator: positive is
    long, negative is short. For options it counts contracts, for stock it
    counts shares.

    Attributes:
        kind: "stock" or "option"
        premium: Entry price per share (purchase price for stock)
        quantity: Signed contract or share count
        option_type: "call" or "put" (options only)
        strike: Strike price (options only)
        expiry: Expiration date (options only)
    """
    kind: PositionKind
    premium: float
    quantity: float
    option_type: Optional[OptionType] = None
    strike: Optional[float] = None
    expiry: Optional[date] = None

    def __post_init__(self) -> None:
        if self.kind not in ("stock", "option"):
            raise DomainError(f"Position kind must be 'stock' or 'option', got {self.kind}")
        if self.kind == "option":
            if self.option_type not in ("call", "put"):
                raise DomainError(f"Option type must be 'call' or 'put', got {self.option_type}")
            if self.strike is None:
                raise DomainError("Option position requires a strike")
            if self.expiry is None:
                raise DomainError("Option position requires an expiry date")

    @property
    def is_long(self) -> bool:
        return self.quantity > 0

    @property
    def is_short(self) -> bool:
        return self.quantity < 0


@dataclass(frozen=True)
class PricePoint:
    """Profit and loss of a strategy at one underlying price."""
    price: float
    pl: float


@dataclass
class StrategyMetrics:
    """
    Summary of a strategy's payoff over the analysis grid.

    Attributes:
        max_profit: Largest P&L seen on the grid, or "unbounded"
        max_loss: Smallest P&L seen on the grid, or "unbounded"
        breakeven_points: Grid prices where P&L changes sign, in scan order
        net_premium: Signed option premium (positive debit, negative credit)
        pl_data: Payoff curve the metrics were derived from
    """
    max_profit: Bound
    max_loss: Bound
    breakeven_points: list[float]
    net_premium: float
    pl_data: list[PricePoint] = field(default_factory=list)
