"""
Tool-dispatch adapter for the options analytics engine.

Each tool pairs a pydantic input model with a handler. Arguments arrive as
JSON-style dicts with camelCase keys, are validated against the model, run
through the engine, and come back as JSON-ready dicts. Position legs use an
explicit tagged union on ``type`` ("stock" | "option").
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from options_analytics.core.black_scholes import price_and_greeks
from options_analytics.solvers.implied_vol import solve_implied_volatility
from options_analytics.strategies import builders
from options_analytics.strategies.analyzer import analyze_strategy
from options_analytics.strategies.payoff import generate_price_range, strategy_pl
from options_analytics.utils.constants import (
    CURVE_RANGE_PERCENT,
    CURVE_STEPS,
    DEFAULT_RISK_FREE_RATE,
    IV_DECIMALS,
)
from options_analytics.utils.types import OptionSpec, Position, PricePoint, StrategyMetrics

logger = logging.getLogger(__name__)


class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# =============================================================================
# Input schemas
# =============================================================================


class GreeksInput(ToolInput):
    """Calculate option Greeks (Delta, Gamma, Theta, Vega, Rho) using Black-Scholes."""
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    strike_price: float = Field(..., alias="strikePrice", description="Option strike price")
    time_to_expiry: float = Field(
        ..., alias="timeToExpiry", description="Time to expiration in years (e.g., 0.25 for 3 months)"
    )
    volatility: float = Field(..., description="Implied volatility as decimal (e.g., 0.25 for 25%)")
    option_type: Literal["call", "put"] = Field(..., alias="optionType", description="Option type")
    risk_free_rate: float = Field(
        DEFAULT_RISK_FREE_RATE, alias="riskFreeRate", description="Risk-free rate as decimal"
    )


class ImpliedVolatilityInput(ToolInput):
    """Calculate implied volatility from option price."""
    option_price: float = Field(..., alias="optionPrice", description="Current option price")
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    strike_price: float = Field(..., alias="strikePrice", description="Option strike price")
    time_to_expiry: float = Field(..., alias="timeToExpiry", description="Time to expiration in years")
    option_type: Literal["call", "put"] = Field(..., alias="optionType", description="Option type")
    risk_free_rate: float = Field(
        DEFAULT_RISK_FREE_RATE, alias="riskFreeRate", description="Risk-free rate as decimal"
    )


class CoveredCallInput(ToolInput):
    """Analyze a covered call strategy (long stock + short call)."""
    stock_price: float = Field(..., alias="stockPrice", description="Stock purchase price")
    call_strike: float = Field(..., alias="callStrike", description="Call option strike price")
    call_premium: float = Field(
        ..., alias="callPremium", description="Premium received for selling the call"
    )
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class VerticalSpreadInput(ToolInput):
    """Analyze a bull call spread or bear put spread."""
    spread_type: Literal["bull_call", "bear_put"] = Field(
        ..., alias="spreadType", description="Type of vertical spread"
    )
    lower_strike: float = Field(..., alias="lowerStrike", description="Lower strike price")
    lower_premium: float = Field(
        ..., alias="lowerPremium", description="Premium for lower strike option"
    )
    upper_strike: float = Field(..., alias="upperStrike", description="Upper strike price")
    upper_premium: float = Field(
        ..., alias="upperPremium", description="Premium for upper strike option"
    )
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class IronCondorInput(ToolInput):
    """Analyze an iron condor strategy."""
    put_lower_strike: float = Field(..., alias="putLowerStrike", description="Lower put strike (long)")
    put_lower_premium: float = Field(..., alias="putLowerPremium", description="Premium for lower put")
    put_upper_strike: float = Field(..., alias="putUpperStrike", description="Upper put strike (short)")
    put_upper_premium: float = Field(..., alias="putUpperPremium", description="Premium for upper put")
    call_lower_strike: float = Field(
        ..., alias="callLowerStrike", description="Lower call strike (short)"
    )
    call_lower_premium: float = Field(
        ..., alias="callLowerPremium", description="Premium for lower call"
    )
    call_upper_strike: float = Field(
        ..., alias="callUpperStrike", description="Upper call strike (long)"
    )
    call_upper_premium: float = Field(
        ..., alias="callUpperPremium", description="Premium for upper call"
    )
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class StraddleInput(ToolInput):
    """Analyze a long straddle strategy (long call + long put at same strike)."""
    strike: float = Field(..., description="Strike price for both options")
    call_premium: float = Field(..., alias="callPremium", description="Premium paid for call")
    put_premium: float = Field(..., alias="putPremium", description="Premium paid for put")
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class StrangleInput(ToolInput):
    """Analyze a long strangle strategy (long lower put + long upper call)."""
    put_strike: float = Field(..., alias="putStrike", description="Put strike (lower)")
    put_premium: float = Field(..., alias="putPremium", description="Premium paid for put")
    call_strike: float = Field(..., alias="callStrike", description="Call strike (upper)")
    call_premium: float = Field(..., alias="callPremium", description="Premium paid for call")
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class ButterflyInput(ToolInput):
    """Analyze a butterfly spread (long lower, short 2x middle, long upper)."""
    lower_strike: float = Field(..., alias="lowerStrike", description="Lower strike (long)")
    lower_premium: float = Field(..., alias="lowerPremium", description="Premium for lower strike")
    middle_strike: float = Field(..., alias="middleStrike", description="Middle strike (short 2x)")
    middle_premium: float = Field(..., alias="middlePremium", description="Premium for middle strike")
    upper_strike: float = Field(..., alias="upperStrike", description="Upper strike (long)")
    upper_premium: float = Field(..., alias="upperPremium", description="Premium for upper strike")
    option_type: Literal["call", "put"] = Field(
        "call", alias="optionType", description="Option type for all three strikes"
    )
    spot_price: float = Field(..., alias="spotPrice", description="Current stock price")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")


class StockLegInput(ToolInput):
    type: Literal["stock"]
    premium: float = Field(..., description="Purchase price per share")
    quantity: float = Field(..., description="Shares, positive for long, negative for short")

    def to_position(self) -> Position:
        return Position(kind="stock", premium=self.premium, quantity=self.quantity)


class OptionLegInput(ToolInput):
    type: Literal["option"]
    option_type: Literal["call", "put"] = Field(..., alias="optionType")
    strike: float
    premium: float = Field(..., description="Premium per share")
    quantity: float = Field(..., description="Contracts, positive for long, negative for short")
    expiry: date = Field(..., description="Expiration date (YYYY-MM-DD)")

    def to_position(self) -> Position:
        return Position(
            kind="option",
            option_type=self.option_type,
            strike=self.strike,
            premium=self.premium,
            quantity=self.quantity,
            expiry=self.expiry,
        )


PositionInput = Annotated[Union[StockLegInput, OptionLegInput], Field(discriminator="type")]


class PLChartInput(ToolInput):
    """Calculate profit/loss data points for charting a custom options position."""
    positions: list[PositionInput] = Field(..., min_length=1, description="Array of position objects")
    spot_price: float = Field(
        ..., alias="spotPrice", description="Current stock price (center of price range)"
    )
    price_range_percent: float = Field(
        CURVE_RANGE_PERCENT,
        alias="priceRangePercent",
        description="Price range as decimal (default 0.2 = 20%)",
    )
    as_of_date: Optional[date] = Field(
        None,
        alias="asOfDate",
        description="Evaluation date (defaults to the first option leg's expiry)",
    )


# =============================================================================
# Output serialization
# =============================================================================


def _curve_to_dicts(pl_data: list[PricePoint]) -> list[dict[str, float]]:
    return [{"price": point.price, "pl": point.pl} for point in pl_data]


def metrics_to_dict(metrics: StrategyMetrics) -> dict[str, Any]:
    """Serialize StrategyMetrics with the camelCase keys used on the wire."""
    return {
        "maxProfit": metrics.max_profit,
        "maxLoss": metrics.max_loss,
        "breakevenPoints": list(metrics.breakeven_points),
        "netPremium": metrics.net_premium,
        "plData": _curve_to_dicts(metrics.pl_data),
    }


# =============================================================================
# Handlers
# =============================================================================


def _calculate_greeks(args: GreeksInput) -> dict[str, Any]:
    spec = OptionSpec(
        S=args.spot_price,
        K=args.strike_price,
        T=args.time_to_expiry,
        sigma=args.volatility,
        r=args.risk_free_rate,
        option_type=args.option_type,
    )
    greeks = price_and_greeks(spec)
    return {
        "price": greeks.price,
        "delta": greeks.delta,
        "gamma": greeks.gamma,
        "theta": greeks.theta,
        "vega": greeks.vega,
        "rho": greeks.rho,
    }


def _calculate_implied_volatility(args: ImpliedVolatilityInput) -> dict[str, Any]:
    result = solve_implied_volatility(
        args.option_price,
        S=args.spot_price,
        K=args.strike_price,
        T=args.time_to_expiry,
        r=args.risk_free_rate,
        option_type=args.option_type,
    )
    return {
        "impliedVolatility": round(result.volatility, IV_DECIMALS),
        "converged": result.success,
        "iterations": result.iterations,
    }


def _analyze_covered_call(args: CoveredCallInput) -> dict[str, Any]:
    positions = builders.covered_call(
        args.stock_price, args.call_strike, args.call_premium, args.expiry
    )
    return metrics_to_dict(analyze_strategy(positions, args.stock_price, args.expiry))


def _analyze_vertical_spread(args: VerticalSpreadInput) -> dict[str, Any]:
    build = builders.bull_call_spread if args.spread_type == "bull_call" else builders.bear_put_spread
    positions = build(
        args.lower_strike, args.lower_premium, args.upper_strike, args.upper_premium, args.expiry
    )
    return metrics_to_dict(analyze_strategy(positions, args.spot_price, args.expiry))


def _analyze_iron_condor(args: IronCondorInput) -> dict[str, Any]:
    positions = builders.iron_condor(
        args.put_lower_strike,
        args.put_lower_premium,
        args.put_upper_strike,
        args.put_upper_premium,
        args.call_lower_strike,
        args.call_lower_premium,
        args.call_upper_strike,
        args.call_upper_premium,
        args.expiry,
    )
    return metrics_to_dict(analyze_strategy(positions, args.spot_price, args.expiry))


def _analyze_straddle(args: StraddleInput) -> dict[str, Any]:
    positions = builders.long_straddle(args.strike, args.call_premium, args.put_premium, args.expiry)
    return metrics_to_dict(analyze_strategy(positions, args.spot_price, args.expiry))


def _analyze_strangle(args: StrangleInput) -> dict[str, Any]:
    positions = builders.long_strangle(
        args.put_strike, args.put_premium, args.call_strike, args.call_premium, args.expiry
    )
    return metrics_to_dict(analyze_strategy(positions, args.spot_price, args.expiry))


def _analyze_butterfly(args: ButterflyInput) -> dict[str, Any]:
    positions = builders.butterfly_spread(
        args.lower_strike,
        args.lower_premium,
        args.middle_strike,
        args.middle_premium,
        args.upper_strike,
        args.upper_premium,
        args.expiry,
        option_type=args.option_type,
    )
    return metrics_to_dict(analyze_strategy(positions, args.spot_price, args.expiry))


def _calculate_pl_chart(args: PLChartInput) -> dict[str, Any]:
    positions = [leg.to_position() for leg in args.positions]

    as_of = args.as_of_date
    if as_of is None:
        expiries = [p.expiry for p in positions if p.kind == "option"]
        # Stock-only books have no time dependence; any date will do
        as_of = expiries[0] if expiries else date.today()

    price_range = generate_price_range(args.spot_price, args.price_range_percent, CURVE_STEPS)
    return {
        "priceRange": price_range,
        "plData": _curve_to_dicts(strategy_pl(positions, price_range, as_of)),
    }


# =============================================================================
# Registry and dispatch
# =============================================================================


@dataclass(frozen=True)
class Tool:
    name: str
    input_model: type[ToolInput]
    handler: Callable[[Any], dict[str, Any]]

    @property
    def description(self) -> str:
        return (self.input_model.__doc__ or "").strip()

    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(by_alias=True),
        }


TOOLS: dict[str, Tool] = {
    tool.name: tool
    for tool in (
        Tool("calculate_greeks", GreeksInput, _calculate_greeks),
        Tool("calculate_implied_volatility", ImpliedVolatilityInput, _calculate_implied_volatility),
        Tool("analyze_covered_call", CoveredCallInput, _analyze_covered_call),
        Tool("analyze_vertical_spread", VerticalSpreadInput, _analyze_vertical_spread),
        Tool("analyze_iron_condor", IronCondorInput, _analyze_iron_condor),
        Tool("analyze_straddle", StraddleInput, _analyze_straddle),
        Tool("analyze_strangle", StrangleInput, _analyze_strangle),
        Tool("analyze_butterfly", ButterflyInput, _analyze_butterfly),
        Tool("calculate_pl_chart", PLChartInput, _calculate_pl_chart),
    )
}


def list_tools() -> list[dict[str, Any]]:
    """Tool catalogue: name, description and JSON input schema for each tool."""
    return [tool.schema() for tool in TOOLS.values()]


def handle_tool_call(name: str, args: dict[str, Any]) -> dict[str, Any]:
    """
    Validate arguments for a tool and run it.

    Raises:
        ValueError: If the tool name is unknown
        pydantic.ValidationError: If the arguments don't match the tool's schema
        DomainError: If validated inputs are outside the model's domain
    """
    tool = TOOLS.get(name)
    if tool is None:
        raise ValueError(f"Unknown tool: {name}")

    logger.debug("Dispatching tool %s", name)
    parsed = tool.input_model.model_validate(args)
    return tool.handler(parsed)
