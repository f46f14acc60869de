"""
Command-line interface for the options analytics engine.

This CLI provides access to:
- Option pricing and Greeks (Black-Scholes)
- Implied volatility solving
- Strategy payoff analysis
- The JSON tool-dispatch layer
"""

import json
import logging
from datetime import date

import click
from pydantic import ValidationError

from interfaces.tools import handle_tool_call, list_tools
from options_analytics.core.black_scholes import calculate_greeks, price_and_greeks
from options_analytics.solvers.implied_vol import SOLVER_METHODS, solve_implied_volatility
from options_analytics.strategies.analyzer import analyze_strategy
from options_analytics.strategies.builders import StrategyType, build_strategy
from options_analytics.strategies.payoff import time_to_expiry
from options_analytics.utils.constants import DEFAULT_RISK_FREE_RATE, IV_DECIMALS
from options_analytics.utils.types import OptionSpec

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _resolve_time(time, expiry, as_of):
    if time is not None:
        return time
    if expiry is None:
        raise click.UsageError("Provide either --time or --expiry")
    return time_to_expiry(expiry.date(), as_of.date() if as_of else date.today())


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def cli(log_level):
    """Options Analytics - Black-Scholes pricing, implied volatility and strategy payoffs."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, help="Time to expiry (years)")
@click.option("--expiry", type=ISO_DATE, help="Expiry date, instead of --time")
@click.option("--as-of", type=ISO_DATE, help="Valuation date for --expiry (default today)")
@click.option("--rate", "-r", type=float, default=DEFAULT_RISK_FREE_RATE, show_default=True)
@click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def price(spot, strike, time, expiry, as_of, rate, vol, type):
    """Calculate option price using Black-Scholes."""
    try:
        T = _resolve_time(time, expiry, as_of)
        spec = OptionSpec(S=spot, K=strike, T=T, sigma=vol, r=rate, option_type=type)
        click.echo(f"\n{type.capitalize()} Option Price: ${calculate_greeks(spec).price:.4f}")
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)


@cli.command()
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, help="Time to expiry (years)")
@click.option("--expiry", type=ISO_DATE, help="Expiry date, instead of --time")
@click.option("--as-of", type=ISO_DATE, help="Valuation date for --expiry (default today)")
@click.option("--rate", "-r", type=float, default=DEFAULT_RISK_FREE_RATE, show_default=True)
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def greeks(spot, strike, time, expiry, as_of, rate, vol, type):
    """Calculate price and all option Greeks."""
    try:
        T = _resolve_time(time, expiry, as_of)
        spec = OptionSpec(S=spot, K=strike, T=T, sigma=vol, r=rate, option_type=type)
        greeks_values = price_and_greeks(spec)
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        return

    click.echo(f"\nGreeks for {type.capitalize()} Option:")
    click.echo(f"  Price:  {greeks_values.price:>10.2f}")
    click.echo(f"  Delta:  {greeks_values.delta:>10.3f}")
    click.echo(f"  Gamma:  {greeks_values.gamma:>10.4f}")
    click.echo(f"  Theta:  {greeks_values.theta:>10.2f} (per day)")
    click.echo(f"  Vega:   {greeks_values.vega:>10.2f} (per 1% vol)")
    click.echo(f"  Rho:    {greeks_values.rho:>10.2f} (per 1% rate)")


@cli.command()
@click.option("--market-price", "-p", type=float, required=True, help="Market price")
@click.option("--spot", "-S", type=float, required=True, help="Spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)")
@click.option("--rate", "-r", type=float, default=DEFAULT_RISK_FREE_RATE, show_default=True)
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option("--method", "-m", type=click.Choice(SOLVER_METHODS), default="newton")
def iv(market_price, spot, strike, time, rate, type, method):
    """Solve for implied volatility."""
    try:
        result = solve_implied_volatility(
            market_price, spot, strike, time, rate, type, method=method
        )
    except ValueError as e:
        click.echo(f"\nError: {e}", err=True)
        return

    vol = round(result.volatility, IV_DECIMALS)
    click.echo(f"\nImplied Volatility: {vol:.4f} ({vol*100:.2f}%)")
    click.echo(f"Method: {result.method}")
    click.echo(f"Iterations: {result.iterations}")
    if not result.success:
        click.echo(f"Warning: {result.message}", err=True)


@cli.command()
@click.argument("strategy", type=click.Choice([t.value for t in StrategyType]))
@click.option("--spot", "-S", type=float, required=True, help="Spot price (grid centre)")
@click.option("--expiry", type=ISO_DATE, required=True, help="Expiry date (YYYY-MM-DD)")
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    help="Builder argument as name=value, e.g. -p strike=50 -p call_premium=3",
)
def analyze(strategy, spot, expiry, params):
    """Analyze a named strategy: max profit/loss, breakevens, net premium."""
    kwargs = {}
    for param in params:
        name, sep, value = param.partition("=")
        if not sep:
            raise click.BadParameter(f"expected name=value, got '{param}'", param_hint="--param")
        kwargs[name] = value

    try:
        kwargs = {k: v if k == "option_type" else float(v) for k, v in kwargs.items()}
        positions = build_strategy(strategy, expiry=expiry.date(), **kwargs)
        metrics = analyze_strategy(positions, spot, expiry.date())
    except (TypeError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        return

    click.echo(f"\n{strategy.replace('_', ' ').title()} ({len(positions)} legs)")
    click.echo(f"  Max Profit:   {metrics.max_profit}")
    click.echo(f"  Max Loss:     {metrics.max_loss}")
    click.echo(f"  Breakevens:   {', '.join(f'{p:.2f}' for p in metrics.breakeven_points) or 'none'}")
    click.echo(f"  Net Premium:  {metrics.net_premium:.2f}")


@cli.command()
@click.argument("name", required=False)
@click.option("--args", "-a", "raw_args", default="{}", help="Tool arguments as a JSON object")
def tool(name, raw_args):
    """Run a tool by name with JSON arguments; list tools when no name is given."""
    if name is None:
        for entry in list_tools():
            click.echo(f"{entry['name']:<30} {entry['description']}")
        return

    try:
        result = handle_tool_call(name, json.loads(raw_args))
    except (ValidationError, ValueError) as e:
        click.echo(f"\nError: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(result, indent=2))


if __name__ == "__main__":
    cli()
