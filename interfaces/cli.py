"""
Command-line interface for the option sweep toolkit.

This CLI provides access to:
- European and perpetual American option pricing
- Put-call parity checks
- Exact and finite-difference Greeks
- Spot sweeps and single-parameter sweep matrices
"""

import logging

import click
import pandas as pd

from optsweep.analysis.greeks import GreeksAnalyzer
from optsweep.analysis.sweep import ParameterSweepMatrix, ParameterVector, mesh
from optsweep.core.european import EuropeanOption
from optsweep.core.perpetual import PerpetualAmericanOption
from optsweep.utils.constants import EUROPEAN_SLOTS
from optsweep.utils.types import OptionSide


def european_options(func):
    """Shared contract options for European commands."""
    options = [
        click.option("--spot", "-S", type=float, required=True, help="Spot price"),
        click.option("--strike", "-K", type=float, required=True, help="Strike price"),
        click.option("--time", "-T", type=float, required=True, help="Time to expiry (years)"),
        click.option("--rate", "-r", type=float, required=True, help="Risk-free rate"),
        click.option("--carry", "-b", type=float, default=None, help="Cost of carry (defaults to rate)"),
        click.option("--vol", "-v", type=float, required=True, help="Volatility (annualized)"),
        click.option("--div", "-q", type=float, default=0.0, help="Dividend yield"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _european(strike, time, rate, carry, vol, div, side="call") -> EuropeanOption:
    carry = rate if carry is None else carry
    return EuropeanOption(K=strike, T=time, r=rate, b=carry, sig=vol, q=div, side=OptionSide(side))


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
def cli(log_level):
    """Option Sweep Toolkit - closed-form pricing, Greeks and parameter sweeps."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@cli.command()
@european_options
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
def price(spot, strike, time, rate, carry, vol, div, type):
    """Price a European option with the generalized Black-Scholes formula."""
    option = _european(strike, time, rate, carry, vol, div, type)
    click.echo(f"\n{option.describe()}")
    click.echo(f"{type.capitalize()} Option Price: {option.price(spot):.6f}")
    click.echo(f"Parity-implied {option.side.opposite().value} price: {option.pcp_price(spot):.6f}")


@cli.command()
@european_options
@click.option("--tolerance", type=float, default=1e-8, help="Parity tolerance")
def parity(spot, strike, time, rate, carry, vol, div, tolerance):
    """Check put-call parity for both sides of a European option."""
    report = _european(strike, time, rate, carry, vol, div).parity_report(spot, tolerance)

    click.echo(f"\nCall price: {report.call_price:.6f}  (parity put: {report.call_pcp_price:.6f})")
    click.echo(report.call_internal.message)
    click.echo(f"Put price:  {report.put_price:.6f}  (parity call: {report.put_pcp_price:.6f})")
    click.echo(report.put_internal.message)
    click.echo(report.call_against_put.message)
    click.echo(report.put_against_call.message)

    for check in (report.call_internal, report.put_internal,
                  report.call_against_put, report.put_against_call):
        for violation in check.violations:
            click.echo(f"  {violation}", err=True)


@cli.command()
@european_options
@click.option("--step", "-h", "h", type=float, default=None, help="Finite-difference step")
def greeks(spot, strike, time, rate, carry, vol, div, h):
    """Calculate call/put delta and gamma."""
    analyzer = GreeksAnalyzer(_european(strike, time, rate, carry, vol, div))
    result = analyzer.sweep_spot([spot], h)

    label = "Exact" if h is None else f"Approximate (h={h})"
    click.echo(f"\n{label} Greeks at S={spot}:")
    click.echo(f"  Call Delta: {result.call_delta[0]:>12.8f}")
    click.echo(f"  Put Delta:  {result.put_delta[0]:>12.8f}")
    click.echo(f"  Gamma:      {result.gamma[0]:>12.8f}")


@cli.command()
@european_options
@click.option("--iterations", "-n", type=int, default=3, help="Rounds of h -> h²")
def compare(spot, strike, time, rate, carry, vol, div, iterations):
    """Compare exact and finite-difference Greeks as h shrinks."""
    analyzer = GreeksAnalyzer(_european(strike, time, rate, carry, vol, div))
    rows = [
        {
            "h": c.h,
            "call_delta_error": c.call_delta_error,
            "call_gamma_error": c.call_gamma_error,
            "put_delta_error": c.put_delta_error,
            "put_gamma_error": c.put_gamma_error,
        }
        for c in analyzer.compare_at(spot, iterations)
    ]
    click.echo(pd.DataFrame(rows).to_string(index=False))


@cli.command()
@click.option("--style", type=click.Choice(["european", "perpetual"]), default="european")
@click.option("--spot", "-S", type=float, required=True, help="Base spot price")
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--time", "-T", type=float, default=None, help="Time to expiry (European only)")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--carry", "-b", type=float, default=None, help="Cost of carry (defaults to rate)")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--div", "-q", type=float, default=0.0, help="Dividend yield")
@click.option("--param", "-p", type=click.Choice(EUROPEAN_SLOTS), default="spot",
              help="Parameter to sweep")
@click.option("--end", "-e", type=float, required=True, help="Value reached on the last row")
@click.option("--steps", "-n", type=int, default=5, help="Number of increments")
@click.option("--greeks", "with_greeks", is_flag=True, help="Report delta/gamma instead of prices")
def sweep(style, spot, strike, time, rate, carry, vol, div, param, end, steps, with_greeks):
    """Sweep one parameter linearly and price every row."""
    carry = rate if carry is None else carry

    if style == "european":
        if time is None:
            raise click.BadParameter("--time is required for European options", param_hint="--time")
        option = EuropeanOption(K=strike, T=time, r=rate, b=carry, sig=vol, q=div)
    else:
        option = PerpetualAmericanOption(K=strike, r=rate, b=carry, sig=vol, q=div)

    try:
        index = ParameterVector.from_option(spot, option).index_of(param)
    except KeyError:
        raise click.BadParameter(f"{style} options have no {param!r} input", param_hint="--param")

    try:
        matrix = ParameterSweepMatrix(option, spot, index, end, steps)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--steps")

    frame = matrix.to_frame()
    if with_greeks:
        if style != "european":
            raise click.UsageError("Greeks sweeps are only available for European options")
        result = matrix.price_all_greeks().to_frame().drop(columns="spot")
    else:
        result = matrix.price_all().to_frame()

    click.echo(f"\nSweeping {param} from {matrix.row(0)[index]} to {end} in {steps} steps:")
    click.echo(pd.concat([frame, result], axis=1).to_string(index=False))


@cli.command()
@click.option("--strike", "-K", type=float, required=True, help="Strike price")
@click.option("--rate", "-r", type=float, required=True, help="Risk-free rate")
@click.option("--carry", "-b", type=float, required=True, help="Cost of carry")
@click.option("--vol", "-v", type=float, required=True, help="Volatility")
@click.option("--div", "-q", type=float, default=0.0, help="Dividend yield")
@click.option("--start", type=float, required=True, help="First spot price")
@click.option("--end", type=float, default=None, help="Last spot price (single spot if omitted)")
@click.option("--steps", "-n", type=int, default=5, help="Number of increments")
def perpetual(strike, rate, carry, vol, div, start, end, steps):
    """Price a perpetual American call and put over a spot range."""
    option = PerpetualAmericanOption(K=strike, r=rate, b=carry, sig=vol, q=div)
    try:
        spots = [start] if end is None else mesh(start, end, steps)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--steps")
    click.echo(f"\n{option.describe()}")
    click.echo(option.sweep_spot(spots).to_frame().to_string(index=False))


if __name__ == "__main__":
    cli()
