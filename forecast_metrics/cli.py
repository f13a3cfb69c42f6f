"""
Command-line front end for the forecast metrics guide.

Usage:
    forecast-metrics wis 1500 --width 80
    forecast-metrics pis 1500 1600 2400 --level 95
    forecast-metrics coverage --sample-size 20 --seed 3
    forecast-metrics figures -d figures/
"""

import logging

import click

from . import plotting, sample_data
from .config import Config
from .evaluation import score_forecast_table
from .explorer import CoveragePanel, wis_panel
from .intervals import alpha_from_coverage
from .validation import ValidationError
from .weighted_interval_score import calculate_pis, format_half_up


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose):
    """Forecast evaluation metrics: WIS, PIS and coverage."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=Config.LOG_FORMAT)


@cli.command()
@click.argument("observed", type=float)
@click.option("-w", "--width", type=float, default=Config.WIDTH_DEFAULT, show_default=True,
              help="Interval width in percent of the reference intervals")
def wis(observed, width):
    """Score OBSERVED against the demo median and nested 50/80/95% intervals."""
    try:
        panel = wis_panel(observed, width)
    except ValidationError as e:
        raise click.ClickException(str(e))

    for interval in panel.intervals:
        click.echo(f"{interval.name:>4} PI: [{interval.lower:.0f}, {interval.upper:.0f}]")
    for name, value in panel.wis.display().items():
        click.echo(f"{name}: {value}")
    for label, pis in (("95%", panel.pis_95), ("50%", panel.pis_50)):
        d = pis.display()
        click.echo(f"PIS {label}: {d['width']} + {d['penalty']} = {d['total']}")
    click.echo(panel.message)


@cli.command()
@click.argument("observed", type=float)
@click.argument("lower", type=float)
@click.argument("upper", type=float)
@click.option("-l", "--level", type=float, default=95, show_default=True,
              help="Nominal coverage of the interval, in percent")
def pis(observed, lower, upper, level):
    """Prediction interval score of OBSERVED for the interval [LOWER, UPPER]."""
    if lower > upper:
        raise click.ClickException(f"Lower bound {lower} exceeds upper bound {upper}")
    try:
        alpha = alpha_from_coverage(level)
    except ValidationError as e:
        raise click.ClickException(str(e))

    result = calculate_pis(observed, lower, upper, alpha)
    d = result.display()
    click.echo(f"PIS = Width + Boundary Penalty = {d['width']} + {d['penalty']} = {d['total']}")
    if result.outside_lower:
        click.echo("Observed is below the lower bound")
    elif result.outside_upper:
        click.echo("Observed is above the upper bound")
    else:
        click.echo("Observed is inside the interval")


@cli.command()
@click.option("-n", "--sample-size", "sample_size", type=int, default=Config.SAMPLE_SIZE_DEFAULT,
              show_default=True, help="Number of simulated forecasts")
@click.option("-s", "--seed", type=int, default=0, show_default=True, help="Simulation seed")
def coverage(sample_size, seed):
    """Simulated coverage of 95% and 50% prediction intervals."""
    try:
        panel = CoveragePanel(sample_size=sample_size, seed=seed)
    except ValidationError as e:
        raise click.ClickException(str(e))

    for summary in panel.summaries:
        status = "Well calibrated" if summary.calibrated else "Needs attention"
        percent = format_half_up(summary.coverage, 0)
        click.echo(f"{summary.label}: {summary.hits}/{summary.n} = {percent}% "
                   f"(target {summary.target:g}%) {status}")


@cli.command()
@click.option("-d", "--output_dir", "outdir", envvar="FORECAST_METRICS_OUTDIR", type=str,
              default=Config.DEFAULT_OUTDIR, show_default=True, help="Where to write figures")
@click.option("-w", "--width", type=float, default=Config.WIDTH_DEFAULT, show_default=True,
              help="Interval width for the WIS figures")
@click.option("-o", "--observed", type=float, default=Config.OBSERVED_DEFAULT, show_default=True,
              help="Observed value for the WIS diagram")
def figures(outdir, width, observed):
    """Render every figure of the guide."""
    try:
        panel = wis_panel(observed, width)
    except ValidationError as e:
        raise click.ClickException(str(e))

    weekly = sample_data.weekly_forecasts()
    results = score_forecast_table(weekly)
    logging.info(f"Scored weeks {results.meta['scored_weeks']}")

    written = [
        plotting.forecast_intervals_plot(weekly, "forecast_intervals.png", outdir,
                                         scores=results.forecast_metrics),
        plotting.wis_interval_diagram(panel, "wis_intervals.png", outdir),
        plotting.wis_components_sweep("wis_components.png", outdir, width=width),
    ]
    coverage_panel = CoveragePanel()
    written.append(plotting.coverage_bars(
        coverage_panel.summaries, [coverage_panel.hits_95, coverage_panel.hits_50],
        "coverage_simulation.png", outdir,
    ))
    written.append(plotting.flusight_coverage_plot(
        sample_data.flusight_coverage(), "flusight_coverage.png", outdir,
    ))

    for path in written:
        if path is not None:
            click.echo(path)
    logging.info(f"Wrote {sum(p is not None for p in written)} figures to {outdir}")


if __name__ == '__main__':
    cli()
