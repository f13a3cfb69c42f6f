"""
Forecast Metrics Plotting - Figures for the evaluation metrics guide.

This module provides the guide's figures:
- forecast_intervals_plot: Weekly forecast fan chart with 50/80/95% bands
- wis_interval_diagram: Nested intervals, median and observed value on one axis
- wis_components_sweep: WIS components as the observed value moves
- coverage_bars: Simulated hit/miss strips against their target coverage
- flusight_coverage_plot: FluSight ensemble 95% coverage through a season
"""

import logging
import os
from typing import List, Optional

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import numpy as np
import pandas as pd
import seaborn as sns

from .config import Config
from .coverage import CoverageSummary
from .explorer import WISPanel
from .intervals import nested_intervals
from .weighted_interval_score import calculate_wis, format_half_up

logger = logging.getLogger(__name__)

PI_OPTIONS = ["all", "95", "80", "50", "none"]


def _save(fig, save_dir: str, filename: str) -> str:
    os.makedirs(save_dir, exist_ok=True)
    path = os.path.join(save_dir, filename)
    fig.tight_layout()
    fig.savefig(path, dpi=Config.FIGURE_DPI, bbox_inches='tight')
    plt.close(fig)
    logger.debug(f"Saved figure {path}")
    return path


def forecast_intervals_plot(
    df: pd.DataFrame,
    filename: str,
    save_dir: str,
    selected: str = "all",
    title: str = "Weekly Hospital Admissions Forecast",
    scores: Optional[pd.DataFrame] = None,
) -> Optional[str]:
    """
    Fan chart of a weekly forecast table.

    Args:
        df: Forecast table (week, observed, median, l95..u50)
        selected: Which bands to draw: "all", "95", "80", "50" or "none"
        scores: Per-week scores (ScoringResults.forecast_metrics); when given,
            each scored week is labelled with its WIS total above the 95% band
    """
    if selected not in PI_OPTIONS:
        raise ValueError(f"selected must be one of {PI_OPTIONS}, got {selected!r}")
    if df.empty:
        logger.warning(f"No data for forecast intervals plot: {filename}")
        return None

    levels = [level for level in Config.NOMINAL_LEVELS
              if selected == "all" or selected == str(level)]

    x = np.arange(len(df))
    fig, ax = plt.subplots(figsize=(9, 4.5))

    for level in levels:
        ax.fill_between(
            x, df[f"l{level}"], df[f"u{level}"],
            color=Config.PALETTE[f"band_{level}"], alpha=Config.BAND_ALPHA[level], linewidth=0,
            label=f"{level}% PI",
        )

    ax.plot(x, df["median"], color=Config.PALETTE["primary"], linestyle="--", linewidth=1.5, label="Median")
    observed = df["observed"]
    has_obs = observed.notna().to_numpy()
    ax.scatter(x[has_obs], observed[has_obs],
               color=Config.PALETTE["primary"], zorder=3, s=30, label="Observed")

    if scores is not None and not scores.empty:
        totals = scores[scores["scoring_metric"] == "wis_total"].groupby("week")["value"].first()
        for xi, week, top in zip(x, df["week"], df["u95"]):
            if week in totals.index:
                ax.annotate(f"WIS {format_half_up(totals[week])}", (xi, top),
                            textcoords="offset points", xytext=(0, 4), ha="center",
                            fontsize=7, color=Config.PALETTE["muted_text"])

    ax.set_xticks(x)
    ax.set_xticklabels(df["week"])
    ax.set_ylabel("Hospital admissions")
    ax.set_title(title)
    ax.legend(loc="upper left", frameon=False, fontsize=8)
    sns.despine(ax=ax)

    return _save(fig, save_dir, filename)


def wis_interval_diagram(panel: WISPanel, filename: str, save_dir: str) -> str:
    """Nested intervals as stacked bars with median and observed markers."""
    fig, ax = plt.subplots(figsize=(9, 2.5))

    for i, interval in enumerate(panel.intervals):
        level = interval.name.rstrip("%")
        height = 0.9 - i * 0.2
        ax.barh(0, interval.width, left=interval.lower, height=height,
                color=Config.PALETTE[f"band_{level}"], alpha=0.6, edgecolor=Config.PALETTE["accent"],
                label=interval.name)

    ax.axvline(panel.median, color=Config.PALETTE["primary"], linestyle="--", linewidth=1.2, label="Median")
    marker_color = Config.PALETTE["accent"] if panel.in_95 else Config.PALETTE["miss"]
    ax.scatter([panel.observed], [0], color=marker_color, s=80, zorder=4, label="Observed")

    ax.set_xlim(*Config.OBSERVED_RANGE)
    ax.set_xticks(Config.AXIS_TICKS)
    ax.set_yticks([])
    ax.set_title(f"WIS = {panel.wis.display()['total']}  ({panel.message})", fontsize=9)
    ax.legend(loc="upper right", frameon=False, fontsize=7, ncol=5)
    sns.despine(ax=ax, left=True)

    return _save(fig, save_dir, filename)


def wis_components_sweep(
    filename: str,
    save_dir: str,
    width: float = Config.WIDTH_DEFAULT,
    median: float = Config.DEMO_MEDIAN,
    n_points: int = 161,
) -> str:
    """Stacked WIS components across the observed-value slider range."""
    intervals = nested_intervals(median, width / 100)
    observed = np.linspace(*Config.OBSERVED_RANGE, n_points)

    components = pd.DataFrame(
        [calculate_wis(y, median, intervals).to_dict() for y in observed],
        index=observed,
    )
    components["median_term"] = components["abs_error"] * 0.5

    fig, ax = plt.subplots(figsize=(9, 4.5))
    ax.stackplot(
        observed,
        components["dispersion"],
        components["underprediction"],
        components["overprediction"],
        components["median_term"],
        labels=["Dispersion", "Underprediction", "Overprediction", "Median error / 2"],
        colors=[Config.PALETTE["caution"], Config.PALETTE["band_80"],
                Config.PALETTE["primary"], Config.PALETTE["miss"]],
        alpha=0.85,
    )
    for interval in intervals:
        ax.axvspan(interval.lower, interval.upper, color=Config.PALETTE["accent"], alpha=0.04)

    ax.set_xlim(*Config.OBSERVED_RANGE)
    ax.set_xlabel("Observed value")
    ax.set_ylabel("WIS")
    ax.set_title(f"WIS components, interval width {width:g}%")
    ax.legend(loc="upper center", frameon=False, fontsize=8, ncol=2)
    sns.despine(ax=ax)

    return _save(fig, save_dir, filename)


def coverage_bars(summaries: List[CoverageSummary], hits: List[List[bool]],
                  filename: str, save_dir: str) -> Optional[str]:
    """One hit/miss strip per interval with its target coverage marked."""
    if not summaries:
        logger.warning(f"No coverage summaries to plot: {filename}")
        return None

    fig, axes = plt.subplots(len(summaries), 1, figsize=(9, 1.6 * len(summaries)))
    if len(summaries) == 1:
        axes = [axes]

    for ax, summary, flags in zip(axes, summaries, hits):
        colors = [Config.PALETTE["accent"] if h else Config.PALETTE["muted"] for h in flags]
        ax.bar(np.arange(len(flags)), np.ones(len(flags)), width=0.92, color=colors)
        # Target line in units of bars
        ax.axvline(summary.target / 100 * len(flags) - 0.5, color=Config.PALETTE["primary"], linewidth=2)
        ax.set_xlim(-0.5, len(flags) - 0.5)
        ax.set_yticks([])
        ax.set_xticks([])
        status = "Well calibrated" if summary.calibrated else "Needs attention"
        color = Config.PALETTE["accent"] if summary.calibrated else Config.PALETTE["caution"]
        percent = format_half_up(summary.coverage, 0)
        ax.set_title(
            f"{summary.label}: {percent}% (target {summary.target:g}%), {status}",
            fontsize=9, color=color, loc="left",
        )
        sns.despine(ax=ax, left=True, bottom=True)

    return _save(fig, save_dir, filename)


def flusight_coverage_plot(df: pd.DataFrame, filename: str, save_dir: str,
                           target: float = 95) -> Optional[str]:
    """Bar chart of coverage by period, coloured by status, with target line."""
    if df.empty:
        logger.warning(f"No data for FluSight coverage plot: {filename}")
        return None

    fig, ax = plt.subplots(figsize=(9, 3.5))
    ax.bar(df["period"], df["coverage"], color=[Config.STATUS_COLORS[s] for s in df["status"]])
    ax.axhline(target, color=Config.PALETTE["accent"], linestyle=(0, (4, 4)), linewidth=1.5)
    ax.text(len(df) - 0.5, target, f"{target:g}% target", fontsize=8,
            color=Config.PALETTE["accent"], va="bottom", ha="right")

    ax.set_ylim(0, 100)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _: f"{v:.0f}%"))
    ax.set_ylabel("Coverage")
    ax.set_title("FluSight ensemble 95% coverage, 2-week ahead")
    sns.despine(ax=ax)

    return _save(fig, save_dir, filename)
