"""
Evaluation Module - Scoring of weekly forecast tables.

This module provides a tidy interface for:
- Scoring each observed week of a forecast table (WIS components, reference
  WIS, per-interval PIS)
- Per-model coverage of the 50/80/95% intervals and the gap to nominal
- Relative WIS against a baseline model
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple

import numpy as np
import pandas as pd

from . import validation
from .config import Config
from .coverage import coverage_gap, interval_hits
from .intervals import Interval
from .weighted_interval_score import calculate_pis, calculate_wis, weighted_interval_score_fast

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "example"


@dataclass
class MetricSpec:
    """Specification for a scoring metric with metadata."""
    name: str                                   # Unique metric name
    type: Literal["per_forecast", "per_model"]  # Granularity level
    grain: Tuple[str, ...]                      # Native keys (e.g., ("model", "week"))
    orientation: Literal["min", "max"]          # Lower is better vs higher is better
    family: str                                 # Metric family ("wis", "pis", "coverage")
    is_relative: bool = False                   # True for ratios against a baseline
    depends_on: Optional[List[str]] = None      # Dependencies for relative metrics


@dataclass
class ScoringResults:
    """Container for forecast evaluation results with separate granularities."""
    forecast_metrics: pd.DataFrame  # Per-week scores: model, week, scoring_metric, value
    model_metrics: pd.DataFrame     # Per-model scores: model, scoring_metric, value, n_units
    meta: Dict                      # scored_weeks, skipped_weeks, metrics_computed, ...

    def to_tidy(self) -> pd.DataFrame:
        """Unified view with grain column for clean filtering."""
        f = self.forecast_metrics.assign(grain="per_forecast")
        m = self.model_metrics.assign(grain="per_model")
        return pd.concat([f, m], ignore_index=True, sort=False)

    def metric(self, name: str) -> pd.DataFrame:
        tidy = self.to_tidy()
        return tidy[tidy["scoring_metric"] == name]


_FORECAST_GRAIN = ("model", "week")
_MODEL_GRAIN = ("model",)


def _per_forecast(name, family, orientation="min"):
    return MetricSpec(name=name, type="per_forecast", grain=_FORECAST_GRAIN,
                      orientation=orientation, family=family)


def _per_model(name, orientation):
    return MetricSpec(name=name, type="per_model", grain=_MODEL_GRAIN,
                      orientation=orientation, family="coverage")


class MetricRegistry:
    """Registry of all available scoring metrics."""

    WIS_TOTAL = _per_forecast("wis_total", "wis")
    WIS_DISPERSION = _per_forecast("wis_dispersion", "wis")
    WIS_OVERPREDICTION = _per_forecast("wis_overprediction", "wis")
    WIS_UNDERPREDICTION = _per_forecast("wis_underprediction", "wis")
    WIS_ABS_ERROR = _per_forecast("wis_abs_error", "wis")
    WIS_REFERENCE = _per_forecast("wis_reference", "wis")

    PIS_95 = _per_forecast("pis_95", "pis")
    PIS_80 = _per_forecast("pis_80", "pis")
    PIS_50 = _per_forecast("pis_50", "pis")

    WIS_TOTAL_REL = MetricSpec(
        name="wis_total_relative",
        type="per_forecast",
        grain=_FORECAST_GRAIN,
        orientation="min",
        family="wis",
        is_relative=True,
        depends_on=["wis_total"],
    )

    COVERAGE_95 = _per_model("coverage_95", "max")
    COVERAGE_80 = _per_model("coverage_80", "max")
    COVERAGE_50 = _per_model("coverage_50", "max")
    # Gaps should be close to 0
    COVERAGE_95_GAP = _per_model("coverage_95_gap", "min")
    COVERAGE_80_GAP = _per_model("coverage_80_gap", "min")
    COVERAGE_50_GAP = _per_model("coverage_50_gap", "min")

    # Convenient groupings
    WIS_COMPONENTS = [WIS_TOTAL, WIS_DISPERSION, WIS_OVERPREDICTION, WIS_UNDERPREDICTION, WIS_ABS_ERROR]
    PIS_METRICS = [PIS_95, PIS_80, PIS_50]
    COVERAGE_METRICS = [COVERAGE_95, COVERAGE_80, COVERAGE_50,
                        COVERAGE_95_GAP, COVERAGE_80_GAP, COVERAGE_50_GAP]
    ALL_METRICS = WIS_COMPONENTS + [WIS_REFERENCE] + PIS_METRICS + COVERAGE_METRICS


def row_intervals(row) -> List[Interval]:
    """The 95/80/50% intervals of one forecast table row, widest first."""
    return [
        Interval.from_coverage(row[f"l{level}"], row[f"u{level}"], level)
        for level in Config.NOMINAL_LEVELS
    ]


def score_forecast_table(
    df: pd.DataFrame,
    metrics: Optional[List[MetricSpec]] = None,
    relative_baseline: Optional[str] = None,
) -> ScoringResults:
    """
    Score every observed week of a forecast table.

    Args:
        df: Forecast table (week, observed, median, l95..u50, optional model)
        metrics: Metrics to keep (default: MetricRegistry.ALL_METRICS)
        relative_baseline: Model name to use as baseline for relative WIS

    Returns:
        ScoringResults: Container with forecast_metrics, model_metrics, and metadata
    """
    validation.validate_forecast_table(df)

    table = df.copy()
    if "model" not in table.columns:
        table["model"] = DEFAULT_MODEL

    observed_mask = table["observed"].notna()
    skipped_weeks = table.loc[~observed_mask, "week"].tolist()
    scored = table[observed_mask]
    if scored.empty:
        raise validation.ValidationError("Forecast table has no observed weeks to score")
    if skipped_weeks:
        logger.info(f"Skipping {len(skipped_weeks)} unobserved week(s): {skipped_weeks}")

    if metrics is None:
        metrics = MetricRegistry.ALL_METRICS
    wanted = {m.name for m in metrics}

    rows = []
    for _, row in scored.iterrows():
        observed = float(row["observed"])
        intervals = row_intervals(row)

        wis_res = calculate_wis(observed, row["median"], intervals)
        reference = weighted_interval_score_fast(observed, row["median"], intervals)[0]
        values = {
            "wis_total": wis_res.total,
            "wis_dispersion": wis_res.dispersion,
            "wis_overprediction": wis_res.overprediction,
            "wis_underprediction": wis_res.underprediction,
            "wis_abs_error": wis_res.abs_error,
            "wis_reference": float(reference[0]),
        }
        for level, interval in zip(Config.NOMINAL_LEVELS, intervals):
            values[f"pis_{level}"] = calculate_pis(observed, interval.lower, interval.upper, interval.alpha).total

        for name, value in values.items():
            rows.append({
                "model": row["model"],
                "week": row["week"],
                "scoring_metric": name,
                "value": value,
            })

    scores = pd.DataFrame(rows, columns=["model", "week", "scoring_metric", "value"])
    forecast_metrics = scores[scores["scoring_metric"].isin(wanted)].reset_index(drop=True)

    model_metrics = compute_coverage_metrics(scored)
    model_metrics = model_metrics[model_metrics["scoring_metric"].isin(wanted)].reset_index(drop=True)

    if relative_baseline is not None:
        # Relative WIS needs wis_total even when it is not among the kept metrics
        relative_total = compute_relative_scores(scores, relative_baseline)
        forecast_metrics = pd.concat([forecast_metrics, relative_total], ignore_index=True)

    computed = [m.name for m in metrics]
    if relative_baseline is not None:
        computed.append(MetricRegistry.WIS_TOTAL_REL.name)

    meta = {
        "scored_weeks": scored["week"].unique().tolist(),
        "skipped_weeks": skipped_weeks,
        "metrics_computed": computed,
        "relative_baseline": relative_baseline,
        "forecast_unit": _FORECAST_GRAIN,
    }

    return ScoringResults(
        forecast_metrics=forecast_metrics,
        model_metrics=model_metrics,
        meta=meta,
    )


def compute_coverage_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coverage of each nominal interval and its gap to nominal, per model.

    Only rows with an observation are counted.

    Returns:
        DataFrame with columns: model, scoring_metric, value, n_units
    """
    table = df if "model" in df.columns else df.assign(model=DEFAULT_MODEL)
    table = table[table["observed"].notna()]

    coverage_results = []
    for model, model_df in table.groupby("model", sort=True):
        n_units = len(model_df)
        if n_units == 0:
            continue
        for level in Config.NOMINAL_LEVELS:
            hits = interval_hits(model_df["observed"], model_df[f"l{level}"], model_df[f"u{level}"])
            rate = float(np.mean(hits))
            coverage_results.extend([
                {
                    "model": model,
                    "scoring_metric": f"coverage_{level}",
                    "value": rate,
                    "n_units": n_units,
                },
                {
                    "model": model,
                    "scoring_metric": f"coverage_{level}_gap",
                    "value": coverage_gap(rate, level / 100),
                    "n_units": n_units,
                },
            ])

    return pd.DataFrame(coverage_results, columns=["model", "scoring_metric", "value", "n_units"])


def compute_relative_scores(
    absolute_scores: pd.DataFrame,
    baseline_model: str,
) -> pd.DataFrame:
    """
    Relative WIS (total metric only) vs a baseline model, aligned on week.
    """
    if absolute_scores.empty:
        return absolute_scores.copy()

    base = absolute_scores[
        (absolute_scores["model"] == baseline_model)
        & (absolute_scores["scoring_metric"] == MetricRegistry.WIS_TOTAL.name)
    ]
    if base.empty:
        raise ValueError(f"Baseline model '{baseline_model}' not found in scores")

    rel = absolute_scores[absolute_scores["scoring_metric"] == MetricRegistry.WIS_TOTAL.name].copy()
    rel = pd.merge(
        rel,
        base,
        on=["week", "scoring_metric"],
        suffixes=("", "_baseline"),
    )
    rel["value"] = [relative_wis(v, b) for v, b in zip(rel["value"], rel["value_baseline"])]
    rel["scoring_metric"] = MetricRegistry.WIS_TOTAL_REL.name
    rel = rel.drop(["value_baseline", "model_baseline"], axis=1)
    return rel


def relative_wis(model_wis: float, baseline_wis: float) -> float:
    """Ratio of a model's WIS to the baseline's; below 1 beats the baseline."""
    if baseline_wis == 0:
        return np.inf if model_wis > 0 else 1.0
    return model_wis / baseline_wis


def interpret_relative_wis(ratio: float, tol: float = 1e-9) -> str:
    if abs(ratio - 1.0) <= tol:
        return "Same as baseline"
    if ratio < 1.0:
        return "Better than baseline"
    return "Worse than baseline"
