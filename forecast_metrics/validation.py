"""
Validation Module - Precondition and input format checks.

The scoring calculators never validate their inputs: malformed intervals and
non-positive alphas are programmer errors. These helpers are for the layers
around them (slider state, forecast tables, hit sequences) so that bad input
is rejected before it reaches the arithmetic.
"""

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


class ValidationError(Exception):
    """Custom exception for validation failures."""
    pass


FORECAST_TABLE_COLUMNS = [
    'week', 'observed', 'median', 'l95', 'u95', 'l80', 'u80', 'l50', 'u50'
]


def validate_alpha(alpha: float, context: str = "interval") -> None:
    """
    Validate a significance level.

    Args:
        alpha: Significance level, must lie in (0, 1]
        context: Description for error messages

    Raises:
        ValidationError: If alpha is outside (0, 1] or not finite
    """
    if not np.isfinite(alpha):
        raise ValidationError(f"{context} has non-finite alpha: {alpha}")
    if alpha <= 0 or alpha > 1:
        raise ValidationError(f"{context} alpha must be in (0, 1], got {alpha}")


def validate_interval(interval, context: Optional[str] = None) -> None:
    """
    Validate a single Interval for well-formed bounds and alpha.

    Raises:
        ValidationError: If lower > upper, bounds are not finite or alpha is invalid
    """
    if context is None:
        context = f"Interval({interval.name})"

    if not (np.isfinite(interval.lower) and np.isfinite(interval.upper)):
        raise ValidationError(
            f"{context} has non-finite bounds: [{interval.lower}, {interval.upper}]"
        )
    if interval.lower > interval.upper:
        raise ValidationError(
            f"{context} lower bound {interval.lower} exceeds upper bound {interval.upper}"
        )
    validate_alpha(interval.alpha, context)


def validate_intervals(intervals: Iterable) -> None:
    """Validate every interval in a collection."""
    for i, interval in enumerate(intervals):
        validate_interval(interval, f"Interval {i} ({interval.name})")


def validate_slider(value: float, bounds: Tuple[float, float], name: str) -> None:
    """
    Validate that a slider value lies within its fixed min/max.

    Raises:
        ValidationError: If value is outside the closed range
    """
    lo, hi = bounds
    if not np.isfinite(value) or value < lo or value > hi:
        raise ValidationError(f"{name} must be between {lo} and {hi}, got {value}")


def validate_hits(hits: Sequence) -> None:
    """
    Validate a hit/miss sequence for coverage computation.

    Raises:
        ValidationError: If the sequence is empty
    """
    if len(hits) == 0:
        raise ValidationError("Coverage requires at least one forecast")


def validate_forecast_table(df: pd.DataFrame, context: str = "forecast table") -> None:
    """
    Validate that a DataFrame follows the weekly forecast table layout.

    Args:
        df: DataFrame to validate
        context: Description for error messages

    Raises:
        ValidationError: If columns are missing or bounds are inconsistent
    """
    missing_cols = [col for col in FORECAST_TABLE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValidationError(
            f"{context} missing required columns: {missing_cols}"
        )

    if df.empty:
        raise ValidationError(f"{context} has no rows")

    # Nested bounds: l95 <= l80 <= l50 <= median <= u50 <= u80 <= u95
    ordered = df[['l95', 'l80', 'l50', 'median', 'u50', 'u80', 'u95']].to_numpy(dtype=float)
    bad_rows = np.any(np.diff(ordered, axis=1) < 0, axis=1)
    if bad_rows.any():
        bad_weeks = df.loc[bad_rows, 'week'].tolist()
        raise ValidationError(
            f"{context} has non-nested interval bounds for weeks: {bad_weeks}"
        )
