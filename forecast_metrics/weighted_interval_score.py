"""
Weighted Interval Score and Prediction Interval Score computation.

Two scorers live here:

- calculate_wis() / calculate_pis(): the scalar calculators behind the
  interactive panels. calculate_wis blends half the absolute error of the
  median into the total and scales boundary violations by alpha.
- weighted_interval_score_fast(): the normalised WIS of Bracher et al. (2021),
  vectorised over observations, for comparison with published scores.

Both follow the same naming for boundary violations: an observation below a
lower bound accrues "underprediction", one above an upper bound accrues
"overprediction".
"""

from dataclasses import dataclass, asdict, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Sequence, Tuple

import numpy as np

from .intervals import Interval


def round_half_up(value: float, places: int = 1) -> Decimal:
    """
    Round the exact binary value of a float to ``places`` decimals, ties away
    from zero.

    996.25 is exactly representable and becomes 996.3, where ``round`` and
    ``:.1f`` round the tie to even and give 996.2.
    """
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_half_up(value: float, places: int = 1) -> str:
    return str(round_half_up(value, places))


@dataclass(frozen=True)
class WISResult:
    total: float
    dispersion: float
    overprediction: float
    underprediction: float
    abs_error: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def rounded(self) -> "WISResult":
        """Copy with every component rounded to one decimal place."""
        return replace(self, **{k: float(round_half_up(v)) for k, v in asdict(self).items()})

    def display(self) -> Dict[str, str]:
        return {k: format_half_up(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class PISResult:
    width: float
    penalty: float
    total: float
    outside_lower: bool
    outside_upper: bool
    inside: bool

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    def rounded(self) -> "PISResult":
        return replace(
            self,
            width=float(round_half_up(self.width)),
            penalty=float(round_half_up(self.penalty)),
            total=float(round_half_up(self.total)),
        )

    def display(self) -> Dict[str, str]:
        return {
            'width': format_half_up(self.width),
            'penalty': format_half_up(self.penalty),
            'total': format_half_up(self.total),
        }


def calculate_wis(observed: float, median: float, intervals: Sequence[Interval]) -> WISResult:
    """
    Decomposed weighted interval score for one observation.

    Interval bounds are taken as given; lower <= upper and alpha > 0 are
    preconditions of the caller. An empty interval list scores only the
    median term.
    """
    dispersion = 0.0
    overprediction = 0.0
    underprediction = 0.0

    for interval in intervals:
        dispersion += (interval.upper - interval.lower) * (interval.alpha / 2)
        if observed < interval.lower:
            underprediction += (interval.lower - observed) * interval.alpha
        if observed > interval.upper:
            overprediction += (observed - interval.upper) * interval.alpha

    abs_error = abs(observed - median)
    return WISResult(
        total=dispersion + overprediction + underprediction + abs_error * 0.5,
        dispersion=dispersion,
        overprediction=overprediction,
        underprediction=underprediction,
        abs_error=abs_error,
    )


def calculate_pis(observed: float, lower: float, upper: float, alpha: float) -> PISResult:
    """Interval width plus a (2 / alpha)-scaled penalty for the violated bound."""
    width = upper - lower
    penalty = 0.0

    if observed < lower:
        penalty = (2 / alpha) * (lower - observed)
    elif observed > upper:
        penalty = (2 / alpha) * (observed - upper)

    return PISResult(
        width=width,
        penalty=penalty,
        total=width + penalty,
        outside_lower=observed < lower,
        outside_upper=observed > upper,
        inside=lower <= observed <= upper,
    )


def interval_score(observed, lower, upper, alpha):
    """Vectorised interval score IS_alpha (Gneiting & Raftery 2007)."""
    observed = np.asarray(observed, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    below = np.clip(lower - observed, a_min=0, a_max=None)
    above = np.clip(observed - upper, a_min=0, a_max=None)
    return (upper - lower) + (2 / alpha) * below + (2 / alpha) * above


def weighted_interval_score_fast(
    observations,
    median,
    intervals: Sequence[Interval],
    check_consistency=True,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Normalised WIS of Bracher et al. (2021) for an array of observations.

    WIS = (0.5 * |y - m| + sum_k (alpha_k / 2) * IS_k) / (K + 0.5)

    The median term is booked as underprediction when y < m and as
    overprediction when y > m, so the returned components sum to the total.

    Returns:
        (total, dispersion, underprediction, overprediction), each shaped like
        the broadcast of observations and median.
    """
    observations = np.atleast_1d(np.asarray(observations, dtype=float))
    median = np.asarray(median, dtype=float)

    if check_consistency and any(i.lower > i.upper for i in intervals):
        raise ValueError("Interval bounds are not consistent.")

    alphas = np.array([i.alpha for i in intervals], dtype=float).reshape((-1, 1))
    lowers = np.array([i.lower for i in intervals], dtype=float).reshape((-1, 1))
    uppers = np.array([i.upper for i in intervals], dtype=float).reshape((-1, 1))
    weights = alphas / 2

    sharpnesses = (uppers - lowers) * np.ones_like(observations)
    lower_calibrations = np.clip(lowers - observations, a_min=0, a_max=None) * (2 / alphas)
    upper_calibrations = np.clip(observations - uppers, a_min=0, a_max=None) * (2 / alphas)

    median_error = np.abs(observations - median)
    median_under = np.where(observations < median, median_error, 0.0) * 0.5
    median_over = np.where(observations > median, median_error, 0.0) * 0.5

    norm = len(intervals) + 0.5
    dispersion = np.sum(sharpnesses * weights, axis=0) / norm
    underprediction = (np.sum(lower_calibrations * weights, axis=0) + median_under) / norm
    overprediction = (np.sum(upper_calibrations * weights, axis=0) + median_over) / norm
    total = dispersion + underprediction + overprediction

    return total, dispersion, underprediction, overprediction
