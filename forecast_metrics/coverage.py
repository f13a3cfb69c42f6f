"""
Coverage - how often observations fall inside prediction intervals.

Coverage = (# of hits) / (# of forecasts), where a hit means
lower <= observed <= upper. A well-calibrated 95% interval should contain the
truth about 95% of the time (Gneiting et al. 2007).
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .config import Config
from .validation import validate_hits


@dataclass(frozen=True)
class CoverageSummary:
    label: str
    target: float       # nominal coverage, percent
    n: int
    hits: int
    coverage: float     # empirical coverage, percent
    calibrated: bool

    @property
    def gap(self) -> float:
        """Empirical minus nominal coverage, in percentage points."""
        return self.coverage - self.target


def interval_hits(observed, lower, upper) -> np.ndarray:
    observed = np.asarray(observed, dtype=float)
    return (np.asarray(lower, dtype=float) <= observed) & (observed <= np.asarray(upper, dtype=float))


def coverage_rate(hits: Sequence[bool]) -> float:
    validate_hits(hits)
    return float(np.count_nonzero(hits)) / len(hits)


def coverage_percent(hits: Sequence[bool]) -> float:
    return coverage_rate(hits) * 100


def coverage_gap(rate: float, nominal: float) -> float:
    return rate - nominal


def generate_coverage(n: int, target: float, seed: int) -> List[bool]:
    """
    Deterministic pseudo-random hit sequence for the coverage simulation.

    Each draw is the fractional part of sin(seed * 1000 + i * 9999) * 10000,
    a hit when it falls below ``target`` (a fraction, e.g. 0.95).
    """
    hits = []
    for i in range(n):
        rand = np.sin(seed * 1000 + i * 9999) * 10000
        hits.append(bool((rand - np.floor(rand)) < target))
    return hits


def is_calibrated(coverage_pct: float, target_pct: float,
                  tolerance: float = Config.CALIBRATION_TOLERANCE) -> bool:
    return abs(coverage_pct - target_pct) < tolerance


def coverage_status(coverage_pct: float) -> str:
    """Traffic-light status used to colour coverage bars."""
    if coverage_pct >= Config.GOOD_COVERAGE_THRESHOLD:
        return "good"
    if coverage_pct >= Config.CAUTION_COVERAGE_THRESHOLD:
        return "caution"
    return "miss"


def summarise_coverage(hits: Sequence[bool], target_pct: float, label: str) -> CoverageSummary:
    coverage = coverage_percent(hits)
    return CoverageSummary(
        label=label,
        target=target_pct,
        n=len(hits),
        hits=int(np.count_nonzero(hits)),
        coverage=coverage,
        calibrated=is_calibrated(coverage, target_pct),
    )
