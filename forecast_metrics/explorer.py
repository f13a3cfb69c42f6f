"""
Headless state of the guide's interactive panels.

WISPanel reproduces the "How WIS responds to forecast errors" panel: an
observed-value slider and an interval-width slider drive three nested
intervals around a fixed median. CoveragePanel reproduces the simulated
coverage panel: a sample-size slider and a regenerate button.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Tuple

from .config import Config
from .coverage import CoverageSummary, generate_coverage, summarise_coverage
from .intervals import Interval, nested_intervals
from .validation import validate_slider
from .weighted_interval_score import PISResult, WISResult, calculate_pis, calculate_wis


@dataclass(frozen=True)
class WISPanel:
    observed: float = Config.OBSERVED_DEFAULT
    width: float = Config.WIDTH_DEFAULT   # percent
    median: float = Config.DEMO_MEDIAN
    intervals: Tuple[Interval, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        validate_slider(self.observed, Config.OBSERVED_RANGE, "Observed value")
        validate_slider(self.width, Config.WIDTH_RANGE, "Interval width")
        object.__setattr__(self, "intervals", nested_intervals(self.median, self.width / 100))

    @property
    def interval_95(self) -> Interval:
        return self.intervals[0]

    @property
    def interval_50(self) -> Interval:
        return self.intervals[-1]

    @property
    def wis(self) -> WISResult:
        return calculate_wis(self.observed, self.median, self.intervals)

    @property
    def pis_95(self) -> PISResult:
        i = self.interval_95
        return calculate_pis(self.observed, i.lower, i.upper, i.alpha)

    @property
    def pis_50(self) -> PISResult:
        i = self.interval_50
        return calculate_pis(self.observed, i.lower, i.upper, i.alpha)

    @property
    def in_95(self) -> bool:
        return self.interval_95.contains(self.observed)

    @property
    def in_50(self) -> bool:
        return self.interval_50.contains(self.observed)

    @property
    def message(self) -> str:
        if self.in_95 and self.in_50:
            return "Observed value is inside all intervals: minimal penalty"
        if self.in_95:
            return "Observed is within 95% PI but outside 50%: moderate penalty"
        if self.observed < self.interval_95.lower:
            return "Observed is below 95% lower bound: significant underprediction penalty"
        return "Observed is above 95% upper bound: significant overprediction penalty"

    @staticmethod
    def position(value: float) -> float:
        """Percent along the observed axis, unclipped."""
        lo, hi = Config.OBSERVED_RANGE
        return (value - lo) / (hi - lo) * 100


@lru_cache(maxsize=256)
def wis_panel(observed: float, width: float) -> WISPanel:
    """WISPanel memoised by slider state."""
    return WISPanel(observed=observed, width=width)


@dataclass(frozen=True)
class CoveragePanel:
    sample_size: int = Config.SAMPLE_SIZE_DEFAULT
    seed: int = 0

    def __post_init__(self):
        validate_slider(self.sample_size, Config.SAMPLE_SIZE_RANGE, "Sample size")

    @property
    def hits_95(self) -> List[bool]:
        return generate_coverage(self.sample_size, 0.95, self.seed)

    @property
    def hits_50(self) -> List[bool]:
        return generate_coverage(self.sample_size, 0.50, self.seed + 1)

    @property
    def summaries(self) -> List[CoverageSummary]:
        return [
            summarise_coverage(self.hits_95, 95, "95% Prediction Interval"),
            summarise_coverage(self.hits_50, 50, "50% Prediction Interval"),
        ]

    def regenerate(self) -> "CoveragePanel":
        return CoveragePanel(sample_size=self.sample_size, seed=self.seed + 1)
