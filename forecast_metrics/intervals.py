"""
Prediction interval data structures.

An interval carries its bounds and its significance level alpha, where
alpha = 1 - nominal coverage (a 95% interval has alpha = 0.05). Intervals are
built either directly, from a nominal level, or from a symmetric pair of
quantiles of a quantile forecast.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .config import Config
from .validation import ValidationError


def alpha_from_coverage(level: float) -> float:
    """
    Significance level for a nominal coverage.

    Accepts a percentage (95) or a fraction (0.95).
    """
    fraction = level / 100 if level > 1 else level
    if fraction < 0 or fraction >= 1:
        raise ValidationError(f"Nominal coverage must be in [0, 1), got {level}")
    # 1 - 0.95 is 0.050000000000000044 in binary floating point
    return round(1 - fraction, 12)


def level_label(alpha: float) -> str:
    return f"{round((1 - alpha) * 100):g}%"


@dataclass(frozen=True)
class Interval:
    lower: float
    upper: float
    alpha: float  # significance level in (0, 1]
    name: str = ""

    @classmethod
    def from_coverage(cls, lower: float, upper: float, level: float,
                      name: Optional[str] = None) -> "Interval":
        alpha = alpha_from_coverage(level)
        return cls(lower=lower, upper=upper, alpha=alpha,
                   name=name if name is not None else level_label(alpha))

    @property
    def width(self) -> float:
        return self.upper - self.lower

    @property
    def coverage(self) -> float:
        """Nominal coverage as a fraction."""
        return 1 - self.alpha

    @property
    def quantile_levels(self):
        """Quantile levels of the lower and upper bound."""
        return self.alpha / 2, 1 - self.alpha / 2

    def contains(self, value: float) -> bool:
        # Closed interval: values on either bound count as inside
        return self.lower <= value <= self.upper


def interval_from_quantiles(q_dict: Dict[float, float], level: int,
                            name: Optional[str] = None) -> Interval:
    """
    Build a central prediction interval from a quantile dictionary.

    Args:
        q_dict: Mapping from quantile level (e.g. 0.025) to forecast value
        level: Nominal coverage in percent, one of Config.QUANTILE_PAIRS

    Raises:
        ValidationError: If the level is unknown or a bounding quantile is missing
    """
    if level not in Config.QUANTILE_PAIRS:
        raise ValidationError(
            f"No quantile pair for a {level}% interval, expected one of {sorted(Config.QUANTILE_PAIRS)}"
        )
    q_lo, q_hi = Config.QUANTILE_PAIRS[level]
    lower = _lookup_quantile(q_dict, q_lo)
    upper = _lookup_quantile(q_dict, q_hi)
    if lower is None or upper is None:
        raise ValidationError(
            f"Quantile dictionary does not include quantiles {q_lo} and {q_hi} for the {level}% interval."
        )
    return Interval.from_coverage(lower, upper, level, name=name)


def _lookup_quantile(q_dict: Dict[float, float], q: float) -> Optional[float]:
    # Quantile keys parsed from CSVs carry float noise (0.025000000000000001)
    for key, value in q_dict.items():
        if abs(float(key) - q) < 1e-9:
            return value
    return None


def nested_intervals(median: float = Config.DEMO_MEDIAN, scale: float = 1.0) -> Tuple[Interval, ...]:
    """
    The demo's three nested symmetric intervals around ``median``, widest first.

    At scale 1 the half-widths are 400 (95%), 280 (80%) and 160 (50%).
    """
    alphas = {95: 0.05, 80: 0.2, 50: 0.5}
    intervals = []
    for level in Config.NOMINAL_LEVELS:
        half_width = Config.NESTED_HALF_WIDTHS[level] * scale
        intervals.append(Interval(
            lower=median - half_width,
            upper=median + half_width,
            alpha=alphas[level],
            name=f"{level}%",
        ))
    return tuple(intervals)
