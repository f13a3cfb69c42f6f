"""
Forecast Metrics - Evaluation metrics for epidemic forecasts.

This package provides modular components behind the forecast evaluation guide:

- forecast_metrics.weighted_interval_score: WIS and PIS computation
  - calculate_wis(), calculate_pis(): Scalar calculators with decomposed results
  - weighted_interval_score_fast(): Normalised WIS (Bracher et al. 2021)

- forecast_metrics.coverage: Interval hits, coverage rates and calibration

- forecast_metrics.intervals: Interval data structure and constructors

- forecast_metrics.evaluation: Scoring of weekly forecast tables
  - score_forecast_table(): Per-week scores and per-model coverage
  - compute_relative_scores(): Relative WIS vs a baseline model

- forecast_metrics.explorer: Headless state of the interactive panels

- forecast_metrics.plotting: Figures of the guide

- forecast_metrics.validation: Precondition checks
  - ValidationError: Custom exception for validation failures

Usage:
    from forecast_metrics import Interval, calculate_wis

    intervals = [Interval.from_coverage(1600, 2400, 95)]
    calculate_wis(2000, 2000, intervals).total  # 20.0
"""

__version__ = "0.1.0"

from . import coverage
from . import evaluation
from . import explorer
from . import intervals
from . import plotting
from . import sample_data
from . import validation
from . import weighted_interval_score
from .intervals import Interval
from .validation import ValidationError
from .weighted_interval_score import PISResult, WISResult, calculate_pis, calculate_wis

__all__ = [
    'coverage', 'evaluation', 'explorer', 'intervals', 'plotting', 'sample_data', 'validation',
    'weighted_interval_score', 'Interval', 'ValidationError', 'PISResult', 'WISResult',
    'calculate_pis', 'calculate_wis',
]
