"""
Sample datasets shown in the guide.

Values are illustrative and hard-coded: a five-week hospital admissions
forecast with nested 50/80/95% intervals (the last week not yet observed) and
the FluSight ensemble's 2-week-ahead 95% coverage over the 2024-2025 season.
"""

from typing import Dict, Tuple

import numpy as np
import pandas as pd

from .config import Config
from .coverage import coverage_status


def weekly_forecasts() -> pd.DataFrame:
    """Weekly hospital admissions forecast in the forecast table layout."""
    return pd.DataFrame([
        {'week': 'Week 1', 'observed': 1200, 'median': 1180, 'l95': 850, 'u95': 1510, 'l80': 950, 'u80': 1410, 'l50': 1080, 'u50': 1280},
        {'week': 'Week 2', 'observed': 1480, 'median': 1420, 'l95': 1020, 'u95': 1820, 'l80': 1150, 'u80': 1690, 'l50': 1300, 'u50': 1540},
        {'week': 'Week 3', 'observed': 1850, 'median': 1750, 'l95': 1280, 'u95': 2220, 'l80': 1420, 'u80': 2080, 'l50': 1600, 'u50': 1900},
        {'week': 'Week 4', 'observed': 2150, 'median': 2100, 'l95': 1550, 'u95': 2650, 'l80': 1720, 'u80': 2480, 'l50': 1920, 'u50': 2280},
        {'week': 'Week 5', 'observed': np.nan, 'median': 2350, 'l95': 1720, 'u95': 2980, 'l80': 1920, 'u80': 2780, 'l50': 2140, 'u50': 2560},
    ])


def flusight_coverage() -> pd.DataFrame:
    """95% coverage (percent) of the FluSight ensemble's 2-week-ahead forecasts."""
    df = pd.DataFrame([
        {'period': 'Nov 2024', 'coverage': 90},
        {'period': 'Dec 2024', 'coverage': 68},
        {'period': 'Jan 4', 'coverage': 6},
        {'period': 'Jan 18', 'coverage': 52},
        {'period': 'Feb 2025', 'coverage': 40},
        {'period': 'Mar 2025', 'coverage': 88},
        {'period': 'Apr 2025', 'coverage': 95},
    ])
    df['status'] = df['coverage'].apply(coverage_status)
    return df


def quantile_pairs() -> Dict[int, Tuple[float, float]]:
    """Nominal level -> (lower quantile, upper quantile)."""
    return dict(Config.QUANTILE_PAIRS)
