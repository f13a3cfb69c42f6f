"""
Pytest fixtures for forecast metrics tests.
"""

import pytest
import pandas as pd
import matplotlib
from pathlib import Path
import sys

matplotlib.use("Agg")

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))
from forecast_metrics import sample_data
from forecast_metrics.intervals import Interval, nested_intervals


@pytest.fixture(scope="session")
def weekly_df():
    """Sample five-week forecast table."""
    return sample_data.weekly_forecasts()


@pytest.fixture
def demo_intervals():
    """Nested 95/80/50% intervals around 2000 at 100% width."""
    return nested_intervals(2000, 1.0)


@pytest.fixture
def interval_95():
    return Interval(lower=1600, upper=2400, alpha=0.05, name="95%")


@pytest.fixture
def two_model_df(weekly_df):
    """Forecast table with the sample model and a wider copy as baseline."""
    model = weekly_df.assign(model="model")
    baseline = weekly_df.copy()
    for level in (95, 80, 50):
        half = (baseline[f"u{level}"] - baseline[f"l{level}"]) / 2
        baseline[f"l{level}"] = baseline["median"] - 2 * half
        baseline[f"u{level}"] = baseline["median"] + 2 * half
    baseline = baseline.assign(model="baseline")
    return pd.concat([model, baseline], ignore_index=True)
