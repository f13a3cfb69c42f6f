"""
Tests for the WIS and PIS calculators.
"""

import pytest
import numpy as np

from forecast_metrics.intervals import Interval, nested_intervals
from forecast_metrics.weighted_interval_score import (
    calculate_wis,
    calculate_pis,
    format_half_up,
    interval_score,
    round_half_up,
    weighted_interval_score_fast,
)


class TestCalculateWIS:
    """Test the decomposed WIS calculator."""

    def test_single_95_interval_at_median(self, interval_95):
        """Observed on the median scores dispersion only."""
        result = calculate_wis(2000, 2000, [interval_95])
        assert result.dispersion == pytest.approx(20.0)
        assert result.overprediction == 0
        assert result.underprediction == 0
        assert result.abs_error == 0
        assert result.total == pytest.approx(20.0)

    def test_zero_width_at_median_scores_zero(self):
        intervals = [Interval(2000, 2000, a) for a in (0.05, 0.2, 0.5)]
        assert calculate_wis(2000, 2000, intervals).total == 0

    def test_empty_intervals_scores_half_abs_error(self):
        result = calculate_wis(1500, 2000, [])
        assert result.dispersion == 0
        assert result.abs_error == 500
        assert result.total == 250

    def test_nested_intervals_observed_at_median(self, demo_intervals):
        # 800 * 0.025 + 560 * 0.1 + 320 * 0.25
        result = calculate_wis(2000, 2000, demo_intervals)
        assert result.dispersion == pytest.approx(156.0)
        assert result.total == pytest.approx(156.0)

    def test_observed_below_all_intervals(self, demo_intervals):
        """Below a lower bound accrues underprediction scaled by alpha."""
        result = calculate_wis(1500, 2000, demo_intervals)
        # 100 * 0.05 + 220 * 0.2 + 340 * 0.5
        assert result.underprediction == pytest.approx(219.0)
        assert result.overprediction == 0
        assert result.abs_error == 500
        assert result.total == pytest.approx(156.0 + 219.0 + 250.0)

    def test_observed_above_all_intervals(self, demo_intervals):
        result = calculate_wis(2800, 2000, demo_intervals)
        # 400 * 0.05 + 520 * 0.2 + 640 * 0.5
        assert result.overprediction == pytest.approx(444.0)
        assert result.underprediction == 0
        assert result.total == pytest.approx(156.0 + 444.0 + 400.0)

    def test_observed_inside_contributes_no_penalty(self, demo_intervals):
        result = calculate_wis(2100, 2000, demo_intervals)
        assert result.overprediction == 0
        assert result.underprediction == 0

    def test_only_violated_intervals_penalised(self, demo_intervals):
        """2200 is inside the 95% and 80% intervals but above the 50% one."""
        result = calculate_wis(2200, 2000, demo_intervals)
        assert result.overprediction == pytest.approx((2200 - 2160) * 0.5)
        assert result.total == pytest.approx(156.0 + 20.0 + 100.0)

    def test_wider_interval_increases_dispersion(self):
        narrow = calculate_wis(2000, 2000, [Interval(1800, 2200, 0.2)])
        wide = calculate_wis(2000, 2000, [Interval(1700, 2300, 0.2)])
        assert wide.dispersion > narrow.dispersion
        assert wide.total > narrow.total

    def test_dispersion_monotone_in_width_scale(self):
        totals = [calculate_wis(2000, 2000, nested_intervals(2000, s / 100)).dispersion
                  for s in range(30, 151, 10)]
        assert all(a < b for a, b in zip(totals, totals[1:]))

    def test_malformed_interval_not_guarded(self):
        """lower > upper is a caller precondition: dispersion goes negative."""
        result = calculate_wis(2000, 2000, [Interval(2400, 1600, 0.05)])
        assert result.dispersion == pytest.approx(-20.0)

    def test_components_sum_to_total(self, demo_intervals):
        for observed in (1200, 1650, 2000, 2250, 2800):
            r = calculate_wis(observed, 2000, demo_intervals)
            assert r.total == pytest.approx(
                r.dispersion + r.overprediction + r.underprediction + 0.5 * r.abs_error
            )

    def test_display_rounds_to_one_decimal(self):
        result = calculate_wis(2000.04, 2000, [Interval(1600, 2400, 0.05)])
        assert result.display()["abs_error"] == "0.0"
        assert result.display()["total"] == "20.0"
        assert result.rounded().dispersion == 20.0
        # no rounding before accumulation
        assert result.abs_error == pytest.approx(0.04)

    def test_display_rounds_ties_up(self):
        """996.25 is exact in binary, so the tie is rounded up, not to even."""
        result = calculate_wis(1203, 2000, nested_intervals(2000, 0.3))
        assert result.total == 996.25
        assert result.display()["total"] == "996.3"
        assert result.rounded().total == 996.3

    def test_to_dict_fields(self, interval_95):
        d = calculate_wis(2000, 2000, [interval_95]).to_dict()
        assert set(d) == {"total", "dispersion", "overprediction", "underprediction", "abs_error"}


class TestCalculatePIS:
    """Test the single-interval score."""

    def test_below_lower_bound(self):
        result = calculate_pis(1500, 1600, 2400, 0.05)
        assert result.width == 800
        assert result.penalty == pytest.approx(4000.0)
        assert result.total == pytest.approx(4800.0)
        assert result.outside_lower
        assert not result.outside_upper
        assert not result.inside

    def test_above_upper_bound(self):
        result = calculate_pis(2500, 1840, 2160, 0.5)
        assert result.penalty == pytest.approx(4 * 340)
        assert result.total == pytest.approx(320 + 1360)
        assert result.outside_upper

    def test_inside_has_no_penalty(self):
        result = calculate_pis(2000, 1600, 2400, 0.05)
        assert result.penalty == 0
        assert result.total == 800
        assert result.inside

    @pytest.mark.parametrize("observed", [1600, 2400])
    def test_bounds_are_inside(self, observed):
        result = calculate_pis(observed, 1600, 2400, 0.05)
        assert result.inside
        assert result.penalty == 0

    @pytest.mark.parametrize("observed", [1000, 1599.9, 1600, 2000, 2400, 2400.1, 3000])
    def test_flags_partition(self, observed):
        result = calculate_pis(observed, 1600, 2400, 0.2)
        flags = [result.outside_lower, result.outside_upper, result.inside]
        assert sum(flags) == 1

    def test_display(self):
        assert calculate_pis(1500, 1600, 2400, 0.05).display() == {
            "width": "800.0", "penalty": "4000.0", "total": "4800.0"
        }

    def test_display_rounds_ties_up(self):
        result = calculate_pis(0.1, 0, 0.25, 0.5)
        assert result.display()["width"] == "0.3"
        assert result.rounded().total == 0.3


class TestRoundHalfUp:
    """Test the decimal rounding used for displayed scores."""

    @pytest.mark.parametrize("value, places, expected", [
        (996.25, 1, "996.3"),
        (0.25, 1, "0.3"),
        (12.5, 0, "13"),
        (87.5, 0, "88"),
        (625.0, 1, "625.0"),
        (0.0, 1, "0.0"),
        (95.0, 0, "95"),
    ])
    def test_format(self, value, places, expected):
        assert format_half_up(value, places) == expected

    def test_uses_exact_binary_value(self):
        # 0.15 is stored just below 0.15, so it is not a tie
        assert format_half_up(0.15, 1) == "0.1"
        assert format_half_up(2.675, 2) == "2.67"

    def test_returns_decimal(self):
        assert float(round_half_up(1.25)) == 1.3


class TestReferenceWIS:
    """Test the normalised WIS of Bracher et al."""

    def test_interval_score_matches_pis(self):
        assert float(interval_score(1500, 1600, 2400, 0.05)) == pytest.approx(
            calculate_pis(1500, 1600, 2400, 0.05).total
        )

    def test_observed_at_median(self, interval_95):
        total, dispersion, under, over = weighted_interval_score_fast(2000, 2000, [interval_95])
        assert total[0] == pytest.approx(20.0 / 1.5)
        assert dispersion[0] == pytest.approx(20.0 / 1.5)
        assert under[0] == 0
        assert over[0] == 0

    def test_observed_below(self, demo_intervals):
        total, dispersion, under, over = weighted_interval_score_fast(1500, 2000, demo_intervals)
        assert dispersion[0] == pytest.approx(156.0 / 3.5)
        # (100 + 220 + 340) + 0.5 * 500
        assert under[0] == pytest.approx(910.0 / 3.5)
        assert over[0] == 0
        assert total[0] == pytest.approx(1066.0 / 3.5)

    def test_vectorised_over_observations(self, demo_intervals):
        observed = np.array([1500, 2000, 2800])
        total = weighted_interval_score_fast(observed, 2000, demo_intervals)[0]
        assert total.shape == (3,)
        assert total[1] < total[0]
        assert total[1] < total[2]

    def test_components_sum_to_total(self, demo_intervals):
        observed = np.linspace(1200, 2800, 17)
        total, dispersion, under, over = weighted_interval_score_fast(observed, 2000, demo_intervals)
        np.testing.assert_allclose(total, dispersion + under + over)

    def test_no_intervals_is_absolute_error(self):
        total = weighted_interval_score_fast(1500, 2000, [])[0]
        assert total[0] == pytest.approx(500.0)

    def test_inconsistent_bounds_raise(self):
        with pytest.raises(ValueError):
            weighted_interval_score_fast(2000, 2000, [Interval(2400, 1600, 0.05)])
