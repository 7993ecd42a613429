"""
Tests for velocity computation and median/MAD blink rejection.
"""
import logging

import numpy as np
import pandas as pd
import pytest

from pupil_filter.config import BlinkFilterConfig
from pupil_filter.exceptions import ConfigurationError, DegenerateStatistics, MissingColumns
from pupil_filter.processing.blinks import (
    VelocityBounds,
    compute_velocity,
    compute_velocity_bounds,
    remove_blinks,
)

# Jump of 100 between rows 5 and 6; all other steps are 1..3
SPIKE_SMOOTH = [0.0, 1.0, 3.0, 6.0, 7.0, 9.0, 109.0, 112.0, 113.0, 115.0, 118.0, 119.0]


def _smooth_frame(smooth, step: float = 10.0) -> pd.DataFrame:
    n = len(smooth)
    return pd.DataFrame(
        {
            "time": pd.array(np.arange(n) * step, dtype="Float64"),
            "smooth": pd.array(smooth, dtype="Float64"),
        }
    )


def _velocity_frame(vel) -> pd.DataFrame:
    n = len(vel)
    return pd.DataFrame(
        {
            "time": pd.array(np.arange(n) * 10.0, dtype="Float64"),
            "smooth": pd.array([0.0] * n, dtype="Float64"),
            "vel": pd.array(vel, dtype="Float64"),
        }
    )


class TestComputeVelocity:

    def test_difference_quotient(self):
        result = compute_velocity(_smooth_frame([0.0, 1.0, 3.0], step=10.0))
        vel = result["vel"]
        assert vel.iloc[0] is pd.NA
        assert vel.iloc[1] == pytest.approx(0.1)
        assert vel.iloc[2] == pytest.approx(0.2)

    def test_missing_smooth_gives_missing_velocity(self):
        result = compute_velocity(_smooth_frame([0.0, None, 3.0, 4.0]))
        assert result["vel"].iloc[1:3].isna().all()
        assert result["vel"].iloc[3] == pytest.approx(0.1)

    def test_non_positive_time_step(self, caplog):
        df = _smooth_frame([0.0, 1.0, 2.0])
        df["time"] = pd.array([0.0, 10.0, 10.0], dtype="Float64")
        with caplog.at_level(logging.WARNING):
            result = compute_velocity(df)
        assert result["vel"].iloc[2] is pd.NA
        assert "non-positive time step" in caplog.text

    def test_single_row(self):
        result = compute_velocity(_smooth_frame([1.0]))
        assert result["vel"].isna().all()

    def test_requires_smooth(self):
        with pytest.raises(MissingColumns):
            compute_velocity(pd.DataFrame({"time": [0.0, 1.0]}))


class TestVelocityBounds:

    def test_median_and_mad(self):
        vel = pd.Series(pd.array([None, 1.0, 2.0, 3.0, 4.0, 5.0], dtype="Float64"))
        bounds = compute_velocity_bounds(vel, BlinkFilterConfig(mad_multiplier=2.0))
        assert bounds.median == pytest.approx(3.0)
        assert bounds.mad == pytest.approx(1.0)
        assert (bounds.lower, bounds.upper) == pytest.approx((1.0, 5.0))
        assert bounds.n_defined == 5

    def test_contains_is_strict(self):
        bounds = VelocityBounds(median=0.0, mad=1.0, lower=-1.0, upper=1.0, n_defined=3)
        inside = bounds.contains(np.array([-1.0, 0.0, 1.0, np.nan]))
        assert inside.tolist() == [False, True, False, False]

    @pytest.mark.parametrize(
        "mad,n_defined,all_equal",
        [(0.0, 5, True), (float("nan"), 0, False)],
    )
    def test_degenerate(self, mad, n_defined, all_equal):
        bounds = VelocityBounds(
            median=0.0, mad=mad, lower=0.0, upper=0.0, n_defined=n_defined, all_equal=all_equal
        )
        assert bounds.is_degenerate

    def test_zero_mad_with_distinct_values_is_not_degenerate(self):
        vel = pd.Series(pd.array([None, 0.0, 0.0, 0.3, -0.3, 0.0, 0.0], dtype="Float64"))
        bounds = compute_velocity_bounds(vel)
        assert bounds.mad == 0.0
        assert not bounds.all_equal
        assert not bounds.is_degenerate
        inside = bounds.contains(np.array([0.0, 0.3, -0.3, np.nan]))
        assert inside.tolist() == [True, False, False, False]

    def test_from_stats(self):
        _, filter_stats = remove_blinks(_smooth_frame(SPIKE_SMOOTH))
        bounds = VelocityBounds.from_stats(filter_stats)
        assert bounds.median == pytest.approx(0.2)
        assert not bounds.is_degenerate


class TestRemoveBlinks:

    def test_spike_is_removed(self):
        df = compute_velocity(_smooth_frame(SPIKE_SMOOTH))
        result, stats = remove_blinks(df)
        assert len(result) == 11
        assert 109.0 not in result["smooth"].tolist()
        assert stats["n_samples_removed"] == 1
        assert stats["median"] == pytest.approx(0.2)
        assert stats["mad"] == pytest.approx(0.1)

    def test_velocity_is_computed_when_absent(self):
        result, stats = remove_blinks(_smooth_frame(SPIKE_SMOOTH))
        assert "vel" in result.columns
        assert stats["n_samples_removed"] == 1

    def test_bounds_are_exclusive(self):
        df = _velocity_frame([None, 1.0, 2.0, 3.0, 4.0, 5.0])
        result, _ = remove_blinks(df, BlinkFilterConfig(mad_multiplier=2.0))
        vel = result["vel"]
        assert vel.iloc[0] is pd.NA
        assert vel.iloc[1:].tolist() == [2.0, 3.0, 4.0]

    def test_undefined_velocity_drop_policy(self):
        df = compute_velocity(_smooth_frame(SPIKE_SMOOTH))
        result, stats = remove_blinks(df, BlinkFilterConfig(undefined_velocity="drop"))
        assert len(result) == 10
        assert result["vel"].notna().all()
        assert stats["n_samples_removed"] == 2

    def test_order_kept_and_index_reset(self):
        df = compute_velocity(_smooth_frame(SPIKE_SMOOTH))
        result, _ = remove_blinks(df)
        assert list(result.index) == list(range(len(result)))
        assert result["time"].is_monotonic_increasing

    def test_retained_rows_are_unchanged(self):
        df = compute_velocity(_smooth_frame(SPIKE_SMOOTH))
        result, _ = remove_blinks(df)
        expected = df.drop(index=6).reset_index(drop=True)
        pd.testing.assert_frame_equal(result, expected)

    def test_zero_mad_keeps_everything(self, caplog):
        df = compute_velocity(_smooth_frame([2.0] * 6))
        with caplog.at_level(logging.WARNING):
            result, stats = remove_blinks(df)
        assert len(result) == 6
        assert stats["n_samples_removed"] == 0
        assert "Degenerate velocity statistics" in caplog.text

    def test_zero_mad_raise_policy(self):
        df = compute_velocity(_smooth_frame([2.0] * 6))
        with pytest.raises(DegenerateStatistics) as excinfo:
            remove_blinks(df, BlinkFilterConfig(on_degenerate="raise"))
        assert excinfo.value.stage == "blink_filter"

    def test_spike_on_flat_signal_is_removed(self):
        # most velocities are 0, so median and MAD are both 0
        smooth = [0.0] * 5 + [3.0] + [0.0] * 5
        result, stats = remove_blinks(_smooth_frame(smooth))
        assert stats["mad"] == 0.0
        assert not stats["all_equal"]
        assert stats["n_samples_removed"] == 2
        assert 3.0 not in result["smooth"].tolist()
        assert result["vel"].iloc[1:].tolist() == [0.0] * 8

    def test_stats_counts_add_up(self):
        df = compute_velocity(_smooth_frame(SPIKE_SMOOTH))
        result, stats = remove_blinks(df)
        assert stats["n_samples_total"] == len(df)
        assert len(result) + stats["n_samples_removed"] == len(df)

    def test_logs_summary(self, caplog):
        caplog.set_level(logging.INFO, logger="pupil_filter.processing.blinks")
        remove_blinks(compute_velocity(_smooth_frame(SPIKE_SMOOTH)))
        assert "removed 1/12 samples" in caplog.text


@pytest.mark.parametrize(
    "kwargs",
    [
        {"mad_multiplier": 0.0},
        {"undefined_velocity": "maybe"},
        {"on_degenerate": "ignore"},
    ],
)
def test_invalid_blink_config(kwargs):
    with pytest.raises(ConfigurationError):
        BlinkFilterConfig(**kwargs)
