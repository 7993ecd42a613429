# pupil_filter/processing/blinks.py
"""
Blink / artifact rejection on the dilation velocity profile.

Blinks show up as physiologically impossible jumps of the pupil signal. The
velocity of the smoothed signal is thresholded with robust statistics
(median and median absolute deviation), which tolerate the heavy tails of
pupil velocity distributions better than mean and standard deviation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd

from .. import stats
from ..config import BlinkFilterConfig
from ..constants import ColumnNames
from ..exceptions import DegenerateStatistics, MissingColumns

logger = logging.getLogger(__name__)

STAGE = "blink_filter"


@dataclass(frozen=True)
class VelocityBounds:
    """Robust acceptance band for the velocity profile."""

    median: float
    mad: float
    lower: float
    upper: float
    n_defined: int

    # All defined velocities share one value
    all_equal: bool = False

    @classmethod
    def from_stats(cls, filter_stats: Dict[str, Any]) -> "VelocityBounds":
        """Rebuild the bounds from the summary returned by :func:`remove_blinks`."""
        return cls(
            median=filter_stats["median"],
            mad=filter_stats["mad"],
            lower=filter_stats["lower"],
            upper=filter_stats["upper"],
            n_defined=filter_stats["n_defined"],
            all_equal=filter_stats["all_equal"],
        )

    @property
    def is_degenerate(self) -> bool:
        return self.n_defined == 0 or not np.isfinite(self.mad) or self.all_equal

    def contains(self, values: np.ndarray) -> np.ndarray:
        """
        Strict ``lower < v < upper``; NaN is never inside.

        With a zero MAD the band collapses to the median, so only velocities
        equal to the median are inside.
        """
        with np.errstate(invalid="ignore"):
            if self.mad == 0.0:
                return values == self.median
            return (values > self.lower) & (values < self.upper)


def compute_velocity(df: pd.DataFrame) -> pd.DataFrame:
    """
    Adds ``vel`` = d(smooth) / d(time) between consecutive rows.

    The first row has no velocity. Rows where either smooth value is missing
    or where the time step is not positive stay missing as well.
    """
    missing = [c for c in (ColumnNames.TIME, ColumnNames.SMOOTH) if c not in df.columns]
    if missing:
        raise MissingColumns(missing, stage=STAGE)

    smooth = stats.as_float_array(df[ColumnNames.SMOOTH])
    times = stats.as_float_array(df[ColumnNames.TIME])

    vel = np.full(len(df), np.nan)
    if len(df) > 1:
        d_smooth = np.diff(smooth)
        dt = np.diff(times)
        bad_dt = ~(dt > 0) & ~np.isnan(dt)
        if bad_dt.any():
            logger.warning(
                "%d non-positive time step(s), velocity left undefined at rows %s",
                int(bad_dt.sum()),
                (np.flatnonzero(bad_dt) + 1)[:10].tolist(),
            )
        with np.errstate(invalid="ignore", divide="ignore"):
            vel[1:] = np.where(dt > 0, d_smooth / dt, np.nan)

    out = df.copy()
    out[ColumnNames.VELOCITY] = stats.to_nullable(vel, index=df.index)
    return out


def compute_velocity_bounds(
    vel: pd.Series,
    cfg: BlinkFilterConfig | None = None,
) -> VelocityBounds:
    """median(vel) -/+ mad_multiplier * MAD(vel), missing velocities skipped."""
    cfg = cfg or BlinkFilterConfig()
    values = stats.as_float_array(vel)
    defined = values[~np.isnan(values)]
    n_defined = int(defined.size)
    all_equal = bool(n_defined > 0 and np.all(defined == defined[0]))

    center = stats.median(values, skipna=True)
    mad = stats.median_abs_deviation(values, skipna=True)
    spread = cfg.mad_multiplier * mad
    return VelocityBounds(
        median=center,
        mad=mad,
        lower=center - spread,
        upper=center + spread,
        n_defined=n_defined,
        all_equal=all_equal,
    )


def remove_blinks(
    df: pd.DataFrame,
    cfg: BlinkFilterConfig | None = None,
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Drop rows whose velocity lies outside the robust bounds.

    Computes ``vel`` if it is not there yet. Retained rows keep their
    relative order; the index is reset.

    Returns:
        (df, stats): filtered DataFrame and a summary of the bounds and
        the number of removed samples.
    """
    cfg = cfg or BlinkFilterConfig()
    if ColumnNames.VELOCITY not in df.columns:
        df = compute_velocity(df)

    bounds = compute_velocity_bounds(df[ColumnNames.VELOCITY], cfg)
    values = stats.as_float_array(df[ColumnNames.VELOCITY])
    undefined = np.isnan(values)

    if bounds.is_degenerate:
        if cfg.on_degenerate == "raise":
            raise DegenerateStatistics(
                f"Velocity statistics are degenerate over {bounds.n_defined} defined sample(s) "
                f"(MAD={bounds.mad}), bounds collapse",
                stage=STAGE,
            )
        logger.warning(
            "Degenerate velocity statistics (MAD=%s, %d defined samples), no outliers rejected",
            bounds.mad,
            bounds.n_defined,
        )
        keep = ~undefined
    else:
        keep = bounds.contains(values)

    if cfg.undefined_velocity == "keep":
        keep = keep | undefined

    n_total = len(df)
    n_removed = int(n_total - keep.sum())
    out = df.loc[keep].reset_index(drop=True)

    logger.info(
        "Blink filter removed %d/%d samples (vel bounds %.6g .. %.6g)",
        n_removed,
        n_total,
        bounds.lower,
        bounds.upper,
    )

    filter_stats: Dict[str, Any] = {
        "n_samples_total": n_total,
        "n_samples_removed": n_removed,
        "median": bounds.median,
        "mad": bounds.mad,
        "lower": bounds.lower,
        "upper": bounds.upper,
        "n_defined": bounds.n_defined,
        "all_equal": bounds.all_equal,
    }
    return out, filter_stats
