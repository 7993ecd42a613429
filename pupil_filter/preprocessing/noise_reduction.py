# pupil_filter/preprocessing/noise_reduction.py
"""Noise reduction: centered rolling mean on the dilation signal."""

from __future__ import annotations

import pandas as pd

from .. import stats
from ..config import SmoothingConfig
from ..constants import ColumnNames
from ..exceptions import InsufficientData, MissingColumns

STAGE = "smoothing"


def rolling_mean(series: pd.Series, window_samples: int) -> pd.Series:
    """
    Centered rolling mean over the available values.

    - missing values inside the window are skipped
    - at the edges the window is truncated ("partial")
    - a window without any value stays missing
    """
    values = pd.Series(stats.as_float_array(series), index=series.index)
    smoothed = values.rolling(window=window_samples, center=True, min_periods=1).mean()
    return stats.to_nullable(smoothed, index=series.index)


def smooth_dilation(df: pd.DataFrame, cfg: SmoothingConfig | None = None) -> pd.DataFrame:
    """
    Adds ``smooth`` (rolling mean of ``dilation``), aligned 1:1 with the rows.
    """
    cfg = cfg or SmoothingConfig()
    if ColumnNames.DILATION not in df.columns:
        raise MissingColumns([ColumnNames.DILATION], stage=STAGE)

    dilation = df[ColumnNames.DILATION]
    if len(df) > 0 and dilation.isna().all():
        raise InsufficientData(
            "Dilation signal is missing everywhere, no smoothing window has a value",
            stage=STAGE,
            rows=range(0, len(df)),
        )

    out = df.copy()
    out[ColumnNames.SMOOTH] = rolling_mean(dilation, cfg.window_samples)
    return out
