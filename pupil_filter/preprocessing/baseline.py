# pupil_filter/preprocessing/baseline.py
"""Baseline estimation from a dedicated calibration recording."""

from __future__ import annotations

import logging

import pandas as pd

from .. import stats
from ..config import BaselineConfig, ColumnConfig
from ..exceptions import InsufficientData, MissingColumns
from .normalization import coerce_numeric

logger = logging.getLogger(__name__)

STAGE = "baseline"


def compute_pupil_mean(df: pd.DataFrame, columns: ColumnConfig) -> pd.Series:
    """
    Per-row mean of left/right pupil diameter.

    Missing eyes are skipped; a row with both eyes missing stays missing.
    """
    required = [columns.pupil_left, columns.pupil_right]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise MissingColumns(missing, stage=STAGE)

    pupils = pd.DataFrame(
        {col: coerce_numeric(df[col]) for col in required},
        index=df.index,
    )
    values = stats.row_mean(pupils, required, skipna=True)
    return stats.to_nullable(values, index=df.index)


def estimate_baseline(
    calibration: pd.DataFrame,
    cfg: BaselineConfig | None = None,
    columns: ColumnConfig | None = None,
) -> float:
    """
    Baseline dilation (mm) of a calibration recording.

    Mean of the trailing ``cfg.window_samples`` per-row pupil means, in
    original row order, with missing rows excluded from the average.
    """
    cfg = cfg or BaselineConfig()
    columns = columns or ColumnConfig()

    n_rows = len(calibration)
    window = cfg.window_samples
    if n_rows == 0:
        raise InsufficientData("Calibration recording is empty", stage=STAGE)

    if n_rows < window:
        if cfg.short_calibration == "raise":
            raise InsufficientData(
                f"Calibration recording has {n_rows} rows, baseline window needs {window}",
                stage=STAGE,
                rows=range(0, n_rows),
            )
        logger.warning(
            "Calibration recording has only %d rows (< %d); using all of them for the baseline",
            n_rows,
            window,
        )
        window = n_rows

    pupil_mean = compute_pupil_mean(calibration, columns)
    trailing = pupil_mean.iloc[-window:]
    baseline = stats.mean(trailing, skipna=True)

    if pd.isna(baseline):
        raise InsufficientData(
            "No valid pupil diameter in the baseline window",
            stage=STAGE,
            rows=range(n_rows - window, n_rows),
        )

    n_valid = int(trailing.notna().sum())
    logger.info("Baseline %.4f mm from %d/%d valid samples", baseline, n_valid, window)
    return baseline
