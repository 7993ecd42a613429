# pupil_filter/preprocessing/normalization.py
"""Dilation normalization: baseline subtraction and time zeroing."""

from __future__ import annotations

import pandas as pd

from .. import stats
from ..config import AOIConfig, ColumnConfig
from ..constants import ColumnNames
from ..exceptions import MissingColumns

STAGE = "normalization"


def coerce_numeric(series: pd.Series) -> pd.Series:
    """
    Numbers from a raw export column.

    - comma decimals ("3,21") are accepted
    - empty strings and other junk become missing
    """
    if not pd.api.types.is_numeric_dtype(series):
        series = series.astype(str).str.strip().str.replace(",", ".", regex=False)
    return pd.to_numeric(series, errors="coerce")


def normalize_dilation(
    trial: pd.DataFrame,
    baseline: float,
    columns: ColumnConfig | None = None,
    aoi: AOIConfig | None = None,
) -> pd.DataFrame:
    """
    Baseline-corrected dilation on a zeroed time axis.

      - dilation = mean(left, right; missing skipped) - baseline
      - time     = timestamp - segment start

    Returns a new DataFrame with exactly ``time``, ``dilation`` and the AOI
    hit columns (configured order). Row count and order are unchanged.
    """
    columns = columns or ColumnConfig()
    aoi = aoi or AOIConfig()

    required = [
        columns.timestamp,
        columns.segment_start,
        columns.pupil_left,
        columns.pupil_right,
        *aoi.columns,
    ]
    missing = [c for c in required if c not in trial.columns]
    if missing:
        raise MissingColumns(missing, stage=STAGE)

    pupils = pd.DataFrame(
        {
            "left": coerce_numeric(trial[columns.pupil_left]),
            "right": coerce_numeric(trial[columns.pupil_right]),
        },
        index=trial.index,
    )
    pupil_mean = stats.row_mean(pupils, ["left", "right"], skipna=True)

    timestamp = stats.as_float_array(coerce_numeric(trial[columns.timestamp]))
    segment_start = stats.as_float_array(coerce_numeric(trial[columns.segment_start]))

    out = pd.DataFrame(index=trial.index)
    out[ColumnNames.TIME] = stats.to_nullable(timestamp - segment_start, index=trial.index)
    out[ColumnNames.DILATION] = stats.to_nullable(pupil_mean - float(baseline), index=trial.index)
    for col in aoi.columns:
        out[col] = coerce_numeric(trial[col]).astype("Float64")
    return out
