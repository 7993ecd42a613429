# pupil_filter/preprocessing/aoi.py
"""AOI consolidation: several binary hit columns -> one categorical focus label."""

from __future__ import annotations

import logging
from typing import List

import numpy as np
import pandas as pd

from ..config import AOIConfig
from ..constants import ColumnNames
from ..exceptions import MalformedAOIRow, MissingColumns

logger = logging.getLogger(__name__)

STAGE = "aoi"


def _hit_mask(series: pd.Series) -> np.ndarray:
    """True where the indicator is 1; 0 and missing are no hit."""
    numeric = pd.to_numeric(series, errors="coerce")
    return numeric.eq(1).fillna(False).to_numpy(dtype=bool)


def find_conflicting_rows(df: pd.DataFrame, aoi: AOIConfig) -> List[int]:
    """Positional indices of rows with more than one AOI hit."""
    if df.empty:
        return []
    hits = np.column_stack([_hit_mask(df[col]) for col in aoi.columns])
    return [int(i) for i in np.flatnonzero(hits.sum(axis=1) > 1)]


def consolidate_aoi(df: pd.DataFrame, aoi: AOIConfig | None = None) -> pd.DataFrame:
    """
    Replace the AOI hit columns by a single ``focus`` column.

    Each column maps 1 -> its AOI name and 0/missing -> missing; the mapped
    columns are coalesced in configuration order (first hit wins) and rows
    without any hit become ``aoi.other_label``.
    """
    aoi = aoi or AOIConfig()

    missing = [c for c in aoi.columns if c not in df.columns]
    if missing:
        raise MissingColumns(missing, stage=STAGE)

    conflicts = find_conflicting_rows(df, aoi)
    if conflicts:
        if aoi.on_conflict == "raise":
            raise MalformedAOIRow(
                f"{len(conflicts)} row(s) hit more than one AOI",
                stage=STAGE,
                rows=conflicts,
            )
        if aoi.on_conflict == "warn":
            logger.warning(
                "%d row(s) hit more than one AOI, first AOI in column order wins: rows %s",
                len(conflicts),
                conflicts[:10],
            )

    labels = np.full(len(df), None, dtype=object)
    for name, col in aoi.aoi_columns.items():
        fill = _hit_mask(df[col]) & pd.isna(labels)
        labels[fill] = name
    labels[pd.isna(labels)] = aoi.other_label

    out = df.drop(columns=aoi.columns)
    out[ColumnNames.FOCUS] = pd.Categorical(
        labels,
        categories=[*aoi.names, aoi.other_label],
    )
    return out
