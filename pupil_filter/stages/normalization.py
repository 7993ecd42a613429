"""Dilation normalization stage (baseline subtraction, time zeroing)."""
from __future__ import annotations

import pandas as pd

from .base import IPipelineStage, PipelineContext
from ..preprocessing.normalization import normalize_dilation


class DilationNormalizationStage(IPipelineStage):
    """Project the raw trial recording to time, dilation and AOI hits."""

    name = "normalization"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        cfg = context.config
        return normalize_dilation(table, context.baseline, cfg.columns, cfg.aoi)
