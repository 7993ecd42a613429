"""Noise reduction stage."""
from __future__ import annotations

import pandas as pd

from .base import IPipelineStage, PipelineContext
from ..preprocessing.noise_reduction import smooth_dilation


class SmoothingStage(IPipelineStage):
    """Apply the centered rolling mean to the dilation signal."""

    name = "smoothing"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        return smooth_dilation(table, context.config.smoothing)
