"""AOI consolidation stage."""
from __future__ import annotations

import pandas as pd

from .base import IPipelineStage, PipelineContext
from ..preprocessing.aoi import consolidate_aoi


class AOIConsolidationStage(IPipelineStage):
    """Collapse the AOI hit columns into the categorical focus label."""

    name = "aoi"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        return consolidate_aoi(table, context.config.aoi)
