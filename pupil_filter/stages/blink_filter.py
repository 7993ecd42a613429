"""Blink rejection stage."""
from __future__ import annotations

import pandas as pd

from .base import IPipelineStage, PipelineContext
from ..processing.blinks import compute_velocity, remove_blinks


class BlinkFilterStage(IPipelineStage):
    """Compute the velocity profile and drop outlier rows.

    The filter summary is handed to the engine through ``attrs[name]``.
    """

    name = "blink_filter"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        with_velocity = compute_velocity(table)
        filtered, filter_stats = remove_blinks(with_velocity, context.config.blink_filter)
        filtered.attrs[self.name] = filter_stats
        return filtered
