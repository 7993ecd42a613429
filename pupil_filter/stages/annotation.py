"""Segment, epoch and session annotation stages."""
from __future__ import annotations

import pandas as pd

from .base import IPipelineStage, PipelineContext
from ..processing.annotation import assign_epochs, assign_segments, attach_session_metadata


class SegmentAnnotationStage(IPipelineStage):
    """Number the runs of identical focus labels."""

    name = "segments"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        return assign_segments(table)


class EpochAnnotationStage(IPipelineStage):
    """Apply the externally coded epoch ranges.

    Must run before any stage that changes the row count.
    """

    name = "epochs"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        return assign_epochs(table, context.epochs)


class SessionMetadataStage(IPipelineStage):
    """Attach subject and correctness to every row."""

    name = "session"

    def process(self, table: pd.DataFrame, context: PipelineContext) -> pd.DataFrame:
        return attach_session_metadata(table, context.session)
