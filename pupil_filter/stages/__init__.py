"""Pipeline stages composing the pupil dilation filter."""

from .base import IPipelineStage, PipelineContext
from .normalization import DilationNormalizationStage
from .aoi_consolidation import AOIConsolidationStage
from .smoothing import SmoothingStage
from .annotation import SegmentAnnotationStage, EpochAnnotationStage, SessionMetadataStage
from .blink_filter import BlinkFilterStage

__all__ = [
    "IPipelineStage",
    "PipelineContext",
    "DilationNormalizationStage",
    "AOIConsolidationStage",
    "SmoothingStage",
    "SegmentAnnotationStage",
    "EpochAnnotationStage",
    "BlinkFilterStage",
    "SessionMetadataStage",
]
