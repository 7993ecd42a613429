# pupil_filter/__init__.py
"""
Pupil dilation filter package.

Contains:
- Baseline estimation from a calibration recording
- Baseline correction, AOI consolidation and smoothing
- Segment / epoch annotation
- Velocity-based (median/MAD) blink rejection
"""

from .config import (
    AOIConfig,
    BaselineConfig,
    BlinkFilterConfig,
    ColumnConfig,
    EpochSpec,
    PipelineConfig,
    SessionMetadata,
    SmoothingConfig,
    load_config,
)
from .exceptions import (
    ConfigurationError,
    DegenerateStatistics,
    EpochRangeMismatch,
    InsufficientData,
    MalformedAOIRow,
    MissingColumns,
    PupilFilterError,
)
from .preprocessing import estimate_baseline, normalize_dilation, consolidate_aoi, smooth_dilation
from .processing import assign_segments, assign_epochs, attach_session_metadata, remove_blinks
from .engine import FilterResult, PupilFilterEngine, run_pipeline

__version__ = "0.1.0"
