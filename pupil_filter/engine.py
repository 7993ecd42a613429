"""High level pupil dilation pipeline orchestration."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import pandas as pd

from .config import EpochSpec, PipelineConfig, SessionMetadata
from .constants import ColumnNames
from .exceptions import PupilFilterError
from .preprocessing.baseline import estimate_baseline
from .stages import (
    AOIConsolidationStage,
    BlinkFilterStage,
    DilationNormalizationStage,
    EpochAnnotationStage,
    IPipelineStage,
    PipelineContext,
    SegmentAnnotationStage,
    SessionMetadataStage,
    SmoothingStage,
)

logger = logging.getLogger(__name__)


class IPupilFilter(Protocol):
    """Protocol for running the pupil dilation pipeline."""

    def run(
        self,
        calibration: pd.DataFrame,
        trial: pd.DataFrame,
        epochs: EpochSpec,
        session: SessionMetadata,
        config: Optional[PipelineConfig] = None,
    ) -> "FilterResult":
        ...


@dataclass
class FilterResult:
    """Wrapper holding the processed table and run summary."""

    table: pd.DataFrame
    baseline: float
    n_input_samples: int
    n_removed_samples: int
    created_at: datetime
    stage_stats: Dict[str, Dict[str, Any]] = field(default_factory=dict)


class PupilFilterEngine(IPupilFilter):
    """Baseline estimation followed by the dedicated table stages."""

    def __init__(self, stages: List[IPipelineStage] | None = None) -> None:
        self.stages: List[IPipelineStage] = stages or [
            DilationNormalizationStage(),
            AOIConsolidationStage(),
            SmoothingStage(),
            SegmentAnnotationStage(),
            EpochAnnotationStage(),
            BlinkFilterStage(),
            SessionMetadataStage(),
        ]

    def run(
        self,
        calibration: pd.DataFrame,
        trial: pd.DataFrame,
        epochs: EpochSpec,
        session: SessionMetadata,
        config: Optional[PipelineConfig] = None,
    ) -> FilterResult:
        config = config or PipelineConfig()

        try:
            baseline = estimate_baseline(calibration, config.baseline, config.columns)
        except PupilFilterError as e:
            e.stage = e.stage or "baseline"
            logger.error("Pipeline aborted: %s", e)
            raise

        context = PipelineContext(config=config, baseline=baseline, epochs=epochs, session=session)

        table = trial
        stage_stats: Dict[str, Dict[str, Any]] = {}
        for stage in self.stages:
            n_before = len(table)
            try:
                table = stage.process(table, context)
            except PupilFilterError as e:
                e.stage = e.stage or stage.name
                logger.error("Pipeline aborted: %s", e)
                raise
            if stage.name in table.attrs:
                stage_stats[stage.name] = table.attrs.pop(stage.name)
            logger.debug("Stage %s: %d -> %d rows", stage.name, n_before, len(table))

        ordered = [c for c in ColumnNames.OUTPUT_ORDER if c in table.columns]
        extra = [c for c in table.columns if c not in ordered]
        table = table[ordered + extra]

        return FilterResult(
            table=table,
            baseline=baseline,
            n_input_samples=len(trial),
            n_removed_samples=len(trial) - len(table),
            created_at=datetime.now(timezone.utc),
            stage_stats=stage_stats,
        )


def run_pipeline(
    calibration: pd.DataFrame,
    trial: pd.DataFrame,
    breakpoints: List[int],
    labels: List[str],
    subject: str,
    correct: bool,
    config: Optional[PipelineConfig] = None,
) -> pd.DataFrame:
    """
    One-call API: processed table for one calibration/trial pair.

    Example:
        >>> table = run_pipeline(calib_df, trial_df, [0, 120, 300], ["pre", "post"],
        ...                      subject="S01", correct=True)
    """
    result = PupilFilterEngine().run(
        calibration,
        trial,
        EpochSpec(breakpoints=breakpoints, labels=labels),
        SessionMetadata(subject=subject, correct=correct),
        config,
    )
    return result.table
