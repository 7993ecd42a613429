# pupil_filter/config.py
"""
Configuration classes for the pupil dilation pipeline.

This module defines every parameter of:
  - Baseline estimation (calibration window)
  - Raw column layout and AOI mapping
  - Smoothing (rolling mean)
  - Blink filter (velocity bounds from median/MAD)
  - Externally coded epochs and session metadata

Example:
    >>> from pupil_filter.config import PipelineConfig, AOIConfig, BlinkFilterConfig
    >>>
    >>> # Named AOIs, Tobii-style hit columns
    >>> cfg = PipelineConfig(
    ...     aoi=AOIConfig.from_names(["Face", "Hands", "Object", "Text"]),
    ...     blink_filter=BlinkFilterConfig(mad_multiplier=2.5),
    ... )
    >>>
    >>> # Or load the same from JSON
    >>> cfg = load_config("pipeline.json")
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Union

from .constants import ComputationalConstants, RawColumns
from .exceptions import ConfigurationError


def _default_aoi_columns() -> Dict[str, str]:
    return {
        name: RawColumns.AOI_HIT_TEMPLATE.format(name=name)
        for name in ComputationalConstants.DEFAULT_AOI_NAMES
    }


@dataclass
class ColumnConfig:
    """
    Raw column names of the calibration and trial recordings.
    """

    # Timestamp in ms, monotonic within a recording
    timestamp: str = RawColumns.TIMESTAMP

    # Pupil diameters in mm (may be missing)
    pupil_left: str = RawColumns.PUPIL_LEFT
    pupil_right: str = RawColumns.PUPIL_RIGHT

    # Start timestamp of the trial segment (trial table only)
    segment_start: str = RawColumns.SEGMENT_START


@dataclass
class AOIConfig:
    """
    AOI name -> hit column mapping.

    The order of the mapping is the coalesce order: if more than one AOI is
    hit in the same row, the first one wins.
    """

    aoi_columns: Dict[str, str] = field(default_factory=_default_aoi_columns)

    # Label for rows without any AOI hit
    other_label: str = ComputationalConstants.DEFAULT_OTHER_LABEL

    # Rows with more than one hit:
    # - "warn":   first AOI wins, offending rows are logged
    # - "raise":  MalformedAOIRow
    # - "ignore": first AOI wins silently
    on_conflict: Literal["warn", "raise", "ignore"] = "warn"

    def __post_init__(self) -> None:
        if not self.aoi_columns:
            raise ConfigurationError("aoi_columns must map at least one AOI name to a column")
        if self.other_label in self.aoi_columns:
            raise ConfigurationError(
                f"other_label {self.other_label!r} collides with an AOI name"
            )
        if self.on_conflict not in ("warn", "raise", "ignore"):
            raise ConfigurationError(f"Unknown on_conflict policy: {self.on_conflict}")

    @classmethod
    def from_names(cls, names: Iterable[str], **kwargs: Any) -> "AOIConfig":
        """Build the mapping from AOI names using the "AOI[<name>]Hit" pattern."""
        columns = {name: RawColumns.AOI_HIT_TEMPLATE.format(name=name) for name in names}
        return cls(aoi_columns=columns, **kwargs)

    @property
    def names(self) -> List[str]:
        return list(self.aoi_columns.keys())

    @property
    def columns(self) -> List[str]:
        return list(self.aoi_columns.values())


@dataclass
class BaselineConfig:
    """
    Calibration baseline estimation.
    """

    # Trailing samples averaged for the baseline (24 ~ 400 ms at 60 Hz)
    window_samples: int = ComputationalConstants.DEFAULT_BASELINE_WINDOW

    # Calibration shorter than the window:
    # - "raise":         InsufficientData
    # - "use_available": average all available rows
    short_calibration: Literal["raise", "use_available"] = "raise"

    def __post_init__(self) -> None:
        if self.window_samples < 1:
            raise ConfigurationError("Baseline window_samples must be >= 1")
        if self.short_calibration not in ("raise", "use_available"):
            raise ConfigurationError(
                f"Unknown short_calibration policy: {self.short_calibration}"
            )


@dataclass
class SmoothingConfig:
    """
    Centered rolling mean on the dilation signal.
    """

    # Odd window width in samples; edges use the truncated window
    window_samples: int = ComputationalConstants.DEFAULT_SMOOTHING_WINDOW

    def __post_init__(self) -> None:
        if self.window_samples < 1 or self.window_samples % 2 == 0:
            raise ConfigurationError("Smoothing window_samples must be a positive odd integer")


@dataclass
class BlinkFilterConfig:
    """
    Velocity-based blink rejection.
    """

    # Bounds: median(vel) +/- mad_multiplier * MAD(vel)
    mad_multiplier: float = ComputationalConstants.DEFAULT_MAD_MULTIPLIER

    # Rows without a velocity (first row, missing smooth values):
    # - "keep": retained, only confirmed outliers are removed
    # - "drop": removed
    undefined_velocity: Literal["keep", "drop"] = "keep"

    # MAD == 0 or no defined velocity:
    # - "keep_all": reject no outliers
    # - "raise":    DegenerateStatistics
    on_degenerate: Literal["keep_all", "raise"] = "keep_all"

    def __post_init__(self) -> None:
        if self.mad_multiplier <= 0:
            raise ConfigurationError("mad_multiplier must be > 0")
        if self.undefined_velocity not in ("keep", "drop"):
            raise ConfigurationError(
                f"Unknown undefined_velocity policy: {self.undefined_velocity}"
            )
        if self.on_degenerate not in ("keep_all", "raise"):
            raise ConfigurationError(f"Unknown on_degenerate policy: {self.on_degenerate}")


@dataclass
class EpochSpec:
    """
    Externally coded epochs (e.g. from video coding).

    ``labels[k]`` covers rows ``breakpoints[k]`` up to ``breakpoints[k + 1]``;
    the interval lengths must sum to the row count at annotation time.
    """

    breakpoints: List[int]
    labels: List[str]

    def __post_init__(self) -> None:
        self.breakpoints = [int(b) for b in self.breakpoints]
        self.labels = [str(label) for label in self.labels]

    @property
    def lengths(self) -> List[int]:
        return [b - a for a, b in zip(self.breakpoints, self.breakpoints[1:])]


@dataclass
class SessionMetadata:
    """Session-level constants attached to every output row."""

    subject: str
    correct: bool

    def __post_init__(self) -> None:
        self.subject = str(self.subject)
        if isinstance(self.correct, bool):
            return
        if self.correct in (0, 1):
            self.correct = bool(self.correct)
            return
        raise ConfigurationError(f"correct must be a bool or 0/1, got {self.correct!r}")


@dataclass
class PipelineConfig:
    """Aggregate configuration of all pipeline stages."""

    columns: ColumnConfig = field(default_factory=ColumnConfig)
    aoi: AOIConfig = field(default_factory=AOIConfig)
    baseline: BaselineConfig = field(default_factory=BaselineConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    blink_filter: BlinkFilterConfig = field(default_factory=BlinkFilterConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Load from dictionary; missing sections fall back to defaults."""
        known = {"columns", "aoi", "baseline", "smoothing", "blink_filter"}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config section(s): {', '.join(sorted(unknown))}")
        try:
            return cls(
                columns=ColumnConfig(**data.get("columns", {})),
                aoi=AOIConfig(**data.get("aoi", {})),
                baseline=BaselineConfig(**data.get("baseline", {})),
                smoothing=SmoothingConfig(**data.get("smoothing", {})),
                blink_filter=BlinkFilterConfig(**data.get("blink_filter", {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid config: {e}") from e


def load_config(path: Union[str, Path]) -> PipelineConfig:
    """Read a PipelineConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return PipelineConfig.from_dict(data)


def save_config(config: PipelineConfig, path: Union[str, Path]) -> None:
    """Write a PipelineConfig as JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
