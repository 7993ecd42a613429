# pupil_filter/exceptions.py
"""Errors raised by the pupil dilation pipeline.

Every error carries the name of the stage it was raised in and, where one
applies, the offending row range. The engine fills in the stage name when a
helper raised without one.
"""
from __future__ import annotations

from typing import Optional, Sequence


class PupilFilterError(Exception):
    """Base class of all pipeline errors."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        rows: Optional[Sequence[int]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.rows = list(rows) if rows is not None else None

    def __str__(self) -> str:
        parts = []
        if self.stage:
            parts.append(f"[{self.stage}]")
        parts.append(self.message)
        if self.rows:
            parts.append(f"(rows {_format_rows(self.rows)})")
        return " ".join(parts)


def _format_rows(rows: Sequence[int], limit: int = 10) -> str:
    # contiguous ranges are shown as "first-last"
    if len(rows) > 2 and list(rows) == list(range(rows[0], rows[-1] + 1)):
        return f"{rows[0]}-{rows[-1]}"
    shown = ", ".join(str(r) for r in rows[:limit])
    if len(rows) > limit:
        shown += f", ... ({len(rows)} total)"
    return shown


class InsufficientData(PupilFilterError):
    """A window (baseline or smoothing) cannot produce any value."""


class EpochRangeMismatch(PupilFilterError):
    """Epoch breakpoints do not partition the current row range."""


class MalformedAOIRow(PupilFilterError):
    """More than one AOI indicator is set in the same row."""


class DegenerateStatistics(PupilFilterError):
    """Velocity bounds collapsed (MAD is zero or undefined)."""


class MissingColumns(PupilFilterError, KeyError):
    """Required columns are absent from the input table."""

    def __init__(self, columns: Sequence[str], stage: Optional[str] = None) -> None:
        self.columns = list(columns)
        super().__init__(
            f"DataFrame must contain column(s): {', '.join(self.columns)}",
            stage=stage,
        )

    def __str__(self) -> str:
        return PupilFilterError.__str__(self)


class ConfigurationError(PupilFilterError, ValueError):
    """Invalid configuration value."""
