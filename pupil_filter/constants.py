# pupil_filter/constants.py
"""Column names and computational defaults for pupil dilation processing."""

from __future__ import annotations


class ColumnNames:
    """Names of the columns produced by the pipeline."""

    TIME: str = "time"
    DILATION: str = "dilation"
    FOCUS: str = "focus"
    SMOOTH: str = "smooth"
    SEGMENT: str = "segment"
    EPOCHS: str = "epochs"
    EPOCH_ORDER: str = "epoch_order"
    VELOCITY: str = "vel"
    SUBJECT: str = "subject"
    CORRECT: str = "correct"

    # Final column order of the processed table
    OUTPUT_ORDER = (
        TIME,
        DILATION,
        FOCUS,
        SMOOTH,
        SEGMENT,
        EPOCHS,
        EPOCH_ORDER,
        VELOCITY,
        SUBJECT,
        CORRECT,
    )


class RawColumns:
    """Default raw column names (Tobii Studio style export)."""

    TIMESTAMP: str = "RecordingTimestamp"
    PUPIL_LEFT: str = "PupilLeft"
    PUPIL_RIGHT: str = "PupilRight"
    SEGMENT_START: str = "SegmentStart"

    # AOI hit columns follow the "AOI[<name>]Hit" pattern
    AOI_HIT_TEMPLATE: str = "AOI[{name}]Hit"


class ComputationalConstants:
    """Computational constants and defaults."""

    # Trailing calibration samples for the baseline (~400 ms at 60 Hz)
    DEFAULT_BASELINE_WINDOW: int = 24

    # Centered rolling mean width (previous, current, next sample)
    DEFAULT_SMOOTHING_WINDOW: int = 3

    # Bounds are median(vel) +/- multiplier * MAD(vel)
    DEFAULT_MAD_MULTIPLIER: float = 3.0

    # Label for rows without any AOI hit
    DEFAULT_OTHER_LABEL: str = "other"

    # Default AOI names when none are configured
    DEFAULT_AOI_NAMES = ("AOI1", "AOI2", "AOI3", "AOI4")
