# pupil_filter/processing/annotation.py
"""Segment and epoch annotation, session metadata."""

from __future__ import annotations

from typing import Hashable, List, Optional

import pandas as pd

from ..config import EpochSpec, SessionMetadata
from ..constants import ColumnNames
from ..exceptions import EpochRangeMismatch, MissingColumns


def _same_run(a: Hashable, b: Hashable) -> bool:
    # missing values form one equality class
    a_missing = pd.isna(a)
    b_missing = pd.isna(b)
    if a_missing or b_missing:
        return bool(a_missing and b_missing)
    return a == b


def run_length_ids(values: List[Hashable]) -> List[int]:
    """
    Run ids for a sequence: consecutive equal values share an id, ids start
    at 1 and grow by one at every change.
    """
    ids: List[int] = []
    current_id = 0
    previous: Optional[Hashable] = None

    for i, value in enumerate(values):
        if i == 0 or not _same_run(value, previous):
            current_id += 1
        ids.append(current_id)
        previous = value
    return ids


def assign_segments(
    df: pd.DataFrame,
    column: str = ColumnNames.FOCUS,
    out_col: str = ColumnNames.SEGMENT,
) -> pd.DataFrame:
    """
    Adds ``segment``: one id per maximal run of identical ``focus`` values.
    """
    if column not in df.columns:
        raise MissingColumns([column], stage="segments")

    out = df.copy()
    out[out_col] = pd.array(run_length_ids(df[column].tolist()), dtype="Int64")
    return out


def assign_epochs(df: pd.DataFrame, spec: EpochSpec) -> pd.DataFrame:
    """
    Adds ``epochs`` (label) and ``epoch_order`` (1-based interval position).

    The first breakpoint is row 0; interval lengths are the successive
    differences of ``spec.breakpoints`` and have to add up to the current row
    count exactly.
    """
    n_rows = len(df)
    breakpoints = spec.breakpoints
    labels = spec.labels

    if len(breakpoints) < 2 or len(labels) != len(breakpoints) - 1:
        raise EpochRangeMismatch(
            f"Expected {max(len(breakpoints) - 1, 0)} label(s) for {len(breakpoints)} "
            f"breakpoint(s), got {len(labels)}",
            stage="epochs",
        )

    if breakpoints[0] != 0:
        raise EpochRangeMismatch(
            f"First breakpoint must be row 0, got {breakpoints[0]}",
            stage="epochs",
        )

    lengths = spec.lengths
    negative = [k for k, n in enumerate(lengths) if n < 0]
    if negative:
        k = negative[0]
        raise EpochRangeMismatch(
            f"Breakpoints must not decrease: {breakpoints[k]} -> {breakpoints[k + 1]} "
            f"(epoch {k + 1}, {labels[k]!r})",
            stage="epochs",
        )

    total = sum(lengths)
    if total != n_rows:
        raise EpochRangeMismatch(
            f"Epoch intervals cover {total} rows (breakpoints {breakpoints[0]}..{breakpoints[-1]}), "
            f"table has {n_rows} rows",
            stage="epochs",
            rows=range(0, n_rows),
        )

    epoch_labels: List[str] = []
    epoch_order: List[int] = []
    for position, (label, length) in enumerate(zip(labels, lengths), start=1):
        epoch_labels.extend([label] * length)
        epoch_order.extend([position] * length)

    out = df.copy()
    out[ColumnNames.EPOCHS] = pd.Categorical(epoch_labels, categories=list(dict.fromkeys(labels)))
    out[ColumnNames.EPOCH_ORDER] = pd.array(epoch_order, dtype="Int64")
    return out


def attach_session_metadata(df: pd.DataFrame, session: SessionMetadata) -> pd.DataFrame:
    """Adds constant ``subject`` and ``correct`` columns."""
    out = df.copy()
    out[ColumnNames.SUBJECT] = pd.Series([session.subject] * len(out), index=out.index, dtype="string")
    out[ColumnNames.CORRECT] = pd.Series([session.correct] * len(out), index=out.index, dtype="boolean")
    return out
