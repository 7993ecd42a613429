# pupil_filter/stats.py
"""Missing-aware aggregations.

Every aggregation takes an explicit ``skipna`` policy. Missing values are
``pd.NA`` in the tables; here they are handled as NaN on plain float arrays.
A result that cannot be computed is NaN and is turned back into ``pd.NA``
by :func:`to_nullable`.
"""
from __future__ import annotations

from typing import Iterable, Union

import numpy as np
import pandas as pd

ArrayLike = Union[pd.Series, np.ndarray, Iterable[float]]


def as_float_array(values: ArrayLike) -> np.ndarray:
    """Convert a (possibly nullable) series to a float array with NaN for missing."""
    if isinstance(values, np.ndarray) and values.dtype.kind == "f":
        return values
    if not isinstance(values, pd.Series):
        values = pd.Series(list(values), dtype=object)
    numeric = pd.to_numeric(values, errors="coerce")
    return numeric.to_numpy(dtype=float, na_value=np.nan)


def to_nullable(values: ArrayLike, index=None) -> pd.Series:
    """Wrap float values into a ``Float64`` series (NaN -> ``pd.NA``)."""
    arr = as_float_array(values)
    return pd.Series(pd.array(arr, dtype="Float64"), index=index)


def mean(values: ArrayLike, *, skipna: bool) -> float:
    """Arithmetic mean; NaN when nothing is left to average."""
    arr = as_float_array(values)
    if not skipna and np.isnan(arr).any():
        return float("nan")
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return float("nan")
    return float(arr.mean())


def median(values: ArrayLike, *, skipna: bool) -> float:
    arr = as_float_array(values)
    if not skipna and np.isnan(arr).any():
        return float("nan")
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return float("nan")
    return float(np.median(arr))


def median_abs_deviation(values: ArrayLike, *, skipna: bool) -> float:
    """Median of |x - median(x)| (unscaled MAD)."""
    arr = as_float_array(values)
    center = median(arr, skipna=skipna)
    if np.isnan(center):
        return float("nan")
    return median(np.abs(arr - center), skipna=skipna)


def row_mean(frame: pd.DataFrame, columns, *, skipna: bool) -> np.ndarray:
    """Per-row mean over ``columns``; NaN where no value is available."""
    block = np.column_stack([as_float_array(frame[c]) for c in columns])
    if block.size == 0:
        return np.full(len(frame), np.nan)
    valid = ~np.isnan(block)
    counts = valid.sum(axis=1)
    sums = np.where(valid, block, 0.0).sum(axis=1)
    with np.errstate(invalid="ignore", divide="ignore"):
        result = sums / counts
    result[counts == 0] = np.nan
    if not skipna:
        result[counts < block.shape[1]] = np.nan
    return result
