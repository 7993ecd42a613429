"""Preprocessing stage: baseline, normalization, AOI consolidation and smoothing."""

from .baseline import compute_pupil_mean, estimate_baseline
from .normalization import coerce_numeric, normalize_dilation
from .aoi import consolidate_aoi, find_conflicting_rows
from .noise_reduction import rolling_mean, smooth_dilation

__all__ = [
    'compute_pupil_mean',
    'estimate_baseline',
    'coerce_numeric',
    'normalize_dilation',
    'consolidate_aoi',
    'find_conflicting_rows',
    'rolling_mean',
    'smooth_dilation',
]
