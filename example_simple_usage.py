#!/usr/bin/env python3
"""
Simple usage examples for the pupil dilation filter.

Builds a synthetic calibration/trial pair so the examples run without
recorded data.
"""

import numpy as np
import pandas as pd

from pupil_filter import (
    AOIConfig,
    BlinkFilterConfig,
    EpochSpec,
    PipelineConfig,
    PupilFilterEngine,
    SessionMetadata,
    run_pipeline,
)

AOI_NAMES = ["Face", "Hands", "Object", "Text"]


def make_recordings(n_trial: int = 300, seed: int = 1):
    rng = np.random.default_rng(seed)

    calibration = pd.DataFrame(
        {
            "RecordingTimestamp": np.arange(60) * 16.7,
            "PupilLeft": 3.5 + rng.normal(0.0, 0.02, 60),
            "PupilRight": 3.6 + rng.normal(0.0, 0.02, 60),
        }
    )

    start = 5000.0
    pupil = 3.8 + 0.2 * np.sin(np.linspace(0, 3, n_trial)) + rng.normal(0.0, 0.01, n_trial)
    # blink: the tracker loses the pupil for a few samples, then a short dip
    pupil[120:124] = np.nan
    pupil[124:127] -= 1.5
    trial = pd.DataFrame(
        {
            "RecordingTimestamp": start + np.arange(n_trial) * 16.7,
            "PupilLeft": pupil,
            "PupilRight": pupil + 0.1,
            "SegmentStart": start,
        }
    )
    looked_at = rng.choice(len(AOI_NAMES) + 1, size=n_trial)
    for k, name in enumerate(AOI_NAMES):
        trial[f"AOI[{name}]Hit"] = (looked_at == k).astype(int)
    return calibration, trial


def example_1_minimal():
    """One call, default settings."""
    print("=" * 60)
    print("Example 1: Minimal Usage")
    print("=" * 60)

    calibration, trial = make_recordings()
    table = run_pipeline(
        calibration,
        trial,
        breakpoints=[0, 100, 300],
        labels=["baseline", "stimulus"],
        subject="S01",
        correct=True,
        config=PipelineConfig(aoi=AOIConfig.from_names(AOI_NAMES)),
    )

    print(f"\nProcessed table: {len(table)} of {len(trial)} samples kept")
    print(table.head())


def example_2_engine_and_stats():
    """Engine API with a stricter blink filter and the run summary."""
    print("\n" + "=" * 60)
    print("Example 2: Engine and Filter Statistics")
    print("=" * 60)

    calibration, trial = make_recordings()
    config = PipelineConfig(
        aoi=AOIConfig.from_names(AOI_NAMES),
        blink_filter=BlinkFilterConfig(mad_multiplier=2.5),
    )
    result = PupilFilterEngine().run(
        calibration,
        trial,
        EpochSpec(breakpoints=[0, 100, 300], labels=["baseline", "stimulus"]),
        SessionMetadata(subject="S01", correct=1),
        config,
    )

    blink_stats = result.stage_stats["blink_filter"]
    print(f"\nBaseline: {result.baseline:.4f} mm")
    print(f"Removed samples: {result.n_removed_samples}/{result.n_input_samples}")
    print(f"Velocity bounds: {blink_stats['lower']:.5f} .. {blink_stats['upper']:.5f} mm/ms")

    per_epoch = result.table.groupby("epochs", observed=True)["smooth"].mean()
    print("\nMean smoothed dilation per epoch:")
    print(per_epoch)


if __name__ == "__main__":
    example_1_minimal()
    example_2_engine_and_stats()
