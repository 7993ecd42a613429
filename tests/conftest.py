import numpy as np
import pandas as pd
import pytest

from pupil_filter.config import AOIConfig, ColumnConfig, PipelineConfig

AOI_NAMES = ["Face", "Hands", "Object", "Text"]


def build_calibration(values, left=None, right=None) -> pd.DataFrame:
    """Calibration recording; ``values`` fills both eyes unless given per eye."""
    n = len(left if values is None else values)
    return pd.DataFrame(
        {
            "RecordingTimestamp": np.arange(n) * 17,
            "PupilLeft": values if left is None else left,
            "PupilRight": values if right is None else right,
        }
    )


def build_trial(
    left,
    right=None,
    hits=None,
    start: float = 1000.0,
    step: float = 17.0,
) -> pd.DataFrame:
    """
    Trial recording with Tobii-style AOI hit columns.

    ``hits`` maps an AOI name to its 0/1 column; AOIs not given are all 0.
    """
    n = len(left)
    hits = hits or {}
    df = pd.DataFrame(
        {
            "RecordingTimestamp": start + np.arange(n) * step,
            "PupilLeft": left,
            "PupilRight": left if right is None else right,
            "SegmentStart": [start] * n,
        }
    )
    for name in AOI_NAMES:
        df[f"AOI[{name}]Hit"] = hits.get(name, [0] * n)
    return df


@pytest.fixture
def aoi_config() -> AOIConfig:
    return AOIConfig.from_names(AOI_NAMES)


@pytest.fixture
def pipeline_config(aoi_config) -> PipelineConfig:
    return PipelineConfig(columns=ColumnConfig(), aoi=aoi_config)


@pytest.fixture
def constant_calibration() -> pd.DataFrame:
    """30 samples, both eyes at 10.0 mm."""
    return build_calibration([10.0] * 30)


@pytest.fixture
def simple_trial() -> pd.DataFrame:
    """10 samples at 12.0 mm, Face hit on rows 0-4."""
    return build_trial([12.0] * 10, hits={"Face": [1] * 5 + [0] * 5})


@pytest.fixture
def noisy_trial_with_blink() -> pd.DataFrame:
    """40 noisy samples around 4 mm with a blink-like jump on row 20."""
    rng = np.random.default_rng(0)
    pupil = 4.0 + rng.normal(0.0, 0.01, 40)
    pupil[20] += 4.0
    return build_trial(list(pupil), start=0.0)
