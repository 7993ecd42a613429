import math

import numpy as np
import pandas as pd
import pytest

from pupil_filter import stats
from pupil_filter.exceptions import EpochRangeMismatch, MissingColumns, PupilFilterError


class TestAggregations:

    def test_mean_skips_missing(self):
        assert stats.mean([1.0, np.nan, 3.0], skipna=True) == pytest.approx(2.0)

    def test_mean_without_skipna_propagates(self):
        assert math.isnan(stats.mean([1.0, np.nan], skipna=False))

    def test_mean_of_nothing_is_nan(self):
        assert math.isnan(stats.mean([np.nan, np.nan], skipna=True))
        assert math.isnan(stats.mean([], skipna=True))

    def test_median_nullable_series(self):
        series = pd.Series(pd.array([3.0, None, 1.0, 2.0], dtype="Float64"))
        assert stats.median(series, skipna=True) == pytest.approx(2.0)

    def test_mad_is_unscaled(self):
        assert stats.median_abs_deviation([1.0, 2.0, 3.0, 4.0, 100.0], skipna=True) == pytest.approx(1.0)

    def test_mad_of_constant_is_zero(self):
        assert stats.median_abs_deviation([5.0, 5.0, np.nan], skipna=True) == 0.0

    def test_row_mean(self):
        frame = pd.DataFrame({"a": [1.0, np.nan, np.nan], "b": [3.0, 4.0, np.nan]})
        result = stats.row_mean(frame, ["a", "b"], skipna=True)
        assert result[:2].tolist() == [2.0, 4.0]
        assert np.isnan(result[2])
        strict = stats.row_mean(frame, ["a", "b"], skipna=False)
        assert strict[0] == 2.0
        assert np.isnan(strict[1])

    def test_to_nullable_maps_nan_to_na(self):
        series = stats.to_nullable(np.array([1.0, np.nan]))
        assert str(series.dtype) == "Float64"
        assert series.iloc[1] is pd.NA


class TestErrorFormatting:

    def test_stage_and_message(self):
        err = PupilFilterError("something broke", stage="smoothing")
        assert str(err) == "[smoothing] something broke"

    def test_contiguous_rows_as_range(self):
        err = EpochRangeMismatch("bad", stage="epochs", rows=range(0, 10))
        assert str(err) == "[epochs] bad (rows 0-9)"

    def test_scattered_rows_are_truncated(self):
        rows = list(range(0, 40, 2))
        err = PupilFilterError("bad", rows=rows)
        assert str(err).endswith("(rows 0, 2, 4, 6, 8, 10, 12, 14, 16, 18, ... (20 total))")

    def test_missing_columns_is_key_error(self):
        err = MissingColumns(["PupilLeft", "PupilRight"], stage="baseline")
        assert isinstance(err, KeyError)
        assert str(err) == "[baseline] DataFrame must contain column(s): PupilLeft, PupilRight"
