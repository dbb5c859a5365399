"""
Tests for the pandas adapters.

Uses small hand-made series so expected averages are easy to check.
"""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from movavg.config import AveragerConfig
from movavg.pipeline import load_series, moving_average, moving_average_frame
from movavg.types import DivisionByZeroError, InvalidConfigurationError


# ============================================================================
# Test: moving_average
# ============================================================================


class TestMovingAverage:

    def test_trailing_average(self, daily_close):
        out = moving_average(daily_close, AveragerConfig(period=3))

        assert out.name == "close_ma3"
        assert out.dtype == np.float64
        assert list(out.index) == list(daily_close.index)
        assert out.index.name == "timestamp"
        # closes 10, 11, 12, ... → warm-up 10, 10.5 then centred values
        assert out.iloc[0] == pytest.approx(10.0)
        assert out.iloc[1] == pytest.approx(10.5)
        assert out.iloc[2:].tolist() == pytest.approx([11.0 + i for i in range(8)])

    def test_centred_average_keeps_every_label(self, daily_close):
        out = moving_average(daily_close, AveragerConfig(period=3, delay=1))

        assert list(out.index) == list(daily_close.index)
        assert out.iloc[0] == pytest.approx(10.5)
        assert out.iloc[1] == pytest.approx(11.0)
        # last label: window [18, 19, <drained>]
        assert out.iloc[-1] == pytest.approx(18.5)

    def test_nan_is_absent(self):
        s = pd.Series([1.0, np.nan, 3.0], index=["a", "b", "c"])
        out = moving_average(s, AveragerConfig(period=2))
        assert out.name == "ma2"
        assert out.tolist() == pytest.approx([1.0, 1.0, 3.0])

    @pytest.mark.parametrize("dtype", ["Float64", "Int64"])
    def test_nullable_na_is_absent(self, dtype):
        s = pd.Series([1, pd.NA, 3], index=["a", "b", "c"], dtype=dtype)
        out = moving_average(s, AveragerConfig(period=2))
        assert out.dtype == np.float64
        assert out.tolist() == pytest.approx([1.0, 1.0, 3.0])

    def test_none_in_object_series_is_absent(self):
        s = pd.Series([4.0, None, 8.0], dtype=object)
        out = moving_average(s, AveragerConfig(period=3))
        assert out.tolist() == pytest.approx([4.0, 4.0, 6.0])

    def test_leading_nan_raises(self):
        s = pd.Series([np.nan, 1.0])
        with pytest.raises(DivisionByZeroError):
            moving_average(s, AveragerConfig(period=2))

    def test_weighted(self):
        s = pd.Series([20.0, 18.0, 24.0], name="px")
        cfg = AveragerConfig(method="weighted_arithmetic", period=3, weights=(1, 2, 3))
        out = moving_average(s, cfg)
        assert out.tolist() == pytest.approx(
            [20.0, (3 * 18 + 2 * 20) / 5, (3 * 24 + 2 * 18 + 1 * 20) / 6]
        )

    def test_empty_series(self):
        out = moving_average(pd.Series([], dtype=float, name="x"), AveragerConfig(period=3))
        assert out.empty
        assert out.name == "x_ma3"

    def test_invalid_config(self, daily_close):
        with pytest.raises(InvalidConfigurationError):
            moving_average(daily_close, AveragerConfig(period=2, delay=5))


# ============================================================================
# Test: moving_average_frame
# ============================================================================


class TestMovingAverageFrame:

    def test_numeric_columns_by_default(self):
        df = pd.DataFrame(
            {"a": [1.0, 2.0, 3.0], "b": [10, 20, 30], "sym": ["x", "y", "z"]}
        )
        out = moving_average_frame(df, AveragerConfig(period=2))

        assert list(out.columns) == ["a_ma2", "b_ma2"]
        assert out["a_ma2"].tolist() == pytest.approx([1.0, 1.5, 2.5])
        assert out["b_ma2"].tolist() == pytest.approx([10.0, 15.0, 25.0])

    def test_selected_columns(self):
        df = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0]})
        out = moving_average_frame(df, AveragerConfig(period=1), columns=["b"])
        assert list(out.columns) == ["b_ma1"]

    def test_missing_column(self):
        df = pd.DataFrame({"a": [1.0]})
        with pytest.raises(ValueError, match="missing column"):
            moving_average_frame(df, AveragerConfig(period=1), columns=["zz"])


# ============================================================================
# Test: load_series
# ============================================================================


class TestLoadSeries:

    def test_load_csv(self, tmp_path):
        df = pd.DataFrame({
            "timestamp": pd.date_range("2024-01-01", periods=4, freq="D"),
            "close": [1, 2, 3, 4],
        })
        path = tmp_path / "prices.csv"
        df.to_csv(path, index=False)

        s = load_series(path, "close")
        assert isinstance(s.index, pd.DatetimeIndex)
        assert s.index.name == "timestamp"
        assert s.dtype == np.float64
        assert s.tolist() == [1.0, 2.0, 3.0, 4.0]

    def test_load_parquet(self, tmp_path):
        df = pd.DataFrame({
            "timestamp": pd.date_range("2024-01-01", periods=3, freq="D"),
            "close": [7, 8, 9],
        })
        path = tmp_path / "prices.parquet"
        df.to_parquet(path, index=False, engine="pyarrow")

        s = load_series(path, "close")
        assert isinstance(s.index, pd.DatetimeIndex)
        assert s.index.name == "timestamp"
        assert list(s.index) == list(df["timestamp"])
        assert s.dtype == np.float64
        assert s.tolist() == [7.0, 8.0, 9.0]

    def test_load_without_index_column(self, tmp_path):
        path = tmp_path / "plain.csv"
        pd.DataFrame({"v": [5, 6]}).to_csv(path, index=False)
        s = load_series(path, "v")
        assert s.tolist() == [5.0, 6.0]

    def test_missing_values_become_nan(self, tmp_path):
        path = tmp_path / "gaps.csv"
        path.write_text("timestamp,close\n2024-01-01,1\n2024-01-02,\n", encoding="utf-8")
        s = load_series(path, "close")
        assert math.isnan(s.iloc[1])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="No data file"):
            load_series(tmp_path / "nope.csv", "close")

    def test_missing_column(self, tmp_path):
        path = tmp_path / "prices.csv"
        pd.DataFrame({"open": [1]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="missing required column"):
            load_series(path, "close")
