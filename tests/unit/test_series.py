"""
Unit tests for input normalisation, result building and parameter checks.
"""

import numpy as np
import pandas as pd
import pytest

from libs.common.src.errors import BarValidationError, IndicatorError, InvalidParameterError
from libs.common.src.schemas import IndicatorPoint, OHLCVBar
from libs.indicators import macd, rsi, sma, to_dataframe, to_frame
from libs.indicators.src.series import BarFrame


class TestToFrame:
    """Tests for accepted input shapes."""

    def test_from_models(self, sample_bars):
        frame = to_frame(sample_bars)

        assert isinstance(frame, BarFrame)
        assert len(frame) == len(sample_bars)
        assert frame.dates[0] == sample_bars[0].date
        assert frame.close[5] == sample_bars[5].close

    def test_from_mappings(self):
        frame = to_frame([
            {"date": "d1", "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10},
            {"date": "d2", "open": "1.5", "high": 3, "low": 1, "close": 2.5},
        ])

        assert frame.dates == ["d1", "d2"]
        assert frame.open.tolist() == [1.0, 1.5]
        assert frame.volume.tolist() == [10.0, 0.0]
        assert frame.close.dtype == np.float64

    def test_from_dataframe_with_date_column(self, sample_ohlcv_df):
        frame = to_frame(sample_ohlcv_df)

        assert frame.dates == sample_ohlcv_df["date"].tolist()
        np.testing.assert_array_equal(frame.high, sample_ohlcv_df["high"].to_numpy())

    def test_from_dataframe_uses_index_without_date_column(self, sample_ohlcv_df):
        df = sample_ohlcv_df.set_index("date")

        frame = to_frame(df)

        assert frame.dates == list(df.index)

    def test_frame_passes_through(self, sample_bars):
        frame = to_frame(sample_bars)
        assert to_frame(frame) is frame

    def test_derived_sources(self, sample_bars):
        frame = to_frame(sample_bars)

        np.testing.assert_allclose(frame.source("hl2"), (frame.high + frame.low) / 2)
        np.testing.assert_allclose(frame.source("hlc3"), (frame.high + frame.low + frame.close) / 3)
        assert frame.source("open") is frame.open

    def test_missing_field_raises(self):
        with pytest.raises(BarValidationError) as exc_info:
            to_frame([{"date": "d1", "open": 1, "high": 2, "low": 0.5}])

        assert exc_info.value.details["field"] == "close"
        assert exc_info.value.details["index"] == 0

    def test_non_numeric_field_raises(self):
        with pytest.raises(BarValidationError):
            to_frame([{"date": "d1", "open": 1, "high": "x", "low": 0.5, "close": 1}])

    def test_missing_dataframe_column_raises(self, sample_ohlcv_df):
        with pytest.raises(BarValidationError):
            to_frame(sample_ohlcv_df.drop(columns=["low"]))

    def test_unsupported_row_type_raises(self):
        with pytest.raises(BarValidationError):
            to_frame([(1, 2, 3, 4)])


class TestStrictMode:
    """Tests for OHLC ordering validation."""

    BAD_BAR = {"date": "d1", "open": 5.0, "high": 4.0, "low": 3.0, "close": 4.0, "volume": 1.0}

    def test_lenient_by_default(self):
        frame = to_frame([self.BAD_BAR])
        assert len(frame) == 1

    def test_strict_argument(self):
        with pytest.raises(BarValidationError) as exc_info:
            to_frame([self.BAD_BAR], strict=True)

        assert exc_info.value.error_code == "BAR_VALIDATION_ERROR"

    def test_strict_from_environment(self, monkeypatch):
        monkeypatch.setenv("INDICATORS_STRICT_BARS", "true")

        with pytest.raises(BarValidationError):
            sma([self.BAD_BAR], 3)

    def test_strict_dataframe(self):
        df = pd.DataFrame([self.BAD_BAR])

        with pytest.raises(BarValidationError):
            to_frame(df, strict=True)

    def test_ohlcv_bar_rejects_bad_ordering(self):
        with pytest.raises(ValueError):
            OHLCVBar(**self.BAD_BAR)

    def test_ohlcv_bar_rejects_negative_volume(self):
        with pytest.raises(ValueError):
            OHLCVBar(date="d", open=1, high=1, low=1, close=1, volume=-5)


class TestResults:
    """Tests for points, DataFrame export and raw columns."""

    def test_points_are_date_aligned(self, sample_bars):
        points = sma(sample_bars, 10)

        assert all(isinstance(p, IndicatorPoint) for p in points)
        assert [p.date for p in points] == [b.date for b in sample_bars]

    def test_auxiliary_fields_are_attributes(self, sample_bars):
        point = macd(sample_bars)[50]

        assert point.histogram == pytest.approx(point.macd - point.signal)
        assert set(point.model_dump()) == {"date", "value", "macd", "signal", "histogram"}

    def test_to_dataframe(self, sample_bars):
        df = to_dataframe(macd(sample_bars))

        assert list(df.columns) == ["value", "macd", "signal", "histogram"]
        assert list(df.index) == [b.date for b in sample_bars]

    def test_to_dataframe_empty(self):
        assert to_dataframe([]).empty

    def test_compute_returns_raw_columns(self, sample_bars):
        columns = rsi.compute(sample_bars, 14)

        assert set(columns) == {"value", "avg_gain", "avg_loss"}
        assert isinstance(columns["value"], np.ndarray)
        assert columns["value"][20] == rsi(sample_bars)[20].value

    def test_list_and_dataframe_inputs_agree(self, sample_bars, sample_ohlcv_df):
        from_list = [p.value for p in rsi(sample_bars)]
        from_df = [p.value for p in rsi(sample_ohlcv_df)]

        assert from_list == from_df


class TestParameterChecks:

    @pytest.mark.parametrize("period", [0, -3, 2.5, True, "14"])
    def test_bad_period_raises(self, sample_bars, period):
        with pytest.raises(InvalidParameterError):
            sma(sample_bars, period)

    def test_invalid_parameter_is_value_error(self, sample_bars):
        with pytest.raises(ValueError):
            rsi(sample_bars, 0)

    def test_error_payload(self, sample_bars):
        with pytest.raises(IndicatorError) as exc_info:
            rsi(sample_bars, 0)

        payload = exc_info.value.to_dict()
        assert payload["error"] == "INVALID_PARAMETER"
        assert payload["details"] == {"parameter": "period", "value": 0, "indicator": "RSI"}

    def test_numpy_integer_period_accepted(self, sample_bars):
        assert len(sma(sample_bars, np.int64(5))) == len(sample_bars)

    def test_bad_parameters_rejected_even_for_empty_input(self):
        with pytest.raises(InvalidParameterError):
            sma([], 0)

    def test_unknown_source_raises(self, sample_bars):
        with pytest.raises(InvalidParameterError) as exc_info:
            sma(sample_bars, 5, "median")

        assert exc_info.value.details["parameter"] == "source"
        assert exc_info.value.details["value"] == "median"
