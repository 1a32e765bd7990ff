"""
Unit tests for moving averages.
"""

import math

import numpy as np
import pytest

from libs.common.src.errors import InvalidParameterError
from libs.indicators import (
    dema,
    ema,
    ema_series,
    hull_ma,
    ma_ribbon,
    sma,
    sma_series,
    tema,
    wma,
    wma_series,
)


def values(points):
    return [p.value for p in points]


class TestSMA:
    """Tests for SMA."""

    def test_prefix_mean_warm_up(self, bar_factory):
        closes = [1.0, 2.0, 3.0, 4.0, 5.0]
        bars = bar_factory(closes, closes, closes)

        result = values(sma(bars, 3))

        assert result == pytest.approx([1.0, 1.5, 2.0, 3.0, 4.0])

    def test_first_value_is_first_close(self, sample_bars):
        assert sma(sample_bars, 20)[0].value == sample_bars[0].close

    def test_matches_pandas_rolling_after_warm_up(self, sample_ohlcv_df, sample_bars):
        expected = sample_ohlcv_df["close"].rolling(20).mean().to_numpy()

        result = np.array(values(sma(sample_bars, 20)))

        np.testing.assert_allclose(result[19:], expected[19:], rtol=1e-10)

    def test_source_selection(self, sample_bars):
        by_high = values(sma(sample_bars, 5, source="high"))
        by_close = values(sma(sample_bars, 5))

        assert by_high != by_close
        assert all(h >= c for h, c in zip(by_high, by_close))

    def test_empty_input(self):
        assert sma([], 5) == []


class TestEMA:
    """Tests for EMA."""

    def test_known_values(self, bar_factory):
        closes = [1.0, 2.0, 3.0, 4.0, 5.0]
        bars = bar_factory(closes, closes, closes)

        result = values(ema(bars, 3))

        # Prefix means, then k = 0.5 recurrence
        assert result == pytest.approx([1.0, 1.5, 2.0, 3.0, 4.0])

    def test_seed_equals_sma(self, sample_closes):
        result = ema_series(sample_closes, 10)

        assert result[9] == pytest.approx(np.mean(sample_closes[:10]))

    def test_matches_series_overload(self, sample_bars, sample_closes):
        np.testing.assert_array_equal(
            np.array(values(ema(sample_bars, 12))),
            ema_series(sample_closes, 12)
        )

    def test_constant_series(self, flat_bars):
        assert values(ema(flat_bars, 5)) == pytest.approx([100.0] * len(flat_bars))


class TestWMA:
    """Tests for WMA."""

    def test_known_value(self, bar_factory):
        closes = [1.0, 2.0, 3.0]
        bars = bar_factory(closes, closes, closes)

        result = values(wma(bars, 3))

        # Warm-up passes the raw close through
        assert result[:2] == [1.0, 2.0]
        assert result[2] == pytest.approx((1 * 1 + 2 * 2 + 3 * 3) / 6)

    def test_series_period_one_is_identity(self, sample_closes):
        np.testing.assert_allclose(wma_series(sample_closes, 1), sample_closes)


class TestComposedAverages:
    """Tests for Hull, DEMA and TEMA."""

    def test_hull_matches_manual_composition(self, sample_bars, sample_closes):
        period = 10
        half = period // 2
        root = int(math.sqrt(period))
        diff = 2 * wma_series(sample_closes, half) - wma_series(sample_closes, period)

        expected = wma_series(diff, root)

        np.testing.assert_allclose(values(hull_ma(sample_bars, period)), expected)

    def test_hull_period_one(self, sample_bars, sample_closes):
        # Half and root periods clamp to 1, making the HMA the close itself
        np.testing.assert_allclose(values(hull_ma(sample_bars, 1)), sample_closes)

    def test_dema_tema_on_constant_series(self, flat_bars):
        assert values(dema(flat_bars, 5)) == pytest.approx([100.0] * len(flat_bars))
        assert values(tema(flat_bars, 5)) == pytest.approx([100.0] * len(flat_bars))

    def test_dema_identity(self, sample_bars, sample_closes):
        ema1 = ema_series(sample_closes, 8)
        expected = 2 * ema1 - ema_series(ema1, 8)

        np.testing.assert_allclose(values(dema(sample_bars, 8)), expected)

    def test_dema_lags_less_than_ema_in_trend(self, uptrend_bars):
        last_close = uptrend_bars[-1].close

        ema_gap = last_close - ema(uptrend_bars, 10)[-1].value
        dema_gap = last_close - dema(uptrend_bars, 10)[-1].value

        assert abs(dema_gap) < abs(ema_gap)


class TestRibbon:

    def test_default_keys(self, sample_bars):
        ribbon = ma_ribbon(sample_bars)

        assert list(ribbon) == ["ema8", "ema13", "ema21", "ema34", "ema55", "ema89", "ema144", "ema200"]
        assert all(len(points) == len(sample_bars) for points in ribbon.values())

    def test_custom_periods_match_ema(self, sample_bars):
        ribbon = ma_ribbon(sample_bars, periods=[5, 10])

        assert values(ribbon["ema5"]) == values(ema(sample_bars, 5))
        assert values(ribbon["ema10"]) == values(ema(sample_bars, 10))

    def test_sma_series_shrinking_window(self):
        assert sma_series([4.0, 8.0], 5).tolist() == [4.0, 6.0]


class TestSeriesValidation:
    """The series-level averages check periods like the bar-level ones."""

    @pytest.mark.parametrize("func", [sma_series, ema_series, wma_series])
    @pytest.mark.parametrize("period", [0, -2, 1.5])
    def test_bad_period_raises(self, func, period):
        with pytest.raises(InvalidParameterError) as exc_info:
            func([1.0, 2.0, 3.0], period)

        assert exc_info.value.details["parameter"] == "period"

    def test_error_names_the_average(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            wma_series([1.0, 2.0, 3.0], 0)

        assert exc_info.value.details["indicator"] == "WMA"
