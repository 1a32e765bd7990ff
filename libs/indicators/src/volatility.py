"""
Volatility Indicators
ATR, Bollinger Bands, Keltner Channels, Donchian Channels, Squeeze Momentum
"""
import numpy as np

from libs.common.src.utils import safe_divide
from libs.indicators.src.averages import ema_series, sma_series
from libs.indicators.src.primitives import highest, lowest, mean, stddev, trailing, true_range_series
from libs.indicators.src.series import BarFrame, Columns, check_non_negative, check_period, indicator


@indicator
def atr(frame: BarFrame, period: int = 14) -> Columns:
    """
    Average True Range (ATR)

    Measures market volatility by decomposing the entire range of an asset.

    The first bar's true range is high - low. Until `period` bars exist the
    ATR is the plain mean of true ranges so far, then Wilder smoothing:
    atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period

    Args:
        frame: Bars
        period: ATR period (default 14)

    Returns:
        value = ATR
    """
    period = check_period(period, "period", "ATR")
    tr = true_range_series(frame.high, frame.low, frame.close)
    n = len(tr)
    atr_values = np.zeros(n)

    running = 0.0
    for i in range(n):
        if i < period:
            running += tr[i]
            atr_values[i] = running / (i + 1)
        else:
            atr_values[i] = (atr_values[i - 1] * (period - 1) + tr[i]) / period

    return {"value": atr_values}


@indicator
def bollinger_bands(frame: BarFrame, period: int = 20, std_dev: float = 2.0) -> Columns:
    """
    Bollinger Bands

    Volatility bands placed above and below a moving average.

    Args:
        frame: Bars
        period: SMA period (default 20)
        std_dev: Standard deviation multiplier (default 2.0)

    Returns:
        value = middle band, plus upper / middle / lower, bandwidth (band
        width as a percentage of the middle, 0 if the middle is 0) and
        percent_b (position of close within the bands, 0.5 if they touch)
    """
    period = check_period(period, "period", "BollingerBands")
    std_dev = check_non_negative(std_dev, "std_dev", "BollingerBands")

    close = frame.close
    n = len(close)
    middle = sma_series(close, period)

    upper = np.zeros(n)
    lower = np.zeros(n)
    bandwidth = np.zeros(n)
    percent_b = np.zeros(n)

    for i in range(n):
        std = stddev(trailing(close, i, period))
        upper[i] = middle[i] + std_dev * std
        lower[i] = middle[i] - std_dev * std
        bandwidth[i] = safe_divide(std * std_dev * 2, middle[i]) * 100
        percent_b[i] = safe_divide(close[i] - lower[i], std_dev * std * 2, default=0.5)

    return {
        "value": middle,
        "upper": upper,
        "middle": middle.copy(),
        "lower": lower,
        "bandwidth": bandwidth,
        "percent_b": percent_b,
    }


@indicator
def keltner_channels(
    frame: BarFrame,
    ema_period: int = 20,
    atr_period: int = 10,
    atr_multiplier: float = 2.0
) -> Columns:
    """
    Keltner Channels

    Volatility channels based on EMA and ATR.

    Args:
        frame: Bars
        ema_period: EMA period (default 20)
        atr_period: ATR period (default 10)
        atr_multiplier: ATR multiplier (default 2.0)

    Returns:
        value = middle channel, plus upper / middle / lower
    """
    ema_period = check_period(ema_period, "ema_period", "KeltnerChannels")
    atr_period = check_period(atr_period, "atr_period", "KeltnerChannels")
    atr_multiplier = check_non_negative(atr_multiplier, "atr_multiplier", "KeltnerChannels")

    # Middle line (EMA of close)
    middle = ema_series(frame.close, ema_period)
    atr_values = atr.compute(frame, atr_period)["value"]

    return {
        "value": middle,
        "upper": middle + atr_multiplier * atr_values,
        "middle": middle.copy(),
        "lower": middle - atr_multiplier * atr_values,
    }


@indicator
def donchian_channels(frame: BarFrame, period: int = 20) -> Columns:
    """
    Donchian Channels

    Price channels based on highest high and lowest low, the window shrinking
    to the available prefix at the start of the series.

    Args:
        frame: Bars
        period: Lookback period (default 20)

    Returns:
        value = middle channel, plus upper / middle / lower
    """
    period = check_period(period, "period", "DonchianChannels")
    n = len(frame)

    upper = np.zeros(n)
    lower = np.zeros(n)

    for i in range(n):
        upper[i] = highest(trailing(frame.high, i, period))
        lower[i] = lowest(trailing(frame.low, i, period))

    middle = (upper + lower) / 2

    return {"value": middle, "upper": upper, "middle": middle.copy(), "lower": lower}


@indicator
def squeeze_momentum(
    frame: BarFrame,
    bb_period: int = 20,
    bb_mult: float = 2.0,
    kc_period: int = 20,
    kc_mult: float = 1.5
) -> Columns:
    """
    Squeeze Momentum

    A squeeze is on while the Bollinger Bands sit strictly inside the Keltner
    Channels, and off once they exceed them on both sides.

    Momentum is close minus the average of the window's Donchian midpoint and
    its mean close. This approximates, but is not, a linear regression fit.

    Args:
        frame: Bars
        bb_period: Bollinger period and momentum window (default 20)
        bb_mult: Bollinger standard deviation multiplier (default 2.0)
        kc_period: Keltner EMA and ATR period (default 20)
        kc_mult: Keltner ATR multiplier (default 1.5)

    Returns:
        value = momentum, plus momentum / squeeze_on / squeeze_off (1.0 or 0.0)
    """
    bb_period = check_period(bb_period, "bb_period", "SqueezeMomentum")
    bb_mult = check_non_negative(bb_mult, "bb_mult", "SqueezeMomentum")
    kc_period = check_period(kc_period, "kc_period", "SqueezeMomentum")
    kc_mult = check_non_negative(kc_mult, "kc_mult", "SqueezeMomentum")

    bb = bollinger_bands.compute(frame, bb_period, bb_mult)
    kc = keltner_channels.compute(frame, kc_period, kc_period, kc_mult)

    close, high, low = frame.close, frame.high, frame.low
    n = len(close)

    momentum = np.zeros(n)
    squeeze_on = np.zeros(n)
    squeeze_off = np.zeros(n)

    for i in range(n):
        donchian_mid = (highest(trailing(high, i, bb_period)) + lowest(trailing(low, i, bb_period))) / 2
        window_mean = mean(trailing(close, i, bb_period))
        momentum[i] = close[i] - (donchian_mid + window_mean) / 2

        bb_upper, bb_lower = bb["upper"][i], bb["lower"][i]
        kc_upper, kc_lower = kc["upper"][i], kc["lower"][i]

        if bb_lower > kc_lower and bb_upper < kc_upper:
            squeeze_on[i] = 1.0
        if bb_lower < kc_lower and bb_upper > kc_upper:
            squeeze_off[i] = 1.0

    return {
        "value": momentum,
        "momentum": momentum.copy(),
        "squeeze_on": squeeze_on,
        "squeeze_off": squeeze_off,
    }
