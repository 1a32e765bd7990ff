"""
Momentum Indicators
RSI, MACD, Stochastic, CCI, ROC, Williams %R, Ultimate Oscillator, TRIX
"""
import numpy as np

from libs.common.src.utils import safe_divide
from libs.indicators.src.averages import ema_series
from libs.indicators.src.primitives import highest, lowest, mean, total, true_range
from libs.indicators.src.series import BarFrame, Columns, check_period, indicator


@indicator
def rsi(frame: BarFrame, period: int = 14) -> Columns:
    """
    Relative Strength Index (RSI)

    Measures speed and change of price movements.
    Values range from 0 to 100.
    - RSI > 70: Overbought
    - RSI < 30: Oversold

    The first `period` bars read 50 while deltas accumulate. At i == period the
    average gain/loss is seeded with the simple mean of those deltas, then
    carried forward with Wilder's recurrence.

    Args:
        frame: Bars
        period: RSI period (default 14)

    Returns:
        value = RSI, plus avg_gain / avg_loss (0 before the seed)
    """
    period = check_period(period, "period", "RSI")
    close = frame.close
    n = len(close)

    rsi_values = np.full(n, 50.0)
    avg_gains = np.zeros(n)
    avg_losses = np.zeros(n)

    gains = []
    losses = []
    avg_gain = 0.0
    avg_loss = 0.0

    for i in range(1, n):
        change = close[i] - close[i - 1]
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0

        if i < period:
            gains.append(gain)
            losses.append(loss)
            continue

        if i == period:
            gains.append(gain)
            losses.append(loss)
            avg_gain = mean(gains)
            avg_loss = mean(losses)
        else:
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period

        # Saturating RS when there were no losses
        rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
        rsi_values[i] = 100 - 100 / (1 + rs)
        avg_gains[i] = avg_gain
        avg_losses[i] = avg_loss

    return {"value": rsi_values, "avg_gain": avg_gains, "avg_loss": avg_losses}


@indicator
def macd(
    frame: BarFrame,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9
) -> Columns:
    """
    Moving Average Convergence Divergence (MACD)

    Trend-following momentum indicator.

    Args:
        frame: Bars
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)
        signal_period: Signal line period (default 9)

    Returns:
        value = macd line, plus macd / signal / histogram
    """
    fast_period = check_period(fast_period, "fast_period", "MACD")
    slow_period = check_period(slow_period, "slow_period", "MACD")
    signal_period = check_period(signal_period, "signal_period", "MACD")

    macd_line = ema_series(frame.close, fast_period) - ema_series(frame.close, slow_period)

    # Signal line (EMA of MACD)
    signal_line = ema_series(macd_line, signal_period)

    return {
        "value": macd_line,
        "macd": macd_line,
        "signal": signal_line,
        "histogram": macd_line - signal_line,
    }


@indicator
def stochastic(
    frame: BarFrame,
    k_period: int = 14,
    d_period: int = 3,
    smooth_k: int = 3
) -> Columns:
    """
    Stochastic Oscillator

    Compares closing price to price range over a period.
    - %K > 80: Overbought
    - %K < 20: Oversold

    Args:
        frame: Bars
        k_period: %K lookback (default 14)
        d_period: %D smoothing of the smoothed %K (default 3)
        smooth_k: %K smoothing (default 3)

    Returns:
        value = smoothed %K, plus k / d. 50 throughout warm-up.
    """
    k_period = check_period(k_period, "k_period", "Stochastic")
    d_period = check_period(d_period, "d_period", "Stochastic")
    smooth_k = check_period(smooth_k, "smooth_k", "Stochastic")

    high, low, close = frame.high, frame.low, frame.close
    n = len(close)

    k_values = np.full(n, 50.0)
    d_values = np.full(n, 50.0)
    raw_k = []

    for i in range(n):
        if i < k_period - 1:
            raw_k.append(50.0)
            continue

        highest_high = highest(high[i - k_period + 1:i + 1])
        lowest_low = lowest(low[i - k_period + 1:i + 1])

        if highest_high == lowest_low:
            k = 50.0
        else:
            k = (close[i] - lowest_low) / (highest_high - lowest_low) * 100
        raw_k.append(k)

        smoothed_k = mean(raw_k[-smooth_k:]) if i >= k_period + smooth_k - 2 else k

        # %D averages the previous d_period - 1 emitted %K values with this one
        window = k_values[max(0, i - d_period + 1):i].tolist() if d_period > 1 else []
        window.append(smoothed_k)

        k_values[i] = smoothed_k
        d_values[i] = mean(window)

    return {"value": k_values, "k": k_values.copy(), "d": d_values}


@indicator
def cci(frame: BarFrame, period: int = 20) -> Columns:
    """
    Commodity Channel Index (CCI)

    Measures current price level relative to average.
    - CCI > 100: Potentially overbought
    - CCI < -100: Potentially oversold

    CCI = (TP - SMA(TP)) / (0.015 * Mean Deviation), 0 during warm-up or when
    the mean deviation is 0.
    """
    period = check_period(period, "period", "CCI")

    # Typical price
    tp = (frame.high + frame.low + frame.close) / 3
    n = len(tp)
    cci_values = np.zeros(n)

    for i in range(period - 1, n):
        window = tp[i - period + 1:i + 1]
        tp_sma = mean(window)
        mean_dev = mean([abs(v - tp_sma) for v in window])

        if mean_dev != 0:
            cci_values[i] = (tp[i] - tp_sma) / (0.015 * mean_dev)

    return {"value": cci_values}


@indicator
def roc(frame: BarFrame, period: int = 12) -> Columns:
    """
    Rate of Change (ROC)

    Percentage change in close over a period; 0 before `period` bars exist or
    when the reference close is 0.
    """
    period = check_period(period, "period", "ROC")
    close = frame.close
    roc_values = np.zeros(len(close))

    for i in range(period, len(close)):
        if close[i - period] != 0:
            roc_values[i] = ((close[i] - close[i - period]) / close[i - period]) * 100

    return {"value": roc_values}


@indicator
def williams_r(frame: BarFrame, period: int = 14) -> Columns:
    """
    Williams %R

    Momentum indicator measuring overbought/oversold levels.
    Values range from -100 to 0.
    - %R > -20: Overbought
    - %R < -80: Oversold

    -50 during warm-up or when the window has zero range.
    """
    period = check_period(period, "period", "WilliamsR")
    high, low, close = frame.high, frame.low, frame.close
    n = len(close)
    williams = np.full(n, -50.0)

    for i in range(period - 1, n):
        highest_high = highest(high[i - period + 1:i + 1])
        lowest_low = lowest(low[i - period + 1:i + 1])

        if highest_high != lowest_low:
            williams[i] = (highest_high - close[i]) / (highest_high - lowest_low) * -100

    return {"value": williams}


@indicator
def ultimate_oscillator(
    frame: BarFrame,
    period1: int = 7,
    period2: int = 14,
    period3: int = 28
) -> Columns:
    """
    Ultimate Oscillator

    UO = (4 * avg(p1) + 2 * avg(p2) + avg(p3)) / 7 * 100, where avg(p) is the
    buying pressure over true range summed across the last p bars. A window
    with no true range counts as neutral (0.5). 50 until i >= period3 - 1.
    """
    period1 = check_period(period1, "period1", "UltimateOscillator")
    period2 = check_period(period2, "period2", "UltimateOscillator")
    period3 = check_period(period3, "period3", "UltimateOscillator")

    high, low, close = frame.high, frame.low, frame.close
    n = len(close)
    uo = np.full(n, 50.0)

    buying_pressure = np.zeros(n)
    tr = np.zeros(n)
    if n:
        tr[0] = high[0] - low[0]

    for i in range(1, n):
        buying_pressure[i] = close[i] - min(low[i], close[i - 1])
        tr[i] = true_range(high[i], low[i], close[i - 1])

        if i < period3 - 1:
            continue

        avg1 = _pressure_ratio(buying_pressure, tr, i, period1)
        avg2 = _pressure_ratio(buying_pressure, tr, i, period2)
        avg3 = _pressure_ratio(buying_pressure, tr, i, period3)
        uo[i] = (avg1 * 4 + avg2 * 2 + avg3) / 7 * 100

    return {"value": uo}


@indicator
def trix(frame: BarFrame, period: int = 15) -> Columns:
    """
    TRIX

    One-bar rate of change of a triple-smoothed EMA of close, in basis points.
    0 at index 0 or when the prior smoothed value is 0.
    """
    period = check_period(period, "period", "TRIX")
    ema3 = ema_series(ema_series(ema_series(frame.close, period), period), period)

    n = len(ema3)
    trix_values = np.zeros(n)
    for i in range(1, n):
        prev = ema3[i - 1]
        if prev != 0:
            trix_values[i] = (ema3[i] - prev) / prev * 10000

    return {"value": trix_values}


# ============================================
# HELPER FUNCTIONS
# ============================================

def _pressure_ratio(
    buying_pressure: np.ndarray,
    tr: np.ndarray,
    i: int,
    period: int
) -> float:
    """Summed buying pressure over summed true range for the window ending at i"""
    start = max(0, i - period + 1)
    return safe_divide(
        total(buying_pressure[start:i + 1]),
        total(tr[start:i + 1]),
        default=0.5
    )
