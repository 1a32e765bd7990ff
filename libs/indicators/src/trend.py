"""
Trend Indicators
ADX/DMI, SuperTrend, Parabolic SAR, Aroon, Ichimoku

These carry state bar to bar (Wilder sums, trend flags, extreme points), so
each keeps it in a small accumulator advanced in one forward pass.
"""
from dataclasses import dataclass

import numpy as np

from libs.indicators.src.primitives import highest, lowest, total, trailing, true_range_series
from libs.indicators.src.series import BarFrame, Columns, check_non_negative, check_period, indicator
from libs.indicators.src.volatility import atr as calc_atr


# ============================================
# ACCUMULATORS
# ============================================

@dataclass
class DirectionalState:
    """Wilder-smoothed sums behind ADX/DMI"""
    smoothed_tr: float = 0.0
    smoothed_plus_dm: float = 0.0
    smoothed_minus_dm: float = 0.0
    adx: float = 0.0

    def seed(self, tr: np.ndarray, plus_dm: np.ndarray, minus_dm: np.ndarray) -> None:
        self.smoothed_tr = total(tr)
        self.smoothed_plus_dm = total(plus_dm)
        self.smoothed_minus_dm = total(minus_dm)

    def advance(self, period: int, tr: float, plus_dm: float, minus_dm: float) -> None:
        self.smoothed_tr = self.smoothed_tr - self.smoothed_tr / period + tr
        self.smoothed_plus_dm = self.smoothed_plus_dm - self.smoothed_plus_dm / period + plus_dm
        self.smoothed_minus_dm = self.smoothed_minus_dm - self.smoothed_minus_dm / period + minus_dm


@dataclass
class BandState:
    """SuperTrend final bands and trend direction (1 = up, -1 = down)"""
    upper: float
    lower: float
    trend: float = 1.0


@dataclass
class SarState:
    """Parabolic SAR stop, extreme point, acceleration factor and direction"""
    sar: float
    ep: float
    af: float
    trend: float = 1.0


# ============================================
# INDICATORS
# ============================================

@indicator
def adx(frame: BarFrame, period: int = 14) -> Columns:
    """
    Average Directional Index (ADX)

    Measures trend strength (not direction).
    - ADX > 25: Strong trend
    - ADX < 20: Weak trend / ranging

    All lines are 0 before i == period. At i == period the smoothed TR / +DM /
    -DM are seeded with plain sums of the previous `period` raw values and ADX
    with that bar's DX.

    Args:
        frame: Bars
        period: ADX period (default 14)

    Returns:
        value = ADX, plus plus_di / minus_di / adx and the smoothed sums
    """
    period = check_period(period, "period", "ADX")
    high, low = frame.high, frame.low
    n = len(frame)

    tr = true_range_series(frame.high, frame.low, frame.close)
    dm_plus = np.zeros(n)
    dm_minus = np.zeros(n)

    for i in range(1, n):
        up_move = high[i] - high[i - 1]
        down_move = low[i - 1] - low[i]

        if up_move > down_move and up_move > 0:
            dm_plus[i] = up_move
        if down_move > up_move and down_move > 0:
            dm_minus[i] = down_move

    columns = {
        name: np.zeros(n)
        for name in ("value", "plus_di", "minus_di", "adx",
                     "smoothed_tr", "smoothed_plus_dm", "smoothed_minus_dm")
    }
    state = DirectionalState()

    for i in range(period, n):
        if i == period:
            state.seed(tr[1:period + 1], dm_plus[1:period + 1], dm_minus[1:period + 1])
        else:
            state.advance(period, tr[i], dm_plus[i], dm_minus[i])

        if state.smoothed_tr == 0:
            di_plus = di_minus = 0.0
        else:
            di_plus = state.smoothed_plus_dm / state.smoothed_tr * 100
            di_minus = state.smoothed_minus_dm / state.smoothed_tr * 100

        di_sum = di_plus + di_minus
        dx = 0.0 if di_sum == 0 else abs(di_plus - di_minus) / di_sum * 100

        # ADX is smoothed DX
        state.adx = dx if i == period else (state.adx * (period - 1) + dx) / period

        columns["value"][i] = state.adx
        columns["adx"][i] = state.adx
        columns["plus_di"][i] = di_plus
        columns["minus_di"][i] = di_minus
        columns["smoothed_tr"][i] = state.smoothed_tr
        columns["smoothed_plus_dm"][i] = state.smoothed_plus_dm
        columns["smoothed_minus_dm"][i] = state.smoothed_minus_dm

    return columns


@indicator
def supertrend(frame: BarFrame, period: int = 10, multiplier: float = 3.0) -> Columns:
    """
    SuperTrend Indicator

    Trend-following indicator based on ATR. Final bands ratchet toward price:
    the upper band only falls unless the previous close broke above it, the
    lower band only rises unless the previous close broke below it.

    Args:
        frame: Bars
        period: ATR period (default 10)
        multiplier: ATR multiplier (default 3.0)

    Returns:
        value = active band, plus upper_band / lower_band / trend (1 up, -1 down)
    """
    period = check_period(period, "period", "SuperTrend")
    multiplier = check_non_negative(multiplier, "multiplier", "SuperTrend")
    atr_values = calc_atr.compute(frame, period)["value"]

    high, low, close = frame.high, frame.low, frame.close
    n = len(close)

    hl2 = (high + low) / 2
    upper_basic = hl2 + multiplier * atr_values
    lower_basic = hl2 - multiplier * atr_values

    value = np.zeros(n)
    upper_band = np.zeros(n)
    lower_band = np.zeros(n)
    trend = np.zeros(n)

    if n == 0:
        return {"value": value, "upper_band": upper_band, "lower_band": lower_band, "trend": trend}

    state = BandState(upper=upper_basic[0], lower=lower_basic[0])
    value[0] = state.lower
    upper_band[0], lower_band[0], trend[0] = state.upper, state.lower, state.trend

    for i in range(1, n):
        if upper_basic[i] < state.upper or close[i - 1] > state.upper:
            state.upper = upper_basic[i]
        if lower_basic[i] > state.lower or close[i - 1] < state.lower:
            state.lower = lower_basic[i]

        if state.trend == 1 and close[i] < state.lower:
            state.trend = -1.0
        elif state.trend == -1 and close[i] > state.upper:
            state.trend = 1.0

        value[i] = state.lower if state.trend == 1 else state.upper
        upper_band[i] = state.upper
        lower_band[i] = state.lower
        trend[i] = state.trend

    return {"value": value, "upper_band": upper_band, "lower_band": lower_band, "trend": trend}


@indicator
def parabolic_sar(frame: BarFrame, step: float = 0.02, max_af: float = 0.2) -> Columns:
    """
    Parabolic SAR

    Accelerating trailing stop. Starts long with the stop at the first low.
    The acceleration factor grows by `step` (capped at `max_af`) on each new
    extreme; a reversal resets it and moves the stop to the last extreme. The
    stop never crosses the lows (highs when short) of the two prior bars.

    Args:
        frame: Bars
        step: Acceleration step (default 0.02)
        max_af: Acceleration cap (default 0.2)

    Returns:
        value = SAR, plus trend (1 long, -1 short) / ep / af
    """
    step = check_non_negative(step, "step", "ParabolicSAR")
    max_af = check_non_negative(max_af, "max_af", "ParabolicSAR")

    high, low = frame.high, frame.low
    n = len(frame)

    columns = {name: np.zeros(n) for name in ("value", "trend", "ep", "af")}
    if n == 0:
        return columns

    state = SarState(sar=low[0], ep=high[0], af=step)

    for i in range(n):
        if i > 0:
            state.sar = state.sar + state.af * (state.ep - state.sar)

            if state.trend == 1:
                if low[i] < state.sar:
                    state.trend = -1.0
                    state.sar = state.ep
                    state.ep = low[i]
                    state.af = step
                else:
                    if high[i] > state.ep:
                        state.ep = high[i]
                        state.af = min(state.af + step, max_af)
                    # Stop cannot sit above the prior two lows
                    state.sar = min(state.sar, low[i - 1], low[i - 2] if i > 1 else low[i - 1])
            else:
                if high[i] > state.sar:
                    state.trend = 1.0
                    state.sar = state.ep
                    state.ep = high[i]
                    state.af = step
                else:
                    if low[i] < state.ep:
                        state.ep = low[i]
                        state.af = min(state.af + step, max_af)
                    # Stop cannot sit below the prior two highs
                    state.sar = max(state.sar, high[i - 1], high[i - 2] if i > 1 else high[i - 1])

        columns["value"][i] = state.sar
        columns["trend"][i] = state.trend
        columns["ep"][i] = state.ep
        columns["af"][i] = state.af

    return columns


@indicator
def aroon(frame: BarFrame, period: int = 25) -> Columns:
    """
    Aroon

    Over the `period + 1` bars ending at i, up/down place the bar of the
    highest high/lowest low on a 0..100 scale (100 = current bar).
    Neutral (up 50, down 50, oscillator 0) while i < period.

    Returns:
        value = oscillator, plus up / down / oscillator
    """
    period = check_period(period, "period", "Aroon")
    n = len(frame)

    up = np.full(n, 50.0)
    down = np.full(n, 50.0)
    oscillator = np.zeros(n)

    for i in range(period, n):
        # argmax/argmin return the first occurrence on ties
        highest_idx = int(np.argmax(frame.high[i - period:i + 1]))
        lowest_idx = int(np.argmin(frame.low[i - period:i + 1]))

        up[i] = highest_idx / period * 100
        down[i] = lowest_idx / period * 100
        oscillator[i] = up[i] - down[i]

    return {"value": oscillator, "up": up, "down": down, "oscillator": oscillator.copy()}


@indicator
def ichimoku(
    frame: BarFrame,
    tenkan_period: int = 9,
    kijun_period: int = 26,
    senkou_b_period: int = 52
) -> Columns:
    """
    Ichimoku Kinko Hyo

    Tenkan, kijun and senkou B are Donchian midpoints over their lookbacks.
    Senkou spans and chikou are reported on the current bar; shifting them by
    the kijun period for plotting is left to the caller.

    Returns:
        value = tenkan, plus tenkan / kijun / senkou_a / senkou_b / chikou
    """
    tenkan_period = check_period(tenkan_period, "tenkan_period", "Ichimoku")
    kijun_period = check_period(kijun_period, "kijun_period", "Ichimoku")
    senkou_b_period = check_period(senkou_b_period, "senkou_b_period", "Ichimoku")

    high, low = frame.high, frame.low
    n = len(frame)

    def midpoint(i: int, period: int) -> float:
        return (highest(trailing(high, i, period)) + lowest(trailing(low, i, period))) / 2

    tenkan = np.array([midpoint(i, tenkan_period) for i in range(n)])
    kijun = np.array([midpoint(i, kijun_period) for i in range(n)])
    senkou_b = np.array([midpoint(i, senkou_b_period) for i in range(n)])

    return {
        "value": tenkan,
        "tenkan": tenkan.copy(),
        "kijun": kijun,
        "senkou_a": (tenkan + kijun) / 2,
        "senkou_b": senkou_b,
        "chikou": frame.close.copy(),
    }
