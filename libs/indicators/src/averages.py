"""
Moving Averages
SMA, EMA, WMA, Hull MA, DEMA, TEMA, MA Ribbon

Every average keeps the series defined from index 0: before a full window is
available SMA and EMA average the available prefix, WMA passes the raw value
through. The *_series functions work on plain numeric sequences and are what
the composed averages (DEMA, TEMA, Hull, MACD signal, TRIX) feed back into.
"""
import logging
import math
from typing import Dict, List, Sequence, Union

import numpy as np

from libs.common.src.schemas import IndicatorPoint, PriceSource
from libs.indicators.src.primitives import mean, trailing
from libs.indicators.src.series import Bars, BarFrame, Columns, check_period, indicator, to_frame

logger = logging.getLogger(__name__)

DEFAULT_RIBBON_PERIODS = (8, 13, 21, 34, 55, 89, 144, 200)

Source = Union[PriceSource, str]


# ============================================
# SERIES LEVEL
# ============================================

def sma_series(values: Union[Sequence[float], np.ndarray], period: int) -> np.ndarray:
    """
    Simple Moving Average of a numeric series

    Args:
        values: Input series
        period: Window length

    Returns:
        Mean of the last min(i + 1, period) values at each index
    """
    period = check_period(period, "period", "SMA")
    values = np.asarray(values, dtype=float)
    out = np.zeros(len(values))

    for i in range(len(values)):
        out[i] = mean(trailing(values, i, period))

    return out


def ema_series(values: Union[Sequence[float], np.ndarray], period: int) -> np.ndarray:
    """
    Exponential Moving Average of a numeric series

    Seeded with the SMA of the first `period` values; indices before the seed
    hold the running prefix mean.

    Args:
        values: Input series
        period: EMA period, multiplier k = 2 / (period + 1)

    Returns:
        EMA values
    """
    period = check_period(period, "period", "EMA")
    values = np.asarray(values, dtype=float)
    n = len(values)
    out = np.zeros(n)
    multiplier = 2 / (period + 1)

    running = 0.0
    for i in range(n):
        if i < period:
            # Prefix mean; at i == period - 1 this is the SMA seed
            running += values[i]
            out[i] = running / (i + 1)
        else:
            out[i] = (values[i] - out[i - 1]) * multiplier + out[i - 1]

    return out


def wma_series(values: Union[Sequence[float], np.ndarray], period: int) -> np.ndarray:
    """
    Weighted Moving Average of a numeric series

    Weights 1..period, most recent heaviest. Warm-up indices return the raw
    value unchanged.
    """
    period = check_period(period, "period", "WMA")
    values = np.asarray(values, dtype=float)
    n = len(values)
    out = np.zeros(n)
    weight_sum = period * (period + 1) / 2

    for i in range(n):
        if i < period - 1:
            out[i] = values[i]
            continue
        acc = 0.0
        for j in range(period):
            acc += values[i - period + 1 + j] * (j + 1)
        out[i] = acc / weight_sum

    return out


# ============================================
# BAR LEVEL
# ============================================

@indicator
def sma(frame: BarFrame, period: int, source: Source = PriceSource.CLOSE) -> Columns:
    """
    Simple Moving Average (SMA)

    Args:
        frame: Bars
        period: SMA period
        source: open, high, low, close, hl2 or hlc3

    Returns:
        value = SMA
    """
    period = check_period(period, "period", "SMA")
    return {"value": sma_series(frame.source(source), period)}


@indicator
def ema(frame: BarFrame, period: int, source: Source = PriceSource.CLOSE) -> Columns:
    """
    Exponential Moving Average (EMA)

    Gives more weight to recent prices.

    Args:
        frame: Bars
        period: EMA period
        source: open, high, low, close, hl2 or hlc3

    Returns:
        value = EMA
    """
    period = check_period(period, "period", "EMA")
    return {"value": ema_series(frame.source(source), period)}


@indicator
def wma(frame: BarFrame, period: int) -> Columns:
    """
    Weighted Moving Average (WMA) of close

    Linearly weighted average giving more weight to recent prices.
    """
    period = check_period(period, "period", "WMA")
    return {"value": wma_series(frame.close, period)}


@indicator
def hull_ma(frame: BarFrame, period: int) -> Columns:
    """
    Hull Moving Average

    HMA = WMA(2 * WMA(n / 2) - WMA(n), sqrt(n)), half and root periods floored.
    """
    period = check_period(period, "period", "HullMA")
    half_period = max(1, period // 2)
    sqrt_period = max(1, int(math.sqrt(period)))

    diff = 2 * wma_series(frame.close, half_period) - wma_series(frame.close, period)

    return {"value": wma_series(diff, sqrt_period)}


@indicator
def dema(frame: BarFrame, period: int) -> Columns:
    """
    Double Exponential Moving Average (DEMA)

    Reduces lag compared to regular EMA.
    DEMA = 2 * EMA - EMA(EMA)
    """
    period = check_period(period, "period", "DEMA")
    ema1 = ema_series(frame.close, period)
    ema2 = ema_series(ema1, period)

    return {"value": 2 * ema1 - ema2}


@indicator
def tema(frame: BarFrame, period: int) -> Columns:
    """
    Triple Exponential Moving Average (TEMA)

    Further reduces lag compared to DEMA.
    TEMA = 3 * EMA - 3 * EMA(EMA) + EMA(EMA(EMA))
    """
    period = check_period(period, "period", "TEMA")
    ema1 = ema_series(frame.close, period)
    ema2 = ema_series(ema1, period)
    ema3 = ema_series(ema2, period)

    return {"value": 3 * ema1 - 3 * ema2 + ema3}


def ma_ribbon(
    bars: Bars,
    periods: Sequence[int] = DEFAULT_RIBBON_PERIODS,
    source: Source = PriceSource.CLOSE
) -> Dict[str, List[IndicatorPoint]]:
    """
    EMA ribbon

    Args:
        bars: Bars
        periods: EMA periods (default Fibonacci set 8..200)
        source: Price source for every EMA

    Returns:
        Mapping "ema{period}" -> EMA points
    """
    frame = to_frame(bars)
    logger.debug(f"Building EMA ribbon {list(periods)} over {len(frame)} bars")
    return {f"ema{p}": ema(frame, p, source) for p in periods}
