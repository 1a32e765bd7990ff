"""
Volume Indicators
OBV, VWAP, Chaikin Money Flow, MFI, Force Index, Volume Profile
"""
import logging
import math
from typing import List

import numpy as np

from libs.common.src.schemas import VolumeProfileBin, VolumeSide
from libs.indicators.src.primitives import highest, lowest, mean, total
from libs.indicators.src.series import Bars, BarFrame, Columns, check_period, indicator, to_frame

logger = logging.getLogger(__name__)


@indicator
def obv(frame: BarFrame) -> Columns:
    """
    On-Balance Volume (OBV)

    Cumulative indicator that adds/subtracts volume based on price direction.
    The first bar seeds the total with its own volume.
    """
    close, volume = frame.close, frame.volume
    n = len(close)
    obv_values = np.zeros(n)
    if n == 0:
        return {"value": obv_values}

    obv_values[0] = volume[0]
    for i in range(1, n):
        if close[i] > close[i - 1]:
            obv_values[i] = obv_values[i - 1] + volume[i]
        elif close[i] < close[i - 1]:
            obv_values[i] = obv_values[i - 1] - volume[i]
        else:
            obv_values[i] = obv_values[i - 1]

    return {"value": obv_values}


@indicator
def vwap(frame: BarFrame) -> Columns:
    """
    Volume Weighted Average Price (VWAP)

    Cumulative from the first supplied bar; slice to a session boundary for a
    session VWAP. While no volume has traded the bar's typical price is used.
    """
    typical_price = (frame.high + frame.low + frame.close) / 3
    n = len(typical_price)
    vwap_values = np.zeros(n)

    cumulative_tp_volume = 0.0
    cumulative_volume = 0.0
    for i in range(n):
        cumulative_tp_volume += typical_price[i] * frame.volume[i]
        cumulative_volume += frame.volume[i]

        if cumulative_volume > 0:
            vwap_values[i] = cumulative_tp_volume / cumulative_volume
        else:
            vwap_values[i] = typical_price[i]

    return {"value": vwap_values}


@indicator
def chaikin_money_flow(frame: BarFrame, period: int = 20) -> Columns:
    """
    Chaikin Money Flow (CMF)

    Measures buying and selling pressure over a period.
    Ranges from -1 to +1. 0 during warm-up or when the window has no volume.

    Args:
        frame: Bars
        period: CMF period (default 20)

    Returns:
        value = CMF
    """
    period = check_period(period, "period", "ChaikinMoneyFlow")
    high, low, close, volume = frame.high, frame.low, frame.close, frame.volume
    n = len(close)

    # Money flow multiplier
    mf_mult = np.zeros(n)
    for i in range(n):
        hl_range = high[i] - low[i]
        if hl_range != 0:
            mf_mult[i] = ((close[i] - low[i]) - (high[i] - close[i])) / hl_range

    # Money flow volume
    mf_volume = mf_mult * volume

    cmf = np.zeros(n)
    for i in range(period - 1, n):
        vol_sum = total(volume[i - period + 1:i + 1])
        if vol_sum != 0:
            cmf[i] = total(mf_volume[i - period + 1:i + 1]) / vol_sum

    return {"value": cmf}


@indicator
def mfi(frame: BarFrame, period: int = 14) -> Columns:
    """
    Money Flow Index (MFI)

    Volume-weighted RSI. Ranges from 0 to 100.
    - MFI > 80: Overbought
    - MFI < 20: Oversold

    50 while i < period. A window with no negative flow uses a money ratio
    of 100 (MFI ~99.01), mirroring the RSI convention.
    """
    period = check_period(period, "period", "MFI")
    volume = frame.volume
    n = len(volume)

    # Typical price
    typical_price = (frame.high + frame.low + frame.close) / 3

    # Raw money flow
    raw_money_flow = typical_price * volume

    # Positive and negative money flow
    pos_mf = np.zeros(n)
    neg_mf = np.zeros(n)

    for i in range(1, n):
        if typical_price[i] > typical_price[i - 1]:
            pos_mf[i] = raw_money_flow[i]
        elif typical_price[i] < typical_price[i - 1]:
            neg_mf[i] = raw_money_flow[i]

    mfi_values = np.full(n, 50.0)

    for i in range(period, n):
        pos_sum = total(pos_mf[i - period + 1:i + 1])
        neg_sum = total(neg_mf[i - period + 1:i + 1])

        money_ratio = 100.0 if neg_sum == 0 else pos_sum / neg_sum
        mfi_values[i] = 100 - 100 / (1 + money_ratio)

    return {"value": mfi_values}


@indicator
def force_index(frame: BarFrame, period: int = 13) -> Columns:
    """
    Force Index

    Raw force (close change times volume) smoothed by an EMA of `period`.
    Index 0 has no prior close and reads 0; until `period` bars exist the value
    is the plain mean of raw forces so far.
    """
    period = check_period(period, "period", "ForceIndex")
    close, volume = frame.close, frame.volume
    n = len(close)

    multiplier = 2 / (period + 1)
    force_values = np.zeros(n)
    raw_force = np.zeros(n)

    for i in range(1, n):
        raw_force[i] = (close[i] - close[i - 1]) * volume[i]

        if i < period:
            force_values[i] = mean(raw_force[:i + 1])
        else:
            force_values[i] = (raw_force[i] - force_values[i - 1]) * multiplier + force_values[i - 1]

    return {"value": force_values}


def volume_profile(bars: Bars, bins: int = 20) -> List[VolumeProfileBin]:
    """
    Volume Profile

    Splits the observed close range into equal-width buckets and accumulates
    volume per bucket. A bar's volume counts as buying when it closed at or
    above its open; a bucket is tagged "buy" only when buying volume exceeds
    selling volume.

    Args:
        bars: Bars
        bins: Number of buckets (default 20)

    Returns:
        One VolumeProfileBin per bucket, lowest price first
    """
    bins = check_period(bins, "bins", "VolumeProfile")
    frame = to_frame(bars)
    if len(frame) == 0:
        return []

    min_price = lowest(frame.close)
    max_price = highest(frame.close)
    bin_size = (max_price - min_price) / bins
    if bin_size == 0:
        logger.debug("Volume profile over a flat close range, using a single bucket")

    volume = np.zeros(bins)
    buy_volume = np.zeros(bins)
    sell_volume = np.zeros(bins)

    for bar_open, bar_close, bar_volume in zip(frame.open, frame.close, frame.volume):
        idx = 0 if bin_size == 0 else min(math.floor((bar_close - min_price) / bin_size), bins - 1)
        if bar_close >= bar_open:
            buy_volume[idx] += bar_volume
        else:
            sell_volume[idx] += bar_volume
        volume[idx] += bar_volume

    return [
        VolumeProfileBin(
            price=min_price + bin_size * (i + 0.5),
            volume=volume[i],
            side=VolumeSide.BUY if buy_volume[i] > sell_volume[i] else VolumeSide.SELL,
        )
        for i in range(bins)
    ]
