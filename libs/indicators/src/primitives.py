"""
Numeric Primitives
sum, mean, stddev, highest, lowest, typical price, true range

All helpers are total: empty input yields 0 rather than NaN so that every
indicator series stays defined from its first index.
"""
from typing import Sequence, Union

import numpy as np

Numbers = Union[Sequence[float], np.ndarray]


def total(values: Numbers) -> float:
    """
    Left-to-right sum

    np.cumsum accumulates sequentially, unlike the pairwise np.sum, so window
    sums stay bit-identical to a running total.
    """
    if len(values) == 0:
        return 0.0
    return float(np.cumsum(values, dtype=float)[-1])


def mean(values: Numbers) -> float:
    """Arithmetic mean, 0 for an empty window"""
    n = len(values)
    return total(values) / n if n > 0 else 0.0


def stddev(values: Numbers) -> float:
    """Population standard deviation (divides by N), 0 for an empty window"""
    if len(values) == 0:
        return 0.0
    values = np.asarray(values, dtype=float)
    return float(np.sqrt(mean(np.square(values - mean(values)))))


def highest(values: Numbers) -> float:
    """Maximum of a window, 0 for an empty window"""
    return float(np.max(values)) if len(values) > 0 else 0.0


def lowest(values: Numbers) -> float:
    """Minimum of a window, 0 for an empty window"""
    return float(np.min(values)) if len(values) > 0 else 0.0


def typical_price(high: float, low: float, close: float) -> float:
    return (high + low + close) / 3


def true_range(high: float, low: float, prev_close: float) -> float:
    """
    True Range of a bar against the previous close

    max(high - low, |high - prev_close|, |low - prev_close|)
    """
    return max(
        high - low,
        abs(high - prev_close),
        abs(low - prev_close)
    )


def true_range_series(
    high: np.ndarray,
    low: np.ndarray,
    close: np.ndarray
) -> np.ndarray:
    """True range per bar; the first bar has no previous close and uses high - low"""
    n = len(close)
    tr = np.zeros(n)
    if n == 0:
        return tr

    tr[0] = high[0] - low[0]
    for i in range(1, n):
        tr[i] = true_range(high[i], low[i], close[i - 1])

    return tr


def trailing(values: Numbers, i: int, period: int) -> Numbers:
    """Window of up to `period` values ending at index i, shrinking at the start"""
    return values[max(0, i - period + 1):i + 1]
