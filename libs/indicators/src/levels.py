"""
Support / Resistance Levels
Classic floor-trader pivot points
"""
import numpy as np

from libs.indicators.src.series import BarFrame, Columns, indicator


@indicator
def pivot_points(frame: BarFrame) -> Columns:
    """
    Pivot Points

    Levels for bar i come from bar i - 1's high, low and close; the first bar
    uses itself.

    pivot = (H + L + C) / 3
    r1 = 2P - L,  r2 = P + (H - L),  r3 = H + 2(P - L)
    s1 = 2P - H,  s2 = P - (H - L),  s3 = L - 2(H - P)

    Returns:
        value = pivot, plus pivot / r1 / r2 / r3 / s1 / s2 / s3
    """
    # Previous bar's values, first bar paired with itself
    high = np.concatenate([frame.high[:1], frame.high[:-1]])
    low = np.concatenate([frame.low[:1], frame.low[:-1]])
    close = np.concatenate([frame.close[:1], frame.close[:-1]])

    pivot = (high + low + close) / 3

    return {
        "value": pivot,
        "pivot": pivot.copy(),
        "r1": 2 * pivot - low,
        "r2": pivot + (high - low),
        "r3": high + 2 * (pivot - low),
        "s1": 2 * pivot - high,
        "s2": pivot - (high - low),
        "s3": low - 2 * (high - pivot),
    }
