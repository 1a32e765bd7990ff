"""
Pytest fixtures for the indicator engine tests.
"""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from libs.common.src.config import get_settings  # noqa: E402
from libs.common.src.schemas import OHLCVBar  # noqa: E402


def make_bars(highs, lows, closes, opens=None, volumes=None):
    """Build OHLCVBar rows from parallel price lists."""
    n = len(closes)
    opens = opens if opens is not None else closes
    volumes = volumes if volumes is not None else [1000.0] * n
    return [
        OHLCVBar(
            date=f"2024-01-{i + 1:02d}" if i < 31 else f"bar-{i}",
            open=opens[i],
            high=highs[i],
            low=lows[i],
            close=closes[i],
            volume=volumes[i],
        )
        for i in range(n)
    ]


def trending_bars(n, start=100.0, step=1.0):
    """Bars whose high, low and close all move by `step` each bar."""
    closes = [start + step * i for i in range(n)]
    return make_bars(
        highs=[c + 1 for c in closes],
        lows=[c - 1 for c in closes],
        closes=closes,
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Each test sees default settings unless it sets env vars itself."""
    monkeypatch.delenv("INDICATORS_STRICT_BARS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_ohlcv_df():
    """Create sample OHLCV DataFrame for testing."""
    n = 200
    np.random.seed(42)

    # Generate realistic price data
    returns = np.random.normal(0.0005, 0.02, n)
    close = 100.0 * np.exp(np.cumsum(returns))

    high = close * (1 + np.abs(np.random.normal(0, 0.01, n)))
    low = close * (1 - np.abs(np.random.normal(0, 0.01, n)))
    open_ = low + np.random.uniform(0, 1, n) * (high - low)
    volume = np.random.randint(100000, 1000000, n).astype(float)

    dates = pd.date_range("2024-01-01", periods=n, freq="D").strftime("%Y-%m-%d")

    return pd.DataFrame({
        "date": dates,
        "open": open_,
        "high": high,
        "low": low,
        "close": close,
        "volume": volume,
    })


@pytest.fixture
def sample_bars(sample_ohlcv_df):
    """Same series as OHLCVBar models."""
    return [OHLCVBar(**row) for row in sample_ohlcv_df.to_dict("records")]


@pytest.fixture
def sample_closes(sample_ohlcv_df):
    return sample_ohlcv_df["close"].to_numpy()


@pytest.fixture
def flat_bars():
    """30 bars with no price movement at all."""
    return make_bars([100.0] * 30, [100.0] * 30, [100.0] * 30)


@pytest.fixture
def uptrend_bars():
    return trending_bars(60, start=100.0, step=1.0)


@pytest.fixture
def downtrend_bars():
    return trending_bars(60, start=200.0, step=-1.0)


@pytest.fixture
def bar_factory():
    """Factory building OHLCVBar rows from parallel price lists."""
    return make_bars


@pytest.fixture
def trend_factory():
    """Factory building steadily trending bars."""
    return trending_bars
