"""
Technical Analysis Indicators Library
Batch indicator computations over ordered OHLCV bars
"""
from libs.indicators.src.series import (
    BarFrame,
    to_frame,
    to_dataframe,
)
from libs.indicators.src.averages import (
    sma,
    ema,
    wma,
    hull_ma,
    dema,
    tema,
    ma_ribbon,
    sma_series,
    ema_series,
    wma_series,
)
from libs.indicators.src.momentum import (
    rsi,
    macd,
    stochastic,
    cci,
    roc,
    williams_r,
    ultimate_oscillator,
    trix,
)
from libs.indicators.src.volatility import (
    atr,
    bollinger_bands,
    keltner_channels,
    donchian_channels,
    squeeze_momentum,
)
from libs.indicators.src.trend import (
    adx,
    supertrend,
    parabolic_sar,
    aroon,
    ichimoku,
)
from libs.indicators.src.volume import (
    obv,
    vwap,
    chaikin_money_flow,
    mfi,
    force_index,
    volume_profile,
)
from libs.indicators.src.levels import pivot_points

INDICATORS = {
    # Moving Averages
    "sma": sma, "ema": ema, "wma": wma, "hull_ma": hull_ma,
    "dema": dema, "tema": tema, "ma_ribbon": ma_ribbon,
    # Momentum
    "rsi": rsi, "macd": macd, "stochastic": stochastic, "cci": cci,
    "roc": roc, "williams_r": williams_r,
    "ultimate_oscillator": ultimate_oscillator, "trix": trix,
    # Volatility
    "atr": atr, "bollinger_bands": bollinger_bands,
    "keltner_channels": keltner_channels, "donchian_channels": donchian_channels,
    "squeeze_momentum": squeeze_momentum,
    # Trend
    "adx": adx, "supertrend": supertrend, "parabolic_sar": parabolic_sar,
    "aroon": aroon, "ichimoku": ichimoku,
    # Volume
    "obv": obv, "vwap": vwap, "chaikin_money_flow": chaikin_money_flow,
    "mfi": mfi, "force_index": force_index, "volume_profile": volume_profile,
    # Support / Resistance
    "pivot_points": pivot_points,
}

__all__ = [
    # Plumbing
    "BarFrame", "to_frame", "to_dataframe", "INDICATORS",
    # Moving Averages
    "sma", "ema", "wma", "hull_ma", "dema", "tema", "ma_ribbon",
    "sma_series", "ema_series", "wma_series",
    # Momentum
    "rsi", "macd", "stochastic", "cci", "roc", "williams_r",
    "ultimate_oscillator", "trix",
    # Volatility
    "atr", "bollinger_bands", "keltner_channels", "donchian_channels", "squeeze_momentum",
    # Trend
    "adx", "supertrend", "parabolic_sar", "aroon", "ichimoku",
    # Volume
    "obv", "vwap", "chaikin_money_flow", "mfi", "force_index", "volume_profile",
    # Support / Resistance
    "pivot_points",
]
