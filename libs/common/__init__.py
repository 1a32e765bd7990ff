"""
Common Library - Shared schemas, settings and errors for the indicator engine
"""
from libs.common.src.config import Settings, get_settings
from libs.common.src.schemas import (
    PriceSource,
    VolumeSide,
    OHLCVBar,
    IndicatorPoint,
    VolumeProfileBin,
)
from libs.common.src.errors import (
    IndicatorError,
    InvalidParameterError,
    BarValidationError,
)
from libs.common.src.log import setup_logging
from libs.common.src.utils import safe_divide

__all__ = [
    "Settings",
    "get_settings",
    "PriceSource",
    "VolumeSide",
    "OHLCVBar",
    "IndicatorPoint",
    "VolumeProfileBin",
    "IndicatorError",
    "InvalidParameterError",
    "BarValidationError",
    "setup_logging",
    "safe_divide",
]
