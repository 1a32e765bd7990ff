"""
Shared Schemas/Models for the indicator engine
Pydantic models for bars in and indicator points out
"""
from enum import Enum
from pydantic import BaseModel, Field, model_validator


# ============================================
# ENUMS
# ============================================

class PriceSource(str, Enum):
    """Price field an average is computed over"""
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"
    HL2 = "hl2"  # (high + low) / 2
    HLC3 = "hlc3"  # (high + low + close) / 3


class VolumeSide(str, Enum):
    """Dominant side of a volume profile bucket"""
    BUY = "buy"
    SELL = "sell"


# ============================================
# MARKET DATA MODELS
# ============================================

class OHLCVBar(BaseModel):
    """One trading bar. The date is an opaque label, never parsed."""
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def check_price_ordering(self) -> "OHLCVBar":
        if self.low > self.high:
            raise ValueError(f"low {self.low} is above high {self.high}")
        for name in ("open", "close"):
            price = getattr(self, name)
            if not self.low <= price <= self.high:
                raise ValueError(
                    f"{name} {price} outside bar range [{self.low}, {self.high}]"
                )
        return self


# ============================================
# INDICATOR OUTPUT MODELS
# ============================================

class IndicatorPoint(BaseModel):
    """
    One indicator output row, aligned with an input bar

    `value` is the primary line. Multi-line indicators attach their other
    lines as extra float fields (e.g. `signal`, `histogram`, `upper`).
    """
    date: str
    value: float

    class Config:
        extra = "allow"


class VolumeProfileBin(BaseModel):
    """Volume traded in one equal-width close-price bucket"""
    price: float  # bucket centre
    volume: float
    side: VolumeSide

    class Config:
        use_enum_values = True
