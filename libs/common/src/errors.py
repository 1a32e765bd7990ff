"""
Custom Error Classes for the indicator engine

Numeric degeneracies (empty windows, zero ranges) never raise; they resolve to
fallback constants inside the indicators. These errors cover caller misuse only.
"""
from typing import Optional, Dict, Any


class IndicatorError(Exception):
    """Base exception for all indicator engine errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "INDICATOR_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class InvalidParameterError(IndicatorError, ValueError):
    """Indicator parameter out of its valid range"""

    def __init__(
        self,
        parameter: str,
        value: Any,
        reason: str,
        indicator: Optional[str] = None
    ):
        where = f" for {indicator}" if indicator else ""
        details = {"parameter": parameter, "value": value}
        if indicator:
            details["indicator"] = indicator
        super().__init__(
            message=f"Invalid {parameter}={value!r}{where}: {reason}",
            error_code="INVALID_PARAMETER",
            details=details
        )


class BarValidationError(IndicatorError, ValueError):
    """Input bar is malformed or violates OHLC ordering"""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if index is not None:
            error_details["index"] = index
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            error_code="BAR_VALIDATION_ERROR",
            details=error_details
        )
