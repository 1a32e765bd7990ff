"""
Series Plumbing
Normalises caller input into a columnar BarFrame and turns computed columns
back into date-aligned IndicatorPoint rows.
"""
import functools
import logging
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, ValidationError

from libs.common.src.config import get_settings
from libs.common.src.errors import BarValidationError, InvalidParameterError
from libs.common.src.schemas import IndicatorPoint, OHLCVBar, PriceSource

logger = logging.getLogger(__name__)

PRICE_FIELDS = ("open", "high", "low", "close")
BAR_FIELDS = PRICE_FIELDS + ("volume",)


@dataclass(frozen=True, eq=False)
class BarFrame:
    """Columnar, read-only view of an ordered OHLCV sequence"""
    dates: List[str]
    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    volume: np.ndarray

    def __len__(self) -> int:
        return len(self.dates)

    def source(self, source: Union[PriceSource, str] = PriceSource.CLOSE) -> np.ndarray:
        """Price column (or derived hl2 / hlc3) an average runs over"""
        try:
            source = PriceSource(source)
        except ValueError as e:
            choices = ", ".join(s.value for s in PriceSource)
            raise InvalidParameterError("source", source, f"must be one of {choices}") from e
        if source == PriceSource.HL2:
            return (self.high + self.low) / 2
        if source == PriceSource.HLC3:
            return (self.high + self.low + self.close) / 3
        return getattr(self, source.value)


Bars = Union[BarFrame, pd.DataFrame, Sequence[OHLCVBar], Sequence[Mapping[str, Any]]]
Columns = Dict[str, np.ndarray]


def _validate_rows(rows: List[Dict[str, Any]]) -> None:
    for i, row in enumerate(rows):
        try:
            OHLCVBar(**row)
        except ValidationError as e:
            raise BarValidationError(f"Bar {i} failed validation: {e}", index=i) from e


def _frame_from_dataframe(df: pd.DataFrame) -> Dict[str, Any]:
    missing = [c for c in PRICE_FIELDS if c not in df.columns]
    if missing:
        raise BarValidationError(
            f"DataFrame is missing columns: {missing}",
            details={"columns": [str(c) for c in df.columns]}
        )

    dates = df["date"] if "date" in df.columns else df.index
    columns: Dict[str, Any] = {"dates": [str(d) for d in dates]}
    for name in BAR_FIELDS:
        if name == "volume" and name not in df.columns:
            columns[name] = np.zeros(len(df))
            continue
        try:
            columns[name] = df[name].to_numpy(dtype=float)
        except (TypeError, ValueError) as e:
            raise BarValidationError(f"Column '{name}' is not numeric: {e}", field=name) from e
    return columns


def _row_from_bar(i: int, bar: Any) -> Dict[str, Any]:
    if isinstance(bar, OHLCVBar):
        return bar.model_dump()
    if not isinstance(bar, Mapping):
        raise BarValidationError(
            f"Bar {i} is a {type(bar).__name__}, expected a mapping or OHLCVBar",
            index=i
        )

    row: Dict[str, Any] = {}
    for name in ("date",) + PRICE_FIELDS:
        if name not in bar:
            raise BarValidationError(f"Bar {i} is missing '{name}'", index=i, field=name)
    row["date"] = str(bar["date"])
    for name in BAR_FIELDS:
        try:
            row[name] = float(bar.get(name, 0.0))
        except (TypeError, ValueError) as e:
            raise BarValidationError(
                f"Bar {i} has a non-numeric '{name}': {bar.get(name)!r}",
                index=i,
                field=name
            ) from e
    return row


def to_frame(bars: Bars, strict: Optional[bool] = None) -> BarFrame:
    """
    Normalise caller input into a BarFrame

    Args:
        bars: OHLCVBar models, mappings, a DataFrame, or a BarFrame
        strict: validate OHLC ordering per bar (defaults to INDICATORS_STRICT_BARS)

    Returns:
        BarFrame with float64 columns
    """
    if isinstance(bars, BarFrame):
        return bars

    if strict is None:
        strict = get_settings().indicators.strict_bars

    if isinstance(bars, pd.DataFrame):
        columns = _frame_from_dataframe(bars)
        if strict:
            _validate_rows([
                {"date": d, **{name: columns[name][i] for name in BAR_FIELDS}}
                for i, d in enumerate(columns["dates"])
            ])
        return BarFrame(**columns)

    rows = [_row_from_bar(i, bar) for i, bar in enumerate(bars)]
    if strict:
        _validate_rows(rows)

    logger.debug(f"Normalised {len(rows)} bars")
    return BarFrame(
        dates=[row["date"] for row in rows],
        **{name: np.array([row[name] for row in rows], dtype=float) for name in BAR_FIELDS}
    )


def build_points(frame: BarFrame, columns: Columns) -> List[IndicatorPoint]:
    """Zip computed columns into one IndicatorPoint per bar"""
    values = columns["value"].tolist()
    aux = {name: col.tolist() for name, col in columns.items() if name != "value"}

    return [
        IndicatorPoint(
            date=date,
            value=values[i],
            **{name: col[i] for name, col in aux.items()}
        )
        for i, date in enumerate(frame.dates)
    ]


def indicator(func: Callable[..., Columns]) -> Callable[..., List[IndicatorPoint]]:
    """
    Lift a column computation over a BarFrame into a bar-level indicator

    The decorated function accepts any Bars input and returns IndicatorPoint
    rows. The raw columns stay reachable as `<indicator>.compute(bars, ...)`
    for indicators composed from other indicators.
    """
    @functools.wraps(func)
    def wrapper(bars: Bars, *args: Any, **kwargs: Any) -> List[IndicatorPoint]:
        frame = to_frame(bars)
        columns = func(frame, *args, **kwargs)
        if len(frame) == 0:
            logger.debug(f"{func.__name__}: empty input")
            return []
        return build_points(frame, columns)

    def compute(bars: Bars, *args: Any, **kwargs: Any) -> Columns:
        return func(to_frame(bars), *args, **kwargs)

    wrapper.compute = compute  # type: ignore[attr-defined]
    return wrapper


def to_dataframe(points: Sequence[BaseModel]) -> pd.DataFrame:
    """Tabulate indicator points (indexed by date) or volume profile bins"""
    records = [p.model_dump() for p in points]
    df = pd.DataFrame.from_records(records)
    if "date" in df.columns:
        df = df.set_index("date")
    return df


# ============================================
# PARAMETER CHECKS
# ============================================

def check_period(value: Any, name: str, indicator_name: str, minimum: int = 1) -> int:
    """Lookback lengths must be integers >= minimum"""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(name, value, "must be an integer", indicator_name)
    if value < minimum:
        raise InvalidParameterError(name, value, f"must be >= {minimum}", indicator_name)
    return int(value)


def check_non_negative(value: Any, name: str, indicator_name: str) -> float:
    """Multipliers and acceleration steps must be finite and >= 0"""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(name, value, "must be a number", indicator_name)
    if not np.isfinite(value) or value < 0:
        raise InvalidParameterError(name, value, "must be finite and >= 0", indicator_name)
    return float(value)
