from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import datetime as dt
import logging
import math
from typing import Any

from ohlcview_plot.errors import MalformedSeriesError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

PRICE_FIELDS = ("open", "high", "low", "close")


@dataclass(frozen=True)
class PriceRecord:
    """One trading day. `low <= min(open, close) <= max(open, close) <= high` is assumed."""

    date: dt.date
    open: float
    high: float
    low: float
    close: float

    @property
    def ordinal(self) -> float:
        return float(self.date.toordinal())

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }


Series = tuple[PriceRecord, ...]


def normalize_series(raw: Any) -> Series:
    if raw is None:
        return ()
    if pd is not None and isinstance(raw, pd.DataFrame):
        return _records_from_frame(raw)
    if isinstance(raw, (str, bytes, bytearray, Mapping)) or not isinstance(raw, Sequence):
        raise MalformedSeriesError(f"series must be a sequence of records, got {type(raw).__name__}")
    return tuple(_coerce_record(item, index=i) for i, item in enumerate(raw))


def coerce_series(raw: Any) -> Series:
    """Like `normalize_series`, but malformed input becomes an empty series."""
    try:
        return normalize_series(raw)
    except MalformedSeriesError as exc:
        LOGGER.warning("ignoring malformed price series: %s", exc)
        return ()


def _records_from_frame(frame: Any) -> Series:
    columns = {str(c).lower(): c for c in frame.columns}
    date_key = columns.get("date", columns.get("datetime"))
    if date_key is None:
        raise MalformedSeriesError("DataFrame needs a `date` or `datetime` column")
    missing = [name for name in PRICE_FIELDS if name not in columns]
    if missing:
        raise MalformedSeriesError(f"DataFrame missing columns: {', '.join(missing)}")
    out: list[PriceRecord] = []
    for i, row in enumerate(frame.itertuples(index=False)):
        values = dict(zip(frame.columns, row, strict=False))
        item = {"date": values[date_key]}
        for name in PRICE_FIELDS:
            item[name] = values[columns[name]]
        out.append(_coerce_record(item, index=i))
    return tuple(out)


def _coerce_record(item: Any, *, index: int) -> PriceRecord:
    if isinstance(item, PriceRecord):
        checked = _coerce_record(_record_fields(item), index=index)
        return item if checked == item else checked
    if not isinstance(item, Mapping):
        raise MalformedSeriesError(f"record {index} must be a mapping, got {type(item).__name__}")
    raw_date = item.get("date", item.get("datetime"))
    if raw_date is None:
        raise MalformedSeriesError(f"record {index} is missing `date`")
    prices: dict[str, float] = {}
    for name in PRICE_FIELDS:
        if name not in item:
            raise MalformedSeriesError(f"record {index} is missing `{name}`")
        prices[name] = _coerce_price(item[name], field=name, index=index)
    return PriceRecord(date=_coerce_date(raw_date, index=index), **prices)


def _record_fields(record: PriceRecord) -> dict[str, Any]:
    # Raw field values; `as_dict` would stringify the date before it is checked.
    fields = {name: getattr(record, name) for name in PRICE_FIELDS}
    fields["date"] = record.date
    return fields


def _coerce_price(value: Any, *, field: str, index: int) -> float:
    if isinstance(value, bool):
        raise MalformedSeriesError(f"record {index} `{field}` must be numeric")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedSeriesError(f"record {index} `{field}` is not numeric: {value!r}") from exc
    if not math.isfinite(out):
        raise MalformedSeriesError(f"record {index} `{field}` must be finite")
    return out


def _coerce_date(value: Any, *, index: int) -> dt.date:
    if pd is not None and isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError as exc:
            raise MalformedSeriesError(f"record {index} has an unparsable date: {value!r}") from exc
    raise MalformedSeriesError(f"record {index} `date` has unsupported type {type(value).__name__}")
