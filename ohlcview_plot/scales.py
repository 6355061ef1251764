from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Sequence

import numpy as np

from ohlcview_plot.records import PriceRecord, normalize_series


EMPTY_DOMAIN_DAY = dt.date(1970, 1, 1)
MIN_TIME_SPAN_DAYS = 1.0
MIN_PRICE_SPAN = 1.0
PRICE_SPAN_RATIO = 0.05

# (unit, step, approximate length in days), ascending.
_TIME_INTERVALS: tuple[tuple[str, int, float], ...] = (
    ("day", 1, 1.0),
    ("day", 2, 2.0),
    ("week", 1, 7.0),
    ("week", 2, 14.0),
    ("month", 1, 30.4),
    ("month", 3, 91.3),
    ("month", 6, 182.6),
    ("year", 1, 365.25),
)
_TIME_FORMATS = {"day": "%b %d", "week": "%b %d", "month": "%b %Y", "year": "%Y"}


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float

    @classmethod
    def uniform(cls, value: float) -> "Margin":
        v = float(value)
        return cls(top=v, right=v, bottom=v, left=v)


@dataclass(frozen=True)
class LinearScale:
    """Linear map from a numeric domain to a pixel range."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        if self.domain[1] == self.domain[0]:
            raise ValueError("scale domain span must be non-zero")

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return (float(value) - d0) * ((r1 - r0) / (d1 - d0)) + r0

    def map(self, values: Sequence[float] | np.ndarray) -> np.ndarray:
        d0, d1 = self.domain
        r0, r1 = self.range
        arr = np.asarray(values, dtype=np.float64)
        return (arr - d0) * ((r1 - r0) / (d1 - d0)) + r0

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return d0
        return (float(pixel) - r0) * ((d1 - d0) / (r1 - r0)) + d0

    def ticks(self, count: int) -> np.ndarray:
        lo, hi = sorted(self.domain)
        ticks = generate_nice_ticks(lo, hi, count)
        return ticks_within_range(ticks, vmin=lo, vmax=hi)

    def tick_labels(self, ticks: np.ndarray) -> list[str]:
        return format_ticks_for_axis(np.asarray(ticks, dtype=np.float64))


@dataclass(frozen=True)
class TimeScale:
    """Linear-in-time map; the domain is held as proleptic ordinal days."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        if self.domain[1] == self.domain[0]:
            raise ValueError("scale domain span must be non-zero")

    @property
    def linear(self) -> LinearScale:
        return LinearScale(domain=self.domain, range=self.range)

    @property
    def date_domain(self) -> tuple[dt.date, dt.date]:
        return (_date_from_ordinal(self.domain[0]), _date_from_ordinal(self.domain[1]))

    def __call__(self, value: dt.date | float) -> float:
        return self.linear(_to_ordinal(value))

    def map(self, values: Sequence[dt.date | float]) -> np.ndarray:
        return self.linear.map([_to_ordinal(v) for v in values])

    def invert(self, pixel: float) -> float:
        return self.linear.invert(pixel)

    def tick_interval(self, count: int) -> tuple[str, int]:
        """Calendar `(unit, step)` whose tick count is closest to `count`."""
        if count <= 0:
            raise ValueError("count must be > 0")
        lo, hi = sorted(self.domain)
        return _choose_time_interval(hi - lo, count)

    def ticks(self, count: int) -> list[dt.date]:
        lo, hi = sorted(self.domain)
        unit, step = self.tick_interval(count)
        return _time_ticks(lo, hi, unit, step)

    def tick_labels(self, ticks: Sequence[dt.date], count: int) -> list[str]:
        # `count` must be the one passed to `ticks` so labels share its unit.
        unit, _ = self.tick_interval(count)
        fmt = _TIME_FORMATS[unit]
        return [d.strftime(fmt) for d in ticks]


@dataclass(frozen=True)
class Scales:
    x: TimeScale
    y: LinearScale


def resolve_margin(margin: float | Margin) -> Margin:
    if isinstance(margin, Margin):
        return margin
    return Margin.uniform(margin)


def build_scales(
    series: Sequence[PriceRecord],
    canvas_width: float,
    canvas_height: float,
    margin: float | Margin,
) -> Scales:
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError("canvas width/height must be > 0")
    m = resolve_margin(margin)
    if min(m.top, m.right, m.bottom, m.left) < 0:
        raise ValueError("margins must be >= 0")
    if m.left + m.right >= canvas_width or m.top + m.bottom >= canvas_height:
        raise ValueError("margins must leave a drawable plot area")

    series = normalize_series(series)
    if series:
        ordinals = np.asarray([r.ordinal for r in series], dtype=np.float64)
        lows = np.asarray([r.low for r in series], dtype=np.float64)
        highs = np.asarray([r.high for r in series], dtype=np.float64)
        x_lo, x_hi = float(np.min(ordinals)), float(np.max(ordinals))
        y_lo, y_hi = float(np.min(lows)), float(np.max(highs))
    else:
        x_lo = x_hi = float(EMPTY_DOMAIN_DAY.toordinal())
        y_lo, y_hi = 0.0, 1.0

    x_domain = _widen_degenerate(x_lo, x_hi, MIN_TIME_SPAN_DAYS * 0.5)
    y_domain = _widen_degenerate(y_lo, y_hi, max(abs(y_lo) * PRICE_SPAN_RATIO, MIN_PRICE_SPAN))
    x_scale = TimeScale(domain=x_domain, range=(m.left, canvas_width - m.right))
    y_scale = LinearScale(domain=y_domain, range=(canvas_height - m.bottom, m.top))
    return Scales(x=x_scale, y=y_scale)


def _widen_degenerate(lo: float, hi: float, half_span: float) -> tuple[float, float]:
    if lo == hi:
        return (lo - half_span, hi + half_span)
    return (lo, hi)


def _to_ordinal(value: dt.date | float) -> float:
    if isinstance(value, dt.datetime):
        return float(value.date().toordinal())
    if isinstance(value, dt.date):
        return float(value.toordinal())
    return float(value)


def _date_from_ordinal(value: float) -> dt.date:
    return dt.date.fromordinal(max(1, int(np.floor(value))))


def _choose_time_interval(span_days: float, count: int) -> tuple[str, int]:
    target = span_days / float(count)
    for (unit, step, length), nxt in zip(_TIME_INTERVALS, _TIME_INTERVALS[1:] + (None,), strict=False):
        if nxt is None:
            break
        if target < nxt[2]:
            # Pick the nearer of the two bracketing intervals.
            if target / length < nxt[2] / target:
                return (unit, step)
            return (nxt[0], nxt[1])
    years = max(1, int(_nice_number(max(target / 365.25, 1.0), round_result=True)))
    return ("year", years)


def _time_ticks(lo: float, hi: float, unit: str, step: int) -> list[dt.date]:
    first = _date_from_ordinal(np.ceil(lo))
    last = _date_from_ordinal(np.floor(hi))
    if last < first:
        return []
    out: list[dt.date] = []
    if unit == "day":
        day = first
        while day <= last:
            if day.toordinal() % step == 0:
                out.append(day)
            day += dt.timedelta(days=1)
    elif unit == "week":
        # Weeks start on Sunday.
        day = first + dt.timedelta(days=(6 - first.weekday()) % 7)
        while day <= last:
            if (day.toordinal() // 7) % step == 0:
                out.append(day)
            day += dt.timedelta(days=7)
    elif unit == "month":
        year, month = first.year, first.month
        if first.day != 1:
            year, month = _next_month(year, month)
        while True:
            day = dt.date(year, month, 1)
            if day > last:
                break
            if (month - 1) % step == 0:
                out.append(day)
            year, month = _next_month(year, month)
    else:
        year = first.year if (first.month, first.day) == (1, 1) else first.year + 1
        while year <= last.year:
            if year % step == 0:
                out.append(dt.date(year, 1, 1))
            year += 1
    return out


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return (year + 1, 1)
    return (year, month + 1)


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else max(1e-12, abs(vmax - vmin))
    eps = max(1e-12, step * 1e-6)
    mask = (ticks >= (vmin - eps)) & (ticks <= (vmax + eps))
    return ticks[mask]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e9 or (step is not None and abs(step) < 1e-6) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
