from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from ohlcview_plot.config import RGBA, ChartConfig
from ohlcview_plot.records import PriceRecord
from ohlcview_plot.scales import Scales
from ohlcview_plot.scene import (
    BoundingBox,
    CircleShape,
    CubicSegment,
    HoverTarget,
    LineShape,
    PathShape,
    RectShape,
    Shape,
)


MIN_HIT_EXTENT = 4.0


@dataclass(frozen=True)
class SeriesGeometry:
    shapes: tuple[Shape, ...]
    hover_targets: tuple[HoverTarget, ...]


class ChartRenderer(Protocol):
    """Produces the data geometry for one chart kind; axes and grid are shared."""

    kind: str

    def render(self, series: Sequence[PriceRecord], scales: Scales, config: ChartConfig) -> SeriesGeometry:
        ...


class LineChartRenderer:
    kind = "line"

    def render(self, series: Sequence[PriceRecord], scales: Scales, config: ChartConfig) -> SeriesGeometry:
        xs = [scales.x(r.date) for r in series]
        ys = [scales.y(r.close) for r in series]
        color = config.rgba("series_color")
        path = PathShape(
            start=(xs[0], ys[0]),
            segments=monotone_x_segments(xs, ys),
            stroke=color,
            role="line",
            stroke_width=config.line_width,
        )
        markers: list[CircleShape] = []
        targets: list[HoverTarget] = []
        for i, (record, x, y) in enumerate(zip(series, xs, ys, strict=True)):
            marker = CircleShape(
                cx=x,
                cy=y,
                r=config.marker_radius,
                fill=color,
                role="marker",
                stroke=config.rgba("marker_stroke"),
                stroke_width=config.marker_stroke_width,
            )
            markers.append(marker)
            targets.append(HoverTarget(index=i, record=record, shape=marker, hit_bounds=marker.bounds))
        return SeriesGeometry(shapes=(path, *markers), hover_targets=tuple(targets))


class BarChartRenderer:
    kind = "bar"

    def render(self, series: Sequence[PriceRecord], scales: Scales, config: ChartConfig) -> SeriesGeometry:
        xs = [scales.x(r.date) for r in series]
        width = bar_width(xs, plot_width=abs(scales.x.range[1] - scales.x.range[0]), fill_ratio=config.bar_fill_ratio)
        baseline = scales.y.range[0]
        color = config.rgba("series_color")
        bars: list[RectShape] = []
        targets: list[HoverTarget] = []
        for i, (record, x) in enumerate(zip(series, xs, strict=True)):
            top = scales.y(record.close)
            bar = RectShape(
                x=x - width / 2.0,
                y=min(top, baseline),
                width=width,
                height=abs(baseline - top),
                fill=color,
                role="bar",
            )
            bars.append(bar)
            targets.append(HoverTarget(index=i, record=record, shape=bar, hit_bounds=_padded_bounds(bar)))
        return SeriesGeometry(shapes=tuple(bars), hover_targets=tuple(targets))


class CandlestickChartRenderer:
    kind = "candlestick"

    def render(self, series: Sequence[PriceRecord], scales: Scales, config: ChartConfig) -> SeriesGeometry:
        bullish = config.rgba("bullish_color")
        bearish = config.rgba("bearish_color")
        half = config.candle_width / 2.0
        wicks: list[LineShape] = []
        bodies: list[RectShape] = []
        targets: list[HoverTarget] = []
        for i, record in enumerate(series):
            x = scales.x(record.date)
            color = candle_color(record, bullish=bullish, bearish=bearish)
            wicks.append(
                LineShape(
                    x1=x,
                    y1=scales.y(record.high),
                    x2=x,
                    y2=scales.y(record.low),
                    stroke=color,
                    role="wick",
                    stroke_width=config.wick_width,
                )
            )
            top = scales.y(max(record.open, record.close))
            bottom = scales.y(min(record.open, record.close))
            body = RectShape(
                x=x - half,
                y=min(top, bottom),
                width=config.candle_width,
                height=abs(bottom - top),
                fill=color,
                role="body",
            )
            bodies.append(body)
            targets.append(HoverTarget(index=i, record=record, shape=body, hit_bounds=_padded_bounds(body)))
        # Bodies are drawn over their wicks.
        return SeriesGeometry(shapes=(*wicks, *bodies), hover_targets=tuple(targets))


def candle_color(record: PriceRecord, *, bullish: RGBA, bearish: RGBA) -> RGBA:
    return bullish if record.close > record.open else bearish


def bar_width(xs: Sequence[float], *, plot_width: float, fill_ratio: float) -> float:
    """Even-spacing slot width, capped at the tightest gap between neighbours."""
    if not xs:
        return 1.0
    slot = plot_width / float(len(xs))
    if len(xs) > 1:
        gaps = np.diff(np.sort(np.asarray(xs, dtype=np.float64)))
        positive = gaps[gaps > 1e-9]
        if positive.size > 0:
            slot = min(slot, float(np.min(positive)))
    return max(1.0, slot * fill_ratio)


def monotone_x_segments(xs: Sequence[float], ys: Sequence[float]) -> tuple[CubicSegment, ...]:
    """Cubic pieces through the points that never overshoot between neighbours.

    Tangents follow Fritsch-Carlson (as d3's curveMonotoneX): interior tangents are
    zero at local extrema and bounded by the adjacent secants, end tangents use the
    one-sided three-point estimate.
    """
    n = len(xs)
    if n != len(ys):
        raise ValueError("xs and ys must have the same length")
    if n < 2:
        return ()
    x = np.asarray(xs, dtype=np.float64)
    y = np.asarray(ys, dtype=np.float64)
    h = np.diff(x)
    dy = np.diff(y)
    secants = np.divide(dy, h, out=np.zeros_like(dy), where=h != 0)

    tangents = np.zeros(n, dtype=np.float64)
    if n == 2:
        tangents[:] = secants[0]
    else:
        for i in range(1, n - 1):
            tangents[i] = _interior_tangent(secants[i - 1], secants[i], h[i - 1], h[i])
        tangents[0] = _end_tangent(secants[0], h[0], tangents[1])
        tangents[-1] = _end_tangent(secants[-1], h[-1], tangents[-2])

    segments: list[CubicSegment] = []
    for i in range(n - 1):
        third = h[i] / 3.0
        segments.append(
            CubicSegment(
                c1=(float(x[i] + third), float(y[i] + third * tangents[i])),
                c2=(float(x[i + 1] - third), float(y[i + 1] - third * tangents[i + 1])),
                end=(float(x[i + 1]), float(y[i + 1])),
            )
        )
    return tuple(segments)


def _interior_tangent(s0: float, s1: float, h0: float, h1: float) -> float:
    if h0 + h1 == 0:
        return 0.0
    p = (s0 * h1 + s1 * h0) / (h0 + h1)
    sign = (-1.0 if s0 < 0 else 1.0) + (-1.0 if s1 < 0 else 1.0)
    return float(sign * min(abs(s0), abs(s1), 0.5 * abs(p)))


def _end_tangent(secant: float, h: float, neighbour: float) -> float:
    if h == 0:
        return float(neighbour)
    return float((3.0 * secant - neighbour) / 2.0)


def _padded_bounds(rect: RectShape) -> BoundingBox:
    width = max(rect.width, MIN_HIT_EXTENT)
    height = max(rect.height, MIN_HIT_EXTENT)
    return BoundingBox(
        x=rect.x - (width - rect.width) / 2.0,
        y=rect.y - (height - rect.height) / 2.0,
        width=width,
        height=height,
    )


_REGISTRY: dict[str, ChartRenderer] = {}


def register_renderer(renderer: ChartRenderer) -> ChartRenderer:
    kind = str(renderer.kind).strip()
    if not kind:
        raise ValueError("renderer kind must be non-empty")
    _REGISTRY[kind] = renderer
    return renderer


def renderer_for(kind: str) -> ChartRenderer:
    try:
        return _REGISTRY[kind]
    except KeyError:
        supported = ", ".join(sorted(_REGISTRY))
        raise ValueError(f"unsupported chart kind: {kind!r} (expected one of: {supported})") from None


def chart_kinds() -> tuple[str, ...]:
    return tuple(_REGISTRY)


register_renderer(LineChartRenderer())
register_renderer(BarChartRenderer())
register_renderer(CandlestickChartRenderer())
