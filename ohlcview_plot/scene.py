from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from ohlcview_plot.config import RGBA
from ohlcview_plot.records import PriceRecord


ShapeRole = Literal["background", "grid", "line", "marker", "bar", "wick", "body", "axis"]
TextAnchor = Literal["start", "middle", "end"]
AxisOrientation = Literal["bottom", "left"]


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    fill: RGBA
    role: ShapeRole
    corner_radius: float = 0.0

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(x=self.x, y=self.y, width=self.width, height=self.height)


@dataclass(frozen=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: RGBA
    role: ShapeRole
    stroke_width: float = 1.0


@dataclass(frozen=True)
class CircleShape:
    cx: float
    cy: float
    r: float
    fill: RGBA
    role: ShapeRole
    stroke: RGBA | None = None
    stroke_width: float = 0.0

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(x=self.cx - self.r, y=self.cy - self.r, width=self.r * 2.0, height=self.r * 2.0)

    def contains(self, px: float, py: float) -> bool:
        dx = px - self.cx
        dy = py - self.cy
        return dx * dx + dy * dy <= self.r * self.r


@dataclass(frozen=True)
class CubicSegment:
    """One cubic Bézier piece; the start point is the previous segment's end."""

    c1: tuple[float, float]
    c2: tuple[float, float]
    end: tuple[float, float]

    def point_at(self, start: tuple[float, float], t: float) -> tuple[float, float]:
        u = 1.0 - t
        a = u * u * u
        b = 3.0 * u * u * t
        c = 3.0 * u * t * t
        d = t * t * t
        x = a * start[0] + b * self.c1[0] + c * self.c2[0] + d * self.end[0]
        y = a * start[1] + b * self.c1[1] + c * self.c2[1] + d * self.end[1]
        return (x, y)


@dataclass(frozen=True)
class PathShape:
    start: tuple[float, float]
    segments: tuple[CubicSegment, ...]
    stroke: RGBA
    role: ShapeRole
    stroke_width: float = 1.0

    def sample(self, steps_per_segment: int = 16) -> list[tuple[float, float]]:
        if steps_per_segment <= 0:
            raise ValueError("steps_per_segment must be > 0")
        points = [self.start]
        current = self.start
        for segment in self.segments:
            for i in range(1, steps_per_segment + 1):
                points.append(segment.point_at(current, i / steps_per_segment))
            current = segment.end
        return points

    def to_svg_d(self) -> str:
        parts = [f"M{_fmt(self.start[0])},{_fmt(self.start[1])}"]
        for seg in self.segments:
            parts.append(
                f"C{_fmt(seg.c1[0])},{_fmt(seg.c1[1])},{_fmt(seg.c2[0])},{_fmt(seg.c2[1])},"
                f"{_fmt(seg.end[0])},{_fmt(seg.end[1])}"
            )
        return "".join(parts)


@dataclass(frozen=True)
class TextShape:
    x: float
    y: float
    text: str
    color: RGBA
    font_size_px: float
    anchor: TextAnchor = "middle"


Shape = Union[RectShape, LineShape, CircleShape, PathShape]


@dataclass(frozen=True)
class AxisTick:
    position: float
    label: str
    mark: LineShape
    text: TextShape


@dataclass(frozen=True)
class Axis:
    orientation: AxisOrientation
    domain_line: LineShape
    ticks: tuple[AxisTick, ...]

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(t.label for t in self.ticks)


@dataclass(frozen=True)
class HoverTarget:
    index: int
    record: PriceRecord
    shape: RectShape | CircleShape
    hit_bounds: BoundingBox

    def contains(self, px: float, py: float) -> bool:
        if isinstance(self.shape, CircleShape):
            return self.shape.contains(px, py)
        return self.hit_bounds.contains(px, py)


@dataclass(frozen=True)
class Scene:
    """Geometry for one frame; rebuilt from scratch on every change."""

    width: int
    height: int
    chart_kind: str | None = None
    background: RectShape | None = None
    grid: tuple[LineShape, ...] = ()
    series: tuple[Shape, ...] = ()
    axes: tuple[Axis, ...] = ()
    hover_targets: tuple[HoverTarget, ...] = ()

    @classmethod
    def empty(cls, width: int, height: int) -> "Scene":
        return cls(width=width, height=height)

    @property
    def is_empty(self) -> bool:
        return self.shape_count == 0 and not self.axes

    @property
    def shape_count(self) -> int:
        return (1 if self.background is not None else 0) + len(self.grid) + len(self.series)

    @property
    def hoverable_shapes(self) -> tuple[RectShape | CircleShape, ...]:
        return tuple(t.shape for t in self.hover_targets)

    def axis(self, orientation: AxisOrientation) -> Axis | None:
        for axis in self.axes:
            if axis.orientation == orientation:
                return axis
        return None

    def shapes_with_role(self, role: ShapeRole) -> tuple[Shape, ...]:
        return tuple(s for s in self.series if s.role == role)


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
