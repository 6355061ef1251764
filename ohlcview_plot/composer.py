from __future__ import annotations

import logging
from typing import Any

from ohlcview_plot.config import DEFAULT_CONFIG, ChartConfig
from ohlcview_plot.records import coerce_series
from ohlcview_plot.renderers import renderer_for
from ohlcview_plot.scales import Scales, build_scales
from ohlcview_plot.scene import Axis, AxisTick, LineShape, RectShape, Scene, TextShape

LOGGER = logging.getLogger(__name__)


def compose_scene(
    series: Any,
    scales: Scales,
    chart_kind: str,
    grid_visible: bool,
    *,
    config: ChartConfig | None = None,
) -> Scene:
    """Build the full frame: background, optional grid, chart geometry, axes.

    Empty or malformed series compose to an empty scene and never raise. An unknown
    `chart_kind` is a caller error, not bad data, and raises `ValueError`; the engine
    absorbs it like any other render failure.
    """

    cfg = config or DEFAULT_CONFIG
    records = coerce_series(series)
    if not records:
        return Scene.empty(cfg.width, cfg.height)

    geometry = renderer_for(chart_kind).render(records, scales, cfg)
    background = RectShape(
        x=0.0,
        y=0.0,
        width=float(cfg.width),
        height=float(cfg.height),
        fill=cfg.rgba("background"),
        role="background",
        corner_radius=cfg.background_radius,
    )
    grid = _gridlines(scales, cfg) if grid_visible else ()
    return Scene(
        width=cfg.width,
        height=cfg.height,
        chart_kind=chart_kind,
        background=background,
        grid=grid,
        series=geometry.shapes,
        axes=(_x_axis(scales, cfg), _y_axis(scales, cfg)),
        hover_targets=geometry.hover_targets,
    )


def compose_chart(
    series: Any,
    chart_kind: str,
    grid_visible: bool,
    *,
    config: ChartConfig | None = None,
) -> Scene:
    """Fresh scales plus `compose_scene`, the whole per-render pipeline."""

    cfg = config or DEFAULT_CONFIG
    records = coerce_series(series)
    if not records:
        return Scene.empty(cfg.width, cfg.height)
    scales = build_scales(records, cfg.width, cfg.height, cfg.margin)
    return compose_scene(records, scales, chart_kind, grid_visible, config=cfg)


def _plot_extent(scales: Scales) -> tuple[float, float, float, float]:
    left, right = sorted(scales.x.range)
    top, bottom = sorted(scales.y.range)
    return left, right, top, bottom


def _gridlines(scales: Scales, cfg: ChartConfig) -> tuple[LineShape, ...]:
    left, right, top, bottom = _plot_extent(scales)
    color = cfg.rgba("grid_color")
    lines: list[LineShape] = []
    for day in scales.x.ticks(cfg.x_tick_count):
        px = scales.x(day)
        lines.append(LineShape(x1=px, y1=top, x2=px, y2=bottom, stroke=color, role="grid", stroke_width=cfg.grid_width))
    for value in scales.y.ticks(cfg.y_tick_count).tolist():
        py = scales.y(value)
        lines.append(LineShape(x1=left, y1=py, x2=right, y2=py, stroke=color, role="grid", stroke_width=cfg.grid_width))
    return tuple(lines)


def _x_axis(scales: Scales, cfg: ChartConfig) -> Axis:
    left, right, _, bottom = _plot_extent(scales)
    axis_color = cfg.rgba("axis_color")
    text_color = cfg.rgba("text_color")
    days = scales.x.ticks(cfg.x_tick_count)
    labels = scales.x.tick_labels(days, cfg.x_tick_count)
    label_y = bottom + cfg.tick_size + cfg.tick_padding + cfg.font_size_px / 2.0
    ticks = []
    for day, label in zip(days, labels, strict=True):
        px = scales.x(day)
        ticks.append(
            AxisTick(
                position=px,
                label=label,
                mark=LineShape(x1=px, y1=bottom, x2=px, y2=bottom + cfg.tick_size, stroke=axis_color, role="axis"),
                text=TextShape(x=px, y=label_y, text=label, color=text_color, font_size_px=cfg.font_size_px, anchor="middle"),
            )
        )
    return Axis(
        orientation="bottom",
        domain_line=LineShape(x1=left, y1=bottom, x2=right, y2=bottom, stroke=axis_color, role="axis"),
        ticks=tuple(ticks),
    )


def _y_axis(scales: Scales, cfg: ChartConfig) -> Axis:
    left, _, top, bottom = _plot_extent(scales)
    axis_color = cfg.rgba("axis_color")
    text_color = cfg.rgba("text_color")
    values = scales.y.ticks(cfg.y_tick_count)
    labels = scales.y.tick_labels(values)
    label_x = left - cfg.tick_size - cfg.tick_padding
    ticks = []
    for value, label in zip(values.tolist(), labels, strict=True):
        py = scales.y(value)
        ticks.append(
            AxisTick(
                position=py,
                label=label,
                mark=LineShape(x1=left - cfg.tick_size, y1=py, x2=left, y2=py, stroke=axis_color, role="axis"),
                text=TextShape(x=label_x, y=py, text=label, color=text_color, font_size_px=cfg.font_size_px, anchor="end"),
            )
        )
    return Axis(
        orientation="left",
        domain_line=LineShape(x1=left, y1=top, x2=left, y2=bottom, stroke=axis_color, role="axis"),
        ticks=tuple(ticks),
    )
