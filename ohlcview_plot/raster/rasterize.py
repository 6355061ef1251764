from __future__ import annotations

import numpy as np

from ohlcview_plot.raster.canvas import fill_rect, new_canvas
from ohlcview_plot.raster.draw_lines import draw_line, draw_polyline
from ohlcview_plot.raster.draw_markers import draw_circle
from ohlcview_plot.raster.draw_text import draw_text, text_size
from ohlcview_plot.scene import Axis, CircleShape, LineShape, PathShape, RectShape, Scene, Shape, TextShape


def rasterize_scene(scene: Scene, *, path_steps: int = 16) -> np.ndarray:
    """Paint a scene into a fresh H x W x 4 uint8 frame; empty scenes stay transparent."""
    canvas = new_canvas(max(1, scene.width), max(1, scene.height))
    if scene.background is not None:
        _paint_shape(canvas, scene.background, path_steps)
    for line in scene.grid:
        _paint_shape(canvas, line, path_steps)
    for shape in scene.series:
        _paint_shape(canvas, shape, path_steps)
    for axis in scene.axes:
        _paint_axis(canvas, axis)
    return canvas


def _paint_shape(canvas: np.ndarray, shape: Shape, path_steps: int) -> None:
    if isinstance(shape, RectShape):
        fill_rect(canvas, shape.x, shape.y, shape.width, shape.height, shape.fill, radius=shape.corner_radius)
    elif isinstance(shape, LineShape):
        draw_line(canvas, shape.x1, shape.y1, shape.x2, shape.y2, shape.stroke, width=shape.stroke_width)
    elif isinstance(shape, CircleShape):
        draw_circle(canvas, shape.cx, shape.cy, shape.r, shape.fill, stroke=shape.stroke, stroke_width=shape.stroke_width)
    elif isinstance(shape, PathShape):
        draw_polyline(canvas, shape.sample(path_steps), shape.stroke, width=shape.stroke_width)
    else:
        raise TypeError(f"unsupported shape: {type(shape).__name__}")


def _paint_axis(canvas: np.ndarray, axis: Axis) -> None:
    _paint_shape(canvas, axis.domain_line, 1)
    for tick in axis.ticks:
        _paint_shape(canvas, tick.mark, 1)
        _paint_text(canvas, tick.text)


def _paint_text(canvas: np.ndarray, text: TextShape) -> None:
    w, h = text_size(text.text, font_size_px=text.font_size_px)
    if text.anchor == "middle":
        x = text.x - w / 2.0
    elif text.anchor == "end":
        x = text.x - w
    else:
        x = text.x
    draw_text(canvas, int(round(x)), int(round(text.y - h / 2.0)), text.text, text.color, font_size_px=text.font_size_px)
