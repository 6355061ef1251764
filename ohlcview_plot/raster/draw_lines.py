from __future__ import annotations

from typing import Sequence

import numpy as np

from ohlcview_plot.raster.canvas import RGBA, blend_mask, draw_hline, draw_vline


def draw_line(dst: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: RGBA, width: float = 1.0) -> None:
    xa, ya, xb, yb = int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1))
    w = max(1, int(round(width)))
    if ya == yb:
        draw_hline(dst, xa, xb, ya, color, width=w)
        return
    if xa == xb:
        draw_vline(dst, xa, ya, yb, color, width=w)
        return
    _stamp(dst, _line_pixels(xa, ya, xb, yb), color, w)


def draw_polyline(dst: np.ndarray, points: Sequence[tuple[float, float]], color: RGBA, width: float = 1.0) -> None:
    if len(points) < 2:
        return
    w = max(1, int(round(width)))
    pixels: list[tuple[int, int]] = []
    for (xa, ya), (xb, yb) in zip(points, points[1:], strict=False):
        pixels.extend(_line_pixels(int(round(xa)), int(round(ya)), int(round(xb)), int(round(yb))))
    _stamp(dst, pixels, color, w)


def _stamp(dst: np.ndarray, pixels: Sequence[tuple[int, int]], color: RGBA, width: int) -> None:
    # Union of square brushes; each covered pixel blends once.
    if not pixels:
        return
    radius = width // 2
    xs = np.asarray([p[0] for p in pixels], dtype=np.int64)
    ys = np.asarray([p[1] for p in pixels], dtype=np.int64)
    x0 = int(xs.min()) - radius
    y0 = int(ys.min()) - radius
    mask = np.zeros((int(ys.max()) - y0 + radius + 1, int(xs.max()) - x0 + radius + 1), dtype=np.float32)
    for dy in range(-radius, width - radius):
        for dx in range(-radius, width - radius):
            mask[ys - y0 + dy, xs - x0 + dx] = 1.0
    blend_mask(dst, x0, y0, mask, color)


def _line_pixels(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    out: list[tuple[int, int]] = []

    while True:
        out.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return out
