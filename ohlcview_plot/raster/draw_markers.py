from __future__ import annotations

import numpy as np

from ohlcview_plot.raster.canvas import RGBA, blend_mask


def draw_circle(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    *,
    stroke: RGBA | None = None,
    stroke_width: float = 0.0,
) -> None:
    outer = radius + (stroke_width / 2.0 if stroke is not None else 0.0)
    x0 = int(np.floor(cx - outer))
    y0 = int(np.floor(cy - outer))
    size = int(np.ceil(outer * 2.0)) + 2
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float32)
    dist = np.sqrt((xx + x0 + 0.5 - cx) ** 2 + (yy + y0 + 0.5 - cy) ** 2)
    inner = radius - (stroke_width / 2.0 if stroke is not None else 0.0)
    blend_mask(dst, x0, y0, _coverage(dist, inner), fill)
    if stroke is not None and stroke_width > 0:
        ring = _coverage(dist, outer) - _coverage(dist, inner)
        blend_mask(dst, x0, y0, np.clip(ring, 0.0, 1.0), stroke)


def _coverage(dist: np.ndarray, radius: float) -> np.ndarray:
    # One pixel of linear falloff at the edge.
    return np.clip(radius + 0.5 - dist, 0.0, 1.0)
