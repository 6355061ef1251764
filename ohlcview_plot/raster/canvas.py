from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]
    return canvas


def clear(dst: np.ndarray, color: RGBA = (0, 0, 0, 0)) -> None:
    dst[:, :, 0] = color[0]
    dst[:, :, 1] = color[1]
    dst[:, :, 2] = color[2]
    dst[:, :, 3] = color[3]


def blend_mask(dst: np.ndarray, x0: int, y0: int, coverage: np.ndarray, color: RGBA) -> None:
    """Source-over blend `color` into dst at (x0, y0), weighted by coverage in [0, 1]."""
    h, w = coverage.shape
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x0 + w)
    yb = min(dst.shape[0], y0 + h)
    if xa >= xb or ya >= yb:
        return
    cov = coverage[ya - y0 : yb - y0, xa - x0 : xb - x0].astype(np.float32)
    src_a = (color[3] / 255.0) * cov
    if not np.any(src_a > 0):
        return
    patch = dst[ya:yb, xa:xb]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_a = patch[:, :, 3].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    num = src_rgb * src_a[:, :, None] + dst_rgb * (dst_a * (1.0 - src_a))[:, :, None]
    safe = np.where(out_a > 1e-6, out_a, 1.0)
    patch[:, :, :3] = np.clip(num / safe[:, :, None], 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_a * 255.0, 0, 255).astype(np.uint8)


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    blend_mask(dst, x, y, np.ones((1, 1), dtype=np.float32), color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, width: int = 1) -> None:
    xa = min(x0, x1)
    xb = max(x0, x1)
    top = y - (max(1, width) - 1) // 2
    blend_mask(dst, xa, top, np.ones((max(1, width), xb - xa + 1), dtype=np.float32), color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, width: int = 1) -> None:
    ya = min(y0, y1)
    yb = max(y0, y1)
    left = x - (max(1, width) - 1) // 2
    blend_mask(dst, left, ya, np.ones((yb - ya + 1, max(1, width)), dtype=np.float32), color)


def fill_rect(
    dst: np.ndarray,
    x: float,
    y: float,
    width: float,
    height: float,
    color: RGBA,
    *,
    radius: float = 0.0,
) -> None:
    x0 = int(round(x))
    y0 = int(round(y))
    x1 = max(x0 + 1, int(round(x + width)))
    y1 = max(y0 + 1, int(round(y + height)))
    w = x1 - x0
    h = y1 - y0
    coverage = np.ones((h, w), dtype=np.float32)
    r = min(float(radius), w / 2.0, h / 2.0)
    if r >= 1.0:
        yy, xx = np.mgrid[0:h, 0:w].astype(np.float32) + 0.5
        cx = np.clip(xx, r, w - r)
        cy = np.clip(yy, r, h - r)
        outside = (xx - cx) ** 2 + (yy - cy) ** 2 > r * r
        coverage[outside] = 0.0
    blend_mask(dst, x0, y0, coverage, color)
