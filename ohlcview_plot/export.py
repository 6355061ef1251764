from __future__ import annotations

from pathlib import Path
import xml.etree.ElementTree as ET

from PIL import Image

from ohlcview_plot.config import RGBA
from ohlcview_plot.raster import rasterize_scene
from ohlcview_plot.scene import CircleShape, LineShape, PathShape, RectShape, Scene, Shape, TextShape

SVG_NS = "http://www.w3.org/2000/svg"


def scene_to_svg(scene: Scene) -> str:
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": str(scene.width),
            "height": str(scene.height),
            "viewBox": f"0 0 {scene.width} {scene.height}",
        },
    )
    if scene.background is not None:
        _append_shape(root, scene.background)
    if scene.grid:
        grid = ET.SubElement(root, "g", {"class": "grid"})
        for line in scene.grid:
            _append_shape(grid, line)
    if scene.series:
        targets = {id(t.shape): t.index for t in scene.hover_targets}
        series = ET.SubElement(root, "g", {"class": f"series {scene.chart_kind or ''}".strip()})
        for shape in scene.series:
            elem = _append_shape(series, shape)
            index = targets.get(id(shape))
            if index is not None:
                elem.set("data-index", str(index))
    for axis in scene.axes:
        group = ET.SubElement(root, "g", {"class": f"axis axis-{axis.orientation}"})
        _append_shape(group, axis.domain_line)
        for tick in axis.ticks:
            tick_group = ET.SubElement(group, "g", {"class": "tick"})
            _append_shape(tick_group, tick.mark)
            _append_text(tick_group, tick.text)
    return ET.tostring(root, encoding="unicode")


def save_svg(scene: Scene, path: str | Path) -> Path:
    out = Path(path)
    out.write_text(scene_to_svg(scene), encoding="utf-8")
    return out


def save_png(scene: Scene, path: str | Path) -> Path:
    out = Path(path)
    Image.fromarray(rasterize_scene(scene)).save(out, format="PNG")
    return out


def _append_shape(parent: ET.Element, shape: Shape) -> ET.Element:
    if isinstance(shape, RectShape):
        attrs = {
            "x": _num(shape.x),
            "y": _num(shape.y),
            "width": _num(shape.width),
            "height": _num(shape.height),
            **_paint("fill", shape.fill),
        }
        if shape.corner_radius > 0:
            attrs["rx"] = _num(shape.corner_radius)
        return ET.SubElement(parent, "rect", attrs)
    if isinstance(shape, LineShape):
        return ET.SubElement(
            parent,
            "line",
            {
                "x1": _num(shape.x1),
                "y1": _num(shape.y1),
                "x2": _num(shape.x2),
                "y2": _num(shape.y2),
                **_paint("stroke", shape.stroke),
                "stroke-width": _num(shape.stroke_width),
            },
        )
    if isinstance(shape, CircleShape):
        attrs = {"cx": _num(shape.cx), "cy": _num(shape.cy), "r": _num(shape.r), **_paint("fill", shape.fill)}
        if shape.stroke is not None and shape.stroke_width > 0:
            attrs.update(_paint("stroke", shape.stroke))
            attrs["stroke-width"] = _num(shape.stroke_width)
        return ET.SubElement(parent, "circle", attrs)
    if isinstance(shape, PathShape):
        return ET.SubElement(
            parent,
            "path",
            {
                "d": shape.to_svg_d(),
                "fill": "none",
                **_paint("stroke", shape.stroke),
                "stroke-width": _num(shape.stroke_width),
            },
        )
    raise TypeError(f"unsupported shape: {type(shape).__name__}")


def _append_text(parent: ET.Element, text: TextShape) -> ET.Element:
    elem = ET.SubElement(
        parent,
        "text",
        {
            "x": _num(text.x),
            "y": _num(text.y),
            "text-anchor": text.anchor,
            "dominant-baseline": "middle",
            "font-size": _num(text.font_size_px),
            **_paint("fill", text.color),
        },
    )
    elem.text = text.text
    return elem


def _paint(attr: str, color: RGBA) -> dict[str, str]:
    r, g, b, a = color
    out = {attr: f"#{r:02X}{g:02X}{b:02X}"}
    if a < 255:
        out[f"{attr}-opacity"] = _num(a / 255.0)
    return out


def _num(value: float) -> str:
    text = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
