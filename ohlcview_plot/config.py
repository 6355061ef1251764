from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

RGBA = tuple[int, int, int, int]

COLOR_KEYS = (
    "background",
    "series_color",
    "marker_stroke",
    "bullish_color",
    "bearish_color",
    "axis_color",
    "grid_color",
    "text_color",
)


@dataclass(frozen=True)
class ChartConfig:
    """Canvas geometry and palette shared by every chart kind."""

    width: int = 1000
    height: int = 600
    margin: float = 60.0
    x_tick_count: int = 6
    y_tick_count: int = 10
    tick_size: float = 6.0
    tick_padding: float = 3.0
    background_radius: float = 10.0
    bar_fill_ratio: float = 0.8
    candle_width: float = 10.0
    wick_width: float = 1.0
    marker_radius: float = 5.0
    marker_stroke_width: float = 2.0
    line_width: float = 3.0
    grid_width: float = 1.0
    font_size_px: float = 12.0
    background: str = "#00000080"
    series_color: str = "#FF758C"
    marker_stroke: str = "#FFFFFF"
    bullish_color: str = "#22C55E"
    bearish_color: str = "#EF4444"
    axis_color: str = "#E2E8F0"
    grid_color: str = "#FFFFFF33"
    text_color: str = "#F8FAFC"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.margin < 0 or self.margin * 2 >= min(self.width, self.height):
            raise ValueError("margin must be >= 0 and smaller than half the canvas")
        if self.x_tick_count <= 0 or self.y_tick_count <= 0:
            raise ValueError("tick counts must be > 0")
        if not 0.0 < self.bar_fill_ratio <= 1.0:
            raise ValueError("bar_fill_ratio must be in (0, 1]")
        for name in ("candle_width", "wick_width", "marker_radius", "line_width", "grid_width", "font_size_px"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        for name in COLOR_KEYS:
            value = getattr(self, name)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise ValueError(f"`{name}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    def rgba(self, name: str) -> RGBA:
        if name not in COLOR_KEYS:
            raise KeyError(name)
        return hex_to_rgba(getattr(self, name))


DEFAULT_CONFIG = ChartConfig()


def hex_to_rgba(value: str) -> RGBA:
    if not _HEX_COLOR.match(value):
        raise ValueError(f"not a hex color: {value!r}")
    digits = value[1:]
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (r, g, b, a)


def validate_chart_config(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Merge overrides onto the defaults, rejecting unknown keys."""

    raw: dict[str, Any] = asdict(DEFAULT_CONFIG)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart setting: {key}")
            raw[key] = value

    kwargs: dict[str, Any] = {}
    for f in fields(ChartConfig):
        value = raw[f.name]
        default = getattr(DEFAULT_CONFIG, f.name)
        if isinstance(default, str):
            if not isinstance(value, str):
                raise ValueError(f"Setting `{f.name}` must be a string")
            kwargs[f.name] = value
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Setting `{f.name}` must be an integer")
            kwargs[f.name] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Setting `{f.name}` must be a number")
            kwargs[f.name] = float(value)
    return ChartConfig(**kwargs)


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", {})
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a TOML table")
    return validate_chart_config(table)
