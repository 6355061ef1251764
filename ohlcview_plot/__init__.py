from ohlcview_plot.composer import compose_chart, compose_scene
from ohlcview_plot.config import DEFAULT_CONFIG, ChartConfig, load_chart_config, validate_chart_config
from ohlcview_plot.engine import ChartEngine, DrawingSurface, PointerInput, RasterSurface, SceneSurface
from ohlcview_plot.errors import ChartDataError, MalformedSeriesError
from ohlcview_plot.export import save_png, save_svg, scene_to_svg
from ohlcview_plot.hover import HoverClear, HoverEvent, HoverTracker, format_tooltip, hit_test
from ohlcview_plot.raster import rasterize_scene
from ohlcview_plot.records import PriceRecord, Series, coerce_series, normalize_series
from ohlcview_plot.renderers import chart_kinds, register_renderer, renderer_for
from ohlcview_plot.scales import LinearScale, Margin, Scales, TimeScale, build_scales
from ohlcview_plot.scene import Scene
from ohlcview_plot.view_state import ViewState, ViewStateController

__all__ = [
    "ChartConfig",
    "ChartDataError",
    "ChartEngine",
    "DEFAULT_CONFIG",
    "DrawingSurface",
    "HoverClear",
    "HoverEvent",
    "HoverTracker",
    "LinearScale",
    "MalformedSeriesError",
    "Margin",
    "PointerInput",
    "PriceRecord",
    "RasterSurface",
    "Scales",
    "Scene",
    "SceneSurface",
    "Series",
    "TimeScale",
    "ViewState",
    "ViewStateController",
    "build_scales",
    "chart_kinds",
    "coerce_series",
    "compose_chart",
    "compose_scene",
    "format_tooltip",
    "hit_test",
    "load_chart_config",
    "normalize_series",
    "rasterize_scene",
    "register_renderer",
    "renderer_for",
    "save_png",
    "save_svg",
    "scene_to_svg",
    "validate_chart_config",
]
