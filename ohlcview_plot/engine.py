from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

import numpy as np

from ohlcview_plot.composer import compose_chart
from ohlcview_plot.config import DEFAULT_CONFIG, ChartConfig
from ohlcview_plot.hover import HoverTracker
from ohlcview_plot.raster import clear, new_canvas, rasterize_scene
from ohlcview_plot.records import Series, coerce_series
from ohlcview_plot.scene import HoverTarget, Scene
from ohlcview_plot.view_state import ViewState, ViewStateController

LOGGER = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    def clear(self) -> None:
        ...

    def draw(self, scene: Scene) -> None:
        ...


class PointerInput(Protocol):
    """Pointer event shape the chart consumes; `ohlcview_ui.PointerEvent` fits it."""

    kind: str
    x: float | None
    y: float | None
    target: str | None


class SceneSurface:
    """Headless surface that keeps the most recently drawn scene."""

    def __init__(self, width: int = DEFAULT_CONFIG.width, height: int = DEFAULT_CONFIG.height) -> None:
        self.width = width
        self.height = height
        self.scene = Scene.empty(width, height)
        self.clear_count = 0
        self.draw_count = 0

    def clear(self) -> None:
        self.scene = Scene.empty(self.width, self.height)
        self.clear_count += 1

    def draw(self, scene: Scene) -> None:
        self.scene = scene
        self.draw_count += 1


class RasterSurface:
    """RGBA frame buffer repainted from each scene."""

    def __init__(self, width: int = DEFAULT_CONFIG.width, height: int = DEFAULT_CONFIG.height) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = width
        self.height = height
        self._frame = new_canvas(width, height)

    def clear(self) -> None:
        clear(self._frame)

    def draw(self, scene: Scene) -> None:
        frame = rasterize_scene(scene)
        h = min(self.height, frame.shape[0])
        w = min(self.width, frame.shape[1])
        self._frame[:h, :w] = frame[:h, :w]

    def to_rgba(self) -> np.ndarray:
        return self._frame.copy()


class ChartEngine:
    """Re-renders the chart whenever the series or the view state changes.

    The engine exclusively owns its surface between `open()` and `close()`. Each
    render clears the surface before drawing a scene composed from scratch; any
    failure is logged and leaves the surface blank.
    """

    def __init__(
        self,
        surface: DrawingSurface,
        controller: ViewStateController | None = None,
        *,
        config: ChartConfig | None = None,
    ) -> None:
        self._surface = surface
        self._controller = controller or ViewStateController()
        self._config = config or DEFAULT_CONFIG
        self._series: Series = ()
        self._scene = Scene.empty(self._config.width, self._config.height)
        self._tracker = HoverTracker(self._scene)
        self._unsubscribe: Callable[[], None] | None = None
        self._last_chart_inputs: tuple[str, bool] | None = None
        self._rendering = False
        self._dirty = False
        self._render_count = 0
        self._last_error: Exception | None = None

    def __enter__(self) -> "ChartEngine":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    @property
    def controller(self) -> ViewStateController:
        return self._controller

    @property
    def hover(self) -> HoverTracker:
        return self._tracker

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def series(self) -> Series:
        return self._series

    @property
    def render_count(self) -> int:
        return self._render_count

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    def open(self) -> None:
        if self.is_open:
            return
        self._unsubscribe = self._controller.subscribe(self._on_view_state)
        self.render()

    def close(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self._tracker.bind(Scene.empty(self._config.width, self._config.height))
        self._surface.clear()

    def set_series(self, raw: Any) -> Scene:
        self._series = coerce_series(raw)
        return self.render()

    def render(self) -> Scene:
        """Rebuild from the newest snapshot; calls made mid-render fold into one rerun."""
        if not self.is_open:
            LOGGER.debug("render skipped: engine is not open")
            return self._scene
        if self._rendering:
            self._dirty = True
            return self._scene
        self._rendering = True
        try:
            while True:
                self._dirty = False
                self._render_once()
                if not self._dirty:
                    break
        finally:
            self._rendering = False
        return self._scene

    def pointer_move(self, x: float, y: float) -> HoverTarget | None:
        return self._tracker.pointer_move(x, y)

    def pointer_leave(self) -> None:
        self._tracker.pointer_leave()

    def dispatch(self, event: PointerInput) -> bool:
        """Route an untargeted pointer event to hover; returns whether it was handled."""
        if event.target is not None:
            return False
        if event.kind == "pointer_move" and event.x is not None and event.y is not None:
            self.pointer_move(event.x, event.y)
            return True
        if event.kind == "pointer_leave":
            self.pointer_leave()
            return True
        return False

    def _on_view_state(self, state: ViewState) -> None:
        # Hover label changes only affect the sidebar, not the chart.
        if (state.chart_kind, state.grid_visible) == self._last_chart_inputs:
            return
        self.render()

    def _render_once(self) -> None:
        state = self._controller.state
        self._last_chart_inputs = (state.chart_kind, state.grid_visible)
        self._surface.clear()
        scene = Scene.empty(self._config.width, self._config.height)
        try:
            scene = compose_chart(self._series, state.chart_kind, state.grid_visible, config=self._config)
            if not scene.is_empty:
                self._surface.draw(scene)
            self._last_error = None
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("chart render failed: %s", exc)
            self._last_error = exc
            scene = Scene.empty(self._config.width, self._config.height)
            self._surface.clear()
        self._render_count += 1
        self._scene = scene
        self._tracker.bind(scene)
