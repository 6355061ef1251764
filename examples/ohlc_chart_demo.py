from __future__ import annotations

import argparse
import datetime as dt
from pathlib import Path

import numpy as np
from PIL import Image

from ohlcview_plot import ChartEngine, PriceRecord, RasterSurface, ViewStateController
from ohlcview_ui import Sidebar, TooltipModel, parse_pointer_event


def _random_walk(days: int = 30, *, seed: int = 7) -> list[PriceRecord]:
    rng = np.random.default_rng(seed)
    start = dt.date(2024, 1, 2)
    close = 187.0
    out: list[PriceRecord] = []
    for i in range(days):
        open_ = close + float(rng.normal(0.0, 0.6))
        close = open_ + float(rng.normal(0.15, 1.8))
        high = max(open_, close) + float(abs(rng.normal(0.0, 0.9)))
        low = min(open_, close) - float(abs(rng.normal(0.0, 0.9)))
        out.append(PriceRecord(start + dt.timedelta(days=i), round(open_, 2), round(high, 2), round(low, 2), round(close, 2)))
    return out


def main() -> None:
    parser = argparse.ArgumentParser(description="Render every chart kind through the sidebar controls.")
    parser.add_argument("--out-dir", type=Path, default=Path("ohlc_demo_out"))
    args = parser.parse_args()
    args.out_dir.mkdir(parents=True, exist_ok=True)

    series = _random_walk()
    controller = ViewStateController()
    sidebar = Sidebar(controller)
    surface = RasterSurface(1000, 600)
    with ChartEngine(surface, controller) as engine:
        tooltip = TooltipModel(viewport_width=surface.width, viewport_height=surface.height)
        tooltip.attach(engine.hover)
        engine.set_series(series)
        for button_id in ("line", "bar", "candlestick", "grid"):
            sidebar.pointer_enter(button_id)
            sidebar.click(button_id)
            sidebar.pointer_leave(button_id)
            target = engine.scene.hover_targets[len(series) // 2]
            box = target.hit_bounds
            event = parse_pointer_event("pointer_move", {"x": box.x + box.width / 2.0, "y": box.y + box.height / 2.0})
            if event is not None and not sidebar.dispatch(event):
                engine.dispatch(event)
            name = "_".join(sidebar.active_ids())
            out = args.out_dir / f"{name}.png"
            Image.fromarray(surface.to_rgba()).save(out)
            print(f"{out}: tooltip={tooltip.text!r} at ({tooltip.x:.0f}, {tooltip.y:.0f})")


if __name__ == "__main__":
    main()
