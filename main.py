from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path

from ohlcview_feed import ResponseCache, fetch_daily_series
from ohlcview_plot import (
    ChartEngine,
    SceneSurface,
    ViewState,
    ViewStateController,
    chart_kinds,
    coerce_series,
    load_chart_config,
    save_png,
    save_svg,
)
from ohlcview_plot.config import DEFAULT_CONFIG
from ohlcview_plot.records import Series

API_KEY_ENV = "TWELVEDATA_API_KEY"

LOGGER = logging.getLogger("ohlcview")


def main() -> None:
    parser = argparse.ArgumentParser(prog="ohlcview")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart to PNG or SVG.")
    source = render.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, default=None, help="JSON file holding a list of OHLC records.")
    source.add_argument("--symbol", default=None, help="Fetch daily bars for this ticker symbol.")
    render.add_argument("--kind", choices=list(chart_kinds()), default="line")
    render.add_argument("--grid", action="store_true")
    render.add_argument("--format", choices=["png", "svg"], default=None, help="Default: from --out suffix.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table.")
    _add_feed_arguments(render)

    fetch = sub.add_parser("fetch", help="Fetch daily bars for a symbol and write them as JSON.")
    fetch.add_argument("symbol")
    fetch.add_argument("--out", type=Path, default=None, help="Default: print to stdout.")
    _add_feed_arguments(fetch)
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        config = load_chart_config(args.config) if args.config is not None else DEFAULT_CONFIG
        if args.input is not None:
            series = coerce_series(json.loads(args.input.read_text(encoding="utf-8")))
        else:
            series = _fetch(args.symbol, args)
        controller = ViewStateController(ViewState(chart_kind=args.kind, grid_visible=args.grid))
        surface = SceneSurface(config.width, config.height)
        with ChartEngine(surface, controller, config=config) as engine:
            scene = engine.set_series(series)
            if engine.last_error is not None:
                raise RuntimeError(f"render failed: {engine.last_error}")
        fmt = args.format or (args.out.suffix.lstrip(".").lower() or "png")
        if fmt == "svg":
            out = save_svg(scene, args.out)
        elif fmt == "png":
            out = save_png(scene, args.out)
        else:
            raise RuntimeError(f"unsupported output format: {fmt}")
        print(f"rendered {args.kind} chart: records={len(series)} shapes={scene.shape_count} out={out}")
        return

    if args.command == "fetch":
        series = _fetch(args.symbol, args)
        text = json.dumps([record.as_dict() for record in series], indent=2)
        if args.out is None:
            print(text)
        else:
            args.out.write_text(text + "\n", encoding="utf-8")
            print(f"fetched records={len(series)} out={args.out}")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_feed_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--api-key", default=None, help=f"Twelve Data API key. Default: ${API_KEY_ENV}.")
    parser.add_argument("--cache", type=Path, default=None, help="JSON file used as a five-minute response cache.")


def _fetch(symbol: str, args: argparse.Namespace) -> Series:
    api_key = args.api_key or os.environ.get(API_KEY_ENV)
    if not api_key:
        raise RuntimeError(f"--api-key or ${API_KEY_ENV} is required to fetch {symbol}")
    cache = ResponseCache(path=args.cache) if args.cache is not None else None
    series = fetch_daily_series(symbol, api_key=api_key, cache=cache)
    if not series:
        LOGGER.warning("no data for %s; the chart will be empty", symbol)
    return series


if __name__ == "__main__":
    main()
