from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from ohlcview_plot.records import Series, normalize_series

from .cache import ResponseCache, cache_key

LOGGER = logging.getLogger(__name__)

BASE_URL = "https://api.twelvedata.com"
DEFAULT_OUTPUTSIZE = 30
DEFAULT_TIMEOUT_S = 10.0


class FeedError(RuntimeError):
    """Raised when the time-series endpoint cannot produce usable data."""


def api_request(path: str, params: dict[str, Any], *, timeout: float = DEFAULT_TIMEOUT_S) -> Any:
    url = f"{BASE_URL}{path}?{urllib.parse.urlencode(params)}"
    headers = {"User-Agent": "ohlcview-feed/0.1", "Accept": "application/json"}
    req = urllib.request.Request(url=url, headers=headers, method="GET")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8")
            return json.loads(body) if body else None
    except urllib.error.HTTPError as exc:
        err = exc.read().decode("utf-8", errors="ignore")
        raise FeedError(f"Twelve Data error {exc.code} on GET {path}: {err}") from exc


def parse_time_series(payload: Any, *, limit: int = DEFAULT_OUTPUTSIZE) -> Series:
    """Map a `time_series` response to records, oldest first.

    The endpoint lists the newest bar first; only the `limit` most recent are kept.
    """
    if not isinstance(payload, dict):
        raise FeedError("time series response must be a JSON object")
    if payload.get("status") == "error":
        raise FeedError(f"Twelve Data error {payload.get('code')}: {payload.get('message', '')}")
    values = payload.get("values")
    if not isinstance(values, list):
        raise FeedError("time series response has no 'values' list")
    rows = []
    for item in values[:limit]:
        if not isinstance(item, dict):
            raise FeedError("time series value must be an object")
        rows.append(
            {
                "date": item.get("datetime"),
                "open": _price(item.get("open")),
                "high": _price(item.get("high")),
                "low": _price(item.get("low")),
                "close": _price(item.get("close")),
            }
        )
    rows.reverse()
    return normalize_series(rows)


def fetch_daily_series(
    symbol: str,
    *,
    api_key: str,
    outputsize: int = DEFAULT_OUTPUTSIZE,
    cache: ResponseCache | None = None,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Series:
    """Fetch daily bars for `symbol`; any failure is logged and yields ()."""
    symbol = symbol.strip().upper()
    if not symbol:
        raise ValueError("symbol must be non-empty")
    if outputsize <= 0:
        raise ValueError("outputsize must be > 0")

    key = cache_key(symbol)
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            LOGGER.debug("serving %s from cache", symbol)
            try:
                return normalize_series(cached)
            except ValueError as exc:
                LOGGER.warning("dropping malformed cache entry for %s: %s", symbol, exc)
                cache.invalidate(key)

    params = {"symbol": symbol, "interval": "1day", "outputsize": outputsize, "apikey": api_key}
    try:
        series = parse_time_series(api_request("/time_series", params, timeout=timeout), limit=outputsize)
    except (FeedError, OSError, ValueError, http.client.HTTPException) as exc:
        LOGGER.warning("fetching %s failed: %s", symbol, exc)
        return ()

    if cache is not None and series:
        cache.set(key, [record.as_dict() for record in series])
    return series


def _price(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise FeedError(f"price is not numeric: {value!r}") from None
    return value
