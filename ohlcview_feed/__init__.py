"""Daily OHLC series from the Twelve Data REST API."""

from .cache import DEFAULT_TTL_S, ResponseCache, cache_key
from .twelvedata import FeedError, fetch_daily_series, parse_time_series

__all__ = [
    "DEFAULT_TTL_S",
    "FeedError",
    "ResponseCache",
    "cache_key",
    "fetch_daily_series",
    "parse_time_series",
]
