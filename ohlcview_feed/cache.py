from __future__ import annotations

import json
import logging
from pathlib import Path
import time
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)

DEFAULT_TTL_S = 300.0


def cache_key(symbol: str) -> str:
    return f"stockData_{symbol}"


class ResponseCache:
    """Time-expiring key/value cache for fetched series payloads.

    Entries are stored with the time they were written and are dropped on read
    once older than `ttl_s`. With a `path` the cache is mirrored to a JSON file
    so it survives between CLI runs; values must be JSON-serializable.
    """

    def __init__(
        self,
        ttl_s: float = DEFAULT_TTL_S,
        path: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be > 0")
        self.ttl_s = float(ttl_s)
        self._path = Path(path) if path is not None else None
        self._clock = clock
        self._entries: dict[str, dict[str, Any]] = self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - float(entry["stored_at"]) >= self.ttl_s:
            del self._entries[key]
            self._save()
            return None
        return entry["value"]

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = {"stored_at": float(self._clock()), "value": value}
        self._save()

    def invalidate(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._save()

    def clear(self) -> None:
        self._entries.clear()
        self._save()

    def _load(self) -> dict[str, dict[str, Any]]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("ignoring unreadable cache file %s: %s", self._path, exc)
            return {}
        if not isinstance(raw, dict):
            LOGGER.warning("ignoring cache file %s: expected an object", self._path)
            return {}
        entries = {}
        for key, entry in raw.items():
            if isinstance(entry, dict) and "stored_at" in entry and "value" in entry:
                entries[str(key)] = entry
        return entries

    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._entries, indent=2, sort_keys=True), encoding="utf-8")
