"""Key/value cache with per-entry expiry and a payload size ceiling."""

from __future__ import annotations

import json
import threading
import time
from datetime import date, datetime
from typing import Any, Callable, Protocol

import numpy as np

from core.logging_setup import get_logger

__all__ = ["CacheBackend", "MemoryCache", "NullCache", "dumps", "put_if_small", "get_json"]

_logger = get_logger("kasflow.cache")


class CacheBackend(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, ttl_seconds: int) -> None: ...


class MemoryCache:
    """Process-local cache; expired entries read as missing."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> str | None:
        return None

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        return None


def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def put_if_small(cache: CacheBackend, key: str, value: Any, ttl_seconds: int, *, max_payload: int = 95_000) -> bool:
    """Store ``value`` as JSON unless the payload exceeds ``max_payload`` characters.

    Returns whether the entry was written. Cache failures are logged, never raised.
    """

    try:
        payload = value if isinstance(value, str) else dumps(value)
        if len(payload) > max_payload:
            _logger.info("Skipping cache for %s: %d chars exceeds %d", key, len(payload), max_payload)
            return False
        cache.put(key, payload, ttl_seconds)
        return True
    except Exception as exc:  # noqa: BLE001 - a cache write must not fail the caller
        _logger.warning("Cache write failed for %s: %s", key, exc)
        return False


def get_json(cache: CacheBackend, key: str) -> Any | None:
    """Return the decoded entry, or ``None`` when absent or unreadable."""

    try:
        raw = cache.get(key)
        return json.loads(raw) if raw is not None else None
    except Exception as exc:  # noqa: BLE001
        _logger.warning("Cache read failed for %s: %s", key, exc)
        return None
