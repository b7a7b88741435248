from __future__ import annotations

import time
from threading import Lock
from typing import Iterable

from ..core.ports.cache_port import CachePort


class MemoryCacheAdapter(CachePort):
    """Process-local cache living for one run; safe to share between worker threads."""

    def __init__(self, default_ttl_seconds: int = 0) -> None:
        self._entries: dict[str, tuple[bytes, float | None]] = {}
        self._lock = Lock()
        self._default_ttl = default_ttl_seconds

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl
        expires_at = time.monotonic() + ttl if ttl > 0 else None
        with self._lock:
            self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def iter_keys(self, prefix: str) -> Iterable[str]:
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
        return iter(keys)

    def clear(self, prefix: str | None = None) -> None:
        with self._lock:
            if prefix is None:
                self._entries.clear()
            else:
                for key in [k for k in self._entries if k.startswith(prefix)]:
                    del self._entries[key]

    def close(self) -> None:
        self.clear()

    def __enter__(self) -> MemoryCacheAdapter:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
