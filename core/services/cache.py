"""
In-memory cache service.

A small TTL key/value store used by the admin panel, mainly to remember
tokens revoked by passport logout until they would have expired anyway.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

_MISSING = object()


class CacheService:
    """
    Thread-safe TTL cache.

    Expired entries are dropped lazily on read, by a periodic sweep on write
    and by ``purge_expired()``.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        cleanup_interval: float = 300,
    ) -> None:
        self._clock = clock or time.time
        self._items: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = self._clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Seconds to keep the value; None keeps it until forgotten.
        """
        now = self._clock()
        expires_at = None if ttl is None else now + ttl
        with self._lock:
            self._cleanup_old_entries(now)
            self._items[key] = (value, expires_at)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            item = self._items.get(key, _MISSING)
            if item is _MISSING:
                return default
            value, expires_at = item
            if expires_at is not None and expires_at <= self._clock():
                del self._items[key]
                return default
            return value

    def has(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def forget(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def purge_expired(self) -> int:
        """Drop all expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            self._last_cleanup = now
            return self._remove_expired(now)

    def _cleanup_old_entries(self, now: float) -> None:
        """Sweep expired entries at most once per cleanup interval. Caller holds the lock."""
        if now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        self._remove_expired(now)

    def _remove_expired(self, now: float) -> int:
        expired = [
            key for key, (_, expires_at) in self._items.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._items[key]
        return len(expired)
