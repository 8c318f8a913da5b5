"""
Response cache for public routes.
Keyed by request path + query string, no TTL: entries live until a write
invalidates their prefix.
"""

import threading
from typing import Any, Dict, Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)

PUBLIC_MENUS_PREFIX = "/api/public/menus/"
PUBLIC_RESTAURANTS_PREFIX = "/api/public/restaurants/"


class CacheBackend(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def invalidate_prefix(self, prefix: str) -> int:
        ...

    def clear(self) -> None:
        ...


class InMemoryCache:
    """Process-local cache. A shared backend is needed once there is more than one worker."""

    def __init__(self):
        self._entries: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            stale = [key for key in self._entries if key.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info("Cache entries cleared", prefix=prefix, count=len(stale))
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_cache = InMemoryCache()


def get_cache() -> CacheBackend:
    return _cache


def invalidate_public_routes(cache: CacheBackend) -> None:
    """Drop cached public menu and restaurant responses after a write."""
    cache.invalidate_prefix(PUBLIC_MENUS_PREFIX)
    cache.invalidate_prefix(PUBLIC_RESTAURANTS_PREFIX)
