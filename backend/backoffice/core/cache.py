# backend/backoffice/core/cache.py
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()


class QueryCache:
    """
    Small in-process cache for computed read models, keyed by request signature.

    One instance lives on ``app.state.cache``; routes reach it through
    ``api.deps.get_cache``. Writers call ``invalidate``/``invalidate_prefix``
    for the keys their mutation affects. ``ttl_seconds=0`` disables storage.
    """

    def __init__(self, ttl_seconds: int = 30, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: str, default: Any = None) -> Any:
        if not self.enabled:
            return default
        with self._lock:
            entry = self._items.get(key, _MISSING)
            if entry is _MISSING:
                return default
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._items[key]
                return default
            return value

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._items[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, _MISSING) is not _MISSING

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._items if k.startswith(prefix)]
            for k in doomed:
                del self._items[k]
        if doomed:
            logger.debug("cache: dropped %d key(s) under %r", len(doomed), prefix)
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING


def make_key(namespace: str, *parts: Optional[Any]) -> str:
    return ":".join([namespace] + ["" if p is None else str(p) for p in parts])
