"""
Reference-data cache.

Services, doctors, nurses, locations and staff service permissions change
rarely during a fair day but are read on nearly every screen. They are kept
in Django's cache framework (Redis in production, LocMem otherwise) behind a
single ``get_or_fetch(key, ttl, loader)`` call.

Within one process, concurrent misses for the same key are collapsed: the
first caller runs the loader, later callers wait for that same result (or
the same exception). Failed loads are never cached.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

_MISSING = object()


class ReferenceDataCache:
    """Keyed TTL cache with single-flight loading."""

    def __init__(self, alias: str = 'default', prefix: str = 'refdata'):
        self.alias = alias
        self.prefix = prefix
        self._lock = threading.Lock()
        self._inflight: dict[str, Future] = {}

    @property
    def backend(self):
        return caches[self.alias]

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get_or_fetch(self, key: str, ttl: int | None, loader: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or load, store and return it.

        ``ttl`` is in seconds; ``None`` uses ``REFERENCE_DATA_CACHE_TTL``.
        """
        if ttl is None:
            ttl = getattr(settings, 'REFERENCE_DATA_CACHE_TTL', 24 * 60 * 60)

        full_key = self._key(key)
        value = self.backend.get(full_key, _MISSING)
        if value is not _MISSING:
            return value

        with self._lock:
            # A load may have finished between the first read and the lock.
            value = self.backend.get(full_key, _MISSING)
            if value is not _MISSING:
                return value
            future = self._inflight.get(full_key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[full_key] = future

        if not leader:
            logger.debug('Waiting for in-flight load of %s', full_key)
            return future.result()

        try:
            value = loader()
        except Exception as exc:
            logger.exception('Loading reference data failed (key=%s)', full_key)
            future.set_exception(exc)
            raise
        else:
            self.backend.set(full_key, value, ttl)
            future.set_result(value)
            return value
        finally:
            with self._lock:
                self._inflight.pop(full_key, None)

    def invalidate(self, key: str) -> None:
        self.backend.delete(self._key(key))

    def invalidate_many(self, keys) -> None:
        self.backend.delete_many([self._key(k) for k in keys])

    def clear(self) -> None:
        """Drop every entry of the cache alias (it only holds reference data)."""
        self.backend.clear()


reference_cache = ReferenceDataCache()


def get_or_fetch(key: str, ttl: int | None, loader: Callable[[], Any]) -> Any:
    """Module-level shortcut for ``reference_cache.get_or_fetch``."""
    return reference_cache.get_or_fetch(key, ttl, loader)
