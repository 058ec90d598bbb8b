"""
Keyed Cache — Record Cache

Concrete cache that stores cacheable objects as JSON strings, composing a
CacheFacade for key and value derivation.

- One Redis string per object, under its derived key
- Per-item TTL in milliseconds (None -> facade default, 0 -> no expiry)
- Store failures are logged and reported as False/None; metadata errors
  (an object without a key value) propagate to the caller

Example:
    cache = RecordCache(CacheFacade(provider, CacheOptions(domain="Shop")))
    await cache.save(order)
    same = await cache.fetch(Order, "42")
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .errors import SerializationError
from .facade import CacheFacadeProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordCache:
    """
    Redis string cache for cacheable objects.

    Notes:
    - Keys carry the facade domain and the type's collection name.
    - Values are stored as UTF-8 JSON strings.
    - TTL is applied via Redis PX milliseconds.
    """

    def __init__(self, facade: CacheFacadeProtocol) -> None:
        self.facade = facade
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

    def _ttl_ms(self, ttl_ms: int | None) -> int | None:
        """
        Normalize TTL:
        - None -> facade default expiration
        - 0 or negative -> no expiry (return None)
        - positive -> provided ttl
        """
        if ttl_ms is None:
            ttl_ms = self.facade.expiration
        ttl_ms = int(ttl_ms)
        return ttl_ms if ttl_ms > 0 else None

    async def save(self, obj: Any, ttl_ms: int | None = None) -> bool:
        """
        Store ``obj`` under its derived key.

        Raises:
            ConfigurationError: If ``obj`` has no key value
            SerializationError: If ``obj`` cannot be serialized
        """
        item = self.facade.get_key_value_pair(obj)
        try:
            res = await self.facade.database.set(name=item.key, value=item.value, px=self._ttl_ms(ttl_ms))
            success = bool(res)
            if success:
                self._sets += 1
            return success
        except Exception as e:
            logger.error(
                "Failed to set key '%s' in Redis: %s",
                item.key,
                e,
                extra={"key": item.key, "ttl_ms": ttl_ms, "error": str(e)},
                exc_info=True,
            )
            return False

    async def fetch(self, cls: type[T], id: str) -> T | None:
        """Load the object ``id`` of type ``cls``, or None when absent or unreadable."""
        key = self.facade.item_key_for(cls, id)
        try:
            data = await self.facade.database.get(key)
        except Exception as e:
            logger.error(
                "Failed to get key '%s' from Redis: %s",
                key,
                e,
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            self._misses += 1
            return None

        if data is None:
            self._misses += 1
            return None

        try:
            value = self.facade.load_value(cls, data)
        except SerializationError as e:
            logger.warning(
                "Failed to decode cached value for key '%s': %s",
                key,
                e,
                extra={"key": key, "error": str(e)},
            )
            self._misses += 1
            return None

        self._hits += 1
        return value

    async def exists(self, cls: type, id: str) -> bool:
        """Check whether the object ``id`` of type ``cls`` is cached."""
        key = self.facade.item_key_for(cls, id)
        try:
            return bool(await self.facade.database.exists(key))
        except Exception as e:
            logger.error(
                "Failed to check existence of key '%s' in Redis: %s",
                key,
                e,
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return False

    async def remove(self, cls: type, id: str) -> bool:
        """Delete the object ``id`` of type ``cls``. True if it existed."""
        key = self.facade.item_key_for(cls, id)
        try:
            deleted = await self.facade.database.delete(key)
            if deleted:
                self._deletes += 1
            return bool(deleted)
        except Exception as e:
            logger.error(
                "Failed to delete key '%s' from Redis: %s",
                key,
                e,
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return False

    async def discard(self, obj: Any) -> bool:
        """Delete the cached copy of ``obj``, keyed by its own key fields."""
        key = self.facade.item_key(obj)
        try:
            deleted = await self.facade.database.delete(key)
            if deleted:
                self._deletes += 1
            return bool(deleted)
        except Exception as e:
            logger.error(
                "Failed to delete key '%s' from Redis: %s",
                key,
                e,
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            return False

    def get_stats(self) -> dict[str, Any]:
        """Return hit/miss counters of this cache."""
        total_requests = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round((self._hits / total_requests) * 100, 2) if total_requests else 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
        }
