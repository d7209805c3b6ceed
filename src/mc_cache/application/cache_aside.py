"""CacheAsideReader — whole-collection read-through cache with write invalidation.

One fixed key holds the full collection snapshot:

    get_all(): cache hit → return cached list
               miss      → store.list_all() → cache.set(key, ...) → return
    add():     store.insert() → cache.remove(key)
    clear():   cache.remove(key)

Cache faults on the read path degrade to a store read. No single-flight:
two concurrent misses may both hit the store; the last set() wins.
"""

import logging
from datetime import timedelta
from typing import Any, Generic, TypeVar

from src.mc_cache.domain.models import (
    CacheEntryOptions,
    CacheItemPriority,
    EvictionReason,
)
from src.mc_cache.domain.store import BackingStoreProtocol, CacheStoreProtocol

logger = logging.getLogger("mc.cache")

T = TypeVar("T")
D = TypeVar("D")

DEFAULT_CACHE_KEY = "ProductsCache"
DEFAULT_SLIDING_EXPIRATION = timedelta(minutes=30)
DEFAULT_ABSOLUTE_EXPIRATION = timedelta(minutes=60)


class CacheAsideReader(Generic[T, D]):
    """Caches store.list_all() under a single key.

    T is the stored record type, D the draft accepted by store.insert().
    """

    def __init__(
        self,
        store: BackingStoreProtocol[T, D],
        cache: CacheStoreProtocol,
        *,
        cache_key: str = DEFAULT_CACHE_KEY,
        sliding_expiration: timedelta = DEFAULT_SLIDING_EXPIRATION,
        absolute_expiration: timedelta = DEFAULT_ABSOLUTE_EXPIRATION,
        priority: CacheItemPriority = CacheItemPriority.NORMAL,
        size: int | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._cache_key = cache_key
        self._sliding_expiration = sliding_expiration
        self._absolute_expiration = absolute_expiration
        self._priority = priority
        self._size = size

    @property
    def cache_key(self) -> str:
        return self._cache_key

    async def get_all(self) -> list[T]:
        try:
            found, cached = self._cache.try_get(self._cache_key)
        except Exception:
            logger.exception("Cache lookup failed for %s; reading from store", self._cache_key)
            found, cached = False, None

        if found:
            logger.info("Retrieved %s from cache", self._cache_key)
            return cached  # type: ignore[no-any-return]

        # Store errors propagate; nothing is cached on failure.
        records = await self._store.list_all()
        logger.info("Retrieved %d records for %s from store", len(records), self._cache_key)

        try:
            self._cache.set(self._cache_key, records, self._entry_options())
        except Exception:
            logger.exception("Cache populate failed for %s; serving uncached", self._cache_key)
        return records

    async def add(self, draft: D) -> T:
        record = await self._store.insert(draft)
        # Only after a durable write. If remove raises, the record IS already
        # committed; the error still propagates, because a skipped
        # invalidation would let the next get_all() miss the new record.
        self._cache.remove(self._cache_key)
        logger.info("Added new record and invalidated %s", self._cache_key)
        return record

    def clear(self) -> None:
        self._cache.remove(self._cache_key)
        logger.info("Manually cleared %s", self._cache_key)

    def _entry_options(self) -> CacheEntryOptions:
        options = (
            CacheEntryOptions()
            .set_sliding_expiration(self._sliding_expiration)
            .set_absolute_expiration(self._absolute_expiration)
            .set_priority(self._priority)
            .register_post_eviction_callback(_log_eviction)
        )
        if self._size is not None:
            options.set_size(self._size)
        return options


def _log_eviction(key: str, value: Any, reason: EvictionReason) -> None:
    logger.info("Cache entry %s was evicted due to %s", key, reason.value)
