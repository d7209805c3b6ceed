"""MemoryCache — process-local implementation of CacheStoreProtocol.

Thread-safe: every per-key operation runs under one lock, so concurrent
request handlers see atomic get/set/remove. Post-eviction callbacks are
collected under the lock and invoked after it is released, so a callback
may safely call back into the cache.

Expiry is lazy: an expired entry is dropped when it is next touched (or on
scan_expired()/compaction). Not shared across processes.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from src.mc_cache.domain.models import (
    CacheEntry,
    CacheEntryOptions,
    CacheItemPriority,
    EvictionReason,
)

logger = logging.getLogger("mc.cache")

# Compaction order: lower rank is evicted first.
_PRIORITY_RANK = {
    CacheItemPriority.LOW: 0,
    CacheItemPriority.NORMAL: 1,
    CacheItemPriority.HIGH: 2,
}

_Eviction = tuple[CacheEntry, EvictionReason]


class MemoryCache:
    """In-memory key/value cache with sliding + absolute expiry.

    size_limit: optional capacity in caller-defined units. When set, every
    entry must declare options.size.
    """

    def __init__(
        self,
        size_limit: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if size_limit is not None and size_limit < 0:
            raise ValueError(f"size_limit must be >= 0, got {size_limit}")
        self._size_limit = size_limit
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._size = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # CacheStoreProtocol
    # ------------------------------------------------------------------

    def try_get(self, key: str) -> tuple[bool, Any]:
        evicted: list[_Eviction] = []
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            if entry.is_expired(now):
                evicted.append((self._detach(key), EvictionReason.EXPIRED))
                found, value = False, None
            else:
                entry.last_accessed = now  # slides the sliding deadline
                found, value = True, entry.value
        self._notify(evicted)
        return found, value

    def set(
        self,
        key: str,
        value: Any,
        options: CacheEntryOptions | None = None,
    ) -> None:
        options = options or CacheEntryOptions()
        if self._size_limit is not None and options.size is None:
            raise ValueError(
                f"Cache has a size limit; entry {key!r} must declare options.size"
            )

        evicted: list[_Eviction] = []
        with self._lock:
            now = self._clock()
            absolute = options.absolute_expiration_relative_to_now
            entry = CacheEntry(
                key=key,
                value=value,
                last_accessed=now,
                sliding_seconds=(
                    options.sliding_expiration.total_seconds()
                    if options.sliding_expiration is not None
                    else None
                ),
                absolute_deadline=(
                    now + absolute.total_seconds() if absolute is not None else None
                ),
                priority=options.priority,
                size=options.size,
                callbacks=list(options.post_eviction_callbacks),
            )

            if key in self._entries:
                evicted.append((self._detach(key), EvictionReason.REPLACED))

            if self._fits(entry, now, evicted):
                self._entries[key] = entry
                self._size += entry.size or 0
            else:
                logger.warning(
                    "Cache entry %s (size=%s) rejected: size limit %s reached",
                    key, entry.size, self._size_limit,
                )
                evicted.append((entry, EvictionReason.CAPACITY))
        self._notify(evicted)

    def remove(self, key: str) -> None:
        evicted: list[_Eviction] = []
        with self._lock:
            if key in self._entries:
                evicted.append((self._detach(key), EvictionReason.REMOVED))
        self._notify(evicted)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def size(self) -> int:
        with self._lock:
            return self._size

    def scan_expired(self) -> int:
        """Drop every expired entry now. Returns how many were removed."""
        with self._lock:
            evicted = self._drop_expired(self._clock())
        self._notify(evicted)
        return len(evicted)

    def compact(self, percentage: float) -> int:
        """Remove at least `percentage` (0..1] of entries, cheapest first.

        Expired entries go first (reason EXPIRED); the remainder is taken by
        priority, then least-recently accessed (reason CAPACITY).
        """
        if not 0 < percentage <= 1:
            raise ValueError(f"percentage must be in (0, 1], got {percentage}")
        with self._lock:
            now = self._clock()
            target = max(1, int(len(self._entries) * percentage))
            evicted = self._drop_expired(now)
            for entry in self._compaction_candidates():
                if len(evicted) >= target:
                    break
                evicted.append((self._detach(entry.key), EvictionReason.CAPACITY))
        self._notify(evicted)
        return len(evicted)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock unless noted)
    # ------------------------------------------------------------------

    def _detach(self, key: str) -> CacheEntry:
        entry = self._entries.pop(key)
        self._size -= entry.size or 0
        return entry

    def _drop_expired(self, now: float) -> list[_Eviction]:
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        return [(self._detach(k), EvictionReason.EXPIRED) for k in expired]

    def _compaction_candidates(self) -> list[CacheEntry]:
        removable = [
            e for e in self._entries.values()
            if e.priority != CacheItemPriority.NEVER_REMOVE
        ]
        removable.sort(key=lambda e: (_PRIORITY_RANK[e.priority], e.last_accessed))
        return removable

    def _fits(self, entry: CacheEntry, now: float, evicted: list[_Eviction]) -> bool:
        """Make room for entry if needed; appends whatever was compacted."""
        if self._size_limit is None:
            return True
        needed = entry.size or 0
        if needed > self._size_limit:
            return False
        if self._size + needed <= self._size_limit:
            return True

        evicted.extend(self._drop_expired(now))
        for victim in self._compaction_candidates():
            if self._size + needed <= self._size_limit:
                break
            evicted.append((self._detach(victim.key), EvictionReason.CAPACITY))
        return self._size + needed <= self._size_limit

    def _notify(self, evicted: list[_Eviction]) -> None:
        """Run post-eviction callbacks. Called WITHOUT the lock held."""
        for entry, reason in evicted:
            for callback in entry.callbacks:
                try:
                    callback(entry.key, entry.value, reason)
                except Exception:
                    logger.exception(
                        "Post-eviction callback failed for cache entry %s (%s)",
                        entry.key, reason.value,
                    )


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------

_memory_cache: MemoryCache | None = None
_memory_cache_lock = threading.Lock()


def get_memory_cache(size_limit: int | None = None) -> MemoryCache:
    """Get or create the shared MemoryCache (size_limit applies on creation only)."""
    global _memory_cache  # noqa: PLW0603
    with _memory_cache_lock:
        if _memory_cache is None:
            _memory_cache = MemoryCache(size_limit=size_limit)
        return _memory_cache


def reset_memory_cache() -> None:
    """Drop the shared MemoryCache; the next get_memory_cache() builds a new one."""
    global _memory_cache  # noqa: PLW0603
    with _memory_cache_lock:
        _memory_cache = None
