"""Domain types for mc_cache — entry options, priority, eviction reasons."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any


class CacheItemPriority(str, Enum):
    """Compaction order under size pressure: LOW goes first, NEVER_REMOVE never."""

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    NEVER_REMOVE = "NEVER_REMOVE"


class EvictionReason(str, Enum):
    REMOVED = "REMOVED"      # explicit remove()
    REPLACED = "REPLACED"    # set() over an existing key
    EXPIRED = "EXPIRED"      # sliding or absolute deadline passed
    CAPACITY = "CAPACITY"    # compacted, or rejected by the size limit


# (key, value, reason)
PostEvictionCallback = Callable[[str, Any, EvictionReason], None]


def _require_positive(name: str, value: timedelta) -> None:
    if value <= timedelta(0):
        raise ValueError(f"{name} must be positive, got {value}")


@dataclass
class CacheEntryOptions:
    """Per-entry expiry, priority and size.

    Both deadlines are independent: sliding resets on every hit, absolute is
    fixed at insertion. Whichever passes first expires the entry.
    """

    sliding_expiration: timedelta | None = None
    absolute_expiration_relative_to_now: timedelta | None = None
    priority: CacheItemPriority = CacheItemPriority.NORMAL
    size: int | None = None
    post_eviction_callbacks: list[PostEvictionCallback] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.sliding_expiration is not None:
            _require_positive("sliding_expiration", self.sliding_expiration)
        if self.absolute_expiration_relative_to_now is not None:
            _require_positive(
                "absolute_expiration_relative_to_now",
                self.absolute_expiration_relative_to_now,
            )
        if self.size is not None and self.size < 0:
            raise ValueError(f"size must be >= 0, got {self.size}")

    def set_sliding_expiration(self, value: timedelta) -> "CacheEntryOptions":
        _require_positive("sliding_expiration", value)
        self.sliding_expiration = value
        return self

    def set_absolute_expiration(self, value: timedelta) -> "CacheEntryOptions":
        _require_positive("absolute_expiration_relative_to_now", value)
        self.absolute_expiration_relative_to_now = value
        return self

    def set_priority(self, value: CacheItemPriority) -> "CacheEntryOptions":
        self.priority = value
        return self

    def set_size(self, value: int) -> "CacheEntryOptions":
        if value < 0:
            raise ValueError(f"size must be >= 0, got {value}")
        self.size = value
        return self

    def register_post_eviction_callback(
        self, callback: PostEvictionCallback
    ) -> "CacheEntryOptions":
        self.post_eviction_callbacks.append(callback)
        return self


@dataclass
class CacheEntry:
    """Stored entry. Deadlines are clock readings in seconds (monotonic)."""

    key: str
    value: Any
    last_accessed: float
    sliding_seconds: float | None
    absolute_deadline: float | None
    priority: CacheItemPriority
    size: int | None
    callbacks: list[PostEvictionCallback]

    def is_expired(self, now: float) -> bool:
        if self.absolute_deadline is not None and now >= self.absolute_deadline:
            return True
        if self.sliding_seconds is not None:
            return now - self.last_accessed >= self.sliding_seconds
        return False
