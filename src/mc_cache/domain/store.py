# src/mc_cache/domain/store.py
"""Collaborator Protocols — dependency inversion for testability.

Unit tests inject fakes that conform to these Protocols.
Infrastructure provides MemoryCache and SqlProductStore.
"""

from typing import Any, Protocol, TypeVar

from src.mc_cache.domain.models import CacheEntryOptions

T = TypeVar("T")
D = TypeVar("D")


class CacheStoreProtocol(Protocol):
    def try_get(self, key: str) -> tuple[bool, Any]: ...

    def set(
        self,
        key: str,
        value: Any,
        options: CacheEntryOptions | None = None,
    ) -> None: ...

    def remove(self, key: str) -> None: ...


class BackingStoreProtocol(Protocol[T, D]):
    async def list_all(self) -> list[T]: ...

    async def insert(self, draft: D) -> T: ...
