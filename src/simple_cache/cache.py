"""Index-first convenience surface over a shared ConnectionRegistry."""

from __future__ import annotations

from typing import Any, Optional, Set

from simple_cache.bulk_deleter import DEFAULT_DELETE_BATCH_SIZE, delete_matching
from simple_cache.connection_registry import ConnectionRegistry
from simple_cache.key_scanner import DEFAULT_SCAN_COUNT, DEFAULT_SCAN_TIMEOUT_SECONDS, scan_keys
from simple_cache.redis_protocol.typing import RedisClient

DEFAULT_STORE = "default"


class SimpleCache:
    """Binds a registry to a default store so callers only name the database index."""

    def __init__(self, registry: Optional[ConnectionRegistry] = None, *, default_store: str = DEFAULT_STORE):
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.default_store = default_store

    def _store(self, store: Optional[str]) -> str:
        return store if store else self.default_store

    async def get_instance(self, index: int, store: Optional[str] = None) -> RedisClient:
        return await self.registry.acquire(self._store(store), index)

    async def scan(
        self,
        pattern: str,
        index: int,
        count: int = DEFAULT_SCAN_COUNT,
        timeout: float = DEFAULT_SCAN_TIMEOUT_SECONDS,
        store: Optional[str] = None,
    ) -> Set[str]:
        client = await self.get_instance(index, store)
        return await scan_keys(client, pattern, count, timeout)

    async def delete_matching(
        self,
        pattern: str,
        index: int,
        batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
        store: Optional[str] = None,
        *,
        scan_count: int = DEFAULT_SCAN_COUNT,
        scan_timeout: float = DEFAULT_SCAN_TIMEOUT_SECONDS,
    ) -> bool:
        client = await self.get_instance(index, store)
        return await delete_matching(client, pattern, batch_size, scan_count=scan_count, scan_timeout=scan_timeout)

    def get_config_value(self, dotted_key: str = "", default: Any = None, store: Optional[str] = None) -> Any:
        return self.registry.config_provider.get_config_value(self._store(store), dotted_key, default)

    async def close(self) -> None:
        await self.registry.close_all()


__all__ = ["DEFAULT_STORE", "SimpleCache"]
