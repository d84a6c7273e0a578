"""Per-(store, index) connection lifecycle management."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional, Tuple, Union

from simple_cache.config.provider import ConfigProvider, ConnectionParameters
from simple_cache.connection_registry_helpers import ConnectionEntry, ConnectionKey, EntryState
from simple_cache.exceptions import CacheConnectionError
from simple_cache.redis_protocol.client_factory import open_client
from simple_cache.redis_protocol.error_types import REDIS_ERRORS
from simple_cache.redis_protocol.typing import RedisClient, ensure_awaitable

logger = logging.getLogger(__name__)

# Seconds a verified connection is reused before the next PING.
HEALTH_CHECK_INTERVAL_SECONDS = 5.0

ClientFactory = Callable[[ConnectionParameters, int], Awaitable[RedisClient]]


class ConnectionRegistry:
    """
    Owns one live client per (store, index) pair.

    Clients are created on first use and re-verified with a PING once they are
    older than the freshness window. A failed probe replaces the client; if the
    replacement cannot be opened the key is left absent and
    :class:`CacheConnectionError` propagates. Creation and reconnection are
    serialized per key, so concurrent callers for the same key share one
    connection attempt while callers for other keys proceed independently.
    """

    def __init__(
        self,
        config_provider: Optional[ConfigProvider] = None,
        *,
        client_factory: Optional[ClientFactory] = None,
        clock: Callable[[], float] = time.monotonic,
        freshness_window: float = HEALTH_CHECK_INTERVAL_SECONDS,
    ):
        self.config_provider = config_provider if config_provider is not None else ConfigProvider()
        self._client_factory = client_factory or open_client
        self._clock = clock
        self._freshness_window = freshness_window
        self._entries: Dict[ConnectionKey, ConnectionEntry] = {}
        self._locks: Dict[ConnectionKey, asyncio.Lock] = {}
        # Bumped by close_all; work that started under an older value must not register.
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Union[ConnectionKey, Tuple[str, int]]) -> bool:
        if not isinstance(key, ConnectionKey):
            key = ConnectionKey(*key)
        return key in self._entries

    def _lock_for(self, key: ConnectionKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def acquire(self, store: str, index: int) -> RedisClient:
        """
        Return the live client for *store* database *index*.

        Raises:
            CacheConnectionError: If the backend cannot be reached, authenticated
                or the database selected
            ConfigurationError: If the store has no usable configuration
        """
        key = ConnectionKey(store, index)

        entry = self._entries.get(key)
        if entry is not None and entry.state(self._clock(), self._freshness_window) is EntryState.FRESH:
            return entry.client

        async with self._lock_for(key):
            generation = self._generation
            entry = self._entries.get(key)
            if entry is None:
                entry = await self._create(key, generation)
                return entry.client

            # Another caller may have verified the entry while we waited.
            if entry.state(self._clock(), self._freshness_window) is EntryState.FRESH:
                return entry.client

            healthy = await self._probe(key, entry)
            self._ensure_open(key, generation)
            if healthy:
                entry.mark_checked(self._clock())
                return entry.client

            entry = await self._reconnect(key, entry, generation)
            return entry.client

    def _ensure_open(self, key: ConnectionKey, generation: int) -> None:
        if generation != self._generation:
            raise CacheConnectionError(
                f"Registry was closed while connection {key} was in use",
                store=key.store,
                index=key.index,
            )

    async def _create(self, key: ConnectionKey, generation: int) -> ConnectionEntry:
        parameters = self.config_provider.resolve(key.store)
        try:
            client = await self._client_factory(parameters, key.index)
        except CacheConnectionError:  # An OSError subclass; keep it unwrapped
            raise
        except REDIS_ERRORS as exc:
            logger.error("Failed to open connection %s (%s:%s): %s", key, parameters.host, parameters.port, exc)
            raise CacheConnectionError(
                f"Connection {key} to {parameters.host}:{parameters.port} failed: {type(exc).__name__}: {exc}",
                store=key.store,
                index=key.index,
            ) from exc

        if generation != self._generation:
            await self._close_client(key, client)
            self._ensure_open(key, generation)

        entry = ConnectionEntry(client=client, last_checked_at=self._clock())
        self._entries[key] = entry
        logger.info("Opened connection %s to %s:%s", key, parameters.host, parameters.port)
        return entry

    async def _probe(self, key: ConnectionKey, entry: ConnectionEntry) -> bool:
        try:
            reply = await ensure_awaitable(entry.client.ping())
        except REDIS_ERRORS as exc:  # Probe failure triggers reconnect  # policy_guard: allow-silent-handler
            logger.warning("Liveness probe failed for %s: %s: %s", key, type(exc).__name__, exc)
            return False
        if not reply:
            logger.warning("Liveness probe for %s returned %r", key, reply)
            return False
        return True

    async def _reconnect(self, key: ConnectionKey, stale: ConnectionEntry, generation: int) -> ConnectionEntry:
        logger.info("Connection %s is %s; replacing it", key, EntryState.RECREATING.value)
        self._entries.pop(key, None)
        await self._close_client(key, stale.client)
        try:
            return await self._create(key, generation)
        except Exception:
            self._entries.pop(key, None)
            logger.error("Reconnect failed for %s; entry removed", key)
            raise

    async def _close_client(self, key: ConnectionKey, client: RedisClient) -> None:
        try:
            await ensure_awaitable(client.aclose())
        except REDIS_ERRORS:  # Expected exception in operation  # policy_guard: allow-silent-handler
            logger.warning("Error closing connection %s", key)

    async def remove(self, store: str, index: int) -> bool:
        """Close and forget the connection for (store, index); return whether one existed."""
        key = ConnectionKey(store, index)
        async with self._lock_for(key):
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            await self._close_client(key, entry.client)
            return True

    async def close_all(self) -> None:
        """
        Close every registered connection and empty the registry.

        Connections still being opened or probed when this runs are closed by
        their own acquire call, which then raises :class:`CacheConnectionError`.
        """
        self._generation += 1
        entries = list(self._entries.items())
        self._entries.clear()
        for key, entry in entries:
            await self._close_client(key, entry.client)
        if entries:
            logger.info("Closed %d cache connections", len(entries))


__all__ = ["ClientFactory", "ConnectionRegistry", "HEALTH_CHECK_INTERVAL_SECONDS"]
