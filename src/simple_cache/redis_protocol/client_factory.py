"""
Dedicated client construction for one (store, index) pair.

Why: The registry keeps exactly one live connection per key, so each client
owns a single socket instead of borrowing from a shared pool.
How: Builds a ``redis.asyncio.Redis`` from resolved parameters and pings it so
connect, AUTH and SELECT all happen before the client is handed out.
"""

import logging
from typing import Any, Dict

import redis.asyncio
from redis.asyncio.retry import Retry as AsyncRetry
from redis.backoff import ConstantBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..config.provider import ConnectionParameters
from .error_types import REDIS_ERRORS
from .typing import RedisClient, ensure_awaitable

logger = logging.getLogger(__name__)

# One transport-level retry after ``retry_interval``; the registry never loops beyond that.
TRANSPORT_RETRIES = 1


def build_client_settings(parameters: ConnectionParameters, index: int) -> Dict[str, Any]:
    """Translate connection parameters into ``redis.asyncio.Redis`` keyword arguments."""
    settings: Dict[str, Any] = {
        "host": parameters.host,
        "port": parameters.port,
        "db": index,
        "socket_connect_timeout": parameters.connect_timeout,
        "socket_timeout": parameters.socket_timeout,
        "retry": AsyncRetry(
            backoff=ConstantBackoff(parameters.retry_interval),
            retries=TRANSPORT_RETRIES,
            supported_errors=(RedisConnectionError, RedisTimeoutError),
        ),
        "single_connection_client": True,
        "decode_responses": True,
        "encoding": "utf-8",
    }
    if parameters.password:
        settings["password"] = parameters.password
    return settings


async def open_client(parameters: ConnectionParameters, index: int) -> RedisClient:
    """
    Open and verify a dedicated client for database *index*.

    The client is closed again if verification fails, so callers never see a
    half-initialized connection.
    """
    client = redis.asyncio.Redis(**build_client_settings(parameters, index))
    try:
        await ensure_awaitable(client.ping())
    except BaseException:
        await _close_quietly(client)
        raise
    logger.debug("Opened client for %s:%s/%s", parameters.host, parameters.port, index)
    return client


async def _close_quietly(client: RedisClient) -> None:
    try:
        await client.aclose()
    except REDIS_ERRORS as exc:  # Best-effort cleanup after a failed open  # policy_guard: allow-silent-handler
        logger.debug("Ignoring close error on unverified client: %s", exc)


__all__ = ["TRANSPORT_RETRIES", "build_client_settings", "open_client"]
