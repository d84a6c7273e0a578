from __future__ import annotations

"""
Typing helpers for redis.asyncio usage.

redis-py annotates commands with a sync/async union, so awaiting them confuses
static checkers. ``ensure_awaitable`` narrows the result without changing
runtime behaviour.
"""


from typing import TYPE_CHECKING, Awaitable, Optional, TypeVar, Union, cast

from redis import asyncio as redis_asyncio

if TYPE_CHECKING:
    from redis.asyncio import Redis as RedisClient
else:  # pragma: no cover - runtime alias for typing-only import
    RedisClient = redis_asyncio.Redis

T = TypeVar("T")

# SCAN cursors arrive as ints from redis-py, but raw replies may carry str or bytes.
ScanCursor = Optional[Union[int, str, bytes]]


def ensure_awaitable(result: "Awaitable[T] | T") -> Awaitable[T]:
    """Treat a redis.asyncio command result as the awaitable it is at runtime."""

    return cast(Awaitable[T], result)


__all__ = ["RedisClient", "ScanCursor", "ensure_awaitable"]
