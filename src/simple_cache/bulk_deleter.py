"""Batched, pipelined deletion of keys matching a pattern."""

import logging
from typing import Iterator, List, Sequence

from simple_cache.exceptions import BulkDeleteError
from simple_cache.key_scanner import DEFAULT_SCAN_COUNT, DEFAULT_SCAN_TIMEOUT_SECONDS, scan_keys
from simple_cache.redis_protocol.error_types import REDIS_ERRORS
from simple_cache.redis_protocol.typing import RedisClient

logger = logging.getLogger(__name__)

DEFAULT_DELETE_BATCH_SIZE = 1000


def chunked(keys: Sequence[str], batch_size: int) -> Iterator[List[str]]:
    """Yield consecutive slices of *keys* holding at most *batch_size* items."""
    for start in range(0, len(keys), batch_size):
        yield list(keys[start : start + batch_size])


async def _execute_batch(redis_client: RedisClient, batch: List[str]) -> list:
    pipe = redis_client.pipeline(transaction=False)
    for key in batch:
        pipe.delete(key)
    return await pipe.execute()


async def delete_matching(
    redis_client: RedisClient,
    pattern: str,
    batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
    *,
    scan_count: int = DEFAULT_SCAN_COUNT,
    scan_timeout: float = DEFAULT_SCAN_TIMEOUT_SECONDS,
) -> bool:
    """
    Delete every key matching *pattern*, one pipeline round-trip per batch.

    Keys are resolved with :func:`scan_keys` first. Each batch of at most
    *batch_size* DEL commands is sent as a single non-transactional pipeline.
    A failing batch stops the run; batches already executed stay deleted.

    Returns:
        True once every batch has executed (also when nothing matched)

    Raises:
        BulkDeleteError: If a pipeline batch fails
        ScanTimeoutError: If resolving the pattern times out
        ProtocolError: If the backend returns a null or malformed cursor while scanning
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    keys = sorted(await scan_keys(redis_client, pattern, scan_count, scan_timeout))
    if not keys:
        logger.debug("No keys match %r; nothing to delete", pattern)
        return True

    total_batches = (len(keys) + batch_size - 1) // batch_size
    deleted = 0
    for completed, batch in enumerate(chunked(keys, batch_size)):
        try:
            results = await _execute_batch(redis_client, batch)
        except REDIS_ERRORS as exc:
            logger.error(
                "Delete batch %d/%d for %r failed after %d keys: %s",
                completed + 1,
                total_batches,
                pattern,
                deleted,
                exc,
            )
            raise BulkDeleteError(
                f"Delete batch {completed + 1}/{total_batches} for {pattern!r} failed: {type(exc).__name__}: {exc}",
                pattern=pattern,
                completed_batches=completed,
                total_batches=total_batches,
            ) from exc
        deleted += sum(1 for result in results if result)

    logger.info("Deleted %d of %d keys matching %r in %d batches", deleted, len(keys), pattern, total_batches)
    return True


__all__ = ["DEFAULT_DELETE_BATCH_SIZE", "chunked", "delete_matching"]
