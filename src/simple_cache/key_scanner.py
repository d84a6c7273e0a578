"""Pattern-based key enumeration over SCAN cursors."""

import logging
import time
from typing import Callable, Set

from simple_cache.exceptions import ProtocolError, ScanTimeoutError
from simple_cache.redis_protocol.typing import RedisClient, ScanCursor, ensure_awaitable

logger = logging.getLogger(__name__)

DEFAULT_SCAN_COUNT = 5000
DEFAULT_SCAN_TIMEOUT_SECONDS = 30.0

_END_CURSORS = (0, "0", b"0")


def is_end_cursor(cursor: ScanCursor) -> bool:
    """Return True for the zero cursor in any of its wire encodings."""
    return cursor is not None and cursor in _END_CURSORS


def _parse_cursor(raw: ScanCursor, pattern: str, calls: int) -> int:
    """Return *raw* as a non-negative int, raising ProtocolError for null or malformed cursors."""
    if raw is None:
        raise ProtocolError(f"SCAN for {pattern!r} returned a null cursor on call {calls}", pattern=pattern)
    if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
        return raw

    text = ""
    if isinstance(raw, bytes):
        text = raw.decode("ascii", errors="replace")
    elif isinstance(raw, str):
        text = raw
    if text.isascii() and text.isdigit():
        return int(text)

    raise ProtocolError(
        f"SCAN for {pattern!r} returned a malformed cursor on call {calls}: {raw!r}",
        pattern=pattern,
        cursor=raw,
    )


async def scan_keys(
    redis_client: RedisClient,
    pattern: str,
    count: int = DEFAULT_SCAN_COUNT,
    timeout: float = DEFAULT_SCAN_TIMEOUT_SECONDS,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> Set[str]:
    """
    Collect every key matching *pattern*.

    *count* is the SCAN COUNT hint: larger values mean fewer round-trips but a
    longer block per call. 5000-10000 suits most workloads; go towards the top
    of that range when few clients share the server.

    The elapsed time is checked before each SCAN call, so a single slow call can
    overrun *timeout* by its own duration. Keys may repeat across batches when
    the keyspace changes mid-scan; the returned set absorbs those repeats but
    makes no snapshot guarantee.

    Raises:
        ScanTimeoutError: If *timeout* seconds elapse before the cursor returns to zero
        ProtocolError: If the backend returns a null or malformed cursor, or a reply
            that is not a (cursor, keys) pair
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    if timeout < 0:
        raise ValueError(f"timeout must be non-negative, got {timeout}")

    found: Set[str] = set()
    cursor: ScanCursor = 0
    calls = 0
    started = clock()

    while True:
        elapsed = clock() - started
        if elapsed > timeout:
            raise ScanTimeoutError(
                f"SCAN for {pattern!r} exceeded {timeout}s after {calls} calls",
                pattern=pattern,
                timeout=timeout,
                keys_found=len(found),
            )

        reply = await ensure_awaitable(redis_client.scan(cursor, match=pattern, count=count))
        calls += 1
        try:
            raw_cursor, keys = reply
        except (TypeError, ValueError) as exc:
            raise ProtocolError(
                f"SCAN for {pattern!r} returned a malformed reply on call {calls}: {reply!r}",
                pattern=pattern,
            ) from exc
        cursor = _parse_cursor(raw_cursor, pattern, calls)

        for key in keys or ():
            found.add(key.decode("utf-8") if isinstance(key, bytes) else key)
        logger.debug("SCAN %r call %d: %d keys so far, next cursor %r", pattern, calls, len(found), cursor)

        if is_end_cursor(cursor):
            return found


__all__ = ["DEFAULT_SCAN_COUNT", "DEFAULT_SCAN_TIMEOUT_SECONDS", "is_end_cursor", "scan_keys"]
