"""Exception hierarchy for simple_cache.

Every error raised to callers derives from :class:`SimpleCacheError`.

Exception classes support two patterns:
1. No-argument raise: raise ProtocolError()
2. Contextual attributes: err = CacheConnectionError(store="default", index=3); raise err
"""

from typing import Any


class SimpleCacheError(Exception):
    """Base exception for all simple_cache errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    default_message = "simple_cache error occurred"

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.default_message
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ConfigurationError(SimpleCacheError):
    """Configuration source is missing, unreadable, or lacks the requested store."""

    default_message = "Configuration is invalid or missing"

    @classmethod
    def store_missing(cls, store: str, source: object) -> "ConfigurationError":
        """Create error for a store that the config source does not define."""
        return cls(f"Store {store!r} is not defined in {source}", store=store)

    @classmethod
    def invalid_field(cls, store: str, field: str, expected: str, received: object) -> "ConfigurationError":
        """Create error for a malformed store field."""
        return cls(
            f"Store {store!r}: {field!r} must be {expected} (received {received!r})",
            store=store,
            field=field,
        )


class CacheConnectionError(SimpleCacheError, ConnectionError):
    """Backend could not be reached, authenticated, or the namespace selected."""

    default_message = "Cache backend connection failed"


class ScanTimeoutError(SimpleCacheError, TimeoutError):
    """Cumulative SCAN duration exceeded the caller's budget."""

    default_message = "Key scan timed out"


class ProtocolError(SimpleCacheError):
    """Backend returned a malformed SCAN cursor."""

    default_message = "Backend returned an invalid SCAN cursor"


class BulkDeleteError(SimpleCacheError):
    """A pipelined delete batch failed; later batches were not attempted."""

    default_message = "Pipelined delete batch failed"


__all__ = [
    "BulkDeleteError",
    "CacheConnectionError",
    "ConfigurationError",
    "ProtocolError",
    "ScanTimeoutError",
    "SimpleCacheError",
]
