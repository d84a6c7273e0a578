"""Backend-facing helpers: client construction, typing aliases, error groupings."""

from .client_factory import build_client_settings, open_client
from .error_types import REDIS_ERRORS
from .typing import RedisClient, ScanCursor, ensure_awaitable

__all__ = [
    "REDIS_ERRORS",
    "RedisClient",
    "ScanCursor",
    "build_client_settings",
    "ensure_awaitable",
    "open_client",
]
