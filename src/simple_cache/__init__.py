"""Connection lifecycle, key scanning and bulk deletion for Redis-compatible caches."""

from simple_cache.bulk_deleter import delete_matching
from simple_cache.cache import SimpleCache
from simple_cache.config import ConfigProvider, ConnectionParameters
from simple_cache.connection_registry import ConnectionRegistry
from simple_cache.connection_registry_helpers import ConnectionKey
from simple_cache.exceptions import (
    BulkDeleteError,
    CacheConnectionError,
    ConfigurationError,
    ProtocolError,
    ScanTimeoutError,
    SimpleCacheError,
)
from simple_cache.key_scanner import scan_keys

__all__ = [
    "BulkDeleteError",
    "CacheConnectionError",
    "ConfigProvider",
    "ConfigurationError",
    "ConnectionKey",
    "ConnectionParameters",
    "ConnectionRegistry",
    "ProtocolError",
    "ScanTimeoutError",
    "SimpleCache",
    "SimpleCacheError",
    "delete_matching",
    "scan_keys",
]
