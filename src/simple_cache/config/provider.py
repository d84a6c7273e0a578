"""
Store configuration resolution.

A single JSON document maps store names to connection settings::

    {
        "default": {
            "host": "127.0.0.1",
            "port": 6379,
            "password": "secret",
            "connect_timeout": 5,
            "retry_interval": 0.3,
            "options": {"prefix": "app"}
        }
    }

Each connection field can be overridden per store through the environment
(``SIMPLE_CACHE_<STORE>_HOST`` and friends), either exported in the process
or declared in a ``.env`` file.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..exceptions import ConfigurationError
from .runtime import env_float, env_int, env_str

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "SIMPLE_CACHE_CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "simple_cache.json"

DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_RETRY_INTERVAL_SECONDS = 0.3

_ENV_UNSAFE_CHARS = re.compile(r"[^0-9A-Za-z]")


@dataclass(frozen=True)
class ConnectionParameters:
    host: str
    port: int
    password: Optional[str] = None
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    retry_interval: float = DEFAULT_RETRY_INTERVAL_SECONDS
    socket_timeout: Optional[float] = None

    def masked(self) -> Dict[str, Any]:
        """Return the parameters as a dict that is safe to log."""
        return {
            "host": self.host,
            "port": self.port,
            "password": "***" if self.password else None,
            "connect_timeout": self.connect_timeout,
            "retry_interval": self.retry_interval,
            "socket_timeout": self.socket_timeout,
        }


def resolve_config_path(config_path: Path | str | None = None) -> Path:
    """
    Locate the store configuration file.

    Precedence: explicit argument, then ``SIMPLE_CACHE_CONFIG_PATH``, then
    ``config/simple_cache.json`` under the working directory.
    """
    if config_path is not None:
        return Path(config_path).expanduser()

    env_value = env_str(CONFIG_PATH_ENV)
    if env_value:
        return Path(env_value).expanduser()

    return Path.cwd() / "config" / DEFAULT_CONFIG_FILENAME


def _env_prefix(store: str) -> str:
    return f"SIMPLE_CACHE_{_ENV_UNSAFE_CHARS.sub('_', store).upper()}_"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigProvider:
    """Loads the store configuration once and memoizes parameters per store."""

    def __init__(self, config_path: Path | str | None = None):
        self.config_path = resolve_config_path(config_path)
        self._payload: Optional[Dict[str, Any]] = None
        self._parameters: Dict[str, ConnectionParameters] = {}

    def _load_payload(self) -> Dict[str, Any]:
        if self._payload is not None:
            return self._payload

        path = self.config_path
        if not path.exists():
            raise ConfigurationError(f"Cache configuration file not found: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Failed to load cache configuration {path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ConfigurationError(f"Cache configuration {path} must contain a JSON object at the top level")

        logger.debug("Loaded cache configuration from %s (%d stores)", path, len(payload))
        self._payload = payload
        return payload

    def _store_section(self, store: str) -> Dict[str, Any]:
        payload = self._load_payload()
        section = payload.get(store)
        if not section:
            raise ConfigurationError.store_missing(store, self.config_path)
        if not isinstance(section, dict):
            raise ConfigurationError(f"Store {store!r} in {self.config_path} must be a JSON object", store=store)
        return section

    def resolve(self, store: str) -> ConnectionParameters:
        """
        Return connection parameters for *store*, building them on first use.

        Raises:
            ConfigurationError: If the file cannot be loaded, the store is
                absent, or a field has the wrong type
        """
        cached = self._parameters.get(store)
        if cached is not None:
            return cached

        parameters = self._build_parameters(store, self._store_section(store))
        self._parameters[store] = parameters
        logger.info("Resolved cache store %r: %s", store, parameters.masked())
        return parameters

    def _build_parameters(self, store: str, section: Dict[str, Any]) -> ConnectionParameters:
        prefix = _env_prefix(store)

        host = section.get("host")
        if host is not None and not isinstance(host, str):
            raise ConfigurationError.invalid_field(store, "host", "a string", host)
        host = env_str(f"{prefix}HOST", or_value=host)
        if not host:
            raise ConfigurationError.invalid_field(store, "host", "a non-empty string", host)

        port = section.get("port")
        if port is not None and (not isinstance(port, int) or isinstance(port, bool)):
            raise ConfigurationError.invalid_field(store, "port", "an integer", port)
        port = env_int(f"{prefix}PORT", or_value=port)
        if port is None or not 0 < port < 65536:
            raise ConfigurationError.invalid_field(store, "port", "an integer between 1 and 65535", port)

        password = section.get("password")
        if password is not None and not isinstance(password, str):
            raise ConfigurationError.invalid_field(store, "password", "a string or null", password)
        password = env_str(f"{prefix}PASSWORD", or_value=password, allow_blank=True)

        connect_timeout = self._number_field(store, section, "connect_timeout", DEFAULT_CONNECT_TIMEOUT_SECONDS)
        retry_interval = self._number_field(store, section, "retry_interval", DEFAULT_RETRY_INTERVAL_SECONDS)
        socket_timeout = self._number_field(store, section, "socket_timeout", None)

        if connect_timeout is None or connect_timeout <= 0:
            raise ConfigurationError.invalid_field(store, "connect_timeout", "a positive number", connect_timeout)
        if retry_interval is None or retry_interval < 0:
            raise ConfigurationError.invalid_field(store, "retry_interval", "a non-negative number", retry_interval)
        if socket_timeout is not None and socket_timeout <= 0:
            raise ConfigurationError.invalid_field(store, "socket_timeout", "a positive number or null", socket_timeout)

        return ConnectionParameters(
            host=host,
            port=port,
            password=password or None,
            connect_timeout=connect_timeout,
            retry_interval=retry_interval,
            socket_timeout=socket_timeout,
        )

    @staticmethod
    def _number_field(store: str, section: Dict[str, Any], field: str, default: Optional[float]) -> Optional[float]:
        value = section.get(field)
        if value is not None and not _is_number(value):
            raise ConfigurationError.invalid_field(store, field, "a number or null", value)
        if value is None:
            value = default
        return env_float(f"{_env_prefix(store)}{field.upper()}", or_value=None if value is None else float(value))

    def get_config_value(self, store: str, dotted_key: str = "", default: Any = None) -> Any:
        """
        Look up a raw value from a store's section.

        An empty key returns a copy of the whole section. ``"options.prefix"``
        walks nested objects; the first segment is matched lower-cased. Any
        missing or null segment, or a segment reached through a non-object
        value, yields *default*.

        Raises:
            ConfigurationError: If the file cannot be loaded or the store is absent
        """
        section = self._store_section(store)
        if not dotted_key:
            return dict(section)

        segments = dotted_key.split(".")
        segments[0] = segments[0].lower()

        current: Any = section
        for segment in segments:
            if not isinstance(current, dict):
                return default
            value = current.get(segment)
            if value is None:
                return default
            current = value
        return current


__all__ = [
    "CONFIG_PATH_ENV",
    "ConfigProvider",
    "ConnectionParameters",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_RETRY_INTERVAL_SECONDS",
    "resolve_config_path",
]
