"""Store configuration and environment override helpers."""

from ..exceptions import ConfigurationError
from .provider import (
    CONFIG_PATH_ENV,
    ConfigProvider,
    ConnectionParameters,
    resolve_config_path,
)
from .runtime import env_float, env_int, env_str, reset_default_values

__all__ = [
    "CONFIG_PATH_ENV",
    "ConfigProvider",
    "ConfigurationError",
    "ConnectionParameters",
    "env_float",
    "env_int",
    "env_str",
    "reset_default_values",
    "resolve_config_path",
]
