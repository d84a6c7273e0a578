"""
Centralized logging configuration for simple_cache entry points.

``setup_logging`` installs:
- a stdout console handler (technical format, or bare messages when user_friendly)
- an optional file handler at logs/{service_name}.log, truncated on each start
  unless LOG_APPEND=1
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from simple_cache.config.runtime import env_str

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_LOG_DIR_ENV = "SIMPLE_CACHE_LOG_DIR"
_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_NOISY_LOGGERS = ("asyncio", "redis", "redis.connection", "redis.asyncio")


def _resolve_log_directory() -> Path:
    configured = env_str(_LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.cwd() / "logs"


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:  # Best-effort cleanup operation  # policy_guard: allow-silent-handler
            _MODULE_LOGGER.debug("Handler close failed for logger '%s': %s", logger.name, exc)
        logger.removeHandler(handler)


def _build_console_handler(user_friendly: bool, level: int) -> logging.Handler:
    if user_friendly:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING if user_friendly else level)
    return console_handler


def _build_file_handler(service_name: str) -> logging.Handler:
    logs_dir = _resolve_log_directory()
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_mode = "a" if env_str("LOG_APPEND") == "1" else "w"

    file_handler = logging.handlers.WatchedFileHandler(logs_dir / f"{service_name}.log", mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.INFO)
    return file_handler


def _suppress_noisy_third_parties() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(service_name: Optional[str] = None, user_friendly: bool = False, *, level: int = logging.INFO) -> None:
    """Configure the root logger; repeated calls replace the previous handlers."""

    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(user_friendly, level))
        if service_name:
            root_logger.addHandler(_build_file_handler(service_name))

        root_logger.setLevel(level)
        _suppress_noisy_third_parties()


__all__ = ["setup_logging"]
