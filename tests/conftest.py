"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from simple_cache.config import runtime
from tests.helpers.fake_redis import FakeClock, FakeRedis


@pytest.fixture(autouse=True)
def isolate_runtime_defaults(monkeypatch):
    """Keep developer .env files out of the tests."""
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", ())
    runtime.reset_default_values()
    yield
    runtime.reset_default_values()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def write_cache_config(tmp_path):
    """Write a store configuration file and return its path."""

    def factory(payload: Any, filename: str = "simple_cache.json") -> Path:
        config_dir = tmp_path / "config"
        config_dir.mkdir(exist_ok=True)
        config_path = config_dir / filename
        config_path.write_text(json.dumps(payload), encoding="utf-8")
        return config_path

    return factory


@pytest.fixture
def default_store_payload() -> dict[str, Any]:
    return {
        "default": {
            "host": "127.0.0.1",
            "port": 6379,
            "password": "s3cret",
            "connect_timeout": 5,
            "retry_interval": 0.3,
            "options": {"prefix": "app", "ttl": 60},
        },
        "reports": {"host": "reports.internal", "port": 6380, "password": None},
    }
