"""Tests for dedicated client construction."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio
from redis.asyncio.retry import Retry
from redis.exceptions import AuthenticationError
from redis.exceptions import ConnectionError as RedisConnectionError

from simple_cache.config.provider import ConnectionParameters
from simple_cache.redis_protocol import client_factory
from simple_cache.redis_protocol.client_factory import TRANSPORT_RETRIES, build_client_settings, open_client

_PARAMS = ConnectionParameters(
    host="cache.local",
    port=6380,
    password="pw",
    connect_timeout=5.0,
    retry_interval=0.3,
    socket_timeout=2.0,
)


def test_build_client_settings_selects_index_and_single_connection():
    settings = build_client_settings(_PARAMS, 7)

    assert settings["host"] == "cache.local"
    assert settings["port"] == 6380
    assert settings["db"] == 7
    assert settings["password"] == "pw"
    assert settings["socket_connect_timeout"] == 5.0
    assert settings["socket_timeout"] == 2.0
    assert settings["single_connection_client"] is True
    assert settings["decode_responses"] is True


def test_build_client_settings_uses_single_constant_retry():
    retry = build_client_settings(_PARAMS, 0)["retry"]

    assert isinstance(retry, Retry)
    assert TRANSPORT_RETRIES == 1


def test_build_client_settings_omits_missing_password():
    params = ConnectionParameters(host="cache.local", port=6379)

    assert "password" not in build_client_settings(params, 0)


@pytest.mark.asyncio
async def test_open_client_pings_before_returning(monkeypatch):
    fake_client = MagicMock()
    fake_client.ping = AsyncMock(return_value=True)
    fake_client.aclose = AsyncMock()
    redis_cls = MagicMock(return_value=fake_client)
    monkeypatch.setattr(redis.asyncio, "Redis", redis_cls)

    result = await open_client(_PARAMS, 3)

    assert result is fake_client
    fake_client.ping.assert_awaited_once()
    fake_client.aclose.assert_not_awaited()
    assert redis_cls.call_args.kwargs["db"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [AuthenticationError("bad password"), RedisConnectionError("refused")])
async def test_open_client_closes_client_when_ping_fails(monkeypatch, error):
    fake_client = MagicMock()
    fake_client.ping = AsyncMock(side_effect=error)
    fake_client.aclose = AsyncMock()
    monkeypatch.setattr(redis.asyncio, "Redis", MagicMock(return_value=fake_client))

    with pytest.raises(type(error)):
        await open_client(_PARAMS, 0)

    fake_client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_open_client_keeps_original_error_when_close_fails(monkeypatch):
    fake_client = MagicMock()
    fake_client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))
    fake_client.aclose = AsyncMock(side_effect=OSError("socket already gone"))
    monkeypatch.setattr(redis.asyncio, "Redis", MagicMock(return_value=fake_client))

    with pytest.raises(RedisConnectionError, match="refused"):
        await open_client(_PARAMS, 0)


def test_module_exports():
    assert set(client_factory.__all__) == {"TRANSPORT_RETRIES", "build_client_settings", "open_client"}
