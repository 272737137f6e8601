"""Tests for the Redis client wrapper."""

from unittest.mock import AsyncMock

import pytest

from coursehub.infrastructure.redis import RedisClient


@pytest.fixture
def disabled_client(monkeypatch):
    client = RedisClient()
    monkeypatch.setattr(client, "_enabled", False)
    return client


@pytest.fixture
def connected_client(monkeypatch):
    client = RedisClient()
    monkeypatch.setattr(client, "_enabled", True)
    client._client = AsyncMock()
    return client


class TestDisabled:
    """Without Redis every call degrades to a harmless default."""

    @pytest.mark.asyncio
    async def test_connect_is_skipped(self, disabled_client):
        await disabled_client.connect()
        assert disabled_client._client is None

    @pytest.mark.asyncio
    async def test_defaults(self, disabled_client):
        assert await disabled_client.get("k") is None
        assert await disabled_client.set("k", "v") is True
        assert await disabled_client.delete("k") == 0

    @pytest.mark.asyncio
    async def test_set_nx_never_claims(self, disabled_client):
        assert disabled_client.available is False
        assert await disabled_client.set_nx("k", "v", ttl=10) is False
        assert await disabled_client.set_nx("k", "v", ttl=10) is False

    @pytest.mark.asyncio
    async def test_enabled_but_not_connected(self, monkeypatch):
        client = RedisClient()
        monkeypatch.setattr(client, "_enabled", True)

        assert client.available is False
        assert await client.set_nx("k", "v", ttl=10) is False


class TestConnected:
    """Calls are forwarded to redis.asyncio."""

    @pytest.mark.asyncio
    async def test_set_nx(self, connected_client):
        connected_client._client.set.return_value = None

        assert await connected_client.set_nx("claim", "7", ttl=60) is False
        connected_client._client.set.assert_awaited_once_with("claim", "7", ex=60, nx=True)

    @pytest.mark.asyncio
    async def test_set_with_ttl(self, connected_client):
        connected_client._client.setex.return_value = True

        assert await connected_client.set("k", "v", ttl=30) is True
        connected_client._client.setex.assert_awaited_once_with("k", 30, "v")

    @pytest.mark.asyncio
    async def test_disconnect(self, connected_client):
        inner = connected_client._client

        await connected_client.disconnect()

        inner.aclose.assert_awaited_once()
        assert connected_client._client is None
