"""
Unit tests for the cache stores.
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from service_pokemon.app.caching import store as store_module
from service_pokemon.app.caching.store import (
    InMemoryCacheStore,
    RedisCacheStore,
    create_cache_store,
)
from shared.config import get_config
from shared.errors import StoreUnavailableError


class TestInMemoryCacheStore:
    """Test cases for InMemoryCacheStore."""

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, memory_store):
        await memory_store.open()

        assert await memory_store.get("pokemon:missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, memory_store):
        await memory_store.open()
        await memory_store.set("pokemon:pikachu", '{"name": "pikachu"}', 300)

        assert await memory_store.get("pokemon:pikachu") == '{"name": "pikachu"}'

    @pytest.mark.asyncio
    async def test_entry_expires_exactly_at_ttl(self, memory_store, clock):
        await memory_store.set("pokemon:pikachu", "{}", 300)

        clock.advance(299)
        assert await memory_store.get("pokemon:pikachu") == "{}"

        clock.advance(1)
        assert await memory_store.get("pokemon:pikachu") is None
        assert len(memory_store) == 0

    @pytest.mark.asyncio
    async def test_set_overwrites_and_resets_expiry(self, memory_store, clock):
        await memory_store.set("pokemon:ditto", '"old"', 300)
        clock.advance(200)
        await memory_store.set("pokemon:ditto", '"new"', 300)
        clock.advance(200)

        assert await memory_store.get("pokemon:ditto") == '"new"'

    @pytest.mark.asyncio
    async def test_set_sweeps_expired_entries(self, memory_store, clock):
        await memory_store.set("pokemon:pikachu", "{}", 300)
        await memory_store.set("pokemon:ditto", "{}", 600)
        clock.advance(300)

        await memory_store.set("pokemon:eevee", "{}", 300)

        assert len(memory_store) == 2
        assert "pokemon:ditto" in memory_store
        assert "pokemon:eevee" in memory_store

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [0, -1, 1.5])
    async def test_rejects_invalid_ttl(self, memory_store, ttl):
        with pytest.raises(ValueError):
            await memory_store.set("pokemon:ditto", "{}", ttl)

    @pytest.mark.asyncio
    async def test_ping_follows_lifecycle(self, memory_store):
        assert await memory_store.ping() is False

        await memory_store.open()
        assert await memory_store.ping() is True

        await memory_store.close()
        assert await memory_store.ping() is False


class TestRedisCacheStore:
    """Test cases for RedisCacheStore."""

    @pytest.fixture
    def redis_client(self):
        client = AsyncMock()
        client.ping.return_value = True
        client.get.return_value = None
        return client

    @pytest_asyncio.fixture
    async def opened_store(self, redis_client):
        store = RedisCacheStore("redis://localhost:6379/0")
        with patch.object(store_module.redis, "from_url", return_value=redis_client):
            await store.open()
        return store

    @pytest.mark.asyncio
    async def test_open_pings_redis(self, redis_client):
        store = RedisCacheStore("redis://localhost:6379/0", socket_timeout=2.0)

        with patch.object(store_module.redis, "from_url", return_value=redis_client) as from_url:
            await store.open()

        redis_client.ping.assert_awaited_once()
        _, kwargs = from_url.call_args
        assert kwargs["decode_responses"] is True
        assert kwargs["socket_timeout"] == 2.0

    @pytest.mark.asyncio
    async def test_open_failure_is_store_unavailable(self, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("connection refused")
        store = RedisCacheStore("redis://localhost:6379/0")

        with patch.object(store_module.redis, "from_url", return_value=redis_client):
            with pytest.raises(StoreUnavailableError) as exc_info:
                await store.open()

        assert exc_info.value.code == "STORE_UNAVAILABLE"
        redis_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_before_open_is_store_unavailable(self):
        store = RedisCacheStore("redis://localhost:6379/0")

        with pytest.raises(StoreUnavailableError):
            await store.get("pokemon:pikachu")

    @pytest.mark.asyncio
    async def test_get_returns_payload(self, opened_store, redis_client):
        redis_client.get.return_value = '{"name": "pikachu"}'

        assert await opened_store.get("pokemon:pikachu") == '{"name": "pikachu"}'
        redis_client.get.assert_awaited_once_with("pokemon:pikachu")

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, opened_store):
        assert await opened_store.get("pokemon:missingno") is None

    @pytest.mark.asyncio
    async def test_get_undecodable_value_is_a_miss(self, opened_store, redis_client):
        redis_client.get.side_effect = UnicodeDecodeError("utf-8", b"\xff\xfe{corrupt", 0, 1, "invalid start byte")

        assert await opened_store.get("pokemon:pikachu") is None

    @pytest.mark.asyncio
    async def test_get_connection_error_is_store_unavailable(self, opened_store, redis_client):
        redis_client.get.side_effect = RedisTimeoutError("timed out")

        with pytest.raises(StoreUnavailableError):
            await opened_store.get("pokemon:pikachu")

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self, opened_store, redis_client):
        await opened_store.set("pokemon:pikachu", "{}", 300)

        redis_client.set.assert_awaited_once_with("pokemon:pikachu", "{}", ex=300)

    @pytest.mark.asyncio
    async def test_set_connection_error_is_store_unavailable(self, opened_store, redis_client):
        redis_client.set.side_effect = RedisConnectionError("connection reset")

        with pytest.raises(StoreUnavailableError):
            await opened_store.set("pokemon:pikachu", "{}", 300)

    @pytest.mark.asyncio
    async def test_ping_reports_failures(self, opened_store, redis_client):
        assert await opened_store.ping() is True

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert await opened_store.ping() is False

    @pytest.mark.asyncio
    async def test_close_releases_client(self, opened_store, redis_client):
        await opened_store.close()

        redis_client.aclose.assert_awaited_once()
        assert await opened_store.ping() is False


class TestCreateCacheStore:
    """Test cases for create_cache_store."""

    def test_memory_backend(self):
        config = get_config("pokemon", cache_backend="memory")

        assert isinstance(create_cache_store(config), InMemoryCacheStore)

    def test_redis_backend(self):
        config = get_config("pokemon", cache_backend="redis", redis_url="redis://cache:6379/1")
        store = create_cache_store(config)

        assert isinstance(store, RedisCacheStore)
        assert store.redis_url == "redis://cache:6379/1"
