"""
Cache stores backing the cache-aside layer.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.config import BaseConfig
from shared.errors import StoreUnavailableError
from shared.logging import get_logger


class CacheStore(ABC):
    """String-keyed get/set-with-expiry store."""

    @abstractmethod
    async def open(self) -> None:
        """Establish the store connection."""

    @abstractmethod
    async def close(self) -> None:
        """Release the store connection."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the payload for ``key``, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        """Store ``payload`` under ``key``, expiring ``ttl_seconds`` from now."""

    async def ping(self) -> bool:
        """Return True when the store is reachable."""
        return True


def _validate_ttl(ttl_seconds: int) -> int:
    if isinstance(ttl_seconds, bool) or int(ttl_seconds) != ttl_seconds or ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be a positive integer, got {ttl_seconds!r}")
    return int(ttl_seconds)


class RedisCacheStore(CacheStore):
    """Redis-backed cache store."""

    def __init__(self, redis_url: str, *, socket_timeout: float = 5.0) -> None:
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self.logger = get_logger("pokemon.cache.redis")
        self._redis: Optional[redis.Redis] = None

    async def open(self) -> None:
        """Connect to Redis; failure here is fatal to the process."""
        self._redis = redis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=self.socket_timeout,
            socket_timeout=self.socket_timeout,
            health_check_interval=30,
        )
        try:
            await self._redis.ping()
        except (RedisError, OSError) as exc:
            self.logger.error("Failed to connect to Redis", redis_url=self.redis_url, error=str(exc))
            await self._redis.aclose()
            self._redis = None
            raise StoreUnavailableError(
                "Failed to connect to cache store",
                details={"redis_url": self.redis_url, "error": str(exc)},
            ) from exc

        self.logger.info("Redis cache store connected", redis_url=self.redis_url)

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("Redis cache store closed")

    def _client(self) -> redis.Redis:
        if self._redis is None:
            raise StoreUnavailableError("Cache store is not open")
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        client = self._client()
        try:
            return await client.get(key)
        except UnicodeDecodeError as exc:
            # Undecodable bytes are a corrupt entry, not an outage
            self.logger.warning("Discarding undecodable cache entry", key=key, error=str(exc))
            return None
        except (RedisError, OSError) as exc:
            raise StoreUnavailableError("Cache read failed", details={"key": key, "error": str(exc)}) from exc

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        ttl = _validate_ttl(ttl_seconds)
        client = self._client()
        try:
            await client.set(key, payload, ex=ttl)
        except (RedisError, OSError) as exc:
            raise StoreUnavailableError("Cache write failed", details={"key": key, "error": str(exc)}) from exc
        self.logger.debug("Cached value", key=key, ttl=ttl)

    async def ping(self) -> bool:
        try:
            return bool(await self._client().ping())
        except (StoreUnavailableError, RedisError, OSError):
            return False


class InMemoryCacheStore(CacheStore):
    """
    Process-local cache store with lazy expiry.

    Used for tests and single-process local runs. ``clock`` returns seconds
    and defaults to ``time.monotonic``. Expired entries are dropped when read
    and swept on every write.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._open = False
        self.logger = get_logger("pokemon.cache.memory")

    async def open(self) -> None:
        self._open = True

    async def close(self) -> None:
        self._open = False
        self._entries.clear()

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return payload

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        ttl = _validate_ttl(ttl_seconds)
        now = self._clock()
        self._prune_expired(now)
        self._entries[key] = (payload, now + ttl)

    def _prune_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    async def ping(self) -> bool:
        return self._open

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[1]

    def __len__(self) -> int:
        return len(self._entries)


def create_cache_store(config: BaseConfig) -> CacheStore:
    """Build the cache store selected by ``cache_backend``."""
    if config.cache_backend == "memory":
        return InMemoryCacheStore()
    return RedisCacheStore(config.redis_url, socket_timeout=config.redis_socket_timeout)
