"""
Cache-aside orchestration for Pokémon resources.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING

from shared.errors import ExternalServiceError, ServiceError, StoreUnavailableError
from shared.logging import get_logger

from service_pokemon.app.caching.keys import derive_key
from service_pokemon.app.caching.single_flight import SingleFlight
from service_pokemon.app.caching.store import CacheStore
from service_pokemon.app.domain.models import CacheResult, CacheStatus, ResourceIdentifier

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_pokemon.app.adapters.pokeapi_client import PokeApiClient
    from shared.metrics import MetricsCollector


DEFAULT_TTL_SECONDS = 300
DEFAULT_LIST_LIMIT = 100

POKEMON_ERROR_MESSAGE = "Could not fetch Pokémon."
POKEMON_LIST_ERROR_MESSAGE = "Could not fetch Pokémon list."


def _serialize_names(names: list) -> str:
    # Compact separators
    return json.dumps(names, ensure_ascii=False, separators=(",", ":"))


def _is_entity_payload(value: Any) -> bool:
    return isinstance(value, dict)


def _is_list_payload(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


class CacheAsideService:
    """
    Serve Pokémon resources from the cache store, falling back to PokeAPI.

    Each request probes the store once; on a miss it calls the upstream once
    and writes the result back with the configured TTL. Store failures only
    decide whether the hit path is taken and never fail a request. Upstream
    failures surface as a ``ServiceError`` with a fixed message.
    """

    def __init__(
        self,
        store: CacheStore,
        upstream: "PokeApiClient",
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        default_list_limit: int = DEFAULT_LIST_LIMIT,
        single_flight: bool = False,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.store = store
        self.upstream = upstream
        self.ttl_seconds = ttl_seconds
        self.default_list_limit = default_list_limit
        self.metrics = metrics
        self.logger = get_logger("pokemon.cache_aside")
        self._single_flight: Optional[SingleFlight] = SingleFlight() if single_flight else None

    async def get_pokemon(self, name: str) -> CacheResult:
        """Return one pokemon as JSON text, looked up case-insensitively."""
        resource = ResourceIdentifier.entity(name)
        return await self._resolve(
            resource,
            fetch=lambda: self.upstream.fetch_entity(resource.name),
            validate=_is_entity_payload,
            error_message=POKEMON_ERROR_MESSAGE,
        )

    async def get_pokemon_list(self, limit: Optional[int] = None) -> CacheResult:
        """Return the first ``limit`` pokemon names as a JSON array."""
        resource = ResourceIdentifier.listing(self.default_list_limit if limit is None else limit)

        async def fetch() -> str:
            return _serialize_names(await self.upstream.fetch_list(resource.limit))

        return await self._resolve(
            resource,
            fetch=fetch,
            validate=_is_list_payload,
            error_message=POKEMON_LIST_ERROR_MESSAGE,
        )

    async def _resolve(
        self,
        resource: ResourceIdentifier,
        *,
        fetch: Callable[[], Awaitable[str]],
        validate: Callable[[Any], bool],
        error_message: str,
    ) -> CacheResult:
        key = derive_key(resource)

        cached = await self._probe(key, validate)
        if cached is not None:
            self._count("cache_requests_total", resource=resource.label, result="hit")
            self.logger.debug("Cache hit", key=key)
            return CacheResult(payload=cached, status=CacheStatus.HIT)

        self._count("cache_requests_total", resource=resource.label, result="miss")
        self.logger.debug("Cache miss", key=key)

        async def populate() -> str:
            payload = await self._fetch_upstream(resource, fetch, error_message)
            await self._store(key, payload)
            return payload

        if self._single_flight is not None:
            payload = await self._single_flight.do(key, populate)
        else:
            payload = await populate()
        return CacheResult(payload=payload, status=CacheStatus.MISS)

    async def _probe(self, key: str, validate: Callable[[Any], bool]) -> Optional[str]:
        """Read and sanity-check a cached payload; anything unusable is a miss."""
        try:
            cached = await self.store.get(key)
        except StoreUnavailableError as exc:
            self._count("cache_store_errors_total", operation="get")
            self.logger.warning("Cache store unavailable, reading from upstream", key=key, error=exc.message)
            return None

        if cached is None:
            return None

        try:
            decoded = json.loads(cached)
        except (TypeError, ValueError):
            pass
        else:
            if validate(decoded):
                return cached

        self.logger.warning("Discarding corrupt cache entry", key=key)
        return None

    async def _fetch_upstream(
        self,
        resource: ResourceIdentifier,
        fetch: Callable[[], Awaitable[str]],
        error_message: str,
    ) -> str:
        outcome = "error"
        try:
            if self.metrics:
                with self.metrics.time_operation("upstream_request_duration_seconds", resource=resource.label):
                    payload = await fetch()
            else:
                payload = await fetch()
            outcome = "ok"
            return payload
        except ExternalServiceError as exc:
            outcome = "unavailable" if exc.code == "UPSTREAM_UNAVAILABLE" else "bad_response"
            self.logger.error(
                "Upstream fetch failed",
                resource=resource.label,
                code=exc.code,
                error=exc.message,
            )
            raise ServiceError(error_message) from exc
        finally:
            self._count("upstream_requests_total", resource=resource.label, outcome=outcome)

    async def _store(self, key: str, payload: str) -> None:
        """Best-effort write; the fetched payload is returned either way."""
        try:
            await self.store.set(key, payload, self.ttl_seconds)
        except StoreUnavailableError as exc:
            self._count("cache_store_errors_total", operation="set")
            self.logger.warning("Failed to populate cache", key=key, error=exc.message)

    def _count(self, metric_name: str, **labels) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)
