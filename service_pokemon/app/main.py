"""
Pokémon cache proxy service.
"""

import os
from typing import Dict, Optional

from fastapi import Query, Response
from fastapi.staticfiles import StaticFiles

from shared.base_service import BaseService
from shared.config import ServiceConfig

from service_pokemon.app.adapters.pokeapi_client import PokeApiClient
from service_pokemon.app.caching.store import CacheStore, create_cache_store
from service_pokemon.app.domain.cache_aside import CacheAsideService
from service_pokemon.app.domain.models import CacheResult


SERVICE_NAME = "pokemon"


class PokemonService(BaseService):
    """Cache-aside proxy in front of PokeAPI."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        store: Optional[CacheStore] = None,
        upstream: Optional[PokeApiClient] = None,
    ):
        super().__init__(SERVICE_NAME, config)
        self.store = store if store is not None else create_cache_store(self.config)
        self.upstream = upstream if upstream is not None else PokeApiClient(
            self.config.upstream_base_url,
            timeout=self.config.upstream_timeout,
        )
        self.cache_aside = CacheAsideService(
            self.store,
            self.upstream,
            ttl_seconds=self.config.cache_ttl_seconds,
            default_list_limit=self.config.default_list_limit,
            single_flight=self.config.single_flight,
            metrics=self.metrics,
        )

        self._setup_pokemon_routes()
        self._mount_static_files()

        # Expose service instance via app state for introspection/testing
        self.app.state.pokemon_service = self

    async def startup(self) -> None:
        # A store that cannot be reached at startup is fatal
        await self.store.open()

    async def shutdown(self) -> None:
        await self.store.close()
        await self.upstream.close()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"cache": "ok" if await self.store.ping() else "error"}

    def _setup_pokemon_routes(self):
        """Set up the cache-aside resource routes."""

        @self.app.get("/api/pokemon/{name}")
        async def get_pokemon(name: str):
            """Fetch one pokemon, served from cache when possible."""
            result = await self.cache_aside.get_pokemon(name)
            return self._cached_json(result)

        @self.app.get("/api/list")
        async def get_pokemon_list(
            limit: Optional[int] = Query(default=None, ge=1, le=self.config.max_list_limit),
        ):
            """Fetch the first pokemon names (100 unless ``limit`` is given)."""
            result = await self.cache_aside.get_pokemon_list(limit)
            return self._cached_json(result)

    def _cached_json(self, result: CacheResult) -> Response:
        return Response(
            content=result.payload,
            media_type="application/json",
            headers={"X-Cache": result.status.value},
        )

    def _mount_static_files(self):
        static_dir = self.config.static_dir
        if not static_dir:
            return
        if not os.path.isdir(static_dir):
            self.logger.warning("Static directory not found, skipping", static_dir=static_dir)
            return
        # Mounted last so API routes take precedence
        self.app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")


def create_app(config: Optional[ServiceConfig] = None, **kwargs):
    """Create FastAPI application."""
    service = PokemonService(config, **kwargs)
    return service.app


if __name__ == "__main__":
    service = PokemonService()
    service.run()
