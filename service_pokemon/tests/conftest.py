"""
Shared fixtures for Pokémon service tests.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from service_pokemon.app.caching.store import InMemoryCacheStore


PIKACHU = {"id": 25, "name": "pikachu", "types": [{"slot": 1, "type": {"name": "electric"}}]}
DITTO = {"id": 132, "name": "ditto", "weight": 40}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def pokemon_names():
    return [f"pokemon-{index}" for index in range(1, 101)]


@pytest.fixture
def upstream(pokemon_names):
    """Upstream client double answering with canned payloads."""
    client = MagicMock()

    async def fetch_entity(name):
        payloads = {"pikachu": PIKACHU, "ditto": DITTO}
        return json.dumps(payloads.get(name, {"name": name}))

    async def fetch_list(limit):
        return pokemon_names[:limit]

    client.fetch_entity = AsyncMock(side_effect=fetch_entity)
    client.fetch_list = AsyncMock(side_effect=fetch_list)
    client.close = AsyncMock()
    return client


@pytest.fixture
def pikachu_payload():
    return PIKACHU
