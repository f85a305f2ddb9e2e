"""
Pokémon caching package.

Key schema, cache stores, and miss coalescing used by the cache-aside
orchestrator. Entries are short-lived and expire by TTL only; there is no
explicit invalidation path.
"""

from .keys import derive_key
from .single_flight import SingleFlight
from .store import CacheStore, InMemoryCacheStore, RedisCacheStore, create_cache_store

__all__ = [
    "derive_key",
    "SingleFlight",
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
]
