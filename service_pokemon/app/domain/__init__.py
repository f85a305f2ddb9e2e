"""
Domain layer for the Pokémon Service.

Resource identifiers and cache results live here alongside the cache-aside
orchestrator (``domain.cache_aside``), which ties the key schema, cache
store, and upstream client together.
"""

from .models import CacheResult, CacheStatus, ResourceIdentifier, ResourceKind

__all__ = [
    "CacheResult",
    "CacheStatus",
    "ResourceIdentifier",
    "ResourceKind",
]
