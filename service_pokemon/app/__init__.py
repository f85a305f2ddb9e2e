"""
Pokémon Service package for the Pokémon Cache Proxy.

The service fronts PokeAPI with a cache-aside layer:
- Entity lookups ("pokemon by name") and bounded name lists
- Redis (or in-memory) store with TTL-bounded entries
- Upstream failures isolated behind fixed client-facing errors

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.adapters: HTTP client for the upstream API.
- app.caching: Key schema, cache stores, and single-flight coalescing.
- app.domain: Resource identifiers and the cache-aside orchestrator.
"""
