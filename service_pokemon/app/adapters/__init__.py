"""
Adapters package for the Pokémon Service.

Contains the HTTP client wrapper for the upstream PokeAPI. Adapters
encapsulate base URLs, request shapes, and the mapping of transport and
response failures onto shared errors.
"""

from .pokeapi_client import PokeApiClient

__all__ = ["PokeApiClient"]
