"""
Cache key schema for Pokémon resources.
"""

from urllib.parse import quote

from service_pokemon.app.domain.models import ResourceIdentifier, ResourceKind


KEY_NAMESPACE = "pokemon"
LIST_NAMESPACE = f"{KEY_NAMESPACE}:list"


def derive_key(resource: ResourceIdentifier) -> str:
    """
    Map a resource identifier to its cache key.

    Entities become ``pokemon:<name>`` and lists ``pokemon:list:<limit>``.
    Names are lower-cased and percent-encoded, so ``:`` never appears in the
    name segment and no entity key can shadow a list key.
    """
    if resource.kind is ResourceKind.ENTITY:
        return f"{KEY_NAMESPACE}:{quote(resource.name.lower(), safe='')}"
    return f"{LIST_NAMESPACE}:{int(resource.limit)}"
