"""
Resource identifiers and cache results for the Pokémon service.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResourceKind(str, Enum):
    """Shape of a resource served from the upstream."""

    ENTITY = "entity"
    LIST = "list"


class CacheStatus(str, Enum):
    """Annotation reported to clients via the X-Cache header."""

    HIT = "HIT"
    MISS = "MISS"


@dataclass(frozen=True)
class ResourceIdentifier:
    """A logical resource request, normalized before key derivation."""

    kind: ResourceKind
    name: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def entity(cls, name: str) -> "ResourceIdentifier":
        """Identify a single pokemon by case-insensitive name."""
        normalized = name.lower()
        if not normalized:
            raise ValueError("name must not be empty")
        return cls(kind=ResourceKind.ENTITY, name=normalized)

    @classmethod
    def listing(cls, limit: int) -> "ResourceIdentifier":
        """Identify the first ``limit`` pokemon names."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        return cls(kind=ResourceKind.LIST, limit=limit)

    @property
    def label(self) -> str:
        """Short resource label used for logs and metrics."""
        return "pokemon" if self.kind is ResourceKind.ENTITY else "pokemon_list"


@dataclass(frozen=True)
class CacheResult:
    """Serialized JSON payload plus where it came from."""

    payload: str
    status: CacheStatus
