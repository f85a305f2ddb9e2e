"""
Shared configuration management for the Pokémon Cache Proxy.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="POKECACHE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Cache store
    redis_url: str = Field(default="redis://localhost:6379/0")
    cache_backend: Literal["redis", "memory"] = Field(default="redis")
    cache_ttl_seconds: int = Field(default=300, gt=0)
    redis_socket_timeout: float = Field(default=5.0, gt=0)

    # Upstream API
    upstream_base_url: str = Field(default="https://pokeapi.co/api/v2")
    upstream_timeout: float = Field(default=5.0, gt=0)

    # List endpoint
    default_list_limit: int = Field(default=100, gt=0)
    max_list_limit: int = Field(default=2000, gt=0)

    # Coalesce concurrent misses for the same key
    single_flight: bool = Field(default=False)

    # Static assets mounted at "/" when set
    static_dir: Optional[str] = Field(default=None)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = 3000
    host: str = "0.0.0.0"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
