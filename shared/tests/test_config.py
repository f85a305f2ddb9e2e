"""
Unit tests for shared configuration.
"""

import pytest
from pydantic import ValidationError

from shared.config import get_config


class TestServiceConfig:
    """Test cases for ServiceConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("POKECACHE_CACHE_TTL_SECONDS", "POKECACHE_REDIS_URL", "POKECACHE_CACHE_BACKEND"):
            monkeypatch.delenv(name, raising=False)

        config = get_config("pokemon")

        assert config.service_name == "pokemon"
        assert config.port == 3000
        assert config.cache_ttl_seconds == 300
        assert config.default_list_limit == 100
        assert config.redis_url == "redis://localhost:6379/0"
        assert config.cache_backend == "redis"
        assert config.upstream_base_url == "https://pokeapi.co/api/v2"
        assert config.single_flight is False
        assert config.static_dir is None

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("POKECACHE_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("POKECACHE_REDIS_URL", "redis://valkey:6379/2")
        monkeypatch.setenv("POKECACHE_SINGLE_FLIGHT", "true")

        config = get_config("pokemon")

        assert config.cache_ttl_seconds == 60
        assert config.redis_url == "redis://valkey:6379/2"
        assert config.single_flight is True

    def test_overrides_win_over_environment(self, monkeypatch):
        monkeypatch.setenv("POKECACHE_UPSTREAM_TIMEOUT", "9")

        config = get_config("pokemon", upstream_timeout=2.5)

        assert config.upstream_timeout == 2.5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"cache_ttl_seconds": 0},
            {"upstream_timeout": -1},
            {"cache_backend": "memcached"},
        ],
    )
    def test_rejects_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            get_config("pokemon", **overrides)
