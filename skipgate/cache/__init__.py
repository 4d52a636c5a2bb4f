"""Cache store factory and initialization."""

from __future__ import annotations

from typing import Optional

from ..config import SkipGateConfig, load_config
from ..errors import ConfigurationError
from .base import DUPLICATE_CACHE_ID, CacheStore
from .inmemory import InMemoryCacheStore
from .local import LocalCacheStore
from .models import CacheEntry


def get_cache_store(
    backend: Optional[str] = None, config: Optional[SkipGateConfig] = None
) -> CacheStore:
    """Factory function to get the configured cache store."""

    config = config or load_config()
    backend = (backend or config.cache.backend).lower()

    if backend == "inmemory":
        return InMemoryCacheStore(workspace=config.workspace)
    elif backend == "local":
        return LocalCacheStore(config.cache.directory, workspace=config.workspace)
    elif backend == "redis":
        from .redis import RedisCacheStore

        redis_conf = config.cache.redis
        return RedisCacheStore(
            host=redis_conf.host,
            port=redis_conf.port,
            db=redis_conf.db,
            password=redis_conf.password,
            namespace=redis_conf.namespace,
            ttl=redis_conf.ttl,
            max_entries=redis_conf.max_entries,
            workspace=config.workspace,
        )
    else:
        raise ConfigurationError(f"Unsupported cache backend: {backend}")


__all__ = [
    "CacheEntry",
    "CacheStore",
    "DUPLICATE_CACHE_ID",
    "InMemoryCacheStore",
    "LocalCacheStore",
    "get_cache_store",
]
