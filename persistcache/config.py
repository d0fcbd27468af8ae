"""Configuration and composition for persistcache."""

import os
from dataclasses import dataclass
from typing import Any

from .core import DEFAULT_PREFIX, PersistentCache
from .storage import DiskStorage, MemoryStorage, StorageProvider


@dataclass
class CacheConfig:
    """Configuration for cache behavior."""

    storage: str = "disk"
    cache_dir: str = "./.cache"
    prefix: str = DEFAULT_PREFIX
    default_expiry_ms: int | None = None
    debug: bool = False

    def __post_init__(self):
        """Load configuration from environment variables."""
        self.storage = os.getenv("PERSISTCACHE_STORAGE", self.storage)
        self.cache_dir = os.getenv("PERSISTCACHE_CACHE_DIR", self.cache_dir)
        self.prefix = os.getenv("PERSISTCACHE_PREFIX", self.prefix)
        self.default_expiry_ms = self._get_int_env(
            "PERSISTCACHE_DEFAULT_EXPIRY_MS", self.default_expiry_ms
        )
        self.debug = self._get_bool_env("PERSISTCACHE_DEBUG", self.debug)

    def _get_bool_env(self, key: str, default: bool) -> bool:
        """Get boolean value from environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def _get_int_env(self, key: str, default: int | None) -> int | None:
        """Get integer value from environment variable."""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default


def create_storage(storage: str, **kwargs: Any) -> StorageProvider:
    """Create a storage provider by name."""
    if storage == "disk":
        return DiskStorage(cache_dir=kwargs.get("cache_dir", "./.cache"))
    elif storage == "memory":
        return MemoryStorage()
    else:
        raise ValueError(f"Unknown storage: {storage}")


def build_cache(
    config: CacheConfig | None = None, storage: StorageProvider | None = None
) -> PersistentCache:
    """
    Compose a PersistentCache from configuration.

    The caller owns the returned cache and passes it to whatever needs it.
    An explicit storage provider takes precedence over ``config.storage``.
    """
    config = config or CacheConfig()
    if storage is None:
        storage = create_storage(config.storage, cache_dir=config.cache_dir)
    return PersistentCache(
        storage,
        prefix=config.prefix,
        default_expiry_ms=config.default_expiry_ms,
        debug=config.debug,
    )
