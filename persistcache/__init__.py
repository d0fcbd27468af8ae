"""persistcache - namespaced TTL cache over asynchronous key/value storage."""

__version__ = "0.1.0"

# Configuration
from .config import CacheConfig, build_cache, create_storage

# Core cache
from .core import DEFAULT_PREFIX, PersistentCache
from .decorators import cached
from .results import CacheOutcome, ErrorKind, LookupStatus

# Serialization (for advanced usage)
from .serializers import CacheEntry, decode_entry, encode_entry

# Storage providers
from .storage import DiskStorage, MemoryStorage, StorageProvider
from .utils import generate_cache_key, now_ms

__all__ = [
    "DEFAULT_PREFIX",
    "CacheConfig",
    "CacheEntry",
    "CacheOutcome",
    "DiskStorage",
    "ErrorKind",
    "LookupStatus",
    "MemoryStorage",
    "PersistentCache",
    "StorageProvider",
    "build_cache",
    "cached",
    "create_storage",
    "decode_entry",
    "encode_entry",
    "generate_cache_key",
    "now_ms",
]
