"""Storage provider implementations."""

from .base import StorageProvider
from .disk import DiskStorage
from .memory import MemoryStorage

__all__ = ["DiskStorage", "MemoryStorage", "StorageProvider"]
