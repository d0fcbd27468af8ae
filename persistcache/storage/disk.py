"""Disk-based storage provider using diskcache."""

import asyncio
from pathlib import Path

import diskcache

from .base import StorageProvider


class DiskStorage(StorageProvider):
    """Disk-based storage provider using diskcache.

    diskcache is synchronous, so every call is pushed to a worker thread
    to keep the event loop free while the disk is touched.
    """

    def __init__(self, cache_dir: str = "./.cache"):
        """Initialize disk storage."""
        self.cache_dir = cache_dir
        Path(cache_dir).mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(cache_dir)

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._cache.get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._cache.set, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._cache.delete, key)

    async def remove_many(self, keys: list[str]) -> None:
        await asyncio.to_thread(self._remove_many, keys)

    async def all_keys(self) -> list[str]:
        return await asyncio.to_thread(lambda: list(self._cache))

    def _remove_many(self, keys: list[str]) -> None:
        with self._cache.transact():
            for key in keys:
                self._cache.delete(key)

    def close(self) -> None:
        """Close the underlying diskcache."""
        self._cache.close()

    def __del__(self):
        """Close the cache when the object is destroyed."""
        if hasattr(self, "_cache"):
            self._cache.close()
