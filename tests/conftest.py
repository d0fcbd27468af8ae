"""Pytest configuration and fixtures for persistcache tests."""

import os
import shutil
import tempfile

import pytest

from persistcache.core import PersistentCache
from persistcache.storage.disk import DiskStorage
from persistcache.storage.memory import MemoryStorage


class FakeClock:
    """Manually advanced clock in epoch milliseconds."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FaultyStorage(MemoryStorage):
    """Memory storage that raises from the operations named in fail_on."""

    def __init__(self, fail_on: set[str] | None = None):
        super().__init__()
        self.fail_on = set(fail_on or ())
        self.calls: list[str] = []

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise OSError(f"injected {operation} failure")

    async def get(self, key):
        self._maybe_fail("get")
        return await super().get(key)

    async def set(self, key, value):
        self._maybe_fail("set")
        await super().set(key, value)

    async def remove(self, key):
        self._maybe_fail("remove")
        await super().remove(key)

    async def remove_many(self, keys):
        self._maybe_fail("remove_many")
        await super().remove_many(keys)

    async def all_keys(self):
        self._maybe_fail("all_keys")
        return await super().all_keys()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PERSISTCACHE_* variables from the host out of tests."""
    for key in list(os.environ):
        if key.startswith("PERSISTCACHE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_storage():
    """Provide a fresh memory storage for testing."""
    return MemoryStorage()


@pytest.fixture
def faulty_storage():
    return FaultyStorage()


@pytest.fixture
def cache(memory_storage, clock):
    """Provide a cache over memory storage driven by the fake clock."""
    return PersistentCache(memory_storage, clock=clock)


@pytest.fixture
def temp_cache_dir():
    """Provide a temporary directory for disk storage tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def disk_storage(temp_cache_dir):
    """Provide a disk storage with temporary directory."""
    storage = DiskStorage(cache_dir=temp_cache_dir)
    yield storage
    storage.close()
