"""Abstract base class for storage providers."""

from abc import ABC, abstractmethod


class StorageProvider(ABC):
    """Asynchronous string key/value store the cache is layered over."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get raw value by key, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store raw value under key, replacing any previous value."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    async def remove_many(self, keys: list[str]) -> None:
        """Remove every key in keys."""
        pass

    @abstractmethod
    async def all_keys(self) -> list[str]:
        """List every key in the store, including keys the cache does not own."""
        pass
