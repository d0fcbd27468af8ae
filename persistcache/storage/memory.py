"""In-memory storage provider."""

from .base import StorageProvider


class MemoryStorage(StorageProvider):
    """In-memory storage provider."""

    def __init__(self):
        """Initialize memory storage."""
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def remove_many(self, keys: list[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    async def all_keys(self) -> list[str]:
        return list(self._data)
