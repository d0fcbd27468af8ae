"""Namespaced TTL cache over an asynchronous storage provider."""

import json
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from .results import CacheOutcome, ErrorKind, LookupStatus
from .serializers import decode_entry, encode_entry
from .storage import StorageProvider
from .utils import now_ms

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "cache_"


def _validate_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError(f"Cache key must be a non-empty string, got {key!r}")


class PersistentCache:
    """
    Best-effort cache of JSON-representable values with optional expiry.

    Every logical key is stored under ``prefix + key`` and nothing outside
    that prefix is ever read, written or deleted. Storage failures,
    unserializable values and corrupt entries never propagate: the public
    methods log them and return their safe default, while the ``try_*`` and
    ``lookup`` methods report them as a CacheOutcome.

    The cache holds no locks. Concurrent writes to one key race in the
    storage provider and the last one to land wins.

    Args:
        storage: Storage provider the entries live in
        prefix: Namespace prefix applied to every logical key
        default_expiry_ms: Lifetime used when set() is given none
        clock: Returns the current time in epoch milliseconds
        debug: Log hits, misses and writes at INFO
    """

    def __init__(
        self,
        storage: StorageProvider,
        *,
        prefix: str = DEFAULT_PREFIX,
        default_expiry_ms: int | None = None,
        clock: Callable[[], int] = now_ms,
        debug: bool = False,
    ):
        if not prefix:
            raise ValueError("Cache prefix must be a non-empty string")
        self.storage = storage
        self.prefix = prefix
        self.default_expiry_ms = default_expiry_ms
        self.debug = debug
        self._clock = clock
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "sets": 0,
            "removes": 0,
            "errors": 0,
        }

    def _storage_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _failure(
        self,
        operation: str,
        key: str | None,
        error_kind: ErrorKind,
        error: BaseException,
        status: LookupStatus | None = None,
    ) -> CacheOutcome:
        self._stats["errors"] += 1
        reason = f"{type(error).__name__}: {error}"
        logger.warning(
            f"Cache {operation} failed for key {key!r} ({error_kind.value}): {reason}"
        )
        return CacheOutcome.failure(operation, key, error_kind, reason, status=status)

    # Outcome-returning operations

    async def try_set(
        self, key: str, value: Any, *, expiry_ms: int | None = None
    ) -> CacheOutcome[None]:
        """Write value under key, replacing any previous entry."""
        _validate_key(key)
        if expiry_ms is None:
            expiry_ms = self.default_expiry_ms

        try:
            raw = encode_entry(value, self._clock(), expiry_ms)
        except (TypeError, ValueError, RecursionError) as e:
            return self._failure("set", key, ErrorKind.SERIALIZATION, e)

        try:
            await self.storage.set(self._storage_key(key), raw)
        except Exception as e:
            return self._failure("set", key, ErrorKind.BACKEND, e)

        self._stats["sets"] += 1
        if self.debug:
            logger.info(f"Cached {key} (expiry_ms={expiry_ms})")
        return CacheOutcome.success("set", key)

    async def lookup(self, key: str) -> CacheOutcome[Any]:
        """
        Resolve key to a hit, miss, or expiry.

        Reading a stale entry deletes it from storage, and the delete is
        awaited before this returns, so a later keys() never lists it.
        """
        _validate_key(key)
        storage_key = self._storage_key(key)

        try:
            raw = await self.storage.get(storage_key)
        except Exception as e:
            self._stats["misses"] += 1
            return self._failure(
                "get", key, ErrorKind.BACKEND, e, status=LookupStatus.MISS
            )

        if raw is None:
            self._stats["misses"] += 1
            if self.debug:
                logger.info(f"Cache miss: {key}")
            return CacheOutcome.success("get", key, status=LookupStatus.MISS)

        try:
            entry = decode_entry(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            self._stats["misses"] += 1
            return self._failure(
                "get", key, ErrorKind.DESERIALIZATION, e, status=LookupStatus.MISS
            )

        if entry.is_stale(self._clock()):
            self._stats["misses"] += 1
            self._stats["expired"] += 1
            try:
                await self.storage.remove(storage_key)
            except Exception as e:
                return self._failure(
                    "get", key, ErrorKind.BACKEND, e, status=LookupStatus.EXPIRED
                )
            if self.debug:
                logger.info(f"Cache entry expired and purged: {key}")
            return CacheOutcome.success(
                "get", key, status=LookupStatus.EXPIRED_AND_PURGED
            )

        self._stats["hits"] += 1
        if self.debug:
            logger.info(f"Cache hit: {key}")
        return CacheOutcome.success("get", key, value=entry.data, status=LookupStatus.HIT)

    async def try_remove(self, key: str) -> CacheOutcome[None]:
        """Delete key. Deleting an absent key succeeds."""
        _validate_key(key)
        try:
            await self.storage.remove(self._storage_key(key))
        except Exception as e:
            return self._failure("remove", key, ErrorKind.BACKEND, e)

        self._stats["removes"] += 1
        return CacheOutcome.success("remove", key)

    async def try_keys(self) -> CacheOutcome[list[str]]:
        """List logical keys physically present, stale or not."""
        try:
            raw_keys = await self.storage.all_keys()
            start = len(self.prefix)
            keys = [raw[start:] for raw in raw_keys if raw.startswith(self.prefix)]
        except Exception as e:
            return self._failure("keys", None, ErrorKind.BACKEND, e)

        return CacheOutcome.success("keys", value=keys)

    async def try_clear(self) -> CacheOutcome[int]:
        """Remove every entry under the prefix. The value is the number targeted."""
        try:
            raw_keys = await self.storage.all_keys()
            owned = [raw for raw in raw_keys if raw.startswith(self.prefix)]
            if owned:
                await self.storage.remove_many(owned)
        except Exception as e:
            return self._failure("clear", None, ErrorKind.BACKEND, e)

        self._stats["removes"] += len(owned)
        if self.debug:
            logger.info(f"Cleared {len(owned)} cache entries")
        return CacheOutcome.success("clear", value=len(owned))

    # Public best-effort operations

    async def set(self, key: str, value: Any, *, expiry_ms: int | None = None) -> None:
        """Store value under key. Never raises for storage or encoding failures."""
        await self.try_set(key, value, expiry_ms=expiry_ms)

    async def get(self, key: str) -> Any | None:
        """Return the live value for key, or None. May delete a stale entry."""
        outcome = await self.lookup(key)
        return outcome.value

    async def remove(self, key: str) -> None:
        await self.try_remove(key)

    async def clear(self) -> None:
        await self.try_clear()

    async def keys(self) -> list[str]:
        outcome = await self.try_keys()
        return outcome.value if outcome.ok else []

    def get_stats(self) -> dict[str, Any]:
        """Get cache hit/miss statistics."""
        total_calls = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / total_calls if total_calls > 0 else 0

        return {
            "total_calls": total_calls,
            "hit_rate": hit_rate,
            **self._stats,
        }

    def reset_stats(self) -> None:
        self._stats = self._empty_stats()
