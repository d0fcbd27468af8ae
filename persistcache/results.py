"""Outcome types for cache operations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Kinds of failure a cache operation can absorb."""

    BACKEND = "backend"
    SERIALIZATION = "serialization"
    DESERIALIZATION = "deserialization"


class LookupStatus(str, Enum):
    """How a lookup was resolved."""

    HIT = "hit"
    MISS = "miss"
    EXPIRED_AND_PURGED = "expired_and_purged"
    # Stale entry whose purge failed; it is still in storage.
    EXPIRED = "expired"


@dataclass(frozen=True)
class CacheOutcome(Generic[T]):
    """Result of a single cache operation.

    The public cache methods collapse an outcome to its safe default
    (None, an empty list, or nothing), so this is the place to look when
    a test needs to know why an operation degraded.
    """

    operation: str
    key: str | None = None
    value: T | None = None
    status: LookupStatus | None = None
    error_kind: ErrorKind | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(
        cls,
        operation: str,
        key: str | None = None,
        value: Any = None,
        status: LookupStatus | None = None,
    ) -> "CacheOutcome":
        return cls(operation=operation, key=key, value=value, status=status)

    @classmethod
    def failure(
        cls,
        operation: str,
        key: str | None,
        error_kind: ErrorKind,
        reason: str,
        value: Any = None,
        status: LookupStatus | None = None,
    ) -> "CacheOutcome":
        return cls(
            operation=operation,
            key=key,
            value=value,
            status=status,
            error_kind=error_kind,
            reason=reason,
        )
