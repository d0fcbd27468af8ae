"""JSON serialization utilities for cache entries."""

import hashlib
import json
import logging
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    """Decoded form of a stored cache envelope."""

    model_config = ConfigDict(populate_by_name=True)

    data: Any
    written_at_ms: int = Field(
        validation_alias=AliasChoices("writtenAtMs", "timestamp", "written_at_ms")
    )
    expiry_ms: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("expiryMs", "expiry_ms"),
    )

    def is_stale(self, now_ms: int) -> bool:
        """An entry without expiry never goes stale."""
        if self.expiry_ms is None:
            return False
        return now_ms - self.written_at_ms > self.expiry_ms


def json_serializer(obj: Any) -> Any:
    """
    JSON fallback for values the json module does not handle natively:
    - Pydantic BaseModel objects (dumped in JSON mode)
    - Enum members (their value)

    Anything else raises TypeError so the caller sees a serialization failure.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    elif isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Cannot serialize object {obj!r} of type {type(obj)}")


def encode_entry(value: Any, written_at_ms: int, expiry_ms: int | None = None) -> str:
    """Encode a value and its metadata as the stored JSON envelope.

    Raises TypeError, ValueError or RecursionError when value is not
    JSON-representable, and pydantic.ValidationError (a ValueError) when the
    metadata would not decode again, e.g. a negative or fractional expiry.
    """
    entry = CacheEntry(data=None, written_at_ms=written_at_ms, expiry_ms=expiry_ms)
    envelope: dict[str, Any] = {"data": value, "writtenAtMs": entry.written_at_ms}
    if entry.expiry_ms is not None:
        envelope["expiryMs"] = entry.expiry_ms
    return json.dumps(envelope, default=json_serializer)


def decode_entry(raw: str) -> CacheEntry:
    """Decode a stored envelope.

    Parsed with the json module, the same one that encodes, so anything
    encode_entry writes reads back. Raises json.JSONDecodeError on malformed
    text and pydantic.ValidationError on a malformed envelope.
    """
    return CacheEntry.model_validate(json.loads(raw))


def cache_json_serializer(obj: Any) -> Any:
    """
    Lenient serializer for key hashing: ignores bytes and falls back to str()
    for anything json_serializer rejects.
    """
    if isinstance(obj, bytes):
        return None

    try:
        return json_serializer(obj)
    except (ValueError, TypeError, RecursionError):
        logger.warning(
            f"Failed to serialize object {obj} of type {type(obj)} for cache key hashing"
        )
        return str(obj)


def default_key_fn(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """Hash call arguments into a stable key fragment."""
    json_key = {
        "args": args,
        "kwargs": kwargs,
    }
    try:
        # Sort keys to ensure order independence
        json_str = json.dumps(json_key, default=cache_json_serializer, sort_keys=True)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning(
            f"Failed to serialize arguments for cache key generation: {e}. "
            f"Using fallback string representation."
        )
        fallback_str = str(json_key)
        json_str = json.dumps({"fallback": fallback_str}, sort_keys=True)

    return hashlib.md5(json_str.encode()).hexdigest()
