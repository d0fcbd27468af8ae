"""Tests for entry encoding and key hashing."""

import json
import logging
from datetime import datetime
from enum import Enum

import pytest
from pydantic import BaseModel, ValidationError

from persistcache.serializers import (
    CacheEntry,
    cache_json_serializer,
    decode_entry,
    default_key_fn,
    encode_entry,
    json_serializer,
)
from persistcache.utils import generate_cache_key


class Status(Enum):
    ACTIVE = "active"


class Reading(BaseModel):
    label: str
    taken_at: datetime


class TestJsonSerializer:
    def test_pydantic_model(self):
        reading = Reading(label="a", taken_at=datetime(2024, 1, 2, 3, 4, 5))
        assert json_serializer(reading) == {
            "label": "a",
            "taken_at": "2024-01-02T03:04:05",
        }

    def test_enum(self):
        assert json_serializer(Status.ACTIVE) == "active"

    @pytest.mark.parametrize("value", [object(), {1, 2}, b"bytes", lambda: None])
    def test_rejects_other_types(self, value):
        with pytest.raises(TypeError):
            json_serializer(value)


class TestEncodeEntry:
    def test_envelope_fields(self):
        raw = encode_entry({"a": 1}, 1000, 50)
        assert json.loads(raw) == {"data": {"a": 1}, "writtenAtMs": 1000, "expiryMs": 50}

    def test_no_expiry(self):
        assert json.loads(encode_entry("x", 1000)) == {"data": "x", "writtenAtMs": 1000}

    def test_none_payload(self):
        assert json.loads(encode_entry(None, 1)) == {"data": None, "writtenAtMs": 1}

    def test_unserializable(self):
        with pytest.raises(TypeError):
            encode_entry(object(), 1)

    @pytest.mark.parametrize("expiry_ms", [-5, 1.5])
    def test_rejects_expiry_that_would_not_decode(self, expiry_ms):
        with pytest.raises(ValidationError):
            encode_entry("x", 1, expiry_ms)

    def test_cyclic(self):
        cyclic: dict = {}
        cyclic["self"] = cyclic
        with pytest.raises(ValueError):
            encode_entry(cyclic, 1)


class TestDecodeEntry:
    def test_decodes_envelope(self):
        entry = decode_entry('{"data": [1, 2], "writtenAtMs": 10, "expiryMs": 5}')
        assert entry.data == [1, 2]
        assert entry.written_at_ms == 10
        assert entry.expiry_ms == 5

    def test_missing_expiry(self):
        assert decode_entry('{"data": 1, "writtenAtMs": 10}').expiry_ms is None

    def test_null_expiry(self):
        raw = '{"data": 1, "writtenAtMs": 10, "expiryMs": null}'
        assert decode_entry(raw).expiry_ms is None

    def test_legacy_timestamp(self):
        assert decode_entry('{"data": 1, "timestamp": 10}').written_at_ms == 10

    def test_round_trip(self):
        value = {"list": [1, 2.5, "x", None, True], "nested": {"k": []}}
        entry = decode_entry(encode_entry(value, 123, 456))
        assert entry.data == value
        assert (entry.written_at_ms, entry.expiry_ms) == (123, 456)

    @pytest.mark.parametrize("raw", ["", "{", "not json"])
    def test_malformed_json(self, raw):
        with pytest.raises(json.JSONDecodeError):
            decode_entry(raw)

    @pytest.mark.parametrize(
        "raw",
        ["42", '{"data": 1}', '{"writtenAtMs": 1}', '{"data": 1, "writtenAtMs": 1, "expiryMs": -1}'],
    )
    def test_invalid_envelope(self, raw):
        with pytest.raises(ValidationError):
            decode_entry(raw)

    def test_deep_nesting_round_trip(self):
        value: list = []
        for _ in range(300):
            value = [value]
        assert decode_entry(encode_entry(value, 1)).data == value

    def test_lone_surrogate_round_trip(self):
        assert decode_entry(encode_entry("a\ud800b", 1)).data == "a\ud800b"


class TestCacheEntryStaleness:
    def test_without_expiry_never_stale(self):
        entry = CacheEntry(data=1, written_at_ms=0)
        assert entry.is_stale(10**15) is False

    def test_boundary_is_live(self):
        entry = CacheEntry(data=1, written_at_ms=1000, expiry_ms=100)
        assert entry.is_stale(1100) is False
        assert entry.is_stale(1101) is True


class TestKeyHashing:
    def test_cache_json_serializer_drops_bytes(self):
        assert cache_json_serializer(b"abc") is None

    def test_cache_json_serializer_falls_back_to_str(self, caplog):
        class Opaque:
            def __str__(self):
                return "opaque"

        with caplog.at_level(logging.WARNING, logger="persistcache.serializers"):
            assert cache_json_serializer(Opaque()) == "opaque"

        assert caplog.records[0].name == "persistcache.serializers"

    def test_generate_cache_key_format(self):
        key = generate_cache_key("totals", (1,), {"b": 2})
        assert key == f"totals:{default_key_fn((1,), {'b': 2})}"

    def test_default_key_fn_is_stable_and_order_independent(self):
        first = default_key_fn((1, "a"), {"x": 1, "y": 2})
        second = default_key_fn((1, "a"), {"y": 2, "x": 1})
        assert first == second
        assert len(first) == 32

    def test_default_key_fn_distinguishes_arguments(self):
        assert default_key_fn((1,), {}) != default_key_fn((2,), {})

    def test_default_key_fn_handles_cycles(self):
        cyclic: list = []
        cyclic.append(cyclic)
        assert len(default_key_fn((cyclic,), {})) == 32
