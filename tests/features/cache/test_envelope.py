"""Tests for the stored response envelope."""

import pytest

from redisync.core.exceptions import CacheSerializationError
from redisync.features.cache.entities.envelope import (
    ENVELOPE_VERSION,
    CachedResponseEnvelope,
    map_to_headers,
)


@pytest.fixture
def envelope():
    return CachedResponseEnvelope(
        status=200,
        headers={"content-type": ["application/json"], "vary": ["Accept", "Accept-Language"]},
        body=b"\x00\xffbinary",
        stored_at=1700000000.5,
        etag='"abc"',
    )


class TestCachedResponseEnvelope:
    """Test envelope serialization."""

    def test_binary_body_survives_dict_form(self, envelope):
        """Bodies are base64 encoded and decoded intact."""
        data = envelope.to_dict()
        assert data["v"] == ENVELOPE_VERSION
        assert isinstance(data["body"], str)
        assert CachedResponseEnvelope.from_dict(data) == envelope

    def test_header_returns_first_value(self, envelope):
        """Lookup is case-insensitive and returns the first value."""
        assert envelope.header("Vary") == "Accept"
        assert envelope.header("x-missing") is None

    def test_header_pairs_keep_duplicates(self, envelope):
        """Multi-valued headers expand to one pair per value."""
        assert ("vary", "Accept-Language") in envelope.header_pairs()

    @pytest.mark.parametrize(
        "payload",
        [
            "not a dict",
            {"status": 200},
            {"v": 99, "status": 200, "headers": {}, "body": "", "stored_at": 0},
            {"v": ENVELOPE_VERSION, "status": "200", "headers": {}, "body": "", "stored_at": 0},
            {"v": ENVELOPE_VERSION, "status": 200, "headers": [], "body": "", "stored_at": 0},
            {"v": ENVELOPE_VERSION, "status": 200, "headers": {}, "body": "%%%", "stored_at": 0},
            {"v": ENVELOPE_VERSION, "status": 200, "headers": {}, "body": ""},
            {"v": ENVELOPE_VERSION, "status": 200, "headers": {"content-type": "application/json"}, "body": "", "stored_at": 0},
            {"v": ENVELOPE_VERSION, "status": 200, "headers": {"x-count": [1]}, "body": "", "stored_at": 0},
        ],
    )
    def test_schema_mismatch_raises(self, payload):
        """Anything that is not a well-formed envelope is rejected."""
        with pytest.raises(CacheSerializationError):
            CachedResponseEnvelope.from_dict(payload)


def test_map_to_headers_expands_in_order():
    """Multi-valued headers expand to one pair per value, in order."""
    grouped = {"set-thing": ["a", "b"], "x": ["1"]}
    assert map_to_headers(grouped) == [("set-thing", "a"), ("set-thing", "b"), ("x", "1")]
