"""Tests for cache key derivation."""

import hashlib

import pytest

from redisync.features.cache.utils.key_generator import (
    KeyGenerator,
    build_query,
    canonical_request,
    derive_key,
    params_from_pairs,
    sort_params,
)


class TestCanonicalRequest:
    """Test the canonical string keys are hashed from."""

    def test_no_query_has_no_question_mark(self):
        """A request without parameters ends at the path."""
        assert canonical_request("http", "get", "/users") == "http:GET:/users"

    def test_prefix_trailing_colon_is_not_doubled(self):
        """Prefixes with or without a trailing colon produce the same form."""
        assert canonical_request("http:", "GET", "/users") == canonical_request("http", "GET", "/users")

    def test_params_are_sorted_and_encoded(self):
        """Keys are sorted and values use RFC 3986 percent-encoding."""
        canonical = canonical_request("http", "GET", "/search", {"q": "a b", "page": 2})
        assert canonical == "http:GET:/search?page=2&q=a%20b"

    def test_ignored_params_are_dropped(self):
        """Ignored names never reach the canonical form."""
        canonical = canonical_request("http", "GET", "/users", {"nonce": "x1", "id": 5}, ["nonce"])
        assert canonical == "http:GET:/users?id=5"

    def test_only_ignored_params_is_same_as_no_query(self):
        """Dropping every parameter leaves the bare path."""
        assert canonical_request("http", "GET", "/users", {"_ts": "1"}, ["_ts"]) == "http:GET:/users"

    def test_nested_params_are_sorted_recursively(self):
        """Nested mappings sort at every level; list order is kept."""
        canonical = canonical_request("http", "GET", "/s", {"f": {"b": 1, "a": [3, 2]}})
        assert canonical == "http:GET:/s?f%5Ba%5D%5B0%5D=3&f%5Ba%5D%5B1%5D=2&f%5Bb%5D=1"

    def test_booleans_encode_as_digits(self):
        """Booleans are rendered as 1 and 0."""
        assert build_query({"active": True, "deleted": False}) == "active=1&deleted=0"

    def test_none_values_are_skipped(self):
        """None parameters do not appear in the query."""
        assert build_query({"a": None, "b": "x"}) == "b=x"


class TestDeriveKey:
    """Test key hashing."""

    def test_key_is_md5_of_canonical_form(self):
        """Keys are hex MD5 digests of the canonical request."""
        expected = hashlib.md5(b"http:GET:/users?id=5").hexdigest()
        assert derive_key("http", "GET", "/users", {"id": 5}) == expected

    def test_parameter_order_does_not_matter(self):
        """Same parameters in a different order produce the same key."""
        first = derive_key("http", "GET", "/users", {"a": 1, "b": {"y": 2, "x": 1}})
        second = derive_key("http", "GET", "/users", {"b": {"x": 1, "y": 2}, "a": 1})
        assert first == second

    def test_ignored_param_value_does_not_change_key(self):
        """Cache busters do not fragment the cache."""
        first = derive_key("http", "GET", "/users", {"id": 1, "nonce": "abc"}, ["nonce"])
        second = derive_key("http", "GET", "/users", {"id": 1, "nonce": "xyz"}, ["nonce"])
        assert first == second

    @pytest.mark.parametrize(
        "other",
        [
            ("POST", "/users", {"id": 1}),
            ("GET", "/accounts", {"id": 1}),
            ("GET", "/users", {"id": 2}),
        ],
    )
    def test_distinct_requests_have_distinct_keys(self, other):
        """Method, path and parameter values all take part in the key."""
        assert derive_key("http", "GET", "/users", {"id": 1}) != derive_key("http", *other)

    def test_method_case_is_normalized(self):
        """Lower-case methods are upper-cased before hashing."""
        assert derive_key("http", "get", "/users") == derive_key("http", "GET", "/users")


class TestKeyGenerator:
    """Test the bound generator."""

    def test_from_parts_uses_bound_settings(self):
        """The generator applies its prefix and ignored parameters."""
        generator = KeyGenerator(prefix="api:", ignored_params=["_ts"])
        key = generator.from_parts("GET", "/items", {"_ts": "123", "page": 1})
        assert key == derive_key("api", "GET", "/items", {"page": 1})
        assert generator.canonical("GET", "/items", {"_ts": "1"}) == "api:GET:/items"

    def test_params_from_pairs_groups_repeated_names(self):
        """Repeated query names become lists in arrival order."""
        params = params_from_pairs([("tag", "b"), ("id", "1"), ("tag", "a")])
        assert params == {"tag": ["b", "a"], "id": "1"}

    def test_sort_params_keeps_sequence_order(self):
        """Only mappings are sorted."""
        assert sort_params({"z": [3, 1], "a": {"d": 1, "c": 2}}) == {"a": {"c": 2, "d": 1}, "z": [3, 1]}
