"""Tests for TTL rules, cacheability policy and header helpers."""

import pytest

from redisync.core.exceptions import ConfigurationError
from redisync.features.http_cache.entities.messages import CacheResponse
from redisync.features.http_cache.entities.policy import CachePolicy
from redisync.features.http_cache.entities.ttl_policy import TtlPolicy, TtlRule
from redisync.features.http_cache.services.http_cache_protocol import (
    cache_control_directives,
    if_none_match_satisfied,
    sanitize_headers,
)


class TestTtlPolicy:
    """Test path based TTL resolution."""

    @pytest.fixture
    def policy(self):
        return TtlPolicy(300, [("/fast/*", 1), ("#^/slow/.*$#", 60), ("/fast/special", 5)])

    @pytest.mark.parametrize(
        "path, ttl",
        [
            ("/fast/items", 1),
            ("/fast/special", 1),
            ("/slow/reports/7", 60),
            ("/slow", 300),
            ("/", 300),
        ],
    )
    def test_first_match_wins(self, policy, path, ttl):
        """Rules are checked in order and the default applies otherwise."""
        assert policy.resolve(path) == ttl

    def test_regex_rule_uses_search(self):
        """Delimited patterns are regular expressions, not anchored implicitly."""
        rule = TtlRule.parse("~reports~", 10)
        assert rule.matches("/api/reports/1")
        assert not rule.matches("/api/users")

    def test_invalid_regex_raises_configuration_error(self):
        """Broken regular expressions fail at construction."""
        with pytest.raises(ConfigurationError):
            TtlPolicy(60, [("#[unclosed#", 10)])

    def test_glob_is_case_sensitive(self):
        """Glob patterns match paths case-sensitively."""
        assert not TtlRule.parse("/Fast/*", 1).matches("/fast/x")


class TestCachePolicy:
    """Test content-type decisions."""

    def test_default_policy(self):
        """Defaults store 200 JSON responses for five minutes."""
        policy = CachePolicy()
        assert policy.status_whitelist == frozenset({200})
        assert policy.ttl_policy.resolve("/anything") == 300
        assert policy.content_type_allowed("application/json")
        assert not policy.content_type_allowed("text/html")

    def test_prefix_match_is_case_insensitive(self):
        """Configured types match as lower-cased prefixes."""
        policy = CachePolicy.create(allowed_content_types=["Text/"])
        assert policy.content_type_allowed("TEXT/csv")
        assert not policy.content_type_allowed("application/json")

    def test_empty_allow_list_rejects_everything(self):
        """An explicit empty list stores nothing."""
        assert not CachePolicy.create(allowed_content_types=[]).content_type_allowed("application/json")


class TestHeaderHelpers:
    """Test validator comparison and header filtering."""

    @pytest.mark.parametrize(
        "header, etag, expected",
        [
            ('"a"', '"a"', True),
            ('W/"a"', '"a"', True),
            ('"a"', 'W/"a"', True),
            ('"b", "a"', '"a"', True),
            ("*", '"a"', True),
            ('"b"', '"a"', False),
            ("", '"a"', False),
        ],
    )
    def test_if_none_match(self, header, etag, expected):
        """Weak comparison over a list of validators."""
        assert if_none_match_satisfied(header, etag) is expected

    def test_cache_control_directives(self):
        """Directive names are lower-cased without arguments."""
        assert cache_control_directives("Max-Age=60, No-Store,") == ["max-age", "no-store"]

    def test_sanitize_headers_keeps_order(self):
        """Dropped headers leave the rest in order with duplicates."""
        headers = [
            ("Vary", "Accept"),
            ("Transfer-Encoding", "chunked"),
            ("Vary", "Origin"),
            ("Age", "10"),
            ("X-RediSync-Cache", "MISS"),
        ]
        assert sanitize_headers(headers) == [("Vary", "Accept"), ("Vary", "Origin")]

    def test_response_header_joins_values(self):
        """Repeated headers read back joined."""
        response = CacheResponse(200, [("Vary", "Accept"), ("vary", "Origin")])
        assert response.header("VARY") == "Accept, Origin"
        assert response.with_header("Vary", "*").headers == [("Vary", "*")]
