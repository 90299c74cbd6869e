"""Tests for waypost.server.cors — origin/method policy."""

import pytest

from waypost.server.cors import ALLOW_HEADERS, ALLOW_METHODS, CORSPolicy


class TestPolicy:
    def test_empty_is_disabled(self) -> None:
        assert not CORSPolicy.from_mapping({}).enabled

    def test_exact_origin(self) -> None:
        policy = CORSPolicy.from_mapping({"https://example.com": ["GET", "POST"]})
        assert policy.enabled
        assert policy.allows("https://example.com", "GET")
        assert policy.allows("https://example.com", "post")
        assert not policy.allows("https://example.com", "DELETE")
        assert not policy.allows("https://evil.example", "GET")

    def test_wildcard_matches_any_origin(self) -> None:
        policy = CORSPolicy.from_mapping({"*": ["GET"]})
        assert policy.allows("https://anything.example", "GET")
        assert policy.allows("", "GET")
        assert not policy.allows("https://anything.example", "POST")

    def test_any_entry_may_match(self) -> None:
        policy = CORSPolicy.from_mapping(
            {"https://example.com": ["GET", "POST"], "*": ["GET"]}
        )
        assert policy.allows("https://example.com", "POST")
        assert policy.allows("https://other.example", "GET")
        assert not policy.allows("https://other.example", "POST")

    def test_methods_normalized(self) -> None:
        policy = CORSPolicy.from_mapping({"*": ["get"]})
        assert policy.allows("x", "GET")

    def test_missing_origin_without_wildcard(self) -> None:
        policy = CORSPolicy.from_mapping({"https://example.com": ["GET"]})
        assert not policy.allows("", "GET")

    def test_read_only(self) -> None:
        policy = CORSPolicy.from_mapping({"*": ["GET"]})
        with pytest.raises(TypeError):
            policy.origins["https://x.example"] = frozenset({"GET"})  # type: ignore[index]


class TestHeaders:
    def test_headers_echo_origin(self) -> None:
        policy = CORSPolicy.from_mapping({"*": ["GET"]})
        headers = policy.headers_for("https://example.com")
        assert headers == {
            "Access-Control-Allow-Origin": "https://example.com",
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }

    def test_allow_methods_lists_every_verb(self) -> None:
        for verb in ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"):
            assert verb in ALLOW_METHODS
        assert ALLOW_HEADERS == "Content-Type, Authorization"
