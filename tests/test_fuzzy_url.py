"""Tests for FuzzyURL parsing, subdomain extraction and query decoding."""

from __future__ import annotations

import dataclasses

import pytest

from intercepter import (
    FuzzyURL,
    InvalidURLError,
    extract_subdomain,
    fuzzy_equals,
    parse_query,
    parse_url,
)


class TestParse:
    def test_fields(self) -> None:
        url = FuzzyURL.parse("https://abc.domain.com/path?param=value")
        assert url.scheme == "https"
        assert url.host == "abc.domain.com"
        assert url.subdomain == "abc"
        assert url.path == "/path"
        assert url.query == (("param", ("value",)),)

    def test_parse_url_shorthand(self) -> None:
        assert parse_url("https://abc.domain.com/x") == FuzzyURL.parse(
            "https://abc.domain.com/x"
        )

    def test_empty_query(self) -> None:
        url = FuzzyURL.parse("https://abc.domain.com/path")
        assert url.query == ()
        assert url.query_params == {}

    def test_query_params_mapping(self) -> None:
        url = FuzzyURL.parse("https://abc.domain.com/path?b=2&a=1&a=3")
        assert url.query_params == {"a": ["1", "3"], "b": ["2"]}

    def test_path_kept_verbatim(self) -> None:
        url = FuzzyURL.parse("https://abc.domain.com/a%20b/")
        assert url.path == "/a%20b/"

    def test_host_case_preserved(self) -> None:
        url = FuzzyURL.parse("https://ABC.Domain.com/")
        assert url.host == "ABC.Domain.com"
        assert url.subdomain == "ABC"

    def test_port_and_userinfo_stripped_from_host(self) -> None:
        url = FuzzyURL.parse("https://user:pw@abc.domain.com:8443/")
        assert url.host == "abc.domain.com"

    def test_ipv6_host(self) -> None:
        url = FuzzyURL.parse("http://[::1]:8080/path")
        assert url.host == "::1"
        assert url.subdomain is None

    def test_frozen(self) -> None:
        url = FuzzyURL.parse("https://abc.domain.com/path")
        with pytest.raises(dataclasses.FrozenInstanceError):
            url.path = "/other"  # type: ignore[misc]

    def test_host_not_compared(self) -> None:
        a = FuzzyURL.parse("https://abc.domain.com/path")
        b = FuzzyURL.parse("https://abc.other.org/path")
        assert a.host != b.host
        assert a == b


class TestInvalidURL:
    @pytest.mark.parametrize(
        "raw",
        [
            "not a url",
            "/path/only",
            "http://",
            "http:///path",
            "mailto:user@domain.com",
            "http://[::1/path",
            "",
        ],
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidURLError):
            FuzzyURL.parse(raw)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidURLError, match="expected str"):
            FuzzyURL.parse(42)  # type: ignore[arg-type]

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            FuzzyURL.parse("no scheme here")

    def test_error_attributes(self) -> None:
        with pytest.raises(InvalidURLError) as exc_info:
            FuzzyURL.parse("http://")
        assert exc_info.value.url == "http://"
        assert exc_info.value.reason == "missing host"


class TestExtractSubdomain:
    def test_three_labels(self) -> None:
        assert extract_subdomain("abc.domain.com") == "abc"

    def test_hyphen_and_underscore(self) -> None:
        assert extract_subdomain("my-app_1.domain.com") == "my-app_1"

    def test_prefix_semantics(self) -> None:
        assert extract_subdomain("a.b.c.d") == "a"

    def test_two_labels(self) -> None:
        assert extract_subdomain("domain.com") is None

    def test_single_label(self) -> None:
        assert extract_subdomain("localhost") is None

    def test_ipv4_literal(self) -> None:
        assert extract_subdomain("127.0.0.1") is None

    def test_ipv6_literal(self) -> None:
        assert extract_subdomain("::1") is None

    def test_leading_dot(self) -> None:
        assert extract_subdomain(".domain.com") is None


class TestParseQuery:
    def test_sorted_by_key(self) -> None:
        assert parse_query("b=2&a=1") == (("a", ("1",)), ("b", ("2",)))

    def test_repeated_key_keeps_order(self) -> None:
        assert parse_query("a=2&a=1") == (("a", ("2", "1")),)

    def test_empty_value_kept(self) -> None:
        assert parse_query("a=") == (("a", ("",)),)

    def test_bare_key_has_no_values(self) -> None:
        assert parse_query("b") == (("b", ()),)

    def test_bare_key_then_value(self) -> None:
        assert parse_query("a&a=1") == (("a", ("1",)),)

    def test_value_containing_equals(self) -> None:
        assert parse_query("a=b=c") == (("a", ("b=c",)),)

    def test_decoding(self) -> None:
        assert parse_query("q=a+b%21") == (("q", ("a b!",)),)

    def test_utf8_decoding(self) -> None:
        assert parse_query("q=%C3%A9&k%C3%A9=1") == (("ké", ("1",)), ("q", ("é",)))

    def test_invalid_utf8_bytes_stay_distinct(self) -> None:
        assert parse_query("a=%ff") != parse_query("a=%fe")
        assert parse_query("a=%ff") != parse_query("a=%EF%BF%BD")

    def test_empty_pairs_skipped(self) -> None:
        assert parse_query("&&a=1&") == (("a", ("1",)),)

    def test_empty(self) -> None:
        assert parse_query("") == ()


class TestFuzzyEquals:
    def test_cross_environment(self) -> None:
        a = FuzzyURL.parse("https://abc.domain.com/path?param=value")
        b = FuzzyURL.parse("https://abc.domain.local/path?param=value")
        assert fuzzy_equals(a, b) is True

    def test_scheme_sensitive(self) -> None:
        a = FuzzyURL.parse("https://abc.domain.com/path")
        b = FuzzyURL.parse("http://abc.domain.com/path")
        assert fuzzy_equals(a, b) is False

    def test_agrees_with_eq(self) -> None:
        a = FuzzyURL.parse("https://abc.domain.com/path?a=1&b=2")
        b = FuzzyURL.parse("https://abc.domain.local/path?b=2&a=1")
        assert fuzzy_equals(a, b) is (a == b) is True
