# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for URI resolution and JSON pointer helpers."""

from __future__ import annotations

import pytest

from pyjsv.uri import (
    fragment_for_pointer,
    is_absolute,
    join_pointer,
    normalize_uri,
    parse_index,
    resolve_uri,
    split_fragment,
    split_pointer,
)

RFC_BASE = "http://a/b/c/d;p?q"


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("g", "http://a/b/c/g"),
        ("./g", "http://a/b/c/g"),
        ("g/", "http://a/b/c/g/"),
        ("/g", "http://a/g"),
        ("//g", "http://g"),
        ("?y", "http://a/b/c/d;p?y"),
        ("#s", "http://a/b/c/d;p?q#s"),
        ("", "http://a/b/c/d;p?q"),
        ("../g", "http://a/b/g"),
        ("../../g", "http://a/g"),
        ("../../../g", "http://a/g"),
        ("g:h", "g:h"),
    ],
)
def test_resolve_uri_follows_rfc3986(reference: str, expected: str) -> None:
    assert resolve_uri(RFC_BASE, reference) == expected


def test_resolve_uri_handles_non_hierarchical_schemes() -> None:
    assert resolve_uri("urn:example:root", "#foo") == "urn:example:root#foo"
    assert resolve_uri("json-schema:///", "item.json") == "json-schema:///item.json"
    assert resolve_uri("json-schema:///nested/root.json", "../other.json") == "json-schema:///other.json"


def test_split_fragment_decodes_percent_escapes() -> None:
    assert split_fragment("http://x/y#/a%20b") == ("http://x/y", "/a b")
    assert split_fragment("http://x/y") == ("http://x/y", "")


def test_normalize_uri_drops_empty_fragment() -> None:
    assert normalize_uri("http://json-schema.org/draft-07/schema#") == "http://json-schema.org/draft-07/schema"
    assert normalize_uri("http://x/y") == "http://x/y"


def test_is_absolute() -> None:
    assert is_absolute("urn:uuid:1234")
    assert not is_absolute("relative/path.json")


def test_split_pointer_unescapes_tokens() -> None:
    assert split_pointer("") == []
    assert split_pointer("/a~1b/c~0d/0") == ["a/b", "c~d", "0"]
    with pytest.raises(ValueError):
        split_pointer("no-slash")


def test_join_pointer_escapes_tokens() -> None:
    assert join_pointer("/properties", "a/b", 3) == "/properties/a~1b/3"
    assert join_pointer("/x") == "/x"


@pytest.mark.parametrize(("token", "expected"), [("0", 0), ("12", 12), ("01", None), ("+1", None), ("-1", None), ("", None)])
def test_parse_index_rejects_non_canonical_tokens(token: str, expected: int | None) -> None:
    assert parse_index(token) == expected


def test_fragment_for_pointer_quotes_unsafe_characters() -> None:
    assert fragment_for_pointer("/$defs/a b") == "/$defs/a%20b"
    assert fragment_for_pointer("/100%") == "/100%25"
