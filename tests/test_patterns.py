# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for ECMA-262 regular expression semantics in ``pattern`` keywords."""

from __future__ import annotations

import pytest

from pyjsv import InvalidSchema, is_valid, validator_for
from pyjsv.patterns import translate


@pytest.mark.parametrize(
    ("pattern", "instance", "expected"),
    [
        ("^\\d+$", "42", True),
        ("^\\d+$", "৪২", False),
        ("^[\\d]+$", "৪", False),
        ("^[\\D]+$", "a৪", True),
        ("^[\\D]+$", "a1", False),
        ("^\\w+$", "abc_1", True),
        ("^\\w+$", "é", False),
        ("^\\W$", "é", True),
        ("^\\s$", " ", True),
        ("^\\s$", "\u0085", False),
        ("^\\S$", "\u0085", True),
    ],
)
def test_character_classes_are_ascii(pattern: str, instance: str, expected: bool) -> None:
    assert is_valid({"pattern": pattern}, instance) is expected


def test_dollar_only_matches_at_the_end() -> None:
    assert is_valid({"pattern": "^abc$"}, "abc")
    assert not is_valid({"pattern": "^abc$"}, "abc\n")


def test_dot_excludes_line_terminators() -> None:
    assert is_valid({"pattern": "^.$"}, "x")
    for terminator in ("\n", "\r", "\u2028", "\u2029"):
        assert not is_valid({"pattern": "^.$"}, terminator)


def test_word_boundaries_use_ascii_word_characters() -> None:
    assert is_valid({"pattern": "\\bcat\\b"}, "écat")
    assert not is_valid({"pattern": "\\bcat\\b"}, "bobcat")
    assert is_valid({"pattern": "a\\Bb"}, "ab")


def test_unicode_property_escapes_compile() -> None:
    validator = validator_for({"pattern": "^\\p{L}+$"})

    assert validator.is_valid("élan")
    assert not validator.is_valid("123")
    assert is_valid({"pattern": "^\\P{Lu}+$"}, "abc")
    assert not is_valid({"pattern": "^\\P{Lu}+$"}, "aBc")


def test_control_and_braced_unicode_escapes() -> None:
    assert is_valid({"pattern": "^\\cJ$"}, "\n")
    assert is_valid({"pattern": "^\\u{1F600}$"}, "\U0001f600")
    assert is_valid({"pattern": "^\\u0041$"}, "A")


def test_empty_classes() -> None:
    assert not is_valid({"pattern": "[]"}, "a")
    assert is_valid({"pattern": "^[^]$"}, "\n")


def test_pattern_properties_use_the_same_semantics() -> None:
    schema = {"patternProperties": {"^\\d+$": False}}

    assert is_valid(schema, {"৪": 1})
    assert not is_valid(schema, {"4": 1})


def test_invalid_patterns_are_rejected() -> None:
    with pytest.raises(InvalidSchema, match="invalid regular expression"):
        validator_for({"pattern": "(ab"}, validate_schema=False)


def test_translate_rewrites_ecma_only_syntax() -> None:
    assert translate("^\\d$") == "^[\\U00000030-\\U00000039]\\Z"
    assert translate("[\\s-]") == "[" + translate("\\s")[1:-1] + "-]"
    assert translate("[$.]") == "[$.]"
    assert translate("\\p{L}") == "\\p{L}"
