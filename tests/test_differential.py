# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compare verdicts with the ``jsonschema`` reference implementation."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from jsonschema.validators import validator_for as reference_validator_for

from pyjsv import validator_for

DRAFTS = (
    "http://json-schema.org/draft-04/schema#",
    "http://json-schema.org/draft-06/schema#",
    "http://json-schema.org/draft-07/schema#",
    "https://json-schema.org/draft/2019-09/schema",
    "https://json-schema.org/draft/2020-12/schema",
)

CORPUS: tuple[tuple[dict[str, object], tuple[object, ...]], ...] = (
    (
        {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"], "additionalProperties": False},
        ({"a": "x"}, {"a": 1}, {}, {"a": "x", "b": 1}, [], "a", None),
    ),
    (
        {"type": ["integer", "null"], "minimum": 2, "maximum": 10, "multipleOf": 2},
        (None, 2, 3, 4.0, 12, 0, "4", True),
    ),
    (
        {"type": "array", "minItems": 1, "maxItems": 3, "uniqueItems": True, "items": {"type": "number"}},
        ([], [1], [1, 1], [1, 2, 3, 4], [1, "a"], [1, 1.0], [0, False]),
    ),
    (
        {"anyOf": [{"type": "string", "maxLength": 3}, {"type": "number", "minimum": 5}]},
        ("abc", "abcd", 5, 4, None, True),
    ),
    (
        {"oneOf": [{"multipleOf": 3}, {"multipleOf": 5}]},
        (3, 5, 15, 7, "x"),
    ),
    (
        {"allOf": [{"minLength": 2}, {"pattern": "^[a-z]+$"}], "not": {"enum": ["no"]}},
        ("ab", "a", "AB", "no", "yes", 1),
    ),
    (
        {"patternProperties": {"^x-": {"type": "integer"}}, "minProperties": 1, "maxProperties": 2},
        ({"x-a": 1}, {"x-a": "1"}, {}, {"a": 1, "b": 2, "c": 3}, {"b": None}),
    ),
    (
        {
            "definitions": {"node": {"type": "object", "properties": {"next": {"$ref": "#/definitions/node"}}}},
            "properties": {"head": {"$ref": "#/definitions/node"}},
        },
        ({"head": {"next": {"next": {}}}}, {"head": {"next": 1}}, {"head": []}),
    ),
    (
        {"enum": [1, "one", [1], {"a": None}, None]},
        (1, 1.0, "one", [1], [1.0], {"a": None}, None, True, [True], {"a": False}),
    ),
    (
        {"maxLength": 2, "minLength": 1},
        ("", "a", "ab", "abc", "\U0001f600", 5),
    ),
)

MODERN_CORPUS: tuple[tuple[dict[str, object], tuple[object, ...]], ...] = (
    (
        {"const": {"a": [1, 2]}, "exclusiveMinimum": 0},
        ({"a": [1, 2]}, {"a": [1.0, 2]}, {"a": [2, 1]}, 1),
    ),
    (
        {"contains": {"type": "string"}, "propertyNames": {"maxLength": 2}},
        (["a", 1], [1, 2], [], {"ab": 1}, {"abc": 1}),
    ),
    (
        {"if": {"type": "integer"}, "then": {"minimum": 10}, "else": {"type": "string"}},
        (10, 9, "x", None),
    ),
    (
        {"items": True, "additionalProperties": False, "properties": {"a": True, "b": False}},
        ({"a": 1}, {"b": 1}, {"c": 1}, {}),
    ),
)

LATEST_CORPUS: tuple[tuple[dict[str, object], tuple[object, ...]], ...] = (
    (
        {
            "properties": {"kind": {"type": "string"}},
            "allOf": [{"if": {"properties": {"kind": {"const": "a"}}}, "then": {"properties": {"a": True}}}],
            "unevaluatedProperties": False,
        },
        ({"kind": "a", "a": 1}, {"kind": "b", "a": 1}, {"kind": "b"}, {"z": 1}),
    ),
    (
        {"dependentRequired": {"a": ["b"]}, "dependentSchemas": {"c": {"required": ["d"]}}},
        ({"a": 1, "b": 1}, {"a": 1}, {"c": 1}, {"c": 1, "d": 1}, []),
    ),
    (
        {"contains": {"const": 1}, "minContains": 2, "maxContains": 3, "unevaluatedItems": {"type": "string"}},
        ([1, 1], [1, 1, "a"], [1, 1, 2], [1], [1, 1, 1, 1]),
    ),
    (
        {
            "$id": "https://example.com/list",
            "$dynamicAnchor": "item",
            "type": ["array", "integer"],
            "items": {"$dynamicRef": "#item"},
        },
        ([1, [2, [3]]], [1, ["x"]], 4, "x"),
    ),
)


def _cases(
    corpus: tuple[tuple[dict[str, object], tuple[object, ...]], ...], drafts: tuple[str, ...]
) -> Iterator[object]:
    for schema, instances in corpus:
        for draft in drafts:
            for instance in instances:
                yield pytest.param({"$schema": draft, **schema}, instance, id=f"{draft[-14:]}-{instance!r}")


def _agree(schema: dict[str, object], instance: object) -> None:
    reference = reference_validator_for(schema)(schema)
    assert validator_for(schema).is_valid(instance) is reference.is_valid(instance)


@pytest.mark.parametrize(("schema", "instance"), list(_cases(CORPUS, DRAFTS)))
def test_common_keywords_match_reference(schema: dict[str, object], instance: object) -> None:
    _agree(schema, instance)


@pytest.mark.parametrize(("schema", "instance"), list(_cases(MODERN_CORPUS, DRAFTS[2:])))
def test_modern_keywords_match_reference(schema: dict[str, object], instance: object) -> None:
    _agree(schema, instance)


@pytest.mark.parametrize(("schema", "instance"), list(_cases(LATEST_CORPUS, DRAFTS[-1:])))
def test_2020_12_keywords_match_reference(schema: dict[str, object], instance: object) -> None:
    _agree(schema, instance)
