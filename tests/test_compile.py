# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compiling the same schema twice yields validators that behave identically."""

from __future__ import annotations

import pytest

from pyjsv import CompileOptions, ValidationError, compile_schema

CORPUS: tuple[tuple[dict[str, object], tuple[object, ...]], ...] = (
    (
        {
            "$id": "https://example.com/tree",
            "type": "object",
            "properties": {"value": {"type": "integer"}, "children": {"items": {"$ref": "#"}}},
            "required": ["value"],
        },
        ({"value": 1}, {"value": 1, "children": [{"value": "x"}, {}]}, [], None),
    ),
    (
        {
            "$defs": {"named": {"properties": {"name": {"type": "string"}}}},
            "allOf": [{"$ref": "#/$defs/named"}],
            "properties": {"id": {"type": "integer"}},
            "unevaluatedProperties": False,
        },
        ({"name": "a", "id": 1}, {"name": 1, "extra": True}, {"other": 2}, "x"),
    ),
    (
        {"prefixItems": [{"type": "string"}], "contains": {"type": "integer"}, "unevaluatedItems": False},
        (["a", 1], ["a", 1, None], [1], ["a"]),
    ),
    (
        {
            "$id": "https://example.com/list",
            "$dynamicAnchor": "item",
            "type": ["array", "integer"],
            "items": {"$dynamicRef": "#item"},
        },
        ([1, [2, [3]]], [1, ["x"]], "x"),
    ),
    (
        {"oneOf": [{"multipleOf": 3}, {"multipleOf": 5}], "not": {"const": 0}},
        (3, 5, 15, 0, 7),
    ),
)


def _report(errors: list[ValidationError]) -> list[tuple[object, ...]]:
    return [
        (error.kind, error.message, error.instance_path, error.schema_path, error.absolute_keyword_location)
        for error in errors
    ]


@pytest.mark.parametrize(("schema", "instances"), CORPUS)
def test_compiling_twice_gives_the_same_verdicts(schema: dict[str, object], instances: tuple[object, ...]) -> None:
    options = CompileOptions()
    first = compile_schema(schema, options)
    second = compile_schema(schema, options)

    assert first is not second
    assert sorted(first.nodes) == sorted(second.nodes)
    for instance in instances:
        assert first.is_valid(instance) == second.is_valid(instance)
        assert _report(list(first.iter_errors(instance))) == _report(list(second.iter_errors(instance)))


def test_compiling_does_not_modify_the_schema() -> None:
    schema, instances = CORPUS[1]
    snapshot = repr(schema)

    compile_schema(schema, CompileOptions())
    validator = compile_schema(schema, CompileOptions())

    assert repr(schema) == snapshot
    assert [validator.is_valid(instance) for instance in instances] == [True, False, False, True]
