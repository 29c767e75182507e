# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for $dynamicRef (2020-12) and $recursiveRef (2019-09)."""

from __future__ import annotations

from pyjsv import CompileOptions, compile_schema, validator_for
from pyjsv.nodes import DynamicRefNode, SchemaNode

DRAFT201909 = "https://json-schema.org/draft/2019-09/schema"

TREE_2020 = {
    "$id": "https://example.com/tree",
    "$dynamicAnchor": "node",
    "type": "object",
    "properties": {
        "data": True,
        "children": {"type": "array", "items": {"$dynamicRef": "#node"}},
    },
}

TREE_2019 = {
    "$schema": DRAFT201909,
    "$id": "https://example.com/tree",
    "$recursiveAnchor": True,
    "type": "object",
    "properties": {
        "data": True,
        "children": {"type": "array", "items": {"$recursiveRef": "#"}},
    },
}

LOOSE_CHILD = {"children": [{"daat": 1}]}


def _dynamic_nodes(validator) -> list[DynamicRefNode]:
    found = []
    for node in validator.nodes.values():
        if isinstance(node, SchemaNode):
            found.extend(child for child in node.validators if isinstance(child, DynamicRefNode))
    return found


def test_dynamic_ref_alone_behaves_like_a_static_ref() -> None:
    validator = validator_for(TREE_2020)

    assert validator.is_valid({"data": 1, "children": [{"data": 2, "children": []}]})
    assert validator.is_valid(LOOSE_CHILD)
    assert not validator.is_valid({"children": [1]})


def test_dynamic_ref_resolves_to_the_outermost_dynamic_anchor() -> None:
    strict = {
        "$id": "https://example.com/strict-tree",
        "$dynamicAnchor": "node",
        "$ref": "tree",
        "unevaluatedProperties": False,
    }
    options = CompileOptions(additional_resources={"https://example.com/tree": TREE_2020})

    validator = compile_schema(strict, options)

    assert validator.is_valid({"children": [{"data": 1}]})
    assert not validator.is_valid(LOOSE_CHILD)
    assert not validator.is_valid({"daat": 1})
    errors = list(validator.iter_errors(LOOSE_CHILD))
    assert errors[0].instance_path == ("children", 0)
    assert "$dynamicRef" in errors[0].schema_path


def test_dynamic_ref_without_an_outer_anchor_stays_static() -> None:
    extension = {"$id": "https://example.com/extension", "$ref": "tree", "unevaluatedProperties": False}
    options = CompileOptions(additional_resources={"https://example.com/tree": TREE_2020})

    validator = compile_schema(extension, options)

    assert validator.is_valid(LOOSE_CHILD)
    assert not validator.is_valid({"daat": 1})


def test_dynamic_ref_to_a_plain_anchor_is_static() -> None:
    schema = {"$defs": {"n": {"$anchor": "n", "type": "integer"}}, "items": {"$dynamicRef": "#n"}}

    validator = validator_for(schema)

    assert validator.is_valid([1, 2])
    assert not validator.is_valid(["x"])
    nodes = _dynamic_nodes(validator)
    assert nodes and all(node.anchor is None and not node.candidates for node in nodes)


def test_bookended_dynamic_refs_bind_candidates() -> None:
    validator = validator_for(TREE_2020)

    nodes = _dynamic_nodes(validator)

    assert len(nodes) == 1
    assert nodes[0].anchor == "node"
    assert set(nodes[0].candidates) == {"https://example.com/tree"}


def test_recursive_ref_follows_the_outermost_recursive_anchor() -> None:
    strict = {
        "$schema": DRAFT201909,
        "$id": "https://example.com/strict-tree",
        "$recursiveAnchor": True,
        "$ref": "tree",
        "unevaluatedProperties": False,
    }
    options = CompileOptions(additional_resources={"https://example.com/tree": TREE_2019})

    validator = compile_schema(strict, options)

    assert validator.is_valid({"children": [{"data": 1}]})
    assert not validator.is_valid(LOOSE_CHILD)


def test_recursive_ref_without_an_outer_anchor_stays_static() -> None:
    extension = {
        "$schema": DRAFT201909,
        "$id": "https://example.com/extension",
        "$ref": "tree",
        "unevaluatedProperties": False,
    }
    options = CompileOptions(additional_resources={"https://example.com/tree": TREE_2019})

    validator = compile_schema(extension, options)

    assert validator.is_valid(LOOSE_CHILD)


def test_meta_schemas_with_dynamic_references_validate_schemas() -> None:
    meta = validator_for({"$ref": "https://json-schema.org/draft/2020-12/schema"})

    assert meta.is_valid({"type": "string", "properties": {"a": {"minimum": 1}}})
    assert not meta.is_valid({"properties": {"a": {"minimum": "one"}}})
