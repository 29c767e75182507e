# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for static references, retrieval and reference cycles."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyjsv import (
    CompileOptions,
    CyclicResolutionLimitExceeded,
    RetrievalFailed,
    UnresolvableReference,
    compile_schema,
    validator_for,
)
from pyjsv.nodes import RefNode
from pyjsv.uri import path_to_uri

TREE = {
    "$id": "http://example.com/tree.json",
    "type": "object",
    "properties": {
        "value": {"type": "integer"},
        "children": {"type": "array", "items": {"$ref": "#"}},
    },
    "required": ["value"],
}


def test_recursive_schema_compiles_to_a_finite_tree() -> None:
    validator = validator_for(TREE)

    assert validator.is_valid({"value": 1, "children": [{"value": 2, "children": [{"value": 3}]}]})
    assert not validator.is_valid({"value": 1, "children": [{"value": 2, "children": [{}]}]})
    errors = list(validator.iter_errors({"value": 1, "children": [{"value": "x"}]}))
    assert errors[0].instance_path == ("children", 0, "value")
    assert errors[0].schema_path == ("properties", "children", "items", "$ref", "properties", "value", "type")
    assert errors[0].absolute_keyword_location == "http://example.com/tree.json#/properties/value/type"


def test_references_share_compiled_targets() -> None:
    validator = validator_for(TREE)

    items = validator.nodes["http://example.com/tree.json#/properties/children/items"]
    reference = items.validators[0]  # type: ignore[union-attr]
    assert isinstance(reference, RefNode)
    assert reference.target is validator.root


def test_definitions_are_resolved_by_pointer() -> None:
    schema = {
        "$defs": {"positive": {"type": "integer", "exclusiveMinimum": 0}},
        "properties": {"count": {"$ref": "#/$defs/positive"}},
    }

    assert validator_for(schema).is_valid({"count": 2})
    assert not validator_for(schema).is_valid({"count": 0})


def test_anchor_references() -> None:
    schema = {"$defs": {"name": {"$anchor": "name", "type": "string"}}, "items": {"$ref": "#name"}}

    assert validator_for(schema).is_valid(["a", "b"])
    assert not validator_for(schema).is_valid(["a", 1])


def test_legacy_fragment_ids_act_as_anchors() -> None:
    schema = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "definitions": {"name": {"$id": "#name", "type": "string"}},
        "items": {"$ref": "#name"},
    }

    assert not validator_for(schema).is_valid([1])


def test_embedded_resources_change_the_base_uri() -> None:
    schema = {
        "$id": "http://example.com/root.json",
        "$defs": {
            "inner": {"$id": "inner/schema.json", "$defs": {"leaf": {"type": "null"}}, "$ref": "#/$defs/leaf"},
        },
        "$ref": "inner/schema.json",
    }

    validator = validator_for(schema)

    assert validator.is_valid(None)
    assert not validator.is_valid(0)


def test_external_documents_are_retrieved_once(memory_retriever) -> None:
    retriever = memory_retriever(
        {"http://example.com/defs.json": {"$defs": {"id": {"type": "integer"}, "name": {"type": "string"}}}}
    )
    schema = {
        "$id": "http://example.com/root.json",
        "properties": {"id": {"$ref": "defs.json#/$defs/id"}, "name": {"$ref": "defs.json#/$defs/name"}},
    }

    validator = validator_for(schema, retriever=retriever)

    assert validator.is_valid({"id": 1, "name": "x"})
    assert not validator.is_valid({"id": "1"})
    assert retriever.fetched == ["http://example.com/defs.json"]
    assert validator.store.retrieved == ("http://example.com/defs.json",)


def test_additional_resources_are_used_before_retrieval(memory_retriever) -> None:
    retriever = memory_retriever({})
    options = CompileOptions(
        retriever=retriever,
        additional_resources={"urn:example:color": {"enum": ["red", "green"]}},
    )

    validator = compile_schema({"$ref": "urn:example:color"}, options)

    assert validator.is_valid("red")
    assert not validator.is_valid("blue")
    assert retriever.fetched == []


def test_retrieval_failures_raise_retrieval_failed(memory_retriever) -> None:
    with pytest.raises(RetrievalFailed) as excinfo:
        validator_for({"$ref": "http://example.com/missing.json"}, retriever=memory_retriever({}))

    assert excinfo.value.uri == "http://example.com/missing.json"


def test_default_retriever_refuses_network_uris() -> None:
    with pytest.raises(RetrievalFailed):
        validator_for({"$ref": "https://example.com/schema.json"})


def test_default_retriever_reads_neighbouring_files(tmp_path: Path) -> None:
    (tmp_path / "name.json").write_text(json.dumps({"type": "string", "minLength": 1}), encoding="utf-8")
    schema = {"properties": {"name": {"$ref": "name.json"}}}

    validator = validator_for(schema, base_uri=path_to_uri(tmp_path / "root.json"))

    assert validator.is_valid({"name": "x"})
    assert not validator.is_valid({"name": ""})


def test_missing_pointer_is_unresolvable() -> None:
    with pytest.raises(UnresolvableReference):
        validator_for({"$ref": "#/$defs/missing"})


def test_uncompiled_reference_targets_are_unresolvable() -> None:
    reference = RefNode("json-schema:///#/$defs/late", {"json-schema:///#/$defs/late": None}, "json-schema:///#/$ref")

    with pytest.raises(UnresolvableReference, match="never compiled"):
        reference.target


def test_missing_anchor_is_unresolvable() -> None:
    with pytest.raises(UnresolvableReference):
        validator_for({"$ref": "#missing"})


@pytest.mark.parametrize(
    "schema",
    [
        {"$ref": "#"},
        {"$defs": {"a": {"$ref": "#/$defs/b"}, "b": {"$ref": "#/$defs/a"}}, "$ref": "#/$defs/a"},
        {"$defs": {"a": {"allOf": [{"$ref": "#/$defs/a"}]}}, "properties": {"x": {"$ref": "#/$defs/a"}}},
    ],
)
def test_cycles_that_never_consume_input_are_rejected(schema: dict[str, object]) -> None:
    with pytest.raises(CyclicResolutionLimitExceeded):
        validator_for(schema)


def test_cycles_through_child_keywords_are_allowed() -> None:
    schema = {"$defs": {"list": {"type": "array", "items": {"$ref": "#/$defs/list"}}}, "$ref": "#/$defs/list"}

    validator = validator_for(schema)

    assert validator.is_valid([[], [[]]])
    assert not validator.is_valid([[], [1]])


def test_reference_chains_beyond_the_depth_limit_are_rejected() -> None:
    definitions = {f"d{index}": {"$ref": f"#/$defs/d{index + 1}"} for index in range(10)}
    definitions["d10"] = {"type": "integer"}
    schema = {"$defs": definitions, "$ref": "#/$defs/d0"}

    assert validator_for(schema).is_valid(1)
    with pytest.raises(CyclicResolutionLimitExceeded):
        validator_for(schema, max_reference_depth=5)
