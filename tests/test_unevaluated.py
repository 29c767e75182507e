# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for unevaluatedProperties and unevaluatedItems annotation tracking."""

from __future__ import annotations

import pytest

from pyjsv import ErrorKind, is_valid, iter_errors, validator_for

DRAFT201909 = "https://json-schema.org/draft/2019-09/schema"


def test_unevaluated_properties_sees_sibling_properties() -> None:
    schema = {"properties": {"a": {}}, "unevaluatedProperties": False}

    assert is_valid(schema, {"a": 1})
    assert not is_valid(schema, {"a": 1, "b": 2})
    errors = list(iter_errors(schema, {"a": 1, "b": 2}))
    assert errors[0].kind is ErrorKind.UNEVALUATED_PROPERTIES
    assert errors[0].message == "Unevaluated properties are not allowed ('b' was unexpected)"


def test_unevaluated_properties_is_applied_after_every_other_keyword() -> None:
    schema = {"unevaluatedProperties": False, "properties": {"a": {}}}

    assert is_valid(schema, {"a": 1})


def test_unevaluated_properties_sees_through_all_of_and_refs() -> None:
    schema = {
        "$defs": {"named": {"properties": {"name": {"type": "string"}}}},
        "allOf": [{"$ref": "#/$defs/named"}, {"properties": {"age": {"type": "integer"}}}],
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"name": "x", "age": 3})
    assert not is_valid(schema, {"name": "x", "extra": True})


def test_failed_any_of_branches_do_not_count_as_evaluated() -> None:
    schema = {
        "anyOf": [
            {"properties": {"a": {"type": "string"}}, "required": ["a"]},
            {"properties": {"b": {"type": "integer"}}, "required": ["b"]},
        ],
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"a": "x"})
    assert is_valid(schema, {"a": "x", "b": 1})
    assert not is_valid(schema, {"a": "x", "b": "not an integer"})


def test_one_of_annotations_come_from_the_passing_branch() -> None:
    schema = {
        "oneOf": [{"properties": {"a": {"const": 1}}, "required": ["a"]}, {"properties": {"b": {}}, "required": ["b"]}],
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"a": 1})
    assert not is_valid(schema, {"b": 1, "c": 2})


def test_not_never_marks_properties() -> None:
    schema = {"not": {"not": {"properties": {"a": {}}}}, "unevaluatedProperties": False}

    assert not is_valid(schema, {"a": 1})
    assert is_valid(schema, {})


def test_if_annotations_count_only_when_the_condition_holds() -> None:
    schema = {
        "if": {"properties": {"kind": {"const": "a"}}},
        "then": {"properties": {"extra": {}}},
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"kind": "a", "extra": 1})
    assert not is_valid(schema, {"kind": "b"})


def test_dependent_schemas_contribute_annotations() -> None:
    schema = {
        "properties": {"a": {}},
        "dependentSchemas": {"a": {"properties": {"b": {}}}},
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"a": 1, "b": 2})
    assert not is_valid(schema, {"b": 2})


def test_unevaluated_properties_with_a_schema() -> None:
    schema = {"properties": {"a": {}}, "unevaluatedProperties": {"type": "integer"}}

    assert is_valid(schema, {"a": "x", "b": 1})
    errors = list(iter_errors(schema, {"a": "x", "b": "y"}))
    assert errors[0].instance_path == ("b",)
    assert errors[0].schema_path == ("unevaluatedProperties", "type")


def test_nested_unevaluated_properties_are_independent() -> None:
    schema = {
        "properties": {"inner": {"properties": {"x": {}}, "unevaluatedProperties": False}},
        "unevaluatedProperties": False,
    }

    assert is_valid(schema, {"inner": {"x": 1}})
    assert not is_valid(schema, {"inner": {"x": 1, "y": 2}})
    assert not is_valid(schema, {"inner": {}, "other": 1})


def test_additional_properties_evaluates_everything() -> None:
    schema = {"allOf": [{"additionalProperties": True}], "unevaluatedProperties": False}

    assert is_valid(schema, {"anything": 1})


def test_unevaluated_items_after_prefix_items() -> None:
    schema = {"prefixItems": [{"type": "integer"}], "unevaluatedItems": False}

    assert is_valid(schema, [1])
    assert not is_valid(schema, [1, 2])
    errors = list(iter_errors(schema, [1, 2]))
    assert errors[0].kind is ErrorKind.UNEVALUATED_ITEMS
    assert errors[0].message == "Unevaluated items are not allowed (2 was unexpected)"


def test_unevaluated_items_sees_contains_matches_in_2020_12() -> None:
    schema = {"contains": {"type": "string"}, "unevaluatedItems": {"type": "integer"}}

    assert is_valid(schema, ["a", 1, "b"])
    assert not is_valid(schema, ["a", None])


def test_contains_does_not_evaluate_items_in_2019_09() -> None:
    schema = {"$schema": DRAFT201909, "contains": {"type": "string"}, "unevaluatedItems": False}

    assert not is_valid(schema, ["a"])


def test_unevaluated_items_through_all_of() -> None:
    schema = {"allOf": [{"prefixItems": [True, True]}], "unevaluatedItems": False}

    assert is_valid(schema, [1, 2])
    assert not is_valid(schema, [1, 2, 3])


@pytest.mark.parametrize("instance", [{"a": 1}, {"a": 1, "b": 2}, {"b": 2}, {}])
def test_is_valid_agrees_with_iter_errors(instance: dict[str, int]) -> None:
    validator = validator_for(
        {"anyOf": [{"properties": {"a": {}}}, {"required": ["zzz"]}], "unevaluatedProperties": False}
    )

    assert validator.is_valid(instance) == (not list(validator.iter_errors(instance)))
