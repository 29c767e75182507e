# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for meta-schema validation and draft selection."""

from __future__ import annotations

import pytest

from pyjsv import CompileOptions, Draft, InvalidSchema, UnknownSpecification, compile_schema, validator_for
from pyjsv.compiler import select_draft
from pyjsv.dispatch import dispatch_for
from pyjsv.meta import meta_validator
from pyjsv.store import specification_documents


def test_malformed_schemas_are_rejected_with_a_pointer() -> None:
    with pytest.raises(InvalidSchema) as excinfo:
        validator_for({"type": 12})

    assert excinfo.value.pointer == "/type"
    assert excinfo.value.errors
    assert all(error.instance_pointer == "/type" for error in excinfo.value.errors)


def test_nested_violations_report_their_location() -> None:
    with pytest.raises(InvalidSchema) as excinfo:
        validator_for({"properties": {"age": {"minimum": "zero"}}})

    assert excinfo.value.pointer == "/properties/age/minimum"


@pytest.mark.parametrize(
    "uri",
    [
        "http://json-schema.org/draft-04/schema#",
        "http://json-schema.org/draft-06/schema#",
        "http://json-schema.org/draft-07/schema#",
        "https://json-schema.org/draft/2019-09/schema",
        "https://json-schema.org/draft/2020-12/schema",
    ],
)
def test_every_draft_rejects_a_bad_type(uri: str) -> None:
    with pytest.raises(InvalidSchema):
        validator_for({"$schema": uri, "type": "strnig"})


def test_meta_validation_can_be_skipped() -> None:
    validator = validator_for({"minLength": 1, "x-note": {"type": 12}}, validate_schema=False)

    assert not validator.is_valid("")


def test_compiler_still_rejects_malformed_keywords_without_meta_validation() -> None:
    with pytest.raises(InvalidSchema) as excinfo:
        validator_for({"type": 12}, validate_schema=False)

    assert excinfo.value.pointer == "/type"


def test_invalid_regular_expressions_are_schema_errors() -> None:
    with pytest.raises(InvalidSchema):
        validator_for({"pattern": "("}, validate_schema=False)


def test_unknown_specification() -> None:
    with pytest.raises(UnknownSpecification) as excinfo:
        validator_for({"$schema": "https://example.com/unknown-meta"})

    assert excinfo.value.specification == "https://example.com/unknown-meta"


def test_custom_meta_schemas_from_additional_resources() -> None:
    meta = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": "https://example.com/strict-meta",
        "$ref": "https://json-schema.org/draft/2020-12/schema",
        "required": ["title"],
    }
    options = CompileOptions(additional_resources={"https://example.com/strict-meta": meta})

    with pytest.raises(InvalidSchema):
        compile_schema({"$schema": "https://example.com/strict-meta", "type": "string"}, options)
    validator = compile_schema({"$schema": "https://example.com/strict-meta", "title": "t", "type": "string"}, options)
    assert validator.draft is Draft.DRAFT202012
    assert validator.is_valid("x")


def test_select_draft_precedence() -> None:
    schema = {"$schema": "http://json-schema.org/draft-04/schema#"}

    assert select_draft(schema, CompileOptions()) == (Draft.DRAFT4, None)
    assert select_draft(schema, CompileOptions(draft=Draft.DRAFT7)) == (Draft.DRAFT7, None)
    assert select_draft({}, CompileOptions()) == (Draft.DRAFT202012, None)


def test_meta_validators_are_shared() -> None:
    assert meta_validator(Draft.DRAFT7) is meta_validator(Draft.DRAFT7)
    assert meta_validator(Draft.DRAFT4).draft is Draft.DRAFT4


@pytest.mark.parametrize("draft", list(Draft))
def test_meta_schemas_accept_themselves(draft: Draft) -> None:
    document = specification_documents()[draft.meta_schema_uri.rstrip("#")]

    assert meta_validator(draft).is_valid(document)


@pytest.mark.parametrize(
    ("year", "anchor"),
    [("2020-12", {"$dynamicAnchor": "meta"}), ("2019-09", {"$recursiveAnchor": True})],
)
def test_vocabularies_switched_off_by_a_custom_meta_schema(year: str, anchor: dict[str, object]) -> None:
    meta_uri = f"https://example.com/{year}/no-validation"
    meta = {
        "$schema": f"https://json-schema.org/draft/{year}/schema",
        "$id": meta_uri,
        "$vocabulary": {
            f"https://json-schema.org/draft/{year}/vocab/applicator": True,
            f"https://json-schema.org/draft/{year}/vocab/core": True,
        },
        **anchor,
        "allOf": [
            {"$ref": f"https://json-schema.org/draft/{year}/meta/applicator"},
            {"$ref": f"https://json-schema.org/draft/{year}/meta/core"},
        ],
    }
    schema = {
        "$schema": meta_uri,
        "properties": {"badProperty": False, "numberProperty": {"minimum": 10}},
    }
    options = CompileOptions(additional_resources={meta_uri: meta})

    validator = compile_schema(schema, options)

    assert validator.is_valid({"numberProperty": 20})
    assert validator.is_valid({"numberProperty": 1})
    assert not validator.is_valid({"badProperty": "anything"})


def test_meta_schemas_without_vocabulary_keep_every_keyword() -> None:
    meta_uri = "https://example.com/plain-meta"
    meta = {"$schema": "https://json-schema.org/draft/2020-12/schema", "$id": meta_uri}
    options = CompileOptions(additional_resources={meta_uri: meta})

    validator = compile_schema({"$schema": meta_uri, "minimum": 10}, options)

    assert not validator.is_valid(1)


def test_restricted_dispatch_keeps_core_keywords() -> None:
    full = dispatch_for(Draft.DRAFT202012)
    restricted = full.restricted(["https://json-schema.org/draft/2020-12/vocab/validation"])

    assert "minimum" in restricted.keywords
    assert "$ref" in restricted.keywords
    assert "properties" not in restricted.keywords
    assert "unevaluatedProperties" not in restricted.trailing
    assert restricted.known("properties")
    assert dispatch_for(Draft.DRAFT7).restricted([]) is dispatch_for(Draft.DRAFT7)
