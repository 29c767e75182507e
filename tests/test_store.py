# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the resource store and its crawl."""

from __future__ import annotations

import pytest

from pyjsv.drafts import Draft
from pyjsv.errors import RetrievalFailed, UnresolvableReference
from pyjsv.store import ResourceStore, specification_documents


def test_crawl_indexes_embedded_resources_and_anchors(memory_retriever) -> None:
    store = ResourceStore(memory_retriever({}), default_draft=Draft.DRAFT202012)
    store.add(
        "http://example.com/root.json",
        {
            "$defs": {
                "inner": {"$id": "inner.json", "$anchor": "here", "type": "string"},
                "plain": {"$anchor": "top"},
            }
        },
    )

    inner = store.resource("http://example.com/inner.json")
    assert inner is not None
    assert inner.document_uri == "http://example.com/root.json"
    assert inner.pointer == "/$defs/inner"
    assert store.anchor("http://example.com/inner.json", "here") is not None
    assert store.anchor("http://example.com/root.json", "top") is not None
    assert store.anchor("http://example.com/root.json", "here") is None


def test_position_reports_base_uri_and_draft() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT7)  # type: ignore[arg-type]
    store.add(
        "http://example.com/root.json",
        {
            "properties": {
                "legacy": {
                    "$schema": "http://json-schema.org/draft-04/schema#",
                    "id": "http://example.com/legacy.json",
                    "items": {"type": "integer"},
                }
            }
        },
    )

    position = store.position("http://example.com/root.json", "/properties/legacy/items")
    assert position.base_uri == "http://example.com/legacy.json"
    assert position.draft is Draft.DRAFT4
    assert position.resource_pointer == "/properties/legacy"


def test_identifiers_inside_unknown_keywords_are_ignored() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT202012)  # type: ignore[arg-type]
    store.add("http://example.com/root.json", {"x-extension": {"$id": "http://example.com/hidden.json"}})

    assert store.resource("http://example.com/hidden.json") is None


def test_id_next_to_ref_is_ignored_before_2019() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT7)  # type: ignore[arg-type]
    store.add(
        "http://example.com/root.json",
        {"definitions": {"a": {"$id": "http://example.com/a.json", "$ref": "#/definitions/b"}, "b": {}}},
    )

    assert store.resource("http://example.com/a.json") is None


def test_fragment_ids_are_anchors_in_legacy_drafts() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT6)  # type: ignore[arg-type]
    store.add("http://example.com/root.json", {"definitions": {"a": {"$id": "#named"}}})

    anchor = store.anchor("http://example.com/root.json", "named")
    assert anchor is not None
    assert anchor.pointer == "/definitions/a"


def test_locate_retrieves_unknown_documents_once(memory_retriever) -> None:
    retriever = memory_retriever({"http://example.com/other.json": {"type": "integer"}})
    store = ResourceStore(retriever, default_draft=Draft.DRAFT202012)

    first = store.locate("http://example.com/other.json", default_draft=Draft.DRAFT202012)
    second = store.locate("http://example.com/other.json#", default_draft=Draft.DRAFT202012)

    assert first == second
    assert retriever.fetched == ["http://example.com/other.json"]
    assert store.retrieved == ("http://example.com/other.json",)


def test_failed_retrieval_is_not_retried(memory_retriever) -> None:
    retriever = memory_retriever({})
    store = ResourceStore(retriever, default_draft=Draft.DRAFT202012)

    with pytest.raises(RetrievalFailed) as excinfo:
        store.locate("http://example.com/missing.json", default_draft=Draft.DRAFT202012)
    assert excinfo.value.uri == "http://example.com/missing.json"
    assert excinfo.value.__cause__ is not None

    with pytest.raises(RetrievalFailed):
        store.locate("http://example.com/missing.json", default_draft=Draft.DRAFT202012)
    assert retriever.fetched == ["http://example.com/missing.json"]


def test_meta_schemas_are_served_without_the_retriever(memory_retriever) -> None:
    retriever = memory_retriever({})
    store = ResourceStore(retriever, default_draft=Draft.DRAFT202012)

    location = store.locate("http://json-schema.org/draft-07/schema#", default_draft=Draft.DRAFT202012)

    assert location.draft is Draft.DRAFT7
    assert retriever.fetched == []


def test_specification_documents_cover_supported_drafts() -> None:
    documents = specification_documents()
    for draft in Draft:
        assert draft.meta_schema_uri.rstrip("#") in documents


def test_contents_at_rejects_missing_pointers() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT202012)  # type: ignore[arg-type]
    store.add("http://example.com/root.json", {"items": [{"type": "string"}]})

    assert store.contents_at("http://example.com/root.json", "/items/0") == {"type": "string"}
    with pytest.raises(UnresolvableReference):
        store.contents_at("http://example.com/root.json", "/items/1")
    with pytest.raises(UnresolvableReference):
        store.contents_at("http://example.com/root.json", "/items/01")


def test_last_registration_wins() -> None:
    store = ResourceStore(object(), default_draft=Draft.DRAFT202012)  # type: ignore[arg-type]
    store.add("http://example.com/doc.json", {"type": "string"})
    store.add("http://example.com/doc.json", {"type": "integer"})

    assert store.document("http://example.com/doc.json").contents == {"type": "integer"}
