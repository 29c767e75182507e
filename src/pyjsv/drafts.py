# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Draft identities, per-draft quirk flags and subschema shapes.

Everything that differs between drafts is expressed as data in this module so
that keyword code can branch on a named trait instead of on a draft.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

from .types import JSONValue
from .uri import normalize_uri


class Draft(str, Enum):
    """Enumerate the JSON Schema drafts the engine can compile."""

    DRAFT4 = "4"
    DRAFT6 = "6"
    DRAFT7 = "7"
    DRAFT201909 = "2019-09"
    DRAFT202012 = "2020-12"

    @property
    def meta_schema_uri(self) -> str:
        """Return the canonical ``$schema`` URI of this draft."""

        return _META_SCHEMA_URIS[self]

    @property
    def traits(self) -> DraftTraits:
        """Return the quirk flags of this draft."""

        return TRAITS[self]

    @classmethod
    def from_uri(cls, uri: str) -> Draft | None:
        """Return the draft named by a ``$schema`` URI, or ``None`` when unknown."""

        return _DRAFTS_BY_URI.get(_uri_key(uri))


DEFAULT_DRAFT: Final[Draft] = Draft.DRAFT202012

_META_SCHEMA_URIS: Final[Mapping[Draft, str]] = MappingProxyType(
    {
        Draft.DRAFT4: "http://json-schema.org/draft-04/schema#",
        Draft.DRAFT6: "http://json-schema.org/draft-06/schema#",
        Draft.DRAFT7: "http://json-schema.org/draft-07/schema#",
        Draft.DRAFT201909: "https://json-schema.org/draft/2019-09/schema",
        Draft.DRAFT202012: "https://json-schema.org/draft/2020-12/schema",
    }
)


def _uri_key(uri: str) -> str:
    key = normalize_uri(uri.strip())
    if key.startswith("https://json-schema.org/"):
        key = "http://" + key[len("https://") :]
    return key


_DRAFTS_BY_URI: Final[Mapping[str, Draft]] = MappingProxyType(
    {_uri_key(uri): draft for draft, uri in _META_SCHEMA_URIS.items()}
)


def is_meta_schema_uri(uri: str) -> bool:
    """Return ``True`` when ``uri`` lives under the official ``json-schema.org`` tree."""

    return _uri_key(uri).startswith("http://json-schema.org/")


class Shape(str, Enum):
    """Describe how a keyword value holds subschemas."""

    SCHEMA = "schema"
    SCHEMA_MAP = "map"
    SCHEMA_ARRAY = "array"
    SCHEMA_OR_ARRAY = "schema-or-array"
    DEPENDENCIES = "dependencies"


@dataclass(frozen=True, slots=True)
class DraftTraits:
    """Quirk flags that distinguish one draft from another.

    Attributes:
        id_keyword: Keyword that establishes a new base URI.
        boolean_schemas: Whether ``true``/``false`` are whole schemas.
        ref_overrides_siblings: Whether ``$ref`` suppresses sibling keywords.
        fragment_ids_are_anchors: Whether ``{"$id": "#name"}`` declares an anchor.
        boolean_exclusive_bounds: Whether ``exclusiveMinimum``/``exclusiveMaximum`` modify the inclusive bounds.
        float_integers: Whether ``1.0`` satisfies ``"type": "integer"``.
        tuple_items: Whether an array-valued ``items`` performs tuple validation.
        prefix_items: Whether ``prefixItems`` exists.
        contains_bounds: Whether ``minContains``/``maxContains`` exist.
        contains_evaluates: Whether ``contains`` matches count as evaluated items.
        anchors: Whether ``$anchor`` exists.
        dynamic_refs: Whether ``$dynamicRef``/``$dynamicAnchor`` exist.
        recursive_refs: Whether ``$recursiveRef``/``$recursiveAnchor`` exist.
        unevaluated: Whether ``unevaluatedProperties``/``unevaluatedItems`` exist.
        dependencies: Whether the legacy ``dependencies`` keyword applies.
        split_dependencies: Whether ``dependentRequired``/``dependentSchemas`` exist.
        subschemas: Keyword to subschema-shape table used by the crawler.
    """

    id_keyword: str
    boolean_schemas: bool
    ref_overrides_siblings: bool
    fragment_ids_are_anchors: bool
    boolean_exclusive_bounds: bool
    float_integers: bool
    tuple_items: bool
    prefix_items: bool
    contains_bounds: bool
    contains_evaluates: bool
    anchors: bool
    dynamic_refs: bool
    recursive_refs: bool
    unevaluated: bool
    dependencies: bool
    split_dependencies: bool
    subschemas: Mapping[str, Shape]


_DRAFT4_SUBSCHEMAS: Final[dict[str, Shape]] = {
    "additionalItems": Shape.SCHEMA,
    "additionalProperties": Shape.SCHEMA,
    "allOf": Shape.SCHEMA_ARRAY,
    "anyOf": Shape.SCHEMA_ARRAY,
    "definitions": Shape.SCHEMA_MAP,
    "dependencies": Shape.DEPENDENCIES,
    "items": Shape.SCHEMA_OR_ARRAY,
    "not": Shape.SCHEMA,
    "oneOf": Shape.SCHEMA_ARRAY,
    "patternProperties": Shape.SCHEMA_MAP,
    "properties": Shape.SCHEMA_MAP,
}
_DRAFT6_SUBSCHEMAS: Final[dict[str, Shape]] = _DRAFT4_SUBSCHEMAS | {
    "contains": Shape.SCHEMA,
    "propertyNames": Shape.SCHEMA,
}
_DRAFT7_SUBSCHEMAS: Final[dict[str, Shape]] = _DRAFT6_SUBSCHEMAS | {
    "if": Shape.SCHEMA,
    "then": Shape.SCHEMA,
    "else": Shape.SCHEMA,
}
_DRAFT201909_SUBSCHEMAS: Final[dict[str, Shape]] = _DRAFT7_SUBSCHEMAS | {
    "$defs": Shape.SCHEMA_MAP,
    "contentSchema": Shape.SCHEMA,
    "dependentSchemas": Shape.SCHEMA_MAP,
    "unevaluatedItems": Shape.SCHEMA,
    "unevaluatedProperties": Shape.SCHEMA,
}
_DRAFT202012_SUBSCHEMAS: Final[dict[str, Shape]] = {
    key: shape for key, shape in _DRAFT201909_SUBSCHEMAS.items() if key != "additionalItems"
} | {
    "items": Shape.SCHEMA,
    "prefixItems": Shape.SCHEMA_ARRAY,
}

TRAITS: Final[Mapping[Draft, DraftTraits]] = MappingProxyType(
    {
        Draft.DRAFT4: DraftTraits(
            id_keyword="id",
            boolean_schemas=False,
            ref_overrides_siblings=True,
            fragment_ids_are_anchors=True,
            boolean_exclusive_bounds=True,
            float_integers=False,
            tuple_items=True,
            prefix_items=False,
            contains_bounds=False,
            contains_evaluates=False,
            anchors=False,
            dynamic_refs=False,
            recursive_refs=False,
            unevaluated=False,
            dependencies=True,
            split_dependencies=False,
            subschemas=MappingProxyType(_DRAFT4_SUBSCHEMAS),
        ),
        Draft.DRAFT6: DraftTraits(
            id_keyword="$id",
            boolean_schemas=True,
            ref_overrides_siblings=True,
            fragment_ids_are_anchors=True,
            boolean_exclusive_bounds=False,
            float_integers=True,
            tuple_items=True,
            prefix_items=False,
            contains_bounds=False,
            contains_evaluates=False,
            anchors=False,
            dynamic_refs=False,
            recursive_refs=False,
            unevaluated=False,
            dependencies=True,
            split_dependencies=False,
            subschemas=MappingProxyType(_DRAFT6_SUBSCHEMAS),
        ),
        Draft.DRAFT7: DraftTraits(
            id_keyword="$id",
            boolean_schemas=True,
            ref_overrides_siblings=True,
            fragment_ids_are_anchors=True,
            boolean_exclusive_bounds=False,
            float_integers=True,
            tuple_items=True,
            prefix_items=False,
            contains_bounds=False,
            contains_evaluates=False,
            anchors=False,
            dynamic_refs=False,
            recursive_refs=False,
            unevaluated=False,
            dependencies=True,
            split_dependencies=False,
            subschemas=MappingProxyType(_DRAFT7_SUBSCHEMAS),
        ),
        Draft.DRAFT201909: DraftTraits(
            id_keyword="$id",
            boolean_schemas=True,
            ref_overrides_siblings=False,
            fragment_ids_are_anchors=False,
            boolean_exclusive_bounds=False,
            float_integers=True,
            tuple_items=True,
            prefix_items=False,
            contains_bounds=True,
            contains_evaluates=False,
            anchors=True,
            dynamic_refs=False,
            recursive_refs=True,
            unevaluated=True,
            dependencies=False,
            split_dependencies=True,
            subschemas=MappingProxyType(_DRAFT201909_SUBSCHEMAS),
        ),
        Draft.DRAFT202012: DraftTraits(
            id_keyword="$id",
            boolean_schemas=True,
            ref_overrides_siblings=False,
            fragment_ids_are_anchors=False,
            boolean_exclusive_bounds=False,
            float_integers=True,
            tuple_items=False,
            prefix_items=True,
            contains_bounds=True,
            contains_evaluates=True,
            anchors=True,
            dynamic_refs=True,
            recursive_refs=False,
            unevaluated=True,
            dependencies=False,
            split_dependencies=True,
            subschemas=MappingProxyType(_DRAFT202012_SUBSCHEMAS),
        ),
    }
)


def declared_draft(contents: JSONValue) -> str | None:
    """Return the ``$schema`` string declared by ``contents``, if any."""

    if isinstance(contents, Mapping):
        declared = contents.get("$schema")
        if isinstance(declared, str):
            return declared
    return None


def detect_draft(contents: JSONValue, default: Draft) -> Draft:
    """Return the draft named by ``contents``' ``$schema``, or ``default``."""

    declared = declared_draft(contents)
    if declared is None:
        return default
    return Draft.from_uri(declared) or default


__all__ = [
    "DEFAULT_DRAFT",
    "TRAITS",
    "Draft",
    "DraftTraits",
    "Shape",
    "declared_draft",
    "detect_draft",
    "is_meta_schema_uri",
]
