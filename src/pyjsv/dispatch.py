# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-draft keyword tables consulted by the schema compiler.

Each draft maps keyword names to compiler functions. Keywords that only
modify a sibling (``then`` next to ``if``, ``minContains`` next to
``contains``) are listed as companions, and keywords with no validation
meaning are listed as annotations, so that strict mode can tell them apart
from genuinely unknown keywords. Drafts with vocabularies also record which
vocabulary each assertion keyword belongs to, so that a custom meta-schema
can switch vocabularies off.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from .drafts import Draft
from .keywords import KeywordCompiler
from .keywords import applicators, arrays, core, objects, references


@dataclass(frozen=True, slots=True)
class DraftDispatch:
    """Keyword table of one draft.

    Attributes:
        draft: Draft the table belongs to.
        keywords: Keyword name to compiler.
        companions: Keywords consumed by the compiler of a sibling keyword.
        annotations: Keywords recognised but carrying no assertion.
        trailing: Keywords compiled after every other keyword of a schema.
    """

    draft: Draft
    keywords: Mapping[str, KeywordCompiler]
    companions: frozenset[str]
    annotations: frozenset[str]
    trailing: frozenset[str] = frozenset()

    def known(self, keyword: str) -> bool:
        """Return ``True`` when ``keyword`` means something in this draft."""

        return keyword in self.keywords or keyword in self.companions or keyword in self.annotations

    def restricted(self, vocabularies: Iterable[str]) -> DraftDispatch:
        """Return a copy asserting only the keywords of the enabled ``vocabularies``.

        The core vocabulary is always enabled. Keywords of disabled vocabularies
        stay known as annotations. Drafts without vocabularies are returned
        unchanged.
        """

        declared = VOCABULARIES.get(self.draft)
        if declared is None:
            return self
        selected = set(vocabularies)
        enabled: set[str] = set()
        for uri, keywords in declared.items():
            if uri in selected or uri.endswith("/vocab/core"):
                enabled |= keywords
        governed = frozenset(keyword for keywords in declared.values() for keyword in keywords)
        dropped = frozenset(keyword for keyword in self.keywords if keyword in governed and keyword not in enabled)
        if not dropped:
            return self
        return DraftDispatch(
            draft=self.draft,
            keywords=MappingProxyType(
                {keyword: compiler for keyword, compiler in self.keywords.items() if keyword not in dropped}
            ),
            companions=self.companions,
            annotations=self.annotations | dropped,
            trailing=self.trailing - dropped,
        )


_COMMON: Final[dict[str, KeywordCompiler]] = {
    "$ref": references.compile_ref,
    "type": core.compile_type,
    "enum": core.compile_enum,
    "multipleOf": core.compile_multiple_of,
    "minimum": core.compile_minimum,
    "maximum": core.compile_maximum,
    "minLength": core.compile_min_length,
    "maxLength": core.compile_max_length,
    "pattern": core.compile_pattern,
    "format": core.compile_format,
    "items": arrays.compile_items,
    "additionalItems": arrays.compile_additional_items,
    "minItems": arrays.compile_min_items,
    "maxItems": arrays.compile_max_items,
    "uniqueItems": arrays.compile_unique_items,
    "properties": objects.compile_properties,
    "patternProperties": objects.compile_pattern_properties,
    "additionalProperties": objects.compile_additional_properties,
    "required": objects.compile_required,
    "minProperties": objects.compile_min_properties,
    "maxProperties": objects.compile_max_properties,
    "dependencies": objects.compile_dependencies,
    "allOf": applicators.compile_all_of,
    "anyOf": applicators.compile_any_of,
    "oneOf": applicators.compile_one_of,
    "not": applicators.compile_not,
}

_DRAFT6: Final[dict[str, KeywordCompiler]] = _COMMON | {
    "exclusiveMinimum": core.compile_exclusive_minimum,
    "exclusiveMaximum": core.compile_exclusive_maximum,
    "const": core.compile_const,
    "contains": arrays.compile_contains,
    "propertyNames": objects.compile_property_names,
}

_DRAFT7: Final[dict[str, KeywordCompiler]] = _DRAFT6 | {"if": applicators.compile_if}

_DRAFT201909: Final[dict[str, KeywordCompiler]] = {
    keyword: compiler for keyword, compiler in _DRAFT7.items() if keyword != "dependencies"
} | {
    "$recursiveRef": references.compile_recursive_ref,
    "dependentRequired": objects.compile_dependent_required,
    "dependentSchemas": applicators.compile_dependent_schemas,
    "unevaluatedItems": arrays.compile_unevaluated_items,
    "unevaluatedProperties": objects.compile_unevaluated_properties,
}

_DRAFT202012: Final[dict[str, KeywordCompiler]] = {
    keyword: compiler
    for keyword, compiler in _DRAFT201909.items()
    if keyword not in {"$recursiveRef", "additionalItems"}
} | {
    "$dynamicRef": references.compile_dynamic_ref,
    "prefixItems": arrays.compile_prefix_items,
}

_ANNOTATIONS: Final[frozenset[str]] = frozenset(
    {
        "$comment",
        "$schema",
        "default",
        "definitions",
        "description",
        "examples",
        "title",
    }
)
_MODERN_ANNOTATIONS: Final[frozenset[str]] = _ANNOTATIONS | {
    "$anchor",
    "$defs",
    "$id",
    "$vocabulary",
    "contentEncoding",
    "contentMediaType",
    "contentSchema",
    "deprecated",
    "readOnly",
    "writeOnly",
}
_UNEVALUATED: Final[frozenset[str]] = frozenset({"unevaluatedItems", "unevaluatedProperties"})

_APPLICATOR: Final[frozenset[str]] = frozenset(
    {
        "additionalProperties",
        "allOf",
        "anyOf",
        "contains",
        "dependentSchemas",
        "if",
        "items",
        "not",
        "oneOf",
        "patternProperties",
        "properties",
        "propertyNames",
    }
)
_VALIDATION: Final[frozenset[str]] = frozenset(
    {
        "const",
        "dependentRequired",
        "enum",
        "exclusiveMaximum",
        "exclusiveMinimum",
        "maxItems",
        "maxLength",
        "maxProperties",
        "maximum",
        "minItems",
        "minLength",
        "minProperties",
        "minimum",
        "multipleOf",
        "pattern",
        "required",
        "type",
        "uniqueItems",
    }
)

VOCABULARIES: Final[Mapping[Draft, Mapping[str, frozenset[str]]]] = MappingProxyType(
    {
        Draft.DRAFT201909: MappingProxyType(
            {
                "https://json-schema.org/draft/2019-09/vocab/core": frozenset({"$ref", "$recursiveRef"}),
                "https://json-schema.org/draft/2019-09/vocab/applicator": _APPLICATOR
                | _UNEVALUATED
                | {"additionalItems"},
                "https://json-schema.org/draft/2019-09/vocab/validation": _VALIDATION,
                "https://json-schema.org/draft/2019-09/vocab/format": frozenset({"format"}),
            }
        ),
        Draft.DRAFT202012: MappingProxyType(
            {
                "https://json-schema.org/draft/2020-12/vocab/core": frozenset({"$ref", "$dynamicRef"}),
                "https://json-schema.org/draft/2020-12/vocab/applicator": _APPLICATOR | {"prefixItems"},
                "https://json-schema.org/draft/2020-12/vocab/unevaluated": _UNEVALUATED,
                "https://json-schema.org/draft/2020-12/vocab/validation": _VALIDATION,
                "https://json-schema.org/draft/2020-12/vocab/format-annotation": frozenset({"format"}),
                "https://json-schema.org/draft/2020-12/vocab/format-assertion": frozenset({"format"}),
            }
        ),
    }
)

DISPATCH: Final[Mapping[Draft, DraftDispatch]] = MappingProxyType(
    {
        Draft.DRAFT4: DraftDispatch(
            draft=Draft.DRAFT4,
            keywords=MappingProxyType(_COMMON),
            companions=frozenset({"exclusiveMinimum", "exclusiveMaximum"}),
            annotations=_ANNOTATIONS | {"id"},
        ),
        Draft.DRAFT6: DraftDispatch(
            draft=Draft.DRAFT6,
            keywords=MappingProxyType(_DRAFT6),
            companions=frozenset(),
            annotations=_ANNOTATIONS | {"$id"},
        ),
        Draft.DRAFT7: DraftDispatch(
            draft=Draft.DRAFT7,
            keywords=MappingProxyType(_DRAFT7),
            companions=frozenset({"then", "else"}),
            annotations=_ANNOTATIONS
            | {"$id", "contentEncoding", "contentMediaType", "readOnly", "writeOnly"},
        ),
        Draft.DRAFT201909: DraftDispatch(
            draft=Draft.DRAFT201909,
            keywords=MappingProxyType(_DRAFT201909),
            companions=frozenset({"then", "else", "minContains", "maxContains"}),
            annotations=_MODERN_ANNOTATIONS | {"$recursiveAnchor"},
            trailing=_UNEVALUATED,
        ),
        Draft.DRAFT202012: DraftDispatch(
            draft=Draft.DRAFT202012,
            keywords=MappingProxyType(_DRAFT202012),
            companions=frozenset({"then", "else", "minContains", "maxContains"}),
            annotations=_MODERN_ANNOTATIONS | {"$dynamicAnchor"},
            trailing=_UNEVALUATED,
        ),
    }
)


def dispatch_for(draft: Draft) -> DraftDispatch:
    """Return the keyword table of ``draft``."""

    return DISPATCH[draft]


__all__ = ["DISPATCH", "VOCABULARIES", "DraftDispatch", "dispatch_for"]
