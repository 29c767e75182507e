# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilers for object keywords."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from regex import Pattern

from ..errors import InvalidSchema
from ..nodes import (
    AdditionalPropertiesNode,
    DependenciesNode,
    Node,
    PatternPropertiesNode,
    PropertiesNode,
    PropertyCountNode,
    PropertyNamesNode,
    RequiredNode,
    UnevaluatedPropertiesNode,
)
from ..types import JSONValue
from ..utils import expect_mapping, expect_non_negative_integer, is_array, string_array

if TYPE_CHECKING:
    from ..compiler import SchemaContext


def compile_properties(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    mapping = expect_mapping(value, key="properties", pointer=ctx.pointer)
    if not mapping:
        return None
    schemas = {name: ctx.compile(item, "properties", name) for name, item in mapping.items()}
    return PropertiesNode(schemas, ctx.location("properties"))


def _sibling_patterns(ctx: SchemaContext, schema: Mapping[str, JSONValue]) -> list[tuple[str, Pattern[str]]]:
    value = schema.get("patternProperties")
    if value is None:
        return []
    mapping = expect_mapping(value, key="patternProperties", pointer=ctx.pointer)
    return [(source, ctx.regex(source, "patternProperties", source)) for source in mapping]


def compile_pattern_properties(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    mapping = expect_mapping(value, key="patternProperties", pointer=ctx.pointer)
    if not mapping:
        return None
    patterns = [
        (source, regex, ctx.compile(mapping[source], "patternProperties", source))
        for source, regex in _sibling_patterns(ctx, schema)
    ]
    return PatternPropertiesNode(patterns, ctx.location("patternProperties"))


def compile_additional_properties(
    ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]
) -> Node | None:
    """Compile ``additionalProperties`` with the names and patterns of its siblings."""

    properties = schema.get("properties", {})
    known = frozenset(properties) if isinstance(properties, Mapping) else frozenset()
    patterns = [regex for _, regex in _sibling_patterns(ctx, schema)]
    node = ctx.compile(value, "additionalProperties", boolean=True)
    return AdditionalPropertiesNode(node, known, patterns, ctx.location("additionalProperties"))


def compile_required(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``required``; draft 4 demands a non-empty list."""

    names = string_array(value, key="required", pointer=ctx.pointer)
    if not names:
        if not ctx.traits.boolean_schemas:
            raise InvalidSchema(f"{ctx.pointer_of('required')}: expected a non-empty array", pointer=ctx.pointer)
        return None
    return RequiredNode(names, ctx.location("required"))


def compile_min_properties(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="minProperties", pointer=ctx.pointer)
    if limit == 0:
        return None
    return PropertyCountNode("minProperties", limit, ctx.location("minProperties"), lower=True)


def compile_max_properties(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="maxProperties", pointer=ctx.pointer)
    return PropertyCountNode("maxProperties", limit, ctx.location("maxProperties"), lower=False)


def compile_property_names(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    return PropertyNamesNode(ctx.compile(value, "propertyNames"), ctx.location("propertyNames"))


def compile_dependent_required(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``dependentRequired``."""

    mapping = expect_mapping(value, key="dependentRequired", pointer=ctx.pointer)
    requirements = {
        name: string_array(item, key=f"dependentRequired/{name}", pointer=ctx.pointer) for name, item in mapping.items()
    }
    requirements = {name: names for name, names in requirements.items() if names}
    if not requirements:
        return None
    return DependenciesNode("dependentRequired", ctx.location("dependentRequired"), requirements=requirements)


def compile_dependencies(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile legacy ``dependencies`` whose values are name lists or subschemas."""

    mapping = expect_mapping(value, key="dependencies", pointer=ctx.pointer)
    requirements: dict[str, tuple[str, ...]] = {}
    schemas: dict[str, Node] = {}
    for name, item in mapping.items():
        if is_array(item):
            names = string_array(item, key=f"dependencies/{name}", pointer=ctx.pointer)
            if names:
                requirements[name] = names
        else:
            schemas[name] = ctx.compile(item, "dependencies", name)
    if not requirements and not schemas:
        return None
    return DependenciesNode("dependencies", ctx.location("dependencies"), requirements=requirements, schemas=schemas)


def compile_unevaluated_properties(
    ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]
) -> Node | None:
    """Compile ``unevaluatedProperties`` and switch the tree to annotation tracking."""

    ctx.require_tracking()
    node = ctx.compile(value, "unevaluatedProperties")
    return UnevaluatedPropertiesNode(node, ctx.location("unevaluatedProperties"))


__all__ = [
    "compile_additional_properties",
    "compile_dependencies",
    "compile_dependent_required",
    "compile_max_properties",
    "compile_min_properties",
    "compile_pattern_properties",
    "compile_properties",
    "compile_property_names",
    "compile_required",
    "compile_unevaluated_properties",
]
