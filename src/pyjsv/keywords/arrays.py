# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilers for array keywords."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..errors import InvalidSchema
from ..nodes import ContainsNode, ItemCountNode, ItemsNode, Node, PrefixItemsNode, UnevaluatedItemsNode, UniqueItemsNode
from ..types import JSONValue
from ..utils import expect_array, expect_bool, expect_non_negative_integer, is_array

if TYPE_CHECKING:
    from ..compiler import SchemaContext


def compile_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``items``.

    Up to 2019-09 an array value performs tuple validation. In 2020-12
    ``items`` is always a single schema applied after ``prefixItems``.
    """

    if is_array(value):
        if not ctx.traits.tuple_items:
            raise InvalidSchema(f"{ctx.pointer_of('items')}: expected a schema, not an array", pointer=ctx.pointer)
        schemas = [ctx.compile(item, "items", index) for index, item in enumerate(value)]  # type: ignore[arg-type]
        return PrefixItemsNode("items", schemas, ctx.location("items"))
    offset = 0
    if ctx.traits.prefix_items and is_array(schema.get("prefixItems")):
        offset = len(schema["prefixItems"])  # type: ignore[arg-type]
    return ItemsNode("items", ctx.compile(value, "items"), offset, ctx.location("items"))


def compile_additional_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``additionalItems``; it only applies next to array-form ``items``."""

    items = schema.get("items")
    if not is_array(items):
        return None
    node = ctx.compile(value, "additionalItems", boolean=True)
    return ItemsNode("additionalItems", node, len(items), ctx.location("additionalItems"))  # type: ignore[arg-type]


def compile_prefix_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    items = expect_array(value, key="prefixItems", pointer=ctx.pointer, non_empty=True)
    schemas = [ctx.compile(item, "prefixItems", index) for index, item in enumerate(items)]
    return PrefixItemsNode("prefixItems", schemas, ctx.location("prefixItems"))


def compile_contains(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``contains`` with its ``minContains``/``maxContains`` companions."""

    minimum = 1
    maximum: int | None = None
    if ctx.traits.contains_bounds:
        if "minContains" in schema:
            minimum = expect_non_negative_integer(schema["minContains"], key="minContains", pointer=ctx.pointer)
        if "maxContains" in schema:
            maximum = expect_non_negative_integer(schema["maxContains"], key="maxContains", pointer=ctx.pointer)
    node = ctx.compile(value, "contains")
    return ContainsNode(
        node,
        ctx.location("contains"),
        minimum=minimum,
        maximum=maximum,
        records=ctx.traits.contains_evaluates,
    )


def compile_min_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="minItems", pointer=ctx.pointer)
    if limit == 0:
        return None
    return ItemCountNode("minItems", limit, ctx.location("minItems"), lower=True)


def compile_max_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="maxItems", pointer=ctx.pointer)
    return ItemCountNode("maxItems", limit, ctx.location("maxItems"), lower=False)


def compile_unique_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    if not expect_bool(value, key="uniqueItems", pointer=ctx.pointer):
        return None
    return UniqueItemsNode(ctx.location("uniqueItems"))


def compile_unevaluated_items(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``unevaluatedItems`` and switch the tree to annotation tracking."""

    ctx.require_tracking()
    node = ctx.compile(value, "unevaluatedItems")
    return UnevaluatedItemsNode(node, ctx.location("unevaluatedItems"))


__all__ = [
    "compile_additional_items",
    "compile_contains",
    "compile_items",
    "compile_max_items",
    "compile_min_items",
    "compile_prefix_items",
    "compile_unevaluated_items",
    "compile_unique_items",
]
