# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilers for in-place applicator keywords."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..nodes import AllOfNode, AnyOfNode, DependenciesNode, IfThenElseNode, Node, NotNode, OneOfNode
from ..types import JSONValue
from ..utils import expect_array, expect_mapping

if TYPE_CHECKING:
    from ..compiler import SchemaContext


def _branches(ctx: SchemaContext, keyword: str, value: JSONValue) -> list[Node]:
    items = expect_array(value, key=keyword, pointer=ctx.pointer, non_empty=True)
    return [ctx.compile(item, keyword, index) for index, item in enumerate(items)]


def compile_all_of(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    return AllOfNode(_branches(ctx, "allOf", value), ctx.location("allOf"))


def compile_any_of(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    return AnyOfNode(_branches(ctx, "anyOf", value), ctx.location("anyOf"))


def compile_one_of(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    return OneOfNode(_branches(ctx, "oneOf", value), ctx.location("oneOf"))


def compile_not(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    return NotNode(ctx.compile(value, "not"), value, ctx.location("not"))


def compile_if(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``if`` together with its ``then``/``else`` companions.

    Without either branch the condition matters only for the annotations it
    produces, so it is dropped in drafts without ``unevaluated*`` keywords.
    """

    has_then = "then" in schema
    has_else = "else" in schema
    if not (has_then or has_else or ctx.traits.unevaluated):
        return None
    condition = ctx.compile(value, "if")
    then = ctx.compile(schema["then"], "then") if has_then else None
    otherwise = ctx.compile(schema["else"], "else") if has_else else None
    return IfThenElseNode(condition, then, otherwise, ctx.location("if"))


def compile_dependent_schemas(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``dependentSchemas``."""

    mapping = expect_mapping(value, key="dependentSchemas", pointer=ctx.pointer)
    if not mapping:
        return None
    schemas = {name: ctx.compile(item, "dependentSchemas", name) for name, item in mapping.items()}
    return DependenciesNode("dependentSchemas", ctx.location("dependentSchemas"), schemas=schemas)


__all__ = [
    "compile_all_of",
    "compile_any_of",
    "compile_dependent_schemas",
    "compile_if",
    "compile_not",
    "compile_one_of",
]
