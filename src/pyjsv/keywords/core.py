# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilers for type, enumeration, numeric and string keywords."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from ..errors import InvalidSchema
from ..nodes import BoundNode, ConstNode, EnumNode, FormatNode, LengthNode, MultipleOfNode, Node, PatternNode, TypeNode
from ..types import JSONValue
from ..utils import expect_array, expect_bool, expect_non_negative_integer, expect_number, expect_string, is_array

if TYPE_CHECKING:
    from ..compiler import SchemaContext

JSON_TYPES: Final[frozenset[str]] = frozenset({"array", "boolean", "integer", "null", "number", "object", "string"})


def compile_type(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``type`` from a single name or an array of names."""

    names: list[str] = []
    candidates = value if is_array(value) else [value]
    for candidate in candidates:  # type: ignore[union-attr]
        if not isinstance(candidate, str) or candidate not in JSON_TYPES:
            raise InvalidSchema(
                f"{ctx.pointer_of('type')}: {candidate!r} is not a valid JSON type",
                pointer=ctx.pointer_of("type"),
            )
        names.append(candidate)
    return TypeNode(names, ctx.location("type"), float_integers=ctx.traits.float_integers)


def compile_enum(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``enum``."""

    options = expect_array(value, key="enum", pointer=ctx.pointer, non_empty=not ctx.traits.boolean_schemas)
    return EnumNode(list(options), ctx.location("enum"))


def compile_const(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``const``; any JSON value is allowed."""

    return ConstNode(value, ctx.location("const"))


def compile_multiple_of(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``multipleOf``, which must be strictly positive."""

    divisor = expect_number(value, key="multipleOf", pointer=ctx.pointer)
    if divisor <= 0:
        raise InvalidSchema(f"{ctx.pointer_of('multipleOf')}: expected a number greater than 0", pointer=ctx.pointer)
    return MultipleOfNode(divisor, ctx.location("multipleOf"))


def _legacy_exclusive(ctx: SchemaContext, schema: Mapping[str, JSONValue], keyword: str) -> bool:
    flag = schema.get(keyword, False)
    if not ctx.traits.boolean_exclusive_bounds:
        return False
    return expect_bool(flag, key=keyword, pointer=ctx.pointer)


def compile_minimum(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``minimum`` (honouring draft 4's boolean ``exclusiveMinimum``)."""

    limit = expect_number(value, key="minimum", pointer=ctx.pointer)
    exclusive = _legacy_exclusive(ctx, schema, "exclusiveMinimum")
    return BoundNode("minimum", limit, ctx.location("minimum"), lower=True, exclusive=exclusive)


def compile_maximum(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``maximum`` (honouring draft 4's boolean ``exclusiveMaximum``)."""

    limit = expect_number(value, key="maximum", pointer=ctx.pointer)
    exclusive = _legacy_exclusive(ctx, schema, "exclusiveMaximum")
    return BoundNode("maximum", limit, ctx.location("maximum"), lower=False, exclusive=exclusive)


def compile_exclusive_minimum(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile numeric ``exclusiveMinimum`` (draft 6 onward)."""

    limit = expect_number(value, key="exclusiveMinimum", pointer=ctx.pointer)
    return BoundNode("exclusiveMinimum", limit, ctx.location("exclusiveMinimum"), lower=True, exclusive=True)


def compile_exclusive_maximum(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile numeric ``exclusiveMaximum`` (draft 6 onward)."""

    limit = expect_number(value, key="exclusiveMaximum", pointer=ctx.pointer)
    return BoundNode("exclusiveMaximum", limit, ctx.location("exclusiveMaximum"), lower=False, exclusive=True)


def compile_min_length(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="minLength", pointer=ctx.pointer)
    if limit == 0:
        return None
    return LengthNode("minLength", limit, ctx.location("minLength"), lower=True)


def compile_max_length(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    limit = expect_non_negative_integer(value, key="maxLength", pointer=ctx.pointer)
    return LengthNode("maxLength", limit, ctx.location("maxLength"), lower=False)


def compile_pattern(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``pattern``; an invalid regular expression is a schema error."""

    source = expect_string(value, key="pattern", pointer=ctx.pointer)
    return PatternNode(source, ctx.regex(source, "pattern"), ctx.location("pattern"))


def compile_format(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    """Compile ``format`` against the registered format predicates.

    Unregistered names are annotations unless unknown formats are rejected.
    """

    name = expect_string(value, key="format", pointer=ctx.pointer)
    check = ctx.options.custom_formats.get(name)
    if check is not None:
        return FormatNode(name, check, ctx.location("format"))
    if not ctx.options.ignore_unknown_formats:
        raise InvalidSchema(f"{ctx.pointer_of('format')}: unknown format '{name}'", pointer=ctx.pointer_of("format"))
    return None


__all__ = [
    "JSON_TYPES",
    "compile_const",
    "compile_enum",
    "compile_exclusive_maximum",
    "compile_exclusive_minimum",
    "compile_format",
    "compile_max_length",
    "compile_maximum",
    "compile_min_length",
    "compile_minimum",
    "compile_multiple_of",
    "compile_pattern",
    "compile_type",
]
