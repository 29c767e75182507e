# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilers for reference keywords."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..nodes import Node
from ..types import JSONValue
from ..utils import expect_string

if TYPE_CHECKING:
    from ..compiler import SchemaContext


def compile_ref(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    reference = expect_string(value, key="$ref", pointer=ctx.pointer)
    return ctx.compile_reference(reference)


def compile_dynamic_ref(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    reference = expect_string(value, key="$dynamicRef", pointer=ctx.pointer)
    return ctx.compile_dynamic_reference(reference, "$dynamicRef")


def compile_recursive_ref(ctx: SchemaContext, value: JSONValue, schema: Mapping[str, JSONValue]) -> Node | None:
    reference = expect_string(value, key="$recursiveRef", pointer=ctx.pointer)
    return ctx.compile_dynamic_reference(reference, "$recursiveRef")


__all__ = ["compile_dynamic_ref", "compile_recursive_ref", "compile_ref"]
