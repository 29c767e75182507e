# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Keyword compilers grouped by vocabulary.

Every compiler has the signature ``(ctx, value, schema) -> Node | None``. A
``None`` result means the keyword imposes no constraint for this schema.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeAlias

from ..nodes import Node
from ..types import JSONValue

if TYPE_CHECKING:
    from ..compiler import SchemaContext

KeywordCompiler: TypeAlias = Callable[["SchemaContext", JSONValue, Mapping[str, JSONValue]], Node | None]

__all__ = ["KeywordCompiler"]
