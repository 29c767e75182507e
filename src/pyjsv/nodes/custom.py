# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Adapter turning user keyword validators into tree nodes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from ..context import EvaluationContext
from ..paths import Location
from ..utils import render
from ..validation import ErrorKind, ValidationError
from .base import Node, NodeKind


@runtime_checkable
class KeywordValidator(Protocol):
    """Protocol implemented by objects returned from custom keyword hooks.

    An optional ``message(instance) -> str`` method customises the error text.
    """

    def is_valid(self, instance: object) -> bool:
        """Return ``True`` when ``instance`` satisfies the keyword."""
        ...


class CustomKeywordNode(Node):
    """A user-supplied keyword validator embedded in the tree."""

    __slots__ = ("validator", "value")

    kind = NodeKind.CUSTOM

    def __init__(self, keyword: str, value: object, validator: KeywordValidator, location: str) -> None:
        super().__init__(keyword, location)
        self.value = value
        self.validator = validator

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return bool(self.validator.is_valid(instance))

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        describe = getattr(self.validator, "message", None)
        if callable(describe):
            message = str(describe(instance))
        else:
            message = f"{render(instance)} is not valid under the '{self.keyword}' keyword"
        yield self.error(ErrorKind.CUSTOM, message, instance, instance_location, keyword_location)


__all__ = ["CustomKeywordNode", "KeywordValidator"]
