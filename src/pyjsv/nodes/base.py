# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Base classes shared by every validator node.

Each node implements the same two operations:

* ``is_valid(instance, ctx)`` answers a yes/no question and stops at the
  first failure it can.
* ``iter_errors(instance, instance_location, keyword_location, ctx)`` is a
  generator producing every failure, in keyword order, and building error
  objects only when they are yielded.

``keyword_location`` passed to a keyword node is the evaluation path of the
schema object that owns it; the node appends its own keyword when reporting.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum
from typing import ClassVar

from ..context import EvaluationContext
from ..paths import Location
from ..utils import render
from ..validation import ErrorKind, ValidationError


class NodeKind(str, Enum):
    """Tag the closed family of node variants."""

    APPLICATOR = "applicator"
    ARRAY = "array"
    BOOLEAN = "boolean"
    CONST = "const"
    CUSTOM = "custom"
    ENUM = "enum"
    NUMERIC = "numeric"
    OBJECT = "object"
    REFERENCE = "reference"
    SCHEMA = "schema"
    STRING = "string"
    TYPE = "type"


class Node:
    """A compiled keyword (or schema) ready to evaluate instances.

    Attributes:
        keyword: Keyword the node was compiled from.
        location: Absolute keyword location, used in error reports.
    """

    __slots__ = ("keyword", "location")

    kind: ClassVar[NodeKind]

    def __init__(self, keyword: str, location: str) -> None:
        self.keyword = keyword
        self.location = location

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        """Return ``True`` when ``instance`` satisfies this node."""

        raise NotImplementedError

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        """Yield every failure of ``instance`` against this node."""

        if not self.is_valid(instance, ctx):
            yield self.error(ErrorKind.CUSTOM, f"{render(instance)} is invalid", instance, instance_location, keyword_location)

    def inplace(self) -> Iterator[Node]:
        """Yield child nodes evaluated at the same instance location."""

        return iter(())

    def error(
        self,
        kind: ErrorKind,
        message: str,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        context: Sequence[ValidationError] = (),
        *,
        keyword: str | None = None,
    ) -> ValidationError:
        """Build a :class:`ValidationError` reported by this node (or by a sibling ``keyword``)."""

        return ValidationError(
            kind,
            message,
            instance=instance,
            instance_location=instance_location,
            keyword_location=keyword_location.push(keyword or self.keyword),
            absolute_keyword_location=self.location,
            context=context,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.keyword!r}>"


class SchemaNode(Node):
    """A compiled schema object: its keyword nodes, evaluated in order.

    Attributes:
        key: Node-table key of the schema.
        base_uri: Base URI of the resource the schema belongs to.
        validators: Keyword nodes in dispatch order, ``unevaluated*`` last.
    """

    __slots__ = ("base_uri", "key", "validators")

    kind = NodeKind.SCHEMA

    def __init__(self, key: str, base_uri: str, location: str, validators: Sequence[Node]) -> None:
        super().__init__("", location)
        self.key = key
        self.base_uri = base_uri
        self.validators = tuple(validators)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        pushed = ctx.dynamic and ctx.enter_resource(self.base_uri)
        if ctx.tracking:
            ctx.enter()
        valid = True
        for validator in self.validators:
            if not validator.is_valid(instance, ctx):
                valid = False
                break
        if ctx.tracking:
            ctx.leave(valid)
        if pushed:
            ctx.leave_resource()
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        pushed = ctx.dynamic and ctx.enter_resource(self.base_uri)
        if ctx.tracking:
            ctx.enter()
        failed = False
        for validator in self.validators:
            for error in validator.iter_errors(instance, instance_location, keyword_location, ctx):
                failed = True
                yield error
        if ctx.tracking:
            ctx.leave(not failed)
        if pushed:
            ctx.leave_resource()

    def inplace(self) -> Iterator[Node]:
        return iter(self.validators)

    def __repr__(self) -> str:
        return f"<SchemaNode {self.key!r} ({len(self.validators)} keywords)>"


class BooleanNode(Node):
    """The ``true`` and ``false`` schemas."""

    __slots__ = ("value",)

    kind = NodeKind.BOOLEAN

    def __init__(self, value: bool, location: str) -> None:
        super().__init__("", location)
        self.value = value

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return self.value

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.value:
            yield ValidationError(
                ErrorKind.FALSE_SCHEMA,
                f"False schema does not allow {render(instance)}",
                instance=instance,
                instance_location=instance_location,
                keyword_location=keyword_location,
                absolute_keyword_location=self.location,
            )

    def __repr__(self) -> str:
        return f"<BooleanNode {self.value}>"


def plural(count: int, singular: str, many: str) -> str:
    """Return ``singular`` or ``many`` depending on ``count``."""

    return singular if count == 1 else many


__all__ = [
    "BooleanNode",
    "Node",
    "NodeKind",
    "SchemaNode",
    "plural",
]
