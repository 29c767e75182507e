# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Nodes for array keywords."""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Sequence

from ..context import EvaluationContext
from ..paths import Location
from ..utils import canonical_key, is_array, render
from ..validation import ErrorKind, ValidationError
from .base import BooleanNode, Node, NodeKind, plural


def _unexpected(items: Sequence[object]) -> str:
    rendered = ", ".join(render(item) for item in items)
    return f"{rendered} {plural(len(items), 'was', 'were')} unexpected"


def _is_false(node: Node) -> bool:
    return isinstance(node, BooleanNode) and not node.value


class PrefixItemsNode(Node):
    """Positional subschemas: ``prefixItems`` or the array form of legacy ``items``."""

    __slots__ = ("schemas",)

    kind = NodeKind.ARRAY

    def __init__(self, keyword: str, schemas: Sequence[Node], location: str) -> None:
        super().__init__(keyword, location)
        self.schemas = tuple(schemas)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        if ctx.tracking:
            ctx.mark_items(min(len(self.schemas), len(instance)))  # type: ignore[arg-type]
        valid = True
        ctx.isolate()
        for schema, item in zip(self.schemas, instance):  # type: ignore[call-overload]
            if not schema.is_valid(item, ctx):
                valid = False
                break
        ctx.release()
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not is_array(instance):
            return
        if ctx.tracking:
            ctx.mark_items(min(len(self.schemas), len(instance)))  # type: ignore[arg-type]
        ctx.isolate()
        for index, (schema, item) in enumerate(zip(self.schemas, instance)):  # type: ignore[call-overload]
            location = keyword_location.extend(self.keyword, index)
            yield from schema.iter_errors(item, instance_location.push(index), location, ctx)
        ctx.release()


class ItemsNode(Node):
    """A schema applied to every item from ``offset`` on.

    Covers schema-form ``items`` (all drafts), 2020-12 ``items`` after
    ``prefixItems`` and legacy ``additionalItems``.
    """

    __slots__ = ("offset", "schema")

    kind = NodeKind.ARRAY

    def __init__(self, keyword: str, schema: Node, offset: int, location: str) -> None:
        super().__init__(keyword, location)
        self.schema = schema
        self.offset = offset

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        if ctx.tracking:
            ctx.mark_all_items()
        if len(instance) <= self.offset:  # type: ignore[arg-type]
            return True
        if _is_false(self.schema):
            return False
        valid = True
        ctx.isolate()
        for item in instance[self.offset :]:  # type: ignore[index]
            if not self.schema.is_valid(item, ctx):
                valid = False
                break
        ctx.release()
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not is_array(instance):
            return
        if ctx.tracking:
            ctx.mark_all_items()
        extra = instance[self.offset :]  # type: ignore[index]
        if not extra:
            return
        if _is_false(self.schema):
            yield self.error(
                ErrorKind.ADDITIONAL_ITEMS,
                f"Additional items are not allowed ({_unexpected(extra)})",
                instance,
                instance_location,
                keyword_location,
            )
            return
        location = keyword_location.push(self.keyword)
        ctx.isolate()
        for index, item in enumerate(extra, start=self.offset):
            yield from self.schema.iter_errors(item, instance_location.push(index), location, ctx)
        ctx.release()


class ContainsNode(Node):
    """``contains`` with optional ``minContains``/``maxContains`` bounds."""

    __slots__ = ("maximum", "minimum", "records", "schema")

    kind = NodeKind.ARRAY

    def __init__(
        self,
        schema: Node,
        location: str,
        *,
        minimum: int = 1,
        maximum: int | None = None,
        records: bool = False,
    ) -> None:
        super().__init__("contains", location)
        self.schema = schema
        self.minimum = minimum
        self.maximum = maximum
        self.records = records

    def _matches(self, instance: Sequence[object], ctx: EvaluationContext, *, exhaustive: bool) -> list[int]:
        matched: list[int] = []
        ctx.isolate()
        for index, item in enumerate(instance):
            if self.schema.is_valid(item, ctx):
                matched.append(index)
                if not exhaustive and self.maximum is None and len(matched) >= self.minimum:
                    break
        ctx.release()
        return matched

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        exhaustive = self.records and ctx.tracking
        if self.minimum == 0 and self.maximum is None and not exhaustive:
            return True
        matched = self._matches(instance, ctx, exhaustive=exhaustive)  # type: ignore[arg-type]
        if exhaustive:
            ctx.mark_indices(matched)
        if len(matched) < self.minimum:
            return False
        return self.maximum is None or len(matched) <= self.maximum

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        count = len(self._matches(instance, ctx, exhaustive=True))  # type: ignore[arg-type]
        if count < self.minimum:
            if count == 0:
                yield self.error(
                    ErrorKind.CONTAINS,
                    f"None of {render(instance)} are valid under the given schema",
                    instance,
                    instance_location,
                    keyword_location,
                )
            else:
                yield self.error(
                    ErrorKind.MIN_CONTAINS,
                    f"{render(instance)} has less than {self.minimum} matching "
                    f"{plural(self.minimum, 'item', 'items')}",
                    instance,
                    instance_location,
                    keyword_location,
                    keyword="minContains",
                )
            return
        yield self.error(
            ErrorKind.MAX_CONTAINS,
            f"{render(instance)} has more than {self.maximum} matching {plural(self.maximum or 0, 'item', 'items')}",
            instance,
            instance_location,
            keyword_location,
            keyword="maxContains",
        )


class ItemCountNode(Node):
    """``minItems`` and ``maxItems``."""

    __slots__ = ("limit", "lower")

    kind = NodeKind.ARRAY

    def __init__(self, keyword: str, limit: int, location: str, *, lower: bool) -> None:
        super().__init__(keyword, location)
        self.limit = limit
        self.lower = lower

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        size = len(instance)  # type: ignore[arg-type]
        return size >= self.limit if self.lower else size <= self.limit

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        unit = plural(self.limit, "item", "items")
        if self.lower:
            kind, message = ErrorKind.MIN_ITEMS, f"{render(instance)} has less than {self.limit} {unit}"
        else:
            kind, message = ErrorKind.MAX_ITEMS, f"{render(instance)} has more than {self.limit} {unit}"
        yield self.error(kind, message, instance, instance_location, keyword_location)


class UniqueItemsNode(Node):
    """``uniqueItems: true`` under JSON equality."""

    __slots__ = ()

    kind = NodeKind.ARRAY

    def __init__(self, location: str) -> None:
        super().__init__("uniqueItems", location)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        seen: set[Hashable] = set()
        for item in instance:  # type: ignore[attr-defined]
            key = canonical_key(item)
            if key in seen:
                return False
            seen.add(key)
        return True

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.UNIQUE_ITEMS,
                f"{render(instance)} has non-unique elements",
                instance,
                instance_location,
                keyword_location,
            )


class UnevaluatedItemsNode(Node):
    """``unevaluatedItems``: applies to items no sibling or in-place subschema evaluated."""

    __slots__ = ("schema",)

    kind = NodeKind.ARRAY

    def __init__(self, schema: Node, location: str) -> None:
        super().__init__("unevaluatedItems", location)
        self.schema = schema

    def _unevaluated(self, instance: Sequence[object], ctx: EvaluationContext) -> list[int]:
        frame = ctx.frame
        return [index for index in range(len(instance)) if not frame.item_evaluated(index)]

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_array(instance):
            return True
        pending = self._unevaluated(instance, ctx)  # type: ignore[arg-type]
        valid = True
        ctx.isolate()
        for index in pending:
            if not self.schema.is_valid(instance[index], ctx):  # type: ignore[index]
                valid = False
                break
        ctx.release()
        if valid:
            ctx.mark_all_items()
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not is_array(instance):
            return
        pending = self._unevaluated(instance, ctx)  # type: ignore[arg-type]
        if not pending:
            ctx.mark_all_items()
            return
        if _is_false(self.schema):
            yield self.error(
                ErrorKind.UNEVALUATED_ITEMS,
                "Unevaluated items are not allowed "
                f"({_unexpected([instance[index] for index in pending])})",  # type: ignore[index]
                instance,
                instance_location,
                keyword_location,
            )
            return
        failed = False
        location = keyword_location.push(self.keyword)
        ctx.isolate()
        for index in pending:
            item = instance[index]  # type: ignore[index]
            for error in self.schema.iter_errors(item, instance_location.push(index), location, ctx):
                failed = True
                yield error
        ctx.release()
        if not failed:
            ctx.mark_all_items()


__all__ = [
    "ContainsNode",
    "ItemCountNode",
    "ItemsNode",
    "PrefixItemsNode",
    "UnevaluatedItemsNode",
    "UniqueItemsNode",
]
