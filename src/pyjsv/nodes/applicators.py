# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-place applicators: ``allOf``, ``anyOf``, ``oneOf``, ``not`` and ``if``.

Subschemas here are evaluated against the same instance, so their annotations
reach the enclosing schema whenever they validate successfully.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from ..context import EvaluationContext
from ..paths import Location
from ..utils import render
from ..validation import ErrorKind, ValidationError
from .base import Node, NodeKind


class AllOfNode(Node):
    """``allOf``: every branch must hold; failures are reported flat."""

    __slots__ = ("branches",)

    kind = NodeKind.APPLICATOR

    def __init__(self, branches: Sequence[Node], location: str) -> None:
        super().__init__("allOf", location)
        self.branches = tuple(branches)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        for branch in self.branches:
            if not branch.is_valid(instance, ctx):
                return False
        return True

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        for index, branch in enumerate(self.branches):
            yield from branch.iter_errors(instance, instance_location, keyword_location.extend("allOf", index), ctx)

    def inplace(self) -> Iterator[Node]:
        return iter(self.branches)


class AnyOfNode(Node):
    """``anyOf``: at least one branch must hold.

    When annotations are tracked every branch is evaluated so that each
    successful one contributes its evaluated properties and items.
    """

    __slots__ = ("branches",)

    kind = NodeKind.APPLICATOR

    def __init__(self, branches: Sequence[Node], location: str) -> None:
        super().__init__("anyOf", location)
        self.branches = tuple(branches)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        valid = False
        for branch in self.branches:
            if branch.is_valid(instance, ctx):
                valid = True
                if not ctx.tracking:
                    break
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        collected: list[ValidationError] = []
        for index, branch in enumerate(self.branches):
            collected.extend(branch.iter_errors(instance, instance_location, keyword_location.extend("anyOf", index), ctx))
        yield self.error(
            ErrorKind.ANY_OF,
            f"{render(instance)} is not valid under any of the schemas listed in the 'anyOf' keyword",
            instance,
            instance_location,
            keyword_location,
            context=collected,
        )

    def inplace(self) -> Iterator[Node]:
        return iter(self.branches)


class OneOfNode(Node):
    """``oneOf``: exactly one branch must hold, so every branch is evaluated."""

    __slots__ = ("branches",)

    kind = NodeKind.APPLICATOR

    def __init__(self, branches: Sequence[Node], location: str) -> None:
        super().__init__("oneOf", location)
        self.branches = tuple(branches)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        matched = 0
        for branch in self.branches:
            if branch.is_valid(instance, ctx):
                matched += 1
                if matched > 1 and not ctx.tracking:
                    return False
        return matched == 1

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        collected: list[ValidationError] = []
        passing: list[int] = []
        for index, branch in enumerate(self.branches):
            errors = list(branch.iter_errors(instance, instance_location, keyword_location.extend("oneOf", index), ctx))
            if errors:
                collected.extend(errors)
            else:
                passing.append(index)
        if len(passing) == 1:
            return
        if not passing:
            yield self.error(
                ErrorKind.ONE_OF_NOT_VALID,
                f"{render(instance)} is not valid under any of the schemas listed in the 'oneOf' keyword",
                instance,
                instance_location,
                keyword_location,
                context=collected,
            )
            return
        indices = ", ".join(str(index) for index in passing)
        yield self.error(
            ErrorKind.ONE_OF_MULTIPLE_VALID,
            f"{render(instance)} is valid under more than one of the schemas listed in the 'oneOf' keyword "
            f"(valid branches: {indices})",
            instance,
            instance_location,
            keyword_location,
        )

    def inplace(self) -> Iterator[Node]:
        return iter(self.branches)


class NotNode(Node):
    """``not``: the subschema must fail. Never contributes annotations."""

    __slots__ = ("negated", "schema")

    kind = NodeKind.APPLICATOR

    def __init__(self, negated: Node, schema: object, location: str) -> None:
        super().__init__("not", location)
        self.negated = negated
        self.schema = schema

    def _negated_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not ctx.tracking:
            return self.negated.is_valid(instance, ctx)
        ctx.enter()
        valid = self.negated.is_valid(instance, ctx)
        ctx.leave(False)
        return valid

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return not self._negated_valid(instance, ctx)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self._negated_valid(instance, ctx):
            yield self.error(
                ErrorKind.NOT,
                f"{render(instance)} should not be valid under {render(self.schema)}",
                instance,
                instance_location,
                keyword_location,
            )

    def inplace(self) -> Iterator[Node]:
        yield self.negated


class IfThenElseNode(Node):
    """``if`` with optional ``then``/``else`` branches.

    The ``if`` outcome is never an error by itself. Its annotations count only
    when it passes.
    """

    __slots__ = ("condition", "otherwise", "then")

    kind = NodeKind.APPLICATOR

    def __init__(self, condition: Node, then: Node | None, otherwise: Node | None, location: str) -> None:
        super().__init__("if", location)
        self.condition = condition
        self.then = then
        self.otherwise = otherwise

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if self.condition.is_valid(instance, ctx):
            return self.then is None or self.then.is_valid(instance, ctx)
        return self.otherwise is None or self.otherwise.is_valid(instance, ctx)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.condition.is_valid(instance, ctx):
            if self.then is not None:
                yield from self.then.iter_errors(instance, instance_location, keyword_location.push("then"), ctx)
        elif self.otherwise is not None:
            yield from self.otherwise.iter_errors(instance, instance_location, keyword_location.push("else"), ctx)

    def inplace(self) -> Iterator[Node]:
        yield self.condition
        if self.then is not None:
            yield self.then
        if self.otherwise is not None:
            yield self.otherwise


__all__ = ["AllOfNode", "AnyOfNode", "IfThenElseNode", "NotNode", "OneOfNode"]
