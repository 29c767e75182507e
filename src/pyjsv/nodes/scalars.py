# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Nodes for type, enumeration, numeric and string keywords."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator, Mapping, Sequence

from regex import Pattern

from ..context import EvaluationContext
from ..paths import Location
from ..utils import canonical_key, is_array, is_integer, is_multiple_of, is_number, json_equal, render
from ..validation import ErrorKind, ValidationError
from .base import Node, NodeKind, plural


class TypeNode(Node):
    """``type`` with one or more JSON type names."""

    __slots__ = ("_float_integers", "types")

    kind = NodeKind.TYPE

    def __init__(self, types: Sequence[str], location: str, *, float_integers: bool) -> None:
        super().__init__("type", location)
        self.types = tuple(types)
        self._float_integers = float_integers

    def _matches(self, instance: object, name: str) -> bool:
        if name == "string":
            return isinstance(instance, str)
        if name == "object":
            return isinstance(instance, Mapping)
        if name == "array":
            return is_array(instance)
        if name == "number":
            return is_number(instance)
        if name == "integer":
            return is_integer(instance, allow_float=self._float_integers)
        if name == "boolean":
            return isinstance(instance, bool)
        if name == "null":
            return instance is None
        return False

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return any(self._matches(instance, name) for name in self.types)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        names = ", ".join(f'"{name}"' for name in self.types)
        noun = plural(len(self.types), "type", "types")
        yield self.error(
            ErrorKind.TYPE,
            f"{render(instance)} is not of {noun} {names}",
            instance,
            instance_location,
            keyword_location,
        )


class EnumNode(Node):
    """``enum`` compared with JSON equality."""

    __slots__ = ("_keys", "options")

    kind = NodeKind.ENUM

    def __init__(self, options: Sequence[object], location: str) -> None:
        super().__init__("enum", location)
        self.options = tuple(options)
        self._keys: frozenset[Hashable] = frozenset(canonical_key(option) for option in self.options)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return canonical_key(instance) in self._keys

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.ENUM,
                f"{render(instance)} is not one of {render(list(self.options))}",
                instance,
                instance_location,
                keyword_location,
            )


class ConstNode(Node):
    """``const`` compared with JSON equality."""

    __slots__ = ("value",)

    kind = NodeKind.CONST

    def __init__(self, value: object, location: str) -> None:
        super().__init__("const", location)
        self.value = value

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return json_equal(instance, self.value)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.CONST,
                f"{render(self.value)} was expected",
                instance,
                instance_location,
                keyword_location,
            )


class BoundNode(Node):
    """``minimum``, ``maximum``, ``exclusiveMinimum`` and ``exclusiveMaximum``.

    Draft 4 boolean exclusive flags compile to this node too, with
    ``exclusive`` set and the keyword of the bound they modify.
    """

    __slots__ = ("_error_kind", "_phrase", "exclusive", "limit", "lower")

    kind = NodeKind.NUMERIC

    def __init__(self, keyword: str, limit: int | float, location: str, *, lower: bool, exclusive: bool) -> None:
        super().__init__(keyword, location)
        self.limit = limit
        self.lower = lower
        self.exclusive = exclusive
        if lower:
            self._error_kind = ErrorKind.EXCLUSIVE_MINIMUM if exclusive else ErrorKind.MINIMUM
            self._phrase = "less than or equal to the minimum of" if exclusive else "less than the minimum of"
        else:
            self._error_kind = ErrorKind.EXCLUSIVE_MAXIMUM if exclusive else ErrorKind.MAXIMUM
            self._phrase = "greater than or equal to the maximum of" if exclusive else "greater than the maximum of"

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_number(instance):
            return True
        if self.lower:
            return instance > self.limit if self.exclusive else instance >= self.limit  # type: ignore[operator]
        return instance < self.limit if self.exclusive else instance <= self.limit  # type: ignore[operator]

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                self._error_kind,
                f"{render(instance)} is {self._phrase} {render(self.limit)}",
                instance,
                instance_location,
                keyword_location,
            )


class MultipleOfNode(Node):
    """``multipleOf`` using exact decimal arithmetic for floats."""

    __slots__ = ("divisor",)

    kind = NodeKind.NUMERIC

    def __init__(self, divisor: int | float, location: str) -> None:
        super().__init__("multipleOf", location)
        self.divisor = divisor

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not is_number(instance):
            return True
        return is_multiple_of(instance, self.divisor)  # type: ignore[arg-type]

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.MULTIPLE_OF,
                f"{render(instance)} is not a multiple of {render(self.divisor)}",
                instance,
                instance_location,
                keyword_location,
            )


class LengthNode(Node):
    """``minLength`` and ``maxLength`` counted in code points."""

    __slots__ = ("limit", "lower")

    kind = NodeKind.STRING

    def __init__(self, keyword: str, limit: int, location: str, *, lower: bool) -> None:
        super().__init__(keyword, location)
        self.limit = limit
        self.lower = lower

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, str):
            return True
        return len(instance) >= self.limit if self.lower else len(instance) <= self.limit

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if self.is_valid(instance, ctx):
            return
        unit = plural(self.limit, "character", "characters")
        if self.lower:
            kind, message = ErrorKind.MIN_LENGTH, f"{render(instance)} is shorter than {self.limit} {unit}"
        else:
            kind, message = ErrorKind.MAX_LENGTH, f"{render(instance)} is longer than {self.limit} {unit}"
        yield self.error(kind, message, instance, instance_location, keyword_location)


class PatternNode(Node):
    """``pattern``, matched anywhere in the string."""

    __slots__ = ("pattern", "regex")

    kind = NodeKind.STRING

    def __init__(self, pattern: str, regex: Pattern[str], location: str) -> None:
        super().__init__("pattern", location)
        self.pattern = pattern
        self.regex = regex

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, str):
            return True
        return self.regex.search(instance) is not None

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.PATTERN,
                f"{render(instance)} does not match {render(self.pattern)}",
                instance,
                instance_location,
                keyword_location,
            )


class FormatNode(Node):
    """``format`` backed by a registered predicate."""

    __slots__ = ("check", "name")

    kind = NodeKind.STRING

    def __init__(self, name: str, check: Callable[[str], bool], location: str) -> None:
        super().__init__("format", location)
        self.name = name
        self.check = check

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, str):
            return True
        return bool(self.check(instance))

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not self.is_valid(instance, ctx):
            yield self.error(
                ErrorKind.FORMAT,
                f"{render(instance)} is not a {render(self.name)}",
                instance,
                instance_location,
                keyword_location,
            )


__all__ = [
    "BoundNode",
    "ConstNode",
    "EnumNode",
    "FormatNode",
    "LengthNode",
    "MultipleOfNode",
    "PatternNode",
    "TypeNode",
]
