# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Nodes for object keywords."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from regex import Pattern

from ..context import EvaluationContext
from ..paths import Location
from ..utils import render
from ..validation import ErrorKind, ValidationError
from .base import BooleanNode, Node, NodeKind, plural


def _unexpected(names: Sequence[str]) -> str:
    rendered = ", ".join(f"'{name}'" for name in names)
    return f"{rendered} {plural(len(names), 'was', 'were')} unexpected"


def _is_false(node: Node) -> bool:
    return isinstance(node, BooleanNode) and not node.value


class PropertiesNode(Node):
    """``properties``: named subschemas for matching members."""

    __slots__ = ("schemas",)

    kind = NodeKind.OBJECT

    def __init__(self, schemas: Mapping[str, Node], location: str) -> None:
        super().__init__("properties", location)
        self.schemas = dict(schemas)

    def _present(self, instance: Mapping[str, object]) -> list[str]:
        if len(instance) < len(self.schemas):
            return [name for name in instance if name in self.schemas]
        return [name for name in self.schemas if name in instance]

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        present = self._present(instance)
        if ctx.tracking:
            ctx.mark_properties(present)
        valid = True
        ctx.isolate()
        for name in present:
            if not self.schemas[name].is_valid(instance[name], ctx):
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
        if not isinstance(instance, Mapping):
            return
        present = self._present(instance)
        if ctx.tracking:
            ctx.mark_properties(present)
        ctx.isolate()
        for name in present:
            yield from self.schemas[name].iter_errors(
                instance[name],
                instance_location.push(name),
                keyword_location.extend("properties", name),
                ctx,
            )
        ctx.release()


class PatternPropertiesNode(Node):
    """``patternProperties``: subschemas for members whose name matches a regex."""

    __slots__ = ("patterns",)

    kind = NodeKind.OBJECT

    def __init__(self, patterns: Sequence[tuple[str, Pattern[str], Node]], location: str) -> None:
        super().__init__("patternProperties", location)
        self.patterns = tuple(patterns)

    def _pairs(self, instance: Mapping[str, object], ctx: EvaluationContext) -> list[tuple[str, str, Node]]:
        pairs = [
            (name, source, schema) for name in instance for source, regex, schema in self.patterns if regex.search(name)
        ]
        if ctx.tracking:
            ctx.mark_properties(name for name, _, _ in pairs)
        return pairs

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        pairs = self._pairs(instance, ctx)
        valid = True
        ctx.isolate()
        for name, _, schema in pairs:
            if not schema.is_valid(instance[name], ctx):
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
        if not isinstance(instance, Mapping):
            return
        pairs = self._pairs(instance, ctx)
        ctx.isolate()
        for name, source, schema in pairs:
            yield from schema.iter_errors(
                instance[name],
                instance_location.push(name),
                keyword_location.extend("patternProperties", source),
                ctx,
            )
        ctx.release()


class AdditionalPropertiesNode(Node):
    """``additionalProperties``: members matched by neither sibling keyword."""

    __slots__ = ("known", "patterns", "schema")

    kind = NodeKind.OBJECT

    def __init__(self, schema: Node, known: frozenset[str], patterns: Sequence[Pattern[str]], location: str) -> None:
        super().__init__("additionalProperties", location)
        self.schema = schema
        self.known = known
        self.patterns = tuple(patterns)

    def _extra(self, instance: Mapping[str, object]) -> list[str]:
        return [
            name
            for name in instance
            if name not in self.known and not any(regex.search(name) for regex in self.patterns)
        ]

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        extra = self._extra(instance)
        if ctx.tracking:
            ctx.mark_all_properties()
        if not extra:
            return True
        if _is_false(self.schema):
            return False
        valid = True
        ctx.isolate()
        for name in extra:
            if not self.schema.is_valid(instance[name], ctx):
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
        if not isinstance(instance, Mapping):
            return
        extra = self._extra(instance)
        if ctx.tracking:
            ctx.mark_all_properties()
        if not extra:
            return
        if _is_false(self.schema):
            yield self.error(
                ErrorKind.ADDITIONAL_PROPERTIES,
                f"Additional properties are not allowed ({_unexpected(extra)})",
                instance,
                instance_location,
                keyword_location,
            )
            return
        location = keyword_location.push(self.keyword)
        ctx.isolate()
        for name in extra:
            yield from self.schema.iter_errors(instance[name], instance_location.push(name), location, ctx)
        ctx.release()


class RequiredNode(Node):
    """``required`` (and draft 4's array form of it)."""

    __slots__ = ("names",)

    kind = NodeKind.OBJECT

    def __init__(self, names: Sequence[str], location: str) -> None:
        super().__init__("required", location)
        self.names = tuple(names)

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        return all(name in instance for name in self.names)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not isinstance(instance, Mapping):
            return
        for name in self.names:
            if name not in instance:
                yield self.error(
                    ErrorKind.REQUIRED,
                    f"{render(name)} is a required property",
                    instance,
                    instance_location,
                    keyword_location,
                )


class PropertyCountNode(Node):
    """``minProperties`` and ``maxProperties``."""

    __slots__ = ("limit", "lower")

    kind = NodeKind.OBJECT

    def __init__(self, keyword: str, limit: int, location: str, *, lower: bool) -> None:
        super().__init__(keyword, location)
        self.limit = limit
        self.lower = lower

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
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
        unit = plural(self.limit, "property", "properties")
        if self.lower:
            kind, message = ErrorKind.MIN_PROPERTIES, f"{render(instance)} has less than {self.limit} {unit}"
        else:
            kind, message = ErrorKind.MAX_PROPERTIES, f"{render(instance)} has more than {self.limit} {unit}"
        yield self.error(kind, message, instance, instance_location, keyword_location)


class PropertyNamesNode(Node):
    """``propertyNames``: every member name must satisfy the subschema."""

    __slots__ = ("schema",)

    kind = NodeKind.OBJECT

    def __init__(self, schema: Node, location: str) -> None:
        super().__init__("propertyNames", location)
        self.schema = schema

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        valid = True
        ctx.isolate()
        for name in instance:
            if not self.schema.is_valid(name, ctx):
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
        if not isinstance(instance, Mapping):
            return
        location = keyword_location.push(self.keyword)
        ctx.isolate()
        for name in instance:
            yield from self.schema.iter_errors(name, instance_location, location, ctx)
        ctx.release()


class DependenciesNode(Node):
    """Conditional requirements triggered by the presence of a member.

    Serves ``dependentRequired`` (name lists), ``dependentSchemas``
    (subschemas applied in place) and legacy ``dependencies`` (either form).
    """

    __slots__ = ("requirements", "schemas")

    kind = NodeKind.OBJECT

    def __init__(
        self,
        keyword: str,
        location: str,
        *,
        requirements: Mapping[str, Sequence[str]] | None = None,
        schemas: Mapping[str, Node] | None = None,
    ) -> None:
        super().__init__(keyword, location)
        self.requirements = {name: tuple(names) for name, names in (requirements or {}).items()}
        self.schemas = dict(schemas or {})

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        for name, names in self.requirements.items():
            if name in instance and not all(required in instance for required in names):
                return False
        valid = True
        for name, schema in self.schemas.items():
            if name in instance and not schema.is_valid(instance, ctx):
                valid = False
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
        if not isinstance(instance, Mapping):
            return
        for name, names in self.requirements.items():
            if name not in instance:
                continue
            for required in names:
                if required not in instance:
                    yield self.error(
                        ErrorKind.DEPENDENT_REQUIRED,
                        f"{render(required)} is a required property when {render(name)} is present",
                        instance,
                        instance_location,
                        keyword_location.push(self.keyword),
                        keyword=name,
                    )
        for name, schema in self.schemas.items():
            if name in instance:
                yield from schema.iter_errors(instance, instance_location, keyword_location.extend(self.keyword, name), ctx)

    def inplace(self) -> Iterator[Node]:
        return iter(self.schemas.values())


class UnevaluatedPropertiesNode(Node):
    """``unevaluatedProperties``: members no sibling or in-place subschema evaluated."""

    __slots__ = ("schema",)

    kind = NodeKind.OBJECT

    def __init__(self, schema: Node, location: str) -> None:
        super().__init__("unevaluatedProperties", location)
        self.schema = schema

    def _unevaluated(self, instance: Mapping[str, object], ctx: EvaluationContext) -> list[str]:
        frame = ctx.frame
        return [name for name in instance if not frame.property_evaluated(name)]

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        if not isinstance(instance, Mapping):
            return True
        pending = self._unevaluated(instance, ctx)
        valid = True
        ctx.isolate()
        for name in pending:
            if not self.schema.is_valid(instance[name], ctx):
                valid = False
                break
        ctx.release()
        if valid:
            ctx.mark_all_properties()
        return valid

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        if not isinstance(instance, Mapping):
            return
        pending = self._unevaluated(instance, ctx)
        if not pending:
            ctx.mark_all_properties()
            return
        if _is_false(self.schema):
            yield self.error(
                ErrorKind.UNEVALUATED_PROPERTIES,
                f"Unevaluated properties are not allowed ({_unexpected(pending)})",
                instance,
                instance_location,
                keyword_location,
            )
            return
        failed = False
        location = keyword_location.push(self.keyword)
        ctx.isolate()
        for name in pending:
            for error in self.schema.iter_errors(instance[name], instance_location.push(name), location, ctx):
                failed = True
                yield error
        ctx.release()
        if not failed:
            ctx.mark_all_properties()


__all__ = [
    "AdditionalPropertiesNode",
    "DependenciesNode",
    "PatternPropertiesNode",
    "PropertiesNode",
    "PropertyCountNode",
    "PropertyNamesNode",
    "RequiredNode",
    "UnevaluatedPropertiesNode",
]
