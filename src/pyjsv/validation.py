# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validation errors reported by compiled validators."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from functools import cached_property

from .paths import Location


class ErrorKind(str, Enum):
    """Enumerate the kinds of validation failure."""

    ADDITIONAL_ITEMS = "additionalItems"
    ADDITIONAL_PROPERTIES = "additionalProperties"
    ANY_OF = "anyOf"
    CONST = "const"
    CONTAINS = "contains"
    CUSTOM = "custom"
    DEPENDENT_REQUIRED = "dependentRequired"
    DEPTH_LIMIT = "depthLimit"
    ENUM = "enum"
    EXCLUSIVE_MAXIMUM = "exclusiveMaximum"
    EXCLUSIVE_MINIMUM = "exclusiveMinimum"
    FALSE_SCHEMA = "falseSchema"
    FORMAT = "format"
    MAX_CONTAINS = "maxContains"
    MAX_ITEMS = "maxItems"
    MAX_LENGTH = "maxLength"
    MAX_PROPERTIES = "maxProperties"
    MAXIMUM = "maximum"
    MIN_CONTAINS = "minContains"
    MIN_ITEMS = "minItems"
    MIN_LENGTH = "minLength"
    MIN_PROPERTIES = "minProperties"
    MINIMUM = "minimum"
    MULTIPLE_OF = "multipleOf"
    NOT = "not"
    ONE_OF_MULTIPLE_VALID = "oneOfMultipleValid"
    ONE_OF_NOT_VALID = "oneOfNotValid"
    PATTERN = "pattern"
    REQUIRED = "required"
    TYPE = "type"
    UNEVALUATED_ITEMS = "unevaluatedItems"
    UNEVALUATED_PROPERTIES = "unevaluatedProperties"
    UNIQUE_ITEMS = "uniqueItems"


class ValidationError(ValueError):
    """A single way in which an instance fails its schema.

    Paths are kept as :class:`~pyjsv.paths.Location` chains and turned into
    tuples or JSON pointers only when a caller asks for them.

    Attributes:
        kind: What kind of constraint failed.
        message: Human-readable description of the failure.
        instance: The failing instance value.
        context: Branch errors for ``anyOf``/``oneOf`` failures.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        absolute_keyword_location: str | None = None,
        context: Sequence[ValidationError] = (),
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.instance = instance
        self.context = tuple(context)
        self._instance_location = instance_location
        self._keyword_location = keyword_location
        self._absolute_keyword_location = absolute_keyword_location

    @cached_property
    def instance_path(self) -> tuple[str | int, ...]:
        """Return the path from the instance root to the failing value."""

        return self._instance_location.segments()

    @cached_property
    def schema_path(self) -> tuple[str | int, ...]:
        """Return the evaluation path of the failing keyword, references included."""

        return self._keyword_location.segments()

    @property
    def instance_pointer(self) -> str:
        """Return :attr:`instance_path` as a JSON pointer."""

        return self._instance_location.as_pointer()

    @property
    def schema_pointer(self) -> str:
        """Return :attr:`schema_path` as a JSON pointer."""

        return self._keyword_location.as_pointer()

    @property
    def absolute_keyword_location(self) -> str | None:
        """Return the absolute URI of the failing keyword inside its resource."""

        return self._absolute_keyword_location

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"<ValidationError {self.kind.value}: {self.message!r} at {self.instance_pointer or '/'}>"


__all__ = ["ErrorKind", "ValidationError"]
