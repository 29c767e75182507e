# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for checking keyword values and comparing JSON instances."""

from __future__ import annotations

import json
import math
from collections.abc import Hashable, Mapping, Sequence
from fractions import Fraction

from .errors import InvalidSchema
from .types import JSONValue


def is_array(value: object) -> bool:
    """Return ``True`` for JSON arrays (lists and tuples)."""

    return isinstance(value, (list, tuple))


def is_number(value: object) -> bool:
    """Return ``True`` for JSON numbers, excluding booleans."""

    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: object, *, allow_float: bool) -> bool:
    """Return ``True`` when ``value`` is a JSON integer.

    Args:
        value: Instance to inspect.
        allow_float: Accept floats with a zero fractional part.
    """

    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return allow_float and isinstance(value, float) and value.is_integer()


def json_type_of(value: object) -> str:
    """Return the JSON type name of ``value`` (``number`` for all numerics)."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if is_array(value):
        return "array"
    return type(value).__name__


def canonical_key(value: object) -> Hashable:
    """Return a hashable key under which JSON-equal values collide.

    Integral floats collapse onto ints so ``1`` and ``1.0`` compare equal,
    while booleans stay distinct from numbers.
    """

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, float):
        if value.is_integer():
            return ("num", int(value))
        return ("num", value)
    if isinstance(value, int):
        return ("num", value)
    if isinstance(value, Mapping):
        return ("obj", frozenset((key, canonical_key(item)) for key, item in value.items()))
    if is_array(value):
        return ("arr", tuple(canonical_key(item) for item in value))
    return ("other", repr(value))


def json_equal(left: object, right: object) -> bool:
    """Return ``True`` when ``left`` and ``right`` are equal JSON values."""

    return canonical_key(left) == canonical_key(right)


def is_multiple_of(value: int | float, divisor: int | float) -> bool:
    """Return ``True`` when ``value`` is an integral multiple of ``divisor``.

    Floats are compared exactly through their shortest decimal representation
    so that ``0.0075`` is a multiple of ``0.0001`` and ``1e308`` of ``0.5``.
    """

    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    if any(isinstance(number, float) and not math.isfinite(number) for number in (value, divisor)):
        return False
    return Fraction(repr(value)) % Fraction(repr(divisor)) == 0


def render(value: object) -> str:
    """Render ``value`` as compact JSON for error messages."""

    try:
        return json.dumps(value, ensure_ascii=False, default=repr)
    except (TypeError, ValueError):
        return repr(value)


def expect_string(value: JSONValue | None, *, key: str, pointer: str) -> str:
    """Return ``value`` as a string or raise :class:`InvalidSchema`."""

    if not isinstance(value, str):
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be a string", pointer=pointer)
    return value


def expect_bool(value: JSONValue | None, *, key: str, pointer: str) -> bool:
    """Return ``value`` as a boolean or raise :class:`InvalidSchema`."""

    if not isinstance(value, bool):
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be a boolean", pointer=pointer)
    return value


def expect_number(value: JSONValue | None, *, key: str, pointer: str) -> int | float:
    """Return ``value`` as a JSON number or raise :class:`InvalidSchema`."""

    if not is_number(value):
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be a number", pointer=pointer)
    return value  # type: ignore[return-value]


def expect_non_negative_integer(value: JSONValue | None, *, key: str, pointer: str) -> int:
    """Return ``value`` as a non-negative integer.

    Integral floats such as ``2.0`` are accepted, as every draft allows.

    Raises:
        InvalidSchema: If ``value`` is not a non-negative integer.
    """

    if not is_integer(value, allow_float=True) or value < 0:  # type: ignore[operator]
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be a non-negative integer", pointer=pointer)
    return int(value)  # type: ignore[arg-type]


def expect_mapping(value: JSONValue | None, *, key: str, pointer: str) -> Mapping[str, JSONValue]:
    """Return ``value`` as a mapping of JSON values or raise :class:`InvalidSchema`."""

    if not isinstance(value, Mapping):
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be an object", pointer=pointer)
    return value


def expect_array(value: JSONValue | None, *, key: str, pointer: str, non_empty: bool = False) -> Sequence[JSONValue]:
    """Return ``value`` as a JSON array or raise :class:`InvalidSchema`."""

    if not is_array(value):
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be an array", pointer=pointer)
    if non_empty and not value:
        raise InvalidSchema(f"{pointer or '/'}: expected '{key}' to be a non-empty array", pointer=pointer)
    return value  # type: ignore[return-value]


def string_array(value: JSONValue | None, *, key: str, pointer: str) -> tuple[str, ...]:
    """Return ``value`` as a tuple of strings with validation.

    Raises:
        InvalidSchema: If ``value`` is not an array of strings.
    """

    items = expect_array(value, key=key, pointer=pointer)
    result: list[str] = []
    for index, item in enumerate(items):
        if not isinstance(item, str):
            raise InvalidSchema(f"{pointer or '/'}: expected '{key}[{index}]' to be a string", pointer=pointer)
        result.append(item)
    return tuple(result)


__all__ = [
    "canonical_key",
    "expect_array",
    "expect_bool",
    "expect_mapping",
    "expect_non_negative_integer",
    "expect_number",
    "expect_string",
    "is_array",
    "is_integer",
    "is_multiple_of",
    "is_number",
    "json_equal",
    "json_type_of",
    "render",
    "string_array",
]
