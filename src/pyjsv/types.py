# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for the schema engine."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONObject: TypeAlias = Mapping[str, JSONValue]

DEFAULT_BASE_URI: Final[str] = "json-schema:///"
DEFAULT_MAX_REFERENCE_DEPTH: Final[int] = 128

__all__ = [
    "DEFAULT_BASE_URI",
    "DEFAULT_MAX_REFERENCE_DEPTH",
    "JSONObject",
    "JSONPrimitive",
    "JSONValue",
]
