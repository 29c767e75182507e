# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading schema and instance documents from disk."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import cast

from .types import JSONValue


class DocumentError(ValueError):
    """Raised when a document on disk is not well-formed JSON."""


def load_document(path: Path) -> JSONValue:
    """Load a JSON document from disk and validate the payload.

    Args:
        path: Filesystem path to the JSON document.

    Returns:
        JSONValue: Parsed JSON value extracted from the document.

    Raises:
        FileNotFoundError: If the JSON document is missing.
        DocumentError: If the document cannot be parsed or contains non-JSON values.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = cast(JSONValue, json.load(stream))
        except json.JSONDecodeError as exc:
            raise DocumentError(f"{path}: failed to parse JSON ({exc.msg} at line {exc.lineno})") from exc
    return _ensure_json_value(payload, context=str(path))


def load_schema(path: Path) -> JSONValue:
    """Load a schema document from disk.

    A schema is either a JSON object or, from draft 6 on, a boolean.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        JSONValue: Parsed schema document.

    Raises:
        FileNotFoundError: If the schema file does not exist.
        DocumentError: If the file is not JSON or holds neither an object nor a boolean.
    """
    document = load_document(path)
    if isinstance(document, bool) or isinstance(document, Mapping):
        return document
    raise DocumentError(f"{path}: expected a JSON object or boolean schema")


__all__ = ["DocumentError", "load_document", "load_schema"]


def _ensure_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Ensure ``value`` is composed of JSON-compatible structures.

    Args:
        value: Parsed JSON payload to validate recursively.
        context: Human-readable context string used in error messages.

    Returns:
        JSONValue: Validated JSON value.

    Raises:
        DocumentError: If ``value`` contains unsupported JSON constructs.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _ensure_json_value(item, context=f"{context}.{key}") for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_ensure_json_value(item, context=f"{context}[]") for item in value]
    raise DocumentError(f"{context}: value is not valid JSON")
