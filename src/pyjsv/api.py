# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public entry points: compile once, validate many times."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from .compiler import SchemaCompiler, select_draft
from .config import CompileOptions
from .meta import check_schema, custom_meta_validator, meta_validator
from .tree import Validator
from .types import JSONValue
from .validation import ValidationError

LOGGER = logging.getLogger(__name__)


def compile_schema(schema: JSONValue, options: CompileOptions | None = None) -> Validator:
    """Compile ``schema`` into a reusable :class:`Validator`.

    Args:
        schema: Root schema document: a mapping, or a boolean from draft 6 on.
        options: Compilation options; defaults apply when omitted.

    Returns:
        Validator: The compiled validator tree.

    Raises:
        InvalidSchema: If the schema is malformed or violates its meta-schema.
        UnresolvableReference: If a reference cannot be resolved.
        RetrievalFailed: If an external document cannot be fetched.
        UnknownSpecification: If ``$schema`` names an unknown draft.
        CyclicResolutionLimitExceeded: If references never consume input.
    """

    options = options or CompileOptions()
    draft, meta_uri = select_draft(schema, options)
    if options.validate_schema:
        if meta_uri is None:
            check_schema(meta_validator(draft), schema)
        else:
            check_schema(custom_meta_validator(meta_uri, draft, options), schema)
    return SchemaCompiler(options, draft).compile(schema)


def validator_for(schema: JSONValue, **option_fields: Any) -> Validator:
    """Compile ``schema`` with options given as keyword arguments."""

    return compile_schema(schema, CompileOptions(**option_fields))


def is_valid(schema: JSONValue, instance: object, **option_fields: Any) -> bool:
    """Compile ``schema`` and report whether ``instance`` is valid."""

    return validator_for(schema, **option_fields).is_valid(instance)


def validate(schema: JSONValue, instance: object, **option_fields: Any) -> None:
    """Compile ``schema`` and raise the first error of ``instance``.

    Raises:
        ValidationError: If ``instance`` is invalid.
    """

    validator_for(schema, **option_fields).validate(instance)


def iter_errors(schema: JSONValue, instance: object, **option_fields: Any) -> Iterator[ValidationError]:
    """Compile ``schema`` and lazily yield every error of ``instance``."""

    return validator_for(schema, **option_fields).iter_errors(instance)


__all__ = ["compile_schema", "is_valid", "iter_errors", "validate", "validator_for"]
