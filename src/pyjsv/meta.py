# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validate schemas against their meta-schemas before compiling them."""

from __future__ import annotations

import logging
from functools import lru_cache

from .compiler import SchemaCompiler
from .config import CompileOptions
from .drafts import Draft
from .errors import InvalidSchema
from .store import specification_documents
from .tree import Validator
from .types import JSONValue
from .uri import normalize_uri

LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def meta_validator(draft: Draft) -> Validator:
    """Return the compiled official meta-schema of ``draft``.

    The trees are immutable, so one compiled meta-schema per draft is shared
    by the whole process.
    """

    uri = normalize_uri(draft.meta_schema_uri)
    LOGGER.debug("compiling meta-schema %s", uri)
    options = CompileOptions(draft=draft, base_uri=uri, validate_schema=False)
    return SchemaCompiler(options, draft).compile(specification_documents()[uri])


def custom_meta_validator(meta_uri: str, draft: Draft, options: CompileOptions) -> Validator:
    """Compile the custom meta-schema ``meta_uri`` supplied through ``additional_resources``."""

    LOGGER.debug("compiling custom meta-schema %s", meta_uri)
    meta_options = options.model_copy(update={"base_uri": meta_uri, "validate_schema": False})
    return SchemaCompiler(meta_options, draft).compile(options.additional_resources[meta_uri])


def check_schema(validator: Validator, schema: JSONValue) -> None:
    """Raise :class:`InvalidSchema` when ``schema`` violates its meta-schema.

    Raises:
        InvalidSchema: Carrying every meta-schema violation in ``errors``.
    """

    if validator.is_valid(schema):
        return
    errors = list(validator.iter_errors(schema))
    first = errors[0]
    raise InvalidSchema(first.message, pointer=first.instance_pointer, errors=errors)


__all__ = ["check_schema", "custom_meta_validator", "meta_validator"]
