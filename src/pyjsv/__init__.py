# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compile JSON Schema documents into reusable validator trees."""

from __future__ import annotations

from .api import compile_schema, is_valid, iter_errors, validate, validator_for
from .compiler import SchemaContext
from .config import CompileOptions
from .drafts import Draft
from .errors import (
    CompileError,
    CyclicResolutionLimitExceeded,
    InvalidSchema,
    RetrievalError,
    RetrievalFailed,
    UnknownSpecification,
    UnresolvableReference,
)
from .nodes import KeywordValidator
from .retrieval import DefaultRetriever, Retriever
from .tree import Validator
from .validation import ErrorKind, ValidationError

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "CompileOptions",
    "CyclicResolutionLimitExceeded",
    "DefaultRetriever",
    "Draft",
    "ErrorKind",
    "InvalidSchema",
    "KeywordValidator",
    "RetrievalError",
    "RetrievalFailed",
    "Retriever",
    "SchemaContext",
    "UnknownSpecification",
    "UnresolvableReference",
    "ValidationError",
    "Validator",
    "__version__",
    "compile_schema",
    "is_valid",
    "iter_errors",
    "validate",
    "validator_for",
]
