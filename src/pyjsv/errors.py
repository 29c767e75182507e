# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while loading, resolving and compiling schemas.

Validation failures are not exceptions of this family. They are reported as
:class:`pyjsv.validation.ValidationError` values, which keeps the compile-time
and validate-time taxonomies disjoint.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import ValidationError


class CompileError(RuntimeError):
    """Base class for every failure raised before a validator exists."""


class InvalidSchema(CompileError):
    """Raised when a schema is structurally malformed.

    Attributes:
        pointer: JSON pointer of the offending schema position, when known.
        errors: Meta-schema violations that caused the rejection.
    """

    def __init__(
        self,
        message: str,
        *,
        pointer: str | None = None,
        errors: Sequence[ValidationError] = (),
    ) -> None:
        """Create the error from ``message`` and optional location metadata."""

        super().__init__(message)
        self.pointer = pointer
        self.errors = tuple(errors)


class UnresolvableReference(CompileError):
    """Raised when a reference names no known document, pointer or anchor."""

    def __init__(self, reference: str, reason: str | None = None) -> None:
        """Create the error for ``reference`` with an optional ``reason``."""

        detail = f"Unresolvable reference '{reference}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)
        self.reference = reference


class RetrievalFailed(CompileError):
    """Raised when the retriever cannot produce an external document."""

    def __init__(self, uri: str, reason: str) -> None:
        """Create the error for ``uri`` with the retriever's ``reason``."""

        super().__init__(f"Resource '{uri}' is not present in the store and retrieving it failed: {reason}")
        self.uri = uri


class UnknownSpecification(CompileError):
    """Raised when ``$schema`` names a draft the engine does not know."""

    def __init__(self, specification: str) -> None:
        """Create the error for the unrecognised ``specification`` URI."""

        super().__init__(f"Unknown specification: {specification}")
        self.specification = specification


class CyclicResolutionLimitExceeded(CompileError):
    """Raised when references form a cycle that can never consume input."""

    def __init__(self, reference: str, reason: str) -> None:
        """Create the error for the ``reference`` that closes the cycle."""

        super().__init__(f"Reference '{reference}' cannot be resolved: {reason}")
        self.reference = reference


class RetrievalError(RuntimeError):
    """Raised by retrievers that cannot serve a URI.

    The store converts this (and any other retriever exception) into
    :class:`RetrievalFailed`.
    """


__all__ = (
    "CompileError",
    "CyclicResolutionLimitExceeded",
    "InvalidSchema",
    "RetrievalError",
    "RetrievalFailed",
    "UnknownSpecification",
    "UnresolvableReference",
)
