# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compilation options accepted by :func:`pyjsv.compile_schema`."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .drafts import Draft
from .retrieval import DefaultRetriever, Retriever
from .types import DEFAULT_MAX_REFERENCE_DEPTH
from .uri import is_absolute, normalize_uri


class CompileOptions(BaseModel):
    """Knobs controlling how a schema document is compiled.

    Attributes:
        draft: Draft override; ``None`` detects the draft from ``$schema``.
        base_uri: Base URI of the root document.
        retriever: Capability used to fetch documents missing from the store.
        custom_formats: Format name to predicate applied to string instances.
        custom_keywords: Keyword name to compiler hook.
        additional_resources: Documents pre-registered in the store by URI.
        validate_schema: Validate the schema against its meta-schema first.
        ignore_unknown_formats: Treat unregistered formats as annotations.
        strict: Reject keywords that mean nothing in the selected draft.
        max_reference_depth: Deepest chain of nested reference compilations.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    draft: Draft | None = None
    base_uri: str | None = None
    retriever: Any = Field(default_factory=DefaultRetriever)
    custom_formats: dict[str, Callable[[str], bool]] = Field(default_factory=dict)
    custom_keywords: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    additional_resources: dict[str, Any] = Field(default_factory=dict)
    validate_schema: bool = True
    ignore_unknown_formats: bool = True
    strict: bool = False
    max_reference_depth: int = Field(default=DEFAULT_MAX_REFERENCE_DEPTH, ge=1)

    @field_validator("retriever")
    @classmethod
    def _check_retriever(cls, value: object) -> object:
        if not isinstance(value, Retriever):
            raise ValueError("retriever must provide a fetch(uri) method")
        return value

    @field_validator("base_uri")
    @classmethod
    def _check_base_uri(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not is_absolute(value):
            raise ValueError(f"base_uri must be an absolute URI, got '{value}'")
        return normalize_uri(value)

    @field_validator("additional_resources")
    @classmethod
    def _check_resources(cls, value: Mapping[str, Any]) -> dict[str, Any]:
        resources: dict[str, Any] = {}
        for uri, contents in value.items():
            if not is_absolute(uri):
                raise ValueError(f"additional resource URIs must be absolute, got '{uri}'")
            resources[normalize_uri(uri)] = contents
        return resources


__all__ = ["CompileOptions"]
