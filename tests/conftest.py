# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from pyjsv.errors import RetrievalError
from pyjsv.types import JSONValue


class MemoryRetriever:
    """Serve documents from a dictionary and record every fetch."""

    def __init__(self, documents: Mapping[str, JSONValue]) -> None:
        self.documents = dict(documents)
        self.fetched: list[str] = []

    def fetch(self, uri: str) -> JSONValue:
        self.fetched.append(uri)
        try:
            return self.documents[uri]
        except KeyError as exc:
            raise RetrievalError(f"{uri} is not available") from exc


@pytest.fixture
def memory_retriever() -> type[MemoryRetriever]:
    """Return the in-memory retriever class so tests can seed their own documents."""
    return MemoryRetriever
