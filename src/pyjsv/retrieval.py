# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Retrieval capability used to fetch documents that are not in the store."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .errors import RetrievalError
from .io import DocumentError, load_document
from .types import JSONValue
from .uri import split_uri, uri_to_path

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Retriever(Protocol):
    """Protocol describing objects able to fetch external schema documents."""

    def fetch(self, uri: str) -> JSONValue:
        """Return the parsed document addressed by ``uri``.

        Args:
            uri: Absolute URI without a fragment.

        Returns:
            JSONValue: Parsed JSON document.

        Raises:
            Exception: Any failure; the store reports it as ``RetrievalFailed``.
        """
        ...


class DefaultRetriever:
    """Serve ``file://`` URIs from the local filesystem and refuse everything else.

    There is no network access. Callers that need HTTP supply their
    own :class:`Retriever`.
    """

    def fetch(self, uri: str) -> JSONValue:
        """Load the document behind a ``file://`` URI."""

        scheme = split_uri(uri).scheme
        if scheme != "file":
            raise RetrievalError(f"the default retriever does not support '{scheme}' URIs")
        path = uri_to_path(uri)
        LOGGER.debug("reading %s from %s", uri, path)
        try:
            return load_document(path)
        except FileNotFoundError as exc:
            raise RetrievalError(f"no such file: {path}") from exc
        except (OSError, DocumentError) as exc:
            raise RetrievalError(str(exc)) from exc


__all__ = ["DefaultRetriever", "Retriever"]
