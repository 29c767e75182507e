# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve ``$ref``-style references against a :class:`ResourceStore`."""

from __future__ import annotations

from dataclasses import dataclass

from .drafts import Draft
from .errors import UnresolvableReference
from .store import Anchor, ResourceStore
from .types import JSONValue
from .uri import normalize_uri, resolve_uri, split_fragment, split_pointer


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """A schema found by following a reference.

    Attributes:
        contents: The referenced schema.
        document_uri: URI of the document holding the schema.
        pointer: JSON pointer of the schema inside that document.
        base_uri: Base URI in effect at the schema, its own identifier included.
        draft: Draft the schema is interpreted with.
        resource_pointer: Pointer of the enclosing resource root inside the document.
        anchor: Anchor the reference named, when it used one.
    """

    contents: JSONValue
    document_uri: str
    pointer: str
    base_uri: str
    draft: Draft
    resource_pointer: str
    anchor: Anchor | None = None

    @property
    def key(self) -> str:
        """Return the node-table key of the target."""

        return node_key(self.document_uri, self.pointer)


def node_key(document_uri: str, pointer: str) -> str:
    """Return the node-table key for ``pointer`` inside ``document_uri``."""

    return f"{document_uri}#{pointer}"


class Resolver:
    """Turn reference strings into :class:`ResolvedTarget` values.

    Args:
        store: Store consulted (and extended through retrieval) for documents.
    """

    def __init__(self, store: ResourceStore) -> None:
        self._store = store

    @property
    def store(self) -> ResourceStore:
        """Return the underlying resource store."""

        return self._store

    def resolve(self, base_uri: str, reference: str, *, draft: Draft) -> ResolvedTarget:
        """Resolve ``reference`` relative to ``base_uri``.

        Args:
            base_uri: Base URI in effect where the reference appears.
            reference: Value of the ``$ref``-style keyword.
            draft: Draft of the referring schema, assumed for retrieved documents.

        Returns:
            ResolvedTarget: The referenced schema and its context.

        Raises:
            UnresolvableReference: If the pointer or anchor does not exist.
            RetrievalFailed: If an external document could not be fetched.
        """

        target = resolve_uri(base_uri, reference)
        uri, fragment = split_fragment(target)
        uri = normalize_uri(uri) or normalize_uri(base_uri)
        location = self._store.locate(uri, default_draft=draft)
        if not fragment:
            return self.at(location.document_uri, location.pointer)
        if fragment.startswith("/"):
            try:
                split_pointer(fragment)
            except ValueError as exc:
                raise UnresolvableReference(reference, str(exc)) from exc
            return self.at(location.document_uri, location.pointer + fragment)
        anchor = self._store.anchor(uri, fragment)
        if anchor is None:
            raise UnresolvableReference(reference, f"anchor '{fragment}' does not exist in '{uri}'")
        found = self.at(anchor.document_uri, anchor.pointer)
        return ResolvedTarget(
            found.contents,
            found.document_uri,
            found.pointer,
            found.base_uri,
            found.draft,
            found.resource_pointer,
            anchor,
        )

    def at(self, document_uri: str, pointer: str) -> ResolvedTarget:
        """Return the schema at ``pointer`` of an already registered document."""

        contents = self._store.contents_at(document_uri, pointer)
        position = self._store.position(document_uri, pointer)
        return ResolvedTarget(
            contents,
            document_uri,
            pointer,
            position.base_uri,
            position.draft,
            position.resource_pointer,
        )

    def resource_root(self, base_uri: str) -> ResolvedTarget | None:
        """Return the root schema of the registered resource ``base_uri``, if any."""

        location = self._store.resource(base_uri)
        if location is None:
            return None
        return self.at(location.document_uri, location.pointer)


__all__ = ["ResolvedTarget", "Resolver", "node_key"]
