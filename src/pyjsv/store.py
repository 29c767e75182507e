# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resource store holding every schema document known to a compilation.

Documents are crawled once on insertion. The crawl records, for every schema
position reachable through a known subschema keyword, the base URI and draft
in effect there, every embedded resource introduced by an identifier, and
every anchor. Reference resolution afterwards is a pure lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Final

from jsonschema_specifications import REGISTRY as SPECIFICATIONS

from .drafts import Draft, Shape, detect_draft, is_meta_schema_uri
from .errors import RetrievalFailed, UnresolvableReference
from .retrieval import Retriever
from .types import JSONValue
from .uri import join_pointer, normalize_uri, parse_index, resolve_uri, split_fragment, split_pointer
from .utils import is_array

LOGGER = logging.getLogger(__name__)

_SUPPORTED_SPECIFICATIONS: Final[tuple[str, ...]] = (
    "http://json-schema.org/draft-04/",
    "http://json-schema.org/draft-06/",
    "http://json-schema.org/draft-07/",
    "https://json-schema.org/draft/2019-09/",
    "https://json-schema.org/draft/2020-12/",
)

_MISSING: Final = object()


@dataclass(frozen=True, slots=True)
class Resource:
    """A schema document registered in the store.

    Attributes:
        uri: Fragment-less URI the document was registered under.
        contents: Parsed document.
        draft: Draft the document root is interpreted with.
    """

    uri: str
    contents: JSONValue
    draft: Draft


@dataclass(frozen=True, slots=True)
class SchemaPosition:
    """Base URI and draft in effect at one schema position of a document."""

    base_uri: str
    draft: Draft
    resource_pointer: str


@dataclass(frozen=True, slots=True)
class ResourceLocation:
    """Where a (possibly embedded) schema resource lives."""

    document_uri: str
    pointer: str
    draft: Draft


@dataclass(frozen=True, slots=True)
class Anchor:
    """A plain or dynamic anchor declared inside a resource."""

    name: str
    document_uri: str
    pointer: str
    dynamic: bool


@lru_cache(maxsize=1)
def specification_documents() -> Mapping[str, JSONValue]:
    """Return the official meta-schema documents keyed by normalised URI."""

    documents: dict[str, JSONValue] = {}
    for uri in SPECIFICATIONS:
        key = normalize_uri(uri)
        if key.startswith(_SUPPORTED_SPECIFICATIONS):
            documents[key] = SPECIFICATIONS[uri].contents
    LOGGER.debug("loaded %d meta-schema documents", len(documents))
    return MappingProxyType(documents)


def _specification_for(uri: str) -> JSONValue:
    documents = specification_documents()
    found = documents.get(uri, _MISSING)
    if found is _MISSING and uri.startswith("https://json-schema.org/draft-"):
        found = documents.get("http://" + uri[len("https://") :], _MISSING)
    if found is _MISSING and uri.startswith("http://json-schema.org/draft/"):
        found = documents.get("https://" + uri[len("http://") :], _MISSING)
    return found


class ResourceStore:
    """Index schema documents by URI, embedded identifier and anchor.

    Args:
        retriever: Capability used to fetch documents the store does not hold.
        default_draft: Draft assumed for documents that do not declare one.
    """

    def __init__(self, retriever: Retriever, *, default_draft: Draft) -> None:
        self._retriever = retriever
        self._default_draft = default_draft
        self._documents: dict[str, Resource] = {}
        self._positions: dict[str, dict[str, SchemaPosition]] = {}
        self._resources: dict[str, ResourceLocation] = {}
        self._anchors: dict[tuple[str, str], Anchor] = {}
        self._failures: dict[str, RetrievalFailed] = {}
        self._retrieved: list[str] = []

    @property
    def retrieved(self) -> tuple[str, ...]:
        """Return the URIs fetched through the retriever, in fetch order."""

        return tuple(self._retrieved)

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and normalize_uri(uri) in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def add(self, uri: str, contents: JSONValue, *, draft: Draft | None = None) -> Resource:
        """Register ``contents`` under ``uri`` and crawl it.

        Registering a URI twice replaces the earlier document; the last one wins.

        Args:
            uri: Absolute, fragment-less URI of the document.
            contents: Parsed document.
            draft: Draft of the document; detected from ``$schema`` when omitted.

        Returns:
            Resource: The registered resource.
        """

        uri = normalize_uri(uri)
        resource = Resource(uri, contents, draft or detect_draft(contents, self._default_draft))
        self._documents[uri] = resource
        self._positions[uri] = {}
        self._crawl(resource)
        return resource

    def document(self, uri: str) -> Resource:
        """Return the document registered under ``uri``.

        Raises:
            UnresolvableReference: If no such document was registered.
        """

        try:
            return self._documents[normalize_uri(uri)]
        except KeyError as exc:
            raise UnresolvableReference(uri, "document is not present in the store") from exc

    def locate(self, uri: str, *, default_draft: Draft) -> ResourceLocation:
        """Return where the resource identified by ``uri`` lives, retrieving it if needed.

        Args:
            uri: Absolute, fragment-less URI.
            default_draft: Draft assumed for a retrieved document without ``$schema``.

        Returns:
            ResourceLocation: Location of the resource root.

        Raises:
            RetrievalFailed: If the document had to be fetched and fetching failed.
        """

        uri = normalize_uri(uri)
        location = self._resources.get(uri)
        if location is not None:
            return location
        contents = self._retrieve(uri)
        self.add(uri, contents, draft=detect_draft(contents, default_draft))
        return self._resources[uri]

    def anchor(self, base_uri: str, name: str) -> Anchor | None:
        """Return the anchor ``name`` declared in the resource ``base_uri``."""

        return self._anchors.get((normalize_uri(base_uri), name))

    def anchors(self) -> Iterator[tuple[str, Anchor]]:
        """Yield ``(base_uri, anchor)`` pairs for every registered anchor."""

        for (base_uri, _), anchor in self._anchors.items():
            yield base_uri, anchor

    def resource(self, base_uri: str) -> ResourceLocation | None:
        """Return the already registered resource ``base_uri`` without retrieving."""

        return self._resources.get(normalize_uri(base_uri))

    def contents_at(self, document_uri: str, pointer: str) -> JSONValue:
        """Return the value at ``pointer`` inside the document ``document_uri``.

        Raises:
            UnresolvableReference: If the pointer does not address a value.
        """

        value = self.document(document_uri).contents
        try:
            tokens = split_pointer(pointer)
        except ValueError as exc:
            raise UnresolvableReference(f"{document_uri}#{pointer}", str(exc)) from exc
        for token in tokens:
            if isinstance(value, Mapping) and token in value:
                value = value[token]
                continue
            index = parse_index(token) if is_array(value) else None
            if index is None or index >= len(value):  # type: ignore[arg-type]
                raise UnresolvableReference(f"{document_uri}#{pointer}", f"no value at token '{token}'")
            value = value[index]  # type: ignore[index]
        return value

    def position(self, document_uri: str, pointer: str) -> SchemaPosition:
        """Return the base URI and draft in effect at ``pointer``.

        Positions outside the crawled keywords inherit from their closest
        crawled ancestor and honour their own identifier.
        """

        positions = self._positions[normalize_uri(document_uri)]
        found = positions.get(pointer)
        if found is not None:
            return found
        prefix = pointer
        while prefix:
            prefix = prefix.rpartition("/")[0]
            parent = positions.get(prefix)
            if parent is not None:
                break
        else:
            parent = positions[""]
        contents = self.contents_at(document_uri, pointer)
        traits = parent.draft.traits
        identifier = contents.get(traits.id_keyword) if isinstance(contents, Mapping) else None
        if isinstance(identifier, str) and not identifier.startswith("#"):
            base, _ = split_fragment(resolve_uri(parent.base_uri, identifier))
            return SchemaPosition(normalize_uri(base), parent.draft, pointer)
        return parent

    def _retrieve(self, uri: str) -> JSONValue:
        failure = self._failures.get(uri)
        if failure is not None:
            raise failure
        if is_meta_schema_uri(uri):
            contents = _specification_for(uri)
            if contents is not _MISSING:
                return contents
        LOGGER.debug("retrieving %s", uri)
        try:
            contents = self._retriever.fetch(uri)
        except Exception as exc:
            failure = RetrievalFailed(uri, str(exc) or type(exc).__name__)
            self._failures[uri] = failure
            raise failure from exc
        self._retrieved.append(uri)
        return contents

    def _crawl(self, resource: Resource) -> None:
        positions = self._positions[resource.uri]
        self._resources[resource.uri] = ResourceLocation(resource.uri, "", resource.draft)
        pending: list[tuple[JSONValue, str, str, Draft, str]] = [
            (resource.contents, "", resource.uri, resource.draft, "")
        ]
        while pending:
            contents, pointer, base, draft, resource_pointer = pending.pop()
            if not isinstance(contents, Mapping):
                positions[pointer] = SchemaPosition(base, draft, resource_pointer)
                continue
            if pointer and "$schema" in contents:
                embedded = detect_draft(contents, draft)
                if isinstance(contents.get(embedded.traits.id_keyword), str):
                    draft = embedded
            traits = draft.traits
            identifier = contents.get(traits.id_keyword)
            if traits.ref_overrides_siblings and "$ref" in contents:
                identifier = None
            if isinstance(identifier, str):
                base, resource_pointer = self._register_identifier(
                    resource.uri, identifier, pointer, base, draft, resource_pointer
                )
            if traits.anchors:
                self._register_anchor(contents.get("$anchor"), base, resource.uri, pointer, dynamic=False)
            if traits.dynamic_refs:
                self._register_anchor(contents.get("$dynamicAnchor"), base, resource.uri, pointer, dynamic=True)
            positions[pointer] = SchemaPosition(base, draft, resource_pointer)
            for keyword, shape in traits.subschemas.items():
                value = contents.get(keyword, _MISSING)
                if value is _MISSING:
                    continue
                child_pointer = join_pointer(pointer, keyword)
                for child, location in _subschemas(value, shape, child_pointer):
                    pending.append((child, location, base, draft, resource_pointer))

    def _register_identifier(
        self,
        document_uri: str,
        identifier: str,
        pointer: str,
        base: str,
        draft: Draft,
        resource_pointer: str,
    ) -> tuple[str, str]:
        target, fragment = split_fragment(resolve_uri(base, identifier))
        target = normalize_uri(target)
        if identifier.startswith("#"):
            if draft.traits.fragment_ids_are_anchors and fragment:
                self._anchors.setdefault((base, fragment), Anchor(fragment, document_uri, pointer, dynamic=False))
            return base, resource_pointer
        self._resources[target] = ResourceLocation(document_uri, pointer, draft)
        if fragment and not fragment.startswith("/") and draft.traits.fragment_ids_are_anchors:
            self._anchors.setdefault((target, fragment), Anchor(fragment, document_uri, pointer, dynamic=False))
        return target, pointer

    def _register_anchor(self, name: JSONValue, base: str, document_uri: str, pointer: str, *, dynamic: bool) -> None:
        if not isinstance(name, str):
            return
        key = (base, name)
        existing = self._anchors.get(key)
        if existing is None or existing.pointer == pointer:
            self._anchors[key] = Anchor(name, document_uri, pointer, dynamic=dynamic)


def _subschemas(value: JSONValue, shape: Shape, pointer: str) -> Iterator[tuple[JSONValue, str]]:
    if shape is Shape.SCHEMA_OR_ARRAY:
        shape = Shape.SCHEMA_ARRAY if is_array(value) else Shape.SCHEMA
    if shape is Shape.SCHEMA:
        if isinstance(value, (Mapping, bool)):
            yield value, pointer
    elif shape is Shape.SCHEMA_ARRAY:
        if is_array(value):
            for index, item in enumerate(value):  # type: ignore[arg-type]
                if isinstance(item, (Mapping, bool)):
                    yield item, join_pointer(pointer, index)
    elif isinstance(value, Mapping):
        for key, item in value.items():
            if isinstance(item, (Mapping, bool)):
                yield item, join_pointer(pointer, key)


__all__ = [
    "Anchor",
    "Resource",
    "ResourceLocation",
    "ResourceStore",
    "SchemaPosition",
    "specification_documents",
]
