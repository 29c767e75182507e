# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compile schema documents into validator trees.

Compilation walks the schema once. Every schema position gets an entry in
the node table keyed by ``"<document-uri>#<pointer>"``; the entry holds a
placeholder while the position is being compiled and the finished node
afterwards. References store only the key, which is how recursive schemas
turn into finite trees.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

import regex
from regex import Pattern

from .dispatch import DraftDispatch, dispatch_for
from .drafts import DEFAULT_DRAFT, Draft, DraftTraits, declared_draft, detect_draft
from .errors import CompileError, CyclicResolutionLimitExceeded, InvalidSchema, UnknownSpecification, UnresolvableReference
from .nodes import BooleanNode, CustomKeywordNode, DynamicRefNode, KeywordValidator, Node, RefNode, SchemaNode
from .patterns import compile_pattern
from .resolver import ResolvedTarget, Resolver, node_key
from .store import ResourceStore
from .tree import Validator
from .types import DEFAULT_BASE_URI, JSONValue
from .uri import fragment_for_pointer, join_pointer, normalize_uri, resolve_uri, split_fragment
from .utils import json_type_of

if TYPE_CHECKING:
    from .config import CompileOptions

LOGGER = logging.getLogger(__name__)

_VISITING: Final = 1
_DONE: Final = 2


def select_draft(schema: JSONValue, options: CompileOptions) -> tuple[Draft, str | None]:
    """Return the draft used for ``schema`` and the URI of a custom meta-schema.

    Args:
        schema: Root schema document.
        options: Compilation options; an explicit ``draft`` wins.

    Returns:
        tuple[Draft, str | None]: Selected draft and, when ``$schema`` names a
        meta-schema supplied through ``additional_resources``, its URI.

    Raises:
        UnknownSpecification: If ``$schema`` names neither a known draft nor a
            supplied meta-schema.
    """

    if options.draft is not None:
        return options.draft, None
    declared = declared_draft(schema)
    if declared is None:
        return DEFAULT_DRAFT, None
    draft = Draft.from_uri(declared)
    if draft is not None:
        return draft, None
    meta_uri = normalize_uri(declared)
    meta = options.additional_resources.get(meta_uri)
    if meta is None:
        raise UnknownSpecification(declared)
    return detect_draft(meta, DEFAULT_DRAFT), meta_uri


@dataclass(frozen=True, slots=True)
class SchemaContext:
    """Position of the schema being compiled, handed to keyword compilers.

    Attributes:
        compiler: Compiler owning the node table.
        document_uri: URI of the document holding the schema.
        pointer: JSON pointer of the schema inside the document.
        base_uri: Base URI in effect at the schema.
        draft: Draft the schema is interpreted with.
        resource_pointer: Pointer of the enclosing resource root.
        depth: Number of nested reference compilations leading here.
    """

    compiler: SchemaCompiler
    document_uri: str
    pointer: str
    base_uri: str
    draft: Draft
    resource_pointer: str
    depth: int = 0

    @property
    def traits(self) -> DraftTraits:
        return self.draft.traits

    @property
    def options(self) -> CompileOptions:
        return self.compiler.options

    @property
    def key(self) -> str:
        """Return the node-table key of the schema."""

        return node_key(self.document_uri, self.pointer)

    def pointer_of(self, *tokens: str | int) -> str:
        """Return the document pointer of ``tokens`` below this schema."""

        return join_pointer(self.pointer, *tokens)

    def location(self, *tokens: str | int) -> str:
        """Return the absolute keyword location of ``tokens`` below this schema."""

        relative = self.pointer_of(*tokens)[len(self.resource_pointer) :]
        return f"{self.base_uri}#{fragment_for_pointer(relative)}"

    def compile(self, value: JSONValue, *tokens: str | int, boolean: bool = False) -> Node:
        """Compile the subschema ``value`` found at ``tokens`` below this schema.

        Args:
            value: The subschema.
            *tokens: Pointer tokens from this schema to the subschema.
            boolean: Accept ``true``/``false`` even in drafts without boolean schemas.

        Returns:
            Node: The compiled subschema.
        """

        pointer = self.pointer_of(*tokens)
        position = self.compiler.store.position(self.document_uri, pointer)
        child = SchemaContext(
            self.compiler,
            self.document_uri,
            pointer,
            position.base_uri,
            position.draft,
            position.resource_pointer,
            self.depth,
        )
        return self.compiler.compile_value(child, value, boolean=boolean)

    def compile_reference(self, reference: str) -> Node:
        """Compile ``$ref`` to a :class:`RefNode`, compiling its target on first use."""

        target = self._follow(reference)
        return RefNode(target.key, self.compiler.nodes, self.location("$ref"))

    def compile_dynamic_reference(self, reference: str, keyword: str) -> Node:
        """Compile ``$dynamicRef``/``$recursiveRef`` to a :class:`DynamicRefNode`.

        The reference only behaves dynamically when its static target carries
        the matching ``$dynamicAnchor`` (or ``$recursiveAnchor: true``).
        Candidates are bound once the whole tree is compiled.
        """

        target = self._follow(reference)
        anchor: str | None = None
        if keyword == "$dynamicRef":
            if target.anchor is not None and target.anchor.dynamic:
                anchor = target.anchor.name
        elif isinstance(target.contents, Mapping) and target.contents.get("$recursiveAnchor") is True:
            anchor = ""
        node = DynamicRefNode(keyword, target.key, anchor, self.compiler.nodes, self.location(keyword))
        self.compiler.register_dynamic(node)
        return node

    def regex(self, source: str, *tokens: str | int) -> Pattern[str]:
        """Return the compiled regular expression ``source``.

        Raises:
            InvalidSchema: If ``source`` is not a valid regular expression.
        """

        return self.compiler.regex(source, self.pointer_of(*tokens))

    def require_tracking(self) -> None:
        """Enable evaluated-property and evaluated-item tracking for the tree."""

        self.compiler.tracking = True

    def _follow(self, reference: str) -> ResolvedTarget:
        target = self.compiler.resolver.resolve(self.base_uri, reference, draft=self.draft)
        if target.key not in self.compiler.nodes:
            limit = self.options.max_reference_depth
            if self.depth >= limit:
                raise CyclicResolutionLimitExceeded(reference, f"more than {limit} nested references")
            self.compiler.compile_target(target, depth=self.depth + 1)
        return target


class SchemaCompiler:
    """Build one validator tree from a root schema.

    Args:
        options: Compilation options.
        draft: Draft of the root schema, usually from :func:`select_draft`.
    """

    def __init__(self, options: CompileOptions, draft: Draft) -> None:
        self.options = options
        self.draft = draft
        self.store = ResourceStore(options.retriever, default_draft=draft)
        self.resolver = Resolver(self.store)
        self.tracking = False
        self._table: dict[str, Node | None] = {}
        self._view: Mapping[str, Node | None] = MappingProxyType(self._table)
        self._dynamic: list[DynamicRefNode] = []
        self._patterns: dict[str, Pattern[str]] = {}
        self._dispatches: dict[tuple[str, Draft], DraftDispatch] = {}

    @property
    def nodes(self) -> Mapping[str, Node | None]:
        """Return a read-only view of the node table."""

        return self._view

    def compile(self, schema: JSONValue) -> Validator:
        """Compile ``schema`` and return its validator.

        Raises:
            CompileError: If the schema cannot be compiled.
        """

        for uri, contents in self.options.additional_resources.items():
            self.store.add(uri, contents)
        document_uri = self._document_uri(schema)
        self.store.add(document_uri, schema, draft=self.draft)
        LOGGER.debug("compiling %s with draft %s", document_uri, self.draft.value)
        root = self.compile_target(self.resolver.at(document_uri, ""), depth=0)
        self._bind_dynamic_references()
        self._check_complete()
        self._check_cycles()
        dynamic = any(node.candidates for node in self._dynamic)
        return Validator(self.draft, root, self._view, self.store, tracking=self.tracking, dynamic=dynamic)

    def compile_target(self, target: ResolvedTarget, *, depth: int) -> Node:
        """Compile the schema a reference (or the root) points to."""

        ctx = SchemaContext(
            self,
            target.document_uri,
            target.pointer,
            target.base_uri,
            target.draft,
            target.resource_pointer,
            depth,
        )
        return self.compile_value(ctx, target.contents)

    def compile_value(self, ctx: SchemaContext, value: JSONValue, *, boolean: bool = False) -> Node:
        """Compile ``value`` at the position described by ``ctx``.

        A position that is already compiled is shared. A position still being
        compiled is reached through a reference to its placeholder.
        """

        key = ctx.key
        if key in self._table:
            existing = self._table[key]
            if existing is None:
                return RefNode(key, self._view, ctx.location())
            return existing
        if isinstance(value, bool):
            if not (boolean or ctx.traits.boolean_schemas):
                raise InvalidSchema(
                    f"{ctx.pointer or '/'}: boolean schemas are not allowed in draft {ctx.draft.value}",
                    pointer=ctx.pointer,
                )
            node: Node = BooleanNode(value, ctx.location())
            self._table[key] = node
            return node
        if not isinstance(value, Mapping):
            raise InvalidSchema(
                f"{ctx.pointer or '/'}: expected a schema object, got {json_type_of(value)}",
                pointer=ctx.pointer,
            )
        self._table[key] = None
        node = SchemaNode(key, ctx.base_uri, ctx.location(), list(self._compile_keywords(ctx, value)))
        self._table[key] = node
        return node

    def register_dynamic(self, node: DynamicRefNode) -> None:
        """Remember ``node`` so its dynamic candidates get bound after compilation."""

        self._dynamic.append(node)

    def regex(self, source: str, pointer: str) -> Pattern[str]:
        """Compile ``source`` once per compilation."""

        pattern = self._patterns.get(source)
        if pattern is None:
            try:
                pattern = compile_pattern(source)
            except regex.error as exc:
                raise InvalidSchema(f"{pointer}: invalid regular expression {source!r}: {exc}", pointer=pointer) from exc
            self._patterns[source] = pattern
        return pattern

    def _document_uri(self, schema: JSONValue) -> str:
        if self.options.base_uri is not None:
            return self.options.base_uri
        traits = self.draft.traits
        if isinstance(schema, Mapping) and not (traits.ref_overrides_siblings and "$ref" in schema):
            identifier = schema.get(traits.id_keyword)
            if isinstance(identifier, str) and not identifier.startswith("#"):
                uri, _ = split_fragment(resolve_uri(DEFAULT_BASE_URI, identifier))
                return normalize_uri(uri)
        return DEFAULT_BASE_URI

    def _dispatch(self, ctx: SchemaContext) -> DraftDispatch:
        key = (ctx.document_uri, ctx.draft)
        dispatch = self._dispatches.get(key)
        if dispatch is None:
            dispatch = dispatch_for(ctx.draft)
            vocabularies = self._vocabularies(ctx.document_uri)
            if vocabularies is not None:
                LOGGER.debug("%s enables vocabularies %s", ctx.document_uri, sorted(vocabularies))
                dispatch = dispatch.restricted(vocabularies)
            self._dispatches[key] = dispatch
        return dispatch

    def _vocabularies(self, document_uri: str) -> frozenset[str] | None:
        """Return the vocabularies a custom meta-schema of ``document_uri`` declares.

        ``None`` means every vocabulary of the draft is in effect: the document
        names an official meta-schema, an unknown one, or one without
        ``$vocabulary``.
        """

        declared = declared_draft(self.store.document(document_uri).contents)
        if declared is None or Draft.from_uri(declared) is not None or declared not in self.store:
            return None
        location = self.store.locate(declared, default_draft=self.draft)
        meta = self.store.contents_at(location.document_uri, location.pointer)
        vocabulary = meta.get("$vocabulary") if isinstance(meta, Mapping) else None
        if not isinstance(vocabulary, Mapping):
            return None
        return frozenset(vocabulary)

    def _compile_keywords(self, ctx: SchemaContext, schema: Mapping[str, JSONValue]) -> Iterator[Node]:
        dispatch = self._dispatch(ctx)
        if ctx.traits.ref_overrides_siblings and "$ref" in schema:
            keywords = ["$ref"]
        else:
            keywords = [keyword for keyword in schema if keyword not in dispatch.trailing]
            keywords.extend(keyword for keyword in schema if keyword in dispatch.trailing)
        for keyword in keywords:
            value = schema[keyword]
            compiler = dispatch.keywords.get(keyword)
            if compiler is not None:
                node = compiler(ctx, value, schema)
            else:
                hook = self.options.custom_keywords.get(keyword)
                if hook is not None:
                    node = self._compile_custom(ctx, keyword, value, schema, hook)
                elif self.options.strict and not dispatch.known(keyword):
                    raise InvalidSchema(f"{ctx.pointer or '/'}: unknown keyword '{keyword}'", pointer=ctx.pointer)
                else:
                    continue
            if node is not None:
                yield node

    def _compile_custom(
        self,
        ctx: SchemaContext,
        keyword: str,
        value: JSONValue,
        schema: Mapping[str, JSONValue],
        hook: Callable[..., object],
    ) -> Node | None:
        pointer = ctx.pointer_of(keyword)
        try:
            validator = hook(ctx, value, schema)
        except CompileError:
            raise
        except Exception as exc:
            raise InvalidSchema(f"{pointer}: keyword '{keyword}' could not be compiled: {exc}", pointer=pointer) from exc
        if validator is None:
            return None
        if not isinstance(validator, KeywordValidator):
            raise InvalidSchema(f"{pointer}: keyword '{keyword}' hook returned {validator!r}", pointer=pointer)
        return CustomKeywordNode(keyword, value, validator, ctx.location(keyword))

    def _resource_bases(self) -> set[str]:
        return {node.base_uri for node in self._table.values() if isinstance(node, SchemaNode)}

    def _dynamic_target(self, node: DynamicRefNode, base_uri: str) -> ResolvedTarget | None:
        if node.anchor:
            anchor = self.store.anchor(base_uri, node.anchor)
            if anchor is None or not anchor.dynamic:
                return None
            return self.resolver.at(anchor.document_uri, anchor.pointer)
        root = self.resolver.resource_root(base_uri)
        if root is None or not isinstance(root.contents, Mapping):
            return None
        return root if root.contents.get("$recursiveAnchor") is True else None

    def _bind_dynamic_references(self) -> None:
        pending = [node for node in self._dynamic if node.anchor is not None]
        if not pending:
            return
        changed = True
        while changed:
            changed = False
            for base_uri in sorted(self._resource_bases()):
                for node in pending:
                    if base_uri in node.candidates:
                        continue
                    target = self._dynamic_target(node, base_uri)
                    if target is None:
                        continue
                    if target.key not in self._table:
                        self.compile_target(target, depth=0)
                    node.bind({**node.candidates, base_uri: target.key})
                    changed = True
            pending = [node for node in self._dynamic if node.anchor is not None]
        LOGGER.debug("bound %d dynamic references", len(pending))

    def _check_complete(self) -> None:
        for key, node in self._table.items():
            if node is None:
                raise UnresolvableReference(key, "schema was never compiled")

    def _check_cycles(self) -> None:
        state: dict[int, int] = {}
        for start in self._table.values():
            if start is None or id(start) in state:
                continue
            state[id(start)] = _VISITING
            stack: list[tuple[Node, Iterator[Node]]] = [(start, start.inplace())]
            while stack:
                node, children = stack[-1]
                child = next(children, None)
                if child is None:
                    state[id(node)] = _DONE
                    stack.pop()
                    continue
                mark = state.get(id(child))
                if mark == _VISITING:
                    reference = next(
                        (item.key for item, _ in reversed(stack) if isinstance(item, (RefNode, DynamicRefNode))),
                        child.location,
                    )
                    LOGGER.debug("in-place reference cycle through %s", reference)
                    raise CyclicResolutionLimitExceeded(reference, "the reference cycle never consumes any input")
                if mark is None:
                    state[id(child)] = _VISITING
                    stack.append((child, child.inplace()))


__all__ = ["SchemaCompiler", "SchemaContext", "select_draft"]
