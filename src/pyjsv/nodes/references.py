# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reference nodes resolved through the node table at validation time.

References never own their target. They hold a node-table key and a read-only
view of the table, which is how recursive schemas compile to finite trees.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..context import EvaluationContext
from ..errors import UnresolvableReference
from ..paths import Location
from ..validation import ValidationError
from .base import Node, NodeKind


class RefNode(Node):
    """``$ref`` to a statically known schema."""

    __slots__ = ("_nodes", "key")

    kind = NodeKind.REFERENCE

    def __init__(self, key: str, nodes: Mapping[str, Node | None], location: str) -> None:
        super().__init__("$ref", location)
        self.key = key
        self._nodes = nodes

    @property
    def target(self) -> Node:
        """Return the compiled schema the reference points to."""

        node = self._nodes[self.key]
        if node is None:
            raise UnresolvableReference(self.key, "the referenced schema was never compiled")
        return node

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return self._nodes[self.key].is_valid(instance, ctx)  # type: ignore[union-attr]

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        yield from self.target.iter_errors(instance, instance_location, keyword_location.push(self.keyword), ctx)

    def inplace(self) -> Iterator[Node]:
        yield self.target

    def __repr__(self) -> str:
        return f"<RefNode {self.key!r}>"


class DynamicRefNode(Node):
    """``$dynamicRef`` (2020-12) and ``$recursiveRef`` (2019-09).

    The static target is used unless the reference was bookended at compile
    time, in which case the outermost resource in the dynamic scope that
    declares a matching anchor wins.

    Attributes:
        key: Node-table key of the statically resolved target.
        anchor: Dynamic anchor name, ``""`` for ``$recursiveAnchor``, or
            ``None`` for a plain static lookup.
        candidates: Resource base URI to node-table key, filled after compilation.
    """

    __slots__ = ("_candidates", "_nodes", "anchor", "key")

    kind = NodeKind.REFERENCE

    def __init__(
        self,
        keyword: str,
        key: str,
        anchor: str | None,
        nodes: Mapping[str, Node | None],
        location: str,
    ) -> None:
        super().__init__(keyword, location)
        self.key = key
        self.anchor = anchor
        self._nodes = nodes
        self._candidates: Mapping[str, str] = MappingProxyType({})

    @property
    def candidates(self) -> Mapping[str, str]:
        """Return the dynamic candidates keyed by resource base URI."""

        return self._candidates

    def bind(self, candidates: Mapping[str, str]) -> None:
        """Attach the dynamic candidates discovered after compilation."""

        self._candidates = MappingProxyType(dict(candidates))

    def _target(self, ctx: EvaluationContext) -> Node:
        key = self.key
        if self._candidates:
            for base_uri in ctx.scope:
                found = self._candidates.get(base_uri)
                if found is not None:
                    key = found
                    break
        return self._nodes[key]  # type: ignore[return-value]

    def is_valid(self, instance: object, ctx: EvaluationContext) -> bool:
        return self._target(ctx).is_valid(instance, ctx)

    def iter_errors(
        self,
        instance: object,
        instance_location: Location,
        keyword_location: Location,
        ctx: EvaluationContext,
    ) -> Iterator[ValidationError]:
        target = self._target(ctx)
        yield from target.iter_errors(instance, instance_location, keyword_location.push(self.keyword), ctx)

    def inplace(self) -> Iterator[Node]:
        yield self._nodes[self.key]  # type: ignore[misc]
        for key in self._candidates.values():
            yield self._nodes[key]  # type: ignore[misc]

    def __repr__(self) -> str:
        return f"<DynamicRefNode {self.keyword} {self.key!r} anchor={self.anchor!r}>"


__all__ = ["DynamicRefNode", "RefNode"]
