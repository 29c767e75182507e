# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""The compiled validator handle returned by :func:`pyjsv.compile_schema`."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from .context import EvaluationContext
from .drafts import Draft
from .nodes import Node
from .paths import ROOT
from .validation import ErrorKind, ValidationError

if TYPE_CHECKING:
    from .store import ResourceStore


class Validator:
    """Immutable validator tree plus the read-only node table it references.

    A validator holds no per-call state, so one instance may serve any number
    of threads concurrently.
    """

    __slots__ = ("_draft", "_dynamic", "_nodes", "_root", "_store", "_tracking")

    def __init__(
        self,
        draft: Draft,
        root: Node,
        nodes: Mapping[str, Node | None],
        store: ResourceStore,
        *,
        tracking: bool,
        dynamic: bool,
    ) -> None:
        self._draft = draft
        self._root = root
        self._nodes = nodes
        self._store = store
        self._tracking = tracking
        self._dynamic = dynamic

    @property
    def draft(self) -> Draft:
        """Return the draft the root schema was compiled with."""

        return self._draft

    @property
    def root(self) -> Node:
        """Return the root node of the tree."""

        return self._root

    @property
    def nodes(self) -> Mapping[str, Node | None]:
        """Return the node table keyed by ``"<document-uri>#<pointer>"``."""

        return self._nodes

    @property
    def store(self) -> ResourceStore:
        """Return the resource store used during compilation."""

        return self._store

    def _context(self) -> EvaluationContext:
        return EvaluationContext(tracking=self._tracking, dynamic=self._dynamic)

    def is_valid(self, instance: object) -> bool:
        """Return ``True`` when ``instance`` is valid, stopping at the first failure.

        Instances nested too deeply to evaluate are reported as invalid.
        """

        try:
            return self._root.is_valid(instance, self._context())
        except RecursionError:
            return False

    def validate(self, instance: object) -> None:
        """Raise the first :class:`ValidationError` of ``instance``, if any.

        Raises:
            ValidationError: If ``instance`` is invalid.
        """

        error = next(self.iter_errors(instance), None)
        if error is not None:
            raise error

    def iter_errors(self, instance: object) -> Iterator[ValidationError]:
        """Lazily yield every validation error of ``instance``.

        Errors are built only as the iterator is advanced; calling the method
        again starts a fresh iteration. An instance nested too deeply to
        evaluate ends the iteration with a single root-level depth error.
        """

        errors = self._root.iter_errors(instance, ROOT, ROOT, self._context())
        try:
            yield from errors
        except RecursionError:
            yield ValidationError(
                ErrorKind.DEPTH_LIMIT,
                "Instance is nested too deeply to validate",
                instance=instance,
                instance_location=ROOT,
                keyword_location=ROOT,
            )

    def __repr__(self) -> str:
        return f"<Validator draft={self._draft.value} nodes={len(self._nodes)}>"


__all__ = ["Validator"]
