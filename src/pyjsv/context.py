# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-call evaluation state threaded through every validator node.

A fresh :class:`EvaluationContext` is created for each ``is_valid``,
``validate`` or ``iter_errors`` call, which is what lets a single compiled
tree serve many threads at once.
"""

from __future__ import annotations

from collections.abc import Iterable


class Frame:
    """Annotations collected for one instance location within one scope.

    Attributes:
        properties: Property names evaluated so far.
        all_properties: Every property counts as evaluated.
        items: Array indices below this bound count as evaluated.
        all_items: Every item counts as evaluated.
        indices: Individual indices evaluated by ``contains``.
    """

    __slots__ = ("all_items", "all_properties", "indices", "items", "properties")

    def __init__(self) -> None:
        self.properties: set[str] = set()
        self.all_properties = False
        self.items = 0
        self.all_items = False
        self.indices: set[int] = set()

    def merge(self, other: Frame) -> None:
        """Fold the annotations of ``other`` into this frame."""

        if other.properties:
            self.properties |= other.properties
        self.all_properties = self.all_properties or other.all_properties
        self.items = max(self.items, other.items)
        self.all_items = self.all_items or other.all_items
        if other.indices:
            self.indices |= other.indices

    def property_evaluated(self, name: str) -> bool:
        """Return ``True`` when ``name`` was evaluated in this frame."""

        return self.all_properties or name in self.properties

    def item_evaluated(self, index: int) -> bool:
        """Return ``True`` when ``index`` was evaluated in this frame."""

        return self.all_items or index < self.items or index in self.indices


class EvaluationContext:
    """Annotation frames and dynamic scope for a single validation call.

    Args:
        tracking: Record evaluated properties and items. Only trees holding
            ``unevaluated*`` keywords need this.
        dynamic: Maintain the dynamic scope. Only trees holding dynamic or
            recursive references need this.
    """

    __slots__ = ("_frames", "dynamic", "scope", "tracking")

    def __init__(self, *, tracking: bool = False, dynamic: bool = False) -> None:
        self.tracking = tracking
        self.dynamic = dynamic
        self.scope: list[str] = []
        self._frames: list[Frame] = [Frame()]

    @property
    def frame(self) -> Frame:
        """Return the innermost annotation frame."""

        return self._frames[-1]

    @property
    def depth(self) -> int:
        """Return the number of open frames."""

        return len(self._frames)

    def enter(self) -> None:
        """Open a new, empty annotation frame."""

        self._frames.append(Frame())

    def leave(self, merge: bool) -> None:
        """Close the innermost frame, folding it into its parent when ``merge`` is true."""

        frame = self._frames.pop()
        if merge:
            self._frames[-1].merge(frame)

    def isolate(self) -> None:
        """Open a scratch frame for child instances when annotations are tracked."""

        if self.tracking:
            self._frames.append(Frame())

    def release(self) -> None:
        """Discard the scratch frame opened by :meth:`isolate`."""

        if self.tracking:
            self._frames.pop()

    def mark_properties(self, names: Iterable[str]) -> None:
        """Record ``names`` as evaluated properties."""

        self._frames[-1].properties.update(names)

    def mark_all_properties(self) -> None:
        """Record every property of the current object as evaluated."""

        self._frames[-1].all_properties = True

    def mark_items(self, upto: int) -> None:
        """Record every index below ``upto`` as evaluated."""

        frame = self._frames[-1]
        if upto > frame.items:
            frame.items = upto

    def mark_all_items(self) -> None:
        """Record every item of the current array as evaluated."""

        self._frames[-1].all_items = True

    def mark_indices(self, indices: Iterable[int]) -> None:
        """Record individual array ``indices`` as evaluated."""

        self._frames[-1].indices.update(indices)

    def enter_resource(self, base_uri: str) -> bool:
        """Push ``base_uri`` onto the dynamic scope when it changes the resource.

        Returns:
            bool: ``True`` when a scope entry was pushed and must be popped.
        """

        if self.scope and self.scope[-1] == base_uri:
            return False
        self.scope.append(base_uri)
        return True

    def leave_resource(self) -> None:
        """Pop the innermost dynamic scope entry."""

        self.scope.pop()


__all__ = ["EvaluationContext", "Frame"]
