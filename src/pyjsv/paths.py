# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Persistent, lazily materialised paths into instances and schemas.

A :class:`Location` is an immutable cons cell. Extending a location costs one
small allocation and shares the parent, so validators can thread locations
through every call and only pay for string building when an error is reported.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Final

from .uri import escape_token


class Location:
    """One segment of a path plus a link to the enclosing location."""

    __slots__ = ("_depth", "_parent", "_segment")

    def __init__(self, parent: Location | None = None, segment: str | int | None = None) -> None:
        self._parent = parent
        self._segment = segment
        self._depth = 0 if parent is None else parent._depth + 1

    def push(self, segment: str | int) -> Location:
        """Return a new location one ``segment`` deeper."""

        return Location(self, segment)

    def extend(self, *segments: str | int) -> Location:
        """Return a new location extended by every one of ``segments``."""

        location = self
        for segment in segments:
            location = Location(location, segment)
        return location

    @property
    def parent(self) -> Location | None:
        """Return the enclosing location, ``None`` for the root."""

        return self._parent

    @property
    def last(self) -> str | int | None:
        """Return the final segment, ``None`` for the root."""

        return self._segment

    def segments(self) -> tuple[str | int, ...]:
        """Materialise the path from the root as a tuple of segments."""

        result: list[str | int] = [None] * self._depth  # type: ignore[list-item]
        node: Location | None = self
        index = self._depth
        while node is not None and node._parent is not None:
            index -= 1
            result[index] = node._segment  # type: ignore[assignment]
            node = node._parent
        return tuple(result)

    def as_pointer(self) -> str:
        """Render the path as a JSON pointer string."""

        return "".join(f"/{escape_token(str(segment))}" for segment in self.segments())

    def __iter__(self) -> Iterator[str | int]:
        return iter(self.segments())

    def __len__(self) -> int:
        return self._depth

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self.segments() == other.segments()

    def __hash__(self) -> int:
        return hash(self.segments())

    def __repr__(self) -> str:
        return f"Location({self.as_pointer()!r})"


ROOT: Final[Location] = Location()

__all__ = ["ROOT", "Location"]
