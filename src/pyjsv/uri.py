# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""URI reference resolution and JSON pointer helpers.

``urllib.parse.urljoin`` only joins schemes listed in ``uses_relative``, so
identifiers such as ``urn:`` or ``json-schema:`` would not resolve. The
helpers here implement RFC 3986 section 5.2 directly.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Final, NamedTuple
from urllib.parse import quote, unquote

_URI_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?$", re.S)


class URIParts(NamedTuple):
    """Components of a URI reference as defined by RFC 3986 appendix B."""

    scheme: str | None
    authority: str | None
    path: str
    query: str | None
    fragment: str | None


def split_uri(reference: str) -> URIParts:
    """Split ``reference`` into its five RFC 3986 components."""

    match = _URI_PATTERN.match(reference)
    if match is None:  # pragma: no cover - the pattern matches every string
        return URIParts(None, None, reference, None, None)
    scheme, authority, path, query, fragment = match.groups()
    return URIParts(scheme, authority, path, query, fragment)


def unsplit_uri(parts: URIParts) -> str:
    """Recompose a URI string from ``parts``."""

    result = ""
    if parts.scheme is not None:
        result += f"{parts.scheme}:"
    if parts.authority is not None:
        result += f"//{parts.authority}"
    result += parts.path
    if parts.query is not None:
        result += f"?{parts.query}"
    if parts.fragment is not None:
        result += f"#{parts.fragment}"
    return result


def remove_dot_segments(path: str) -> str:
    """Collapse ``.`` and ``..`` segments following RFC 3986 section 5.2.4."""

    output: list[str] = []
    remaining = path
    while remaining:
        if remaining.startswith("../"):
            remaining = remaining[3:]
        elif remaining.startswith("./"):
            remaining = remaining[2:]
        elif remaining.startswith("/./"):
            remaining = remaining[2:]
        elif remaining == "/.":
            remaining = "/"
        elif remaining.startswith("/../"):
            remaining = remaining[3:]
            if output:
                output.pop()
        elif remaining == "/..":
            remaining = "/"
            if output:
                output.pop()
        elif remaining in {".", ".."}:
            remaining = ""
        else:
            start = 1 if remaining.startswith("/") else 0
            end = remaining.find("/", start)
            if end == -1:
                end = len(remaining)
            output.append(remaining[:end])
            remaining = remaining[end:]
    return "".join(output)


def _merge_paths(base: URIParts, reference_path: str) -> str:
    if base.authority is not None and not base.path:
        return f"/{reference_path}"
    head, _, _ = base.path.rpartition("/")
    if "/" not in base.path:
        return reference_path
    return f"{head}/{reference_path}"


def resolve_uri(base: str, reference: str) -> str:
    """Resolve ``reference`` against ``base`` and return the target URI.

    Args:
        base: Absolute base URI in effect for the reference.
        reference: URI reference, possibly relative or fragment-only.

    Returns:
        str: The resolved target URI, fragment included when present.
    """

    ref = split_uri(reference)
    if ref.scheme is not None:
        return unsplit_uri(ref._replace(path=remove_dot_segments(ref.path)))
    parent = split_uri(base)
    if ref.authority is not None:
        target = URIParts(parent.scheme, ref.authority, remove_dot_segments(ref.path), ref.query, ref.fragment)
        return unsplit_uri(target)
    if not ref.path:
        query = ref.query if ref.query is not None else parent.query
        return unsplit_uri(URIParts(parent.scheme, parent.authority, parent.path, query, ref.fragment))
    if ref.path.startswith("/"):
        path = remove_dot_segments(ref.path)
    else:
        path = remove_dot_segments(_merge_paths(parent, ref.path))
    return unsplit_uri(URIParts(parent.scheme, parent.authority, path, ref.query, ref.fragment))


def split_fragment(uri: str) -> tuple[str, str]:
    """Return ``(uri_without_fragment, decoded_fragment)`` for ``uri``."""

    head, _, fragment = uri.partition("#")
    return head, unquote(fragment)


def normalize_uri(uri: str) -> str:
    """Drop an empty trailing fragment so ``x#`` and ``x`` compare equal."""

    return uri[:-1] if uri.endswith("#") else uri


def is_absolute(uri: str) -> bool:
    """Return ``True`` when ``uri`` carries a scheme."""

    return split_uri(uri).scheme is not None


def path_to_uri(path: Path) -> str:
    """Return the ``file://`` URI for ``path`` resolved to an absolute location."""

    return path.resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Return the filesystem path addressed by a ``file://`` URI."""

    parts = split_uri(uri)
    return Path(unquote(parts.path))


def escape_token(token: str) -> str:
    """Escape a JSON pointer reference token."""

    return token.replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    """Undo :func:`escape_token`."""

    return token.replace("~1", "/").replace("~0", "~")


def join_pointer(pointer: str, *tokens: str | int) -> str:
    """Append ``tokens`` to ``pointer`` with proper escaping."""

    if not tokens:
        return pointer
    return pointer + "".join(f"/{escape_token(str(token))}" for token in tokens)


def pointer_from_tokens(tokens: Iterable[str | int]) -> str:
    """Build a JSON pointer string from raw ``tokens``."""

    return join_pointer("", *tokens)


def split_pointer(pointer: str) -> list[str]:
    """Split a JSON pointer string into unescaped reference tokens.

    Raises:
        ValueError: If ``pointer`` is neither empty nor starts with ``/``.
    """

    if not pointer:
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"JSON pointer '{pointer}' must start with '/'")
    return [unescape_token(token) for token in pointer[1:].split("/")]


def parse_index(token: str) -> int | None:
    """Return ``token`` as an array index, rejecting signs and leading zeros."""

    if not token or not token.isdigit() or not token.isascii():
        return None
    if len(token) > 1 and token.startswith("0"):
        return None
    return int(token)


def fragment_for_pointer(pointer: str) -> str:
    """Return ``pointer`` percent-encoded for use as a URI fragment."""

    return quote(pointer, safe="/~:@!$&'()*+,;=")


__all__ = [
    "URIParts",
    "escape_token",
    "fragment_for_pointer",
    "is_absolute",
    "join_pointer",
    "normalize_uri",
    "parse_index",
    "path_to_uri",
    "pointer_from_tokens",
    "remove_dot_segments",
    "resolve_uri",
    "split_fragment",
    "split_pointer",
    "split_uri",
    "unescape_token",
    "unsplit_uri",
    "uri_to_path",
]
