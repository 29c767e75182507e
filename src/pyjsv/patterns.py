# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""ECMA-262 regular expressions for ``pattern`` and ``patternProperties``.

JSON Schema patterns follow ECMA-262, whose character classes are ASCII-only
(``\\d`` is ``[0-9]``), whose ``$`` never matches before a trailing newline
and whose ``.`` excludes every line terminator. Patterns are rewritten into
the equivalent :mod:`regex` syntax, which also provides the Unicode property
escapes (``\\p{L}``, ``\\P{Lu}``) that :mod:`re` lacks.
"""

from __future__ import annotations

from collections.abc import Sequence

import regex

Ranges = Sequence[tuple[int, int]]

_MAX_CODE_POINT = 0x10FFFF

_DIGIT: Ranges = ((0x30, 0x39),)
_WORD: Ranges = ((0x30, 0x39), (0x41, 0x5A), (0x5F, 0x5F), (0x61, 0x7A))
_SPACE: Ranges = (
    (0x09, 0x0D),
    (0x20, 0x20),
    (0xA0, 0xA0),
    (0x1680, 0x1680),
    (0x2000, 0x200A),
    (0x2028, 0x2029),
    (0x202F, 0x202F),
    (0x205F, 0x205F),
    (0x3000, 0x3000),
    (0xFEFF, 0xFEFF),
)

_CLASSES: dict[str, Ranges] = {"d": _DIGIT, "w": _WORD, "s": _SPACE}

_WORD_CHAR = "[A-Za-z0-9_]"
_BOUNDARY = f"(?:(?<={_WORD_CHAR})(?!{_WORD_CHAR})|(?<!{_WORD_CHAR})(?={_WORD_CHAR}))"
_NON_BOUNDARY = f"(?:(?<={_WORD_CHAR})(?={_WORD_CHAR})|(?<!{_WORD_CHAR})(?!{_WORD_CHAR}))"
_DOT = "[^\\n\\r\\u2028\\u2029]"


def _escape(code: int) -> str:
    return f"\\U{code:08x}"


def _members(ranges: Ranges) -> str:
    return "".join(_escape(low) if low == high else f"{_escape(low)}-{_escape(high)}" for low, high in ranges)


def _complement(ranges: Ranges) -> list[tuple[int, int]]:
    gaps: list[tuple[int, int]] = []
    start = 0
    for low, high in ranges:
        if low > start:
            gaps.append((start, low - 1))
        start = high + 1
    if start <= _MAX_CODE_POINT:
        gaps.append((start, _MAX_CODE_POINT))
    return gaps


def _class_escape(letter: str, *, in_class: bool) -> str | None:
    """Return the ASCII rendition of ``\\d``, ``\\w``, ``\\s`` or their negations."""

    ranges = _CLASSES.get(letter.lower())
    if ranges is None:
        return None
    if letter.isupper():
        members = _members(_complement(ranges))
    else:
        members = _members(ranges)
    return members if in_class else f"[{members}]"


def translate(source: str) -> str:
    """Rewrite the ECMA-262 pattern ``source`` into :mod:`regex` syntax."""

    parts: list[str] = []
    in_class = False
    index = 0
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\" and index + 1 < length:
            letter = source[index + 1]
            index += 2
            expanded = _class_escape(letter, in_class=in_class)
            if expanded is not None:
                parts.append(expanded)
            elif letter == "b":
                parts.append("\\x08" if in_class else _BOUNDARY)
            elif letter == "B" and not in_class:
                parts.append(_NON_BOUNDARY)
            elif letter == "c" and index < length and source[index].isascii() and source[index].isalpha():
                parts.append(f"\\x{ord(source[index]) % 32:02x}")
                index += 1
            elif letter == "u" and regex.match(r"\{[0-9A-Fa-f]{1,6}\}", source[index:]):
                end = source.index("}", index)
                code = int(source[index + 1 : end], 16)
                parts.append(_escape(code) if code <= _MAX_CODE_POINT else f"\\u{source[index : end + 1]}")
                index = end + 1
            else:
                parts.append(f"\\{letter}")
            continue
        if in_class:
            if char == "]":
                in_class = False
            parts.append("\\[" if char == "[" else char)
        elif char == "[":
            if source.startswith("[]", index):
                parts.append("(?!)")
                index += 2
                continue
            if source.startswith("[^]", index):
                parts.append("(?s:.)")
                index += 3
                continue
            in_class = True
            parts.append(char)
            if source.startswith("^", index + 1):
                parts.append("^")
                index += 1
        elif char == "$":
            parts.append("\\Z")
        elif char == ".":
            parts.append(_DOT)
        else:
            parts.append(char)
        index += 1
    return "".join(parts)


def compile_pattern(source: str) -> regex.Pattern[str]:
    """Compile the ECMA-262 pattern ``source``.

    Raises:
        regex.error: If ``source`` is not a valid regular expression.
    """

    return regex.compile(translate(source))


__all__ = ["compile_pattern", "translate"]
