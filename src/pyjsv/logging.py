# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing output helpers with optional colour and emoji support.

Library modules log through the standard :mod:`logging` package and never
print. These helpers are for the command-line front end.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


def _stdout_is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def _console(color: bool, use_emoji: bool, tty: bool) -> Console:
    """Return a stdout console for the given colour, emoji and terminal settings."""

    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=use_emoji,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise an empty string."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    tty = _stdout_is_tty()
    color_enabled = tty if use_color is None else use_color
    console = _console(color_enabled, use_emoji, tty)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def line(msg: str, *, use_color: bool | None = None) -> None:
    """Emit an unstyled message."""

    _print_line(msg, style=None, use_emoji=False, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("✅ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    prefix = emoji("❌ ", use_emoji)
    _print_line(f"{prefix}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_debug_logging(enabled: bool) -> None:
    """Route the library's ``debug`` records to stderr through Rich when ``enabled``."""

    if not enabled:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    logger = logging.getLogger("pyjsv")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


__all__ = ["configure_debug_logging", "emoji", "fail", "line", "ok"]
