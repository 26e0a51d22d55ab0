"""
Message construction and console styles.
"""

from __future__ import annotations

import pprint
import sys
from typing import Any, Callable, TextIO

MessageConstructor = Callable[..., str]

_PRIMITIVES = (str, int, float, bool, bytes, type(None))

# =============================================================================
# Message Constructor
# =============================================================================


def inspect_value(value: Any) -> str:
    """Render a container or object fully expanded on a single line."""
    return pprint.pformat(value, width=sys.maxsize, depth=None, compact=False, sort_dicts=False)


def default_message_constructor(channel: str | None, *values: Any) -> str:
    """Join ``values`` with single spaces, inspecting anything non-primitive.

    ``channel`` is the channel the message is built for. The default
    constructor does not use it, replacements may.
    """
    parts = []
    for value in values:
        if isinstance(value, _PRIMITIVES):
            parts.append(str(value))
        else:
            parts.append(inspect_value(value))
    return " ".join(parts)


# =============================================================================
# Console Styles
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "debug": "\033[31;47m",  # red on white
    "debug_alt": "\033[31;48;2;180;180;180m",  # red on light gray
    "warn": "\033[31;43m",  # red on yellow
    "error": "\033[97;41m",  # white on red
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def supports_color(stream: TextIO) -> bool:
    return bool(getattr(stream, "isatty", lambda: False)())


def style(text: str, color: str | None, stream: TextIO) -> str:
    """Colorize ``text`` for ``stream`` when it is a terminal."""
    if not color or not supports_color(stream):
        return text
    return colorize(text, color)
