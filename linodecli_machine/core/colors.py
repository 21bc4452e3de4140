"""ANSI styling for plugin output."""

from __future__ import annotations

import os
import sys

RESET = "\033[0m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"


def enabled(stream=None) -> bool:
    """Color only real terminals, and never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


def style(text: str, *codes: str, stream=None) -> str:
    if not codes or not enabled(stream):
        return text
    return "".join(codes) + text + RESET


def success(text: str) -> str:
    return style(text, GREEN)


def info(text: str) -> str:
    return style(text, CYAN)


def warning(text: str) -> str:
    return style(text, YELLOW, stream=sys.stderr)


def error(text: str) -> str:
    return style(text, RED, stream=sys.stderr)
