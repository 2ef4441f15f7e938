"""Error type and error reporting for scene loading."""

from __future__ import annotations

import sys
from typing import TextIO


class CubError(Exception):
    """Raised when a scene description or map is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def format_error(text: str) -> str:
    """Return the two-line error report for ``text``."""
    return f"Error\n{text}\n"


def print_error(text: str, stream: TextIO | None = None) -> None:
    """Write the error report for ``text`` to ``stream`` (stderr by default)."""
    target = sys.stderr if stream is None else stream
    target.write(format_error(text))
    target.flush()