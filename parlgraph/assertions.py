"""Abort and assertion helpers that report the caller's location."""

from __future__ import annotations

import enum
import inspect


class AbortError(Exception):
    """Raised in place of terminating the program."""

    def __init__(self, message, location):
        super().__init__(f"{location}: {message}")
        self.message = message
        self.location = location


def _location(depth):
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame.f_back is None:
            break
        frame = frame.f_back
    return f"{frame.f_code.co_filename}:{frame.f_lineno}"


def abort(message):
    """Fail unconditionally with ``message``."""
    raise AbortError(f"Abort: {message}", _location(2))


def abort_invalid_enum(enum_type, value):
    """Fail because ``value`` is not an expected member of ``enum_type``."""
    raw = value.value if isinstance(value, enum.Enum) else value
    name = getattr(enum_type, "__name__", str(enum_type))
    raise AbortError(f"Abort: Unexpected {name} value: {raw}", _location(2))


def check(condition, message=None):
    """Fail when ``condition`` is false, optionally with an explanation."""
    if not condition:
        text = "Failed assertion" if message is None else f"Failed assertion: {message}"
        raise AbortError(text, _location(2))