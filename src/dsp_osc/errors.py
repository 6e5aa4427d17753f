"""Structured errors raised by the signal-generation core."""

from __future__ import annotations


class BreakpointParseError(ValueError):
    """A breakpoint source could not be turned into a breakpoint set.

    ``kind`` is one of ``non_numeric``, ``incomplete``, ``not_increasing``,
    ``blank_line`` or ``empty``. ``line`` is the 1-based line number of the
    offending input line, when there is one.
    """

    kind: str
    line: int | None

    def __init__(self, kind: str, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.line = line


class ConstructionError(ValueError):
    """A stream, table or oscillator was requested with unusable parameters.

    No partially built object is ever returned alongside this error.
    """

    kind: str

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
