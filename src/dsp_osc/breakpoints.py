"""Breakpoint sets, point-in-time lookup and per-sample breakpoint streams."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

import numpy as np

from dsp_osc.errors import BreakpointParseError, ConstructionError
from dsp_osc.models import Breakpoint

# ---------------------------------------------------------------------------
# BreakpointSet
# ---------------------------------------------------------------------------


class BreakpointSet(Sequence[Breakpoint]):
    """An immutable, time-ordered sequence of breakpoints.

    Times must be non-negative and non-decreasing. Two points may share a
    time, which describes a jump in the control curve.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Breakpoint | tuple[float, float]]) -> None:
        accepted: list[Breakpoint] = []
        last_time = 0.0
        for n, p in enumerate(points, start=1):
            if not isinstance(p, Breakpoint):
                p = Breakpoint(time=p[0], value=p[1])
            if p.time < last_time:
                raise BreakpointParseError(
                    "not_increasing",
                    f"Breakpoint {n} not increasing in time ({p.time} < {last_time})",
                    line=n,
                )
            last_time = p.time
            accepted.append(p)
        self._points: tuple[Breakpoint, ...] = tuple(accepted)

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index):  # type: ignore[override]
        return self._points[index]

    def __iter__(self) -> Iterator[Breakpoint]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BreakpointSet):
            return NotImplemented
        return self._points == other._points

    def __repr__(self) -> str:
        return f"BreakpointSet({[(p.time, p.value) for p in self._points]!r})"

    @property
    def points(self) -> tuple[Breakpoint, ...]:
        return self._points

    @property
    def duration(self) -> float:
        """Time of the last breakpoint (0.0 for an empty set)."""
        return self._points[-1].time if self._points else 0.0

    def minmax(self) -> tuple[float, float]:
        """Return (min, max) over all breakpoint values, NaNs for an empty set."""
        if not self._points:
            return (float("nan"), float("nan"))
        values = [p.value for p in self._points]
        return (min(values), max(values))

    def in_range(self, lo: float, hi: float) -> bool:
        """Return True if every breakpoint value lies within [lo, hi]."""
        return all(lo <= p.value <= hi for p in self._points)

    def cursor(self) -> BreakpointCursor:
        return BreakpointCursor(self)

    def stream(self, sample_rate: float) -> BreakpointStream:
        return BreakpointStream(self, sample_rate)


# ---------------------------------------------------------------------------
# Text format
# ---------------------------------------------------------------------------


def _leading_numbers(line: str) -> list[float]:
    """Read up to two leading real numbers from a whitespace-separated line."""
    numbers: list[float] = []
    for token in line.split()[:2]:
        try:
            numbers.append(float(token))
        except ValueError:
            break
    return numbers


def parse_breakpoints(lines: Iterable[str]) -> BreakpointSet:
    """Parse ``time value`` lines into a BreakpointSet.

    Any malformed line aborts the whole parse with a BreakpointParseError;
    a partially read file never yields a partial set. Blank lines are only
    tolerated before the first point and after the last one.
    """
    points: list[Breakpoint] = []
    last_time = 0.0
    blank_line: int | None = None

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            if points and blank_line is None:
                blank_line = lineno
            continue
        if blank_line is not None:
            raise BreakpointParseError(
                "blank_line", f"Line {blank_line} is blank inside breakpoint data", line=blank_line
            )

        numbers = _leading_numbers(line)
        if not numbers:
            raise BreakpointParseError(
                "non_numeric", f"Line {lineno} has non-numeric data", line=lineno
            )
        if len(numbers) == 1:
            raise BreakpointParseError(
                "incomplete", f"Line {lineno} has an incomplete breakpoint", line=lineno
            )

        time, value = numbers
        if time < last_time:
            raise BreakpointParseError(
                "not_increasing",
                f"Breakpoint at line {lineno} not increasing in time",
                line=lineno,
            )
        last_time = time
        points.append(Breakpoint(time=time, value=value))

    if not points:
        raise BreakpointParseError("empty", "No breakpoints read")
    return BreakpointSet(points)


def load_breakpoints(path: str | Path) -> BreakpointSet:
    """Read and parse a breakpoint file."""
    text = Path(path).read_text()
    return parse_breakpoints(text.splitlines())


def format_breakpoints(points: Iterable[Breakpoint]) -> str:
    """Render breakpoints in the text format read by parse_breakpoints()."""
    return "".join(f"{p.time:f}\t{p.value:f}\n" for p in points)


def normalize_breakpoints(points: BreakpointSet, peak: float = 1.0) -> BreakpointSet:
    """Scale every value so the largest one equals ``peak``."""
    if not len(points):
        return points
    _, hi = points.minmax()
    if hi <= 0.0:
        raise ValueError(f"Cannot normalize breakpoints with a maximum of {hi}")
    scale = peak / hi
    return BreakpointSet([(p.time, p.value * scale) for p in points])


# ---------------------------------------------------------------------------
# Point-in-time lookup
# ---------------------------------------------------------------------------


class BreakpointCursor:
    """Value-at-time lookup over a single breakpoint set.

    The search index belongs to this cursor only. Monotonic queries are
    amortised O(1); a query earlier than the current span rewinds the index.
    """

    def __init__(self, points: BreakpointSet) -> None:
        if not len(points):
            raise ConstructionError("too_few_points", "Cursor needs at least one breakpoint")
        self.points = points
        self._index = 1

    def value_at(self, time: float) -> float:
        pts = self.points.points
        n = len(pts)
        if n == 1 or time <= pts[0].time:
            return pts[0].value

        if time < pts[self._index - 1].time:
            self._index = 1
        i = self._index
        while i < n and time > pts[i].time:
            i += 1
        self._index = min(i, n - 1)

        # Hold the final value past the last breakpoint
        if i == n:
            return pts[-1].value

        left = pts[i - 1]
        right = pts[i]
        width = right.time - left.time
        if width == 0.0:
            return right.value
        fraction = (time - left.time) / width
        return left.value + (right.value - left.value) * fraction


# ---------------------------------------------------------------------------
# Per-sample stream
# ---------------------------------------------------------------------------


class BreakpointStream:
    """Stateful cursor producing one linearly interpolated value per sample.

    Each call to :meth:`tick` returns the value at the current position and
    then advances the position by one sample period. The stream cannot be
    rewound; once past the final breakpoint it holds the final value.
    """

    def __init__(self, points: BreakpointSet, sample_rate: float) -> None:
        if sample_rate <= 0:
            raise ConstructionError(
                "sample_rate", f"Sample rate must be positive (was {sample_rate})"
            )
        if len(points) < 2:
            raise ConstructionError(
                "too_few_points",
                f"Too few breakpoints ({len(points)}); minimum 2 required",
            )
        self.points = points
        self.sample_rate = float(sample_rate)
        self.increment = 1.0 / self.sample_rate
        self.position = 0.0
        self.exhausted = False
        self.left_index = 0
        self.right_index = 1
        self._load_span()

    def _load_span(self) -> None:
        self.left_point = self.points[self.left_index]
        self.right_point = self.points[self.right_index]
        self.width = self.right_point.time - self.left_point.time
        self.height = self.right_point.value - self.left_point.value

    def tick(self) -> float:
        if self.exhausted:
            return self.right_point.value

        if self.width == 0.0:
            value = self.right_point.value
        else:
            fraction = (self.position - self.left_point.time) / self.width
            value = self.left_point.value + self.height * fraction

        self.position += self.increment
        while self.position > self.right_point.time:
            if self.right_index + 1 >= len(self.points):
                self.exhausted = True
                break
            self.left_index += 1
            self.right_index += 1
            self._load_span()
        return value

    def fill(self, n: int) -> np.ndarray:
        """Return the next ``n`` ticks as a float64 array."""
        out = np.empty(n, dtype=np.float64)
        for i in range(n):
            out[i] = self.tick()
        return out
