"""Offset to (line, column) lookup for diagnostics."""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Tuple


class LineIndex:
    """
    Maps 0-based character offsets in a source string to 1-based
    (line, column) pairs.

    The line-start table is built once per source and never mutated, so a
    single index can be shared by the lexer and the parser of one parse.
    """

    __slots__ = ('length', '_starts')

    def __init__(self, source: str):
        self.length = len(source)
        starts: List[int] = [0]
        for idx, ch in enumerate(source):
            if ch == '\n':
                starts.append(idx + 1)
        self._starts = starts

    def linecol(self, offset: int) -> Tuple[int, int]:
        """Return (line, column) for *offset*; offsets past the end clamp to EOF."""
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        offset = min(offset, self.length)
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1

    def end(self) -> Tuple[int, int]:
        """Position just past the last character."""
        return self.linecol(self.length)

    @property
    def line_count(self) -> int:
        return len(self._starts)
