"""
Error types raised while lexing and parsing Eretria source.

Every error carries the 1-based position of the offending token (or of
end-of-input) and renders as ``<line>:<col>: <message>``. Nothing is
recovered: the first error aborts the parse.
"""

from __future__ import annotations

from typing import Tuple

Pos = Tuple[int, int]


class ParseError(Exception):
    """Parse error with position info"""

    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{line}:{column}: {message}")

    @classmethod
    def at(cls, pos: Pos, message: str) -> ParseError:
        return cls(message, pos[0], pos[1])

    @classmethod
    def expected(cls, pos: Pos, expected: str, got: str) -> ParseError:
        return cls(f"expected {expected}, got {got}", pos[0], pos[1])

    @property
    def pos(self) -> Pos:
        return self.line, self.column


class LexError(ParseError):
    """Malformed literal, unterminated string or stray character"""
    pass


class GrammarError(ParseError):
    """Unexpected token or missing delimiter/separator"""
    pass


class GuardError(ParseError):
    """Internal invariant violation, e.g. a negative data offset"""
    pass
