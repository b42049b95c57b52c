"""
Token Types for Eretria

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    GLOBAL = auto()
    EXPORT = auto()
    FN = auto()
    RETURN = auto()
    DATA = auto()

    # Binary operators (symbol carried in value)
    OP = auto()

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    LSQB = auto()
    RSQB = auto()
    SEMI = auto()
    ASSIGN = auto()  # =
    COMMA = auto()

    # Special
    EOF = auto()


# Human-readable names used in "expected X, got Y" diagnostics
PUNCT_TEXT = {
    TT.LPAR: "(",
    TT.RPAR: ")",
    TT.LBRACE: "{",
    TT.RBRACE: "}",
    TT.LSQB: "[",
    TT.RSQB: "]",
    TT.SEMI: ";",
    TT.ASSIGN: "=",
    TT.COMMA: ",",
}


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0
    start: int = 0
    end: int = 0

    def describe(self) -> str:
        """Render the token for an error message."""
        if self.type == TT.EOF:
            return "<eof>"
        if self.type == TT.IDENT:
            return f"identifier '{self.value}'"
        if self.type == TT.INTEGER:
            return f"integer {self.value}"
        if self.type == TT.FLOAT:
            return f"float {self.value!r}"
        if self.type == TT.STRING:
            return f"string {self.value!r}"
        return f"'{self.value}'"

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
