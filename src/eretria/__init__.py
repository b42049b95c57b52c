"""Front end (lexer and parser) for the Eretria language."""

__version__ = "0.0.1"

from .errors import GrammarError, GuardError, LexError, ParseError
from .lexer import tokenize
from .parser import parse, parse_file

__all__ = [
    "GrammarError",
    "GuardError",
    "LexError",
    "ParseError",
    "parse",
    "parse_file",
    "tokenize",
]
