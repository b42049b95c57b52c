"""prompt_toolkit lexer for live Eretria syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import LexError
from .lexer import Lexer as EtLexer
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "ansiyellow",
    "punctuation": "",
    "error": "bold ansired",
}

_TT_GROUP = {
    TT.GLOBAL: "keyword",
    TT.EXPORT: "keyword",
    TT.FN: "keyword",
    TT.RETURN: "keyword",
    TT.DATA: "keyword",
    TT.INTEGER: "number",
    TT.FLOAT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.OP: "operator",
    TT.ASSIGN: "operator",
    TT.LPAR: "punctuation",
    TT.RPAR: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.LSQB: "punctuation",
    TT.RSQB: "punctuation",
    TT.SEMI: "punctuation",
    TT.COMMA: "punctuation",
}


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Style one line; everything from a lex error onwards is marked as an error."""
    result: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in EtLexer(text):
            if tok.type == TT.EOF:
                break
            if tok.start > pos:
                result.append(("", text[pos:tok.start]))
            style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
            result.append((style, text[tok.start:tok.end]))
            pos = tok.end
    except LexError:
        result.append((GROUP_STYLE["error"], text[pos:]))
        pos = len(text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class EretriaLexer(Lexer):
    """prompt_toolkit Lexer that highlights Eretria source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
