"""
Lexer for Eretria

Turns source text into a pull-based stream of tokens.

Features:
- One token per call, nothing buffered ahead of the parser
- Multi-radix integer literals (0b1010, 0xFF, ...) and floats
- String literals with variable-length numeric escapes (\\d255, \\xFFDD)
- Position tracking through a shared LineIndex
"""

from string import ascii_letters
from typing import Iterator, List, Optional

from .errors import LexError
from .operators import OPERATORS
from .position import LineIndex
from .token_types import TT, Tok

# Radix letter following a leading '0' (or a '\' inside strings)
RADIXES = {
    'b': 2,
    't': 3,
    'q': 4,
    'p': 5,
    'h': 6,
    's': 7,
    'o': 8,
    'e': 9,
    'd': 10,
    'l': 11,
    'z': 12,
    'x': 16,
}

DIGITS = '0123456789'
MAX_CODE_POINT = 0x10FFFF
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


def digit_value(ch: str) -> Optional[int]:
    """Value of an alphanumeric digit (0-9, then a/A=10 ... z/Z=35)."""
    if ch in DIGITS:
        return ord(ch) - ord('0')
    if ch in ascii_letters:
        return ord(ch.lower()) - ord('a') + 10
    return None


def is_radix_digit(ch: str, radix: int) -> bool:
    value = digit_value(ch)
    return value is not None and value < radix


# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Eretria lexer.

    Works as a cursor: next_token() scans exactly one token on demand and
    keeps returning EOF once the source is exhausted.
    """

    KEYWORDS = {
        'global': TT.GLOBAL,
        'export': TT.EXPORT,
        'fn': TT.FN,
        'return': TT.RETURN,
        'data': TT.DATA,
    }

    PUNCTUATION = [
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        (';', TT.SEMI),
        ('=', TT.ASSIGN),
        (',', TT.COMMA),
    ]

    def __init__(self, source: str, index: Optional[LineIndex] = None):
        self.source = source
        self.pos = 0
        self.index = index if index is not None else LineIndex(source)

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        if self.pos >= len(self.source):
            return self.emit(TT.EOF, None, self.pos)

        # String literals
        if self.peek() == '"':
            return self.scan_string()

        # Numbers, including a glued leading '-'
        if self.at_number_start():
            return self.scan_number()

        # Identifiers and keywords
        if self.peek().isalpha() or self.peek() == '_':
            return self.scan_identifier()

        # Operators and punctuation
        return self.scan_operator()

    def at_number_start(self) -> bool:
        offset = 1 if self.peek() == '-' else 0
        ch = self.peek(offset)
        if ch in DIGITS:
            return True
        return ch == '.' and self.peek(offset + 1) in DIGITS

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self) -> Tok:
        """
        Scan number literal:
        -?0<radix-letter><digits>   integer in the selected base
        -?<digits>?.<digits>        float
        -?<digits>                  decimal integer
        """
        start = self.pos
        negative = False
        if self.peek() == '-':
            self.advance()
            negative = True

        # Radix prefix
        if self.peek() == '0' and self.peek(1) in ascii_letters:
            letter = self.peek(1)
            self.advance(2)

            digits_start = self.pos
            while self.peek().isalnum():
                self.advance()
            digits = self.source[digits_start:self.pos]

            radix = RADIXES.get(letter)
            if radix is None:
                raise self.error(start, f"unknown radix '{letter}' in number literal")
            if not digits:
                raise self.error(start, f"missing digits after radix prefix '0{letter}'")

            limit = -I64_MIN if negative else I64_MAX
            value = 0
            for ch in digits:
                if not is_radix_digit(ch, radix):
                    raise self.error(start, f"invalid digit '{ch}' for base {radix} in number literal")
                value = value * radix + digit_value(ch)
                if value > limit:
                    raise self.error(start, "integer literal out of 64-bit range")

            return self.emit_integer(-value if negative else value, start)

        # Integer part
        digits_start = self.pos
        while self.peek() in DIGITS:
            self.advance()

        # Decimal part
        if self.peek() == '.' and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()
            return self.emit(TT.FLOAT, float(self.source[start:self.pos]), start)

        # i64 holds at most 19 significant decimal digits
        if len(self.source[digits_start:self.pos].lstrip('0')) > 19:
            raise self.error(start, "integer literal out of 64-bit range")

        return self.emit_integer(int(self.source[start:self.pos]), start)

    def emit_integer(self, value: int, start: int) -> Tok:
        if not I64_MIN <= value <= I64_MAX:
            raise self.error(start, "integer literal out of 64-bit range")
        return self.emit(TT.INTEGER, value, start)

    def scan_string(self) -> Tok:
        """Scan string literal "...", decoding escapes as it goes"""
        start = self.pos
        self.advance()  # Opening quote
        chars: List[str] = []

        while True:
            if self.pos >= len(self.source):
                raise self.error(start, "unterminated string literal")

            ch = self.advance()
            if ch == '"':
                break

            if ch == '\\':
                if self.pos >= len(self.source):
                    raise self.error(start, "unterminated string literal")
                chars.append(self.scan_escape())
            else:
                chars.append(ch)

        return self.emit(TT.STRING, ''.join(chars), start)

    def scan_escape(self) -> str:
        """
        Decode the escape after a backslash.

        '\\' <radix-letter> <digit>+ consumes every following digit that is
        valid in that radix and yields one code point. Anything else is a
        literal escape of the character itself.
        """
        esc_start = self.pos - 1
        header = self.advance()
        radix = RADIXES.get(header)

        if radix is None or not is_radix_digit(self.peek(), radix):
            return header

        value = 0
        while self.pos < len(self.source) and is_radix_digit(self.peek(), radix):
            value = value * radix + digit_value(self.advance())
            if value > MAX_CODE_POINT:
                raise self.error(esc_start, "escape value exceeds maximum code point U+10FFFF")

        if 0xD800 <= value <= 0xDFFF:
            raise self.error(esc_start, f"escape value U+{value:04X} is a surrogate, not a valid code point")

        return chr(value)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        start = self.pos

        while self.peek().isalnum() or self.peek() == '_':
            self.advance()

        value = self.source[start:self.pos]
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        return self.emit(token_type, value, start)

    def scan_operator(self) -> Tok:
        """Scan operators, then punctuation"""
        start = self.pos

        for op_str in OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return self.emit(TT.OP, op_str, start)

        for punct, punct_type in self.PUNCTUATION:
            if self.source.startswith(punct, self.pos):
                self.advance(len(punct))
                return self.emit(punct_type, punct, start)

        raise self.error(start, f"unexpected character '{self.peek()}'")

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        self.pos = min(self.pos + n, len(self.source))
        return result

    def skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self.pos += 1

    def emit(self, token_type: TT, value, start: int) -> Tok:
        line, column = self.index.linecol(start)
        return Tok(
            type=token_type,
            value=value,
            line=line,
            column=column,
            start=start,
            end=self.pos,
        )

    def error(self, offset: int, message: str) -> LexError:
        return LexError.at(self.index.linecol(offset), message)


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source (EOF token included)"""
    return list(Lexer(source))
