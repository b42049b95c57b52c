"""
Recursive Descent Parser for Eretria

Structure:
- Lexer: pulled one token at a time through a single lookahead slot
- Parser: recursive descent for statements/primaries, precedence climbing
  for binary operators
- AST: Lark Tree/Token nodes; accessors live in tree.py

Grammar:
    root     := (stat | ';')* EOF
    stat     := 'fn' IDENT '(' ')' expr
              | 'data' '[' INTEGER ']' '=' STRING
    primary  := IDENT ('=' expr)? | 'return' expr | '{' block
              | '(' expr ')' | FLOAT | INTEGER
    postfix  := primary ('(' (expr (',' expr)* ','?)? ')')*
    block    := (expr (';' expr)*)? '}'
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Union

from lark import Tree, Token

from .errors import GrammarError, GuardError, ParseError, Pos
from .lexer import Lexer
from .operators import precedence
from .position import LineIndex
from .token_types import PUNCT_TEXT, TT, Tok
from .tree import Node

__all__ = ["Parser", "ParseError", "parse", "parse_file"]

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Eretria.

    Operator strength (lowest to highest):
    0. |
    1. ^
    2. &
    3. == !=
    4. > < >= <=
    5. >> <<
    6. + -
    7. * /
    8. **
    """

    def __init__(self, source: str):
        self.index = LineIndex(source)
        self.lexer = Lexer(source, self.index)
        self.peeked: Optional[Tok] = None

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        """Look ahead at the next token, pulling it from the lexer if needed"""
        if self.peeked is None:
            self.peeked = self.lexer.next_token()
        return self.peeked

    def advance(self) -> Tok:
        """Consume the lookahead token"""
        tok = self.peek()
        self.peeked = None
        return tok

    def check(self, *types: TT) -> bool:
        """Check if the lookahead matches any of the given types"""
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if the lookahead matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, what: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            raise self.unexpected(what or f"'{PUNCT_TEXT[token_type]}'")
        return self.advance()

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def pos_of(self, tok: Tok) -> Pos:
        if tok.type == TT.EOF:
            return self.index.end()
        return tok.line, tok.column

    def unexpected(self, expected: str) -> ParseError:
        tok = self.peek()
        return GrammarError.expected(self.pos_of(tok), expected, tok.describe())

    def fail(self, message: str) -> ParseError:
        return GrammarError.at(self.pos_of(self.peek()), message)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        stats: List[Tree] = []

        while not self.check(TT.EOF):
            if self.check(TT.FN):
                stats.append(self.parse_stat_guarded(self.parse_fn_stmt))
            elif self.check(TT.DATA):
                stats.append(self.parse_data_stmt())
            elif self.match(TT.SEMI):
                continue
            else:
                raise self.unexpected("data, fn or ';'")

        return Tree('root', stats)

    def parse_stat_guarded(self, parse_stat: Callable[[], Tree]) -> Tree:
        """Run a recursive statement parser, reporting stack exhaustion as a GrammarError"""
        try:
            return parse_stat()
        except RecursionError:
            raise self.fail("expression nested too deeply") from None

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_fn_stmt(self) -> Tree:
        """Parse function declaration: fn name() expr"""
        self.expect(TT.FN)
        name = self.expect(TT.IDENT, "function name")
        self.expect(TT.LPAR)
        self.expect(TT.RPAR)
        body = self.parse_expr()
        return Tree('fn', [self._leaf('IDENT', name), Tree('params', []), body])

    def parse_data_stmt(self) -> Tree:
        """Parse data segment: data[offset] = "bytes" """
        self.expect(TT.DATA)
        self.expect(TT.LSQB)

        if not self.check(TT.INTEGER):
            raise self.fail("expected integer, e.g. data[<int>]")
        offset = self.advance()
        if offset.value < 0:
            raise GuardError.at(self.pos_of(offset), "`data` offset may not be negative")

        self.expect(TT.RSQB)
        self.expect(TT.ASSIGN)
        data = self.expect(TT.STRING, "string")
        return Tree('data', [self._leaf('INTEGER', offset), self._leaf('STRING', data)])

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Node:
        """Parse a full expression: primary followed by binary operators"""
        lhs = self.parse_postfix_expr()
        return self.parse_binary(lhs, 0)

    def parse_binary(self, lhs: Node, min_prec: int) -> Node:
        """
        Precedence climbing.

        Consume operators whose strength is at least min_prec. After reading
        each right operand, any strictly stronger operator that follows is
        folded into that operand first (with the floor raised to one above
        the current operator), so equal strengths group to the left and
        stronger ones nest to the right.
        """
        while self.check(TT.OP):
            op_tok = self.peek()
            op_prec = self._precedence(op_tok)
            if op_prec < min_prec:
                break

            self.advance()
            rhs = self.parse_postfix_expr()

            while self.check(TT.OP) and self._precedence(self.peek()) > op_prec:
                rhs = self.parse_binary(rhs, op_prec + 1)

            lhs = Tree('binop', [lhs, self._leaf('OP', op_tok), rhs])

        return lhs

    def _precedence(self, tok: Tok) -> int:
        prec = precedence(tok.value)
        if prec is None:
            raise GuardError.at(self.pos_of(tok), f"foreign operator '{tok.value}' found")
        return prec

    def parse_postfix_expr(self) -> Node:
        """Parse a primary and fold any call suffixes: f(a)(b, c)"""
        base = self.parse_primary_expr()

        while self.match(TT.LPAR):
            args = self.parse_arg_list()
            base = Tree('call', [base, Tree('args', args)])

        return base

    def parse_arg_list(self) -> List[Node]:
        """Parse call arguments after '(' up to and including ')'"""
        args: List[Node] = []

        while True:
            if self.check(TT.EOF):
                raise self.fail("incomplete argument list, closing parenthesis not found")
            if self.match(TT.RPAR):
                return args

            args.append(self.parse_expr())

            if self.match(TT.RPAR):
                return args
            if not self.match(TT.COMMA):
                raise self.unexpected("')' or ','")

    def parse_primary_expr(self) -> Node:
        """
        Parse primary expressions:
        - Identifiers and assignments (name = expr)
        - return expr
        - Blocks and parenthesized expressions
        - Integer and float literals
        """
        tok = self.peek()

        if tok.type == TT.IDENT:
            self.advance()
            if self.match(TT.ASSIGN):
                return Tree('assign', [self._leaf('IDENT', tok), self.parse_expr()])
            return self._leaf('IDENT', tok)

        if tok.type == TT.RETURN:
            self.advance()
            return Tree('return', [self.parse_expr()])

        if tok.type == TT.LBRACE:
            self.advance()
            return Tree('block', self.parse_block())

        if tok.type == TT.LPAR:
            self.advance()
            inner = self.parse_expr()
            self.expect(TT.RPAR)
            return Tree('paren', [inner])

        if tok.type == TT.FLOAT:
            return self._leaf('FLOAT', self.advance())

        if tok.type == TT.INTEGER:
            return self._leaf('INTEGER', self.advance())

        raise self.unexpected("expression")

    def parse_block(self) -> List[Node]:
        """Parse block body after '{': expressions separated by ';'"""
        block: List[Node] = []

        if self.match(TT.RBRACE):
            return block

        while True:
            if self.check(TT.EOF):
                raise self.fail("incomplete block, expected '}' before end of input")

            block.append(self.parse_expr())

            if self.match(TT.RBRACE):
                return block
            if self.check(TT.EOF):
                raise self.fail("incomplete block, expected '}' before end of input")
            if not self.match(TT.SEMI):
                raise self.unexpected("';' or '}'")

    # ========================================================================
    # Helpers
    # ========================================================================

    def _leaf(self, type_: str, tok: Tok) -> Token:
        return Token(
            type_,
            tok.value,
            start_pos=tok.start,
            line=tok.line,
            column=tok.column,
            end_pos=tok.end,
        )


# ============================================================================
# Entry Points
# ============================================================================

def parse(source: str) -> Tree:
    """
    Parse Eretria source into a Tree('root', [stat, ...]).

    Raises ParseError (LexError, GrammarError or GuardError) at the first
    problem; there is no recovery.
    """
    return Parser(source).parse()


def parse_file(path: Union[str, Path]) -> Tree:
    """Read a UTF-8 source file and parse it."""
    return parse(Path(path).read_text(encoding="utf-8"))
