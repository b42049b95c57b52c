from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import Callable, Dict, List, Optional

from . import __version__
from .errors import ParseError
from .lexer import Lexer
from .parser import parse
from .tree import statements, to_sexpr
from .utils import debug_py_trace_enabled


def _read_source(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def cmd_lex(source: str) -> None:
    for tok in Lexer(source):
        value = "" if tok.value is None else f" {tok.value!r}"
        print(f"{tok.line}:{tok.column}\t{tok.type.name}{value}")


def cmd_parse(source: str) -> None:
    for stat in statements(parse(source)):
        print(to_sexpr(stat))


def cmd_build(source: str) -> None:
    root = parse(source)
    count = len(statements(root))
    print(f"parsed {count} statement{'s' if count != 1 else ''}; code generation is not implemented")


COMMANDS: Dict[str, Callable[[str], None]] = {
    "lex": cmd_lex,
    "parse": cmd_parse,
    "build": cmd_build,
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eretria",
        description="Generate 1:1 WebAssembly using a simple syntax",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)
    helps = {
        "lex": "dump the token stream",
        "parse": "dump the syntax tree",
        "build": "parse the input (code generation is not implemented yet)",
    }
    for name, help_text in helps.items():
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("input", metavar="INPUT", help="Sets the input file to use")

    sub.add_parser("repl", help="interactive parser with live highlighting")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.command == "repl":
        from .repl import repl

        repl()
        return 0

    try:
        source = _read_source(args.input)
    except UnicodeDecodeError:
        print(f"error: {args.input}: file contains invalid utf-8", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: could not open {args.input}: {exc.strerror}", file=sys.stderr)
        return 1

    try:
        COMMANDS[args.command](source)
    except ParseError as exc:
        print(f"error: {args.input}:{exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
