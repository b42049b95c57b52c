"""Interactive parse REPL for Eretria, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .errors import LexError, ParseError
from .lexer import tokenize
from .parser import parse
from .repl_highlight import EretriaLexer
from .token_types import TT
from .tree import statements, to_sexpr
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/tokens": ("Toggle printing the token stream of each entry", "[on|off]"),
}

_DEPTH_OPEN = {TT.LPAR, TT.LSQB, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RSQB, TT.RBRACE}


def _open_depth(text: str) -> int:
    """Bracket nesting left open at the end of *text* (0 if it does not lex)."""
    try:
        tokens = tokenize(text)
    except LexError:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)
    return depth


def _parse_toggle(arg: str, current: bool) -> bool | None:
    if arg.lower() in ("on", "1", "true", "yes"):
        return True
    if arg.lower() in ("off", "0", "false", "no"):
        return False
    if arg == "":
        return not current
    return None


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


class ReplState:
    """Mutable session switches toggled by slash commands."""

    def __init__(self) -> None:
        self.show_tokens = False


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        enabled = _parse_toggle(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_debug_py_trace(enabled)
        print(f"Python traceback: {'on' if enabled else 'off'}")
        return True

    if cmd == "/tokens":
        enabled = _parse_toggle(arg, state.show_tokens)
        if enabled is None:
            print("Usage: /tokens [on|off]", file=sys.stderr)
            return True

        state.show_tokens = enabled
        print(f"Token dump: {'on' if enabled else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def render_entry(text: str, state: ReplState) -> str:
    """Parse one REPL entry and render its statements; raises ParseError."""
    out = []
    if state.show_tokens:
        out.extend(repr(tok) for tok in tokenize(text))

    root = parse(text)
    out.extend(to_sexpr(stat) for stat in statements(root))
    return "\n".join(out)


def repl() -> None:
    """Interactive read-parse-print loop with prompt_toolkit."""
    state = ReplState()

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        # Keep reading while a block, call or paren is still open.
        if _open_depth(buf.text) > 0:
            buf.insert_text("\n    ")
            return
        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=EretriaLexer(),
        completer=_SlashCompleter(),
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("Eretria REPL. Enter declarations to see their AST, Ctrl-D to exit.")
    while True:
        try:
            text = _normalize(session.prompt(">>> "))
        except KeyboardInterrupt:
            continue
        except EOFError:
            break

        if not text.strip():
            continue
        if _handle_slash(text, state):
            continue

        try:
            rendered = render_entry(text, state)
        except ParseError as exc:
            print(f"error: {exc}", file=sys.stderr)
            if debug_py_trace_enabled():
                traceback.print_exc()
            continue

        if rendered:
            print(rendered)
