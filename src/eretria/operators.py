"""Binary operator table and binding strengths."""

from typing import Dict, Optional

# Longest symbols first so the lexer never splits '**' or '==' into prefixes.
OPERATORS = [
    # Two-character operators
    '==',
    '!=',
    '>=',
    '<=',
    '>>',
    '<<',
    '**',

    # Single-character operators
    '^',
    '|',
    '&',
    '>',
    '<',
    '+',
    '-',
    '/',
    '*',
]

# Lowest to highest
PRECEDENCE: Dict[str, int] = {
    '|': 0,
    '^': 1,
    '&': 2,
    '==': 3,
    '!=': 3,
    '>': 4,
    '<': 4,
    '>=': 4,
    '<=': 4,
    '>>': 5,
    '<<': 5,
    '+': 6,
    '-': 6,
    '*': 7,
    '/': 7,
    '**': 8,
}


def precedence(op: str) -> Optional[int]:
    """Binding strength of *op*, or None for symbols outside the operator set."""
    return PRECEDENCE.get(op)
