"""Shared helpers for working with the Tree/Token nodes the parser produces.

Node shapes:
    root    Tree('root', [stat...])
    fn      Tree('fn', [IDENT, Tree('params', []), body])
    data    Tree('data', [INTEGER, STRING])
    paren   Tree('paren', [expr])
    block   Tree('block', [expr...])
    assign  Tree('assign', [IDENT, expr])
    binop   Tree('binop', [lhs, OP, rhs])
    call    Tree('call', [callee, Tree('args', [expr...])])
    return  Tree('return', [expr])
Leaves are Tokens typed IDENT, INTEGER, FLOAT, STRING or OP; literal tokens
keep their decoded Python value in `.value`.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Set, Tuple, TypeGuard, Union

from lark import Tree, Token
from typing_extensions import TypeAlias


Node: TypeAlias = Union[Tree, Token]


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def find_tree_by_label(node: Node, labels: Iterable[str]) -> Optional[Tree]:
    lookup: Set[str] = set(labels)

    if is_tree(node) and tree_label(node) in lookup:
        return node

    for child in tree_children(node):
        found = find_tree_by_label(child, lookup)
        if found is not None:
            return found

    return None

def _require(node: Node, label: str) -> Tree:
    if tree_label(node) != label:
        raise ValueError(f"expected {label!r} node, got {tree_label(node) or node!r}")
    return node


# ============================================================================
# Statement accessors
# ============================================================================

def statements(root: Tree) -> List[Tree]:
    return tree_children(_require(root, 'root'))

def fn_name(stat: Tree) -> str:
    return _require(stat, 'fn').children[0].value

def fn_body(stat: Tree) -> Node:
    return _require(stat, 'fn').children[2]

def data_offset(stat: Tree) -> int:
    return _require(stat, 'data').children[0].value

def data_value(stat: Tree) -> str:
    return _require(stat, 'data').children[1].value


# ============================================================================
# Expression accessors
# ============================================================================

def binop_parts(node: Tree) -> Tuple[Node, str, Node]:
    lhs, op, rhs = _require(node, 'binop').children
    return lhs, op.value, rhs

def call_parts(node: Tree) -> Tuple[Node, List[Node]]:
    callee, args = _require(node, 'call').children
    return callee, list(args.children)


# ============================================================================
# Dump
# ============================================================================

def to_sexpr(node: Node) -> str:
    """Render a node as a compact s-expression, e.g. `(+ 1 (* 2 3))`."""
    if is_token(node):
        if node.type == 'STRING':
            return repr(node.value)
        if node.type == 'FLOAT':
            return repr(node.value)
        return str(node.value)

    label = node.data
    children = node.children

    match label:
        case 'binop':
            lhs, op, rhs = binop_parts(node)
            parts = [op, to_sexpr(lhs), to_sexpr(rhs)]
        case 'assign':
            parts = ['=', to_sexpr(children[0]), to_sexpr(children[1])]
        case 'call':
            callee, args = call_parts(node)
            parts = ['call', to_sexpr(callee)] + [to_sexpr(arg) for arg in args]
        case 'fn':
            parts = ['fn', fn_name(node), to_sexpr(fn_body(node))]
        case _:
            parts = [label] + [to_sexpr(child) for child in children]

    return '(' + ' '.join(parts) + ')'
