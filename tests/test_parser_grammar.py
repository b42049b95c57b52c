from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from textwrap import dedent

import pytest

from tests.support.harness import (
    ParseError,
    body_sexpr,
    parse,
    parse_body,
)
from eretria.tree import (
    call_parts,
    fn_body,
    fn_name,
    statements,
    to_sexpr,
    tree_children,
    tree_label,
)

VALID_PROGRAMS = [
    ("assignment", "fn main() a = 1", 1),
    ("call", "fn main() main()", 1),
    ("call-with-args", "fn main() main(1, 2 * 5, 100 * 2 >= 1)", 1),
    ("call-trailing-comma", "fn main() f(1,)", 1),
    ("return", "fn main() return 100", 1),
    ("multi-block", "fn main() {a = 1; b = 2; c = 3}", 1),
    ("empty-block", "fn main() {}", 1),
    ("nested-block", "fn main() {{a}; {b; c}}", 1),
    ("ident", "fn main() hi", 1),
    ("number", "fn main() 23928392", 1),
    ("float", "fn main() 100.2", 1),
    ("negative-number", "fn main() -221111", 1),
    ("negative-float", "fn main() -202.5", 1),
    ("obscure-decimal", "fn main() 0d1234567890", 1),
    ("binary-number", "fn main() 0b10101001", 1),
    ("parentheses", "fn main() (-100)", 1),
    ("two-fns-juxtaposed", "fn a() 1 fn b() 2", 2),
    ("data", 'data[0] = "hi"', 1),
    ("data-empty-string", 'data[7] = ""', 1),
    ("only-semicolons", ";;;", 0),
    ("empty", "", 0),
    ("whitespace", "  \n\t ", 0),
    (
        "statements-no-semi",
        dedent(
            """\
            data[0] = "hi"
            fn main() {2}
            fn main2() 1 + 1
            """
        ),
        3,
    ),
    (
        "statements-semi",
        dedent(
            """\
            ;;;data[0] = "hi";;;;;  ;;
            ;;fn main() {2}; ;;
            ;;;fn main2() 1 + 1;;
            """
        ),
        3,
    ),
]

INVALID_PROGRAMS = [
    ("invalid-assignment", "fn main() 1 = 2"),
    ("incomplete-function", "fn main()"),
    ("invalid-function-name", "fn +"),
    ("no-function-name", "fn"),
    ("params-not-supported", "fn main(a) a"),
    ("missing-rparen", "fn main( 1"),
    ("block-ends-eof", "fn main() {"),
    ("block-ends-next-function", "fn main() {1 fn"),
    ("block-juxtaposition", "fn main() {a b}"),
    ("block-trailing-semicolon", "fn main() {a;}"),
    ("unclosed-paren", "fn main() (1"),
    ("dangling-operator", "fn main() 1 +"),
    ("args-missing-comma", "fn main() f(1 2)"),
    ("args-unclosed", "fn main() f(1,"),
    ("unexpected-token", "ssdjfhksjdggr"),
    ("bare-expression", "1 + 2"),
    ("global-reserved", "global x"),
    ("export-reserved", "export fn main() 1"),
    ("invalid-data-syntax", 'data[word] = "hi"'),
    ("data-missing-string", "data[0] = 5"),
    ("data-missing-assign", 'data[0] "x"'),
    ("data-missing-bracket", 'data 0 = "x"'),
    ("data-float-offset", 'data[1.5] = "x"'),
    ("data-negative-offset", 'data[-1] = "x"'),
    ("string-as-expression", 'fn main() "hi"'),
]


@pytest.mark.parametrize(
    "source, count",
    [pytest.param(source, count, id=name) for name, source, count in VALID_PROGRAMS],
)
def test_valid_programs(source: str, count: int) -> None:
    root = parse(source)
    assert tree_label(root) == "root"
    assert len(statements(root)) == count


@pytest.mark.parametrize(
    "source",
    [pytest.param(source, id=name) for name, source in INVALID_PROGRAMS],
)
def test_invalid_programs(source: str) -> None:
    with pytest.raises(ParseError):
        parse(source)


def test_fn_statement_shape() -> None:
    (stat,) = statements(parse("fn main() 1"))
    assert tree_label(stat) == "fn"
    assert fn_name(stat) == "main"
    params = stat.children[1]
    assert tree_label(params) == "params"
    assert tree_children(params) == []
    assert fn_body(stat).value == 1


def test_statement_order_is_preserved() -> None:
    root = parse('fn b() 2; data[3] = "x"; fn a() 1')
    assert [tree_label(stat) for stat in statements(root)] == ["fn", "data", "fn"]
    assert [to_sexpr(stat) for stat in statements(root)] == [
        "(fn b 2)",
        "(data 3 'x')",
        "(fn a 1)",
    ]


def test_block_contents() -> None:
    body = parse_body("{a = 1; b = 2; c = 3}")
    assert tree_label(body) == "block"
    assert [tree_label(child) for child in tree_children(body)] == ["assign"] * 3
    assert to_sexpr(body) == "(block (= a 1) (= b 2) (= c 3))"


def test_empty_block() -> None:
    body = parse_body("{}")
    assert tree_label(body) == "block"
    assert tree_children(body) == []


def test_chained_calls() -> None:
    assert body_sexpr("f(1)(2, 3)()") == "(call (call (call f 1) 2 3))"

    callee, args = call_parts(parse_body("f(1)(2, 3)"))
    assert [arg.value for arg in args] == [2, 3]
    inner_callee, inner_args = call_parts(callee)
    assert inner_callee.value == "f"
    assert [arg.value for arg in inner_args] == [1]


def test_call_on_parenthesized_expression() -> None:
    assert body_sexpr("(f)(x)") == "(call (paren f) x)"


def test_nested_assignment_is_right_leaning() -> None:
    assert body_sexpr("a = b = 1") == "(= a (= b 1))"


def test_assignment_inside_call_args() -> None:
    assert body_sexpr("f(a = 1, b)") == "(call f (= a 1) b)"


def test_return_and_paren() -> None:
    assert body_sexpr("return 100") == "(return 100)"
    assert body_sexpr("(-100)") == "(paren -100)"


def test_leaf_tokens_carry_positions() -> None:
    root = parse("fn main()\n  foo")
    body = fn_body(statements(root)[0])
    assert body.type == "IDENT"
    assert (body.line, body.column) == (2, 3)
    assert (body.start_pos, body.end_pos) == (12, 15)


def test_parse_is_idempotent() -> None:
    source = dedent(
        """\
        data[0] = "\\xFF"
        fn main() {x = f(1, 2 * 3)(4); return x ** 2 - 1}
        """
    )
    assert parse(source) == parse(source)
    assert [to_sexpr(s) for s in statements(parse(source))] == [
        to_sexpr(s) for s in statements(parse(source))
    ]


def test_independent_parses_in_threads() -> None:
    sources = [f"fn f{i}() {{a = {i}; a * {i} + 1}}" for i in range(16)]
    expected = [to_sexpr(statements(parse(src))[0]) for src in sources]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda src: to_sexpr(statements(parse(src))[0]), sources))

    assert results == expected
