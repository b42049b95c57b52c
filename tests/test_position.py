from __future__ import annotations

import pytest

from eretria.position import LineIndex

LINECOL_CASES = [
    pytest.param(0, (1, 1), id="start"),
    pytest.param(1, (1, 2), id="first-line"),
    pytest.param(2, (1, 3), id="first-newline"),
    pytest.param(3, (2, 1), id="second-line-start"),
    pytest.param(5, (2, 3), id="second-newline"),
    pytest.param(6, (3, 1), id="after-final-newline"),
    pytest.param(100, (3, 1), id="clamped-past-end"),
]


@pytest.mark.parametrize("offset, expected", LINECOL_CASES)
def test_linecol(offset: int, expected: tuple[int, int]) -> None:
    index = LineIndex("ab\ncd\n")
    assert index.linecol(offset) == expected


def test_end_and_line_count() -> None:
    index = LineIndex("ab\ncd\n")
    assert index.end() == (3, 1)
    assert index.line_count == 3


def test_empty_source() -> None:
    index = LineIndex("")
    assert index.end() == (1, 1)
    assert index.line_count == 1


def test_columns_count_characters() -> None:
    index = LineIndex("é€x")
    assert index.linecol(2) == (1, 3)


def test_negative_offset_rejected() -> None:
    with pytest.raises(ValueError):
        LineIndex("abc").linecol(-1)
