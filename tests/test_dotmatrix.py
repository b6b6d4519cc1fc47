"""Tests for text matrix composition."""

import pytest

from bkkboard.display.dotmatrix import (
    compose_matrix,
    create_dot_matrix_text,
    matrix_width,
    text_width,
)
from bkkboard.display.font import get_glyph


@pytest.mark.parametrize("text", ["A", "AB", "7 ÚJPEST 3'", "HELLO WORLD", "🚌🚌"])
def test_width_follows_character_count(text):
    matrix = create_dot_matrix_text(text)
    assert len(matrix) == 7
    for row in matrix:
        assert len(row) == 5 * len(text) + (len(text) - 1)
    assert matrix_width(matrix) == text_width(len(text))


def test_empty_text_gives_seven_empty_rows():
    assert create_dot_matrix_text("") == [[], [], [], [], [], [], []]
    assert matrix_width(compose_matrix("")) == 0
    assert text_width(0) == 0


def test_lowercase_accent_renders_capital_glyph():
    assert create_dot_matrix_text("á") == [
        [0, 0, 1, 0, 0],
        [0, 1, 1, 1, 0],
        [1, 0, 0, 0, 1],
        [1, 0, 0, 0, 1],
        [1, 1, 1, 1, 1],
        [1, 0, 0, 0, 1],
        [1, 0, 0, 0, 1],
    ]
    assert create_dot_matrix_text("ő") == create_dot_matrix_text("Ő")


def test_trailing_space_adds_blank_glyph():
    matrix = create_dot_matrix_text("1 ")
    assert matrix_width(matrix) == 11
    assert matrix[0] == [0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0]
    assert all(row[5:] == [0] * 6 for row in matrix)


def test_glyphs_are_separated_by_one_blank_column():
    matrix = create_dot_matrix_text("AB")
    for index, row in enumerate(matrix):
        assert row[:5] == list(get_glyph("A")[index])
        assert row[5] == 0
        assert row[6:] == list(get_glyph("B")[index])


def test_unknown_characters_are_blank():
    matrix = create_dot_matrix_text("🚌")
    assert matrix == [[0] * 5 for _ in range(7)]


def test_case_does_not_matter():
    assert create_dot_matrix_text("deák tér") == create_dot_matrix_text("DEÁK TÉR")


def test_rows_are_independent_lists():
    matrix = create_dot_matrix_text("A")
    matrix[0][0] = 9
    assert create_dot_matrix_text("A")[0][0] == 0
