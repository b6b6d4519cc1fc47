"""Text to dot-matrix composition.

A text matrix is seven rows of 0/1 cells: each character contributes its
5-column glyph, with one blank column between neighbouring characters.
"""

from .font import GLYPH_HEIGHT, GLYPH_WIDTH, get_glyph, normalize_text

Matrix = list[list[int]]

# Gap between consecutive glyphs, in columns.
CHAR_SPACING = 1


def compose_matrix(normalized: str) -> Matrix:
    """Compose an already-normalized string into a text matrix.

    Unknown characters take up a blank glyph's width. An empty string gives
    seven empty rows.
    """
    glyphs = [get_glyph(char) for char in normalized]
    matrix: Matrix = []
    for row in range(GLYPH_HEIGHT):
        cells: list[int] = []
        for index, glyph in enumerate(glyphs):
            if index:
                cells.extend([0] * CHAR_SPACING)
            cells.extend(glyph[row])
        matrix.append(cells)
    return matrix


def create_dot_matrix_text(text: str) -> Matrix:
    """Normalize ``text`` and compose it into a text matrix."""
    return compose_matrix(normalize_text(text))


def text_width(char_count: int) -> int:
    """Columns taken by ``char_count`` characters."""
    if char_count <= 0:
        return 0
    return char_count * GLYPH_WIDTH + (char_count - 1) * CHAR_SPACING


def matrix_width(matrix: Matrix) -> int:
    return len(matrix[0]) if matrix else 0
