"""Dot-matrix display subsystem.

Provides:
- The 5x7 Hungarian-aware glyph font
- Text to matrix composition
- PIL and terminal rasterization
"""

from .font import GLYPHS, BLANK_GLYPH, get_glyph, normalize_text
from .dotmatrix import Matrix, compose_matrix, create_dot_matrix_text, matrix_width
from .graphics import AMBER, Color, Palette
from .renderer import MatrixRenderer, matrix_to_text, image_to_png

__all__ = [
    "GLYPHS",
    "BLANK_GLYPH",
    "get_glyph",
    "normalize_text",
    "Matrix",
    "compose_matrix",
    "create_dot_matrix_text",
    "matrix_width",
    "AMBER",
    "Color",
    "Palette",
    "MatrixRenderer",
    "matrix_to_text",
    "image_to_png",
]
