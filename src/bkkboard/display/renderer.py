"""PIL-based rasterization of dot-matrix text.

Turns text matrices into images (one square per cell at a fixed pitch)
or into plain text for terminals.
"""

import io
import logging
from typing import Sequence

from PIL import Image, ImageDraw

from .dotmatrix import Matrix, matrix_width
from .font import GLYPH_HEIGHT
from .graphics import AMBER, Palette

logger = logging.getLogger(__name__)


class MatrixRenderer:
    """Paints text matrices as lit/unlit dots.

    Usage:
        renderer = MatrixRenderer(pitch=3)
        image = renderer.render(create_dot_matrix_text("7 ÚJPEST 3'"))
    """

    def __init__(
        self,
        pitch: int = 3,
        palette: Palette = AMBER,
        gap: int = 0,
    ) -> None:
        """Initialize renderer.

        Args:
            pitch: Size of one cell in pixels
            palette: Lit, unlit and background colours
            gap: Pixels of background left inside each cell
        """
        if pitch < 1:
            raise ValueError("pitch must be >= 1")
        if not 0 <= gap < pitch:
            raise ValueError("gap must be between 0 and pitch - 1")
        self.pitch = pitch
        self.palette = palette
        self.gap = gap

    def _paint(self, draw: ImageDraw.ImageDraw, matrix: Matrix, top: int) -> None:
        dot = self.pitch - self.gap
        for y, row in enumerate(matrix):
            for x, cell in enumerate(row):
                left = x * self.pitch
                upper = top + y * self.pitch
                draw.rectangle(
                    [(left, upper), (left + dot - 1, upper + dot - 1)],
                    fill=(self.palette.lit if cell else self.palette.unlit).to_tuple(),
                )

    def render(self, matrix: Matrix) -> Image.Image:
        """Render one text matrix.

        A zero-width matrix yields a one pixel wide background strip,
        since PIL cannot allocate empty images.
        """
        width = max(1, matrix_width(matrix) * self.pitch)
        height = GLYPH_HEIGHT * self.pitch
        image = Image.new("RGB", (width, height), self.palette.background.to_tuple())
        self._paint(ImageDraw.Draw(image), matrix, 0)
        return image

    def render_lines(self, matrices: Sequence[Matrix], line_gap: int = 2) -> Image.Image:
        """Stack several text matrices, left-aligned, ``line_gap`` cells apart."""
        if not matrices:
            return self.render([[] for _ in range(GLYPH_HEIGHT)])

        width = max(1, max(matrix_width(m) for m in matrices) * self.pitch)
        line_height = (GLYPH_HEIGHT + line_gap) * self.pitch
        height = len(matrices) * line_height - line_gap * self.pitch
        image = Image.new("RGB", (width, height), self.palette.background.to_tuple())
        draw = ImageDraw.Draw(image)
        for index, matrix in enumerate(matrices):
            self._paint(draw, matrix, index * line_height)
        return image


def matrix_to_text(matrix: Matrix, lit: str = "█", unlit: str = "·") -> str:
    """Render a text matrix as one line of characters per row."""
    return "\n".join("".join(lit if cell else unlit for cell in row) for row in matrix)


def image_to_png(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
