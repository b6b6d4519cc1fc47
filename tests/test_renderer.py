"""Tests for matrix rasterization."""

import io

import pytest
from PIL import Image

from bkkboard.display import create_dot_matrix_text
from bkkboard.display.graphics import AMBER, Color, Palette
from bkkboard.display.renderer import MatrixRenderer, image_to_png, matrix_to_text


def test_render_size_follows_pitch():
    matrix = create_dot_matrix_text("AB")
    image = MatrixRenderer(pitch=4).render(matrix)
    assert image.size == (11 * 4, 7 * 4)
    assert image.mode == "RGB"


GREEN = Color(80, 255, 80)
BLACK = Color(0, 0, 0)
RED = Color(255, 60, 60)


def test_lit_and_unlit_cells_use_their_colours():
    renderer = MatrixRenderer(pitch=2, palette=Palette(GREEN, BLACK, BLACK))
    image = renderer.render(create_dot_matrix_text("1"))
    # Row 0 of "1" is ..#..
    assert image.getpixel((0, 0)) == BLACK.to_tuple()
    assert image.getpixel((2 * 2, 0)) == GREEN.to_tuple()
    assert image.getpixel((2 * 2 + 1, 1)) == GREEN.to_tuple()


def test_gap_leaves_background_between_dots():
    renderer = MatrixRenderer(pitch=3, gap=1, palette=Palette(RED, RED, BLACK))
    image = renderer.render([[1]] * 7)
    assert image.getpixel((0, 0)) == RED.to_tuple()
    assert image.getpixel((2, 0)) == BLACK.to_tuple()
    assert image.getpixel((0, 2)) == BLACK.to_tuple()


def test_empty_matrix_renders_one_pixel_strip():
    image = MatrixRenderer(pitch=3).render(create_dot_matrix_text(""))
    assert image.size == (1, 21)
    assert image.getpixel((0, 0)) == AMBER.background.to_tuple()


def test_render_lines_stacks_matrices():
    renderer = MatrixRenderer(pitch=2)
    lines = [create_dot_matrix_text("AB"), create_dot_matrix_text("A")]
    image = renderer.render_lines(lines, line_gap=2)
    assert image.size == (11 * 2, (2 * 9 - 2) * 2)


def test_render_lines_without_lines():
    image = MatrixRenderer(pitch=2).render_lines([])
    assert image.size == (1, 14)


@pytest.mark.parametrize("pitch, gap", [(0, 0), (2, 2), (3, -1)])
def test_invalid_geometry_is_rejected(pitch, gap):
    with pytest.raises(ValueError):
        MatrixRenderer(pitch=pitch, gap=gap)


def test_matrix_to_text():
    text = matrix_to_text(create_dot_matrix_text("1"), lit="#", unlit=".")
    rows = text.split("\n")
    assert len(rows) == 7
    assert rows[0] == "..#.."
    assert all(len(row) == 5 for row in rows)


def test_image_to_png_round_trips_through_pillow():
    image = MatrixRenderer().render(create_dot_matrix_text("MOST"))
    data = image_to_png(image)
    assert data.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(data)).size == image.size


def test_color_helpers():
    color = Color.from_hex("#FFB000")
    assert color == AMBER.lit
    assert Color.from_hex("fb0").to_hex() == "#ffbb00"
    assert color.dim(0.5) == Color(127, 88, 0)
    assert Color(300, -5, 10).to_tuple() == (255, 0, 10)
    with pytest.raises(ValueError):
        Color.from_hex("#12345")


def test_palette_from_hex():
    palette = Palette.from_hex("#FFB000", "#2A1E00")
    assert palette == AMBER
    derived = Palette.from_hex("#FFB000")
    assert derived.unlit == Color(42, 29, 0)
    assert derived.background == Color(10, 10, 10)
