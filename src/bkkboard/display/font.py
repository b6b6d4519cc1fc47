"""5x7 dot-matrix font with Hungarian accented capitals.

Glyphs are drawn as seven strings of five cells, ``#`` lit and ``.`` unlit,
and parsed once at import into immutable tuples of 0/1 ints.
"""

from types import MappingProxyType
from typing import Mapping

GLYPH_WIDTH = 5
GLYPH_HEIGHT = 7

Glyph = tuple[tuple[int, ...], ...]

_GLYPH_ROWS: dict[str, tuple[str, ...]] = {
    "0": (
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "1": (
        "..#..",
        ".##..",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        ".###.",
    ),
    "2": (
        ".###.",
        "#...#",
        "...#.",
        "..#..",
        ".#...",
        "#....",
        "#####",
    ),
    "3": (
        ".###.",
        "#...#",
        "....#",
        "..##.",
        "....#",
        "#...#",
        ".###.",
    ),
    "4": (
        "...#.",
        "..##.",
        ".#.#.",
        "#..#.",
        "#####",
        "...#.",
        "...#.",
    ),
    "5": (
        "#####",
        "#....",
        "####.",
        "....#",
        "....#",
        "#...#",
        ".###.",
    ),
    "6": (
        "..##.",
        ".#...",
        "#....",
        "####.",
        "#...#",
        "#...#",
        ".###.",
    ),
    "7": (
        "#####",
        "....#",
        "...#.",
        "..#..",
        ".#...",
        ".#...",
        ".#...",
    ),
    "8": (
        ".###.",
        "#...#",
        "#...#",
        ".###.",
        "#...#",
        "#...#",
        ".###.",
    ),
    "9": (
        ".###.",
        "#...#",
        "#...#",
        ".####",
        "....#",
        "...#.",
        ".##..",
    ),
    "A": (
        ".###.",
        "#...#",
        "#...#",
        "#####",
        "#...#",
        "#...#",
        "#...#",
    ),
    "B": (
        "####.",
        "#...#",
        "#...#",
        "####.",
        "#...#",
        "#...#",
        "####.",
    ),
    "C": (
        ".###.",
        "#...#",
        "#....",
        "#....",
        "#....",
        "#...#",
        ".###.",
    ),
    "D": (
        "####.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "####.",
    ),
    "E": (
        "#####",
        "#....",
        "#....",
        "####.",
        "#....",
        "#....",
        "#####",
    ),
    "F": (
        "#####",
        "#....",
        "#....",
        "####.",
        "#....",
        "#....",
        "#....",
    ),
    "G": (
        ".###.",
        "#...#",
        "#....",
        "#.###",
        "#...#",
        "#...#",
        ".###.",
    ),
    "H": (
        "#...#",
        "#...#",
        "#...#",
        "#####",
        "#...#",
        "#...#",
        "#...#",
    ),
    "I": (
        ".###.",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        ".###.",
    ),
    "J": (
        "..###",
        "...#.",
        "...#.",
        "...#.",
        "...#.",
        "#..#.",
        ".##..",
    ),
    "K": (
        "#...#",
        "#..#.",
        "#.#..",
        "##...",
        "#.#..",
        "#..#.",
        "#...#",
    ),
    "L": (
        "#....",
        "#....",
        "#....",
        "#....",
        "#....",
        "#....",
        "#####",
    ),
    "M": (
        "#...#",
        "##.##",
        "#.#.#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
    ),
    "N": (
        "#...#",
        "##..#",
        "#.#.#",
        "#..##",
        "#...#",
        "#...#",
        "#...#",
    ),
    "O": (
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "P": (
        "####.",
        "#...#",
        "#...#",
        "####.",
        "#....",
        "#....",
        "#....",
    ),
    "Q": (
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#.#.#",
        "#..#.",
        ".##.#",
    ),
    "R": (
        "####.",
        "#...#",
        "#...#",
        "####.",
        "#.#..",
        "#..#.",
        "#...#",
    ),
    "S": (
        ".####",
        "#....",
        "#....",
        ".###.",
        "....#",
        "....#",
        "####.",
    ),
    "T": (
        "#####",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
    ),
    "U": (
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "V": (
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".#.#.",
        ".#.#.",
        "..#..",
    ),
    "W": (
        "#...#",
        "#...#",
        "#...#",
        "#.#.#",
        "#.#.#",
        "##.##",
        "#...#",
    ),
    "X": (
        "#...#",
        ".#.#.",
        "..#..",
        "..#..",
        "..#..",
        ".#.#.",
        "#...#",
    ),
    "Y": (
        "#...#",
        ".#.#.",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
    ),
    "Z": (
        "#####",
        "....#",
        "...#.",
        "..#..",
        ".#...",
        "#....",
        "#####",
    ),
    " ": (
        ".....",
        ".....",
        ".....",
        ".....",
        ".....",
        ".....",
        ".....",
    ),
    ":": (
        ".....",
        "..#..",
        ".....",
        ".....",
        ".....",
        "..#..",
        ".....",
    ),
    "'": (
        "..#..",
        "..#..",
        ".....",
        ".....",
        ".....",
        ".....",
        ".....",
    ),
    "Á": (
        "..#..",
        ".###.",
        "#...#",
        "#...#",
        "#####",
        "#...#",
        "#...#",
    ),
    "É": (
        "..#..",
        "#####",
        "#....",
        "####.",
        "#....",
        "#....",
        "#####",
    ),
    "Í": (
        "..#..",
        ".###.",
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        ".###.",
    ),
    "Ó": (
        "..#..",
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "Ö": (
        ".#.#.",
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "Ő": (
        "#...#",
        ".###.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "Ú": (
        "..#..",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "Ü": (
        ".#.#.",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
    "Ű": (
        ".#..#",
        "#..#.",
        ".....",
        "#...#",
        "#...#",
        "#...#",
        ".###.",
    ),
}


def _parse(rows: tuple[str, ...]) -> Glyph:
    if len(rows) != GLYPH_HEIGHT or any(len(row) != GLYPH_WIDTH for row in rows):
        raise ValueError(f"Glyph must be {GLYPH_WIDTH}x{GLYPH_HEIGHT}: {rows!r}")
    return tuple(tuple(1 if cell == "#" else 0 for cell in row) for row in rows)


GLYPHS: Mapping[str, Glyph] = MappingProxyType(
    {char: _parse(rows) for char, rows in _GLYPH_ROWS.items()}
)

BLANK_GLYPH: Glyph = GLYPHS[" "]

# Lowercase Hungarian vowels mapped explicitly before generic uppercasing.
_HUNGARIAN_UPPER = str.maketrans("áéíóöőúüű", "ÁÉÍÓÖŐÚÜŰ")


def normalize_text(text: str) -> str:
    """Uppercase ``text`` the way the board font expects.

    Hungarian accented vowels are mapped to their accented capitals first.
    Characters whose uppercase form is longer than one character (``ß``)
    are kept as-is so the result has as many characters as the input.
    """
    text = text.translate(_HUNGARIAN_UPPER)
    out = []
    for char in text:
        upper = char.upper()
        out.append(upper if len(upper) == 1 else char)
    return "".join(out)


def get_glyph(char: str) -> Glyph:
    """Return the glyph for one normalized character, blank if unknown."""
    return GLYPHS.get(char, BLANK_GLYPH)
