"""Colours for the dot-matrix board."""

from dataclasses import dataclass

# Brightness of an unlit dot relative to a lit one.
UNLIT_LEVEL = 0.165


@dataclass(frozen=True)
class Color:
    """8-bit RGB colour; channels are clamped to 0-255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in ("r", "g", "b"):
            object.__setattr__(self, channel, max(0, min(255, int(getattr(self, channel)))))

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse ``#RRGGBB`` or ``#RGB`` (the ``#`` is optional)."""
        digits = value.lstrip("#")
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) != 6:
            raise ValueError(f"Invalid hex colour: {value}")
        return cls(*(int(digits[i : i + 2], 16) for i in (0, 2, 4)))

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def dim(self, factor: float) -> "Color":
        factor = max(0.0, min(1.0, factor))
        return Color(int(self.r * factor), int(self.g * factor), int(self.b * factor))


@dataclass(frozen=True)
class Palette:
    """Colours of one board: lit dots, unlit dots and the gaps around them."""

    lit: Color
    unlit: Color
    background: Color

    @classmethod
    def from_hex(
        cls,
        lit: str,
        unlit: str | None = None,
        background: str = "#0A0A0A",
    ) -> "Palette":
        """Build a palette from config strings.

        Without ``unlit`` the unlit dots are the lit colour dimmed to
        ``UNLIT_LEVEL``.
        """
        lit_color = Color.from_hex(lit)
        unlit_color = Color.from_hex(unlit) if unlit else lit_color.dim(UNLIT_LEVEL)
        return cls(lit_color, unlit_color, Color.from_hex(background))


AMBER = Palette(lit=Color(255, 176, 0), unlit=Color(42, 30, 0), background=Color(10, 10, 10))
