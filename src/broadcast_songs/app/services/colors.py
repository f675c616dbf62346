"""Color resolution for song themes.

Turns the free-form color strings stored on songs (an English or German
color name, or a 6/8 digit hex string) into renderable RGBA values.
Resolution either succeeds or returns None; callers choose their own default.
"""

import re
from dataclasses import dataclass
from typing import Optional

from textual.color import Color

_HEX_PATTERN = re.compile(r"[0-9a-f]*")


@dataclass(frozen=True)
class ResolvedColor:
    """An RGBA color with channels normalized to 0.0-1.0.

    Attributes:
        red: Red channel
        green: Green channel
        blue: Blue channel
        alpha: Opacity (1.0 is fully opaque)
    """

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @classmethod
    def from_rgba_bytes(cls, r: int, g: int, b: int, a: int = 255) -> "ResolvedColor":
        """Create a color from 0-255 channel values."""
        return cls(red=r / 255, green=g / 255, blue=b / 255, alpha=a / 255)

    @property
    def rgba_bytes(self) -> tuple[int, int, int, int]:
        """Channels scaled back to 0-255."""
        return (
            round(self.red * 255),
            round(self.green * 255),
            round(self.blue * 255),
            round(self.alpha * 255),
        )

    def to_hex(self) -> str:
        """Format as #RRGGBB, or #RRGGBBAA when not fully opaque."""
        r, g, b, a = self.rgba_bytes
        if a == 255:
            return f"#{r:02X}{g:02X}{b:02X}"
        return f"#{r:02X}{g:02X}{b:02X}{a:02X}"

    def to_textual(self) -> Color:
        """Convert to a Textual color for styling widgets."""
        r, g, b, _ = self.rgba_bytes
        return Color(r, g, b, self.alpha)


RED = ResolvedColor.from_rgba_bytes(0xFF, 0x00, 0x00)
GREEN = ResolvedColor.from_rgba_bytes(0x00, 0x80, 0x00)
BLUE = ResolvedColor.from_rgba_bytes(0x00, 0x00, 0xFF)
BLACK = ResolvedColor.from_rgba_bytes(0x00, 0x00, 0x00)
WHITE = ResolvedColor.from_rgba_bytes(0xFF, 0xFF, 0xFF)
YELLOW = ResolvedColor.from_rgba_bytes(0xFF, 0xFF, 0x00)
ORANGE = ResolvedColor.from_rgba_bytes(0xFF, 0xA5, 0x00)
PURPLE = ResolvedColor.from_rgba_bytes(0x80, 0x00, 0x80)
PINK = ResolvedColor.from_rgba_bytes(0xFF, 0xC0, 0xCB)
GRAY = ResolvedColor.from_rgba_bytes(0x80, 0x80, 0x80)

# English and German spellings, already lowercased
NAMED_COLORS: dict[str, ResolvedColor] = {
    "red": RED,
    "rot": RED,
    "green": GREEN,
    "grün": GREEN,
    "gruen": GREEN,
    "blue": BLUE,
    "blau": BLUE,
    "black": BLACK,
    "schwarz": BLACK,
    "white": WHITE,
    "weiß": WHITE,
    "weiss": WHITE,
    "yellow": YELLOW,
    "gelb": YELLOW,
    "orange": ORANGE,
    "purple": PURPLE,
    "lila": PURPLE,
    "pink": PINK,
    "rosa": PINK,
    "gray": GRAY,
    "grey": GRAY,
    "grau": GRAY,
}


def resolve_color(text: str) -> Optional[ResolvedColor]:
    """Resolve a color name or hex string.

    Args:
        text: Color name (English or German) or hex string with an
            optional leading '#'

    Returns:
        ResolvedColor, or None if the text is not a known name or valid hex
    """
    normalized = text.strip().lower()

    named = NAMED_COLORS.get(normalized)
    if named is not None:
        return named

    digits = normalized[1:] if normalized.startswith("#") else normalized
    if len(digits) not in (6, 8) or not _HEX_PATTERN.fullmatch(digits):
        return None

    value = int(digits, 16)
    if len(digits) == 6:
        return ResolvedColor.from_rgba_bytes(
            (value >> 16) & 0xFF,
            (value >> 8) & 0xFF,
            value & 0xFF,
        )
    return ResolvedColor.from_rgba_bytes(
        (value >> 24) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
    )


def resolve_color_or(text: str, default: ResolvedColor) -> ResolvedColor:
    """Resolve a color, falling back to the given default."""
    resolved = resolve_color(text)
    return resolved if resolved is not None else default
