"""Color formatting for Apple Wallet passes.

pass.json expects colors as CSS-style "rgb(r, g, b)" strings, while callers
supply 6-digit hex colors. This module converts between the two.
"""

import re
from dataclasses import dataclass

from walletpass.exceptions import InvalidColorFormat

HEX_COLOR_PATTERN = re.compile(r"[0-9A-Fa-f]{6}")


@dataclass(frozen=True)
class PassColors:
    """Colors for an Apple Wallet pass in RGB format."""

    foreground: str  # Format: "rgb(r, g, b)"
    background: str
    label: str


# Hex defaults applied when a request omits a color
DEFAULT_FOREGROUND_COLOR = "#FFFFFF"
DEFAULT_BACKGROUND_COLOR = "#1A1A2E"
DEFAULT_LABEL_COLOR = "#CCCCCC"


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """Parse a hex color into its RGB components.

    Args:
        value: Color like "#1A1A2E" or "1a1a2e".

    Returns:
        Tuple of (r, g, b) integers in [0, 255].

    Raises:
        InvalidColorFormat: If the value is not exactly 6 hex digits after
            an optional leading "#".
    """
    if not isinstance(value, str):
        raise InvalidColorFormat(f"Invalid hex color: {value!r}")

    digits = value[1:] if value.startswith("#") else value
    if not HEX_COLOR_PATTERN.fullmatch(digits):
        raise InvalidColorFormat(f"Invalid hex color: {value!r}")

    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def hex_to_rgb(value: str) -> str:
    """Convert a hex color to the "rgb(r, g, b)" form used in pass.json.

    Args:
        value: Color like "#FFFFFF" or "ffffff".

    Returns:
        Color string like "rgb(255, 255, 255)".

    Raises:
        InvalidColorFormat: If the value is not a 6-digit hex color.
    """
    r, g, b = parse_hex_color(value)
    return f"rgb({r}, {g}, {b})"


def resolve_colors(
    foreground: str | None = None,
    background: str | None = None,
    label: str | None = None,
) -> PassColors:
    """Apply defaults to omitted colors and convert all three to RGB strings."""
    return PassColors(
        foreground=hex_to_rgb(DEFAULT_FOREGROUND_COLOR if foreground is None else foreground),
        background=hex_to_rgb(DEFAULT_BACKGROUND_COLOR if background is None else background),
        label=hex_to_rgb(DEFAULT_LABEL_COLOR if label is None else label),
    )
