"""Image utilities for Apple Wallet passes.

The packager ships a fixed set of icon and logo files from the asset
directory. This module renders placeholder versions of those files so a
fresh deployment has something to ship.
"""

import io
from pathlib import Path

import structlog
from PIL import Image, ImageDraw, ImageFont

from walletpass.apple.formatting import DEFAULT_BACKGROUND_COLOR, DEFAULT_FOREGROUND_COLOR, parse_hex_color

logger = structlog.get_logger(__name__)


# Image size definitions (Apple requirements)
ICON_SIZES: dict[str, tuple[int, int]] = {
    "icon.png": (29, 29),
    "icon@2x.png": (58, 58),
    "icon@3x.png": (87, 87),
}

LOGO_SIZES: dict[str, tuple[int, int]] = {
    "logo.png": (160, 50),
    "logo@2x.png": (320, 100),
    "logo@3x.png": (480, 150),
}

# Files the packager looks for, in archive order
ASSET_FILES: tuple[str, ...] = (*ICON_SIZES, *LOGO_SIZES)


def _load_font(font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a font with fallbacks for different platforms.

    Args:
        font_size: Desired font size in pixels.

    Returns:
        A PIL font object.
    """
    font_paths = [
        "/System/Library/Fonts/Helvetica.ttc",  # macOS
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",  # Linux
    ]

    for path in font_paths:
        try:
            return ImageFont.truetype(path, font_size)
        except (OSError, IOError):
            continue

    return ImageFont.load_default()


def generate_text_image(
    size: tuple[int, int],
    text: str,
    bg_color: tuple[int, int, int],
    text_color: tuple[int, int, int],
    font_ratio: float,
) -> bytes:
    """Render centered text on a rounded rectangle.

    Args:
        size: (width, height) tuple.
        text: Text to display.
        bg_color: Background color as (r, g, b).
        text_color: Text color as (r, g, b).
        font_ratio: Font size as a fraction of the image height.

    Returns:
        PNG image as bytes.
    """
    img = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    draw.rounded_rectangle(
        [0, 0, size[0] - 1, size[1] - 1],
        radius=max(min(size) // 8, 1),
        fill=bg_color + (255,),
    )

    font = _load_font(max(int(size[1] * font_ratio), 1))

    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    text_height = bbox[3] - bbox[1]
    text_x = (size[0] - text_width) // 2 - bbox[0]
    text_y = (size[1] - text_height) // 2 - bbox[1]
    draw.text((text_x, text_y), text, fill=text_color + (255,), font=font)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_placeholder_assets(
    icon_text: str = "Y",
    logo_text: str = "YEETCARD",
    background: str = DEFAULT_BACKGROUND_COLOR,
    foreground: str = DEFAULT_FOREGROUND_COLOR,
) -> dict[str, bytes]:
    """Render the full icon and logo set.

    Args:
        icon_text: Text drawn on the square icons.
        logo_text: Wordmark drawn on the logos.
        background: Hex background color.
        foreground: Hex text color.

    Returns:
        Dictionary mapping asset filename to PNG bytes.
    """
    bg_color = parse_hex_color(background)
    text_color = parse_hex_color(foreground)

    assets: dict[str, bytes] = {}
    for filename, size in ICON_SIZES.items():
        assets[filename] = generate_text_image(size, icon_text, bg_color, text_color, font_ratio=0.5)
    for filename, size in LOGO_SIZES.items():
        assets[filename] = generate_text_image(size, logo_text, bg_color, text_color, font_ratio=0.45)
    return assets


def write_placeholder_assets(asset_dir: str | Path, **kwargs: str) -> list[Path]:
    """Write placeholder assets into ``asset_dir``, creating it if needed.

    Returns:
        The paths written, in ``ASSET_FILES`` order.
    """
    directory = Path(asset_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for filename, content in generate_placeholder_assets(**kwargs).items():
        path = directory / filename
        path.write_bytes(content)
        written.append(path)
        logger.info("asset_generated", filename=filename, size=len(content))
    return written
