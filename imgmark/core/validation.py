"""
Input Validation
================
Checks that run before anything reaches the compositor.

- validate_image: pixel-format preconditions for a decoded Pillow image
- parse_*: range and format checks for user-supplied parameters

All checks are pure. They either return the (parsed) value or raise the
matching WatermarkError.
"""

import re
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from .errors import (
    InvalidBitsPerPixelError,
    InvalidColorComponentsError,
    InvalidFileNameError,
    InvalidPlacementMethodError,
    InvalidPositionError,
    InvalidTransparencyColorError,
    NotANumberError,
    OutOfRangePercentageError,
)
from .models import RGB, PlacementMethod

# Pillow mode -> (color components, bits per pixel)
MODE_FORMATS = {
    "1": (1, 1),
    "L": (1, 8),
    "LA": (1, 16),
    "La": (1, 16),
    "P": (3, 8),
    "PA": (3, 16),
    "I": (1, 32),
    "F": (1, 32),
    "RGB": (3, 24),
    "RGBA": (3, 32),
    "RGBa": (3, 32),
    "RGBX": (3, 32),
    "CMYK": (4, 32),
    "YCbCr": (3, 24),
    "LAB": (3, 24),
    "HSV": (3, 24),
}

SUPPORTED_BITS_PER_PIXEL = (24, 32)
SUPPORTED_EXTENSIONS = ("jpg", "png")

_COLOR_PATTERN = re.compile(r"[0-9]+ [0-9]+ [0-9]+")
_POSITION_PATTERN = re.compile(r"-?[0-9]+ -?[0-9]+")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FILENAME_PATTERN = re.compile(r".+\.(jpg|png)")
_WIDE_RAWMODE_PATTERN = re.compile(r";(16|32)")

# Image.info key holding the bit depth the decoder read from the file
SOURCE_BITS_KEY = "source_bits_per_pixel"


def source_bits_per_pixel(image: Image.Image) -> Optional[int]:
    """
    Bits per pixel as stored in the file, read from the decoder tiles.

    Pillow narrows 16-bit-per-channel RGB(A) data to 8 bits while keeping the
    RGB or RGBA mode, so the mode alone cannot tell a 48-bit PNG from a
    24-bit one. Must be called before image.load() clears the tiles.
    Returns None when the tiles carry no wide raw mode.
    """
    for tile in getattr(image, "tile", None) or ():
        args = tile[3]
        if isinstance(args, tuple) and args:
            args = args[0]
        if not isinstance(args, str):
            continue
        match = _WIDE_RAWMODE_PATTERN.search(args)
        if match:
            return int(match.group(1)) * len(image.getbands())
    return None


def image_format(image: Image.Image) -> Tuple[int, int]:
    """Return (color components, bits per pixel) for a Pillow image."""
    mode = image.mode
    source_bits = image.info.get(SOURCE_BITS_KEY)
    if source_bits is not None and mode in MODE_FORMATS:
        return MODE_FORMATS[mode][0], source_bits
    if mode in MODE_FORMATS:
        return MODE_FORMATS[mode]
    if mode.startswith("I;16"):
        return 1, 16
    bands = image.getbands()
    color_bands = [band for band in bands if band not in ("A", "a")]
    return len(color_bands), 8 * len(bands)


def validate_image(image: Image.Image, role: str = "image") -> Image.Image:
    """
    Check that an image is 3-component RGB with 24 or 32 bits per pixel.

    Args:
        image: Decoded Pillow image.
        role: "image" or "watermark", used in error messages only.

    Returns:
        The same image, unchanged.

    Raises:
        InvalidColorComponentsError: Not exactly 3 color components.
        InvalidBitsPerPixelError: Bit depth is not 24 or 32.
    """
    components, bits = image_format(image)
    if components != 3:
        raise InvalidColorComponentsError(role)
    if bits not in SUPPORTED_BITS_PER_PIXEL:
        raise InvalidBitsPerPixelError(role)
    return image


def parse_percentage(value: Union[str, int]) -> int:
    """Parse the watermark weight, an integer in [0, 100]."""
    if isinstance(value, bool):
        raise NotANumberError()
    if isinstance(value, int):
        percentage = value
    else:
        if not _INTEGER_PATTERN.fullmatch(str(value)):
            raise NotANumberError()
        percentage = int(value)
    if not 0 <= percentage <= 100:
        raise OutOfRangePercentageError()
    return percentage


def parse_placement_method(value: Union[str, PlacementMethod]) -> PlacementMethod:
    if isinstance(value, PlacementMethod):
        return value
    try:
        return PlacementMethod(value)
    except ValueError:
        raise InvalidPlacementMethodError() from None


def parse_position(value: Union[str, Tuple[int, int]], max_x: int, max_y: int) -> Tuple[int, int]:
    """
    Parse a single-placement offset "x y" and check 0 <= x <= max_x, 0 <= y <= max_y.

    max_x and max_y are base.width - watermark.width and
    base.height - watermark.height.
    """
    if isinstance(value, str):
        if not _POSITION_PATTERN.fullmatch(value):
            raise InvalidPositionError()
        x, y = (int(part) for part in value.split(" "))
    else:
        try:
            x, y = value
        except (TypeError, ValueError):
            raise InvalidPositionError() from None
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (x, y)):
            raise InvalidPositionError()
    if not (0 <= x <= max_x and 0 <= y <= max_y):
        raise InvalidPositionError(out_of_range=True)
    return x, y


def parse_transparency_color(value: Union[str, Tuple[int, int, int]]) -> RGB:
    """Parse "R G B" (or a 3-tuple) with every component in [0, 255]."""
    if isinstance(value, str):
        if not _COLOR_PATTERN.fullmatch(value):
            raise InvalidTransparencyColorError()
        components = [int(part) for part in value.split(" ")]
    else:
        try:
            components = list(value)
        except TypeError:
            raise InvalidTransparencyColorError() from None
        if len(components) != 3 or not all(
                isinstance(c, int) and not isinstance(c, bool) for c in components
        ):
            raise InvalidTransparencyColorError()
    if any(not 0 <= c <= 255 for c in components):
        raise InvalidTransparencyColorError()
    red, green, blue = components
    return red, green, blue


def parse_output_filename(value: Union[str, Path]) -> Path:
    """Accept only filenames ending in .jpg or .png."""
    if not _FILENAME_PATTERN.fullmatch(str(value)):
        raise InvalidFileNameError()
    return Path(value)


def output_format(path: Union[str, Path]) -> str:
    """Format hint ("jpg" or "png") for an output path."""
    return str(parse_output_filename(path))[-3:]
