"""
Watermark Errors
================
Every failure the compositing engine can report.

Each error carries the human-readable message shown to the user. Errors are
never recovered inside the engine; they abort the whole run and surface at
the outermost boundary (see main.py).
"""

from typing import Optional


class WatermarkError(Exception):
    """Base class for all watermarking failures."""

    default_message = "The watermark could not be applied."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ImageNotFoundError(WatermarkError, FileNotFoundError):
    """The image file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The file {path} doesn't exist.")


class UnreadableImageError(WatermarkError):
    """The file exists but is not a decodable image."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"The file {path} isn't a readable image.")


class InvalidColorComponentsError(WatermarkError):
    """The image does not have exactly 3 color components."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"The number of {role} color components isn't 3.")


class InvalidBitsPerPixelError(WatermarkError):
    """The image is neither 24-bit nor 32-bit."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"The {role} isn't 24 or 32-bit.")


class InvalidWatermarkDimensionsError(WatermarkError):
    default_message = "The watermark's dimensions are larger."


class InvalidTransparencyColorError(WatermarkError):
    default_message = "The transparency color input is invalid."


class InvalidWatermarkPixelError(WatermarkError):
    """A watermark pixel is partially transparent under alpha blending."""

    def __init__(self, alpha: Optional[int] = None):
        self.alpha = alpha
        message = "The watermark image contains partially transparent pixels."
        if alpha is not None:
            message = f"{message[:-1]} (alpha {alpha})."
        super().__init__(message)


class InvalidPlacementMethodError(WatermarkError):
    default_message = "The position method input is invalid."


class InvalidPositionError(WatermarkError):
    """The single-placement offset is malformed or out of range."""

    MALFORMED = "The position input is invalid."
    OUT_OF_RANGE = "The position input is out of range."

    def __init__(self, out_of_range: bool = False):
        self.out_of_range = out_of_range
        super().__init__(self.OUT_OF_RANGE if out_of_range else self.MALFORMED)


class OutOfRangePercentageError(WatermarkError):
    default_message = "The transparency percentage is out of range."


class NotANumberError(WatermarkError, ValueError):
    default_message = "The transparency percentage isn't an integer number."


class InvalidFileNameError(WatermarkError):
    default_message = "The output file extension isn't \"jpg\" or \"png\"."
