"""
Data Model
==========
Immutable value types shared by the compositing engine.

- RasterImage: a pixel grid backed by a numpy uint8 array
- Pixel: one RGB(A) sample
- TransparencyStrategy: None, AlphaChannel or ColorKey(color)
- Placement: Single(x, y) or Grid
- BlendParameters: everything one compositing run needs
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import numpy as np
from PIL import Image

RGB = Tuple[int, int, int]

# Pillow modes that carry a real alpha channel
TRANSLUCENT_MODES = ("RGBA", "RGBa")


class Pixel(NamedTuple):
    """A single color sample. Alpha is 255 for opaque pixels."""
    red: int
    green: int
    blue: int
    alpha: int = 255

    @property
    def rgb(self) -> RGB:
        return self.red, self.green, self.blue


@dataclass(frozen=True, eq=False)
class RasterImage:
    """
    A rectangular grid of RGB(A) pixels.

    The pixel array has shape (height, width, 3) for opaque images and
    (height, width, 4) for translucent ones. Every constructor copies its
    input so two RasterImage instances never share storage.
    """
    pixels: np.ndarray
    translucent: bool = False

    def __post_init__(self):
        pixels = np.array(self.pixels, dtype=np.uint8, copy=True)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (height, width, 3|4) array, got {pixels.shape}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError("Image dimensions must be positive")
        if self.translucent and pixels.shape[2] != 4:
            raise ValueError("A translucent image needs an alpha channel")
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at column x, row y."""
        values = self.pixels[y, x]
        if self.translucent:
            return Pixel(int(values[0]), int(values[1]), int(values[2]), int(values[3]))
        return Pixel(int(values[0]), int(values[1]), int(values[2]))

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """
        Build a RasterImage from a validated Pillow image.

        Translucent modes keep their alpha channel; every other mode is
        converted to plain RGB.
        """
        if image.mode in TRANSLUCENT_MODES:
            return cls(np.asarray(image.convert("RGBA")), translucent=True)
        return cls(np.asarray(image.convert("RGB")), translucent=False)

    @classmethod
    def filled(cls, width: int, height: int, color: Tuple[int, ...]) -> "RasterImage":
        """Create a single-color image. A 4-tuple color makes it translucent."""
        channels = len(color)
        pixels = np.empty((height, width, channels), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels, translucent=channels == 4)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self.pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.translucent == other.translucent and np.array_equal(self.pixels, other.pixels)

    __hash__ = None


class TransparencyMode(Enum):
    """How the watermark's transparent pixels are recognized."""
    NONE = "none"
    ALPHA_CHANNEL = "alpha_channel"
    COLOR_KEY = "color_key"


@dataclass(frozen=True)
class TransparencyStrategy:
    """Tagged variant: exactly one mode, plus the key color for COLOR_KEY."""
    mode: TransparencyMode = TransparencyMode.NONE
    color: Optional[RGB] = None

    def __post_init__(self):
        if (self.mode is TransparencyMode.COLOR_KEY) != (self.color is not None):
            raise ValueError("Only the COLOR_KEY strategy carries a color")

    @classmethod
    def none(cls) -> "TransparencyStrategy":
        return cls(TransparencyMode.NONE)

    @classmethod
    def alpha_channel(cls) -> "TransparencyStrategy":
        return cls(TransparencyMode.ALPHA_CHANNEL)

    @classmethod
    def color_key(cls, color: RGB) -> "TransparencyStrategy":
        return cls(TransparencyMode.COLOR_KEY, tuple(int(c) for c in color))


class PlacementMethod(Enum):
    SINGLE = "single"
    GRID = "grid"


@dataclass(frozen=True)
class Placement:
    """Where the watermark goes: one top-left offset, or a grid from (0, 0)."""
    method: PlacementMethod = PlacementMethod.SINGLE
    position: Tuple[int, int] = (0, 0)

    @classmethod
    def single(cls, x: int, y: int) -> "Placement":
        return cls(PlacementMethod.SINGLE, (x, y))

    @classmethod
    def grid(cls) -> "Placement":
        return cls(PlacementMethod.GRID)


@dataclass(frozen=True)
class BlendParameters:
    """Immutable settings for one compositing run."""
    percentage: int
    strategy: TransparencyStrategy = TransparencyStrategy()
    placement: Placement = Placement()
