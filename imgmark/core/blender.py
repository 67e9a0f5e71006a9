"""
Pixel Blender
=============
Color blending rules for one base pixel and one watermark pixel.

Rules, in order:
1. No watermark pixel at this coordinate -> base pixel unchanged
2. AlphaChannel strategy and alpha 0 -> base pixel unchanged
3. ColorKey strategy and RGB equals the key -> base pixel unchanged
4. Opaque watermark pixel -> per channel
   (percentage * watermark + (100 - percentage) * base) // 100
5. AlphaChannel strategy and alpha 1..254 -> InvalidWatermarkPixelError

Under the None and ColorKey strategies the watermark's alpha is ignored and
every pixel counts as opaque. The output never carries alpha.

blend() is the per-pixel form. blend_region() applies the same rules to a
whole numpy block at once and is what the compositor uses.
"""

from typing import Optional

import numpy as np

from .errors import InvalidWatermarkPixelError
from .models import Pixel, TransparencyMode, TransparencyStrategy


def mix(watermark: int, base: int, percentage: int) -> int:
    """Weighted channel mix with integer truncation."""
    return (percentage * watermark + (100 - percentage) * base) // 100


def blend(
        base: Pixel,
        watermark: Optional[Pixel],
        strategy: TransparencyStrategy,
        percentage: int
) -> Pixel:
    """
    Blend one watermark pixel over one base pixel.

    Args:
        base: The base image pixel.
        watermark: The watermark pixel, or None outside the watermark.
        strategy: Active transparency strategy.
        percentage: Watermark weight, 0-100.

    Returns:
        The opaque output pixel.

    Raises:
        InvalidWatermarkPixelError: Partial alpha under AlphaChannel.
    """
    base = Pixel(*(int(c) for c in base[:3]))
    if watermark is None:
        return base
    watermark = Pixel(*(int(c) for c in watermark))

    if strategy.mode is TransparencyMode.ALPHA_CHANNEL:
        if watermark.alpha == 0:
            return base
        if watermark.alpha != 255:
            raise InvalidWatermarkPixelError(watermark.alpha)
    elif strategy.mode is TransparencyMode.COLOR_KEY:
        if watermark.rgb == strategy.color:
            return base

    return Pixel(
        mix(watermark.red, base.red, percentage),
        mix(watermark.green, base.green, percentage),
        mix(watermark.blue, base.blue, percentage),
    )


def blend_region(
        base: np.ndarray,
        watermark: np.ndarray,
        strategy: TransparencyStrategy,
        percentage: int
) -> np.ndarray:
    """
    Blend a watermark block over an equally sized base block.

    Args:
        base: (h, w, 3+) uint8 array. Only RGB is read.
        watermark: (h, w, 3) or (h, w, 4) uint8 array.
        strategy: Active transparency strategy.
        percentage: Watermark weight, 0-100.

    Returns:
        New (h, w, 3) uint8 array.

    Raises:
        InvalidWatermarkPixelError: Any partial alpha under AlphaChannel.
    """
    base_rgb = base[..., :3].astype(np.int32)
    mark_rgb = watermark[..., :3].astype(np.int32)

    if strategy.mode is TransparencyMode.ALPHA_CHANNEL:
        if watermark.shape[-1] < 4:
            skip = np.zeros(base_rgb.shape[:2], dtype=bool)
        else:
            alpha = watermark[..., 3]
            partial = (alpha != 0) & (alpha != 255)
            if partial.any():
                raise InvalidWatermarkPixelError(int(alpha[partial][0]))
            skip = alpha == 0
    elif strategy.mode is TransparencyMode.COLOR_KEY:
        skip = np.all(mark_rgb == np.array(strategy.color, dtype=np.int32), axis=-1)
    else:
        skip = np.zeros(base_rgb.shape[:2], dtype=bool)

    mixed = (percentage * mark_rgb + (100 - percentage) * base_rgb) // 100
    result = np.where(skip[..., np.newaxis], base_rgb, mixed)
    return result.astype(np.uint8)
