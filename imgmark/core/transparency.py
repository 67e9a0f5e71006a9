"""
Transparency Resolution
=======================
Picks the one transparency strategy for a run.

The watermark's own pixel format decides which choice is available:
a translucent watermark may use its alpha channel, an opaque one may
use a color key. The two are never combined.
"""

from typing import Optional, Tuple, Union

from .models import RasterImage, TransparencyStrategy
from .validation import parse_transparency_color


def resolve_transparency(
        watermark: RasterImage,
        use_alpha_channel: bool = False,
        transparency_color: Optional[Union[str, Tuple[int, int, int]]] = None
) -> TransparencyStrategy:
    """
    Resolve the transparency strategy for a watermark.

    Args:
        watermark: The watermark image.
        use_alpha_channel: Whether to honor the alpha channel of a
                           translucent watermark. Ignored for opaque ones.
        transparency_color: Key color for an opaque watermark. Ignored for
                            translucent ones.

    Returns:
        AlphaChannel, ColorKey(color) or None.

    Raises:
        InvalidTransparencyColorError: The key color is malformed.
    """
    if watermark.translucent:
        if use_alpha_channel:
            return TransparencyStrategy.alpha_channel()
        return TransparencyStrategy.none()

    if transparency_color is None:
        return TransparencyStrategy.none()
    return TransparencyStrategy.color_key(parse_transparency_color(transparency_color))
