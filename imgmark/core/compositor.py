"""
Compositor
==========
Places a watermark on a base image, either once or tiled as a grid.

Technical Notes:
- The output is a freshly allocated RGB buffer; the base image is only read
- Pixels outside the watermark footprint keep the base color
- Grid tiles start at (0, 0) with the watermark's own size as stride, so
  tiles never overlap and the last row/column may be clipped at the edges
- Tiles are applied row-major (every tile of one row before the next row)
  as a fold over the output buffer
"""

from functools import reduce
from typing import Iterator, Tuple

import numpy as np

from .blender import blend_region
from .errors import InvalidPositionError, InvalidWatermarkDimensionsError
from .models import BlendParameters, Placement, PlacementMethod, RasterImage, TransparencyStrategy


def check_dimensions(base: RasterImage, watermark: RasterImage) -> None:
    """Raise InvalidWatermarkDimensionsError if the watermark is larger in either axis."""
    if base.width < watermark.width or base.height < watermark.height:
        raise InvalidWatermarkDimensionsError()


def max_position(base: RasterImage, watermark: RasterImage) -> Tuple[int, int]:
    """Largest valid single-placement offset."""
    return base.width - watermark.width, base.height - watermark.height


def tile_offsets(base: RasterImage, watermark: RasterImage) -> Iterator[Tuple[int, int]]:
    """Yield grid tile origins row by row."""
    for y in range(0, base.height, watermark.height):
        for x in range(0, base.width, watermark.width):
            yield x, y


class Compositor:
    """
    Blends a watermark into a base image.

    Holds one run's BlendParameters; composite() can be called for any
    number of base/watermark pairs.
    """

    def __init__(self, parameters: BlendParameters):
        self.parameters = parameters

    @property
    def strategy(self) -> TransparencyStrategy:
        return self.parameters.strategy

    def _apply_tile(
            self,
            canvas: np.ndarray,
            watermark: RasterImage,
            offset: Tuple[int, int]
    ) -> np.ndarray:
        """Blend the watermark at offset into canvas, clipping at the edges."""
        x, y = offset
        height = min(watermark.height, canvas.shape[0] - y)
        width = min(watermark.width, canvas.shape[1] - x)
        region = canvas[y:y + height, x:x + width]
        canvas[y:y + height, x:x + width] = blend_region(
            region,
            watermark.pixels[:height, :width],
            self.strategy,
            self.parameters.percentage
        )
        return canvas

    def composite(self, base: RasterImage, watermark: RasterImage) -> RasterImage:
        """
        Apply the watermark to the base image.

        Args:
            base: Base image (read only).
            watermark: Watermark image (read only).

        Returns:
            New opaque RGB RasterImage with the base's dimensions.

        Raises:
            InvalidWatermarkDimensionsError: Watermark larger than base.
            InvalidWatermarkPixelError: Partial alpha under AlphaChannel.
        """
        check_dimensions(base, watermark)

        placement = self.parameters.placement
        if placement.method is PlacementMethod.GRID:
            offsets = tile_offsets(base, watermark)
        else:
            x, y = placement.position
            max_x, max_y = max_position(base, watermark)
            if not (0 <= x <= max_x and 0 <= y <= max_y):
                raise InvalidPositionError(out_of_range=True)
            offsets = iter([placement.position])

        canvas = np.array(base.pixels[..., :3], dtype=np.uint8, copy=True)
        canvas = reduce(lambda out, offset: self._apply_tile(out, watermark, offset), offsets, canvas)
        return RasterImage(canvas)


def composite(
        base: RasterImage,
        watermark: RasterImage,
        strategy: TransparencyStrategy,
        percentage: int,
        placement: Placement
) -> RasterImage:
    """Functional form of Compositor.composite."""
    parameters = BlendParameters(percentage=percentage, strategy=strategy, placement=placement)
    return Compositor(parameters).composite(base, watermark)
