"""
Watermark Pipeline
==================
One complete run: load -> validate -> resolve -> composite -> save.

Every step raises on failure and nothing is written unless all steps
succeed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from .compositor import Compositor, check_dimensions, max_position
from .models import BlendParameters, Placement, PlacementMethod, RasterImage
from .storage import load_image, save_image
from .transparency import resolve_transparency
from .validation import (
    parse_output_filename,
    parse_percentage,
    parse_placement_method,
    parse_position,
    validate_image,
)


@dataclass
class WatermarkJob:
    """Complete configuration for one watermarking run."""
    image_path: Path
    watermark_path: Path
    output_path: Path
    percentage: Union[int, str] = 100
    method: Union[PlacementMethod, str] = PlacementMethod.SINGLE
    position: Union[Tuple[int, int], str] = (0, 0)
    use_alpha_channel: bool = False
    transparency_color: Optional[Union[Tuple[int, int, int], str]] = None


@dataclass
class LoadedImages:
    """The validated base and watermark of a run."""
    image: RasterImage
    watermark: RasterImage
    max_position: Tuple[int, int] = field(init=False)

    def __post_init__(self):
        check_dimensions(self.image, self.watermark)
        self.max_position = max_position(self.image, self.watermark)


def load_images(image_path: Union[str, Path], watermark_path: Union[str, Path]) -> LoadedImages:
    """Load and validate the base image and the watermark."""
    image = validate_image(load_image(image_path), "image")
    watermark = validate_image(load_image(watermark_path), "watermark")
    return LoadedImages(RasterImage.from_pil(image), RasterImage.from_pil(watermark))


def build_parameters(job: WatermarkJob, images: LoadedImages) -> BlendParameters:
    """Validate the job's raw settings against the loaded images."""
    strategy = resolve_transparency(images.watermark, job.use_alpha_channel, job.transparency_color)
    percentage = parse_percentage(job.percentage)
    method = parse_placement_method(job.method)
    if method is PlacementMethod.GRID:
        placement = Placement.grid()
    else:
        placement = Placement.single(*parse_position(job.position, *images.max_position))
    return BlendParameters(percentage=percentage, strategy=strategy, placement=placement)


def run_job(job: WatermarkJob) -> RasterImage:
    """
    Execute a watermarking job and save the result.

    Returns:
        The composited output image.

    Raises:
        WatermarkError: Any validation or compositing failure.
    """
    output_path = parse_output_filename(job.output_path)
    images = load_images(job.image_path, job.watermark_path)
    parameters = build_parameters(job, images)

    result = Compositor(parameters).composite(images.image, images.watermark)
    save_image(result, output_path)
    return result


# Convenience function for simple usage
def add_image_watermark(
        image_path: Union[str, Path],
        watermark_path: Union[str, Path],
        output_path: Union[str, Path],
        percentage: int = 100,
        method: Union[PlacementMethod, str] = PlacementMethod.SINGLE,
        position: Tuple[int, int] = (0, 0),
        use_alpha_channel: bool = False,
        transparency_color: Optional[Tuple[int, int, int]] = None
) -> RasterImage:
    """
    Convenience function to watermark an image file in one call.

    Args:
        image_path: Base image path.
        watermark_path: Watermark image path.
        output_path: Destination (.jpg or .png).
        percentage: Watermark weight, 0-100.
        method: "single" or "grid".
        position: Top-left offset for single placement.
        use_alpha_channel: Honor a translucent watermark's alpha channel.
        transparency_color: Key color for an opaque watermark.
    """
    job = WatermarkJob(
        image_path=Path(image_path),
        watermark_path=Path(watermark_path),
        output_path=Path(output_path),
        percentage=percentage,
        method=method,
        position=position,
        use_alpha_channel=use_alpha_channel,
        transparency_color=transparency_color
    )
    return run_job(job)
