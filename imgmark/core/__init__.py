"""
Core Module - Pure Compositing Logic
====================================
This module contains no console or prompt dependencies.
All validation, blending and placement rules are implemented here.
"""

from .blender import blend, blend_region
from .compositor import Compositor, composite, tile_offsets
from .errors import (
    WatermarkError,
    ImageNotFoundError,
    UnreadableImageError,
    InvalidColorComponentsError,
    InvalidBitsPerPixelError,
    InvalidWatermarkDimensionsError,
    InvalidTransparencyColorError,
    InvalidWatermarkPixelError,
    InvalidPlacementMethodError,
    InvalidPositionError,
    OutOfRangePercentageError,
    NotANumberError,
    InvalidFileNameError,
)
from .models import (
    BlendParameters,
    Pixel,
    Placement,
    PlacementMethod,
    RasterImage,
    TransparencyMode,
    TransparencyStrategy,
)
from .pipeline import WatermarkJob, add_image_watermark, load_images, run_job
from .storage import load_image, save_image
from .transparency import resolve_transparency
from .validation import validate_image

__all__ = [
    "blend",
    "blend_region",
    "Compositor",
    "composite",
    "tile_offsets",
    "WatermarkError",
    "ImageNotFoundError",
    "UnreadableImageError",
    "InvalidColorComponentsError",
    "InvalidBitsPerPixelError",
    "InvalidWatermarkDimensionsError",
    "InvalidTransparencyColorError",
    "InvalidWatermarkPixelError",
    "InvalidPlacementMethodError",
    "InvalidPositionError",
    "OutOfRangePercentageError",
    "NotANumberError",
    "InvalidFileNameError",
    "BlendParameters",
    "Pixel",
    "Placement",
    "PlacementMethod",
    "RasterImage",
    "TransparencyMode",
    "TransparencyStrategy",
    "WatermarkJob",
    "add_image_watermark",
    "load_images",
    "run_job",
    "load_image",
    "save_image",
    "resolve_transparency",
    "validate_image",
]
