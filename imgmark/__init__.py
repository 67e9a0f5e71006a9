"""
imgmark Application Package
===========================
A console tool that blends a watermark image into a base image.

Modules:
    - core: Pure compositing logic (validation, transparency, blending, placement)

Usage:
    from imgmark.core import Compositor, BlendParameters, add_image_watermark
"""

__version__ = "1.0.0"
__author__ = "imgmark"
__app_name__ = "imgmark"

# Core exports
from .core import (
    Compositor, BlendParameters, Placement, RasterImage, TransparencyStrategy,
    WatermarkError, WatermarkJob, add_image_watermark, run_job
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__app_name__",

    # Core
    "Compositor",
    "BlendParameters",
    "Placement",
    "RasterImage",
    "TransparencyStrategy",
    "WatermarkError",
    "WatermarkJob",
    "add_image_watermark",
    "run_job",
]
