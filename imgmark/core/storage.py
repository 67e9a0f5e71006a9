"""
Image Storage
=============
Reads and writes image files with Pillow.

The engine itself never touches file bytes; these two functions are the
source and sink around it.
"""

from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .errors import ImageNotFoundError, UnreadableImageError
from .models import RasterImage
from .validation import SOURCE_BITS_KEY, output_format, source_bits_per_pixel

# Output format hint -> (Pillow format name, save options)
SAVE_FORMATS = {
    "jpg": ("JPEG", {"quality": 95}),
    "png": ("PNG", {}),
}


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Decode an image file.

    Args:
        path: Path to the image file.

    Returns:
        Fully loaded Pillow image; the file is closed on return.

    Raises:
        ImageNotFoundError: The path does not exist or is not a file.
        UnreadableImageError: Pillow cannot decode the file.
    """
    path = Path(path)
    if not path.is_file():
        raise ImageNotFoundError(str(path))

    try:
        with Image.open(path) as image:
            source_bits = source_bits_per_pixel(image)
            image.load()
            loaded = image.copy()
    except (UnidentifiedImageError, OSError) as e:
        raise UnreadableImageError(str(path)) from e

    if source_bits is not None:
        loaded.info[SOURCE_BITS_KEY] = source_bits
    return loaded


def save_image(image: RasterImage, path: Union[str, Path]) -> Path:
    """
    Encode an image to disk, choosing the format from the extension.

    Args:
        image: Image to save.
        path: Output path ending in .jpg or .png.

    Returns:
        The output path.

    Raises:
        InvalidFileNameError: Unsupported extension.
    """
    path = Path(path)
    pil_format, options = SAVE_FORMATS[output_format(path)]

    path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = image.to_pil()
    if pil_format == "JPEG" and pil_image.mode != "RGB":
        pil_image = pil_image.convert("RGB")
    pil_image.save(path, format=pil_format, **options)
    return path
