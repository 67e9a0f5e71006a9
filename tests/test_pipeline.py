"""
Test script for the file pipeline and the console dialogue.

Run with: python -m pytest tests/test_pipeline.py -v
"""

import struct
import sys
import zlib
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from PIL import Image

from imgmark import cli as console
from imgmark.core import (
    ImageNotFoundError,
    InvalidBitsPerPixelError,
    InvalidColorComponentsError,
    InvalidFileNameError,
    InvalidWatermarkDimensionsError,
    InvalidWatermarkPixelError,
    NotANumberError,
    UnreadableImageError,
    WatermarkJob,
    add_image_watermark,
    load_image,
    run_job,
    save_image,
    validate_image,
)
from imgmark.core.models import RasterImage


def write_image(path: Path, width: int, height: int, color, mode: str = "RGB") -> Path:
    """Write a single-color test image."""
    Image.new(mode, (width, height), color).save(path)
    return path


def write_alpha_watermark(path: Path) -> Path:
    """2x2 white watermark whose right column is fully transparent."""
    arr = np.full((2, 2, 4), 255, dtype=np.uint8)
    arr[:, 1, 3] = 0
    Image.fromarray(arr).save(path)
    return path


def write_png_16bit(path: Path, width: int, height: int, color_type: int = 2) -> Path:
    """Write a PNG with 16 bits per channel (color type 2 = RGB, 6 = RGBA)."""
    channels = 4 if color_type == 6 else 3

    def chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)

    header = struct.pack(">IIBBBBB", width, height, 16, color_type, 0, 0, 0)
    row = b"\x00" + b"\x12\x34" * channels * width
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(row * height))
        + chunk(b"IEND", b"")
    )
    return path


class ScriptedReplies:
    """Answers prompts from a fixed list and records what was asked."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0)


# ===== Storage =====

def test_load_missing_image(tmp_path):
    missing = tmp_path / "nope.png"
    with pytest.raises(ImageNotFoundError) as info:
        load_image(missing)
    assert str(info.value) == f"The file {missing} doesn't exist."
    assert isinstance(info.value, FileNotFoundError)


def test_load_unreadable_image(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with pytest.raises(UnreadableImageError):
        load_image(broken)


def test_save_png_and_jpg(tmp_path):
    image = RasterImage.filled(3, 2, (10, 20, 30))

    png_path = save_image(image, tmp_path / "nested" / "out.png")
    with Image.open(png_path) as saved:
        assert saved.format == "PNG"
        assert saved.mode == "RGB"
        assert RasterImage.from_pil(saved) == image

    jpg_path = save_image(image, tmp_path / "out.jpg")
    with Image.open(jpg_path) as saved:
        assert saved.format == "JPEG"
        assert saved.size == (3, 2)

    with pytest.raises(InvalidFileNameError):
        save_image(image, tmp_path / "out.bmp")


def test_load_16bit_png_is_rejected(tmp_path):
    for color_type, bits in ((2, 48), (6, 64)):
        image = load_image(write_png_16bit(tmp_path / f"wide{color_type}.png", 2, 2, color_type))
        assert image.info["source_bits_per_pixel"] == bits
        with pytest.raises(InvalidBitsPerPixelError) as info:
            validate_image(image, "watermark")
        assert str(info.value) == "The watermark isn't 24 or 32-bit."


def test_load_8bit_png_keeps_mode_depth(tmp_path):
    image = load_image(write_image(tmp_path / "plain.png", 2, 2, (1, 2, 3)))
    assert "source_bits_per_pixel" not in image.info
    assert validate_image(image) is image


# ===== Pipeline =====

def test_run_job_single(tmp_path):
    job = WatermarkJob(
        image_path=write_image(tmp_path / "base.png", 4, 4, (0, 0, 0)),
        watermark_path=write_image(tmp_path / "mark.png", 2, 2, (255, 255, 255)),
        output_path=tmp_path / "out.png",
        percentage="50",
        method="single",
        position="1 1"
    )

    result = run_job(job)

    with Image.open(job.output_path) as saved:
        assert RasterImage.from_pil(saved) == result
    assert result.pixel(1, 1).rgb == (127, 127, 127)
    assert result.pixel(3, 3).rgb == (0, 0, 0)


def test_add_image_watermark_grid_with_alpha(tmp_path):
    output = tmp_path / "out.png"
    result = add_image_watermark(
        write_image(tmp_path / "base.png", 5, 4, (0, 0, 0)),
        write_alpha_watermark(tmp_path / "mark.png"),
        output,
        percentage=100,
        method="grid",
        use_alpha_channel=True
    )

    assert output.exists()
    for x in range(5):
        expected = (255, 255, 255) if x % 2 == 0 else (0, 0, 0)
        assert result.pixel(x, 0).rgb == expected
        assert result.pixel(x, 3).rgb == expected


def test_add_image_watermark_color_key(tmp_path):
    mark = np.zeros((2, 2, 3), dtype=np.uint8)
    mark[0, 0] = (255, 0, 255)
    mark[1, 1] = (255, 0, 255)
    Image.fromarray(mark).save(tmp_path / "mark.png")

    result = add_image_watermark(
        write_image(tmp_path / "base.png", 2, 2, (100, 100, 100)),
        tmp_path / "mark.png",
        tmp_path / "out.png",
        percentage=100,
        transparency_color=(255, 0, 255)
    )

    assert result.pixel(0, 0).rgb == (100, 100, 100)
    assert result.pixel(1, 0).rgb == (0, 0, 0)


def test_run_job_writes_nothing_on_failure(tmp_path):
    base = write_image(tmp_path / "base.png", 4, 4, (0, 0, 0))
    output = tmp_path / "out.png"

    small = write_image(tmp_path / "small.png", 2, 2, (1, 1, 1))
    with pytest.raises(NotANumberError):
        run_job(WatermarkJob(base, small, output, percentage="abc"))

    big = write_image(tmp_path / "big.png", 5, 2, (1, 1, 1))
    with pytest.raises(InvalidWatermarkDimensionsError):
        run_job(WatermarkJob(base, big, output))

    partial = write_image(tmp_path / "partial.png", 2, 2, (1, 1, 1, 128), mode="RGBA")
    with pytest.raises(InvalidWatermarkPixelError):
        run_job(WatermarkJob(base, partial, output, method="grid", use_alpha_channel=True))

    wide = write_png_16bit(tmp_path / "wide.png", 2, 2)
    with pytest.raises(InvalidBitsPerPixelError):
        run_job(WatermarkJob(base, wide, output))

    gray = write_image(tmp_path / "gray.png", 2, 2, 100, mode="L")
    with pytest.raises(InvalidColorComponentsError):
        run_job(WatermarkJob(base, gray, output))

    assert not output.exists()


# ===== Console dialogue =====

def test_console_single_placement(tmp_path):
    base = write_image(tmp_path / "base.png", 4, 4, (0, 0, 0))
    mark = write_image(tmp_path / "mark.png", 2, 2, (255, 255, 255))
    output = tmp_path / "out.png"
    messages = []
    replies = ScriptedReplies([str(base), str(mark), "no", "50", "single", "1 1", str(output)])

    path = console.WatermarkController(reply=replies, show=messages.append).run()

    assert path == output
    assert "Input the watermark position ([x 0-2] [y 0-2]):" in replies.prompts
    assert "Do you want to set a transparency color?" in replies.prompts
    assert messages == [f"The watermarked image {output} has been created."]
    with Image.open(output) as saved:
        raster = RasterImage.from_pil(saved)
    assert raster.pixel(2, 2).rgb == (127, 127, 127)
    assert raster.pixel(0, 0).rgb == (0, 0, 0)


def test_console_alpha_question_is_case_insensitive(tmp_path):
    base = write_image(tmp_path / "base.png", 2, 2, (0, 0, 0))
    mark = write_alpha_watermark(tmp_path / "mark.png")
    output = tmp_path / "out.png"
    replies = ScriptedReplies([str(base), str(mark), "YES", "100", "grid", str(output)])

    console.WatermarkController(reply=replies, show=lambda message: None).run()

    assert "Do you want to use the watermark's Alpha channel?" in replies.prompts
    with Image.open(output) as saved:
        raster = RasterImage.from_pil(saved)
    assert raster.pixel(0, 0).rgb == (255, 255, 255)
    assert raster.pixel(1, 0).rgb == (0, 0, 0)


def test_main_reports_error_and_writes_nothing(tmp_path, monkeypatch, capsys):
    base = write_image(tmp_path / "base.png", 4, 4, (0, 0, 0))
    mark = write_image(tmp_path / "mark.png", 2, 2, (255, 255, 255))
    answers = iter([str(base), str(mark), "yes", "1 2 3", "50", "diagonal"])
    monkeypatch.setattr("builtins.input", lambda: next(answers))

    assert console.main([]) == 1

    out = capsys.readouterr().out
    assert out.strip().endswith("The position method input is invalid.")
    assert sorted(tmp_path.iterdir()) == sorted([base, mark])


def test_main_missing_file(tmp_path, monkeypatch, capsys):
    missing = tmp_path / "missing.png"
    answers = iter([str(missing), str(missing)])
    monkeypatch.setattr("builtins.input", lambda: next(answers))

    assert console.main([]) == 1
    out = capsys.readouterr().out
    assert out.strip().endswith(f"The file {missing} doesn't exist.")
    assert "Errno" not in out
