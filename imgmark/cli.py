"""
imgmark - Console Program
=========================
A console program that blends a watermark image into a base image.

Usage:
    imgmark [-v]
    python main.py [-v]

Architecture:
    - Model: imgmark/core/ (pure algorithms)
    - View: the console prompts below
    - Controller: This file (asks for each parameter, runs the pipeline)

Dialogue:
    1. Base image and watermark filenames
    2. Alpha channel (translucent watermark) or transparency color (opaque one)
    3. Transparency percentage
    4. Position method (single, grid) and position
    5. Output filename (.jpg or .png)
"""

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional

from .core import (
    BlendParameters, Compositor, Placement, PlacementMethod, WatermarkError,
    load_images, resolve_transparency, save_image
)
from .core.validation import (
    parse_output_filename, parse_percentage, parse_placement_method, parse_position
)

logger = logging.getLogger("imgmark")


def console_reply(prompt: str) -> str:
    """Print a prompt on its own line and read the answer."""
    print(prompt)
    return input()


class WatermarkController:
    """
    Controller class that turns console answers into a watermarking run.

    Responsibilities:
    - Ask for every parameter in order
    - Validate each answer as soon as it is given
    - Run the compositor and save the result
    - Leave no output file behind when anything fails
    """

    def __init__(
            self,
            reply: Callable[[str], str] = console_reply,
            show: Callable[[str], None] = print
    ):
        """
        Initialize the controller.

        Args:
            reply: Asks a question and returns the raw answer.
            show: Displays a message to the user.
        """
        self.reply = reply
        self.show = show

    def _ask_yes(self, question: str, ignore_case: bool = False) -> bool:
        answer = self.reply(question)
        if ignore_case:
            answer = answer.lower()
        return answer == "yes"

    def run(self) -> Path:
        """
        Run the whole dialogue.

        Returns:
            Path of the written output image.

        Raises:
            WatermarkError: Any invalid answer or compositing failure.
        """
        image_name = self.reply("Input the image filename:")
        watermark_name = self.reply("Input the watermark image filename:")
        images = load_images(image_name, watermark_name)
        logger.debug(
            "Loaded image %s (%dx%d) and watermark %s (%dx%d, translucent=%s)",
            image_name, images.image.width, images.image.height,
            watermark_name, images.watermark.width, images.watermark.height,
            images.watermark.translucent
        )

        use_alpha_channel = False
        transparency_color = None
        if images.watermark.translucent:
            use_alpha_channel = self._ask_yes(
                "Do you want to use the watermark's Alpha channel?", ignore_case=True
            )
        elif self._ask_yes("Do you want to set a transparency color?"):
            transparency_color = self.reply("Input a transparency color ([Red] [Green] [Blue]):")
        strategy = resolve_transparency(images.watermark, use_alpha_channel, transparency_color)
        logger.debug("Transparency strategy: %s", strategy)

        percentage = parse_percentage(
            self.reply("Input the watermark transparency percentage (Integer 0-100):")
        )

        method = parse_placement_method(self.reply("Choose the position method (single, grid):"))
        if method is PlacementMethod.SINGLE:
            max_x, max_y = images.max_position
            position = parse_position(
                self.reply(f"Input the watermark position ([x 0-{max_x}] [y 0-{max_y}]):"),
                max_x, max_y
            )
            placement = Placement.single(*position)
        else:
            placement = Placement.grid()
        logger.debug("Placement: %s, percentage: %d", placement, percentage)

        parameters = BlendParameters(percentage=percentage, strategy=strategy, placement=placement)
        result = Compositor(parameters).composite(images.image, images.watermark)

        output_name = self.reply("Input the output image filename (jpg or png extension):")
        output_path = save_image(result, parse_output_filename(output_name))
        logger.debug("Saved %dx%d result to %s", result.width, result.height, output_path)

        self.show(f"The watermarked image {output_name} has been created.")
        return output_path


def main(argv: Optional[list] = None) -> int:
    """Application entry point."""
    parser = argparse.ArgumentParser(description="Blend a watermark image into an image.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each pipeline step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    controller = WatermarkController()
    try:
        controller.run()
    except WatermarkError as e:
        print(e)
        return 1
    except Exception as e:
        logger.exception("Unexpected failure")
        print(e)
        return 1
    return 0

