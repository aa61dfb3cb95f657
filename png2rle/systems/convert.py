"""Pixel format conversion systems.

RGBA8888 → RGB888 by straight channel copy. Alpha is dropped, not
composited.
"""

from __future__ import annotations

import numpy as np

from png2rle.components.image import Image, PixelFormat, RGB888Image, RGBA8888Image
from png2rle.core.errors import UnsupportedFormat
from png2rle.core.log import Log
from png2rle.core.stage import Stage


def rgba_to_rgb(image: Image) -> RGB888Image:
    """Strip the alpha channel of an RGBA8888 image.

    Args:
        image: RGBA8888 image

    Returns:
        New RGB888 image of ``width * height * 3`` bytes

    Raises:
        UnsupportedFormat: If image is not RGBA8888
    """
    if not isinstance(image, RGBA8888Image):
        raise UnsupportedFormat(
            f"expected {PixelFormat.RGBA8888.value} image, got {image.format.value}"
        )

    rgba = np.frombuffer(image.pix, dtype=np.uint8).reshape(-1, 4)
    rgb = np.ascontiguousarray(rgba[:, :3])
    return RGB888Image(width=image.width, height=image.height, pix=rgb.tobytes())


class RGBAToRGB(Stage):
    """Drop alpha: RGBA8888 → RGB888."""

    def accepts(self) -> PixelFormat:
        return PixelFormat.RGBA8888

    def produces(self) -> PixelFormat:
        return PixelFormat.RGB888

    def run(self, image: Image, log: Log) -> Image:
        rgb = rgba_to_rgb(image)
        log.info("converted %dx%d image to RGB888", rgb.width, rgb.height)
        return rgb
