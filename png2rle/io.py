"""File and PNG decode collaborators.

These sit outside the codec: they turn a path or PNG bytes into an
RGBA8888 image and write encoded bytes back to disk.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from png2rle.components.image import RGBA8888Image, RLE565Image
from png2rle.core.errors import DecodeFailed

PathLike = Union[str, "os.PathLike[str]"]

DECODE_STAGE = "decode"
READ_STAGE = "read"
WRITE_STAGE = "write"

# Pillow opens 16-bit grayscale PNGs in these modes
WIDE_GRAY_MODES = ("I;16", "I;16B", "I;16L", "I")


def _narrow_gray(img: PILImage.Image) -> PILImage.Image:
    """Reduce 16-bit gray samples to 8 bits by keeping the high byte."""
    samples = np.asarray(img).astype(np.uint32) >> 8
    return PILImage.fromarray(np.minimum(samples, 255).astype(np.uint8))


def decode_png(data: bytes) -> RGBA8888Image:
    """Decode PNG bytes into an RGBA8888 image.

    Palette, grayscale and RGB PNGs are expanded to RGBA by Pillow. 16-bit
    samples keep their high byte.

    Args:
        data: Complete PNG file contents

    Returns:
        RGBA8888Image of the decoded pixels

    Raises:
        DecodeFailed: If the bytes are not a readable PNG
    """
    try:
        with PILImage.open(io.BytesIO(data), formats=["PNG"]) as img:
            if img.mode in WIDE_GRAY_MODES:
                rgba = _narrow_gray(img).convert("RGBA")
            else:
                rgba = img.convert("RGBA")
    except (
        UnidentifiedImageError,
        PILImage.DecompressionBombError,
        OSError,
        ValueError,
        SyntaxError,
    ) as e:
        raise DecodeFailed(f"cannot decode PNG: {e}", stage=DECODE_STAGE) from e

    return RGBA8888Image(width=rgba.width, height=rgba.height, pix=rgba.tobytes())


def read_bytes(path: PathLike) -> bytes:
    """Load a whole file into memory."""
    return Path(path).read_bytes()


def write_bytes(path: PathLike, data: bytes) -> int:
    """Write ``data`` to ``path``, replacing any existing file.

    Returns:
        Number of bytes written
    """
    return Path(path).write_bytes(data)


def load_png(path: PathLike) -> RGBA8888Image:
    """Read and decode a PNG file.

    Raises:
        OSError: If the file cannot be read
        DecodeFailed: If its contents are not a readable PNG
    """
    return decode_png(read_bytes(path))


def write_image(path: PathLike, image: RLE565Image) -> int:
    """Write the records of an RLE565 image; no header is added."""
    return write_bytes(path, image.data)
