"""Image components: one model per pixel format.

Each pixel format is its own frozen pydantic model carrying a payload of
the matching layout, so stride never has to be inferred from a separate
tag at runtime. The ``format`` field is a literal discriminator that
stages use to decide whether they can consume an image.
"""

from __future__ import annotations

import struct
from enum import Enum
from typing import Iterator, Literal, Union

from pydantic import BaseModel, Field, model_validator

from png2rle.core.errors import UnsupportedFormat

# One RLE565 record: run length then color, both uint16 little-endian
RECORD_FORMAT = "<HH"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)


class PixelFormat(str, Enum):
    """Pixel layouts known to the pipeline."""

    RGB888 = "RGB888"
    RGBA8888 = "RGBA8888"
    RGB565 = "RGB565"
    RLE565 = "RLE565"
    UNKNOWN = "UNKNOWN"

    @property
    def stride(self) -> int | None:
        """Bytes per pixel, or None for variable/undefined layouts."""
        return _STRIDES.get(self)

    def raw_size(self, width: int, height: int) -> int:
        """Byte length of a ``width`` x ``height`` image in this format.

        Raises:
            UnsupportedFormat: If the format has no fixed stride
        """
        stride = self.stride
        if stride is None:
            raise UnsupportedFormat(f"{self.value} has no fixed stride")
        return width * height * stride


_STRIDES = {
    PixelFormat.RGBA8888: 4,
    PixelFormat.RGB888: 3,
    PixelFormat.RGB565: 2,
}


class Component(BaseModel):
    """Base class for all image components.

    Components are immutable: a stage never edits its input, it builds a
    new component for its output.
    """

    model_config = {"frozen": True}

    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @property
    def pixel_count(self) -> int:
        """Number of pixels described by the component."""
        return self.width * self.height


class RasterImage(Component):
    """Fixed-stride image stored row-major with no padding.

    Attributes:
        pix: Pixel bytes, ``width * height * stride`` long
    """

    format: PixelFormat
    pix: bytes

    @model_validator(mode="after")
    def _check_length(self) -> "RasterImage":
        if self.format.stride is None:
            raise ValueError(f"{self.format.value} is not a raster format")
        expected = self.format.raw_size(self.width, self.height)
        if len(self.pix) != expected:
            raise ValueError(
                f"{self.format.value} image {self.width}x{self.height} needs "
                f"{expected} bytes, got {len(self.pix)}"
            )
        return self

    @property
    def size(self) -> int:
        """Valid byte length of the pixel buffer."""
        return len(self.pix)


class RGBA8888Image(RasterImage):
    """Decoded image with 8-bit red, green, blue and alpha channels."""

    format: Literal[PixelFormat.RGBA8888] = PixelFormat.RGBA8888


class RGB888Image(RasterImage):
    """Image with 8-bit red, green and blue channels."""

    format: Literal[PixelFormat.RGB888] = PixelFormat.RGB888


class RGB565Image(RasterImage):
    """Image with one packed 5-6-5 uint16 per pixel."""

    format: Literal[PixelFormat.RGB565] = PixelFormat.RGB565


class RLE565Image(Component):
    """Run-length encoded 5-6-5 image.

    The payload is a flat sequence of 4-byte records with no header.
    ``width`` and ``height`` travel beside the payload, never inside it.

    Attributes:
        data: Encoded records
    """

    format: Literal[PixelFormat.RLE565] = PixelFormat.RLE565
    data: bytes

    @model_validator(mode="after")
    def _check_records(self) -> "RLE565Image":
        if len(self.data) % RECORD_SIZE:
            raise ValueError(
                f"RLE565 data must be a multiple of {RECORD_SIZE} bytes, "
                f"got {len(self.data)}"
            )
        return self

    @property
    def size(self) -> int:
        """Valid byte length of the encoded records."""
        return len(self.data)

    @property
    def record_count(self) -> int:
        return len(self.data) // RECORD_SIZE

    def records(self) -> Iterator[tuple[int, int]]:
        """Iterate ``(run_length, color)`` pairs in stream order."""
        return struct.iter_unpack(RECORD_FORMAT, self.data)

    @property
    def encoded_pixels(self) -> int:
        """Sum of all run lengths."""
        return sum(count for count, _ in self.records())


Image = Union[RGBA8888Image, RGB888Image, RGB565Image, RLE565Image]
