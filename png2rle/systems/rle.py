"""Run-length encoding of RGB888 images into RLE565.

The encoder reads the image three bytes at a time through a MemoryStream,
quantizes each pixel to 5-6-5 and merges consecutive equal codes into
runs. Each run becomes one 4-byte record:

    bytes 0-1: run length, uint16 little-endian, 1..65535
    bytes 2-3: color code, uint16 little-endian

A run that reaches 65535 pixels is closed and the next identical pixel
starts a new run.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from png2rle.components.image import (
    RECORD_FORMAT,
    Image,
    PixelFormat,
    RGB888Image,
    RLE565Image,
)
from png2rle.core.errors import UnsupportedFormat
from png2rle.core.log import Log, get_log
from png2rle.core.stage import Stage
from png2rle.core.stream import MemoryStream, open_image
from png2rle.systems.quantize import quantize

MAX_RUN = 0xFFFF
PIXEL_SIZE = 3


@dataclass
class EncodeStats:
    """Counters collected while encoding.

    Attributes:
        pixels: Sum of all emitted run lengths
        records: Number of records written
        dropped_bytes: Bytes of a trailing incomplete pixel that were skipped
    """

    pixels: int = 0
    records: int = 0
    dropped_bytes: int = 0


def _flush(dst: MemoryStream, length: int, color: int, stats: EncodeStats) -> None:
    dst.write(struct.pack(RECORD_FORMAT, length, color))
    stats.pixels += length
    stats.records += 1


def encode_stream(src: MemoryStream, dst: MemoryStream, log: Log | None = None) -> EncodeStats:
    """Encode RGB888 pixels from ``src`` as RLE565 records appended to ``dst``.

    Args:
        src: Stream positioned at the first pixel
        dst: Output stream; records are written at its cursor
        log: Logging capability for integrity warnings

    Returns:
        EncodeStats for the encoded data
    """
    log = get_log(log)
    stats = EncodeStats()
    run_color = 0
    run_length = 0  # 0 means no run in progress

    while True:
        pixel = src.read(PIXEL_SIZE)
        if len(pixel) < PIXEL_SIZE:
            if pixel:
                stats.dropped_bytes = len(pixel)
                log.warn("dropped %d trailing bytes of an incomplete pixel", len(pixel))
            break

        color = quantize(pixel[0], pixel[1], pixel[2])
        if run_length:
            if color == run_color and run_length != MAX_RUN:
                run_length += 1
                continue
            _flush(dst, run_length, run_color, stats)

        run_color = color
        run_length = 1

    if run_length:
        _flush(dst, run_length, run_color, stats)

    return stats


def encode_rle(image: Image, log: Log | None = None) -> RLE565Image:
    """Encode an RGB888 image as RLE565.

    Args:
        image: RGB888 image
        log: Logging capability for diagnostics

    Returns:
        New RLE565 image owning the encoded records

    Raises:
        UnsupportedFormat: If image is not RGB888
        AllocationFailed: If the output buffer cannot grow
    """
    rle, _ = _encode(image, get_log(log))
    return rle


def _encode(image: Image, log: Log) -> tuple[RLE565Image, EncodeStats]:
    if not isinstance(image, RGB888Image):
        raise UnsupportedFormat(
            f"expected {PixelFormat.RGB888.value} image, got {image.format.value}"
        )

    with open_image(image) as src, MemoryStream() as dst:
        stats = encode_stream(src, dst, log)
        data = dst.detach()

    if stats.pixels != image.pixel_count:
        log.warn(
            "encoded %d pixels but image is %dx%d (%d pixels)",
            stats.pixels,
            image.width,
            image.height,
            image.pixel_count,
        )

    rle = RLE565Image(width=image.width, height=image.height, data=bytes(data))
    return rle, stats


class RLEEncode(Stage):
    """Run-length encode: RGB888 → RLE565.

    Attributes:
        stats: EncodeStats of the most recent run, None before the first
    """

    def __init__(self) -> None:
        self.stats: EncodeStats | None = None

    def accepts(self) -> PixelFormat:
        return PixelFormat.RGB888

    def produces(self) -> PixelFormat:
        return PixelFormat.RLE565

    def run(self, image: Image, log: Log) -> Image:
        rle, self.stats = _encode(image, log)
        log.info(
            "encoded %d pixels into %d records (%d bytes)",
            self.stats.pixels,
            self.stats.records,
            rle.size,
        )
        return rle
