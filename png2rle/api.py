"""High-level API for PNG to RLE565 conversion.

Provides one-call functions that build the decode → RGBAToRGB → RLEEncode
chain and return the encoded image.
"""

from __future__ import annotations

from typing import cast

from pydantic import ValidationError

from png2rle.components.image import PixelFormat, RGBA8888Image, RLE565Image
from png2rle.core.errors import DecodeFailed
from png2rle.core.log import Log, get_log
from png2rle.core.pipeline import Pipeline
from png2rle.io import (
    DECODE_STAGE,
    READ_STAGE,
    WRITE_STAGE,
    PathLike,
    decode_png,
    load_png,
    write_image,
)
from png2rle.systems.convert import RGBAToRGB
from png2rle.systems.rle import RLEEncode


def build_pipeline(log: Log | None = None) -> Pipeline:
    """Return the standard RGBA8888 → RGB888 → RLE565 pipeline."""
    return Pipeline(log) | RGBAToRGB() | RLEEncode()


def _encode(image: RGBA8888Image, log: Log) -> RLE565Image:
    return cast(RLE565Image, build_pipeline(log).run(image))


def _encode_decoded(image: RGBA8888Image, log: Log) -> RLE565Image:
    log.info("decoded %dx%d PNG", image.width, image.height)
    return _encode(image, log)


def encode_rgba(
    buffer: bytes,
    width: int,
    height: int,
    error: bool = False,
    log: Log | None = None,
) -> RLE565Image:
    """Encode a raw decoded RGBA8888 buffer.

    Args:
        buffer: Row-major RGBA bytes, ``width * height * 4`` long
        width: Image width in pixels
        height: Image height in pixels
        error: Failure flag reported by the decoder; when set, the buffer
            is never read
        log: Logging capability for diagnostics

    Returns:
        Encoded RLE565 image

    Raises:
        DecodeFailed: If error is set or the buffer does not match the
            dimensions
        Png2RleError: If a pipeline stage fails

    Example:
        >>> rle = encode_rgba(b"\\xff\\x00\\x00\\xff" * 4, width=2, height=2)
        >>> list(rle.records())
        [(4, 63488)]
    """
    log = get_log(log)
    if error:
        failure = DecodeFailed("decoder reported failure", stage=DECODE_STAGE)
        log.error("%s", failure)
        raise failure

    try:
        image = RGBA8888Image(width=width, height=height, pix=buffer)
    except ValidationError as e:
        failure = DecodeFailed(f"invalid decoded image: {e}", stage=DECODE_STAGE)
        log.error("%s", failure)
        raise failure from e

    return _encode(image, log)


def convert_png(data: bytes, log: Log | None = None) -> RLE565Image:
    """Decode PNG bytes and encode them as RLE565.

    Raises:
        DecodeFailed: If the PNG cannot be decoded
        Png2RleError: If a pipeline stage fails
    """
    log = get_log(log)
    try:
        image = decode_png(data)
    except DecodeFailed as e:
        log.error("%s", e)
        raise
    return _encode_decoded(image, log)


def convert_file(
    input_path: PathLike,
    output_path: PathLike,
    log: Log | None = None,
) -> RLE565Image:
    """Convert a PNG file into an RLE565 file.

    The output file is only created once encoding has succeeded.

    Args:
        input_path: PNG file to read
        output_path: Destination of the RLE565 records
        log: Logging capability for diagnostics

    Returns:
        The encoded image that was written

    Raises:
        OSError: If reading or writing fails; logged as a read or write
            failure
        Png2RleError: If decoding or a pipeline stage fails
    """
    log = get_log(log)
    try:
        image = load_png(input_path)
    except OSError as e:
        log.error("%s: %s", READ_STAGE, e)
        raise
    except DecodeFailed as e:
        log.error("%s", e)
        raise

    rle = _encode_decoded(image, log)
    try:
        written = write_image(output_path, rle)
    except OSError as e:
        log.error("%s: %s", WRITE_STAGE, e)
        raise
    log.info("wrote %d bytes to %s", written, output_path)
    return rle


def compression_ratio(image: RLE565Image) -> float:
    """Ratio of the equivalent RGB888 byte size to the encoded size."""
    original_bytes = PixelFormat.RGB888.raw_size(image.width, image.height)
    return original_bytes / image.size if image.size > 0 else float("inf")
