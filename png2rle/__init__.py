"""PNG to RLE565 converter for low-memory displays.

This package turns decoded raster images into a flat stream of
run-length records with 5-6-5 packed color:
- Quantizer: RGB888 to 16-bit 5-6-5 codes and back
- MemoryStream: seekable, growable in-memory byte stream
- Stages: RGBA8888 → RGB888 → RLE565, chained by a Pipeline

Quick Start:
    >>> from png2rle import convert_file
    >>> rle = convert_file("logo.png", "logo.rle")
    >>> rle.record_count
    42

For raw buffers or custom chains:
    >>> from png2rle import Pipeline, RGBAToRGB, RLEEncode, RGBA8888Image
    >>>
    >>> image = RGBA8888Image(width=2, height=1, pix=b"\\x00\\x00\\x00\\xff" * 2)
    >>> rle = (Pipeline() | RGBAToRGB() | RLEEncode()).run(image)
    >>> list(rle.records())
    [(2, 0)]
"""

__version__ = "0.1.0"

from png2rle.api import build_pipeline, compression_ratio, convert_file, convert_png, encode_rgba
from png2rle.components.image import (
    PixelFormat,
    RGB565Image,
    RGB888Image,
    RGBA8888Image,
    RLE565Image,
)
from png2rle.core.errors import (
    AllocationFailed,
    DecodeFailed,
    InvalidSeek,
    Png2RleError,
    UnsupportedFormat,
)
from png2rle.core.log import Log, StdLog
from png2rle.core.pipeline import Pipeline
from png2rle.core.stream import MemoryStream, SeekMode
from png2rle.systems.convert import RGBAToRGB, rgba_to_rgb
from png2rle.systems.quantize import dequantize, quantize
from png2rle.systems.rle import RLEEncode, encode_rle

__all__ = [
    "__version__",
    "AllocationFailed",
    "DecodeFailed",
    "InvalidSeek",
    "Log",
    "MemoryStream",
    "Pipeline",
    "PixelFormat",
    "Png2RleError",
    "RGB565Image",
    "RGB888Image",
    "RGBA8888Image",
    "RGBAToRGB",
    "RLE565Image",
    "RLEEncode",
    "SeekMode",
    "StdLog",
    "UnsupportedFormat",
    "build_pipeline",
    "compression_ratio",
    "convert_file",
    "convert_png",
    "dequantize",
    "encode_rgba",
    "encode_rle",
    "quantize",
    "rgba_to_rgb",
]
