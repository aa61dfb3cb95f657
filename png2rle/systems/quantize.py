"""5-6-5 color quantization.

Packs an 8-bit-per-channel RGB triple into a 16-bit word laid out as
``RRRRRGGGGGGBBBBB`` by truncating each channel to its top bits, and expands
such a word back to 8 bits per channel by linear rescaling. The round trip
is lossy by construction.

Scalar functions serve the streaming encoder; the ``*_array`` variants
operate on whole NumPy images.
"""

from __future__ import annotations

import numpy as np

RED_BITS = 5
GREEN_BITS = 6
BLUE_BITS = 5

RED_MAX = (1 << RED_BITS) - 1
GREEN_MAX = (1 << GREEN_BITS) - 1
BLUE_MAX = (1 << BLUE_BITS) - 1

RED_SHIFT = GREEN_BITS + BLUE_BITS
GREEN_SHIFT = BLUE_BITS


def quantize(r: int, g: int, b: int) -> int:
    """Pack an RGB888 triple into a 5-6-5 code.

    Args:
        r: Red channel, 0-255
        g: Green channel, 0-255
        b: Blue channel, 0-255

    Returns:
        16-bit color code

    Raises:
        ValueError: If a channel is outside [0, 255]

    Example:
        >>> hex(quantize(255, 255, 255))
        '0xffff'
        >>> hex(quantize(255, 0, 0))
        '0xf800'
    """
    for name, value in (("r", r), ("g", g), ("b", b)):
        if not 0 <= value <= 255:
            raise ValueError(f"{name} must be in [0, 255], got {value}")
    return ((r >> 3) << RED_SHIFT) | ((g >> 2) << GREEN_SHIFT) | (b >> 3)


def dequantize(code: int) -> tuple[int, int, int]:
    """Expand a 5-6-5 code back to an RGB888 triple.

    Args:
        code: 16-bit color code

    Returns:
        (r, g, b) tuple

    Raises:
        ValueError: If code is outside [0, 65535]
    """
    if not 0 <= code <= 0xFFFF:
        raise ValueError(f"code must be in [0, 65535], got {code}")
    r = ((code >> RED_SHIFT) & RED_MAX) * 255 // RED_MAX
    g = ((code >> GREEN_SHIFT) & GREEN_MAX) * 255 // GREEN_MAX
    b = (code & BLUE_MAX) * 255 // BLUE_MAX
    return r, g, b


def quantize_array(pixels: np.ndarray) -> np.ndarray:
    """Vectorized quantize() over an (..., 3) uint8 array.

    Args:
        pixels: Array whose last axis holds R, G, B

    Returns:
        uint16 array of codes with the last axis dropped

    Raises:
        ValueError: If the last axis is not of length 3 or dtype is not uint8
    """
    if pixels.ndim == 0 or pixels.shape[-1] != 3:
        raise ValueError(f"Expected shape (..., 3), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {pixels.dtype}")

    channels = pixels.astype(np.uint16)
    r = channels[..., 0] >> 3
    g = channels[..., 1] >> 2
    b = channels[..., 2] >> 3
    return (r << RED_SHIFT) | (g << GREEN_SHIFT) | b


def dequantize_array(codes: np.ndarray) -> np.ndarray:
    """Vectorized dequantize(); returns an (..., 3) uint8 array."""
    codes = np.asarray(codes, dtype=np.uint32)
    r = ((codes >> RED_SHIFT) & RED_MAX) * 255 // RED_MAX
    g = ((codes >> GREEN_SHIFT) & GREEN_MAX) * 255 // GREEN_MAX
    b = (codes & BLUE_MAX) * 255 // BLUE_MAX
    return np.stack([r, g, b], axis=-1).astype(np.uint8)
