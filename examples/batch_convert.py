#!/usr/bin/env python3
"""Batch conversion example.

Converts every PNG in a directory to RLE565 and reports the record count,
compression ratio and the PSNR lost to 5-6-5 quantization. Without an
input directory, random blocky test images are generated instead.
"""

from __future__ import annotations

import argparse
import io
from pathlib import Path

import numpy as np
from PIL import Image

from png2rle import RLE565Image, convert_png
from png2rle.core.log import configure_logging
from png2rle.io import read_bytes, write_image
from png2rle.systems.quantize import dequantize_array, quantize_array


def _random_png(size: int, block: int, rng: np.random.Generator) -> bytes:
    cells = rng.integers(0, 256, (size // block, size // block, 3), dtype=np.uint8)
    pixels = cells.repeat(block, axis=0).repeat(block, axis=1)
    buf = io.BytesIO()
    Image.fromarray(pixels, "RGB").save(buf, format="PNG")
    return buf.getvalue()


def _quantization_psnr(png: bytes) -> float:
    with Image.open(io.BytesIO(png)) as img:
        rgb = np.array(img.convert("RGB"))
    preview = dequantize_array(quantize_array(rgb))
    mse = np.mean((rgb.astype(np.float32) - preview.astype(np.float32)) ** 2)
    return float(10 * np.log10(255.0**2 / mse)) if mse > 0 else float("inf")


def _ratio(rle: RLE565Image) -> float:
    return rle.pixel_count * 3 / rle.size if rle.size else float("inf")


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch PNG to RLE565 example")
    parser.add_argument("--input", type=Path, default=None, help="Directory of PNG files")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("examples/rle_out"),
        help="Directory for .rle files",
    )
    parser.add_argument("--count", type=int, default=3, help="Random images to generate")
    parser.add_argument("--size", type=int, default=128, help="Random image size")
    parser.add_argument("--block", type=int, default=16, help="Random block size")
    args = parser.parse_args()

    configure_logging("WARNING")
    args.output.mkdir(parents=True, exist_ok=True)

    if args.input is not None:
        sources = {path.stem: read_bytes(path) for path in sorted(args.input.glob("*.png"))}
    else:
        rng = np.random.default_rng(0)
        sources = {
            f"random{i}": _random_png(args.size, args.block, rng) for i in range(args.count)
        }
        print(f"No input directory; generated {len(sources)} random images")

    print(f"\n{'Image':<16} {'Size':<12} {'Records':<10} {'Ratio':<8} {'PSNR (dB)':<10}")
    print("-" * 60)
    for name, png in sources.items():
        rle = convert_png(png)
        write_image(args.output / f"{name}.rle", rle)
        dims = f"{rle.width}x{rle.height}"
        print(
            f"{name:<16} {dims:<12} {rle.record_count:<10} "
            f"{_ratio(rle):<8.2f} {_quantization_psnr(png):<10.2f}"
        )


if __name__ == "__main__":
    main()
