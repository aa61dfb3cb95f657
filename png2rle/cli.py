"""Command line front end: ``png2rle INPUT_PNG OUTPUT_RLE``.

Exit status is 0 on success or when usage is printed, 1 when the
conversion fails.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from png2rle import __version__
from png2rle.api import compression_ratio, convert_file
from png2rle.core.config import load_settings
from png2rle.core.errors import Png2RleError
from png2rle.core.log import StdLog, configure_logging

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="png2rle",
        description="PNG to RLE565 converter",
    )
    parser.add_argument("input", nargs="?", type=Path, help="Input PNG file")
    parser.add_argument("output", nargs="?", type=Path, help="Output RLE565 file")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to png2rle.toml (auto-detected if omitted)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the converter and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.input is None or args.output is None:
        parser.print_help()
        return EXIT_OK

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"png2rle: {e}", file=sys.stderr)
        return EXIT_FAILURE

    level = settings.log_level
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    log = StdLog(configure_logging(level, settings.log_format))

    try:
        rle = convert_file(args.input, args.output, log)
    except (Png2RleError, OSError):
        # Already reported with the failing stage by convert_file
        return EXIT_FAILURE

    log.info(
        "%s: %d records, %d pixels, ratio %.2fx",
        args.output,
        rle.record_count,
        rle.encoded_pixels,
        compression_ratio(rle),
    )
    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
