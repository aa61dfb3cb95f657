"""Shared fixtures."""

import logging
import struct
import zlib
from typing import Any, Callable, Iterator

import pytest

from png2rle.core.log import LOGGER_NAME


class RecordingLog:
    """Log double that keeps formatted messages per level."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, msg: str, *args: Any) -> None:
        self.messages.append(("info", msg % args))

    def warn(self, msg: str, *args: Any) -> None:
        self.messages.append(("warn", msg % args))

    def error(self, msg: str, *args: Any) -> None:
        self.messages.append(("error", msg % args))

    def at(self, level: str) -> list[str]:
        return [text for lvl, text in self.messages if lvl == level]


@pytest.fixture
def log() -> RecordingLog:
    """Create a recording log."""
    return RecordingLog()


def _chunk(tag: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data))


@pytest.fixture
def raw_png() -> Callable[..., bytes]:
    """Build PNG bytes by hand, for layouts Pillow will not write itself.

    ``rows`` are the unfiltered scanlines; each gets a filter-type 0 byte.
    """

    def build(width: int, height: int, depth: int, color_type: int, rows: list[bytes]) -> bytes:
        header = struct.pack(">IIBBBBB", width, height, depth, color_type, 0, 0, 0)
        scanlines = b"".join(b"\x00" + row for row in rows)
        return (
            b"\x89PNG\r\n\x1a\n"
            + _chunk(b"IHDR", header)
            + _chunk(b"IDAT", zlib.compress(scanlines))
            + _chunk(b"IEND", b"")
        )

    return build


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Undo configure_logging() side effects between tests."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
