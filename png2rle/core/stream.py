"""MemoryStream: a seekable, growable byte stream held in memory.

The stream gives the encoder a single cursor-over-bytes interface whether
the bytes come from an image buffer or are accumulated for output. It
adopts the buffer it is opened over without copying; a read-only buffer
(``bytes``, ``memoryview``) is copied into a private ``bytearray`` only on
the first write.

Key Features:
- Bounded reads: reading past the logical end is truncated, never an error
- Growing writes: writing at or past the end extends the buffer
- Three seek modes: absolute, relative and from the end
- Explicit ownership transfer through detach()

Example:
    >>> with MemoryStream() as out:
    ...     out.write(b"\\x01\\x00\\xff\\xff")
    ...     out.seek(0)
    ...     out.read(4)
    4
    0
    b'\\x01\\x00\\xff\\xff'
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Union

from png2rle.components.image import Image, RasterImage
from png2rle.core.errors import AllocationFailed, InvalidSeek, UnsupportedFormat

Buffer = Union[bytes, bytearray, memoryview]


class SeekMode(IntEnum):
    """Reference point for MemoryStream.seek()."""

    ABSOLUTE = 0
    RELATIVE = 1
    FROM_END = 2


class MemoryStream:
    """In-memory analogue of a seekable file.

    Attributes:
        size: Logical length of the stream in bytes
        offset: Current cursor position (may sit past ``size`` after a seek)
        closed: True once close() or detach() was called

    Example:
        >>> stream = MemoryStream(bytearray(b"abcdef"))
        >>> stream.read(4)
        b'abcd'
        >>> stream.read(4)
        b'ef'
        >>> stream.read(4)
        b''
    """

    def __init__(self, buffer: Buffer | None = None, size: int | None = None) -> None:
        """Open a stream over ``buffer``.

        Args:
            buffer: Backing bytes, adopted without copying. None opens an
                empty stream for output.
            size: Number of valid bytes at the start of ``buffer``
                (defaults to the whole buffer)

        Raises:
            ValueError: If size is negative or larger than the buffer
        """
        if buffer is None:
            buffer = bytearray()
        if isinstance(buffer, memoryview):
            buffer = buffer.cast("B")
        if size is None:
            size = len(buffer)
        if not 0 <= size <= len(buffer):
            raise ValueError(
                f"size must be in [0, {len(buffer)}], got {size}"
            )

        self._buffer: Buffer = buffer
        self._size = size
        self._offset = 0
        self._closed = False

    @classmethod
    def open(cls, buffer: Buffer | None = None, initial_size: int | None = None) -> MemoryStream:
        """Open a stream; same as calling the constructor."""
        return cls(buffer, initial_size)

    @property
    def size(self) -> int:
        """Logical length in bytes."""
        return self._size

    @property
    def offset(self) -> int:
        """Current cursor position."""
        return self._offset

    @property
    def closed(self) -> bool:
        return self._closed

    def tell(self) -> int:
        self._check_open()
        return self._offset

    def read(self, count: int = -1) -> bytes:
        """Read up to ``count`` bytes from the cursor.

        Args:
            count: Maximum number of bytes; negative reads to the end

        Returns:
            The bytes read. Empty once the cursor is at or past the end.
        """
        self._check_open()
        if self._offset >= self._size:
            return b""
        end = self._size if count < 0 else min(self._offset + count, self._size)
        data = bytes(self._buffer[self._offset : end])
        self._offset = end
        return data

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Read into a caller-owned buffer and return the byte count."""
        data = self.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def write(self, data: Buffer) -> int:
        """Write ``data`` at the cursor, growing the buffer as needed.

        A cursor past the end (after seeking beyond it) first zero-fills the
        gap, so the data always lands at the requested offset.

        Args:
            data: Bytes to write

        Returns:
            Number of bytes written

        Raises:
            AllocationFailed: If the buffer cannot be grown
        """
        self._check_open()
        payload = memoryview(data).cast("B")
        count = payload.nbytes
        end = self._offset + count

        try:
            buf = self._growable()
            if self._offset > len(buf):
                buf.extend(bytes(self._offset - len(buf)))
            buf[self._offset : end] = payload
        except MemoryError as e:
            raise AllocationFailed(
                f"cannot grow stream from {self._size} to {max(end, self._size)} bytes"
            ) from e

        self._size = len(buf)
        self._offset = end
        return count

    def reserve(self, count: int) -> int:
        """Extend the logical size by ``count`` zero bytes.

        The cursor does not move.

        Returns:
            The new size

        Raises:
            ValueError: If count is negative
            AllocationFailed: If the buffer cannot be grown
        """
        self._check_open()
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        try:
            buf = self._growable()
            buf.extend(bytes(count))
        except MemoryError as e:
            raise AllocationFailed(f"cannot reserve {count} bytes") from e
        self._size = len(buf)
        return self._size

    def seek(self, delta: int, mode: SeekMode | int = SeekMode.ABSOLUTE) -> int:
        """Move the cursor.

        Args:
            delta: Offset relative to the reference point of ``mode``
            mode: ABSOLUTE (from 0), RELATIVE (from the cursor) or
                FROM_END (from ``size``)

        Returns:
            The new cursor position

        Raises:
            InvalidSeek: If mode is unknown or the target is negative
        """
        self._check_open()
        try:
            mode = SeekMode(mode)
        except ValueError as e:
            raise InvalidSeek(f"unknown seek mode {mode!r}") from e

        if mode is SeekMode.ABSOLUTE:
            target = delta
        elif mode is SeekMode.RELATIVE:
            target = self._offset + delta
        else:
            target = self._size + delta

        if target < 0:
            raise InvalidSeek(f"cannot seek to negative offset {target}")
        self._offset = target
        return target

    def getvalue(self) -> bytes:
        """Return a copy of the valid bytes."""
        self._check_open()
        return bytes(self._buffer[: self._size])

    def detach(self) -> bytearray:
        """Hand the buffer over to the caller and close the stream.

        Returns:
            The backing buffer truncated to ``size``
        """
        self._check_open()
        buf = self._growable()
        self._buffer = bytearray()
        self._closed = True
        return buf

    def close(self) -> None:
        """Release the stream. Closing twice is allowed."""
        self._buffer = bytearray()
        self._closed = True

    def __enter__(self) -> MemoryStream:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _growable(self) -> bytearray:
        # Writes need a bytearray holding exactly the valid bytes
        if not isinstance(self._buffer, bytearray):
            self._buffer = bytearray(self._buffer[: self._size])
        elif len(self._buffer) > self._size:
            del self._buffer[self._size :]
        return self._buffer

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed stream")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"MemoryStream(size={self._size}, offset={self._offset}, {state})"


def open_image(image: Image) -> MemoryStream:
    """Open a read stream over the pixels of a fixed-stride image.

    Args:
        image: RGBA8888, RGB888 or RGB565 image

    Returns:
        MemoryStream sized ``width * height * stride``

    Raises:
        UnsupportedFormat: If the image has no fixed stride (RLE565)
    """
    if not isinstance(image, RasterImage):
        raise UnsupportedFormat(f"cannot open a stream over {image.format.value} image")
    return MemoryStream(image.pix, image.format.raw_size(image.width, image.height))
