"""Tests for MemoryStream."""

import pytest

from png2rle.components.image import RGB888Image, RLE565Image
from png2rle.core.errors import AllocationFailed, InvalidSeek, Png2RleError, UnsupportedFormat
from png2rle.core.stream import MemoryStream, SeekMode, open_image


class TestOpen:
    """Tests for opening streams."""

    def test_empty_stream(self) -> None:
        """Test that a stream opened without a buffer is empty."""
        stream = MemoryStream()
        assert stream.size == 0
        assert stream.offset == 0
        assert stream.read(4) == b""

    def test_open_classmethod(self) -> None:
        """Test MemoryStream.open with an initial size."""
        stream = MemoryStream.open(b"abcdef", 3)
        assert stream.size == 3
        assert stream.read() == b"abc"

    def test_size_larger_than_buffer(self) -> None:
        """Test that size beyond the buffer raises ValueError."""
        with pytest.raises(ValueError, match="size must be in"):
            MemoryStream(b"abc", 4)

    def test_negative_size(self) -> None:
        """Test that negative size raises ValueError."""
        with pytest.raises(ValueError):
            MemoryStream(b"abc", -1)

    def test_memoryview_buffer(self) -> None:
        """Test opening a stream over a memoryview."""
        stream = MemoryStream(memoryview(b"abc"))
        assert stream.read() == b"abc"


class TestRead:
    """Tests for bounded reads."""

    def test_truncated_read(self) -> None:
        """Test reading past the end returns the remainder, then nothing."""
        stream = MemoryStream(b"abcdef")
        assert stream.read(4) == b"abcd"
        assert stream.read(4) == b"ef"
        assert stream.offset == 6
        assert stream.read(4) == b""
        assert stream.offset == 6

    def test_read_all(self) -> None:
        """Test that a negative count reads to the end."""
        stream = MemoryStream(b"abcdef")
        stream.seek(2)
        assert stream.read() == b"cdef"

    def test_readinto(self) -> None:
        """Test readinto returns the number of bytes copied."""
        buf = bytearray(4)
        stream = MemoryStream(b"xy")
        assert stream.readinto(buf) == 2
        assert buf == bytearray(b"xy\x00\x00")
        assert stream.readinto(buf) == 0

    def test_read_after_seek_past_end(self) -> None:
        """Test that reading beyond the end is end-of-stream, not an error."""
        stream = MemoryStream(b"ab")
        stream.seek(10)
        assert stream.read(1) == b""


class TestWrite:
    """Tests for growing writes."""

    def test_round_trip(self) -> None:
        """Test writing N bytes then reading them back."""
        data = bytes(range(256)) * 4
        stream = MemoryStream()

        assert stream.write(data) == len(data)
        assert stream.offset == len(data)
        stream.seek(0)
        assert stream.read(len(data)) == data
        assert stream.size == len(data)

    def test_writes_append(self) -> None:
        """Test that consecutive writes grow the stream."""
        stream = MemoryStream()
        stream.write(b"ab")
        stream.write(b"cd")
        assert stream.size == 4
        assert stream.offset == 4
        assert stream.getvalue() == b"abcd"

    def test_write_adopts_bytearray(self) -> None:
        """Test that a bytearray buffer is written in place, not copied."""
        buf = bytearray(b"abc")
        stream = MemoryStream(buf)
        stream.seek(0, SeekMode.FROM_END)
        stream.write(b"d")
        assert buf == bytearray(b"abcd")

    def test_write_copies_readonly_buffer(self) -> None:
        """Test that a bytes buffer is copied on the first write."""
        data = b"abc"
        stream = MemoryStream(data)
        stream.write(b"X")
        assert stream.getvalue() == b"Xbc"
        assert stream.size == 3
        assert data == b"abc"

    def test_write_drops_bytes_beyond_size(self) -> None:
        """Test that bytes past the initial size are not part of the stream."""
        stream = MemoryStream(bytearray(b"abcdef"), 2)
        stream.seek(0, SeekMode.FROM_END)
        stream.write(b"Z")
        assert stream.getvalue() == b"abZ"

    def test_write_after_seek_past_end(self) -> None:
        """Test that a write past the end lands at the requested offset."""
        stream = MemoryStream(b"ab")
        assert stream.seek(2, SeekMode.FROM_END) == 4
        assert stream.size == 2

        stream.write(b"Z")
        assert stream.getvalue() == b"ab\x00\x00Z"
        assert stream.size == 5
        assert stream.offset == 5

    def test_allocation_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that MemoryError while growing raises AllocationFailed."""
        stream = MemoryStream()
        stream.write(b"ab")

        def out_of_memory() -> bytearray:
            raise MemoryError

        monkeypatch.setattr(stream, "_growable", out_of_memory)
        with pytest.raises(AllocationFailed):
            stream.write(b"cd")
        assert stream.size == 2
        assert stream.offset == 2

    def test_reserve(self) -> None:
        """Test reserve extends the size with zeros without moving the cursor."""
        stream = MemoryStream()
        assert stream.reserve(4) == 4
        assert stream.offset == 0
        assert stream.getvalue() == bytes(4)

    def test_reserve_negative(self) -> None:
        """Test that a negative reservation raises ValueError."""
        with pytest.raises(ValueError, match="non-negative"):
            MemoryStream().reserve(-1)


class TestSeek:
    """Tests for the three seek modes."""

    def test_absolute(self) -> None:
        stream = MemoryStream(b"abcdef")
        assert stream.seek(3) == 3
        assert stream.tell() == 3
        assert stream.read(1) == b"d"

    def test_relative(self) -> None:
        stream = MemoryStream(b"abcdef")
        stream.seek(2)
        assert stream.seek(1, SeekMode.RELATIVE) == 3
        assert stream.seek(-1, SeekMode.RELATIVE) == 2
        assert stream.read(1) == b"c"

    def test_from_end(self) -> None:
        stream = MemoryStream(b"abcdef")
        assert stream.seek(-2, SeekMode.FROM_END) == 4
        assert stream.read() == b"ef"

    def test_integer_mode(self) -> None:
        """Test that plain integers are accepted as modes."""
        stream = MemoryStream(b"abcdef")
        assert stream.seek(0, 2) == 6

    def test_negative_absolute(self) -> None:
        """Test that a negative target raises InvalidSeek."""
        with pytest.raises(InvalidSeek, match="negative offset"):
            MemoryStream(b"ab").seek(-1)

    def test_negative_from_end(self) -> None:
        with pytest.raises(InvalidSeek):
            MemoryStream(b"ab").seek(-3, SeekMode.FROM_END)

    def test_unknown_mode(self) -> None:
        """Test that a mode outside the three raises InvalidSeek."""
        with pytest.raises(InvalidSeek, match="unknown seek mode"):
            MemoryStream(b"ab").seek(0, 7)

    def test_failed_seek_keeps_offset(self) -> None:
        stream = MemoryStream(b"abc")
        stream.seek(1)
        with pytest.raises(Png2RleError):
            stream.seek(-5, SeekMode.RELATIVE)
        assert stream.offset == 1


class TestLifecycle:
    """Tests for close, detach and the context manager."""

    def test_close(self) -> None:
        stream = MemoryStream(b"abc")
        stream.close()
        assert stream.closed
        with pytest.raises(ValueError, match="closed stream"):
            stream.read(1)
        with pytest.raises(ValueError, match="closed stream"):
            stream.write(b"x")

    def test_close_twice(self) -> None:
        stream = MemoryStream()
        stream.close()
        stream.close()
        assert stream.closed

    def test_context_manager(self) -> None:
        with MemoryStream(b"abc") as stream:
            assert stream.read(1) == b"a"
        assert stream.closed

    def test_detach(self) -> None:
        """Test detach hands over the buffer and closes the stream."""
        stream = MemoryStream()
        stream.write(b"abc")
        buf = stream.detach()
        assert isinstance(buf, bytearray)
        assert buf == bytearray(b"abc")
        assert stream.closed
        with pytest.raises(ValueError):
            stream.detach()

    def test_detach_truncates_to_size(self) -> None:
        assert MemoryStream(bytearray(b"abcdef"), 2).detach() == bytearray(b"ab")

    def test_repr(self) -> None:
        stream = MemoryStream(b"abc")
        stream.seek(1)
        assert repr(stream) == "MemoryStream(size=3, offset=1, open)"


class TestOpenImage:
    """Tests for opening streams over images."""

    def test_raster_image(self) -> None:
        image = RGB888Image(width=2, height=1, pix=b"\x01\x02\x03\x04\x05\x06")
        with open_image(image) as stream:
            assert stream.size == 6
            assert stream.read(3) == b"\x01\x02\x03"

    def test_rle_image(self) -> None:
        """Test that RLE565 images have no fixed-size stream."""
        image = RLE565Image(width=1, height=1, data=b"\x01\x00\x00\x00")
        with pytest.raises(UnsupportedFormat):
            open_image(image)
