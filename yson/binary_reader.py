"""Readers that hand out consecutive tokens of a binary input."""

from __future__ import annotations

import os
import sys
from typing import BinaryIO

DEFAULT_CHUNK_SIZE = 64 * 1024


class BinaryReaderError(Exception):
    """Raised when a binary reader cannot do what it was asked."""


def _to_native(data: bytes, unit_size: int) -> bytes:
    """Convert big-endian units of *unit_size* bytes to the native byte order."""
    if unit_size <= 1 or sys.byteorder == "big":
        return bytes(data)
    return b"".join(
        data[offset:offset + unit_size][::-1]
        for offset in range(0, len(data), unit_size)
    )


class BinaryBufferReader:
    """Reads tokens from a bytes-like object held in memory."""

    def __init__(self, buffer: bytes | bytearray | memoryview) -> None:
        self._buffer = bytes(buffer)
        self._start = 0
        self._end = 0

    def advance(self, count: int) -> bool:
        """Skip *count* bytes after the current token; False if input ran out."""
        actual = min(count, len(self._buffer) - self._end)
        self._end += actual
        self._start = self._end
        return actual == count

    def data(self) -> bytes:
        """Return the bytes of the current token."""
        return self._buffer[self._start:self._end]

    def front(self) -> int:
        """Return the first byte of the current token."""
        if self._start == self._end:
            raise BinaryReaderError("The current token is empty.")
        return self._buffer[self._start]

    def position(self) -> int:
        """Return the offset of the current token from the start of the input."""
        return self._start

    def peek(self) -> int | None:
        """Return the byte after the current token, or None at the end."""
        if self._end < len(self._buffer):
            return self._buffer[self._end]
        return None

    def read(self, size: int) -> bool:
        """Make the next *size* bytes the current token; False if input ran out."""
        actual = min(size, len(self._buffer) - self._end)
        self._start = self._end
        self._end += actual
        return actual == size

    def size(self) -> int:
        """Return the length of the current token."""
        return self._end - self._start

    def read_units(self, size: int, unit_size: int) -> bytes | None:
        """Read *size* bytes of big-endian units and return them in native order.

        Returns None, with the reader at the end of the input, if fewer than
        *size* bytes remain. On success the current token is left empty.
        """
        actual = min(size, len(self._buffer) - self._end)
        self._start = self._end
        self._end += actual
        if actual != size:
            self._start = self._end
            return None
        data = self._buffer[self._start:self._end]
        self._start = self._end
        return _to_native(data, unit_size)


class BinaryStreamReader:
    """Reads tokens from a binary stream through an internal buffer.

    *initial* holds bytes that were already taken from the stream and come
    before whatever the stream still has.
    """

    def __init__(
        self,
        stream: BinaryIO,
        initial: bytes | bytearray = b"",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._buffer = bytearray(initial)
        self._chunk_size = chunk_size
        self._start = 0
        self._end = 0

    def advance(self, count: int) -> bool:
        """Skip *count* bytes after the current token; False if input ran out."""
        self._start = self._end
        remainder = self._remaining_after_value()
        if count <= remainder:
            self._start += count
            self._end = self._start
            return True
        self._start += remainder
        self._end = self._start
        return self._skip_stream(count - remainder) == count - remainder

    def data(self) -> bytes:
        """Return the bytes of the current token."""
        return bytes(self._buffer[self._start:self._end])

    def front(self) -> int:
        """Return the first byte of the current token."""
        if self._start == self._end:
            raise BinaryReaderError("The current token is empty.")
        return self._buffer[self._start]

    def position(self) -> int:
        """Return the offset of the current token in the stream, or 0 if unknown."""
        try:
            pos = self._stream.tell()
        except (OSError, AttributeError):
            return 0
        if pos < 0:
            return 0
        return pos - self._remaining_including_value()

    def peek(self) -> int | None:
        """Return the byte after the current token, or None at the end."""
        if self._remaining_after_value() != 0 or self._fill_buffer(1 + self.size()):
            return self._buffer[self._end]
        return None

    def read(self, size: int) -> bool:
        """Make the next *size* bytes the current token; False if input ran out."""
        self._start = self._end
        if size > self._remaining_after_value() and not self._fill_buffer(size):
            return False
        self._end = self._start + size
        return True

    def size(self) -> int:
        """Return the length of the current token."""
        return self._end - self._start

    def read_units(self, size: int, unit_size: int) -> bytes | None:
        """Read *size* bytes of big-endian units and return them in native order.

        Returns None if the input ends before *size* bytes were read.
        """
        self._start = self._end
        remainder = self._remaining_after_value()
        if size <= remainder:
            self._end = self._start + size
            return _to_native(bytes(self._buffer[self._start:self._end]), unit_size)

        head = bytes(self._buffer[self._start:self._start + remainder])
        self._start += remainder
        self._end = self._start
        tail = self._read_stream(size - remainder)
        if len(head) + len(tail) != size:
            return None
        return _to_native(head + tail, unit_size)

    def _fill_buffer(self, size: int) -> bool:
        remainder = self._remaining_including_value()
        token_size = self._end - self._start
        target = max(self._chunk_size, size)
        kept = self._buffer[self._start:]
        more = self._read_stream(target - remainder) if target > remainder else b""
        kept.extend(more)
        self._buffer = kept
        self._start = 0
        self._end = token_size
        return len(self._buffer) >= size

    def _read_stream(self, count: int) -> bytes:
        pieces = []
        while count > 0:
            piece = self._stream.read(count)
            if not piece:
                break
            pieces.append(piece)
            count -= len(piece)
        return b"".join(pieces)

    def _skip_stream(self, count: int) -> int:
        skipped = 0
        while skipped < count:
            piece = self._stream.read(min(self._chunk_size, count - skipped))
            if not piece:
                break
            skipped += len(piece)
        return skipped

    def _remaining_after_value(self) -> int:
        return len(self._buffer) - self._end

    def _remaining_including_value(self) -> int:
        return len(self._buffer) - self._start


class BinaryFileReader(BinaryStreamReader):
    """Reads tokens from a file opened in binary mode."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        try:
            file = open(path, "rb")
        except OSError as exc:
            raise BinaryReaderError(f"Unable to open file: {os.fspath(path)}") from exc
        super().__init__(file, chunk_size=chunk_size)
        self._file = file

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> BinaryFileReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()