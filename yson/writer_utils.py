"""Helpers used when laying out JSON text on lines of limited width."""

from __future__ import annotations

_BACKSLASH = 0x5C


def _as_bytes(s: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(s, str):
        return s.encode("utf-8")
    return bytes(s)


def find_split_pos(s: bytes | bytearray | memoryview | str, suggested_pos: int) -> int:
    """Return a byte offset near *suggested_pos* where *s* may be split.

    The split never lands inside a UTF-8 multi-byte sequence, and never
    separates an escaping backslash from the character it escapes. If the
    suggested position is within two bytes of the end, the whole string is
    kept together and its length is returned. A str is measured in its
    UTF-8 encoding.
    """
    data = _as_bytes(s)
    size = len(data)
    if suggested_pos >= size - 2:
        return size

    pos = suggested_pos
    if data[pos] & 0xC0 == 0x80:
        pos += 1
        while pos != size and data[pos] & 0xC0 == 0x80:
            pos += 1
        return pos

    if pos > 0 and data[pos - 1] == _BACKSLASH:
        backslash_count = 1
        pos -= 1
        while pos > 0:
            pos -= 1
            if data[pos] != _BACKSLASH:
                backslash_count = suggested_pos - pos - 1
                break
        if backslash_count & 1:
            return suggested_pos - 1
    return suggested_pos


def current_line_width(buffer: bytes | bytearray | memoryview | str, max_line_width: int) -> int:
    """Return the width of the line that ends at offset ``min(len(buffer), max_line_width)``.

    Both ``\\n`` and ``\\r`` end a line. Without a line break in that range
    the whole range counts as one line.
    """
    data = _as_bytes(buffer)
    max_offset = min(len(data), max_line_width)
    newline = max(data.rfind(b"\n", 0, max_offset), data.rfind(b"\r", 0, max_offset))
    if newline < 0:
        return max_offset
    return max_offset - newline - 1