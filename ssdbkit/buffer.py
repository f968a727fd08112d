"""Growable byte buffer with length-prefixed record framing, and a binary decoder."""

from __future__ import annotations

import re
import struct
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview, str]

_MIN_GROW = 8 * 1024
_FAST_GROW_LIMIT = 512 * 1024
_HEADER_LIMIT = 20
_LEADING_DIGITS = re.compile(rb"[0-9]+")
_INT64 = struct.Struct("=q")
_UINT64 = struct.Struct("=Q")


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class ProtocolError(ValueError):
    """Raised when buffered data is not a well-formed record."""


class Buffer:
    """A byte buffer with a fixed capacity that grows on demand.

    Data is kept between a start offset and a fill point; consuming data
    advances the offset without moving what follows it.
    """

    def __init__(self, total: int) -> None:
        self._buf = bytearray(total)
        self._offset = 0
        self._size = 0

    @property
    def total(self) -> int:
        """Capacity of the buffer."""
        return len(self._buf)

    @property
    def size(self) -> int:
        """Number of bytes of data held."""
        return self._size

    @property
    def empty(self) -> bool:
        return self._size == 0

    @property
    def offset(self) -> int:
        """Position of the first data byte inside the buffer."""
        return self._offset

    @property
    def space(self) -> int:
        """Free bytes after the data."""
        return len(self._buf) - self._offset - self._size

    @property
    def data(self) -> bytes:
        """A copy of the data held."""
        return bytes(self._buf[self._offset:self._offset + self._size])

    def _reserve(self, needed: int) -> None:
        while needed > self.space:
            self.grow()

    def _put(self, data: bytes) -> None:
        start = self._offset + self._size
        self._buf[start:start + len(data)] = data
        self._size += len(data)

    def append(self, data: BytesLike) -> int:
        """Append raw bytes; returns how many were appended."""
        raw = _to_bytes(data)
        self._reserve(len(raw))
        self._put(raw)
        return len(raw)

    def append_record(self, data: BytesLike) -> int:
        """Append ``data`` framed as "<len>\\n<data>\\n"; returns the bytes appended."""
        raw = _to_bytes(data)
        self._reserve(16 + len(raw) + 1)
        framed = b"%d\n" % len(raw) + raw + b"\n"
        self._put(framed)
        return len(framed)

    def read_record(self) -> bytes | None:
        """Take one framed record off the front.

        Returns None when the record is not complete yet and raises
        ProtocolError when the data cannot be a record.
        """
        view = self._buf[self._offset:self._offset + self._size]
        newline = view.find(b"\n")
        if newline < 0:
            return None
        head_len = newline + 1
        if not 0x30 <= view[0] <= 0x39:
            raise ProtocolError("record header must start with a digit")
        if head_len + 1 > _HEADER_LIMIT:
            raise ProtocolError("record header too long")
        digits = _LEADING_DIGITS.match(view, 0, newline)
        body_len = int(digits.group(0))
        end = head_len + body_len
        if self._size < end + 1:
            return None
        terminator = view[end]
        if terminator == 0x0A:
            consumed = end + 1
        elif terminator == 0x0D:
            if self._size < end + 2:
                return None
            if view[end + 1] != 0x0A:
                raise ProtocolError("bad record terminator")
            consumed = end + 2
        else:
            raise ProtocolError("bad record terminator")
        body = bytes(view[head_len:end])
        self.decr(consumed)
        return body

    def incr(self, n: int) -> None:
        """Count ``n`` bytes placed after the data as part of it."""
        if n < 0 or n > self.space:
            raise ValueError(f"cannot extend data by {n} bytes")
        self._size += n

    def decr(self, n: int) -> None:
        """Drop ``n`` bytes from the front of the data."""
        if n < 0 or n > self._size:
            raise ValueError(f"cannot consume {n} of {self._size} bytes")
        self._size -= n
        self._offset += n

    def nice(self) -> None:
        """Move the data to the start once the buffer is empty or the front half is used up."""
        if self._size == 0 or self._offset > len(self._buf) // 2:
            if self._size > 0:
                self._buf[0:self._size] = self._buf[self._offset:self._offset + self._size]
            self._offset = 0

    def grow(self) -> int:
        """Enlarge the buffer and return the new capacity."""
        total = len(self._buf)
        if total < _MIN_GROW:
            new_total = _MIN_GROW
        elif total < _FAST_GROW_LIMIT:
            new_total = 8 * total
        else:
            new_total = 2 * total
        self._buf.extend(bytes(new_total - total))
        return new_total

    def shrink(self, total: int = 0) -> None:
        """Resize to ``total`` (8 KiB when not positive) unless the data would not fit."""
        if total <= 0:
            total = _MIN_GROW
        if self._offset + self._size > total:
            return
        current = len(self._buf)
        if total < current:
            del self._buf[total:]
        else:
            self._buf.extend(bytes(total - current))

    def stats(self) -> str:
        """One-line summary of capacity, offset, size and fill point."""
        return "total: %d, data: %d, size: %d, slot: %d" % (
            len(self._buf),
            self._offset,
            self._size,
            self._offset + self._size,
        )


class DecodeError(ValueError):
    """Raised when a Decoder runs out of data."""


class Decoder:
    """Reads fixed-width and length-prefixed fields from a byte string."""

    def __init__(self, data: BytesLike) -> None:
        self._data = _to_bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        """Bytes not yet read."""
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if self.remaining < n:
            raise DecodeError(f"need {n} bytes, {self.remaining} left")
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def skip(self, n: int) -> int:
        """Skip ``n`` bytes and return ``n``."""
        self._take(n)
        return n

    def read_int64(self) -> int:
        """Read a signed 64-bit integer in native byte order."""
        return _INT64.unpack(self._take(_INT64.size))[0]

    def read_uint64(self) -> int:
        """Read an unsigned 64-bit integer in native byte order."""
        return _UINT64.unpack(self._take(_UINT64.size))[0]

    def read_data(self) -> bytes:
        """Read everything that is left."""
        return self._take(self.remaining)

    def read_8_data(self) -> bytes:
        """Read a field prefixed by a one-byte length."""
        if self.remaining < 1:
            raise DecodeError("missing length byte")
        length = self._data[self._pos]
        if self.remaining - 1 < length:
            raise DecodeError(f"need {length} bytes, {self.remaining - 1} left")
        self._pos += 1
        return self._take(length)