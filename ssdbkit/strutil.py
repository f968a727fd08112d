"""String helpers: escaping, lenient number parsing, slicing and byte tricks."""

from __future__ import annotations

import math
import os
import re
from typing import Sequence, TypeVar, Union

BytesLike = Union[bytes, bytearray, memoryview, str]
S = TypeVar("S", bound=Sequence)

INT32_MIN = -(2**31)
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_C_SPACE = " \t\n\v\f\r"

_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_UNESCAPE_RE = re.compile(rb"\\(?:x(..)|(.)|\Z)", re.DOTALL)

_SIMPLE_UNESCAPES = {
    b"a": b"\a",
    b"b": b"\b",
    b"f": b"\f",
    b"v": b"\v",
    b"r": b"\r",
    b"n": b"\n",
    b"t": b"\t",
    b"\\": b"\\",
    b"x": b"",
}


def _escape_byte(value: int) -> str:
    specials = {0x0D: "\\r", 0x0A: "\\n", 0x09: "\\t", 0x5C: "\\\\"}
    if value in specials:
        return specials[value]
    if 0x20 <= value <= 0x7E:
        return chr(value)
    return f"\\x{value:02x}"


_ESCAPE_TABLE = tuple(_escape_byte(b) for b in range(256))


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _to_text(data: BytesLike) -> str:
    if isinstance(data, str):
        return data
    return bytes(data).decode("latin-1")


def is_empty_str(s: str) -> bool:
    """True if the string holds only whitespace (or nothing)."""
    return s.strip(_C_SPACE) == ""


def real_dirname(filepath: str) -> str:
    """Directory part of a path, made absolute against the current directory."""
    prefix = "" if filepath.startswith("/") else os.getcwd() + "/"
    head, sep, _ = filepath.rpartition("/")
    return prefix + (head if sep else "")


def str_escape(data: BytesLike) -> str:
    """Escape bytes into printable ASCII using \\r, \\n, \\t, \\\\ and \\xNN."""
    return "".join(_ESCAPE_TABLE[b] for b in _to_bytes(data))


def _hex_digit(c: int) -> int:
    if 0x30 <= c <= 0x39:
        return c - 0x30
    return c - 0x61 + 10


def _unescape_match(match: re.Match) -> bytes:
    pair, single = match.group(1), match.group(2)
    if pair is not None:
        return bytes([((_hex_digit(pair[0]) << 4) + _hex_digit(pair[1])) & 0xFF])
    if single is not None:
        return _SIMPLE_UNESCAPES.get(single, single)
    return b""


def str_unescape(data: BytesLike) -> bytes:
    """Reverse of :func:`str_escape`, returning raw bytes."""
    return _UNESCAPE_RE.sub(_unescape_match, _to_bytes(data))


def hexmem(data: BytesLike) -> str:
    """Printable form of a memory block."""
    return str_escape(data)


def dump(data: BytesLike, msg: str | None = None) -> None:
    """Print a memory block in escaped form, prefixed by ``msg``."""
    print(f"{'dump' if msg is None else msg} <{hexmem(data)}>")


def format_number(value: int | float) -> str:
    """Format a number; whole floats lose their fraction, others get six places."""
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            text = "%.0f" % value
        else:
            text = "%f" % value
        return text[:20]
    return str(int(value))


def _parse_integer(s: BytesLike) -> tuple[bool, int, bool]:
    """Return (negative, magnitude, whole_string_consumed)."""
    text = _to_text(s)
    match = _INT_RE.match(text)
    if match is None:
        return False, 0, text == ""
    return match.group(1) == "-", int(match.group(2)), match.end() == len(text)


def _invalid(s: BytesLike) -> ValueError:
    return ValueError(f"invalid integer: {s!r}")


def str_to_int64(s: BytesLike) -> int:
    """Parse a whole-string decimal integer, clamped to the int64 range."""
    negative, magnitude, complete = _parse_integer(s)
    if not complete:
        raise _invalid(s)
    value = -magnitude if negative else magnitude
    return max(INT64_MIN, min(INT64_MAX, value))


def str_to_int(s: BytesLike) -> int:
    """Parse a whole-string decimal integer, truncated to 32 bits."""
    value = str_to_int64(s)
    return ((value - INT32_MIN) % 2**32) + INT32_MIN


def str_to_uint64(s: BytesLike) -> int:
    """Parse a whole-string decimal integer as uint64; negatives wrap around."""
    negative, magnitude, complete = _parse_integer(s)
    if not complete:
        raise _invalid(s)
    if magnitude > UINT64_MAX:
        return UINT64_MAX
    return (-magnitude) % 2**64 if negative else magnitude


def str_to_double(s: BytesLike) -> float:
    """Parse the leading floating point number; 0.0 when there is none."""
    match = _FLOAT_RE.match(_to_text(s))
    if match is None:
        return 0.0
    return float(match.group(1))


def substr(s: S, start: int, size: int) -> S:
    """Take ``size`` items from ``start``; negatives count from the end."""
    length = len(s)
    if start < 0:
        start += length
    if size < 0:
        size = (length + size) - start
    if start < 0 or start >= length or size < 0:
        return s[:0]
    return s[start:start + size]


def str_slice(s: S, start: int, end: int) -> S:
    """Take items from ``start`` to ``end`` inclusive; negatives count from the end."""
    length = len(s)
    if start < 0:
        start += length
    size = (length + end + 1) - start if end < 0 else end - start + 1
    if start < 0 or start >= length or size < 0:
        return s[:0]
    return s[start:start + size]


def bitcount(data: BytesLike) -> int:
    """Number of set bits in the data."""
    return sum(b.bit_count() for b in _to_bytes(data))


def _swap(value: int, width: int) -> int:
    mask = (1 << (8 * width)) - 1
    return int.from_bytes((value & mask).to_bytes(width, "little"), "big")


def big_endian16(value: int) -> int:
    """Swap the byte order of a 16-bit value."""
    return _swap(value, 2)


def big_endian32(value: int) -> int:
    """Swap the byte order of a 32-bit value."""
    return _swap(value, 4)


def big_endian64(value: int) -> int:
    """Swap the byte order of a 64-bit value."""
    return _swap(value, 8)