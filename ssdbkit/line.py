"""Line-oriented encoding: one escaped value per line."""

from __future__ import annotations

from typing import Iterator, Union

from ssdbkit.strutil import format_number, str_escape, str_to_int, str_to_int64, str_unescape

BytesLike = Union[bytes, bytearray, memoryview, str]


class LineEncoder:
    """Collects values as escaped, newline-terminated lines."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def write(self, data: BytesLike | int) -> None:
        """Append a string, bytes or integer as one line."""
        if isinstance(data, int):
            text = format_number(data)
        else:
            text = str_escape(data)
        self._parts.append(text + "\n")

    def value(self) -> str:
        """Everything written so far."""
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.value()


class LineDecoder:
    """Reads back lines produced by :class:`LineEncoder`."""

    def __init__(self, data: BytesLike) -> None:
        self._data = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._pos = 0

    def read(self) -> bytes:
        """The next line, unescaped; raises EOFError when no complete line is left."""
        end = self._data.find(b"\n", self._pos)
        if end < 0:
            self._pos = len(self._data)
            raise EOFError("no complete line left")
        line = self._data[self._pos:end]
        self._pos = end + 1
        return str_unescape(line)

    def readline(self) -> bytes:
        return self.read()

    def read_int(self) -> int:
        """The next line as a 32-bit integer; ValueError if it is not one."""
        return str_to_int(self.read())

    def read_int64(self) -> int:
        """The next line as a 64-bit integer; ValueError if it is not one."""
        return str_to_int64(self.read())

    def __iter__(self) -> Iterator[bytes]:
        while True:
            try:
                yield self.read()
            except EOFError:
                return