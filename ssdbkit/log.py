"""Leveled logger that writes timestamped lines to stdout, stderr or a rotating file."""

from __future__ import annotations

import contextlib
import os
import sys
import threading
from datetime import datetime
from enum import IntEnum
from typing import BinaryIO


class Level(IntEnum):
    """Log levels; a message is written when its level is at most the logger's."""

    NONE = -1
    FATAL = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5
    MIN = 0
    MAX = 5


_PATH_MAX = 4096
_LOG_BUF_LEN = 4096
_STD_OUTPUTS = ("stdout", "stderr")

_TAGS = {
    Level.FATAL: "[FATAL] ",
    Level.ERROR: "[ERROR] ",
    Level.WARN: "[WARN ] ",
    Level.INFO: "[INFO ] ",
    Level.DEBUG: "[DEBUG] ",
    Level.TRACE: "[TRACE] ",
}

_NAMES = {
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warn",
    Level.INFO: "info",
    Level.DEBUG: "debug",
    Level.TRACE: "trace",
}

_LEVELS_BY_NAME = {
    "trace": Level.TRACE,
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "error": Level.ERROR,
    "fatal": Level.FATAL,
    "none": Level.NONE,
}


class Logger:
    """Writes formatted log lines, optionally rotating the output file by size."""

    def __init__(self) -> None:
        self._file: BinaryIO | None = None
        self._filename = ""
        self._level: int = Level.DEBUG
        self._lock: threading.Lock | None = None
        self._rotate_size = 0
        self.written_current = 0
        self.written_total = 0

    @staticmethod
    def get_level(levelname: str) -> Level:
        """Level for a name such as "info"; unknown names give DEBUG."""
        return _LEVELS_BY_NAME.get(levelname, Level.DEBUG)

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = int(value)

    def level_name(self) -> str:
        """Lower-case name of the current level, or "" when it has none."""
        return _NAMES.get(self._level, "")

    def output_name(self) -> str:
        """The output given to :meth:`open`: a path, "stdout" or "stderr"."""
        return self._filename

    def rotate_size(self) -> int:
        """Size in bytes after which the output file is rotated; 0 disables it."""
        return self._rotate_size

    def open(
        self,
        filename: str,
        level: int = Level.DEBUG,
        is_threadsafe: bool = False,
        rotate_size: int = 0,
    ) -> None:
        """Direct output to ``filename``; raises OSError if the file cannot be opened."""
        if len(filename) > _PATH_MAX - 20:
            raise ValueError("log filename too long")
        self._level = int(level)
        self._rotate_size = rotate_size
        if is_threadsafe:
            self._lock = threading.Lock()
        self.close()
        self._filename = filename
        if filename in _STD_OUTPUTS:
            return
        self._file = open(filename, "ab")
        self.written_current = os.fstat(self._file.fileno()).st_size

    def close(self) -> None:
        """Close the output file, if any; further lines go to stdout."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def _rotate(self) -> None:
        assert self._file is not None
        self._file.close()
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        try:
            os.rename(self._filename, f"{self._filename}.{stamp}")
        except OSError:
            self._file = open(self._filename, "ab")
            return
        self._file = open(self._filename, "ab")
        self.written_current = 0

    def _emit(self, line: bytes) -> None:
        if self._file is None:
            stream = sys.stderr if self._filename == "stderr" else sys.stdout
            stream.write(line.decode("utf-8", "replace"))
            stream.flush()
            return
        self._file.write(line)
        self._file.flush()
        self.written_current += len(line)
        self.written_total += len(line)
        if self._rotate_size > 0 and self.written_current > self._rotate_size:
            self._rotate()

    def log(self, level: int, fmt: str, *args) -> int:
        """Write one line at ``level``; returns the bytes written (0 if filtered)."""
        if self._level < level:
            return 0
        now = datetime.now()
        prefix = (
            f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d} "
            f"{_TAGS.get(level, '')}"
        ).encode("ascii")
        message = (fmt % args if args else fmt).encode("utf-8")
        space = _LOG_BUF_LEN - len(prefix) - 10
        line = prefix + message[: space - 1] + b"\n"
        with self._lock if self._lock is not None else contextlib.nullcontext():
            self._emit(line)
        return len(line)

    def trace(self, fmt: str, *args) -> int:
        return self.log(Level.TRACE, fmt, *args)

    def debug(self, fmt: str, *args) -> int:
        return self.log(Level.DEBUG, fmt, *args)

    def info(self, fmt: str, *args) -> int:
        return self.log(Level.INFO, fmt, *args)

    def warn(self, fmt: str, *args) -> int:
        return self.log(Level.WARN, fmt, *args)

    def error(self, fmt: str, *args) -> int:
        return self.log(Level.ERROR, fmt, *args)

    def fatal(self, fmt: str, *args) -> int:
        return self.log(Level.FATAL, fmt, *args)


_shared = Logger()

_SET_LEVEL_NAMES = {
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
    "trace": Level.TRACE,
}


def shared_logger() -> Logger:
    """The process-wide logger used by the module-level functions."""
    return _shared


def log_open(
    filename: str,
    level: int = Level.DEBUG,
    is_threadsafe: bool = False,
    rotate_size: int = 0,
) -> None:
    """Open the shared logger's output."""
    _shared.open(filename, level, is_threadsafe, rotate_size)


def log_level() -> int:
    """Current level of the shared logger."""
    return _shared.level


def set_log_level(level: int | str) -> None:
    """Set the shared logger's level from a number or a case-insensitive name."""
    if isinstance(level, str):
        _shared.level = _SET_LEVEL_NAMES.get(level.lower(), Level.DEBUG)
    else:
        _shared.level = level


def log_write(level: int, fmt: str, *args) -> int:
    """Write one line through the shared logger."""
    return _shared.log(level, fmt, *args)