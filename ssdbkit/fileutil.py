"""Small file-system helpers."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Union

PathLike = Union[str, os.PathLike]


def _mode(path: PathLike) -> int | None:
    try:
        return os.stat(path).st_mode
    except (OSError, ValueError):
        return None


def file_exists(path: PathLike) -> bool:
    """True if anything exists at the path."""
    return _mode(path) is not None


def is_dir(path: PathLike) -> bool:
    """True if the path is a directory."""
    mode = _mode(path)
    return mode is not None and stat.S_ISDIR(mode)


def is_file(path: PathLike) -> bool:
    """True if the path is a regular file."""
    mode = _mode(path)
    return mode is not None and stat.S_ISREG(mode)


def file_get_contents(path: PathLike) -> bytes:
    """Read a whole file; raises OSError if it cannot be opened."""
    return Path(path).read_bytes()


def file_put_contents(path: PathLike, content: bytes | str) -> int:
    """Write the whole content to a file and return the number of bytes written."""
    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    with open(path, "wb") as fp:
        written = fp.write(data)
    if written != len(data):
        raise OSError(f"short write to {os.fspath(path)!r}")
    return written