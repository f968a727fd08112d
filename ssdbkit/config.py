"""Hierarchical configuration files indented with tabs.

Each non-blank line is ``key: value`` or ``key = value``. One extra leading
tab makes an item a child of the item above it. Lines whose first non-tab
character is ``#`` are comments. Items are looked up by paths whose parts
are separated by ``.`` or ``/``.
"""

from __future__ import annotations

import os
import re
import sys
from typing import IO, Iterable, Union

from ssdbkit.strutil import INT64_MAX, INT64_MIN, is_empty_str

_SPACE = " \t\n\v\f\r"
_SEPARATOR = re.compile(r"[=:]")
_PATH_SEP = re.compile(r"[./]")
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

Target = Union[str, os.PathLike, IO[str]]


def _leading_int64(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return max(INT64_MIN, min(INT64_MAX, int(match.group(1))))


def _wrap_int32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed."""

    def __init__(self, message: str, lineno: int) -> None:
        super().__init__(message)
        self.lineno = lineno


class Config:
    """One configuration item with its value and its child items."""

    def __init__(self, key: str = "", val: str = "") -> None:
        self.key = key
        self.val = val
        self.children: list[Config] = []
        self.parent: Config | None = None
        self.depth = 0

    def __str__(self) -> str:
        return f"{self.key}: {self.val}"

    def __repr__(self) -> str:
        return f"Config(key={self.key!r}, val={self.val!r})"

    def _add_child(self, key: str, val: str = "") -> Config:
        child = Config(key, val)
        child.parent = self
        child.depth = self.depth + 1
        self.children.append(child)
        return child

    def _find_child(self, key: str) -> Config | None:
        for child in reversed(self.children):
            if child.key == key:
                return child
        return None

    @classmethod
    def load(cls, filename: str | os.PathLike) -> Config:
        """Parse a file ("stdin" reads standard input) into a tree rooted at "root".

        Raises OSError if the file cannot be read and ConfigError on bad syntax.
        """
        if filename == "stdin":
            return cls._parse(sys.stdin)
        with open(filename, encoding="utf-8", newline="\n") as fp:
            return cls._parse(fp)

    @classmethod
    def _parse(cls, lines: Iterable[str]) -> Config:
        root = cls("root", "")
        cfg = root
        last_indent = 0
        for lineno, raw in enumerate(lines, 1):
            line = raw[:-1] if raw.endswith("\n") else raw
            if is_empty_str(line):
                continue
            body = line.lstrip("\t")
            indent = len(line) - len(body)
            if body.startswith("#"):
                cfg._add_child("#", body[1:])
                continue
            if indent <= last_indent:
                for _ in range(last_indent - indent + 1):
                    if cfg is not root and cfg.parent is not None:
                        cfg = cfg.parent
            elif indent > last_indent + 1:
                raise ConfigError(f"invalid indent line({lineno})", lineno)
            if body[0] in _SPACE:
                raise ConfigError(
                    f"invalid line({lineno}): unexpected whitespace char {body[0]!r}",
                    lineno,
                )
            match = _SEPARATOR.search(body)
            if match is None:
                raise ConfigError(
                    f"invalid line({lineno}): {body}, expecting ':' or '='", lineno
                )
            key = body[: match.start()].strip(_SPACE)
            val = body[match.end():].strip(_SPACE)
            cfg = cfg._add_child(key, val)
            last_indent = indent
        return root

    def save(self, target: Target) -> None:
        """Write the children of this item to a path, "stdout", "stderr" or a text stream."""
        if isinstance(target, (str, os.PathLike)):
            if target == "stdout":
                self._write(sys.stdout)
            elif target == "stderr":
                self._write(sys.stderr)
            else:
                with open(target, "w", encoding="utf-8") as fp:
                    self._write(fp)
        else:
            self._write(target)

    def _write(self, fp: IO[str]) -> None:
        indent = "\t" * self.depth
        for child in self.children:
            if child.is_comment():
                fp.write(f"{indent}#{child.val}\n")
            else:
                fp.write(f"{indent}{child.key}: {child.val}\n")
            child._write(fp)

    def set(self, key: str, val: str) -> Config:
        """Set the value at a path, creating missing items; returns the item."""
        node = self
        for field in _PATH_SEP.split(key):
            child = node._find_child(field)
            node = child if child is not None else node._add_child(field)
        node.val = val
        return node

    def get(self, key: str) -> Config | None:
        """The item at a path, or None. Later duplicates win over earlier ones."""
        node: Config | None = self
        for field in _PATH_SEP.split(key):
            node = node._find_child(field)
            if node is None:
                return None
        return node

    def num(self) -> int:
        """The value read as a leading decimal integer; 0 if it has none."""
        return _wrap_int32(_leading_int64(self.val))

    def get_num(self, key: str) -> int:
        """Integer value at a path; 0 when missing."""
        item = self.get(key)
        return 0 if item is None else item.num()

    def get_int64(self, key: str) -> int:
        """64-bit integer value at a path; 0 when missing."""
        item = self.get(key)
        return 0 if item is None else _leading_int64(item.val)

    def get_str(self, key: str) -> str:
        """String value at a path; "" when missing."""
        item = self.get(key)
        return "" if item is None else item.val

    def is_comment(self) -> bool:
        return self.key.startswith("#")