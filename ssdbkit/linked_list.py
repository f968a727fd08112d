"""Doubly linked list of caller-owned nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(eq=False)
class Node:
    """A list node carrying a value and its neighbour links."""

    value: Any = None
    prev: Node | None = field(default=None, repr=False)
    next: Node | None = field(default=None, repr=False)


class LinkedList:
    """A doubly linked list with constant-time removal of any node."""

    def __init__(self) -> None:
        self.size = 0
        self.head: Node | None = None
        self.tail: Node | None = None

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Node]:
        # The successor is taken before yielding, so the yielded node may be removed.
        node = self.head
        while node is not None:
            following = node.next
            yield node
            node = following

    def empty(self) -> bool:
        return self.size == 0

    def remove(self, node: Node) -> None:
        """Unlink a node that is in this list."""
        self.size -= 1
        if node.prev is not None:
            node.prev.next = node.next
        if node.next is not None:
            node.next.prev = node.prev
        if self.head is node:
            self.head = node.next
        if self.tail is node:
            self.tail = node.prev
        node.prev = node.next = None

    def pop_front(self) -> Node:
        """Remove and return the first node; IndexError when empty."""
        if self.head is None:
            raise IndexError("pop from empty list")
        node = self.head
        self.remove(node)
        return node

    def push_back(self, node: Node) -> None:
        """Append a node at the end."""
        self.size += 1
        node.prev = self.tail
        node.next = None
        if self.tail is not None:
            self.tail.next = node
        else:
            self.head = node
        self.tail = node