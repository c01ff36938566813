"""
Red-black tree run queue used by the completely fair scheduler.

Entries are ordered by ``(vruntime, pid)``: lower virtual runtime first, ties
broken by ordinal comparison of the process id so that the minimum is always
unique and deterministic.
"""

from __future__ import annotations

from typing import Any, Iterator, NamedTuple, Optional, Tuple


RED = True
BLACK = False

Key = Tuple[float, str]


class RunQueueEntry(NamedTuple):
    vruntime: float
    pid: str
    value: Any


class _Node:
    __slots__ = ("key", "value", "color", "left", "right", "parent")

    def __init__(self, key: Optional[Key], value: Any, color: bool, nil: Optional["_Node"] = None) -> None:
        self.key = key
        self.value = value
        self.color = color
        self.left = nil
        self.right = nil
        self.parent = nil


class RunQueue:
    """
    Self-balancing binary search tree with O(log n) insert and pop-minimum.

    Leaves are represented by a single shared black sentinel so the
    rebalancing code never has to special-case missing children.
    Not thread-safe; one instance per simulation run.
    """

    def __init__(self) -> None:
        self._nil = _Node(None, None, BLACK)
        self._nil.left = self._nil.right = self._nil.parent = self._nil
        self._root = self._nil
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def is_empty(self) -> bool:
        return self._root is self._nil

    def insert(self, vruntime: float, pid: str, value: Any = None) -> None:
        z = _Node((vruntime, pid), value, RED, self._nil)
        y = self._nil
        x = self._root
        while x is not self._nil:
            y = x
            x = x.left if z.key < x.key else x.right
        z.parent = y
        if y is self._nil:
            self._root = z
        elif z.key < y.key:
            y.left = z
        else:
            y.right = z
        self._insert_fixup(z)
        self._size += 1

    def min(self) -> Optional[RunQueueEntry]:
        if self.is_empty:
            return None
        node = self._minimum(self._root)
        return RunQueueEntry(node.key[0], node.key[1], node.value)

    def pop_min(self) -> Optional[RunQueueEntry]:
        """Remove and return the smallest entry, or ``None`` if the queue is empty."""
        if self.is_empty:
            return None
        node = self._minimum(self._root)
        self._delete(node)
        self._size -= 1
        return RunQueueEntry(node.key[0], node.key[1], node.value)

    def __iter__(self) -> Iterator[RunQueueEntry]:
        # In-order walk without recursion.
        stack = []
        node = self._root
        while stack or node is not self._nil:
            while node is not self._nil:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield RunQueueEntry(node.key[0], node.key[1], node.value)
            node = node.right

    # --- internal helpers ---

    def _minimum(self, node: _Node) -> _Node:
        while node.left is not self._nil:
            node = node.left
        return node

    def _rotate_left(self, x: _Node) -> None:
        y = x.right
        x.right = y.left
        if y.left is not self._nil:
            y.left.parent = x
        y.parent = x.parent
        if x.parent is self._nil:
            self._root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y
        y.left = x
        x.parent = y

    def _rotate_right(self, x: _Node) -> None:
        y = x.left
        x.left = y.right
        if y.right is not self._nil:
            y.right.parent = x
        y.parent = x.parent
        if x.parent is self._nil:
            self._root = y
        elif x is x.parent.right:
            x.parent.right = y
        else:
            x.parent.left = y
        y.right = x
        x.parent = y

    def _insert_fixup(self, z: _Node) -> None:
        while z.parent.color is RED:
            grandparent = z.parent.parent
            if z.parent is grandparent.left:
                uncle = grandparent.right
                if uncle.color is RED:
                    z.parent.color = BLACK
                    uncle.color = BLACK
                    grandparent.color = RED
                    z = grandparent
                else:
                    if z is z.parent.right:
                        z = z.parent
                        self._rotate_left(z)
                    z.parent.color = BLACK
                    z.parent.parent.color = RED
                    self._rotate_right(z.parent.parent)
            else:
                uncle = grandparent.left
                if uncle.color is RED:
                    z.parent.color = BLACK
                    uncle.color = BLACK
                    grandparent.color = RED
                    z = grandparent
                else:
                    if z is z.parent.left:
                        z = z.parent
                        self._rotate_right(z)
                    z.parent.color = BLACK
                    z.parent.parent.color = RED
                    self._rotate_left(z.parent.parent)
        self._root.color = BLACK

    def _transplant(self, u: _Node, v: _Node) -> None:
        if u.parent is self._nil:
            self._root = v
        elif u is u.parent.left:
            u.parent.left = v
        else:
            u.parent.right = v
        # May point the sentinel at u.parent; _delete_fixup walks up from it.
        v.parent = u.parent

    def _delete(self, z: _Node) -> None:
        y = z
        y_original_color = y.color
        if z.left is self._nil:
            x = z.right
            self._transplant(z, z.right)
        elif z.right is self._nil:
            x = z.left
            self._transplant(z, z.left)
        else:
            y = self._minimum(z.right)
            y_original_color = y.color
            x = y.right
            if y.parent is z:
                x.parent = y
            else:
                self._transplant(y, y.right)
                y.right = z.right
                y.right.parent = y
            self._transplant(z, y)
            y.left = z.left
            y.left.parent = y
            y.color = z.color
        if y_original_color is BLACK:
            self._delete_fixup(x)
        self._nil.parent = self._nil

    def _delete_fixup(self, x: _Node) -> None:
        # x carries an extra black; push it up or resolve it via the sibling.
        while x is not self._root and x.color is BLACK:
            if x is x.parent.left:
                w = x.parent.right
                if w.color is RED:
                    w.color = BLACK
                    x.parent.color = RED
                    self._rotate_left(x.parent)
                    w = x.parent.right
                if w.left.color is BLACK and w.right.color is BLACK:
                    w.color = RED
                    x = x.parent
                else:
                    if w.right.color is BLACK:
                        w.left.color = BLACK
                        w.color = RED
                        self._rotate_right(w)
                        w = x.parent.right
                    w.color = x.parent.color
                    x.parent.color = BLACK
                    w.right.color = BLACK
                    self._rotate_left(x.parent)
                    x = self._root
            else:
                w = x.parent.left
                if w.color is RED:
                    w.color = BLACK
                    x.parent.color = RED
                    self._rotate_right(x.parent)
                    w = x.parent.left
                if w.right.color is BLACK and w.left.color is BLACK:
                    w.color = RED
                    x = x.parent
                else:
                    if w.left.color is BLACK:
                        w.right.color = BLACK
                        w.color = RED
                        self._rotate_left(w)
                        w = x.parent.left
                    w.color = x.parent.color
                    x.parent.color = BLACK
                    w.left.color = BLACK
                    self._rotate_right(x.parent)
                    x = self._root
        x.color = BLACK
