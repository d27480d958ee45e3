"""
Red-Black Tree implementation for ordered key-value storage.

Nodes are ordered by the key-part total order, so mixed-type tuple keys
such as ("hello", False) and ("hello", 1) sort the way the store expects.
"""

from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from rangewhere.interfaces.sorted_container import SortedContainer
from rangewhere.models.entry import Entry
from rangewhere.models.keys import KeyTuple, key_order

Order = tuple[tuple[int, Any], ...]


class Color(IntEnum):
    """Node color for Red-Black Tree."""

    RED = 0
    BLACK = 1


@dataclass
class Node:
    """Node in the Red-Black Tree."""

    key: Any
    order: Order
    value: Any
    version: int | None = None
    color: Color = Color.RED
    left: "Node | None" = None
    right: "Node | None" = None
    parent: "Node | None" = None


class RedBlackTree(SortedContainer):
    """
    Red-Black Tree implementation of SortedContainer.

    Properties maintained:
    1. Every node is either red or black
    2. Root is always black
    3. Red nodes cannot have red children
    4. Every path from root to leaf has same number of black nodes
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._size: int = 0

    def put(self, key: Any, value: Any, version: int | None = None) -> None:
        """Insert or update a key-value pair. O(log N)"""
        order = key_order(key)
        if isinstance(key, list):
            key = tuple(key)
        if self._root is None:
            self._root = Node(key=key, order=order, value=value, version=version, color=Color.BLACK)
            self._size = 1
            return

        # Find insertion point
        parent = None
        current = self._root

        while current is not None:
            parent = current
            if order < current.order:
                current = current.left
            elif order > current.order:
                current = current.right
            else:
                # Key exists; the latest key form wins ("a" vs ("a",))
                current.key = key
                current.value = value
                current.version = version
                return

        new_node = Node(key=key, order=order, value=value, version=version, parent=parent)
        if order < parent.order:
            parent.left = new_node
        else:
            parent.right = new_node

        self._size += 1
        self._fix_insert(new_node)

    def get(self, key: Any) -> Any | None:
        """Retrieve value by key. O(log N)"""
        node = self._find_node(key_order(key))
        return node.value if node else None

    def get_entry(self, key: Any) -> Entry | None:
        node = self._find_node(key_order(key))
        if node is None:
            return None
        return Entry(key=node.key, value=node.value, version=node.version)

    def delete(self, key: Any) -> bool:
        """Remove a key-value pair. O(log N)"""
        node = self._find_node(key_order(key))
        if node is None:
            return False

        self._delete_node(node)
        self._size -= 1
        return True

    def has(self, key: Any) -> bool:
        return self._find_node(key_order(key)) is not None

    def size(self) -> int:
        return self._size

    def iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> Iterator[Entry]:
        return _RangeIterator(self._root, _bound_order(start), _bound_order(end), versions)

    def async_iterator(
        self,
        start: KeyTuple | None = None,
        end: KeyTuple | None = None,
        versions: bool = False,
    ) -> AsyncIterator[Entry]:
        return _AsyncRangeIterator(self._root, _bound_order(start), _bound_order(end), versions)

    def _find_node(self, order: Order) -> Node | None:
        """Find node by sort key."""
        current = self._root
        while current is not None:
            if order < current.order:
                current = current.left
            elif order > current.order:
                current = current.right
            else:
                return current
        return None

    def _fix_insert(self, node: Node) -> None:
        """Fix Red-Black Tree properties after insert."""
        while node != self._root and node.parent and node.parent.color == Color.RED:
            # A red parent is never the root, so the grandparent exists
            grandparent = self._grandparent(node)
            if node.parent == grandparent.left:
                uncle = grandparent.right

                if uncle and uncle.color == Color.RED:
                    # Case 1: Uncle is red
                    node.parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    grandparent.color = Color.RED
                    node = grandparent
                else:
                    if node == node.parent.right:
                        # Case 2: Node is right child
                        node = node.parent
                        self._rotate_left(node)

                    # Case 3: Node is left child
                    node.parent.color = Color.BLACK
                    if self._grandparent(node):
                        self._grandparent(node).color = Color.RED
                        self._rotate_right(self._grandparent(node))
            else:
                uncle = grandparent.left

                if uncle and uncle.color == Color.RED:
                    node.parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    grandparent.color = Color.RED
                    node = grandparent
                else:
                    if node == node.parent.left:
                        node = node.parent
                        self._rotate_right(node)

                    node.parent.color = Color.BLACK
                    if self._grandparent(node):
                        self._grandparent(node).color = Color.RED
                        self._rotate_left(self._grandparent(node))

        self._root.color = Color.BLACK

    def _grandparent(self, node: Node) -> Node | None:
        if node.parent:
            return node.parent.parent
        return None

    def _rotate_left(self, node: Node) -> None:
        right_child = node.right
        if right_child is None:
            return

        node.right = right_child.left
        if right_child.left:
            right_child.left.parent = node

        right_child.parent = node.parent

        if node.parent is None:
            self._root = right_child
        elif node == node.parent.left:
            node.parent.left = right_child
        else:
            node.parent.right = right_child

        right_child.left = node
        node.parent = right_child

    def _rotate_right(self, node: Node) -> None:
        left_child = node.left
        if left_child is None:
            return

        node.left = left_child.right
        if left_child.right:
            left_child.right.parent = node

        left_child.parent = node.parent

        if node.parent is None:
            self._root = left_child
        elif node == node.parent.right:
            node.parent.right = left_child
        else:
            node.parent.left = left_child

        left_child.right = node
        node.parent = left_child

    def _delete_node(self, node: Node) -> None:
        """Delete a node from the tree."""
        if node.left and node.right:
            # Two children: move the in-order successor's record into node
            successor = node.right
            while successor.left:
                successor = successor.left

            node.key = successor.key
            node.order = successor.order
            node.value = successor.value
            node.version = successor.version
            node = successor

        # Node has at most one child
        child = node.left if node.left else node.right

        if node.color == Color.BLACK:
            if child and child.color == Color.RED:
                child.color = Color.BLACK
            else:
                self._fix_delete(node)

        self._replace_node(node, child)

    def _replace_node(self, node: Node, child: Node | None) -> None:
        if node.parent is None:
            self._root = child
        elif node == node.parent.left:
            node.parent.left = child
        else:
            node.parent.right = child

        if child:
            child.parent = node.parent

    def _fix_delete(self, node: Node) -> None:
        """Fix Red-Black Tree properties before a black node is unlinked."""
        while node != self._root and node.color == Color.BLACK:
            if node.parent is None:
                break

            if node == node.parent.left:
                sibling = node.parent.right

                if sibling and sibling.color == Color.RED:
                    sibling.color = Color.BLACK
                    node.parent.color = Color.RED
                    self._rotate_left(node.parent)
                    sibling = node.parent.right

                if sibling is None:
                    node = node.parent
                    continue

                left_black = sibling.left is None or sibling.left.color == Color.BLACK
                right_black = sibling.right is None or sibling.right.color == Color.BLACK

                if left_black and right_black:
                    sibling.color = Color.RED
                    node = node.parent
                else:
                    if right_black:
                        if sibling.left:
                            sibling.left.color = Color.BLACK
                        sibling.color = Color.RED
                        self._rotate_right(sibling)
                        sibling = node.parent.right

                    sibling.color = node.parent.color
                    node.parent.color = Color.BLACK
                    if sibling.right:
                        sibling.right.color = Color.BLACK
                    self._rotate_left(node.parent)
                    node = self._root
            else:
                sibling = node.parent.left

                if sibling and sibling.color == Color.RED:
                    sibling.color = Color.BLACK
                    node.parent.color = Color.RED
                    self._rotate_right(node.parent)
                    sibling = node.parent.left

                if sibling is None:
                    node = node.parent
                    continue

                left_black = sibling.left is None or sibling.left.color == Color.BLACK
                right_black = sibling.right is None or sibling.right.color == Color.BLACK

                if left_black and right_black:
                    sibling.color = Color.RED
                    node = node.parent
                else:
                    if left_black:
                        if sibling.right:
                            sibling.right.color = Color.BLACK
                        sibling.color = Color.RED
                        self._rotate_left(sibling)
                        sibling = node.parent.left

                    sibling.color = node.parent.color
                    node.parent.color = Color.BLACK
                    if sibling.left:
                        sibling.left.color = Color.BLACK
                    self._rotate_right(node.parent)
                    node = self._root

        node.color = Color.BLACK


def _bound_order(bound: KeyTuple | None) -> Order | None:
    return None if bound is None else key_order(tuple(bound))


class _RangeIterator(Iterator[Entry]):
    """In-order iterator over [start, end) of a Red-Black Tree."""

    def __init__(
        self, root: Node | None, start: Order | None, end: Order | None, versions: bool
    ) -> None:
        self._stack: list[Node] = []
        self._end = end
        self._versions = versions

        # Initialize stack with nodes >= start
        self._push_left_path(root, start)

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        if not self._stack:
            raise StopIteration

        node = self._stack.pop()

        if self._end is not None and node.order >= self._end:
            self._stack.clear()
            raise StopIteration

        # Push right subtree's left path
        self._push_left_path(node.right, None)

        return Entry(
            key=node.key,
            value=node.value,
            version=node.version if self._versions else None,
        )

    def _push_left_path(self, node: Node | None, start: Order | None) -> None:
        """Push leftmost path to stack, respecting start bound."""
        while node:
            if start is not None and node.order < start:
                node = node.right
            else:
                self._stack.append(node)
                node = node.left


class _AsyncRangeIterator(AsyncIterator[Entry]):
    """Async iterator over [start, end) of a Red-Black Tree (in-memory, no I/O)."""

    def __init__(
        self, root: Node | None, start: Order | None, end: Order | None, versions: bool
    ) -> None:
        self._sync = _RangeIterator(root, start, end, versions)

    def __aiter__(self) -> "_AsyncRangeIterator":
        return self

    async def __anext__(self) -> Entry:
        try:
            return next(self._sync)
        except StopIteration:
            raise StopAsyncIteration from None
