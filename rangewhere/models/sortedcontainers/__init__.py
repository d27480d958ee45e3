"""
Sorted container implementations for the in-memory store.
"""

from rangewhere.models.sortedcontainers.red_black_tree import RedBlackTree

__all__ = ["RedBlackTree"]
