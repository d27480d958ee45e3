"""
Abstract base classes for stores the query layer can scan.
"""

from rangewhere.interfaces.range_iterable import RangeIterable
from rangewhere.interfaces.sorted_container import SortedContainer

__all__ = ["RangeIterable", "SortedContainer"]
