"""
Collector: append-only, key-partitioned container of tuples.

A collector is also a Source, so the output of one workflow can be fed
directly into another.
"""

from typing import Any, Dict, Iterator, List, Optional

from seqmr.common.errors import SourceExhaustedError
from seqmr.common.interfaces import Source
from seqmr.common.tuples import Tuple


class Collector(Source):
    """Ordered, append-only sequence of tuples with a derived per-key index"""

    def __init__(self, items=None):
        """
        Initialize the collector

        Args:
            items: Optional iterable of Tuples or (key, value) pairs to insert
        """
        self._tuples: List[Tuple] = []
        self._index: Optional[Dict[Any, List[Tuple]]] = None
        self._cursor = 0
        if items is not None:
            for item in items:
                self.insert(Tuple.of(item))

    def insert(self, item: Tuple):
        """Append a tuple. Invalidates any cached partitioning."""
        self._tuples.append(item)
        self._index = None

    def emit(self, key: Any, value: Any):
        """Shorthand for insert(Tuple(key, value))"""
        self.insert(Tuple(key, value))

    def count(self) -> int:
        return len(self._tuples)

    def __len__(self):
        return len(self._tuples)

    def iterate(self) -> Iterator[Tuple]:
        """Fresh iterator over the tuples in insertion order"""
        return iter(self._tuples)

    def __iter__(self) -> Iterator[Tuple]:
        return self.iterate()

    def __repr__(self):
        return f"Collector(count={len(self._tuples)})"

    def _key_index(self) -> Dict[Any, List[Tuple]]:
        if self._index is None:
            index: Dict[Any, List[Tuple]] = {}
            for item in self._tuples:
                index.setdefault(item.key, []).append(item)
            self._index = index
        return self._index

    def partition_by_key(self) -> Dict[Any, "Collector"]:
        """
        Split the contents into one collector per distinct key

        Keys appear in the order they were first inserted, and each partition
        keeps the relative insertion order of its tuples. The key index is
        cached until the next insert; the partition collectors are built anew
        on every call.

        Returns:
            Dictionary mapping each key to a new Collector holding its tuples
        """
        return {key: Collector(items) for key, items in self._key_index().items()}

    def keys(self) -> List[Any]:
        """Distinct keys in first-insertion order"""
        return list(self._key_index().keys())

    def to_dict(self) -> Dict[Any, List[Any]]:
        """Key -> list of values, for inspection"""
        grouped: Dict[Any, List[Any]] = {}
        for item in self._tuples:
            grouped.setdefault(item.key, []).append(item.value)
        return grouped

    # Source protocol: a private read cursor over the held tuples

    def rewind(self):
        self._cursor = 0

    def has_next(self) -> bool:
        return self._cursor < len(self._tuples)

    def next(self) -> Tuple:
        if not self.has_next():
            raise SourceExhaustedError(
                f"Collector exhausted after {len(self._tuples)} tuples"
            )
        item = self._tuples[self._cursor]
        self._cursor += 1
        return item
