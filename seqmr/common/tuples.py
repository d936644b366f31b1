"""Immutable key/value pair, the unit of data flowing through a workflow."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Tuple:
    """A key/value pair. Equality and hashing are structural."""

    key: Any
    value: Any

    def __iter__(self):
        # Allows `key, value = t`
        yield self.key
        yield self.value

    def __str__(self):
        return f"({self.key}, {self.value})"

    @classmethod
    def of(cls, pair) -> "Tuple":
        """Build a Tuple from a (key, value) pair; Tuples pass through unchanged."""
        if isinstance(pair, cls):
            return pair
        key, value = pair
        return cls(key, value)
