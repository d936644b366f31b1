"""
Tuple sources: an in-memory list and a line-oriented text file.
"""

import os
from typing import List, Optional

from seqmr.common.errors import SourceExhaustedError
from seqmr.common.interfaces import Source
from seqmr.common.tuples import Tuple


class ListSource(Source):
    """Replays a fixed list of tuples"""

    def __init__(self, items=()):
        self.items: List[Tuple] = [Tuple.of(item) for item in items]
        self._position = 0

    def rewind(self):
        self._position = 0

    def has_next(self) -> bool:
        return self._position < len(self.items)

    def next(self) -> Tuple:
        if not self.has_next():
            raise SourceExhaustedError(f"ListSource exhausted after {len(self.items)} tuples")
        item = self.items[self._position]
        self._position += 1
        return item


class FileLineSource(Source):
    """
    Reads a text file as (line_number, line) tuples.

    The file is read lazily, one line ahead, and reopened on every rewind.
    A byte range can be given to read a single split of a larger file.
    """

    def __init__(self, input_path: str, start_offset: int = 0,
                 end_offset: Optional[int] = None):
        """
        Initialize the source

        Args:
            input_path: Path to the text file
            start_offset: Byte offset where this split starts
            end_offset: Byte offset where this split stops (None for EOF)

        Raises:
            FileNotFoundError: If the input file doesn't exist
        """
        self._file = None
        if not os.path.exists(input_path):
            raise FileNotFoundError(f"Input file not found: {input_path}")
        self.input_path = input_path
        self.start_offset = start_offset
        self.end_offset = end_offset
        self._pending: Optional[Tuple] = None
        self._line_num = 0
        self._started = False

    def rewind(self):
        self.close()
        self._file = open(self.input_path, 'r', encoding='utf-8', errors='ignore')
        self._file.seek(self.start_offset)

        # Align to line boundary (except for first split)
        if self.start_offset > 0:
            self._file.readline()

        self._line_num = 0
        self._started = True
        self._read_ahead()

    def _read_ahead(self):
        # A line starting exactly at end_offset belongs to this split
        if self.end_offset is not None and self._file.tell() > self.end_offset:
            self.close()
            return
        line = self._file.readline()
        if not line:
            self.close()
            return
        self._pending = Tuple(self._line_num, line.strip())
        self._line_num += 1

    def has_next(self) -> bool:
        if not self._started:
            self.rewind()
        return self._pending is not None

    def next(self) -> Tuple:
        if not self.has_next():
            raise SourceExhaustedError(f"No more lines in {self.input_path}")
        item = self._pending
        self._read_ahead()
        return item

    def close(self):
        """Close the underlying file; the source is exhausted until the next rewind"""
        self._pending = None
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __del__(self):
        self.close()
