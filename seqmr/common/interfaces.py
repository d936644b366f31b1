"""
Contracts for the collaborators a workflow consumes: the tuple source,
the mapper and the reducer, plus the workflow itself.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, TYPE_CHECKING

from seqmr.common.tuples import Tuple

if TYPE_CHECKING:
    from seqmr.common.collector import Collector


class Source(ABC):
    """
    Restartable, one-pass-at-a-time iterator over tuples.

    A source must be finite and must replay the same tuples after every
    rewind(), since a workflow rewinds its source at the start of each run.
    """

    @abstractmethod
    def rewind(self):
        """Reset iteration to the first tuple. Idempotent."""

    @abstractmethod
    def has_next(self) -> bool:
        """True if another tuple is available. Does not advance."""

    @abstractmethod
    def next(self) -> Tuple:
        """
        Return the next tuple and advance

        Raises:
            SourceExhaustedError: If has_next() is False
        """

    def __iter__(self) -> Iterator[Tuple]:
        self.rewind()
        while self.has_next():
            yield self.next()


class Mapper(ABC):
    """Turns one input tuple into zero or more tuples written to `output`."""

    @abstractmethod
    def map(self, output: "Collector", item: Tuple):
        pass


class Reducer(ABC):
    """
    Combines every tuple sharing `key` into zero or more result tuples.

    Reducers must not depend on the order in which partitions arrive, and
    the only state shared between calls is the `output` collector.
    """

    @abstractmethod
    def reduce(self, output: "Collector", key: Any, partition: "Collector"):
        pass


class Workflow(ABC):
    """Coordinates a map-reduce job over a source."""

    @abstractmethod
    def set_mapper(self, mapper: Mapper):
        pass

    @abstractmethod
    def set_reducer(self, reducer: Reducer):
        pass

    @abstractmethod
    def set_source(self, source: Source):
        pass

    @abstractmethod
    def run(self):
        pass

    @abstractmethod
    def get_total_tuples(self) -> int:
        pass

    @abstractmethod
    def get_max_tuples(self) -> int:
        pass
