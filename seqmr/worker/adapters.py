"""
Adapters that turn plain map/reduce functions into Mapper and Reducer objects.

Job files define functions in the usual style:

    def map_function(key, value):
        yield (word, 1)

    def reduce_function(key, values):
        yield (key, sum(values))
"""

from typing import Any, Callable

from seqmr.common.collector import Collector
from seqmr.common.errors import JobFileError
from seqmr.common.interfaces import Mapper, Reducer
from seqmr.common.tuples import Tuple


def _to_tuple(pair, function: Callable) -> Tuple:
    try:
        return Tuple.of(pair)
    except (TypeError, ValueError) as e:
        name = getattr(function, '__name__', repr(function))
        raise JobFileError(
            f"{name} must produce (key, value) pairs, got {pair!r}"
        ) from e


class FunctionMapper(Mapper):
    """Mapper calling map_function(key, value), which yields (key, value) pairs"""

    def __init__(self, map_function: Callable):
        self.map_function = map_function

    def map(self, output: Collector, item: Tuple):
        result = self.map_function(item.key, item.value)
        if result is None:
            return
        for pair in result:
            output.insert(_to_tuple(pair, self.map_function))


class FunctionReducer(Reducer):
    """
    Reducer calling reduce_function(key, values).

    The function can yield (key, value) pairs, return one (key, value)
    tuple, or return a single value, which is emitted under the
    partition's key.
    """

    def __init__(self, reduce_function: Callable):
        self.reduce_function = reduce_function

    def reduce(self, output: Collector, key: Any, partition: Collector):
        values = [item.value for item in partition]
        result = self.reduce_function(key, values)
        if result is None:
            return

        # Strings are iterable but are a single value here
        if isinstance(result, (str, bytes)):
            output.emit(key, result)
            return

        # A bare pair is one output tuple, not two values
        if isinstance(result, Tuple) or (type(result) is tuple and len(result) == 2):
            output.insert(Tuple.of(result))
            return

        try:
            pairs = iter(result)
        except TypeError:
            # Not iterable - it's a single value
            output.emit(key, result)
            return
        for pair in pairs:
            output.insert(_to_tuple(pair, self.reduce_function))
