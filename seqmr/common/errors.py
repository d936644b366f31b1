"""
Exceptions raised by seqmr itself.
Errors raised by user mappers and reducers are never wrapped.
"""


class MapReduceError(Exception):
    """Base class for seqmr errors"""


class SourceExhaustedError(MapReduceError, LookupError):
    """next() was called on a source with no tuples left"""


class JobFileError(MapReduceError):
    """A job file could not be imported or lacks a required function"""
