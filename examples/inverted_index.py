"""
Inverted index job.
Maps each word to the lines it appears on.
"""

import string


def map_function(key, value):
    """
    Map function: emit (word, line_id) for each word.

    Args:
        key: Line number (used as document ID)
        value: Text line

    Yields:
        (word, line_id) tuples
    """
    words = value.translate(str.maketrans('', '', string.punctuation)).split()

    for word in words:
        yield (word.lower(), f"line_{key}")


def reduce_function(key, values):
    """
    Reduce function: collect the distinct line IDs for a word.

    Returns:
        Comma-separated line IDs, emitted under the word
    """
    return ','.join(sorted(set(values)))
