"""
Word count job.

Lines are split into lowercase words; contractions and hyphenated words
("don't", "map-reduce") count as one word, and bare numbers are skipped.
"""

import re

WORD = re.compile(r"[a-z0-9]+(?:['-][a-z0-9]+)*")


def map_function(line_number, line):
    for word in WORD.findall(line.lower()):
        if not word.isdigit():
            yield (word, 1)


def reduce_function(word, counts):
    yield (word, sum(counts))
