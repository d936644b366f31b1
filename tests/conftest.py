"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil

from seqmr import Collector, ListSource, Mapper, Reducer, Tuple

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'examples')


class IdentityMapper(Mapper):
    """Emits every input tuple unchanged"""

    def __init__(self):
        self.calls = []

    def map(self, output, item):
        self.calls.append(item)
        output.insert(item)


class SumReducer(Reducer):
    """Emits (key, sum of values)"""

    def __init__(self):
        self.calls = []

    def reduce(self, output, key, partition):
        self.calls.append((key, partition.count()))
        output.emit(key, sum(item.value for item in partition))


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_tuples():
    """The A/B example: (A,1), (B,2), (A,3)"""
    return [Tuple('A', 1), Tuple('B', 2), Tuple('A', 3)]


@pytest.fixture
def sample_source(sample_tuples):
    return ListSource(sample_tuples)


@pytest.fixture
def identity_mapper():
    return IdentityMapper()


@pytest.fixture
def sum_reducer():
    return SumReducer()


@pytest.fixture
def empty_collector():
    return Collector()


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def sample_input_file(temp_dir, sample_text):
    """Create a sample input file for testing"""
    filepath = os.path.join(temp_dir, 'input.txt')
    with open(filepath, 'w') as f:
        f.write(sample_text)
    return filepath


@pytest.fixture
def wordcount_job_file():
    """Path to word count example job file"""
    return os.path.join(EXAMPLES_DIR, 'wordcount.py')


@pytest.fixture
def inverted_index_job_file():
    """Path to inverted index example job file"""
    return os.path.join(EXAMPLES_DIR, 'inverted_index.py')


@pytest.fixture
def weather_job_file():
    """Path to weather statistics example job file"""
    return os.path.join(EXAMPLES_DIR, 'weather_stats.py')
