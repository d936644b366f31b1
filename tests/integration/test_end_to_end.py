"""
End-to-end tests
Runs the example job files through the CLI and the workflow
"""

import pytest
import json
import os

from seqmr import FileLineSource, FunctionLoader, SequentialWorkflow
from seqmr.client import cli
from seqmr.client.output import format_partitions, write_output


@pytest.fixture
def wordcount_input(temp_dir):
    """Test input with known word counts"""
    filepath = os.path.join(temp_dir, 'words.txt')
    with open(filepath, 'w') as f:
        f.write("the quick brown fox\nthe lazy dog\nthe fox\n")
    return filepath


EXPECTED_COUNTS = {
    'the': 3,
    'quick': 1,
    'brown': 1,
    'fox': 2,
    'lazy': 1,
    'dog': 1,
}


def read_output(path):
    with open(path) as f:
        return dict(line.rstrip('\n').split('\t') for line in f)


class TestWordCountCorrectness:
    """Tests that jobs produce correct results for known inputs"""

    def test_wordcount_produces_correct_counts(self, wordcount_input, wordcount_job_file):
        """Test accurate word frequencies"""
        loader = FunctionLoader(wordcount_job_file)
        workflow = SequentialWorkflow(loader.build_mapper(), loader.build_reducer(),
                                      FileLineSource(wordcount_input))
        result = workflow.run()

        assert {t.key: t.value for t in result.output} == EXPECTED_COUNTS
        assert workflow.get_total_tuples() == 9
        assert workflow.get_max_tuples() == 3

    def test_inverted_index(self, wordcount_input, inverted_index_job_file):
        """Test that each word maps to the lines it occurs on"""
        loader = FunctionLoader(inverted_index_job_file)
        result = SequentialWorkflow(loader.build_mapper(), loader.build_reducer(),
                                    FileLineSource(wordcount_input), sort_keys=True).run()
        index = {t.key: t.value for t in result.output}

        assert index['the'] == 'line_0,line_1,line_2'
        assert index['fox'] == 'line_0,line_2'
        assert list(index.keys()) == sorted(index.keys())

    def test_weather_stats_skips_malformed_lines(self, temp_dir, weather_job_file):
        """Test per-station statistics"""
        filepath = os.path.join(temp_dir, 'weather.csv')
        with open(filepath, 'w') as f:
            f.write("oslo,1.5\nlima,20\nnot a reading\noslo,-0.5\nlima,abc\n")

        loader = FunctionLoader(weather_job_file)
        workflow = SequentialWorkflow(loader.build_mapper(), loader.build_reducer(),
                                      FileLineSource(filepath))
        stats = {t.key: t.value for t in workflow.run().output}

        assert stats['oslo'] == {'min': -0.5, 'max': 1.5, 'mean': 0.5, 'count': 2}
        assert stats['lima']['count'] == 1
        assert workflow.get_total_tuples() == 3

    def test_write_output(self, temp_dir, wordcount_input, wordcount_job_file):
        """Test key<TAB>value output file"""
        loader = FunctionLoader(wordcount_job_file)
        result = SequentialWorkflow(loader.build_mapper(), loader.build_reducer(),
                                    FileLineSource(wordcount_input)).run()
        path = write_output(result.output, os.path.join(temp_dir, 'out', 'part-0.txt'))

        assert read_output(path) == {k: str(v) for k, v in EXPECTED_COUNTS.items()}

    def test_format_partitions_largest_first(self, wordcount_input, wordcount_job_file):
        """Test partition diagnostics"""
        workflow = SequentialWorkflow(mapper=FunctionLoader(wordcount_job_file).build_mapper(),
                                      source=FileLineSource(wordcount_input))
        lines = format_partitions(workflow.shuffle())

        assert lines[0] == 'the\t3'
        assert lines[1] == 'fox\t2'
        assert len(lines) == 6


class TestCli:
    """Tests for the seqmr command"""

    def test_run_prints_output_and_statistics(self, capsys, wordcount_input, wordcount_job_file):
        """Test `seqmr run` to stdout"""
        code = cli.main(['run', '--input', wordcount_input, '--job-file', wordcount_job_file])
        out = capsys.readouterr().out

        assert code == 0
        assert 'the\t3' in out
        assert 'Total tuples: 9' in out
        assert 'Max tuples:   3' in out
        assert 'Speedup:      3.00x' in out

    def test_run_writes_output_and_metrics(self, temp_dir, wordcount_input, wordcount_job_file):
        """Test --output and --metrics-file"""
        output = os.path.join(temp_dir, 'result.txt')
        metrics_file = os.path.join(temp_dir, 'metrics.json')
        code = cli.main(['run', '--input', wordcount_input, '--job-file', wordcount_job_file,
                         '--output', output, '--metrics-file', metrics_file, '--sort-keys'])

        assert code == 0
        assert list(read_output(output).keys()) == sorted(EXPECTED_COUNTS)
        with open(metrics_file) as f:
            metrics = json.load(f)
        assert metrics['total_tuples'] == 9
        assert metrics['max_tuples'] == 3
        assert metrics['num_partitions'] == 6

    def test_run_saves_plot(self, temp_dir, wordcount_input, wordcount_job_file):
        """Test --plot"""
        plot = os.path.join(temp_dir, 'partitions.png')
        code = cli.main(['run', '--input', wordcount_input, '--job-file', wordcount_job_file,
                         '--plot', plot])

        assert code == 0
        assert os.path.getsize(plot) > 0

    def test_partitions_command(self, capsys, wordcount_input, wordcount_job_file):
        """Test `seqmr partitions`"""
        code = cli.main(['partitions', '--input', wordcount_input, '--job-file', wordcount_job_file])
        out = capsys.readouterr().out

        assert code == 0
        assert out.splitlines()[0] == 'the\t3'
        assert 'Partitions: 6' in out
        assert 'Max/total:  3/9 = 0.333' in out

    def test_partitions_needs_only_map_function(self, capsys, temp_dir, wordcount_input):
        """Test that partitions works for a job file without a reducer"""
        job_file = os.path.join(temp_dir, 'map_only.py')
        with open(job_file, 'w') as f:
            f.write("def map_function(key, value):\n    yield (len(value), 1)\n")

        assert cli.main(['partitions', '--input', wordcount_input, '--job-file', job_file]) == 0

    def test_missing_input_file(self, capsys, wordcount_job_file):
        """Test error reporting for a missing input"""
        code = cli.main(['run', '--input', '/nonexistent/input.txt', '--job-file', wordcount_job_file])

        assert code == 1
        assert 'Error: Input file not found' in capsys.readouterr().out

    def test_job_file_without_reducer(self, capsys, temp_dir, wordcount_input):
        """Test error reporting for an incomplete job file"""
        job_file = os.path.join(temp_dir, 'map_only.py')
        with open(job_file, 'w') as f:
            f.write("def map_function(key, value):\n    yield (key, value)\n")

        code = cli.main(['run', '--input', wordcount_input, '--job-file', job_file])

        assert code == 1
        assert "reduce_function" in capsys.readouterr().out

    def test_malformed_map_output_closes_input(self, capsys, monkeypatch, temp_dir, wordcount_input):
        """Test that a job failing mid-map is reported and its input file released"""
        job_file = os.path.join(temp_dir, 'bare_words.py')
        with open(job_file, 'w') as f:
            f.write("def map_function(key, value):\n    yield from value.split()\n\n"
                    "def reduce_function(key, values):\n    yield (key, len(values))\n")

        opened = []
        original_init = FileLineSource.__init__

        def tracking_init(self, *args, **kwargs):
            original_init(self, *args, **kwargs)
            opened.append(self)

        monkeypatch.setattr(FileLineSource, "__init__", tracking_init)
        code = cli.main(['run', '--input', wordcount_input, '--job-file', job_file])

        assert code == 1
        assert "map_function must produce (key, value) pairs" in capsys.readouterr().out
        assert len(opened) == 1
        assert opened[0]._file is None

    def test_no_command_prints_help(self, capsys):
        """Test bare invocation"""
        assert cli.main([]) == 1
        assert 'usage' in capsys.readouterr().out
