#!/usr/bin/env python3
"""
seqmr Client CLI
Runs a job file over a text input in a single process and reports how the
keys spread over reducers
"""

import argparse
import logging
import os
import sys

from seqmr.client.output import format_partitions, format_tuples, write_output
from seqmr.common.errors import MapReduceError
from seqmr.coordinator.workflow import SequentialWorkflow
from seqmr.worker.function_loader import FunctionLoader
from seqmr.worker.sources import FileLineSource

# Configuration from environment
LOG_LEVEL = os.getenv('SEQMR_LOG_LEVEL', 'WARNING')
SORT_KEYS = os.getenv('SEQMR_SORT_KEYS', '0').lower() in ('1', 'true', 'yes')


def _build_workflow(args, with_reducer=True) -> SequentialWorkflow:
    loader = FunctionLoader(args.job_file)
    source = FileLineSource(args.input)
    return SequentialWorkflow(
        mapper=loader.build_mapper(),
        reducer=loader.build_reducer() if with_reducer else None,
        source=source,
        sort_keys=args.sort_keys or SORT_KEYS,
    )


def run_job(args):
    """Run a job and print or write its output"""
    try:
        workflow = _build_workflow(args)
        with workflow.config.source:
            result = workflow.run()
    except (FileNotFoundError, MapReduceError) as e:
        print(f"Error: {e}")
        return 1

    if not result:
        print("Error: workflow is not configured")
        return 1

    if args.output:
        write_output(result.output, args.output)
        print(f"✓ Wrote {result.output.count()} tuples to {args.output}")
    else:
        for line in format_tuples(result.output):
            print(line)

    print(f"Total tuples: {workflow.get_total_tuples()}")
    print(f"Max tuples:   {workflow.get_max_tuples()}")
    print(f"Speedup:      {workflow.speedup():.2f}x")

    if args.metrics_file:
        result.metrics.save_to_file(args.metrics_file)
        print(f"✓ Metrics saved to {args.metrics_file}")

    if args.plot:
        # matplotlib is only imported when a plot is requested
        from seqmr.client.plots import plot_partition_sizes
        plot_partition_sizes(result.metrics, args.plot)
        print(f"✓ Saved plot to {args.plot}")

    return 0


def show_partitions(args):
    """Map and shuffle only, printing each key with its partition size"""
    try:
        workflow = _build_workflow(args, with_reducer=False)
        with workflow.config.source:
            partitions = workflow.shuffle()
    except (FileNotFoundError, MapReduceError) as e:
        print(f"Error: {e}")
        return 1

    for line in format_partitions(partitions):
        print(line)

    total = sum(p.count() for p in partitions.values())
    largest = max((p.count() for p in partitions.values()), default=0)
    print(f"Partitions: {len(partitions)}")
    if total:
        print(f"Max/total:  {largest}/{total} = {largest / total:.3f}")
    return 0


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog='seqmr',
        description='Sequential map-reduce runner',
        epilog='Example: %(prog)s run --input input.txt --job-file examples/wordcount.py'
    )
    parser.add_argument('--log-level', default=LOG_LEVEL,
                        help=f'Logging level (default: {LOG_LEVEL})')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # run command
    run_parser = subparsers.add_parser(
        'run',
        help='Run a job',
        description='Run map, shuffle and reduce over a text file'
    )
    run_parser.add_argument('--input', required=True, help='Input text file, one record per line')
    run_parser.add_argument('--job-file', required=True, help='Python file with map/reduce functions')
    run_parser.add_argument('--output', help='Write output to this file instead of stdout')
    run_parser.add_argument('--sort-keys', action='store_true', help='Reduce keys in sorted order')
    run_parser.add_argument('--metrics-file', help='Save run metrics as JSON')
    run_parser.add_argument('--plot', help='Save a partition size chart (PNG)')
    run_parser.set_defaults(func=run_job)

    # partitions command
    partitions_parser = subparsers.add_parser(
        'partitions',
        help='Show partition sizes',
        description='Run the map phase and shuffle, then print each key with its tuple count'
    )
    partitions_parser.add_argument('--input', required=True, help='Input text file, one record per line')
    partitions_parser.add_argument('--job-file', required=True, help='Python file with map function')
    partitions_parser.add_argument('--sort-keys', action='store_true', help='List keys in sorted order')
    partitions_parser.set_defaults(func=show_partitions)

    # Parse arguments
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # If no command specified, print help
    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    # Execute the command
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
