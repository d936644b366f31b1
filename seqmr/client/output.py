"""
Writing workflow output and partition diagnostics.
"""

import os
from typing import Any, Dict, List

from seqmr.common.collector import Collector


def format_tuples(collector: Collector) -> List[str]:
    """One `key<TAB>value` line per tuple, in collector order"""
    return [f"{item.key}\t{item.value}" for item in collector]


def write_output(collector: Collector, output_path: str) -> str:
    """
    Write final output

    Args:
        collector: Output of a run
        output_path: File to write, parent directories are created

    Returns:
        The path written
    """
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        for line in format_tuples(collector):
            f.write(line + '\n')

    return output_path


def format_partitions(partitions: Dict[Any, Collector]) -> List[str]:
    """`key<TAB>count` lines, largest partition first"""
    sizes = sorted(
        ((key, partition.count()) for key, partition in partitions.items()),
        key=lambda kv: kv[1],
        reverse=True,
    )
    return [f"{key}\t{count}" for key, count in sizes]
