"""
Partition size plots for a completed run.
"""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from seqmr.coordinator.metrics import RunMetrics


def plot_partition_sizes(metrics: RunMetrics, output_path: str, max_bars: int = 40) -> str:
    """
    Create bar chart of reduce input size per key.

    Only the `max_bars` largest partitions are drawn; the title carries the
    max/total ratio over all of them.
    """
    sizes = sorted(metrics.partition_sizes.items(), key=lambda kv: kv[1], reverse=True)
    shown = sizes[:max_bars]

    fig, ax = plt.subplots(figsize=(12, 5))
    labels = [key for key, _ in shown]
    counts = [count for _, count in shown]

    ax.bar(range(len(counts)), counts, color='#4ECDC4')
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=60, ha='right', fontsize=8)
    ax.set_ylabel('Tuples per reduce call')
    ax.set_title(
        f'Partition sizes ({metrics.num_partitions} keys, '
        f'max/total = {metrics.critical_path_ratio:.3f}, '
        f'speedup <= {metrics.speedup:.1f}x)'
    )
    ax.grid(axis='y', alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
