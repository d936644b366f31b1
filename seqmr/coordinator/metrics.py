"""
Performance metrics collection for workflow runs.
"""

import json
import time
import uuid
from dataclasses import dataclass, asdict, field
from typing import Dict, Optional

import psutil


@dataclass
class RunMetrics:
    """Metrics for a single workflow run."""

    run_id: str
    start_time: float
    end_time: float = 0.0
    map_phase_end: float = 0.0
    shuffle_end: float = 0.0
    input_tuples: int = 0
    intermediate_tuples: int = 0
    output_tuples: int = 0
    num_partitions: int = 0
    total_tuples: int = 0
    max_tuples: int = 0
    partition_sizes: Dict[str, int] = field(default_factory=dict)
    peak_memory_bytes: int = 0

    @property
    def total_time_seconds(self) -> float:
        """Total run time in seconds."""
        return self.end_time - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Map phase time in seconds."""
        return self.map_phase_end - self.start_time

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Reduce phase time in seconds."""
        return self.end_time - self.shuffle_end

    @property
    def speedup(self) -> float:
        """Best speedup if every partition were reduced by its own worker."""
        if self.max_tuples == 0:
            return 0.0
        return self.total_tuples / self.max_tuples

    @property
    def critical_path_ratio(self) -> float:
        """Share of the total reduce work sitting in the largest partition."""
        if self.total_tuples == 0:
            return 0.0
        return self.max_tuples / self.total_tuples

    def to_dict(self) -> dict:
        """Convert metrics to dictionary, derived values included."""
        data = asdict(self)
        data['total_time_seconds'] = self.total_time_seconds
        data['map_phase_time_seconds'] = self.map_phase_time_seconds
        data['reduce_phase_time_seconds'] = self.reduce_phase_time_seconds
        data['speedup'] = self.speedup
        data['critical_path_ratio'] = self.critical_path_ratio
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector:
    """Collects and manages metrics for workflow runs."""

    def __init__(self, max_history: int = 16):
        """
        Args:
            max_history: Number of runs kept; the oldest is dropped first
        """
        self.max_history = max(1, max_history)
        self.run_metrics: Dict[str, RunMetrics] = {}
        self.process = psutil.Process()

    def _sample_memory(self, run_id: str):
        metrics = self.run_metrics[run_id]
        rss = self.process.memory_info().rss
        metrics.peak_memory_bytes = max(metrics.peak_memory_bytes, rss)

    def start_run(self, run_id: Optional[str] = None) -> RunMetrics:
        """Initialize metrics tracking for a new run."""
        run_id = run_id or str(uuid.uuid4())
        metrics = RunMetrics(run_id=run_id, start_time=time.time())
        self.run_metrics[run_id] = metrics
        while len(self.run_metrics) > self.max_history:
            del self.run_metrics[next(iter(self.run_metrics))]
        self._sample_memory(run_id)
        return metrics

    def end_map_phase(self, run_id: str, input_tuples: int, intermediate_tuples: int):
        """Mark the end of the map phase."""
        metrics = self.run_metrics[run_id]
        metrics.map_phase_end = time.time()
        metrics.input_tuples = input_tuples
        metrics.intermediate_tuples = intermediate_tuples
        self._sample_memory(run_id)

    def end_shuffle(self, run_id: str, num_partitions: int):
        """Mark the end of the shuffle and the start of the reduce phase."""
        metrics = self.run_metrics[run_id]
        metrics.shuffle_end = time.time()
        metrics.num_partitions = num_partitions

    def record_partition(self, run_id: str, key, size: int):
        """Record the input size of one reduced partition."""
        metrics = self.run_metrics[run_id]
        metrics.partition_sizes[repr(key)] = size
        metrics.total_tuples += size
        metrics.max_tuples = max(metrics.max_tuples, size)

    def end_run(self, run_id: str, output_tuples: int):
        """Mark run completion."""
        metrics = self.run_metrics[run_id]
        metrics.end_time = time.time()
        metrics.output_tuples = output_tuples
        self._sample_memory(run_id)

    def discard(self, run_id: str):
        """Forget a run, e.g. one that failed before completing."""
        self.run_metrics.pop(run_id, None)

    def get_metrics(self, run_id: str) -> Optional[RunMetrics]:
        """Retrieve metrics for a specific run."""
        return self.run_metrics.get(run_id)
