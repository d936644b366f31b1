"""
SequentialWorkflow: runs a map-reduce job in a single thread.

The source is fed tuple by tuple to the mapper, the mapped tuples are
collected and split by key, and each partition is handed to the reducer in
turn. This reproduces the processing done by map-reduce without distributing
it, which makes it suited to validating mapper/reducer logic and measuring how
evenly a job's keys would spread over parallel reducers.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from seqmr.common.collector import Collector
from seqmr.common.interfaces import Mapper, Reducer, Source, Workflow
from seqmr.coordinator.metrics import MetricsCollector, RunMetrics

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    """Lifecycle of a workflow"""
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStatus(Enum):
    """Outcome of a call to run()"""
    NOT_CONFIGURED = "not_configured"
    COMPLETED = "completed"


@dataclass(frozen=True)
class WorkflowConfig:
    """Collaborators bound for one run, copied when the run starts"""
    mapper: Optional[Mapper] = None
    reducer: Optional[Reducer] = None
    source: Optional[Source] = None
    sort_keys: bool = False

    @property
    def is_complete(self) -> bool:
        return (self.mapper is not None and self.reducer is not None
                and self.source is not None)

    def missing(self) -> List[str]:
        """Names of the unbound collaborators"""
        return [name for name in ('mapper', 'reducer', 'source')
                if getattr(self, name) is None]


@dataclass
class RunResult:
    """
    Result of a run.

    A run that could not start because a collaborator was unbound is falsy
    and has no output. A completed run is truthy even if it produced nothing.
    """
    status: RunStatus
    output: Optional[Collector] = None
    metrics: Optional[RunMetrics] = None

    def __bool__(self):
        return self.status == RunStatus.COMPLETED

    @property
    def completed(self) -> bool:
        return self.status == RunStatus.COMPLETED


class SequentialWorkflow(Workflow):
    """Coordinates a map-reduce job in a single thread"""

    def __init__(self, mapper: Optional[Mapper] = None, reducer: Optional[Reducer] = None,
                 source: Optional[Source] = None, sort_keys: bool = False):
        """
        Initialize the workflow

        Args:
            mapper: Mapper used in the map phase
            reducer: Reducer used in the reduce phase
            source: Source of input tuples
            sort_keys: Reduce partitions in sorted key order instead of
                the order keys were first emitted
        """
        self._mapper = mapper
        self._reducer = reducer
        self._source = source
        self.sort_keys = sort_keys

        # Statistics of the last run; zero until a run completes
        self._total_tuples = 0
        self._max_tuples = 0

        self.metrics = MetricsCollector()
        self.last_metrics: Optional[RunMetrics] = None
        self.state = WorkflowState.UNCONFIGURED
        self._refresh_state()

    def _refresh_state(self):
        if self.state == WorkflowState.RUNNING:
            return
        if self.config.is_complete:
            self.state = WorkflowState.CONFIGURED
        else:
            self.state = WorkflowState.UNCONFIGURED

    def set_mapper(self, mapper: Optional[Mapper]):
        self._mapper = mapper
        self._refresh_state()

    def set_reducer(self, reducer: Optional[Reducer]):
        self._reducer = reducer
        self._refresh_state()

    def set_source(self, source: Optional[Source]):
        self._source = source
        self._refresh_state()

    @property
    def config(self) -> WorkflowConfig:
        """Snapshot of the current bindings"""
        return WorkflowConfig(self._mapper, self._reducer, self._source, self.sort_keys)

    @staticmethod
    def _map_phase(config: WorkflowConfig) -> Tuple[Collector, int]:
        intermediate = Collector()
        input_tuples = 0
        config.source.rewind()
        while config.source.has_next():
            item = config.source.next()
            config.mapper.map(intermediate, item)
            input_tuples += 1
        return intermediate, input_tuples

    @staticmethod
    def _ordered_keys(config: WorkflowConfig, shuffle: Dict[Any, Collector]) -> List[Any]:
        keys = list(shuffle.keys())
        if config.sort_keys:
            try:
                keys.sort()
            except TypeError:
                # Keys of mixed types: group by type name, then by repr
                keys.sort(key=lambda k: (type(k).__name__, repr(k)))
        return keys

    def shuffle(self) -> Optional[Dict[Any, Collector]]:
        """
        Run the map phase and partition its output without reducing

        Statistics are not touched. Useful to inspect how keys would spread
        over reducers before running the whole job.

        Returns:
            Dictionary of key -> partition in reduce order, or None if the
            mapper or source is unbound
        """
        config = self.config
        if config.mapper is None or config.source is None:
            logger.warning("Cannot shuffle: mapper and source must be bound")
            return None
        intermediate, _ = self._map_phase(config)
        partitions = intermediate.partition_by_key()
        return {key: partitions[key] for key in self._ordered_keys(config, partitions)}

    def run(self) -> RunResult:
        """
        Execute the job once

        Returns:
            RunResult with status COMPLETED and the output collector, or with
            status NOT_CONFIGURED and no output if the mapper, reducer or
            source is unbound. Exceptions raised by collaborators propagate.
        """
        config = self.config
        if not config.is_complete:
            logger.warning(f"Workflow not configured, missing: {', '.join(config.missing())}")
            return RunResult(status=RunStatus.NOT_CONFIGURED)

        self.state = WorkflowState.RUNNING
        metrics = self.metrics.start_run()
        run_id = metrics.run_id
        phase = "map"
        try:
            logger.info(f"Run {run_id}: starting map phase")
            intermediate, input_tuples = self._map_phase(config)
            self.metrics.end_map_phase(run_id, input_tuples, intermediate.count())
            logger.info(f"Run {run_id}: mapped {input_tuples} tuples into {intermediate.count()}")

            phase = "shuffle"
            shuffle = intermediate.partition_by_key()
            keys = self._ordered_keys(config, shuffle)
            self.metrics.end_shuffle(run_id, len(keys))
            logger.info(f"Run {run_id}: shuffled into {len(keys)} partitions")

            phase = "reduce"
            output = Collector()
            self._total_tuples = 0
            self._max_tuples = 0
            for key in keys:
                partition = shuffle[key]
                num_tuples = partition.count()
                config.reducer.reduce(output, key, partition)
                self._total_tuples += num_tuples
                self._max_tuples = max(self._max_tuples, num_tuples)
                self.metrics.record_partition(run_id, key, num_tuples)
                logger.debug(f"Run {run_id}: reduced key {key!r} ({num_tuples} tuples)")
        except Exception as e:
            self.state = WorkflowState.FAILED
            self.metrics.discard(run_id)
            logger.error(f"Run {run_id} failed during {phase} phase: {e}")
            raise

        self.metrics.end_run(run_id, output.count())
        self.last_metrics = metrics
        self.state = WorkflowState.COMPLETED
        logger.info(
            f"Run {run_id}: completed with {output.count()} output tuples "
            f"(total={self._total_tuples}, max={self._max_tuples})"
        )
        return RunResult(status=RunStatus.COMPLETED, output=output, metrics=metrics)

    def get_total_tuples(self) -> int:
        """
        Total number of tuples handed to the reducer in the last run.
        Zero if no run has happened yet.
        """
        return self._total_tuples

    def get_max_tuples(self) -> int:
        """
        Largest number of tuples handed to a single reduce call in the last
        run. Assuming every partition ran on its own worker, this is
        proportional to the time the slowest reducer would take.
        Zero if no run has happened yet.
        """
        return self._max_tuples

    @property
    def total_tuples(self) -> int:
        return self._total_tuples

    @property
    def max_tuples(self) -> int:
        return self._max_tuples

    def speedup(self) -> float:
        """total/max for the last run, 0.0 if nothing was reduced"""
        if self._max_tuples == 0:
            return 0.0
        return self._total_tuples / self._max_tuples
