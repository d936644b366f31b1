"""
seqmr - sequential map-reduce workflow
Runs mapper/reducer logic in a single thread with the same partitioning
semantics as a distributed map-reduce engine
"""

from seqmr.common.tuples import Tuple
from seqmr.common.collector import Collector
from seqmr.common.interfaces import Source, Mapper, Reducer, Workflow
from seqmr.common.errors import MapReduceError, SourceExhaustedError, JobFileError
from seqmr.coordinator.workflow import (
    SequentialWorkflow, WorkflowConfig, WorkflowState, RunResult, RunStatus
)
from seqmr.coordinator.metrics import RunMetrics, MetricsCollector
from seqmr.worker.sources import ListSource, FileLineSource
from seqmr.worker.adapters import FunctionMapper, FunctionReducer
from seqmr.worker.function_loader import FunctionLoader

__version__ = "0.1.0"

__all__ = [
    "Tuple", "Collector",
    "Source", "Mapper", "Reducer", "Workflow",
    "MapReduceError", "SourceExhaustedError", "JobFileError",
    "SequentialWorkflow", "WorkflowConfig", "WorkflowState", "RunResult", "RunStatus",
    "RunMetrics", "MetricsCollector",
    "ListSource", "FileLineSource",
    "FunctionMapper", "FunctionReducer", "FunctionLoader",
]
