"""Ferry - connector-based bulk data transfer with a threaded loader bridge."""

__version__ = "0.1.0"

from ferry.core import ConsumptionMode, JobType, TaskContext
from ferry.execution import ExecutionBridge, RecordWriter, run_task

__all__ = [
    "ExecutionBridge",
    "RecordWriter",
    "TaskContext",
    "JobType",
    "ConsumptionMode",
    "run_task",
    "__version__",
]
