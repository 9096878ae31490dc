"""
Enums for the Transfer Framework
================================

Type-safe enumerations for job configuration and execution state.
Eliminates hardcoded strings throughout the codebase.
"""

from enum import Enum


class JobType(str, Enum):
    """
    Direction of a transfer job.

    - IMPORT: External store -> batch runtime. The framework side loads.
    - EXPORT: Batch runtime -> external store. The connector side loads.
    """
    IMPORT = "import"
    EXPORT = "export"

    def __str__(self) -> str:
        return self.value


class ConsumptionMode(str, Enum):
    """
    How a Loader pulls records from its RecordSource.

    - SINGLE_RECORD: Loader calls next() exactly once and returns
    - CONTINUOUS: Loader calls next() until it observes end of stream
    """
    SINGLE_RECORD = "single_record"
    CONTINUOUS = "continuous"

    def __str__(self) -> str:
        return self.value


class SignalKind(str, Enum):
    """
    Variants of a StreamSignal travelling through a RecordChannel.
    """
    DATA = "data"
    END = "end"
    FAULT = "fault"

    def __str__(self) -> str:
        return self.value


class LoaderState(str, Enum):
    """
    Terminal state machine of a LoaderRunner.

    RUNNING -> COMPLETED | FAILED
    """
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


class BridgeState(str, Enum):
    """
    Lifecycle of an ExecutionBridge.

    OPEN --push*--> OPEN --finish--> CLOSED
    Any surfaced loader fault moves the bridge to ABORTED.
    """
    OPEN = "open"
    CLOSED = "closed"
    ABORTED = "aborted"

    def __str__(self) -> str:
        return self.value


class DataFormat(str, Enum):
    """
    File formats understood by the bundled file connector.
    """
    PARQUET = "parquet"
    NDJSON = "ndjson"
    CSV = "csv"

    def __str__(self) -> str:
        return self.value
