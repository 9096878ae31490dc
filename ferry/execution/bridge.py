"""
Execution Bridge
================

Adapts the host task loop's push API to the Loader's pull API.

The host task loop calls push() once per record and finish() once at
the end. Each push hands the record to the loader thread through a
single-slot RecordChannel, blocking until the previous record has been
taken. Loader failures are captured on the loader thread and re-raised
here, on the task thread, with the original error as ``__cause__``.

Example:
    bridge = ExecutionBridge(task_context)
    for record in records:
        bridge.push(record)
    summary = bridge.finish()
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from ferry.core.base import Loader
from ferry.core.config import TaskContext
from ferry.core.enums import BridgeState, LoaderState
from ferry.core.errors import ConsumerFailed, InvalidState, LoaderFailure, LoaderResolutionError
from ferry.core.registry import LoaderRegistry
from ferry.execution.channel import LoaderOutcome, RecordChannel, StreamSignal
from ferry.execution.runner import LoaderRunner

logger = logging.getLogger(__name__)


class ExecutionBridge:
    """
    Push-facing entry point of a transfer task.

    The Loader is resolved from the task context once, here, and started
    on its own thread before the first record arrives.

    Args:
        task_context: Configuration of the task.
        registry: Registry used to resolve string loader identifiers
            (the global registry when omitted).

    Raises:
        LoaderResolutionError: If the loader cannot be resolved or the
            object it produces does not implement ``load``.
    """

    def __init__(
        self,
        task_context: TaskContext,
        registry: Optional[LoaderRegistry] = None,
    ):
        self.task_context = task_context
        self.execution_id = task_context.task_id or str(uuid.uuid4())[:8]
        self._start_time = datetime.now()
        self._state = BridgeState.OPEN
        self._records_pushed = 0

        loader = task_context.resolve_loader_factory(registry)()
        if not isinstance(loader, Loader):
            raise LoaderResolutionError(
                f"Loader '{task_context.loader_name}' produced {type(loader).__name__}, "
                "which does not implement load()"
            )
        context, connection_config, job_config = task_context.loader_arguments()

        logger.info(
            f"[ExecutionBridge:{self.execution_id}] Starting {task_context.job_type} task "
            f"with loader {task_context.loader_name}"
        )

        self._channel = RecordChannel()
        self._runner = LoaderRunner(
            loader=loader,
            channel=self._channel,
            context=context,
            connection_config=connection_config,
            job_config=job_config,
            mode=task_context.consumption_mode,
            name=self.execution_id,
        )

    # =========================================================================
    # Host task loop API
    # =========================================================================

    def push(self, record: Any) -> None:
        """
        Hand one record to the loader.

        Blocks until the loader has taken the previous record.

        Raises:
            InvalidState: If the bridge is not open.
            ValueError: If record is None (None marks the end of a stream).
            ConsumerFailed: If the loader has failed, either before this
                record could be handed off or while it was being handed off.
        """
        self._require_open("push")
        if record is None:
            raise ValueError("Records cannot be None")

        self._raise_if_failed(record_accepted=False)

        delivered = self._channel.put(StreamSignal.data(record))
        if not delivered:
            # Consumer settled while we waited; only a completed loader accepts the record
            self._raise_if_failed(record_accepted=False)
            self._records_pushed += 1
            logger.debug(
                f"[ExecutionBridge:{self.execution_id}] Loader already returned, "
                f"record {self._records_pushed} not delivered"
            )
            return

        self._records_pushed += 1
        self._raise_if_failed(record_accepted=True)

    def finish(self) -> dict[str, Any]:
        """
        End the stream, wait for the loader and report its result.

        Returns:
            Execution summary.

        Raises:
            InvalidState: If the bridge is not open.
            LoaderFailure: If the loader failed. The loader's own error is
                the ``__cause__``.
        """
        self._require_open("finish")

        if self._runner.state is LoaderState.RUNNING:
            self._channel.put(StreamSignal.end())
        outcome = self._runner.join()

        if outcome.state is LoaderState.FAILED:
            self._state = BridgeState.ABORTED
            logger.error(
                f"[ExecutionBridge:{self.execution_id}] Task failed: "
                f"loader {self.task_context.loader_name} raised {outcome.error!r}"
            )
            raise LoaderFailure(self._describe(outcome)) from outcome.error

        self._state = BridgeState.CLOSED
        summary = self._summary()

        if summary["records_undelivered"]:
            logger.warning(
                f"[ExecutionBridge:{self.execution_id}] Loader returned before reading "
                f"{summary['records_undelivered']} of {summary['records_pushed']} records"
            )
        logger.info(
            f"[ExecutionBridge:{self.execution_id}] Task completed in "
            f"{summary['duration_seconds']:.2f}s, {summary['records_consumed']} records loaded"
        )
        return summary

    def get_record_writer(self) -> "RecordWriter":
        """Return a record-writer handle over this bridge."""
        return RecordWriter(self)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def loader_state(self) -> LoaderState:
        return self._runner.state

    @property
    def records_pushed(self) -> int:
        return self._records_pushed

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_open(self, operation: str) -> None:
        if self._state is not BridgeState.OPEN:
            raise InvalidState(f"{operation}() called on a {self._state} bridge")

    def _raise_if_failed(self, record_accepted: bool) -> None:
        outcome = self._runner.outcome
        if outcome.state is not LoaderState.FAILED:
            return

        # The loader thread is exiting; reap it before surfacing the failure
        self._runner.join()
        self._state = BridgeState.ABORTED
        logger.error(
            f"[ExecutionBridge:{self.execution_id}] Loader failed, rejecting push "
            f"{self._records_pushed + (0 if record_accepted else 1)}: {outcome.error!r}"
        )
        raise ConsumerFailed(self._describe(outcome), record_accepted=record_accepted) from outcome.error

    def _describe(self, outcome: LoaderOutcome) -> str:
        return (
            f"loader {self.task_context.loader_name} raised "
            f"{type(outcome.error).__name__}: {outcome.error}"
        )

    def _summary(self) -> dict[str, Any]:
        duration = (datetime.now() - self._start_time).total_seconds()
        return {
            "success": True,
            "execution_id": self.execution_id,
            "job_type": str(self.task_context.job_type),
            "loader": self.task_context.loader_name,
            "records_pushed": self._records_pushed,
            "records_consumed": self._runner.records_consumed,
            "records_undelivered": self._records_pushed - self._runner.records_consumed,
            "duration_seconds": duration,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id='{self.execution_id}', state={self._state})"


class RecordWriter:
    """
    Record-writer handle for host runtimes that speak write/close.

    Example:
        writer = ExecutionBridge(task_context).get_record_writer()
        writer.write("1,2,3")
        writer.close()
    """

    def __init__(self, bridge: ExecutionBridge):
        self.bridge = bridge

    def write(self, record: Any) -> None:
        self.bridge.push(record)

    def close(self) -> dict[str, Any]:
        return self.bridge.finish()
