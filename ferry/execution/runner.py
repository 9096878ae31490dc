"""
Loader Runner
=============

Runs a connector's Loader exactly once on a dedicated thread.

The thread starts as soon as the runner is built, so the Loader is
already waiting in next() when the first record is pushed. Whatever the
Loader raises is caught here, logged, and deposited in the channel as a
FAILED outcome; the producer thread re-raises it. Nothing propagates out
of the thread itself.
"""

import logging
import threading
from typing import Any, Mapping

from ferry.core.config import ImmutableContext
from ferry.core.enums import ConsumptionMode, LoaderState
from ferry.core.errors import ErrorCode, LoaderProtocolError
from ferry.execution.channel import LoaderOutcome, RecordChannel
from ferry.execution.source import RecordSource

logger = logging.getLogger(__name__)


class LoaderRunner:
    """
    Owns the consumer thread of an ExecutionBridge.

    Args:
        loader: Object implementing ``load(context, connection_config, job_config, source)``.
        channel: Channel shared with the producer.
        context: Context passed to the loader.
        connection_config: Connection configuration passed to the loader.
        job_config: Job configuration passed to the loader.
        mode: How the loader is expected to consume the stream.
        name: Name used for the thread and in log messages.
    """

    def __init__(
        self,
        loader: Any,
        channel: RecordChannel,
        context: ImmutableContext,
        connection_config: Mapping[str, Any],
        job_config: Mapping[str, Any],
        mode: ConsumptionMode = ConsumptionMode.CONTINUOUS,
        name: str = "loader",
    ):
        self.loader = loader
        self.mode = mode
        self.name = name
        self._channel = channel
        self._source = RecordSource(channel)
        self._args = (context, connection_config, job_config)
        self._thread = threading.Thread(target=self._run, name=f"ferry-{name}", daemon=True)
        self._thread.start()

    # =========================================================================
    # Thread body
    # =========================================================================

    def _run(self) -> None:
        loader_name = type(self.loader).__name__
        logger.info(f"[LoaderRunner:{self.name}] Starting {loader_name} ({self.mode})")

        try:
            self.loader.load(*self._args, self._source)
            self._check_drained()
        except BaseException as e:
            # Anything escaping this frame would be lost with the thread
            logger.error(
                f"[LoaderRunner:{self.name}] {loader_name} failed after "
                f"{self._source.consumed} records: {e!r}",
                exc_info=True,
            )
            self._channel.settle(LoaderOutcome.failed(e))
            return

        logger.info(
            f"[LoaderRunner:{self.name}] {loader_name} completed, "
            f"{self._source.consumed} records consumed"
        )
        self._channel.settle(LoaderOutcome.completed())

    def _check_drained(self) -> None:
        if self._source.exhausted:
            return

        if self.mode == ConsumptionMode.CONTINUOUS:
            raise LoaderProtocolError(
                f"continuous loader returned after {self._source.consumed} records "
                "without reading to the end of the stream",
                ErrorCode.EXECUTION_0004,
            )
        if self._source.consumed == 0:
            logger.warning(f"[LoaderRunner:{self.name}] Single-record loader returned without reading")

    # =========================================================================
    # Observation
    # =========================================================================

    @property
    def outcome(self) -> LoaderOutcome:
        return self._channel.outcome

    @property
    def state(self) -> LoaderState:
        return self._channel.outcome.state

    @property
    def records_consumed(self) -> int:
        """Records handed to the loader so far. Exact once the thread is joined."""
        return self._source.consumed

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self) -> LoaderOutcome:
        """Wait for the loader thread to exit and return its outcome."""
        self._thread.join()
        return self._channel.outcome
