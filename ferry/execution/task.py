"""Local host task loop: drives an iterable of records through a bridge."""

import logging
from typing import Any, Iterable, Optional

from ferry.core.config import TaskContext
from ferry.core.errors import TransferException
from ferry.core.registry import LoaderRegistry
from ferry.execution.bridge import ExecutionBridge

logger = logging.getLogger(__name__)


def run_task(
    task_context: TaskContext,
    records: Iterable[Any],
    registry: Optional[LoaderRegistry] = None,
) -> dict[str, Any]:
    """
    Run one transfer task in-process.

    Pushes every record, in order, then finishes the bridge. Loader
    failures propagate as LoaderFailure / ConsumerFailed.

    Args:
        task_context: Task configuration.
        records: Records to transfer, typically an Extractor's output.
        registry: Registry for string loader identifiers.

    Returns:
        The bridge's execution summary.
    """
    bridge = ExecutionBridge(task_context, registry=registry)
    writer = bridge.get_record_writer()
    try:
        for record in records:
            writer.write(record)
    except TransferException:
        raise
    except Exception:
        # The loader thread stays parked in next(); it is a daemon and dies with the process
        logger.error(
            f"[run_task] Record source failed after {bridge.records_pushed} records, "
            f"abandoning execution {bridge.execution_id} with its bridge still {bridge.state}",
            exc_info=True,
        )
        raise
    summary = writer.close()
    logger.debug(f"[run_task] {summary}")
    return summary
