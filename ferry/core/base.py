"""
Connector Contracts
===================

Capability interfaces implemented by connectors.

A connector does not need to subclass anything: any object with a
matching ``load`` (or ``extract``) method satisfies the contract.
"""

from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Protocol, runtime_checkable

from ferry.core.config import ImmutableContext

if TYPE_CHECKING:
    from ferry.execution.source import RecordSource

# Records are opaque to the framework (a delimited text row, a tuple of fields, ...)
Record = Any

ConfigMapping = Mapping[str, Any]


@runtime_checkable
class Loader(Protocol):
    """
    Consumer side of a transfer.

    Invoked exactly once per task on a dedicated thread. Pulls records
    from ``source`` until ``source.next()`` returns None (continuous mode)
    or once (single-record mode). Any error raised here is captured by the
    framework and re-raised on the task thread as the cause of a
    LoaderFailure.

    Example:
        class PrintingLoader:
            def load(self, context, connection_config, job_config, source):
                for record in source:
                    print(record)
    """

    def load(
        self,
        context: ImmutableContext,
        connection_config: ConfigMapping,
        job_config: ConfigMapping,
        source: "RecordSource",
    ) -> None:
        ...


@runtime_checkable
class Extractor(Protocol):
    """
    Producer side of a transfer.

    Returns an iterable of records that the host task loop pushes into an
    ExecutionBridge one at a time.
    """

    def extract(
        self,
        context: ImmutableContext,
        connection_config: ConfigMapping,
        job_config: ConfigMapping,
    ) -> Iterable[Record]:
        ...


# Type alias for loader factories
LoaderFactory = Callable[[], Loader]
