"""Loader-facing pull view of a RecordChannel."""

import logging
from typing import Any, Iterator, Optional

from ferry.core.enums import SignalKind
from ferry.core.errors import LoaderProtocolError
from ferry.execution.channel import RecordChannel

logger = logging.getLogger(__name__)


class RecordSource:
    """
    Hands records to a Loader, one next() call at a time.

    next() returns the next record, or None once the producer has ended
    the stream. Calling next() again after None is a contract violation.

    Loaders may also iterate:

        for record in source:
            write(record)
    """

    def __init__(self, channel: RecordChannel):
        self._channel = channel
        self.consumed = 0
        self.exhausted = False

    def next(self) -> Optional[Any]:
        """
        Return the next record, or None at end of stream.

        Raises:
            LoaderProtocolError: If called after end of stream was returned.
        """
        if self.exhausted:
            raise LoaderProtocolError(
                f"next() called after end of stream ({self.consumed} records consumed)"
            )

        signal = self._channel.take()
        if signal.kind is SignalKind.DATA:
            self.consumed += 1
            return signal.record
        if signal.kind is SignalKind.END:
            self.exhausted = True
            logger.debug(f"[RecordSource] End of stream after {self.consumed} records")
            return None

        # Faults are settled by the consumer itself and never sent through the slot
        raise LoaderProtocolError(f"Unexpected {signal.kind} signal on the consumer side")

    def __iter__(self) -> Iterator[Any]:
        while not self.exhausted:
            record = self.next()
            if record is None:
                return
            yield record
