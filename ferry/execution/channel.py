"""
Record Channel
==============

Single-slot handoff buffer between the task thread (producer) and the
loader thread (consumer).

The channel holds at most one StreamSignal. A producer blocks in put()
until the consumer has taken the previous signal, which is what gives
the bridge its backpressure: at most one record is ever in flight.

Besides the slot, the channel holds the consumer's terminal outcome.
The loader thread deposits it with settle() when it exits; it is read
under the same lock as the slot, so a producer parked in put() is
released as soon as the consumer is gone.
"""

import threading
from dataclasses import dataclass
from typing import Any, Optional

from ferry.core.enums import LoaderState, SignalKind
from ferry.core.errors import ErrorCode, InvalidState


@dataclass(frozen=True)
class StreamSignal:
    """Tagged value carried by a RecordChannel."""
    kind: SignalKind
    record: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def data(cls, record: Any) -> "StreamSignal":
        return cls(SignalKind.DATA, record=record)

    @classmethod
    def end(cls) -> "StreamSignal":
        return cls(SignalKind.END)

    @classmethod
    def fault(cls, error: BaseException) -> "StreamSignal":
        return cls(SignalKind.FAULT, error=error)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not SignalKind.DATA


@dataclass(frozen=True)
class LoaderOutcome:
    """
    Terminal result of a loader run.

    ``fault`` is set only when ``state`` is FAILED and holds the error the
    loader raised, unchanged.
    """
    state: LoaderState
    fault: Optional[StreamSignal] = None

    @classmethod
    def completed(cls) -> "LoaderOutcome":
        return cls(LoaderState.COMPLETED)

    @classmethod
    def failed(cls, error: BaseException) -> "LoaderOutcome":
        return cls(LoaderState.FAILED, StreamSignal.fault(error))

    @property
    def error(self) -> Optional[BaseException]:
        return self.fault.error if self.fault is not None else None


RUNNING = LoaderOutcome(LoaderState.RUNNING)


class RecordChannel:
    """
    Capacity-one blocking channel for exactly one producer and one consumer.

    Example:
        channel = RecordChannel()
        channel.put(StreamSignal.data("1,2,3"))   # producer thread
        signal = channel.take()                   # consumer thread
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._slot: Optional[StreamSignal] = None
        self._sealed = False
        self._outcome: LoaderOutcome = RUNNING

    # =========================================================================
    # Producer side
    # =========================================================================

    def put(self, signal: StreamSignal) -> bool:
        """
        Hand a signal to the consumer.

        Blocks while the slot is occupied and the consumer is running.

        Returns:
            True if the signal was stored, False if the consumer has already
            terminated and nobody is left to receive it.

        Raises:
            InvalidState: If a signal is put after END, or a FAULT is put
                (faults travel through settle(), never through the slot).
        """
        if signal.kind is SignalKind.FAULT:
            raise InvalidState("Faults are reported with settle()", ErrorCode.EXECUTION_0005)

        with self._not_full:
            if self._sealed:
                raise InvalidState(f"Cannot put {signal.kind} after END", ErrorCode.EXECUTION_0006)

            while self._slot is not None and self._outcome.state is LoaderState.RUNNING:
                self._not_full.wait()

            if signal.is_terminal:
                self._sealed = True

            if self._outcome.state is not LoaderState.RUNNING:
                return False

            self._slot = signal
            self._not_empty.notify()
            return True

    @property
    def outcome(self) -> LoaderOutcome:
        """Consumer outcome; state RUNNING until the consumer settles."""
        with self._lock:
            return self._outcome

    # =========================================================================
    # Consumer side
    # =========================================================================

    def take(self) -> StreamSignal:
        """Remove and return the next signal, blocking until one is available."""
        with self._not_empty:
            while self._slot is None:
                self._not_empty.wait()
            signal, self._slot = self._slot, None
            self._not_full.notify()
            return signal

    def settle(self, outcome: LoaderOutcome) -> None:
        """
        Record the consumer's terminal outcome and release a blocked producer.

        Raises:
            InvalidState: If the outcome is RUNNING or one was already recorded.
        """
        if outcome.state is LoaderState.RUNNING:
            raise InvalidState("A terminal outcome is required")

        with self._not_full:
            if self._outcome.state is not LoaderState.RUNNING:
                raise InvalidState(f"Consumer already settled as {self._outcome.state}")
            self._outcome = outcome
            self._not_full.notify_all()

    @property
    def pending(self) -> bool:
        """True if a signal sits in the slot, not yet taken."""
        with self._lock:
            return self._slot is not None
