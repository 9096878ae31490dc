"""
Transfer Errors
===============

Framework-level exceptions raised by the execution bridge.

Every framework error carries an ErrorCode so a failed task can be
diagnosed by code as well as by message. Errors raised by a Loader are
never replaced: they travel as the ``__cause__`` of the framework error
that surfaces them on the producer thread.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Execution error codes.

    The member name is the stable code, the value its description.
    """
    EXECUTION_0000 = "An unknown error has occurred"
    EXECUTION_0001 = "The loader raised an error"
    EXECUTION_0002 = "The loader failed before the record could be delivered"
    EXECUTION_0003 = "The loader read past the end of the stream"
    EXECUTION_0004 = "The loader returned before the end of the stream"
    EXECUTION_0005 = "The execution bridge is not open"
    EXECUTION_0006 = "No further records may follow the end of the stream"
    EXECUTION_0007 = "Unable to resolve the loader implementation"
    EXECUTION_0008 = "Invalid task configuration"

    @property
    def code(self) -> str:
        return self.name

    @property
    def message(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.name


class TransferException(Exception):
    """
    Base class for all framework errors.

    Args:
        error_code: Code identifying the failure.
        detail: Optional free-form detail appended to the code description.
    """

    def __init__(self, error_code: ErrorCode, detail: Optional[str] = None):
        self.error_code = error_code
        self.detail = detail
        message = f"{error_code.code} - {error_code.message}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def cause(self) -> Optional[BaseException]:
        """The original error this exception wraps, if any."""
        return self.__cause__


class LoaderFailure(TransferException):
    """A Loader raised while consuming records. The original error is the cause."""

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.EXECUTION_0001,
    ):
        super().__init__(error_code, detail)


class ConsumerFailed(LoaderFailure):
    """
    The Loader thread had already failed when push() observed it.

    ``record_accepted`` is False when the record was never handed off
    (the failure was seen before enqueueing) and True when the record
    was handed off and the failure was seen afterwards.
    """

    def __init__(self, detail: Optional[str] = None, record_accepted: bool = False):
        super().__init__(detail, error_code=ErrorCode.EXECUTION_0002)
        self.record_accepted = record_accepted


class LoaderProtocolError(TransferException):
    """A Loader broke the RecordSource contract."""

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.EXECUTION_0003,
    ):
        super().__init__(error_code, detail)


class InvalidState(TransferException):
    """The bridge or channel was used outside its lifecycle."""

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.EXECUTION_0005,
    ):
        super().__init__(error_code, detail)


class LoaderResolutionError(TransferException):
    """A Loader identifier could not be turned into a Loader factory."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ErrorCode.EXECUTION_0007, detail)
