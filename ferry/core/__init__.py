"""
Transfer Core Framework
=======================

The core contracts shared by connectors and the execution bridge:
- Loader / Extractor: capability interfaces implemented by connectors
- TaskContext / ImmutableContext: declarative task configuration
- LoaderRegistry: name and dotted-path resolution of loaders
- Error taxonomy with stable error codes
- Enums for type-safe configuration and state
"""

from ferry.core.enums import (
    BridgeState,
    ConsumptionMode,
    DataFormat,
    JobType,
    LoaderState,
    SignalKind,
)
from ferry.core.errors import (
    ConsumerFailed,
    ErrorCode,
    InvalidState,
    LoaderFailure,
    LoaderProtocolError,
    LoaderResolutionError,
    TransferException,
)
from ferry.core.config import ImmutableContext, TaskContext
from ferry.core.base import Extractor, Loader, LoaderFactory, Record
from ferry.core.registry import LoaderRegistry, get_registry, register_loader

__all__ = [
    # Enums
    "JobType",
    "ConsumptionMode",
    "SignalKind",
    "LoaderState",
    "BridgeState",
    "DataFormat",
    # Errors
    "ErrorCode",
    "TransferException",
    "LoaderFailure",
    "ConsumerFailed",
    "LoaderProtocolError",
    "InvalidState",
    "LoaderResolutionError",
    # Config
    "ImmutableContext",
    "TaskContext",
    # Contracts
    "Loader",
    "Extractor",
    "LoaderFactory",
    "Record",
    # Registry
    "LoaderRegistry",
    "get_registry",
    "register_loader",
]
