"""
Task Configuration
==================

Declarative configuration handed to an ExecutionBridge.

A TaskContext carries everything the bridge needs to start a Loader:
the job type, the Loader itself (a factory, or an identifier resolved
through the loader registry), the consumption mode and the configuration
objects the Loader receives.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Union

from ferry.core.enums import ConsumptionMode, JobType
from ferry.core.errors import ErrorCode, TransferException

if TYPE_CHECKING:
    from ferry.core.registry import LoaderRegistry

CONNECTOR_PREFIX = "connector."
FRAMEWORK_PREFIX = "framework."

_TRUE_STRINGS = {"true", "yes", "1", "on"}
_FALSE_STRINGS = {"false", "no", "0", "off"}


class ImmutableContext(Mapping):
    """
    Read-only view over task properties with typed getters.

    Example:
        context = ImmutableContext({"connector.fetch.size": "500"})
        context.prefixed("connector.").get_int("fetch.size")  # 500
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._values.get(key)
        if value is None:
            return default
        return str(value)

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self._values.get(key)
        if value is None:
            return default
        return int(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """
        Get a boolean property.

        Accepts real booleans and the usual string spellings
        ("true"/"false", "yes"/"no", "1"/"0", "on"/"off").

        Raises:
            ValueError: If the value cannot be read as a boolean.
        """
        value = self._values.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Property '{key}' is not a boolean: {value!r}")

    def prefixed(self, prefix: str) -> "ImmutableContext":
        """Return the properties under ``prefix`` with the prefix stripped."""
        return ImmutableContext({
            key[len(prefix):]: value
            for key, value in self._values.items()
            if key.startswith(prefix)
        })

    def __repr__(self) -> str:
        return f"ImmutableContext({self._values!r})"


@dataclass
class TaskContext:
    """
    Configuration for a single transfer task.

    Example:
        TaskContext(
            job_type=JobType.EXPORT,
            loader=MyLoader,
            consumption_mode=ConsumptionMode.CONTINUOUS,
            connector_job_config={"table": "orders"},
        )
    """
    # Identity
    job_type: JobType
    loader: Union[str, Callable[[], Any]]  # Factory or registry / dotted identifier

    # Loader behaviour
    consumption_mode: ConsumptionMode = ConsumptionMode.CONTINUOUS

    # Connector side configuration (used by EXPORT loaders)
    connector_connection_config: dict[str, Any] = field(default_factory=dict)
    connector_job_config: dict[str, Any] = field(default_factory=dict)

    # Framework side configuration (used by IMPORT loaders)
    framework_connection_config: dict[str, Any] = field(default_factory=dict)
    framework_job_config: dict[str, Any] = field(default_factory=dict)

    # Flat task properties, split by CONNECTOR_PREFIX / FRAMEWORK_PREFIX
    properties: dict[str, Any] = field(default_factory=dict)

    task_id: Optional[str] = None

    def __post_init__(self):
        try:
            self.job_type = JobType(self.job_type)
            self.consumption_mode = ConsumptionMode(self.consumption_mode)
        except ValueError as e:
            raise TransferException(ErrorCode.EXECUTION_0008, str(e)) from e
        if not self.loader:
            raise TransferException(ErrorCode.EXECUTION_0008, "TaskContext requires 'loader'")

    @property
    def loader_name(self) -> str:
        """Human readable name of the configured Loader."""
        if isinstance(self.loader, str):
            return self.loader
        return getattr(self.loader, "__qualname__", type(self.loader).__name__)

    def resolve_loader_factory(
        self,
        registry: Optional["LoaderRegistry"] = None,
    ) -> Callable[[], Any]:
        """
        Turn the configured loader into a factory.

        Callables are used as-is. Strings are resolved through ``registry``
        (the global registry when omitted).

        Raises:
            LoaderResolutionError: If the identifier cannot be resolved.
        """
        if callable(self.loader):
            return self.loader

        from ferry.core.registry import get_registry

        return (registry or get_registry()).resolve(self.loader)

    def loader_arguments(self) -> tuple[ImmutableContext, dict[str, Any], dict[str, Any]]:
        """
        Select the context and configuration pair the Loader receives.

        EXPORT loaders belong to the connector and see the connector side;
        IMPORT loaders belong to the framework and see the framework side.

        Returns:
            (context, connection_config, job_config)
        """
        context = ImmutableContext(self.properties)
        if self.job_type == JobType.EXPORT:
            return (
                context.prefixed(CONNECTOR_PREFIX),
                self.connector_connection_config,
                self.connector_job_config,
            )
        return (
            context.prefixed(FRAMEWORK_PREFIX),
            self.framework_connection_config,
            self.framework_job_config,
        )
