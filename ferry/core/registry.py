"""
Loader Registry
===============

Registry for discovering Loader implementations by name.

Loaders are normally injected as factories through TaskContext. The
registry exists for configuration-driven runs, where a YAML file names
the Loader either by a registered name or by its fully-qualified path.
"""

import importlib
import logging
from typing import Callable, Optional

from ferry.core.base import Loader, LoaderFactory
from ferry.core.errors import LoaderResolutionError

logger = logging.getLogger(__name__)


class LoaderRegistry:
    """
    Registry for loaders.

    Supports both class-based and factory-based registration, and falls
    back to importing fully-qualified identifiers.

    Example:
        registry = LoaderRegistry()

        # Register by class
        registry.register("parquet", ParquetLoader)

        # Register by factory
        @registry.register_factory("jdbc")
        def create_jdbc_loader() -> Loader:
            return JdbcLoader(fetch_size=500)

        # Resolve a name or a dotted path
        factory = registry.resolve("my_connectors.loaders:OrdersLoader")
        loader = factory()
    """

    def __init__(self):
        """Initialize empty registry."""
        self._loaders: dict[str, type] = {}
        self._factories: dict[str, LoaderFactory] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, name: str, loader_class: type) -> None:
        """
        Register a loader class.

        Args:
            name: Unique name for the loader.
            loader_class: Class whose instances implement ``load``.

        Raises:
            ValueError: If name is already registered.
        """
        if name in self._loaders or name in self._factories:
            raise ValueError(f"Loader '{name}' is already registered")

        self._loaders[name] = loader_class
        logger.debug(f"Registered loader: {name}")

    def register_factory(
        self,
        name: str,
    ) -> Callable[[LoaderFactory], LoaderFactory]:
        """
        Decorator to register a loader factory.

        Args:
            name: Unique name for the loader.

        Returns:
            Decorator function.
        """
        def decorator(factory: LoaderFactory) -> LoaderFactory:
            if name in self._loaders or name in self._factories:
                raise ValueError(f"Loader '{name}' is already registered")
            self._factories[name] = factory
            logger.debug(f"Registered loader factory: {name}")
            return factory
        return decorator

    def unregister(self, name: str) -> None:
        self._loaders.pop(name, None)
        self._factories.pop(name, None)

    # =========================================================================
    # Discovery
    # =========================================================================

    def list_loaders(self) -> list[str]:
        """List all registered loader names, sorted."""
        return sorted(set(self._loaders) | set(self._factories))

    def has_loader(self, name: str) -> bool:
        return name in self._loaders or name in self._factories

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, identifier: str) -> LoaderFactory:
        """
        Resolve a loader identifier to a factory.

        Registered names win. Otherwise ``identifier`` is treated as a
        fully-qualified ``package.module.Class`` or ``package.module:Class``
        path and imported.

        Raises:
            LoaderResolutionError: If nothing can be resolved.
        """
        if identifier in self._loaders:
            return self._loaders[identifier]
        if identifier in self._factories:
            return self._factories[identifier]

        if ":" in identifier:
            module_name, _, attr_path = identifier.partition(":")
        elif "." in identifier:
            module_name, _, attr_path = identifier.rpartition(".")
        else:
            raise LoaderResolutionError(
                f"Loader '{identifier}' is not registered. "
                f"Available loaders: {self.list_loaders()}"
            )

        try:
            target = importlib.import_module(module_name)
        except ImportError as e:
            raise LoaderResolutionError(
                f"Cannot import module '{module_name}' for loader '{identifier}'"
            ) from e

        for part in attr_path.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as e:
                raise LoaderResolutionError(
                    f"Module '{module_name}' has no attribute '{attr_path}'"
                ) from e

        if not callable(target):
            raise LoaderResolutionError(f"Loader '{identifier}' is not callable")
        if isinstance(target, type) and not callable(getattr(target, "load", None)):
            raise LoaderResolutionError(
                f"Class '{identifier}' does not implement load()"
            )

        logger.debug(f"Resolved loader {identifier} -> {target!r}")
        return target

    def create(self, identifier: str) -> Loader:
        """
        Create a loader instance.

        Raises:
            LoaderResolutionError: If the identifier cannot be resolved or
                the created object does not implement ``load``.
        """
        loader = self.resolve(identifier)()
        if not isinstance(loader, Loader):
            raise LoaderResolutionError(
                f"Loader '{identifier}' produced {type(loader).__name__}, "
                "which does not implement load()"
            )
        return loader


# Global registry instance
_global_registry: Optional[LoaderRegistry] = None


def get_registry() -> LoaderRegistry:
    """
    Get the global loader registry.

    Creates the registry on first access.
    """
    global _global_registry
    if _global_registry is None:
        _global_registry = LoaderRegistry()
    return _global_registry


def register_loader(name: str):
    """
    Decorator to register a loader class with the global registry.

    Example:
        @register_loader("parquet")
        class ParquetLoader:
            def load(self, context, connection_config, job_config, source):
                ...
    """
    def decorator(cls: type) -> type:
        get_registry().register(name, cls)
        return cls
    return decorator
