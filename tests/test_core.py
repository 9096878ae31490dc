"""
Unit Tests for the Transfer Core Module
=======================================

Tests for enums, errors, task configuration and the loader registry.
"""

import pytest

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
from ferry.core.base import Extractor, Loader
from ferry.core.registry import LoaderRegistry, get_registry


class NullLoader:
    def load(self, context, connection_config, job_config, source):
        for _ in source:
            pass


class NotALoader:
    pass


class TestEnums:
    """Tests for enum values and conversions."""

    def test_job_type_values(self):
        assert JobType.IMPORT.value == "import"
        assert JobType.EXPORT.value == "export"

    def test_consumption_mode_values(self):
        assert ConsumptionMode.SINGLE_RECORD.value == "single_record"
        assert ConsumptionMode.CONTINUOUS.value == "continuous"

    def test_state_values(self):
        assert LoaderState.RUNNING.value == "running"
        assert LoaderState.FAILED.value == "failed"
        assert BridgeState.ABORTED.value == "aborted"
        assert SignalKind.END.value == "end"

    def test_enum_str_conversion(self):
        assert str(JobType.EXPORT) == "export"
        assert str(DataFormat.PARQUET) == "parquet"

    def test_enum_from_string(self):
        assert JobType("import") is JobType.IMPORT
        assert ConsumptionMode("continuous") is ConsumptionMode.CONTINUOUS


class TestErrors:
    """Tests for the error taxonomy."""

    def test_message_includes_code_and_detail(self):
        error = LoaderFailure("boom")
        assert str(error) == "EXECUTION_0001 - The loader raised an error: boom"
        assert error.error_code is ErrorCode.EXECUTION_0001

    def test_message_without_detail(self):
        error = InvalidState()
        assert str(error) == "EXECUTION_0005 - The execution bridge is not open"

    def test_consumer_failed_is_loader_failure(self):
        error = ConsumerFailed("late", record_accepted=True)
        assert isinstance(error, LoaderFailure)
        assert isinstance(error, TransferException)
        assert error.record_accepted is True
        assert error.error_code is ErrorCode.EXECUTION_0002

    def test_cause_is_chained_error(self):
        original = KeyError("missing")
        try:
            try:
                raise original
            except KeyError as e:
                raise LoaderFailure("wrapped") from e
        except LoaderFailure as wrapped:
            assert wrapped.cause is original

    def test_protocol_error_custom_code(self):
        error = LoaderProtocolError("early return", ErrorCode.EXECUTION_0004)
        assert error.error_code.code == "EXECUTION_0004"


class TestImmutableContext:
    """Tests for ImmutableContext."""

    def test_typed_getters(self):
        context = ImmutableContext({"size": "500", "flag": "yes", "name": 7})

        assert context.get_int("size") == 500
        assert context.get_bool("flag") is True
        assert context.get_string("name") == "7"

    def test_defaults(self):
        context = ImmutableContext()

        assert context.get_int("size", 10) == 10
        assert context.get_string("name") is None
        assert context.get_bool("flag") is False
        assert len(context) == 0

    def test_invalid_bool(self):
        context = ImmutableContext({"flag": "maybe"})

        with pytest.raises(ValueError, match="not a boolean"):
            context.get_bool("flag")

    def test_prefixed(self):
        context = ImmutableContext({
            "connector.fetch.size": 100,
            "framework.output.dir": "/tmp/out",
        })

        connector = context.prefixed("connector.")
        assert dict(connector) == {"fetch.size": 100}
        assert "output.dir" in context.prefixed("framework.")

    def test_read_only(self):
        context = ImmutableContext({"a": 1})

        with pytest.raises(TypeError):
            context["a"] = 2


class TestTaskContext:
    """Tests for TaskContext."""

    def test_coerces_strings(self):
        context = TaskContext(job_type="export", loader=NullLoader, consumption_mode="single_record")

        assert context.job_type is JobType.EXPORT
        assert context.consumption_mode is ConsumptionMode.SINGLE_RECORD

    def test_defaults(self):
        context = TaskContext(job_type=JobType.IMPORT, loader=NullLoader)

        assert context.consumption_mode is ConsumptionMode.CONTINUOUS
        assert context.properties == {}
        assert context.loader_name == "NullLoader"

    def test_invalid_job_type(self):
        with pytest.raises(TransferException) as excinfo:
            TaskContext(job_type="sideways", loader=NullLoader)
        assert excinfo.value.error_code is ErrorCode.EXECUTION_0008

    def test_missing_loader(self):
        with pytest.raises(TransferException, match="requires 'loader'"):
            TaskContext(job_type=JobType.EXPORT, loader="")

    def test_export_uses_connector_side(self):
        context = TaskContext(
            job_type=JobType.EXPORT,
            loader=NullLoader,
            connector_connection_config={"url": "db://orders"},
            connector_job_config={"table": "orders"},
            framework_job_config={"path": "/out"},
            properties={"connector.batch.size": 5, "framework.batch.size": 9},
        )

        ctx, connection, job = context.loader_arguments()

        assert connection == {"url": "db://orders"}
        assert job == {"table": "orders"}
        assert ctx.get_int("batch.size") == 5

    def test_import_uses_framework_side(self):
        context = TaskContext(
            job_type=JobType.IMPORT,
            loader=NullLoader,
            connector_job_config={"table": "orders"},
            framework_connection_config={"fs": "local"},
            framework_job_config={"path": "/out"},
            properties={"connector.batch.size": 5, "framework.batch.size": 9},
        )

        ctx, connection, job = context.loader_arguments()

        assert connection == {"fs": "local"}
        assert job == {"path": "/out"}
        assert ctx.get_int("batch.size") == 9

    def test_resolve_callable(self):
        context = TaskContext(job_type=JobType.EXPORT, loader=NullLoader)
        assert context.resolve_loader_factory() is NullLoader

    def test_resolve_identifier(self):
        registry = LoaderRegistry()
        registry.register("null", NullLoader)
        context = TaskContext(job_type=JobType.EXPORT, loader="null")

        assert context.resolve_loader_factory(registry) is NullLoader
        assert context.loader_name == "null"


class TestContracts:
    """Tests for the capability interfaces."""

    def test_loader_protocol(self):
        assert isinstance(NullLoader(), Loader)
        assert not isinstance(NotALoader(), Loader)

    def test_extractor_protocol(self):
        class ListExtractor:
            def extract(self, context, connection_config, job_config):
                return [1, 2]

        assert isinstance(ListExtractor(), Extractor)
        assert not isinstance(NullLoader(), Extractor)


class TestLoaderRegistry:
    """Tests for LoaderRegistry."""

    def test_register_and_create(self):
        registry = LoaderRegistry()
        registry.register("null", NullLoader)

        assert registry.has_loader("null")
        assert isinstance(registry.create("null"), NullLoader)

    def test_duplicate_registration(self):
        registry = LoaderRegistry()
        registry.register("null", NullLoader)

        with pytest.raises(ValueError, match="already registered"):
            registry.register("null", NullLoader)

    def test_register_factory(self):
        registry = LoaderRegistry()

        @registry.register_factory("configured")
        def create_loader():
            return NullLoader()

        assert registry.list_loaders() == ["configured"]
        assert isinstance(registry.create("configured"), NullLoader)

    def test_unregister(self):
        registry = LoaderRegistry()
        registry.register("null", NullLoader)
        registry.unregister("null")

        assert not registry.has_loader("null")

    def test_resolve_dotted_paths(self):
        registry = LoaderRegistry()

        from ferry.connectors.files import ParquetLoader

        assert registry.resolve("ferry.connectors.files.ParquetLoader") is ParquetLoader
        assert registry.resolve("ferry.connectors.files:ParquetLoader") is ParquetLoader

    def test_resolve_unknown_name(self):
        registry = LoaderRegistry()

        with pytest.raises(LoaderResolutionError, match="not registered"):
            registry.resolve("nothing")

    def test_resolve_missing_module(self):
        registry = LoaderRegistry()

        with pytest.raises(LoaderResolutionError, match="Cannot import"):
            registry.resolve("ferry_missing_module.Loader")

    def test_resolve_missing_attribute(self):
        registry = LoaderRegistry()

        with pytest.raises(LoaderResolutionError, match="has no attribute"):
            registry.resolve("ferry.connectors.files:MissingLoader")

    def test_resolve_class_without_load(self):
        registry = LoaderRegistry()

        with pytest.raises(LoaderResolutionError, match="does not implement load"):
            registry.resolve(f"{__name__}:NotALoader")

    def test_create_rejects_non_loader(self):
        registry = LoaderRegistry()
        registry.register_factory("broken")(lambda: object())

        with pytest.raises(LoaderResolutionError, match="does not implement load"):
            registry.create("broken")

    def test_global_registry_has_bundled_loaders(self):
        import ferry.connectors  # noqa: F401

        assert get_registry() is get_registry()
        assert get_registry().has_loader("parquet")
