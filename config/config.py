"""Configuration management for Ferry."""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Literal, TYPE_CHECKING
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ferry.core.config import TaskContext


class ConfigPair(BaseModel):
    """Connection and job configuration handed to one side of a transfer."""
    connection: Dict[str, Any] = Field(default_factory=dict)
    job: Dict[str, Any] = Field(default_factory=dict)


class ExtractorConfig(BaseModel):
    """Source side of a local run (bundled FileExtractor)."""
    path: str = Field(..., description="File to read")
    format: Optional[Literal["csv", "ndjson", "parquet"]] = None  # Inferred from suffix if None
    columns: Optional[list[str]] = None


class TransferConfig(BaseModel):
    """
    Root configuration of a transfer task.

    Example YAML:
        job_type: export
        loader: parquet
        consumption_mode: continuous
        connector:
          job:
            path: ./data/out
            batch_size: 5000
    """
    job_type: Literal["import", "export"] = "export"
    loader: str = Field(..., description="Registered loader name or dotted path (pkg.module:Class)")
    consumption_mode: Literal["single_record", "continuous"] = "continuous"

    # EXPORT loaders see the connector side, IMPORT loaders the framework side
    connector: ConfigPair = Field(default_factory=ConfigPair)
    framework: ConfigPair = Field(default_factory=ConfigPair)

    # Flat properties; keys prefixed with "connector." / "framework."
    properties: Dict[str, Any] = Field(default_factory=dict)

    extractor: Optional[ExtractorConfig] = None
    log_level: str = "INFO"

    def to_task_context(self, task_id: Optional[str] = None) -> "TaskContext":
        """
        Build the TaskContext for an ExecutionBridge.

        The loader stays a string identifier here; the bridge resolves it
        once, when it is constructed.
        """
        from ferry.core.config import TaskContext

        return TaskContext(
            job_type=self.job_type,
            loader=self.loader,
            consumption_mode=self.consumption_mode,
            connector_connection_config=dict(self.connector.connection),
            connector_job_config=dict(self.connector.job),
            framework_connection_config=dict(self.framework.connection),
            framework_job_config=dict(self.framework.job),
            properties=dict(self.properties),
            task_id=task_id,
        )


def load_config(config_path: Optional[str] = None) -> TransferConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, looks for:
            1. FERRY_CONFIG environment variable
            2. ./config/config.yaml
            3. ~/.ferry/config.yaml

    Returns:
        TransferConfig instance
    """
    if config_path is None:
        config_path = os.environ.get("FERRY_CONFIG")

        if config_path is None:
            candidates = [
                Path("./config/config.yaml"),
                Path.home() / ".ferry" / "config.yaml",
            ]
            for candidate in candidates:
                if candidate.exists():
                    config_path = str(candidate)
                    break

    if config_path is None:
        raise FileNotFoundError(
            "No config file found. Set FERRY_CONFIG or create config/config.yaml"
        )

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        yaml_data = yaml.safe_load(f) or {}

    if not isinstance(yaml_data, dict):
        raise ValueError(f"Config file must contain a mapping at the root: {config_path}")

    return TransferConfig(**yaml_data)


def save_example_config(output_path: str = "./config/config.example.yaml") -> Path:
    """
    Save an example configuration file.

    Args:
        output_path: Where to save the example config

    Returns:
        Path of the written file
    """
    example = {
        "job_type": "export",
        "loader": "parquet",
        "consumption_mode": "continuous",
        "extractor": {
            "path": "./data/in/orders.csv",
        },
        "connector": {
            "connection": {},
            "job": {
                "path": "./data/out/orders",
                "batch_size": 10000,
                "compression": "zstd",
            },
        },
        "properties": {
            "connector.batch.size": 10000,
        },
        "log_level": "INFO",
    }

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(example, f, default_flow_style=False, sort_keys=False)

    return output_path
