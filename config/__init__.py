"""Config package."""
from .config import TransferConfig, load_config, save_example_config

__all__ = ["TransferConfig", "load_config", "save_example_config"]
