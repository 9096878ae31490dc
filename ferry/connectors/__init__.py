"""Bundled connectors. Importing this package registers their loaders."""

from ferry.connectors.files import FileExtractor, ParquetLoader

__all__ = ["FileExtractor", "ParquetLoader"]
