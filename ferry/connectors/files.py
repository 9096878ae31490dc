"""
File Connector
==============

Local file extractor and Parquet loader built on polars.

FileExtractor reads CSV, NDJSON or Parquet and yields each row as a
tuple. ParquetLoader is a continuous loader that buffers records into
batches and writes numbered part files.
"""

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Sequence

import polars as pl

from ferry.core.config import ImmutableContext
from ferry.core.enums import DataFormat
from ferry.core.registry import register_loader
from ferry.execution.source import RecordSource

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10_000


def _infer_format(path: Path) -> DataFormat:
    suffix = path.suffix.lower().lstrip(".")
    if suffix in ("jsonl", "json"):
        return DataFormat.NDJSON
    try:
        return DataFormat(suffix)
    except ValueError:
        raise ValueError(f"Cannot infer data format from '{path.name}'") from None


class FileExtractor:
    """
    Extract rows from a local file.

    Job configuration:
        path: File (or glob) to read.
        format: "csv", "ndjson" or "parquet"; inferred from the suffix if omitted.
        columns: Optional list of columns to select.
    """

    def extract(
        self,
        context: ImmutableContext,
        connection_config: Mapping[str, Any],
        job_config: Mapping[str, Any],
    ) -> Iterator[tuple]:
        path = Path(job_config["path"])
        data_format = DataFormat(job_config.get("format") or _infer_format(path))

        lf = self._scan(path, data_format)
        columns = job_config.get("columns")
        if columns:
            lf = lf.select(columns)

        df = lf.collect()
        logger.info(f"[FileExtractor] Read {len(df)} rows from {path} ({data_format})")
        yield from df.iter_rows()

    def _scan(self, path: Path, data_format: DataFormat) -> pl.LazyFrame:
        if data_format == DataFormat.PARQUET:
            return pl.scan_parquet(str(path))
        if data_format == DataFormat.NDJSON:
            return pl.scan_ndjson(str(path))
        return pl.scan_csv(str(path))


@register_loader("parquet")
class ParquetLoader:
    """
    Continuous loader writing records to Parquet part files.

    Records may be tuples/lists of field values, or delimited strings.

    Job configuration:
        path: Output directory.
        columns: Column names (defaults to column_0, column_1, ...).
        batch_size: Rows per part file (context key ``batch.size`` otherwise).
        delimiter: Field delimiter for string records (default ",").
        compression: Parquet codec (default "zstd").
    """

    def load(
        self,
        context: ImmutableContext,
        connection_config: Mapping[str, Any],
        job_config: Mapping[str, Any],
        source: RecordSource,
    ) -> None:
        output_dir = Path(job_config["path"])
        output_dir.mkdir(parents=True, exist_ok=True)

        columns: Optional[Sequence[str]] = job_config.get("columns")
        batch_size = job_config.get("batch_size")
        if batch_size is None:
            batch_size = context.get_int("batch.size", DEFAULT_BATCH_SIZE)
        batch_size = int(batch_size)
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        delimiter = job_config.get("delimiter", ",")
        compression = job_config.get("compression", "zstd")

        batch: list[Sequence[Any]] = []
        part = 0
        total = 0

        for record in source:
            if isinstance(record, str):
                record = record.split(delimiter)
            batch.append(record)
            if len(batch) >= batch_size:
                self._write_part(batch, columns, output_dir / f"part-{part:05d}.parquet", compression)
                total += len(batch)
                part += 1
                batch = []

        if batch:
            self._write_part(batch, columns, output_dir / f"part-{part:05d}.parquet", compression)
            total += len(batch)
            part += 1

        logger.info(f"[ParquetLoader] Wrote {total} rows in {part} files to {output_dir}")

    def _write_part(
        self,
        rows: list[Sequence[Any]],
        columns: Optional[Sequence[str]],
        path: Path,
        compression: str,
    ) -> None:
        df = pl.DataFrame(rows, schema=list(columns) if columns else None, orient="row")
        df.write_parquet(str(path), compression=compression)
        logger.debug(f"[ParquetLoader] Wrote {len(df)} rows to {path}")
