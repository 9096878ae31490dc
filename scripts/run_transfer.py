#!/usr/bin/env python3
"""
Run a Transfer Task Locally
===========================

Reads records with the bundled FileExtractor and pushes them through an
ExecutionBridge into the configured Loader, the way a batch task would.

Usage:
    # Use ./config/config.yaml (or FERRY_CONFIG)
    python scripts/run_transfer.py

    # Explicit config and input file
    python scripts/run_transfer.py --config config/orders.yaml --input data/in/orders.csv

    # Write an example config and exit
    python scripts/run_transfer.py --example-config config/config.example.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import load_config, save_example_config
from ferry.connectors import FileExtractor
from ferry.core.errors import TransferException
from ferry.execution import run_task

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run one transfer task: file extractor -> execution bridge -> loader"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (auto-detected if not specified)"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Input file (overrides extractor.path from the config)"
    )
    parser.add_argument(
        "--task-id",
        type=str,
        default=None,
        help="Task identifier used in log messages"
    )
    parser.add_argument(
        "--example-config",
        type=str,
        default=None,
        help="Write an example config to this path and exit"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.example_config:
        path = save_example_config(args.example_config)
        print(f"Example config saved to {path}")
        return 0

    config = load_config(args.config)

    log_level = logging.DEBUG if args.debug else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s'
    )

    extractor_job = config.extractor.model_dump(exclude_none=True) if config.extractor else {}
    if args.input:
        extractor_job["path"] = args.input
    if "path" not in extractor_job:
        parser.error("No input: pass --input or set extractor.path in the config")

    task_context = config.to_task_context(task_id=args.task_id)
    context, _, _ = task_context.loader_arguments()

    logger.info("=" * 60)
    logger.info(f"Job type: {task_context.job_type}")
    logger.info(f"Loader:   {task_context.loader_name} ({task_context.consumption_mode})")
    logger.info(f"Input:    {extractor_job['path']}")
    logger.info("=" * 60)

    records = FileExtractor().extract(context, {}, extractor_job)
    try:
        summary = run_task(task_context, records)
    except TransferException as e:
        logger.error(f"Transfer failed: {e}")
        if e.cause is not None:
            logger.error(f"Caused by: {e.cause!r}")
        return 1

    logger.info(
        f"Transferred {summary['records_consumed']:,} of {summary['records_pushed']:,} records "
        f"in {summary['duration_seconds']:.2f}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
