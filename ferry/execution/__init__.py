"""
Execution Bridge
================

Threaded bridge between the host task loop and a connector's Loader:
- RecordChannel: single-slot blocking handoff
- RecordSource: Loader-facing pull view
- LoaderRunner: Loader thread with failure capture
- ExecutionBridge / RecordWriter: push-facing task API
- run_task: local host task loop
"""

from ferry.execution.channel import LoaderOutcome, RecordChannel, StreamSignal
from ferry.execution.source import RecordSource
from ferry.execution.runner import LoaderRunner
from ferry.execution.bridge import ExecutionBridge, RecordWriter
from ferry.execution.task import run_task

__all__ = [
    "StreamSignal",
    "LoaderOutcome",
    "RecordChannel",
    "RecordSource",
    "LoaderRunner",
    "ExecutionBridge",
    "RecordWriter",
    "run_task",
]
