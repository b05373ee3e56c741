"""Observability for notebook execution.

Provides a JSONL event log of cell executions.
"""

from .events import ExecutionEventLogger

__all__ = [
    "ExecutionEventLogger",
]
