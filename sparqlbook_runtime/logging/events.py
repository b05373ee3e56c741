"""JSONL event log for cell executions.

Records one JSON line per event so batch runs can be inspected afterwards.
"""

from __future__ import annotations

import json
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Optional


class ExecutionEventLogger:
    """Logger for cell execution events.

    Each event is written as a JSON line with:
    - event: Event type (session_start, cell_start, cell_end)
    - timestamp: ISO 8601 timestamp
    - run_id: Run identifier
    - ... event-specific fields

    Example:
        events = ExecutionEventLogger(Path("runs.jsonl"), run_id="r-001")
        events.log_cell_start(1, "sparql", "https://example.org/sparql")
        events.log_cell_end(1, success=True, duration=0.42, result_kind="bindings")
        events.close()
    """

    def __init__(self, log_path: Path | str, run_id: str, document: Optional[str] = None):
        """Initialize execution event logger.

        Args:
            log_path: Path to JSONL output file
            run_id: Run identifier for provenance
            document: Optional notebook path the run belongs to
        """
        self.log_path = Path(log_path)
        self.run_id = run_id
        self.document = document

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.log_file = open(self.log_path, "a")

        self._write_event({
            "event": "session_start",
            "document": self.document,
        })

    def _timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format."""
        return datetime.now(timezone.utc).isoformat()

    def _write_event(self, event: dict[str, Any]) -> None:
        """Write event to JSONL log file.

        Args:
            event: Event dictionary to log
        """
        try:
            if "timestamp" not in event:
                event["timestamp"] = self._timestamp()
            if "run_id" not in event:
                event["run_id"] = self.run_id

            json.dump(event, self.log_file, ensure_ascii=False)
            self.log_file.write("\n")
            self.log_file.flush()
        except Exception as e:
            # Don't crash the run due to logging errors
            print(f"Warning: Failed to write execution event: {e}")

    def log_cell_start(self, execution_order: Optional[int], language: str, endpoint: Optional[str]) -> None:
        """Log a cell starting to execute."""
        self._write_event({
            "event": "cell_start",
            "execution_order": execution_order,
            "language": language,
            "endpoint": endpoint,
        })

    def log_cell_end(
        self,
        execution_order: Optional[int],
        success: bool,
        duration: Optional[float] = None,
        result_kind: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """Log a cell's final state.

        Args:
            execution_order: Execution order of the cell
            success: Whether the execution ended successfully
            duration: Seconds between start and end
            result_kind: ResponseKind value for classified responses
            error: Error message for failed executions
        """
        event = {
            "event": "cell_end",
            "execution_order": execution_order,
            "success": success,
            "duration": duration,
            "result_kind": result_kind,
        }
        if error is not None:
            event["error"] = error[:500]
        self._write_event(event)

    def close(self) -> None:
        """Close log file."""
        if self.log_file and not self.log_file.closed:
            self.log_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
