"""Per-cell execution handle.

A CellExecution lives from the moment a cell starts running until its output
is committed with end(). The pipeline writes outputs through it; endpoints may
use it to stream progress before the final output replaces it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from ..notebook.cells import Cell
from .outputs import CellOutput, OutputItem, TEXT_PLAIN


@dataclass
class CellExecution:
    """Ephemeral record of one cell run.

    Output writes go straight to the cell, so the cell always shows the latest
    state. After cancel() every write and end() is ignored, leaving the
    execution unterminated.

    Attributes:
        cell: Cell being executed
        execution_order: Display order assigned by the controller
        started_at: Start time (epoch seconds), set by start()
        ended_at: End time (epoch seconds), set by end()
        success: Final success flag, None while running
    """

    cell: Cell
    execution_order: Optional[int] = None
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    success: Optional[bool] = None
    _outputs: list[CellOutput] = field(default_factory=list, repr=False)
    _cancelled: bool = field(default=False, repr=False)

    @property
    def outputs(self) -> list[CellOutput]:
        return list(self._outputs)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self.ended_at is not None

    @property
    def duration(self) -> Optional[float]:
        if self.started_at is None or self.ended_at is None:
            return None
        return self.ended_at - self.started_at

    def start(self, timestamp: Optional[float] = None) -> None:
        self.started_at = time.time() if timestamp is None else timestamp

    def cancel(self) -> None:
        """Stop accepting output. The execution stays unterminated."""
        self._cancelled = True

    def replace_output(self, outputs: list[CellOutput]) -> None:
        """Replace all outputs of the cell at once."""
        if self._cancelled or self.finished:
            return
        self._outputs = list(outputs)
        self.cell.outputs = list(self._outputs)

    def append_output(self, outputs: list[CellOutput]) -> None:
        """Add outputs after the existing ones (used for streamed progress)."""
        if self._cancelled or self.finished:
            return
        self._outputs.extend(outputs)
        self.cell.outputs = list(self._outputs)

    def report_progress(self, message: str) -> None:
        """Stream a plain text progress line; the final output replaces it."""
        self.append_output([CellOutput([OutputItem.text(message, TEXT_PLAIN)])])

    def end(self, success: bool, timestamp: Optional[float] = None) -> None:
        """Commit the outputs and record the final state."""
        if self._cancelled or self.finished:
            return
        self.success = success
        self.ended_at = time.time() if timestamp is None else timestamp
