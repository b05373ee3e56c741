"""Tests for the per-cell execution handle."""

from sparqlbook_runtime.execution import CellExecution, write_error, write_turtle_result
from sparqlbook_runtime.execution.outputs import TEXT_PLAIN
from sparqlbook_runtime.notebook import Cell


def make_execution():
    execution = CellExecution(Cell.code("ASK {}", 'sparql'), execution_order=1)
    execution.start(timestamp=100.0)
    return execution


class TestCellExecution:

    def test_replace_output(self):
        """Replacement swaps the full output list on the execution and the cell."""
        execution = make_execution()
        execution.replace_output([write_turtle_result("a"), write_turtle_result("b")])
        execution.replace_output([write_error("boom")])

        assert len(execution.outputs) == 1
        assert execution.outputs[0].is_error
        assert execution.cell.outputs == execution.outputs

    def test_report_progress_appends(self):
        execution = make_execution()
        execution.report_progress("Loaded 3 triples from data.ttl")
        execution.report_progress("still going")

        texts = [o.item(TEXT_PLAIN).as_text() for o in execution.outputs]
        assert texts == ["Loaded 3 triples from data.ttl", "still going"]

    def test_end(self):
        execution = make_execution()
        execution.end(True, timestamp=101.5)

        assert execution.finished
        assert execution.success is True
        assert execution.duration == 1.5

    def test_writes_after_end_ignored(self):
        execution = make_execution()
        execution.replace_output([write_error("first")])
        execution.end(False, timestamp=101.0)

        execution.replace_output([write_turtle_result("late")])
        execution.end(True, timestamp=102.0)

        assert execution.outputs[0].is_error
        assert execution.success is False
        assert execution.ended_at == 101.0

    def test_cancel(self):
        """A cancelled execution accepts no output and stays unterminated."""
        execution = make_execution()
        execution.cancel()

        execution.replace_output([write_error("x")])
        execution.report_progress("x")
        execution.end(True)

        assert execution.cancelled
        assert execution.outputs == []
        assert execution.cell.outputs == []
        assert not execution.finished
        assert execution.success is None
        assert execution.duration is None

    def test_outputs_returns_copy(self):
        execution = make_execution()
        execution.outputs.append("not stored")

        assert execution.outputs == []
