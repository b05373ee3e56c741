"""Cell execution pipeline: dispatch, response classification, outputs."""

from .execution import CellExecution
from .outputs import (
    CellOutput,
    OutputItem,
    write_error,
    write_sparql_json_result,
    write_turtle_result,
)
from .response import ResponseKind, classify_response
from .namespaces import parse_prefixes, format_bindings_with_namespaces
from .executor import NotebookCellExecutor, NOT_CONNECTED_MESSAGE, dispatch_error_message

__all__ = [
    "CellExecution",
    "CellOutput",
    "OutputItem",
    "write_error",
    "write_sparql_json_result",
    "write_turtle_result",
    "ResponseKind",
    "classify_response",
    "parse_prefixes",
    "format_bindings_with_namespaces",
    "NotebookCellExecutor",
    "NOT_CONNECTED_MESSAGE",
    "dispatch_error_message",
]
