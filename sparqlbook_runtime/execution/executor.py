"""Per-cell execution pipeline.

resolve endpoint -> dispatch query/validate -> classify response -> write
output -> end execution. Every failure is turned into an error output on the
cell; nothing propagates to the caller except task cancellation.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ..config import SparqlbookConfig
from ..endpoint.base import EndpointController, SimpleHttpResponse
from ..endpoint.resolve import resolve_endpoint
from ..notebook.cells import Cell
from .execution import CellExecution
from .namespaces import format_bindings_with_namespaces
from .outputs import write_error, write_sparql_json_result, write_turtle_result
from .response import ResponseKind, classify_response, response_json, response_text

logger = logging.getLogger(__name__)


NOT_CONNECTED_MESSAGE = "Not connected to a SPARQL Endpoint"


def dispatch_error_message(error: BaseException) -> str:
    """Compose the message shown for a failed dispatch.

    The error's own message, followed by the response body the endpoint sent
    back, if any.
    """
    message = getattr(error, 'message', None) or str(error) or "error"

    response = getattr(error, 'response', None)
    if response is not None:
        body = getattr(response, 'data', None)
        if body is None:
            body = getattr(response, 'text', None)
        if isinstance(body, (bytes, bytearray)):
            body = body.decode('utf-8', errors='replace')
        if body:
            if not isinstance(body, str):
                body = json.dumps(body, ensure_ascii=False)
            message += "\n" + body
    return message


class NotebookCellExecutor:
    """Runs code cells and writes their outputs.

    Attributes:
        config: Settings (namespace rewriting, HTTP timeout)
        endpoint_controller: Holder of the ambient connection
        event_logger: Optional ExecutionEventLogger
    """

    def __init__(
        self,
        config: Optional[SparqlbookConfig] = None,
        endpoint_controller: Optional[EndpointController] = None,
        event_logger: Any = None,
    ):
        self.config = config or SparqlbookConfig()
        self.endpoint_controller = endpoint_controller or EndpointController(self.config.active())
        self.event_logger = event_logger

        self._handlers = self._build_handlers()
        missing = set(ResponseKind) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for response kinds: {sorted(k.value for k in missing)}")

    def _build_handlers(self) -> dict[ResponseKind, Callable[[SimpleHttpResponse, str, CellExecution], None]]:
        return {
            ResponseKind.BOOLEAN: self._handle_boolean,
            ResponseKind.BINDINGS: self._handle_bindings,
            ResponseKind.TURTLE: self._handle_turtle,
            ResponseKind.APPLICATION_ERROR: self._handle_application_error,
            ResponseKind.UNEXPECTED: self._handle_unexpected,
        }

    async def execute_cell(
        self,
        cell: Cell,
        execution: CellExecution,
        base_dir: Union[str, Path, None] = None,
    ) -> None:
        """Execute one code cell.

        Args:
            cell: Code cell to run
            execution: Live execution handle for the cell
            base_dir: Document directory for relative file endpoints
        """
        query_text = cell.content

        try:
            endpoint = resolve_endpoint(
                query_text,
                connection=self.endpoint_controller.get_connection(),
                base_dir=base_dir,
                timeout=self.config.timeout,
            )
        except Exception as error:
            message = dispatch_error_message(error)
            logger.error(f"Endpoint resolution error: {message}")
            self._log_start(execution, cell, None)
            self._fail(execution, message)
            return

        self._log_start(execution, cell, endpoint)

        if endpoint is None:
            self._fail(execution, NOT_CONNECTED_MESSAGE)
            return

        try:
            if cell.language == 'shacl':
                response = await endpoint.validate(query_text, execution)
            else:
                response = await endpoint.query(query_text, execution)
        except Exception as error:
            message = dispatch_error_message(error)
            logger.error(f"SPARQL execution error: {message}")
            self._fail(execution, message)
            return

        if execution.cancelled:
            return

        try:
            kind = classify_response(response)
            self._handlers[kind](response, query_text, execution)
        except Exception as error:
            message = dispatch_error_message(error)
            logger.error(f"Could not render endpoint response: {message}")
            self._fail(execution, message)
            return
        self._log_end(execution, kind)

    # ===== Response handlers =====

    def _handle_boolean(self, response: SimpleHttpResponse, query_text: str, execution: CellExecution) -> None:
        execution.replace_output([write_sparql_json_result(response_json(response))])
        execution.end(True)

    def _handle_bindings(self, response: SimpleHttpResponse, query_text: str, execution: CellExecution) -> None:
        data = response_json(response)
        if self.config.use_namespaces:
            data = format_bindings_with_namespaces(data, query_text)
        execution.replace_output([write_sparql_json_result(data)])
        execution.end(True)

    def _handle_turtle(self, response: SimpleHttpResponse, query_text: str, execution: CellExecution) -> None:
        execution.replace_output([write_turtle_result(response_text(response))])
        execution.end(True)

    def _handle_application_error(self, response: SimpleHttpResponse, query_text: str, execution: CellExecution) -> None:
        data = response_json(response)
        if isinstance(data, dict) and data.get('message') is not None:
            message = data['message']
            if not isinstance(message, str):
                message = str(message)
        else:
            message = response_text(response)
        execution.replace_output([write_error(message)])
        execution.end(False)

    def _handle_unexpected(self, response: SimpleHttpResponse, query_text: str, execution: CellExecution) -> None:
        message = f"Error: Unknown content type {response.content_type}\n\n{response_text(response)}"
        logger.error(message)
        execution.replace_output([write_error(message)])
        execution.end(False)

    # ===== Helpers =====

    def _fail(self, execution: CellExecution, message: str) -> None:
        execution.replace_output([write_error(message)])
        execution.end(False)
        if self.event_logger is not None and execution.finished:
            self.event_logger.log_cell_end(
                execution.execution_order, False, execution.duration, error=message
            )

    def _log_start(self, execution: CellExecution, cell: Cell, endpoint: Any) -> None:
        if self.event_logger is None:
            return
        self.event_logger.log_cell_start(
            execution.execution_order,
            cell.language,
            getattr(endpoint, 'url', None),
        )

    def _log_end(self, execution: CellExecution, kind: ResponseKind) -> None:
        if self.event_logger is None or not execution.finished:
            return
        self.event_logger.log_cell_end(
            execution.execution_order,
            bool(execution.success),
            execution.duration,
            result_kind=kind.value,
        )
