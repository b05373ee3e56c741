"""Notebook controllers: start cell executions in document order.

A batch run starts every requested cell without waiting for the previous one
to finish. Each cell becomes its own asyncio task; a failing cell never stops
its siblings.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from .config import SparqlbookConfig
from .endpoint.base import EndpointController
from .errors import MarkdownIntegrationDisabled
from .execution.execution import CellExecution
from .execution.executor import NotebookCellExecutor, dispatch_error_message
from .execution.outputs import write_error
from .notebook.cells import Cell, Document, EXECUTABLE_LANGUAGES

logger = logging.getLogger(__name__)


SPARQL_NOTEBOOK_TYPE = 'sparql-notebook'
MARKDOWN_NOTEBOOK_TYPE = 'sparql-markdown-notebook'


class NotebookController:
    """Executes code cells of a notebook.

    Attributes:
        notebook_type: Notebook type this controller serves
        label: Display label
        supported_languages: Cell languages the controller runs
        executor: Shared NotebookCellExecutor
    """

    supported_languages = EXECUTABLE_LANGUAGES

    def __init__(
        self,
        executor: Optional[NotebookCellExecutor] = None,
        notebook_type: str = SPARQL_NOTEBOOK_TYPE,
        label: str = "Sparql Notebook",
    ):
        self.executor = executor or NotebookCellExecutor()
        self.notebook_type = notebook_type
        self.label = label
        self._execution_order = 0

    @property
    def controller_id(self) -> str:
        return f"{self.notebook_type}-controller-id"

    def execute(self, cells: Iterable[Cell], document: Optional[Document] = None) -> list[asyncio.Task]:
        """Start executing cells in order without waiting for them.

        Must be called from a running event loop. Markup cells and cells in
        unsupported languages are skipped.

        Args:
            cells: Cells to execute
            document: Document the cells belong to (for relative file endpoints)

        Returns:
            One task per started cell, each resolving to the cell's CellExecution
        """
        base_dir = document.directory if document is not None else None
        tasks = []
        for cell in cells:
            if not cell.is_code or cell.language not in self.supported_languages:
                continue
            execution = self._create_execution(cell)
            tasks.append(asyncio.create_task(self._execute_cell(cell, execution, base_dir)))
        return tasks

    async def run(self, cells: Iterable[Cell], document: Optional[Document] = None) -> list[CellExecution]:
        """Execute cells and wait until all of them have finished.

        Returns:
            The executions started for this batch
        """
        tasks = self.execute(cells, document)
        if not tasks:
            return []
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return [r for r in results if isinstance(r, CellExecution)]

    async def _execute_cell(self, cell: Cell, execution: CellExecution, base_dir) -> CellExecution:
        try:
            await self.executor.execute_cell(cell, execution, base_dir)
        except Exception as error:
            logger.exception(f"Cell {execution.execution_order} failed outside the execution pipeline")
            execution.replace_output([write_error(dispatch_error_message(error))])
            execution.end(False)
        return execution

    def _create_execution(self, cell: Cell) -> CellExecution:
        self._execution_order += 1
        execution = CellExecution(cell, execution_order=self._execution_order)
        execution.start()
        return execution


def create_controller(
    notebook_type: str,
    config: Optional[SparqlbookConfig] = None,
    endpoint_controller: Optional[EndpointController] = None,
    event_logger=None,
) -> NotebookController:
    """Create the controller for a notebook type.

    Args:
        notebook_type: SPARQL_NOTEBOOK_TYPE or MARKDOWN_NOTEBOOK_TYPE
        config: Settings
        endpoint_controller: Holder of the ambient connection
        event_logger: Optional ExecutionEventLogger

    Raises:
        MarkdownIntegrationDisabled: Markdown controller requested while disabled
    """
    config = config or SparqlbookConfig()
    executor = NotebookCellExecutor(config, endpoint_controller, event_logger)

    if notebook_type == MARKDOWN_NOTEBOOK_TYPE:
        if not config.markdown_integration_enabled:
            raise MarkdownIntegrationDisabled("Markdown notebooks are disabled (markdownIntegration.enabled)")
        return NotebookController(executor, MARKDOWN_NOTEBOOK_TYPE, "SPARQL Markdown Notebook")
    return NotebookController(executor, SPARQL_NOTEBOOK_TYPE, "Sparql Notebook")
