"""Tests for notebook controllers."""

import asyncio
from unittest.mock import patch

import pytest

from sparqlbook_runtime.config import SparqlbookConfig
from sparqlbook_runtime.controller import (
    MARKDOWN_NOTEBOOK_TYPE,
    SPARQL_NOTEBOOK_TYPE,
    NotebookController,
    create_controller,
)
from sparqlbook_runtime.errors import EndpointError, MarkdownIntegrationDisabled
from sparqlbook_runtime.notebook import Cell
from tests.helpers import FakeEndpoint, make_response


RESOLVE = 'sparqlbook_runtime.execution.executor.resolve_endpoint'


class TestExecute:

    def test_execution_order_and_skipping(self, ask_result):
        """Code cells get increasing execution order; markup is skipped."""
        endpoint = FakeEndpoint(make_response('application/sparql-results+json', ask_result))
        controller = NotebookController()
        cells = [
            Cell.code("ASK { 1 }", 'sparql'),
            Cell.markup("# notes"),
            Cell.code("ASK { 2 }", 'sparql'),
            Cell.code("print(1)", 'python'),
        ]

        with patch(RESOLVE, return_value=endpoint):
            executions = asyncio.run(controller.run(cells))

        assert [e.execution_order for e in executions] == [1, 2]
        assert [e.cell.content for e in executions] == ["ASK { 1 }", "ASK { 2 }"]
        assert all(e.success for e in executions)

    def test_order_continues_across_runs(self, ask_result):
        endpoint = FakeEndpoint(make_response('application/sparql-results+json', ask_result))
        controller = NotebookController()
        cell = Cell.code("ASK {}", 'sparql')

        with patch(RESOLVE, return_value=endpoint):
            asyncio.run(controller.run([cell]))
            executions = asyncio.run(controller.run([cell]))

        assert executions[0].execution_order == 2

    def test_failure_does_not_stop_siblings(self, ask_result):
        good = FakeEndpoint(make_response('application/sparql-results+json', ask_result))
        bad = FakeEndpoint(error=EndpointError("down"))
        controller = NotebookController()
        cells = [Cell.code("bad", 'sparql'), Cell.code("good", 'sparql')]

        def pick(text, **kwargs):
            return bad if text == "bad" else good

        with patch(RESOLVE, side_effect=pick):
            executions = asyncio.run(controller.run(cells))

        assert [e.success for e in executions] == [False, True]

    def test_cells_run_concurrently(self, ask_result):
        """The first cell waits for the second, which only works if both are in flight."""
        response = make_response('application/sparql-results+json', ask_result)

        async def scenario():
            second_started = asyncio.Event()

            async def wait_for_second(execution):
                await asyncio.wait_for(second_started.wait(), timeout=2)

            async def mark_started(execution):
                second_started.set()

            endpoints = {
                "first": FakeEndpoint(response, on_call=wait_for_second),
                "second": FakeEndpoint(response, on_call=mark_started),
            }
            controller = NotebookController()
            cells = [Cell.code("first", 'sparql'), Cell.code("second", 'sparql')]

            with patch(RESOLVE, side_effect=lambda text, **kwargs: endpoints[text]):
                return await controller.run(cells)

        executions = asyncio.run(scenario())

        assert [e.success for e in executions] == [True, True]

    def test_execute_returns_tasks(self, ask_result):
        endpoint = FakeEndpoint(make_response('application/sparql-results+json', ask_result))
        controller = NotebookController()

        async def scenario():
            with patch(RESOLVE, return_value=endpoint):
                tasks = controller.execute([Cell.code("ASK {}", 'sparql')])
                return await asyncio.gather(*tasks)

        executions = asyncio.run(scenario())

        assert executions[0].finished

    def test_no_code_cells(self):
        assert asyncio.run(NotebookController().run([Cell.markup("x")])) == []


class TestCreateController:

    def test_sparql_controller(self):
        controller = create_controller(SPARQL_NOTEBOOK_TYPE)

        assert controller.notebook_type == SPARQL_NOTEBOOK_TYPE
        assert controller.controller_id == "sparql-notebook-controller-id"
        assert controller.supported_languages == ('sparql', 'shacl')

    def test_markdown_controller(self):
        controller = create_controller(MARKDOWN_NOTEBOOK_TYPE, SparqlbookConfig())

        assert controller.controller_id == "sparql-markdown-notebook-controller-id"

    def test_markdown_disabled(self):
        with pytest.raises(MarkdownIntegrationDisabled):
            create_controller(MARKDOWN_NOTEBOOK_TYPE, SparqlbookConfig(markdown_integration_enabled=False))

    def test_config_reaches_executor(self):
        config = SparqlbookConfig(use_namespaces=False)

        assert create_controller(SPARQL_NOTEBOOK_TYPE, config).executor.config is config


class TestErrorIsolation:
    """Every started cell comes back from run(), ended."""

    def test_executor_exception_becomes_error_output(self):
        class BrokenExecutor:
            async def execute_cell(self, cell, execution, base_dir=None):
                raise RuntimeError("executor blew up")

        controller = NotebookController(BrokenExecutor())
        cells = [Cell.code("ASK { 1 }", 'sparql'), Cell.code("ASK { 2 }", 'sparql')]

        executions = asyncio.run(controller.run(cells))

        assert len(executions) == 2
        for execution in executions:
            assert execution.success is False
            assert execution.cell.outputs[0].is_error

    def test_unresolvable_directive_still_returned(self):
        controller = NotebookController()
        cell = Cell.code("# [endpoint=~nosuchuser_xyz/data.ttl]\nASK {}", 'sparql')

        executions = asyncio.run(controller.run([cell]))

        assert len(executions) == 1
        assert executions[0].finished
        assert executions[0].success is False
