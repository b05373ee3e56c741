#!/usr/bin/env python
"""sparqlbook CLI.

Usage:
    python -m sparqlbook_runtime.cli run NOTEBOOK [--endpoint URL] [--cells 1,3]
    python -m sparqlbook_runtime.cli list NOTEBOOK
    python -m sparqlbook_runtime.cli convert SOURCE TARGET
    python -m sparqlbook_runtime.cli add-file NOTEBOOK QUERY_FILE [--index N]

Examples:
    # Run every SPARQL/SHACL cell of a markdown file against an endpoint
    sparqlbook run queries.md --endpoint https://query.wikidata.org/sparql

    # Run only the second code cell, logging execution events
    sparqlbook run queries.md --cells 2 --log-jsonl runs/events.jsonl

    # Show cells and where each cell's endpoint comes from
    sparqlbook list queries.md

    # Convert a markdown notebook to a native .sparqlbook file
    sparqlbook convert queries.md queries.sparqlbook
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

from .config import EndpointConnection, SparqlbookConfig, load_config
from .controller import MARKDOWN_NOTEBOOK_TYPE, SPARQL_NOTEBOOK_TYPE, create_controller
from .endpoint.base import EndpointController
from .endpoint.resolve import connection_source
from .errors import SparqlbookError
from .execution.execution import CellExecution
from .execution.outputs import ERROR_MIME, TEXT_PLAIN, TEXT_X_JSON
from .logging import ExecutionEventLogger
from .notebook.cells import Cell, Document
from .notebook.files import MARKDOWN_SUFFIXES, open_document, save_document
from .notebook.from_file import cell_from_file, replace_cell


def parse_cell_numbers(spec: Optional[str]) -> Optional[list[int]]:
    """Parse '1,3' into [1, 3] (1-based code cell numbers)."""
    if not spec:
        return None
    numbers = []
    for part in spec.split(','):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) < 1:
            raise SparqlbookError(f"Invalid cell number: {part!r}")
        numbers.append(int(part))
    return numbers


def select_cells(document: Document, numbers: Optional[list[int]]) -> list[Cell]:
    """Pick code cells by 1-based number, all of them when numbers is None."""
    code_cells = document.code_cells()
    if numbers is None:
        return code_cells
    selected = []
    for n in numbers:
        if n > len(code_cells):
            raise SparqlbookError(f"Cell {n} does not exist (document has {len(code_cells)} code cells)")
        selected.append(code_cells[n - 1])
    return selected


def format_execution(execution: CellExecution) -> str:
    """Render an execution's outputs as terminal text."""
    lines = []
    for output in execution.outputs:
        error = output.item(ERROR_MIME)
        if error is not None:
            payload = error.as_json()
            lines.append(f"{payload['name']}: {payload['message']}")
            continue
        item = output.item(TEXT_X_JSON) or output.item(TEXT_PLAIN)
        if item is not None:
            lines.append(item.as_text())
    return "\n".join(lines)


def _notebook_type(path: Path) -> str:
    return MARKDOWN_NOTEBOOK_TYPE if path.suffix.lower() in MARKDOWN_SUFFIXES else SPARQL_NOTEBOOK_TYPE


def _ambient_connection(args, config: SparqlbookConfig) -> Optional[EndpointConnection]:
    if args.endpoint:
        url = args.endpoint
        if Path(url).exists():
            # local file given relative to the working directory
            url = str(Path(url).resolve())
        return EndpointConnection(name=args.endpoint, endpoint_url=url,
                                  user=args.user or "", password=args.password or "")
    if args.connection:
        connection = config.get_connection(args.connection)
        if connection is None:
            raise SparqlbookError(f"Unknown connection: {args.connection}")
        return connection
    return config.active()


def run_command(args) -> int:
    """Run code cells of a notebook and print their outputs."""
    config = load_config(args.config)
    path = Path(args.notebook)
    document = open_document(path, config)
    cells = select_cells(document, parse_cell_numbers(args.cells))

    if not cells:
        print(f"No SPARQL or SHACL cells in {path}")
        return 0

    endpoint_controller = EndpointController()
    endpoint_controller.set_connection(_ambient_connection(args, config))
    event_logger = None
    if args.log_jsonl:
        event_logger = ExecutionEventLogger(args.log_jsonl, run_id=uuid.uuid4().hex[:8], document=str(path))

    try:
        controller = create_controller(_notebook_type(path), config, endpoint_controller, event_logger)
        executions = asyncio.run(controller.run(cells, document))
    finally:
        if event_logger is not None:
            event_logger.close()

    failed = 0
    for execution in executions:
        status = "ok" if execution.success else "FAILED"
        if not execution.success:
            failed += 1
        duration = f" ({execution.duration:.2f}s)" if execution.duration is not None else ""
        print(f"[{execution.execution_order}] {execution.cell.language} cell: {status}{duration}")
        print(format_execution(execution))
        print("-" * 50)

    print(f"{len(executions) - failed}/{len(executions)} cells succeeded")
    return 1 if failed else 0


def list_command(args) -> int:
    """List cells of a notebook."""
    config = load_config(args.config)
    document = open_document(Path(args.notebook), config)
    ambient = config.active()

    code_number = 0
    for index, cell in enumerate(document.cells):
        first_line = cell.content.strip().split('\n', 1)[0] if cell.content.strip() else ''
        if cell.is_code:
            code_number += 1
            source = connection_source(cell.content, ambient) or "no endpoint"
            print(f"{index:3d}  code #{code_number} [{cell.language}]  {first_line[:60]}  ({source})")
        else:
            print(f"{index:3d}  markdown         {first_line[:60]}")
    return 0


def convert_command(args) -> int:
    """Convert between markdown and native notebook files."""
    config = load_config(args.config)
    document = open_document(Path(args.source), config)
    target = save_document(document, Path(args.target), config)
    print(f"Wrote {len(document.cells)} cells to {target}")
    return 0


def add_file_command(args) -> int:
    """Append (or replace) a cell with the content of a query file."""
    config = load_config(args.config)
    path = Path(args.notebook)
    document = open_document(path, config)
    cell = cell_from_file(Path(args.query_file), path)

    if args.index is None:
        document.cells.append(cell)
    else:
        replace_cell(document, args.index, cell)

    save_document(document, path, config)
    print(f"Added {cell.language} cell from {cell.metadata['file']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sparqlbook',
        description='Run SPARQL and SHACL cells from markdown and .sparqlbook notebooks',
    )
    parser.add_argument('--config', help='YAML settings file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Run code cells')
    run_parser.add_argument('notebook', help='Notebook file (.md or .sparqlbook)')
    run_parser.add_argument('--endpoint', help='Endpoint URL or RDF file used as ambient connection')
    run_parser.add_argument('--connection', help='Named connection from the settings file')
    run_parser.add_argument('--user', help='Basic auth user for --endpoint')
    run_parser.add_argument('--password', help='Basic auth password for --endpoint')
    run_parser.add_argument('--cells', help='Comma separated code cell numbers (1-based)')
    run_parser.add_argument('--log-jsonl', help='Append execution events to this JSONL file')

    list_parser = subparsers.add_parser('list', help='List cells')
    list_parser.add_argument('notebook', help='Notebook file')

    convert_parser = subparsers.add_parser('convert', help='Convert notebook format')
    convert_parser.add_argument('source', help='Source notebook file')
    convert_parser.add_argument('target', help='Target notebook file')

    add_parser = subparsers.add_parser('add-file', help='Add a cell from a query file')
    add_parser.add_argument('notebook', help='Notebook file')
    add_parser.add_argument('query_file', help='.rq/.sparql query or .ttl/.shacl shapes file')
    add_parser.add_argument('--index', type=int, help='Replace the cell at this index instead of appending')

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    commands = {
        'run': run_command,
        'list': list_command,
        'convert': convert_command,
        'add-file': add_file_command,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except (SparqlbookError, FileNotFoundError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
