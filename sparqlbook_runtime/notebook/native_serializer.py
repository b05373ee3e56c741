"""Serializer for native .sparqlbook files.

A .sparqlbook file is a JSON array of raw cells:

    [
      {"kind": 1, "language": "markdown", "value": "# Title"},
      {"kind": 2, "language": "sparql", "value": "SELECT ...", "metadata": {"file": "q.rq"}}
    ]
"""

from __future__ import annotations

import json
import logging

from .cells import Cell, CellKind, Document

logger = logging.getLogger(__name__)


class SparqlbookSerializer:
    """Serialize and deserialize native notebook files."""

    def deserialize_notebook(self, content: bytes) -> Document:
        """Convert .sparqlbook bytes into a document.

        Empty or unreadable files give an empty document.
        """
        text = content.decode('utf-8-sig', errors='replace')
        if not text.strip():
            return Document()

        try:
            raw_cells = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Could not parse notebook file, opening it empty: {e}")
            return Document()

        if not isinstance(raw_cells, list):
            logger.warning("Notebook file does not contain a cell list, opening it empty")
            return Document()

        cells = []
        for raw in raw_cells:
            if not isinstance(raw, dict):
                continue
            kind = CellKind.CODE if raw.get('kind') == CellKind.CODE else CellKind.MARKUP
            if kind == CellKind.CODE:
                cells.append(Cell.code(raw.get('value', ''), raw.get('language'), raw.get('metadata')))
            else:
                cells.append(Cell.markup(raw.get('value', '')))
        return Document(cells=cells)

    def serialize_notebook(self, document: Document) -> bytes:
        """Convert a document into .sparqlbook bytes. Outputs are not stored."""
        raw_cells = []
        for cell in document.cells:
            raw = {
                'kind': int(cell.kind),
                'language': cell.language,
                'value': cell.content,
            }
            if cell.metadata:
                raw['metadata'] = cell.metadata
            raw_cells.append(raw)
        return json.dumps(raw_cells, indent=2, ensure_ascii=False).encode('utf-8')
