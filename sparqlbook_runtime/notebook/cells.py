"""Cell and document model shared by the serializers and the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional


EXECUTABLE_LANGUAGES = ('sparql', 'shacl')
DEFAULT_CODE_LANGUAGE = 'sparql'
MARKDOWN_LANGUAGE = 'markdown'


class CellKind(IntEnum):
    """Cell kind. Values match the native .sparqlbook file format."""

    MARKUP = 1
    CODE = 2


@dataclass
class Cell:
    """One unit of a document.

    Attributes:
        kind: Markup or Code
        content: Raw cell text, preserved exactly
        language: 'sparql' or 'shacl' for code cells, 'markdown' for markup
        metadata: Optional metadata (e.g. {'file': 'q.rq'} for file-imported cells)
        outputs: Outputs of the last committed execution (never serialized to markdown)
    """

    kind: CellKind
    content: str
    language: str = ''
    metadata: dict[str, Any] = field(default_factory=dict)
    outputs: list = field(default_factory=list)

    @classmethod
    def code(cls, content: str, language: str = DEFAULT_CODE_LANGUAGE, metadata: Optional[dict] = None) -> 'Cell':
        return cls(CellKind.CODE, content, language or DEFAULT_CODE_LANGUAGE, metadata or {})

    @classmethod
    def markup(cls, content: str) -> 'Cell':
        return cls(CellKind.MARKUP, content, MARKDOWN_LANGUAGE)

    @property
    def is_code(self) -> bool:
        return self.kind == CellKind.CODE


@dataclass
class Document:
    """An ordered sequence of cells.

    Attributes:
        cells: Cells in document order
        path: File the document was read from, used to resolve relative endpoints
    """

    cells: list[Cell] = field(default_factory=list)
    path: Optional[Path] = None

    @property
    def directory(self) -> Optional[Path]:
        """Directory containing the document file, if known."""
        return self.path.parent if self.path is not None else None

    def code_cells(self) -> list[Cell]:
        return [cell for cell in self.cells if cell.is_code]
