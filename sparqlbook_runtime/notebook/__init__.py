"""Notebook documents: cell model, markdown and native serializers."""

from .cells import Cell, CellKind, Document, EXECUTABLE_LANGUAGES
from .markdown_serializer import MarkdownNotebookSerializer, MarkdownSection, parse_markdown
from .native_serializer import SparqlbookSerializer
from .files import serializer_for_path, open_document, save_document
from .from_file import cell_from_file, language_for_file, replace_cell

__all__ = [
    "Cell",
    "CellKind",
    "Document",
    "EXECUTABLE_LANGUAGES",
    "MarkdownNotebookSerializer",
    "MarkdownSection",
    "parse_markdown",
    "SparqlbookSerializer",
    "serializer_for_path",
    "open_document",
    "save_document",
    "cell_from_file",
    "language_for_file",
    "replace_cell",
]
