"""Build code cells from query files on disk."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .cells import Cell, Document


SHACL_SUFFIXES = ('.shacl', '.ttl')


def language_for_file(path: Union[str, Path]) -> str:
    """Return 'shacl' for shapes files and 'sparql' for everything else."""
    return 'shacl' if Path(path).suffix.lower() in SHACL_SUFFIXES else 'sparql'


def cell_from_file(query_path: Union[str, Path], notebook_path: Union[str, Path]) -> Cell:
    """Create a code cell holding the content of a query file.

    The cell starts with a `# from file <path>` comment and records the file
    in its metadata. The path is stored relative to the notebook's directory
    with forward slashes.

    Args:
        query_path: Query or shapes file to import
        notebook_path: Notebook file the cell will belong to

    Returns:
        Code cell with language picked from the file extension

    Raises:
        FileNotFoundError: If the query file doesn't exist
    """
    query_path = Path(query_path)
    notebook_dir = Path(notebook_path).parent

    relative = os.path.relpath(query_path.resolve(), notebook_dir.resolve()).replace('\\', '/')
    content = query_path.read_text(encoding='utf-8')

    return Cell.code(
        f"# from file {relative}\n{content}",
        language_for_file(query_path),
        metadata={'file': relative},
    )


def replace_cell(document: Document, index: int, cell: Cell) -> Document:
    """Replace the cell at index, e.g. a placeholder cell with an imported one."""
    if not 0 <= index < len(document.cells):
        raise IndexError(f"Cell index {index} out of range (document has {len(document.cells)} cells)")
    document.cells[index] = cell
    return document
