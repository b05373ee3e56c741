"""Open and save notebook documents by file extension."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from ..config import SparqlbookConfig
from ..errors import MarkdownIntegrationDisabled, SparqlbookError
from .cells import Document
from .markdown_serializer import MarkdownNotebookSerializer
from .native_serializer import SparqlbookSerializer


MARKDOWN_SUFFIXES = ('.md', '.markdown')
NATIVE_SUFFIXES = ('.sparqlbook',)


def serializer_for_path(path: Union[str, Path], config: Optional[SparqlbookConfig] = None):
    """Pick the serializer for a notebook file.

    Args:
        path: Notebook file path
        config: Settings (markdown files need markdownIntegration.enabled)

    Returns:
        MarkdownNotebookSerializer or SparqlbookSerializer

    Raises:
        MarkdownIntegrationDisabled: Markdown file while the integration is off
        SparqlbookError: Unknown file extension
    """
    config = config or SparqlbookConfig()
    suffix = Path(path).suffix.lower()

    if suffix in MARKDOWN_SUFFIXES:
        if not config.markdown_integration_enabled:
            raise MarkdownIntegrationDisabled(
                f"Cannot open {path} as a notebook: markdownIntegration.enabled is false"
            )
        return MarkdownNotebookSerializer()
    if suffix in NATIVE_SUFFIXES:
        return SparqlbookSerializer()
    raise SparqlbookError(f"Unsupported notebook file type: {path}")


def open_document(path: Union[str, Path], config: Optional[SparqlbookConfig] = None) -> Document:
    """Read a notebook file into a document."""
    path = Path(path)
    serializer = serializer_for_path(path, config)
    document = serializer.deserialize_notebook(path.read_bytes())
    document.path = path
    return document


def save_document(
    document: Document,
    path: Union[str, Path, None] = None,
    config: Optional[SparqlbookConfig] = None,
) -> Path:
    """Write a document to disk, by default back to the file it came from."""
    target = Path(path) if path is not None else document.path
    if target is None:
        raise SparqlbookError("Document has no path to save to")

    serializer = serializer_for_path(target, config)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(serializer.serialize_notebook(document))
    return target
