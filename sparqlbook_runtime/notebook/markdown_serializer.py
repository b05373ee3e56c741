"""Markdown notebook serializer.

Reads a markdown file as a notebook: fenced code blocks tagged `sparql` or
`shacl` (any case) become executable code cells, everything else, including
fenced blocks in other languages, stays markdown. Writing a notebook back
emits the same fence syntax, so code cell content survives a round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .cells import (
    Cell,
    CellKind,
    DEFAULT_CODE_LANGUAGE,
    Document,
    EXECUTABLE_LANGUAGES,
)


FENCE = '```'

_FENCE_OPEN = re.compile(r'```(\w*)', re.ASCII)
_LINE_BREAK = re.compile(r'\r?\n')
_TRAILING_NEWLINES = re.compile(r'\n+\Z')


@dataclass
class MarkdownSection:
    """A parsed run of the markdown source.

    Attributes:
        type: 'markdown' or 'code'
        content: Section text (for code, the fence body without the fences)
        language: Lower-cased fence tag for code sections
    """

    type: str
    content: str
    language: Optional[str] = None


def parse_markdown(content: str) -> list[MarkdownSection]:
    """Split markdown text into markdown and code sections.

    Single left-to-right scan. Only `sparql`/`shacl` fences become code
    sections; other fences are re-wrapped and kept as markdown, and an
    unterminated fence is kept as literal markdown. Never raises.

    Args:
        content: Raw markdown text

    Returns:
        Sections in document order
    """
    sections: list[MarkdownSection] = []
    markdown_lines: list[str] = []
    code_lines: list[str] = []
    in_code_block = False
    code_language = ''

    def flush_markdown() -> None:
        text = '\n'.join(markdown_lines).strip()
        if text:
            sections.append(MarkdownSection('markdown', text))
        markdown_lines.clear()

    for line in _LINE_BREAK.split(content):
        fence_open = _FENCE_OPEN.fullmatch(line)

        if fence_open and not in_code_block:
            flush_markdown()
            in_code_block = True
            code_language = fence_open.group(1).lower()
            code_lines = []
        elif line == FENCE and in_code_block:
            body = '\n'.join(code_lines)
            if code_language in EXECUTABLE_LANGUAGES:
                sections.append(MarkdownSection('code', body, code_language))
            else:
                fenced = f"{FENCE}{code_language}\n{body}\n{FENCE}"
                sections.append(MarkdownSection('markdown', fenced))
            in_code_block = False
            code_language = ''
            code_lines = []
        elif in_code_block:
            code_lines.append(line)
        else:
            markdown_lines.append(line)

    if in_code_block:
        # unclosed fence stays visible as text
        markdown_lines.append(f"{FENCE}{code_language}\n" + '\n'.join(code_lines))

    flush_markdown()
    return sections


class MarkdownNotebookSerializer:
    """Serialize and deserialize markdown files as notebooks."""

    def deserialize_notebook(self, content: bytes) -> Document:
        """Convert markdown bytes into a document.

        Args:
            content: Raw file content (UTF-8, BOM optional)

        Returns:
            Document with one cell per parsed section
        """
        text = content.decode('utf-8-sig', errors='replace')

        cells = []
        for section in parse_markdown(text):
            if section.type == 'code':
                cells.append(Cell.code(section.content, section.language or DEFAULT_CODE_LANGUAGE))
            else:
                cells.append(Cell.markup(section.content))
        return Document(cells=cells)

    def serialize_notebook(self, document: Document) -> bytes:
        """Convert a document back into markdown bytes.

        Code cells are wrapped in fences tagged with their language, every
        cell is followed by a blank line, and the trailing newline run is
        collapsed to a single newline.
        """
        parts: list[str] = []

        for cell in document.cells:
            if cell.kind == CellKind.CODE:
                parts.append(FENCE + (cell.language or DEFAULT_CODE_LANGUAGE))
                parts.append(cell.content)
                parts.append(FENCE)
            else:
                parts.append(cell.content)
            parts.append('')

        markdown = _TRAILING_NEWLINES.sub('\n', '\n'.join(parts))
        return markdown.encode('utf-8')
