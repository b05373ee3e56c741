"""Cell output items and the writers that build them from query results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional


SPARQL_RESULTS_JSON = 'application/sparql-results+json'
TEXT_X_JSON = 'text/x-json'
TEXT_PLAIN = 'text/plain'
TEXT_MARKDOWN = 'text/markdown'
ERROR_MIME = 'application/vnd.code.notebook.error'

ERROR_NAME = 'SPARQL error'


@dataclass
class OutputItem:
    """One representation of an output.

    Attributes:
        mime: Mime type of data
        data: Encoded payload
    """

    mime: str
    data: bytes

    @classmethod
    def text(cls, value: str, mime: str = TEXT_PLAIN) -> 'OutputItem':
        return cls(mime, value.encode('utf-8'))

    @classmethod
    def json(cls, value: Any, mime: str = 'application/json') -> 'OutputItem':
        return cls(mime, json.dumps(value, ensure_ascii=False).encode('utf-8'))

    @classmethod
    def error(cls, name: str, message: str) -> 'OutputItem':
        payload = {'name': name, 'message': message}
        return cls(ERROR_MIME, json.dumps(payload, ensure_ascii=False).encode('utf-8'))

    def as_text(self) -> str:
        return self.data.decode('utf-8')

    def as_json(self) -> Any:
        return json.loads(self.as_text())


@dataclass
class CellOutput:
    """A single cell output holding alternative representations of one result."""

    items: list[OutputItem] = field(default_factory=list)

    def item(self, mime: str) -> Optional[OutputItem]:
        """Return the first item with the given mime type, or None."""
        for item in self.items:
            if item.mime == mime:
                return item
        return None

    @property
    def is_error(self) -> bool:
        return self.item(ERROR_MIME) is not None


def write_sparql_json_result(result: Any) -> CellOutput:
    """Output for SELECT/ASK results: pretty JSON text plus the results payload."""
    return CellOutput([
        OutputItem.text(json.dumps(result, indent='   ', ensure_ascii=False), TEXT_X_JSON),
        OutputItem.json(result, SPARQL_RESULTS_JSON),
    ])


def write_turtle_result(turtle: str) -> CellOutput:
    """Output for CONSTRUCT results and SHACL reports: plain turtle plus a markdown fence."""
    return CellOutput([
        OutputItem.text(turtle, TEXT_PLAIN),
        OutputItem.text(f"```turtle\n{turtle}\n```", TEXT_MARKDOWN),
    ])


def write_error(message: str) -> CellOutput:
    """Output for any failed execution."""
    return CellOutput([OutputItem.error(ERROR_NAME, message)])
