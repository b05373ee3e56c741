"""Response classification by content type."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from ..endpoint.base import SimpleHttpResponse


class ResponseKind(Enum):
    """What an endpoint response holds."""

    BOOLEAN = 'boolean'                      # ASK
    BINDINGS = 'bindings'                    # SELECT
    TURTLE = 'turtle'                        # CONSTRUCT / DESCRIBE / SHACL report
    APPLICATION_ERROR = 'application_error'  # endpoint reported an error as JSON
    UNEXPECTED = 'unexpected'


def classify_response(response: SimpleHttpResponse) -> ResponseKind:
    """Classify a response strictly by its declared content type.

    Args:
        response: Endpoint response

    Returns:
        ResponseKind
    """
    content_type = response.content_type

    if content_type == 'application/sparql-results+json':
        data = response_json(response)
        if isinstance(data, dict) and 'boolean' in data:
            return ResponseKind.BOOLEAN
        return ResponseKind.BINDINGS
    if content_type == 'text/turtle':
        return ResponseKind.TURTLE
    if content_type == 'application/json':
        return ResponseKind.APPLICATION_ERROR
    return ResponseKind.UNEXPECTED


def response_json(response: SimpleHttpResponse) -> Any:
    """Response body as JSON, decoding text bodies when needed."""
    data = response.data
    if isinstance(data, (bytes, bytearray)):
        data = data.decode('utf-8', errors='replace')
    if isinstance(data, str):
        try:
            return json.loads(data)
        except ValueError:
            return data
    return data


def response_text(response: SimpleHttpResponse) -> str:
    """Response body as text."""
    data = response.data
    if data is None:
        return ''
    if isinstance(data, (bytes, bytearray)):
        return data.decode('utf-8', errors='replace')
    if isinstance(data, str):
        return data
    return json.dumps(data, ensure_ascii=False)
