"""Endpoint resolution for a cell.

A cell can name its own endpoint in a comment line:

    # [endpoint=https://query.wikidata.org/sparql]
    # [endpoint=data/people.ttl]

The directive wins over the ambient connection for that cell only. Values
starting with http:// or https:// are remote endpoints, anything else is a
local RDF file resolved against the document's directory.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union

from ..config import EndpointConnection
from .file_endpoint import FileEndpoint
from .http_endpoint import HttpEndpoint


_ENDPOINT_DIRECTIVE = re.compile(r'\[endpoint=(.*)\]')
_REMOTE_SCHEMES = ('http://', 'https://')


def get_endpoint_from_query(sparql_query: str) -> Optional[str]:
    """Return the first [endpoint=...] directive found in a comment line.

    Args:
        sparql_query: Cell text

    Returns:
        Directive value, or None if no comment line carries one
    """
    for line in sparql_query.split('\n'):
        line = line.strip()
        if not line.startswith('#'):
            continue
        match = _ENDPOINT_DIRECTIVE.search(line)
        if match:
            value = match.group(1).strip().strip('"\'')
            if value:
                return value
    return None


def endpoint_for(
    location: str,
    user: str = "",
    password: str = "",
    base_dir: Union[str, Path, None] = None,
    timeout: float = 30.0,
):
    """Build an endpoint for a URL or a file path.

    Args:
        location: http(s) URL or RDF file path
        user: Basic auth user (remote endpoints only)
        password: Basic auth password (remote endpoints only)
        base_dir: Directory relative file paths are resolved against
        timeout: Request timeout for remote endpoints

    Returns:
        HttpEndpoint or FileEndpoint
    """
    if location.lower().startswith(_REMOTE_SCHEMES):
        return HttpEndpoint(location, user=user, password=password, timeout=timeout)

    if location.startswith('file://'):
        location = location[len('file://'):]
    path = Path(location).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = Path(base_dir) / path
    return FileEndpoint(path)


def resolve_endpoint(
    sparql_query: str,
    connection: Optional[EndpointConnection] = None,
    base_dir: Union[str, Path, None] = None,
    timeout: float = 30.0,
):
    """Pick the endpoint a cell runs against.

    The in-document directive takes precedence, then the ambient connection.
    A fresh endpoint is built on every call.

    Args:
        sparql_query: Cell text
        connection: Ambient connection, if one is selected
        base_dir: Document directory for relative file endpoints
        timeout: Request timeout for remote endpoints

    Returns:
        Endpoint, or None if neither a directive nor a connection is available
    """
    document_endpoint = get_endpoint_from_query(sparql_query)
    if document_endpoint:
        return endpoint_for(document_endpoint, base_dir=base_dir, timeout=timeout)

    if connection is None:
        return None

    return endpoint_for(
        connection.endpoint_url,
        user=connection.user,
        password=connection.password,
        base_dir=base_dir,
        timeout=timeout,
    )


def connection_source(sparql_query: str, connection: Optional[EndpointConnection] = None) -> Optional[str]:
    """Describe where a cell's endpoint comes from, for display."""
    document_endpoint = get_endpoint_from_query(sparql_query)
    if document_endpoint:
        return f"document endpoint: {document_endpoint}"
    if connection is not None:
        return f"connection: {connection.name}"
    return None
