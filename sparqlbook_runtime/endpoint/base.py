"""Endpoint protocol and the ambient connection holder.

Endpoints answer SPARQL queries and SHACL validation requests and return the
raw response (status, headers, body). Interpreting the response is the
execution pipeline's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

from requests.structures import CaseInsensitiveDict

from ..config import EndpointConnection


@dataclass
class SimpleHttpResponse:
    """Endpoint response.

    Attributes:
        status: HTTP status code
        headers: Response headers (case-insensitive lookup)
        data: Decoded JSON for JSON content types, text otherwise
    """

    status: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    data: Any = None

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})

    @property
    def content_type(self) -> str:
        """Media type without parameters, e.g. 'text/turtle'."""
        return self.headers.get('content-type', '').split(';')[0].strip().lower()


@runtime_checkable
class Endpoint(Protocol):
    """Protocol for query/validation endpoints.

    Implementations are built per cell execution and never reused. The
    execution handle is optional and may be used to stream progress output.
    """

    url: str

    async def query(self, sparql_query: str, execution: Any = None) -> SimpleHttpResponse:
        """Run a SPARQL query.

        Raises:
            EndpointError: If the request fails
        """
        ...

    async def validate(self, shacl_turtle: str, execution: Any = None) -> SimpleHttpResponse:
        """Validate data against the given SHACL shapes (turtle).

        Raises:
            EndpointError: If the request fails
        """
        ...


def is_endpoint(obj: Any) -> bool:
    """Check if an object implements the Endpoint protocol."""
    return isinstance(obj, Endpoint)


class EndpointController:
    """Holder for the ambient (currently selected) connection.

    Passed into the pipeline by the host; the pipeline only reads it.
    """

    def __init__(self, connection: Optional[EndpointConnection] = None):
        self._connection = connection

    def get_connection(self) -> Optional[EndpointConnection]:
        return self._connection

    def set_connection(self, connection: Optional[EndpointConnection]) -> None:
        self._connection = connection
