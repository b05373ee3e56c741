"""SPARQL protocol endpoint over HTTP."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from ..errors import EndpointError
from .base import SimpleHttpResponse

logger = logging.getLogger(__name__)


QUERY_ACCEPT = (
    'application/sparql-results+json, text/turtle;q=0.9, '
    'application/json;q=0.5, */*;q=0.1'
)


class HttpEndpoint:
    """Remote SPARQL endpoint reached with requests.

    Queries are POSTed form-encoded; SHACL shapes are POSTed as turtle. The
    blocking request runs in a worker thread so concurrent cells don't wait on
    each other.

    Example:
        endpoint = HttpEndpoint("https://query.wikidata.org/sparql")
        response = await endpoint.query("ASK { ?s ?p ?o }")
        response.content_type   # 'application/sparql-results+json'
    """

    def __init__(self, url: str, user: str = "", password: str = "", timeout: float = 30.0):
        """Initialize endpoint.

        Args:
            url: Endpoint URL
            user: Optional basic auth user
            password: Optional basic auth password
            timeout: Request timeout in seconds
        """
        self.url = url
        self.user = user
        self.password = password
        self.timeout = timeout

    def __repr__(self):
        return f"HttpEndpoint({self.url!r})"

    async def query(self, sparql_query: str, execution: Any = None) -> SimpleHttpResponse:
        return await asyncio.to_thread(
            self._post,
            data={'query': sparql_query},
            headers={'Accept': QUERY_ACCEPT},
        )

    async def validate(self, shacl_turtle: str, execution: Any = None) -> SimpleHttpResponse:
        return await asyncio.to_thread(
            self._post,
            data=shacl_turtle.encode('utf-8'),
            headers={'Content-Type': 'text/turtle', 'Accept': 'text/turtle'},
        )

    def _auth(self) -> Optional[tuple[str, str]]:
        if not self.user:
            return None
        return (self.user, self.password)

    def _post(self, data: Any, headers: dict) -> SimpleHttpResponse:
        try:
            resp = requests.post(
                self.url,
                data=data,
                headers=headers,
                auth=self._auth(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EndpointError(f"Request to {self.url} failed: {e}") from e

        response = to_simple_response(resp)
        if resp.status_code >= 400:
            logger.warning(f"Endpoint {self.url} answered HTTP {resp.status_code}")
            raise EndpointError(
                f"Request failed with status code {resp.status_code}",
                response=response,
            )
        return response


def to_simple_response(resp: requests.Response) -> SimpleHttpResponse:
    """Convert a requests response, decoding JSON bodies."""
    response = SimpleHttpResponse(status=resp.status_code, headers=resp.headers, data=resp.text)
    if response.content_type.endswith('json'):
        try:
            response.data = resp.json()
        except ValueError:
            pass  # malformed JSON body stays as text
    return response
