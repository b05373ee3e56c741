"""Endpoints: protocol, HTTP and local file implementations, resolution."""

from .base import Endpoint, EndpointController, SimpleHttpResponse, is_endpoint
from .http_endpoint import HttpEndpoint
from .file_endpoint import FileEndpoint
from .resolve import connection_source, endpoint_for, get_endpoint_from_query, resolve_endpoint

__all__ = [
    "Endpoint",
    "EndpointController",
    "SimpleHttpResponse",
    "is_endpoint",
    "HttpEndpoint",
    "FileEndpoint",
    "connection_source",
    "endpoint_for",
    "get_endpoint_from_query",
    "resolve_endpoint",
]
