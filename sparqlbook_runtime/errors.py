"""Exception types raised by sparqlbook_runtime."""

from __future__ import annotations

from typing import Any, Optional


class SparqlbookError(Exception):
    """Base class for all sparqlbook errors."""


class EndpointError(SparqlbookError):
    """An endpoint request failed before a classifiable response was obtained.

    Attributes:
        message: Human readable failure description
        response: Optional SimpleHttpResponse with the endpoint's diagnostic body
    """

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.response = response


class ConfigError(SparqlbookError):
    """Configuration file could not be read or is malformed."""


class MarkdownIntegrationDisabled(SparqlbookError):
    """Markdown files cannot be opened as notebooks (markdownIntegration.enabled is false)."""
