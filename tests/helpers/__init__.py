"""Test helper utilities for the sparqlbook test suite."""

from .fakes import FakeEndpoint, make_response, output_mimes

__all__ = [
    'FakeEndpoint',
    'make_response',
    'output_mimes',
]
