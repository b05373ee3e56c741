"""Local RDF file used as an endpoint.

A cell can point at a data file instead of a server, e.g.

    # [endpoint=data.ttl]
    SELECT ?s ?p ?o WHERE { ?s ?p ?o }

The file is loaded into an rdflib graph for every call. SELECT/ASK results
come back as SPARQL JSON results, CONSTRUCT/DESCRIBE results and SHACL
validation reports as turtle, the same content types a server would send.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Union

from pyshacl import validate
from rdflib import Graph

from ..errors import EndpointError
from .base import SimpleHttpResponse


SPARQL_JSON_HEADERS = {'content-type': 'application/sparql-results+json'}
TURTLE_HEADERS = {'content-type': 'text/turtle'}


class FileEndpoint:
    """Endpoint backed by one RDF file on disk."""

    def __init__(self, path: Union[str, Path]):
        """Initialize endpoint.

        Args:
            path: RDF file (format guessed from the extension)
        """
        self.path = Path(path)
        self.url = str(self.path)

    def __repr__(self):
        return f"FileEndpoint({self.url!r})"

    async def query(self, sparql_query: str, execution: Any = None) -> SimpleHttpResponse:
        graph = await asyncio.to_thread(self._load)
        _report_loaded(execution, graph, self.path)
        return await asyncio.to_thread(self._query, graph, sparql_query)

    async def validate(self, shacl_turtle: str, execution: Any = None) -> SimpleHttpResponse:
        graph = await asyncio.to_thread(self._load)
        _report_loaded(execution, graph, self.path)
        return await asyncio.to_thread(self._validate, graph, shacl_turtle)

    def _load(self) -> Graph:
        if not self.path.exists():
            raise EndpointError(f"Endpoint file not found: {self.path}")
        graph = Graph()
        try:
            graph.parse(str(self.path))
        except Exception as e:
            raise EndpointError(f"Could not parse {self.path}: {e}") from e
        return graph

    def _query(self, graph: Graph, sparql_query: str) -> SimpleHttpResponse:
        result = graph.query(sparql_query)

        if result.type in ('SELECT', 'ASK'):
            data = json.loads(result.serialize(format='json'))
            return SimpleHttpResponse(200, SPARQL_JSON_HEADERS, data)

        # CONSTRUCT / DESCRIBE
        return SimpleHttpResponse(200, TURTLE_HEADERS, result.graph.serialize(format='turtle'))

    def _validate(self, graph: Graph, shacl_turtle: str) -> SimpleHttpResponse:
        shapes = Graph()
        try:
            shapes.parse(data=shacl_turtle, format='turtle')
        except Exception as e:
            raise EndpointError(f"Could not parse SHACL shapes: {e}") from e

        conforms, results_graph, report_text = validate(
            data_graph=graph,
            shacl_graph=shapes,
            inference='none',
            abort_on_first=False,
            meta_shacl=False,
            advanced=False,
            debug=False,
        )
        return SimpleHttpResponse(200, TURTLE_HEADERS, results_graph.serialize(format='turtle'))


def _report_loaded(execution: Any, graph: Graph, path: Path) -> None:
    if execution is None:
        return
    execution.report_progress(f"Loaded {len(graph)} triples from {path.name}")
