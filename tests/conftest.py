"""Shared test fixtures for the sparqlbook test suite."""

import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from sparqlbook_runtime.execution import CellExecution
from sparqlbook_runtime.notebook import Cell


# ============================================================================
# Result Fixtures
# ============================================================================

@pytest.fixture
def select_result():
    """SPARQL JSON SELECT result with one uri and one literal binding."""
    return {
        'head': {'vars': ['s', 'label']},
        'results': {
            'bindings': [
                {
                    's': {'type': 'uri', 'value': 'http://example.org/foo'},
                    'label': {'type': 'literal', 'value': 'http://example.org/not-a-uri'},
                },
            ]
        },
    }


@pytest.fixture
def ask_result():
    """SPARQL JSON ASK result."""
    return {'head': {}, 'boolean': True}


@pytest.fixture
def prefixed_query():
    """SELECT query declaring the ex: prefix."""
    return "PREFIX ex: <http://example.org/>\nSELECT ?s ?label WHERE { ?s ?p ?label }"


# ============================================================================
# Cell / Execution Fixtures
# ============================================================================

@pytest.fixture
def sparql_cell(prefixed_query):
    """SPARQL code cell."""
    return Cell.code(prefixed_query, 'sparql')


@pytest.fixture
def shacl_cell():
    """SHACL code cell."""
    return Cell.code(
        "@prefix sh: <http://www.w3.org/ns/shacl#> .\n"
        "@prefix ex: <http://example.org/> .\n"
        "ex:PersonShape a sh:NodeShape ; sh:targetClass ex:Person .",
        'shacl',
    )


@pytest.fixture
def execution_for():
    """Factory creating a started execution for a cell."""
    def _make(cell, order=1):
        execution = CellExecution(cell, execution_order=order)
        execution.start()
        return execution
    return _make


# ============================================================================
# RDF Data Fixtures
# ============================================================================

TURTLE_DATA = """@prefix ex: <http://example.org/> .

ex:subject ex:predicate "markdown test value" .
"""

SHAPES = """@prefix sh: <http://www.w3.org/ns/shacl#> .
@prefix ex: <http://example.org/> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

ex:SubjectShape a sh:NodeShape ;
    sh:targetSubjectsOf ex:predicate ;
    sh:property [
        sh:path ex:predicate ;
        sh:datatype xsd:integer ;
    ] .
"""


@pytest.fixture
def tmp_test_dir():
    """Create a temporary directory for test artifacts."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_file(tmp_test_dir):
    """Turtle file with one triple."""
    path = tmp_test_dir / "data.ttl"
    path.write_text(TURTLE_DATA)
    return path


@pytest.fixture
def shapes_text():
    """SHACL shapes the data file violates (string literal where an integer is required)."""
    return SHAPES
