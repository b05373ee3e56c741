"""sparqlbook runtime - execute SPARQL and SHACL cells from notebook documents.

This package turns markdown files (and native .sparqlbook files) into cell
lists, runs the SPARQL/SHACL code cells against an endpoint and renders the
results back into the cells.

Architecture:
- notebook/: markdown and native notebook serializers, cell model
- endpoint/: Endpoint protocol, HTTP and local file endpoints, resolution
- execution/: per-cell execution pipeline and output construction
- logging/: JSONL execution event log
- controller.py: batch fan-out and execution ordering
"""

__version__ = "0.1.0"
