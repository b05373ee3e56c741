"""Shorten URI bindings with the prefixes declared in the query."""

from __future__ import annotations

import copy
import re
from typing import Any


_PREFIX_DECLARATION = re.compile(r'PREFIX ([^:]*):[ ]*<([^>]*)>', re.IGNORECASE)


def parse_prefixes(sparql_query: str) -> dict[str, str]:
    """Collect PREFIX declarations as {name: namespace URI}.

    Later declarations of the same name win.
    """
    return {name: uri for name, uri in _PREFIX_DECLARATION.findall(sparql_query)}


def format_bindings_with_namespaces(data: Any, sparql_query: str) -> Any:
    """Rewrite uri bindings of a SELECT result as prefixed names.

    For each uri value the namespaces are tried in declaration order; the
    first one that changes the value is applied and the rest are skipped.
    The input is left untouched.

    Args:
        data: SPARQL JSON results ({'head': ..., 'results': {'bindings': [...]}})
        sparql_query: Query text the result came from

    Returns:
        Copy of data with shortened uri values

    Example:
        query = "PREFIX ex: <http://example.org/> SELECT ?s WHERE { ?s ?p ?o }"
        data = {'results': {'bindings': [{'s': {'type': 'uri', 'value': 'http://example.org/foo'}}]}}
        format_bindings_with_namespaces(data, query)['results']['bindings'][0]['s']['value']
        # 'ex:foo'
    """
    namespaces = {name: uri for name, uri in parse_prefixes(sparql_query).items() if uri}
    if not namespaces:
        return data

    results = data.get('results') if isinstance(data, dict) else None
    bindings = results.get('bindings') if isinstance(results, dict) else None
    if not isinstance(bindings, list):
        return data

    formatted = copy.deepcopy(data)
    for binding in formatted['results']['bindings']:
        if not isinstance(binding, dict):
            continue
        for term in binding.values():
            if not isinstance(term, dict) or term.get('type') != 'uri':
                continue
            value = term.get('value')
            if not isinstance(value, str):
                continue
            for name, uri in namespaces.items():
                new_value = value.replace(uri, f"{name}:", 1)
                if new_value != value:
                    term['value'] = new_value
                    break
    return formatted
