"""Configuration for notebook execution.

Settings are read-only from the pipeline's point of view. They can be built
in code or loaded from a YAML file using the same keys as the editor settings:

    useNamespaces: true
    markdownIntegration:
      enabled: true
    timeout: 30
    activeConnection: local-fuseki
    connections:
      - name: local-fuseki
        endpointURL: http://localhost:3030/ds/sparql
        user: admin
        password: secret
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .errors import ConfigError


@dataclass
class EndpointConnection:
    """A named endpoint configuration.

    Attributes:
        name: Display name of the connection
        endpoint_url: SPARQL endpoint URL or path to a local RDF file
        user: Optional user for basic auth
        password: Optional password for basic auth
    """

    name: str
    endpoint_url: str
    user: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> 'EndpointConnection':
        """Create a connection from a settings entry.

        Accepts both the editor spelling (endpointURL) and snake_case keys.
        """
        url = data.get('endpointURL', data.get('endpoint_url'))
        if not url:
            raise ConfigError(f"Connection {data.get('name')!r} has no endpointURL")
        return cls(
            name=data.get('name') or url,
            endpoint_url=url,
            user=data.get('user') or "",
            password=data.get('password') or "",
        )


@dataclass
class SparqlbookConfig:
    """Settings consumed by the execution pipeline and the serializers.

    Attributes:
        use_namespaces: Rewrite URI bindings of SELECT results with query prefixes
        markdown_integration_enabled: Allow markdown files to be opened as notebooks
        timeout: Per-request timeout in seconds for HTTP endpoints
        connections: Known endpoint connections
        active_connection: Name of the ambient connection, if any
    """

    use_namespaces: bool = True
    markdown_integration_enabled: bool = True
    timeout: float = 30.0
    connections: list[EndpointConnection] = field(default_factory=list)
    active_connection: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'SparqlbookConfig':
        """Build config from a settings mapping.

        markdownIntegration.enabled may be given nested or as a dotted key.

        Args:
            data: Settings mapping (None gives defaults)

        Returns:
            SparqlbookConfig

        Raises:
            ConfigError: If a value has the wrong type
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping of settings, got {type(data).__name__}")

        markdown_enabled = data.get('markdownIntegration.enabled')
        nested = data.get('markdownIntegration')
        if markdown_enabled is None and isinstance(nested, dict):
            markdown_enabled = nested.get('enabled')

        config = cls(
            use_namespaces=_as_bool(data.get('useNamespaces', True), 'useNamespaces'),
            markdown_integration_enabled=_as_bool(
                True if markdown_enabled is None else markdown_enabled,
                'markdownIntegration.enabled',
            ),
            timeout=float(data.get('timeout', 30.0)),
            connections=[EndpointConnection.from_dict(c) for c in data.get('connections') or []],
            active_connection=data.get('activeConnection'),
        )

        if config.active_connection and config.get_connection(config.active_connection) is None:
            raise ConfigError(f"activeConnection {config.active_connection!r} is not a known connection")
        return config

    def get_connection(self, name: str) -> Optional[EndpointConnection]:
        """Look up a connection by name."""
        for connection in self.connections:
            if connection.name == name:
                return connection
        return None

    def active(self) -> Optional[EndpointConnection]:
        """Return the configured ambient connection, if any."""
        if not self.active_connection:
            return None
        return self.get_connection(self.active_connection)


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{key} must be true or false, got {value!r}")


def load_config(path: Union[str, Path, None] = None) -> SparqlbookConfig:
    """Load settings from a YAML file.

    Args:
        path: Path to YAML settings file (None gives defaults)

    Returns:
        SparqlbookConfig

    Raises:
        ConfigError: If the file is missing or not valid YAML
    """
    if path is None:
        return SparqlbookConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    return SparqlbookConfig.from_dict(raw)
