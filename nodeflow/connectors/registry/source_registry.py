from typing import Dict, List, Type

from nodeflow.connectors.base.source_connector import SourceConnector
from nodeflow.exceptions import UnsupportedSourceTypeError


class SourceConnectorRegistry:
    """Registry for source connectors, keyed by connection type."""

    def __init__(self):
        self._connectors: Dict[str, Type[SourceConnector]] = {}

    def register(self, connection_type: str, connector_class: Type[SourceConnector]):
        """Register a source connector."""
        self._connectors[connection_type] = connector_class

    def get(self, connection_type: str) -> Type[SourceConnector]:
        """Get a source connector class."""
        if connection_type not in self._connectors:
            raise UnsupportedSourceTypeError(connection_type)
        return self._connectors[connection_type]

    def supports(self, connection_type: str) -> bool:
        return connection_type in self._connectors

    def types(self) -> List[str]:
        return sorted(self._connectors)


source_registry = SourceConnectorRegistry()
