from typing import Dict, List, Type

from nodeflow.connectors.base.destination_connector import DestinationConnector
from nodeflow.exceptions import UnsupportedDestinationTypeError


class DestinationConnectorRegistry:
    """Registry for destination connectors, keyed by connection type."""

    def __init__(self):
        self._connectors: Dict[str, Type[DestinationConnector]] = {}

    def register(
        self, connection_type: str, connector_class: Type[DestinationConnector]
    ):
        """Register a destination connector."""
        self._connectors[connection_type] = connector_class

    def get(self, connection_type: str) -> Type[DestinationConnector]:
        """Get a destination connector class."""
        if connection_type not in self._connectors:
            raise UnsupportedDestinationTypeError(connection_type)
        return self._connectors[connection_type]

    def supports(self, connection_type: str) -> bool:
        return connection_type in self._connectors

    def types(self) -> List[str]:
        return sorted(self._connectors)


destination_registry = DestinationConnectorRegistry()
