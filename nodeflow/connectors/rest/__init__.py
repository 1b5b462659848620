from nodeflow.connectors.registry.destination_registry import destination_registry
from nodeflow.connectors.registry.source_registry import source_registry
from nodeflow.connectors.rest.destination import RestDestination
from nodeflow.connectors.rest.source import RestSource
from nodeflow.core.models import ConnectionType

source_registry.register(ConnectionType.REST_API.value, RestSource)
destination_registry.register(ConnectionType.REST_API.value, RestDestination)

__all__ = [
    "RestSource",
    "RestDestination",
]
