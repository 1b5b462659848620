from .destination_registry import DestinationConnectorRegistry, destination_registry
from .source_registry import SourceConnectorRegistry, source_registry

__all__ = [
    "SourceConnectorRegistry",
    "DestinationConnectorRegistry",
    "source_registry",
    "destination_registry",
]
