from nodeflow.connectors.local_file.destination import LocalFileDestination
from nodeflow.connectors.local_file.packaging import (
    LocalFilePackage,
    package_local_file,
)
from nodeflow.connectors.registry.destination_registry import destination_registry
from nodeflow.core.models import ConnectionType

destination_registry.register(ConnectionType.LOCAL_FILE.value, LocalFileDestination)

__all__ = [
    "LocalFileDestination",
    "LocalFilePackage",
    "package_local_file",
]
