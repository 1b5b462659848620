from nodeflow.connectors.database.destination import DatabaseDestination
from nodeflow.connectors.database.source import DatabaseSource
from nodeflow.connectors.registry.destination_registry import destination_registry
from nodeflow.connectors.registry.source_registry import source_registry
from nodeflow.core.models import SQL_CONNECTION_TYPES

for _connection_type in sorted(SQL_CONNECTION_TYPES):
    source_registry.register(_connection_type, DatabaseSource)
    destination_registry.register(_connection_type, DatabaseDestination)

__all__ = [
    "DatabaseSource",
    "DatabaseDestination",
]
