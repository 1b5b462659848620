"""Connectors for NodeFlow sources and destinations.

- SQL databases: PostgreSQL, MySQL, SQLite (database)
- REST APIs (rest)
- Local file downloads, destination only (local_file)

Connectors are registered by connection type when this package is imported.
The MySQL connector needs the ``mysql`` extra (PyMySQL) at connect time.
"""

from nodeflow.connectors.registry.destination_registry import destination_registry
from nodeflow.connectors.registry.source_registry import source_registry

# flake8: noqa
from .database import *
from .local_file import *
from .rest import *

__all__ = [
    "source_registry",
    "destination_registry",
]
