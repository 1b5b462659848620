"""Services built on top of the connectors, used by the CLI and other invokers."""

from nodeflow.services.preview import (
    ConnectionService,
    preview_connection,
    test_connection,
)

__all__ = ["ConnectionService", "preview_connection", "test_connection"]
