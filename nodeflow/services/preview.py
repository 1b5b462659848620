"""Data preview and connection tests.

Both operate on one connection outside of any pipeline run. ``preview_connection``
and ``test_connection`` take an already decrypted config;
``ConnectionService`` looks connections up by ID and decrypts them first.
"""

from typing import Any, Dict, Optional

from nodeflow.config import (
    DEFAULT_CONNECTION_TEST_TIMEOUT,
    DEFAULT_PREVIEW_LIMIT,
    DEFAULT_PREVIEW_TIMEOUT,
    Settings,
)
from nodeflow.connectors.base.connection_test_result import ConnectionTestResult
from nodeflow.connectors.base.preview_result import PreviewResult
from nodeflow.connectors.registry.source_registry import (
    SourceConnectorRegistry,
    source_registry,
)
from nodeflow.core.stores import ConnectionRegistry
from nodeflow.exceptions import UnsupportedSourceTypeError
from nodeflow.logging import get_logger
from nodeflow.security.credentials import ConnectionCredentialStore

logger = get_logger(__name__)


def preview_connection(
    connection_type: str,
    config: Dict[str, Any],
    query: Optional[str] = None,
    limit: int = DEFAULT_PREVIEW_LIMIT,
    timeout: float = DEFAULT_PREVIEW_TIMEOUT,
    registry: Optional[SourceConnectorRegistry] = None,
) -> PreviewResult:
    """Read a sample of rows from a connection.

    Args:
        connection_type: Type of the connection
        config: Decrypted connection config
        query: Custom SQL query, or endpoint path for REST connections
        limit: Maximum number of rows
        timeout: Request timeout in seconds
        registry: Source connectors to choose from

    Returns:
        PreviewResult with the sampled rows and column metadata

    Raises:
        UnsupportedSourceTypeError: If the connection type cannot be previewed
        DatabasePreviewError: If a database preview fails
        ApiPreviewError: If a REST preview fails
    """
    registry = registry or source_registry
    if not registry.supports(connection_type):
        raise UnsupportedSourceTypeError(
            connection_type, f"Preview not supported for {connection_type}"
        )

    connector = registry.get(connection_type)(config, connection_type)
    result = connector.preview(query, limit, timeout)
    logger.info(f"Preview of {connection_type} connection returned {result.count} rows")
    return result


def test_connection(
    connection_type: str,
    config: Dict[str, Any],
    timeout: float = DEFAULT_CONNECTION_TEST_TIMEOUT,
    registry: Optional[SourceConnectorRegistry] = None,
) -> ConnectionTestResult:
    """Check that a connection is reachable. Never raises."""
    registry = registry or source_registry
    if not registry.supports(connection_type):
        return ConnectionTestResult(
            success=False, message="Connection test not implemented for this type"
        )

    connector = registry.get(connection_type)(config, connection_type)
    result = connector.test_connection(timeout)
    logger.info(f"Connection test for {connection_type}: {result}")
    return result


class ConnectionService:
    """Preview and test registered connections by ID."""

    def __init__(
        self,
        connection_registry: ConnectionRegistry,
        credential_store: ConnectionCredentialStore,
        settings: Settings,
        sources: Optional[SourceConnectorRegistry] = None,
    ):
        self.connection_registry = connection_registry
        self.credential_store = credential_store
        self.settings = settings
        self.sources = sources

    def _load(self, connection_id: str):
        connection = self.connection_registry.get_by_id(connection_id)
        config = self.credential_store.decrypt_config(connection.encrypted_config)
        return connection, config

    def preview(
        self,
        connection_id: str,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> PreviewResult:
        connection, config = self._load(connection_id)
        return preview_connection(
            connection.type,
            config,
            query=query,
            limit=limit or self.settings.preview_limit,
            timeout=self.settings.preview_timeout,
            registry=self.sources,
        )

    def test(self, connection_id: str) -> ConnectionTestResult:
        connection, config = self._load(connection_id)
        return test_connection(
            connection.type,
            config,
            timeout=self.settings.connection_test_timeout,
            registry=self.sources,
        )
