"""Execution Context for the pipeline engine.

This module provides the ExecutionContext class, an immutable container for
the services node handlers need during a run. It is the only way handlers
reach connections and credentials, which keeps them free of global state.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from nodeflow.config import Settings
from nodeflow.connectors.base.destination_connector import DestinationConnector
from nodeflow.connectors.base.source_connector import SourceConnector
from nodeflow.connectors.registry.destination_registry import (
    DestinationConnectorRegistry,
    destination_registry,
)
from nodeflow.connectors.registry.source_registry import (
    SourceConnectorRegistry,
    source_registry,
)
from nodeflow.core.evaluator import ConditionEvaluator
from nodeflow.core.models import ConnectionDescriptor
from nodeflow.core.stores import ConnectionRegistry
from nodeflow.exceptions import ConnectionNotFoundError
from nodeflow.logging import get_logger, mask_secrets
from nodeflow.security.credentials import ConnectionCredentialStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExecutionContext:
    """
    An immutable container for shared services required during pipeline execution.

    Created once per pipeline run and passed to each NodeHandler.

    Attributes:
        connection_registry: Lookup of connection descriptors by ID
        credential_store: Decrypts connection configs
        settings: Runtime settings (timeouts)
        evaluator: Filter condition evaluator
        source_registry: Source connector classes by connection type
        destination_registry: Destination connector classes by connection type
        run_id: Unique identifier for this execution run
    """

    connection_registry: ConnectionRegistry
    credential_store: ConnectionCredentialStore
    settings: Settings
    evaluator: ConditionEvaluator
    source_registry: SourceConnectorRegistry
    destination_registry: DestinationConnectorRegistry
    run_id: str

    @classmethod
    def create(
        cls,
        connection_registry: ConnectionRegistry,
        credential_store: ConnectionCredentialStore,
        settings: Settings,
        evaluator: Optional[ConditionEvaluator] = None,
        sources: Optional[SourceConnectorRegistry] = None,
        destinations: Optional[DestinationConnectorRegistry] = None,
        run_id: Optional[str] = None,
    ) -> "ExecutionContext":
        """Create a new ExecutionContext with generated run_id if not provided."""
        if run_id is None:
            run_id = f"run_{uuid.uuid4().hex[:8]}"

        return cls(
            connection_registry=connection_registry,
            credential_store=credential_store,
            settings=settings,
            evaluator=evaluator or ConditionEvaluator(),
            source_registry=sources or source_registry,
            destination_registry=destinations or destination_registry,
            run_id=run_id,
        )

    @property
    def timeout(self) -> float:
        return self.settings.execution_timeout

    def resolve_connection(
        self, data_source_id: str, not_found_message: Optional[str] = None
    ) -> Tuple[ConnectionDescriptor, Dict[str, Any]]:
        """
        Look up a connection and decrypt its config.

        The decrypted config is returned to the caller only; it is never stored
        on the context.

        Args:
            data_source_id: ID of the connection
            not_found_message: Message to use if the connection does not exist

        Returns:
            The connection descriptor and its decrypted config

        Raises:
            ConnectionNotFoundError: If the connection does not exist
            DecryptionError: If the config cannot be decrypted
        """
        try:
            connection = self.connection_registry.get_by_id(data_source_id)
        except ConnectionNotFoundError as e:
            if not_found_message is None:
                raise
            raise ConnectionNotFoundError(data_source_id, not_found_message) from e

        config = self.credential_store.decrypt_config(connection.encrypted_config)
        logger.debug(
            f"[{self.run_id}] Connection {connection.id} ({connection.type}): "
            f"{mask_secrets(config)}"
        )
        return connection, config

    def source_connector(
        self, connection: ConnectionDescriptor, config: Dict[str, Any]
    ) -> SourceConnector:
        connector_class = self.source_registry.get(connection.type)
        return connector_class(config, connection.type)

    def destination_connector(
        self, connection: ConnectionDescriptor, config: Dict[str, Any]
    ) -> DestinationConnector:
        connector_class = self.destination_registry.get(connection.type)
        return connector_class(config, connection.type)
