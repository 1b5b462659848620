"""Persistence contracts consumed by the pipeline engine.

The engine never talks to a database of its own: connections, executions and
pipelines live in whatever store the deployment provides, reached through the
structural protocols below. In-memory implementations back the CLI and the
test suite.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from nodeflow.core.models import (
    ConnectionDescriptor,
    ExecutionState,
    ExecutionStatus,
    PipelineDefinition,
)
from nodeflow.exceptions import (
    ConnectionNotFoundError,
    ExecutionNotFoundError,
    PipelineNotFoundError,
)
from nodeflow.logging import get_logger

logger = get_logger(__name__)

# Fields of ExecutionState that Update() may change
EXECUTION_FIELDS = frozenset(
    {
        "status",
        "logs",
        "records_processed",
        "errors_count",
        "error_message",
        "completed_at",
    }
)


class ConnectionRegistry(Protocol):
    def get_by_id(self, connection_id: str) -> ConnectionDescriptor:
        """Return the connection, raising ``ConnectionNotFoundError`` if absent."""
        ...


class ExecutionStore(Protocol):
    def get_by_id(self, execution_id: str) -> ExecutionState:
        """Return the execution, raising ``ExecutionNotFoundError`` if absent."""
        ...

    def update(self, execution_id: str, **changes: Any) -> ExecutionState:
        """Apply a partial update to an execution."""
        ...


class PipelineStore(Protocol):
    def stamp_last_run(
        self, pipeline_id: str, timestamp: datetime, status: ExecutionStatus
    ) -> None:
        """Record when a pipeline last ran and how it ended."""
        ...


class InMemoryConnectionRegistry:
    """Connection registry backed by a dict."""

    def __init__(self, connections: Optional[List[ConnectionDescriptor]] = None):
        self._connections: Dict[str, ConnectionDescriptor] = {}
        for connection in connections or []:
            self.add(connection)

    def add(self, connection: ConnectionDescriptor) -> None:
        self._connections[connection.id] = connection

    def get_by_id(self, connection_id: str) -> ConnectionDescriptor:
        try:
            return self._connections[connection_id]
        except KeyError:
            raise ConnectionNotFoundError(connection_id) from None

    def list(self) -> List[ConnectionDescriptor]:
        return list(self._connections.values())


class InMemoryExecutionStore:
    """Execution store backed by a dict."""

    def __init__(self):
        self._executions: Dict[str, ExecutionState] = {}

    def create(self, execution_id: str, pipeline_id: str) -> ExecutionState:
        """Create a new execution in the ``running`` state."""
        execution = ExecutionState(id=execution_id, pipeline_id=pipeline_id)
        self._executions[execution_id] = execution
        return execution

    def get_by_id(self, execution_id: str) -> ExecutionState:
        try:
            return self._executions[execution_id]
        except KeyError:
            raise ExecutionNotFoundError(execution_id) from None

    def update(self, execution_id: str, **changes: Any) -> ExecutionState:
        unknown = set(changes) - EXECUTION_FIELDS
        if unknown:
            raise ValueError(f"Cannot update execution fields: {sorted(unknown)}")

        updated = replace(self.get_by_id(execution_id), **changes)
        self._executions[execution_id] = updated
        logger.debug(f"Execution {execution_id} updated: {sorted(changes)}")
        return updated


class InMemoryPipelineStore:
    """Pipeline store backed by a dict."""

    def __init__(self, pipelines: Optional[List[PipelineDefinition]] = None):
        self._pipelines: Dict[str, PipelineDefinition] = {}
        self.last_runs: Dict[str, Dict[str, Any]] = {}
        for pipeline in pipelines or []:
            self.add(pipeline)

    def add(self, pipeline: PipelineDefinition) -> None:
        self._pipelines[pipeline.id] = pipeline

    def get_by_id(self, pipeline_id: str) -> PipelineDefinition:
        try:
            return self._pipelines[pipeline_id]
        except KeyError:
            raise PipelineNotFoundError(pipeline_id) from None

    def list(self) -> List[PipelineDefinition]:
        return list(self._pipelines.values())

    def stamp_last_run(
        self, pipeline_id: str, timestamp: datetime, status: ExecutionStatus
    ) -> None:
        self.last_runs[pipeline_id] = {"last_run_at": timestamp, "status": status}
