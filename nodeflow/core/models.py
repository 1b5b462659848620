"""Data model for pipelines, connections, executions and their results.

Records are plain dicts (column name to scalar or nested value) and a record
set is a list of records. Everything else here is a small dataclass.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Union

if TYPE_CHECKING:
    from nodeflow.core.executors.results import NodeOutcome

Record = Dict[str, Any]
RecordSet = List[Record]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NodeType(str, Enum):
    SOURCE = "source"
    TRANSFORM = "transform"
    VALIDATE = "validate"
    DESTINATION = "destination"


class ConnectionType(str, Enum):
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    REST_API = "rest_api"
    LOCAL_FILE = "local_file"


SQL_CONNECTION_TYPES = frozenset(
    {
        ConnectionType.POSTGRESQL.value,
        ConnectionType.MYSQL.value,
        ConnectionType.SQLITE.value,
    }
)


class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Node:
    """One stage of a pipeline.

    ``type`` is kept as the raw string from the definition so that unknown
    node types survive deserialization and can be reported at run time.
    """

    id: str
    type: str
    name: str
    config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            name=str(data.get("name") or data.get("id") or data.get("type", "")),
            config=dict(data.get("config") or {}),
        )


@dataclass(frozen=True)
class PipelineDefinition:
    """An ordered list of nodes. Execution order is declaration order."""

    id: str
    name: str
    nodes: List[Node] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineDefinition":
        # Pipelines stored by the builder keep their nodes under "config"
        config = data.get("config") or {}
        raw_nodes = data.get("nodes", config.get("nodes", [])) or []
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", data.get("id", ""))),
            nodes=[Node.from_dict(node) for node in raw_nodes],
        )


@dataclass(frozen=True)
class ConnectionDescriptor:
    """A registered external endpoint. The config is only held encrypted."""

    id: str
    type: str
    encrypted_config: str = field(repr=False)
    name: str = ""
    status: str = "active"


@dataclass
class ExecutionState:
    """Tracking record for one run of a pipeline."""

    id: str
    pipeline_id: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    logs: str = ""
    records_processed: int = 0
    errors_count: int = 0
    error_message: Optional[str] = None
    started_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None


# Destination results


@dataclass(frozen=True)
class PassthroughResult:
    """The destination adapter wrote (or acknowledged) the records itself."""

    kind: ClassVar[str] = "passthrough"

    connection_type: str
    record_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.connection_type}


@dataclass(frozen=True)
class LocalFileResult:
    """The records were not written; the caller must package and deliver them."""

    kind: ClassVar[str] = "local_file"

    data: RecordSet
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def record_count(self) -> int:
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": ConnectionType.LOCAL_FILE.value, "config": self.config}


DestinationResult = Union[PassthroughResult, LocalFileResult]


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of ``PipelineEngine.execute``."""

    success: bool
    records_processed: int
    errors_count: int
    destination_result: Optional[DestinationResult]
    records: RecordSet
    node_outcomes: List["NodeOutcome"] = field(default_factory=list)
    logs: str = ""

    @property
    def is_local_file(self) -> bool:
        return isinstance(self.destination_result, LocalFileResult)

    def to_dict(self) -> Dict[str, Any]:
        """Outbound shape handed to the invoking layer."""
        result: Dict[str, Any] = {
            "success": self.success,
            "recordsProcessed": self.records_processed,
            "errorsCount": self.errors_count,
            "destinationResult": (
                self.destination_result.to_dict()
                if self.destination_result is not None
                else None
            ),
        }
        if isinstance(self.destination_result, LocalFileResult):
            result["data"] = self.records
        return result
