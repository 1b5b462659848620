"""Node Execution Results.

Every node handler returns a ``NodeOutcome`` instead of raising, so the
engine can keep running after a node fails and still account for every node
of the pipeline. The outcome carries what the engine needs to advance: the
new record set (if the node produced one), the transcript line for the node,
validation errors and, for destinations, the destination result.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from nodeflow.core.models import DestinationResult, Node, RecordSet, utc_now


@dataclass(frozen=True)
class NodeOutcome:
    """
    Result of processing a single node.

    Attributes:
        status: SUCCESS, FAILURE or SKIPPED
        node_id: ID of the node
        node_type: Type of the node, as declared in the pipeline
        node_name: Display name of the node
        start_time: When processing started (UTC)
        end_time: When processing ended (UTC)
        duration_ms: Processing time in milliseconds
        records: Record set produced by the node; None leaves the current one in place
        message: Transcript line describing the node's result
        error_message: Error message if status is FAILURE
        error_code: Error code of the exception that failed the node
        errors_count: Data errors reported by a validate node
        destination_result: Result of a destination node
        records_processed: Records written or handed over by a destination node
    """

    status: Literal["SUCCESS", "FAILURE", "SKIPPED"]
    node_id: str
    node_type: str
    node_name: str
    start_time: datetime
    end_time: datetime
    duration_ms: float

    records: Optional[RecordSet] = None
    message: str = ""

    error_message: Optional[str] = None
    error_code: Optional[str] = None

    errors_count: int = 0
    destination_result: Optional[DestinationResult] = None
    records_processed: Optional[int] = None

    @classmethod
    def success(
        cls,
        node: Node,
        start_time: datetime,
        message: str,
        end_time: Optional[datetime] = None,
        **kwargs,
    ) -> "NodeOutcome":
        """
        Create a successful outcome.

        Args:
            node: The processed node
            start_time: When processing started
            message: Transcript line for the node
            end_time: When processing ended (defaults to now)
            **kwargs: Additional outcome data

        Returns:
            NodeOutcome with SUCCESS status
        """
        if end_time is None:
            end_time = utc_now()

        return cls(
            status="SUCCESS",
            node_id=node.id,
            node_type=node.type,
            node_name=node.name,
            start_time=start_time,
            end_time=end_time,
            duration_ms=(end_time - start_time).total_seconds() * 1000,
            message=message,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        node: Node,
        start_time: datetime,
        error_message: str,
        end_time: Optional[datetime] = None,
        error_code: Optional[str] = None,
    ) -> "NodeOutcome":
        """
        Create a failed outcome.

        The transcript line is ``ERROR in node <name>: <message>``.
        """
        if end_time is None:
            end_time = utc_now()

        return cls(
            status="FAILURE",
            node_id=node.id,
            node_type=node.type,
            node_name=node.name,
            start_time=start_time,
            end_time=end_time,
            duration_ms=(end_time - start_time).total_seconds() * 1000,
            message=f"ERROR in node {node.name}: {error_message}",
            error_message=error_message,
            error_code=error_code,
        )

    @classmethod
    def skipped(cls, node: Node, reason: str) -> "NodeOutcome":
        """Create an outcome for a node that was not executed."""
        now = utc_now()

        return cls(
            status="SKIPPED",
            node_id=node.id,
            node_type=node.type,
            node_name=node.name,
            start_time=now,
            end_time=now,
            duration_ms=0.0,
            message=reason,
        )

    @property
    def failed(self) -> bool:
        return self.status == "FAILURE"

    def to_dict(self) -> Dict[str, Any]:
        """Summary of the outcome for display and serialization."""
        return {
            "node_id": self.node_id,
            "node_type": self.node_type,
            "node_name": self.node_name,
            "status": self.status,
            "duration_ms": self.duration_ms,
            "records": len(self.records) if self.records is not None else None,
            "message": self.message,
            "error_code": self.error_code,
        }
