"""Destination Node Handler.

Hands the current record set to the destination connector registered for the
connection's type. A ``local_file`` destination returns the records instead
of writing them; the engine passes that payload on to its caller.
"""

from datetime import datetime

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.handlers.base import NodeHandler, timed_operation
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.models import DestinationResult, Node, NodeType, RecordSet
from nodeflow.core.node_configs import DestinationNodeConfig
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class DestinationNodeHandler(NodeHandler):
    NODE_TYPE = NodeType.DESTINATION.value

    def process(
        self,
        node: Node,
        records: RecordSet,
        context: ExecutionContext,
        start_time: datetime,
    ) -> NodeOutcome:
        destination_config = DestinationNodeConfig.from_dict(node.config)
        result = self._write(records, destination_config, context)

        records_processed = result.record_count
        if records_processed is None:
            records_processed = len(records)

        return NodeOutcome.success(
            node,
            start_time,
            message=f"Written {records_processed} records",
            destination_result=result,
            records_processed=records_processed,
        )

    @timed_operation("destination_write")
    def _write(
        self,
        records: RecordSet,
        destination_config: DestinationNodeConfig,
        context: ExecutionContext,
    ) -> DestinationResult:
        connection, config = context.resolve_connection(
            destination_config.data_source_id,
            not_found_message="Destination data source not found",
        )
        logger.info(
            f"Writing {len(records)} records to {connection.type} connection "
            f"{connection.name or connection.id}"
        )
        connector = context.destination_connector(connection, config)
        return connector.write(records, destination_config.raw, context.timeout)
