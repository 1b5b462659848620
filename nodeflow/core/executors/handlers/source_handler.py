"""Source Node Handler.

Resolves the node's connection, decrypts its config and replaces the current
record set with whatever the matching source connector returns.
"""

from datetime import datetime

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.handlers.base import NodeHandler, timed_operation
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.models import Node, NodeType, RecordSet
from nodeflow.core.node_configs import SourceNodeConfig
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class SourceNodeHandler(NodeHandler):
    NODE_TYPE = NodeType.SOURCE.value

    def process(
        self,
        node: Node,
        records: RecordSet,
        context: ExecutionContext,
        start_time: datetime,
    ) -> NodeOutcome:
        source_config = SourceNodeConfig.from_dict(node.config)
        fetched = self._fetch(source_config, context)

        return NodeOutcome.success(
            node,
            start_time,
            message=f"Fetched {len(fetched)} records from source",
            records=fetched,
        )

    @timed_operation("source_fetch")
    def _fetch(
        self, source_config: SourceNodeConfig, context: ExecutionContext
    ) -> RecordSet:
        connection, config = context.resolve_connection(source_config.data_source_id)
        logger.info(
            f"Reading from {connection.type} connection "
            f"{connection.name or connection.id}"
        )
        connector = context.source_connector(connection, config)
        return connector.read(source_config.raw, context.timeout)
