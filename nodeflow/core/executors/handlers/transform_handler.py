"""Transform Node Handler.

Only ``filter`` transforms change the record set. Other transform types are
accepted and pass the records through unchanged.
"""

from datetime import datetime

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.handlers.base import NodeHandler
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.models import Node, NodeType, RecordSet
from nodeflow.core.node_configs import TransformNodeConfig
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class TransformNodeHandler(NodeHandler):
    NODE_TYPE = NodeType.TRANSFORM.value

    def process(
        self,
        node: Node,
        records: RecordSet,
        context: ExecutionContext,
        start_time: datetime,
    ) -> NodeOutcome:
        transform_config = TransformNodeConfig.from_dict(node.config)

        if transform_config.is_filter and transform_config.condition:
            output = context.evaluator.filter(records, transform_config.condition)
            logger.info(
                f"Filter '{transform_config.condition}' kept "
                f"{len(output)} of {len(records)} records"
            )
        else:
            # Not implemented yet: pass-through
            logger.info(
                f"Transform type {transform_config.transform_type or '(none)'} "
                f"passes {len(records)} records through"
            )
            output = list(records)

        return NodeOutcome.success(
            node,
            start_time,
            message=f"Transform complete: {len(output)} records",
            records=output,
        )
