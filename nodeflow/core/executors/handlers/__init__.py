"""Node Handlers.

One handler per node type, looked up through ``NodeHandlerFactory``:

- SourceNodeHandler: reads records from a connection
- TransformNodeHandler: filters records (other transform types pass through)
- ValidateNodeHandler: checks records against validation rules
- DestinationNodeHandler: writes records, or hands them back for local files

Example Usage:
    from nodeflow.core.executors.handlers import NodeHandlerFactory

    handler = NodeHandlerFactory.get_handler("transform")
    outcome = handler.execute(node, records, context)
"""

from nodeflow.core.executors.handlers.base import NodeHandler, timed_operation
from nodeflow.core.executors.handlers.destination_handler import DestinationNodeHandler
from nodeflow.core.executors.handlers.factory import NodeHandlerFactory
from nodeflow.core.executors.handlers.source_handler import SourceNodeHandler
from nodeflow.core.executors.handlers.transform_handler import TransformNodeHandler
from nodeflow.core.executors.handlers.validate_handler import (
    ValidateNodeHandler,
    ValidationOutcome,
    validate_records,
)

for _handler_class in (
    SourceNodeHandler,
    TransformNodeHandler,
    ValidateNodeHandler,
    DestinationNodeHandler,
):
    NodeHandlerFactory.register_handler(_handler_class.NODE_TYPE, _handler_class)

__all__ = [
    "NodeHandler",
    "NodeHandlerFactory",
    "SourceNodeHandler",
    "TransformNodeHandler",
    "ValidateNodeHandler",
    "DestinationNodeHandler",
    "ValidationOutcome",
    "validate_records",
    "timed_operation",
]
