"""Node Handler Factory.

Maps node types to their handlers. Handlers are registered with their node
type and looked up dynamically, so adding a node type does not touch the
engine.
"""

from typing import Dict, List, Type

from nodeflow.core.executors.handlers.base import NodeHandler
from nodeflow.exceptions import UnknownNodeTypeError
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class NodeHandlerFactory:
    """
    Factory class that provides the correct NodeHandler for a given node type.

    Handlers are stateless, so one instance per node type is created lazily
    and reused.
    """

    # Registry of node type -> handler class mappings
    _handlers: Dict[str, Type[NodeHandler]] = {}
    _handler_instances: Dict[str, NodeHandler] = {}

    @classmethod
    def register_handler(cls, node_type: str, handler_class: Type[NodeHandler]) -> None:
        """
        Register a handler class for a node type.

        Args:
            node_type: The node type this handler manages (e.g. "source")
            handler_class: The handler class to instantiate for this node type

        Raises:
            TypeError: If node_type is not a string or handler_class is not a NodeHandler subclass
        """
        if not isinstance(node_type, str):
            raise TypeError("Node type must be a string")

        if not (isinstance(handler_class, type) and issubclass(handler_class, NodeHandler)):
            raise TypeError("Handler class must be a subclass of NodeHandler")

        cls._handlers[node_type] = handler_class
        cls._handler_instances.pop(node_type, None)
        logger.debug(f"Registered handler {handler_class.__name__} for node type '{node_type}'")

    @classmethod
    def get_handler(cls, node_type: str) -> NodeHandler:
        """
        Get the handler for a node type.

        Raises:
            UnknownNodeTypeError: If no handler is registered for the node type
        """
        if node_type in cls._handler_instances:
            return cls._handler_instances[node_type]

        handler_class = cls._handlers.get(node_type)
        if handler_class is None:
            raise UnknownNodeTypeError(node_type)

        handler = handler_class()
        cls._handler_instances[node_type] = handler
        return handler

    @classmethod
    def is_node_type_supported(cls, node_type: str) -> bool:
        return node_type in cls._handlers

    @classmethod
    def get_available_node_types(cls) -> List[str]:
        return list(cls._handlers.keys())
