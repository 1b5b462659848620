"""Base NodeHandler Interface.

This module defines the contract every node type implements. Handlers never
let an exception escape: a failing node is reported as a FAILURE outcome so
the engine can move on to the next node.
"""

import functools
import time
from abc import ABC, abstractmethod
from datetime import datetime

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.models import Node, RecordSet, utc_now
from nodeflow.exceptions import NodeflowError
from nodeflow.logging import get_logger

logger = get_logger(__name__)


def timed_operation(operation_name: str):
    """Decorator that logs how long an operation took, or after how long it failed."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                duration = time.time() - start_time
                logger.debug(f"{operation_name} completed in {duration:.3f}s")
                return result
            except Exception as e:
                duration = time.time() - start_time
                logger.error(f"{operation_name} failed after {duration:.3f}s: {e}")
                raise

        return wrapper

    return decorator


class NodeHandler(ABC):
    """
    Abstract base class for node execution strategies.

    Each node type (source, transform, validate, destination) implements
    ``process`` with its specific logic. Handlers are stateless; everything a
    run needs is passed in through the ExecutionContext.
    """

    NODE_TYPE: str = ""

    def execute(
        self, node: Node, records: RecordSet, context: ExecutionContext
    ) -> NodeOutcome:
        """
        Process a node, converting any error into a FAILURE outcome.

        Args:
            node: The node to process
            records: Current record set; handlers must not mutate it
            context: Execution context containing shared services

        Returns:
            NodeOutcome describing the result
        """
        start_time = utc_now()
        try:
            return self.process(node, records, context, start_time)
        except Exception as e:
            return self._handle_execution_error(node, start_time, e)

    @abstractmethod
    def process(
        self,
        node: Node,
        records: RecordSet,
        context: ExecutionContext,
        start_time: datetime,
    ) -> NodeOutcome:
        """Node-type specific logic. May raise; ``execute`` converts errors."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement process method"
        )

    def _handle_execution_error(
        self, node: Node, start_time: datetime, exception: Exception
    ) -> NodeOutcome:
        if isinstance(exception, NodeflowError):
            error_code = exception.error_code
            logger.error(f"Node {node.name} ({node.type}) failed: {exception}")
        else:
            error_code = f"{node.type.upper()}_EXECUTION_ERROR"
            logger.exception(f"Unexpected error in node {node.name} ({node.type})")

        return NodeOutcome.failure(
            node,
            start_time,
            error_message=str(exception),
            error_code=error_code,
        )
