"""Pipeline execution: engine, node handlers and their results."""

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.engine import PipelineEngine
from nodeflow.core.executors.handlers import NodeHandlerFactory
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.executors.transcript import ExecutionTranscript

__all__ = [
    "ExecutionContext",
    "ExecutionTranscript",
    "NodeHandlerFactory",
    "NodeOutcome",
    "PipelineEngine",
]
