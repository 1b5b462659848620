"""Exception hierarchy for NodeFlow.

Node-level errors (configuration, connection, unsupported types) are caught by
the node handlers and folded into the execution's error count. Only
``FatalSetupError`` and lookups that prevent an execution from being tracked
at all escape ``PipelineEngine.execute``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class NodeflowError(Exception):
    """Base exception for all NodeFlow errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return self.message


# Configuration errors


class ConfigError(NodeflowError):
    """A node or process configuration is incomplete or invalid."""


class MissingConfigError(ConfigError):
    """A required configuration key is absent."""

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(
            message or f"Missing required configuration: {key}",
            context={"key": key},
        )
        self.key = key


class NoQueryOrTableError(ConfigError):
    """Neither a query nor a table could be resolved for a SQL source."""

    def __init__(self, message: str = "No query or table specified"):
        super().__init__(message)


# Connection errors


class DataConnectionError(NodeflowError):
    """An external database or API could not be reached or used."""


class SourceFetchError(DataConnectionError):
    """Reading records from a source failed."""


class DatabasePreviewError(DataConnectionError):
    """Previewing rows from a database failed."""


class ApiPreviewError(DataConnectionError):
    """Previewing records from a REST API failed."""


class DestinationWriteError(DataConnectionError):
    """Writing records to a destination failed."""


class DecryptionError(DataConnectionError):
    """Ciphertext is malformed or was produced with a different key."""

    def __init__(self, message: str = "Unable to decrypt connection config"):
        super().__init__(message)


# Unsupported types


class UnsupportedTypeError(NodeflowError):
    """A node type or connection type is not supported for an operation."""


class UnsupportedSourceTypeError(UnsupportedTypeError):
    def __init__(self, connection_type: str, message: Optional[str] = None):
        super().__init__(
            message or f"Unsupported source type: {connection_type}",
            context={"connection_type": connection_type},
        )
        self.connection_type = connection_type


class UnsupportedDestinationTypeError(UnsupportedTypeError):
    def __init__(self, connection_type: str, message: Optional[str] = None):
        super().__init__(
            message or f"Unsupported destination type: {connection_type}",
            context={"connection_type": connection_type},
        )
        self.connection_type = connection_type


class UnknownNodeTypeError(UnsupportedTypeError):
    def __init__(self, node_type: str):
        super().__init__(
            f"Unknown node type: {node_type}", context={"node_type": node_type}
        )
        self.node_type = node_type


# Lookups


class NotFoundError(NodeflowError):
    """A record requested by ID does not exist in its store."""


class ConnectionNotFoundError(NotFoundError):
    def __init__(self, connection_id: str, message: Optional[str] = None):
        super().__init__(
            message or "Data source not found",
            context={"connection_id": connection_id},
        )
        self.connection_id = connection_id


class ExecutionNotFoundError(NotFoundError):
    def __init__(self, execution_id: str):
        super().__init__(
            f"Execution not found: {execution_id}",
            context={"execution_id": execution_id},
        )
        self.execution_id = execution_id


class PipelineNotFoundError(NotFoundError):
    def __init__(self, pipeline_id: str):
        super().__init__(
            f"Pipeline not found: {pipeline_id}",
            context={"pipeline_id": pipeline_id},
        )
        self.pipeline_id = pipeline_id


class FatalSetupError(NodeflowError):
    """The execution could not be set up; the whole run is aborted."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        context = {}
        if original_error is not None:
            context["original_error"] = str(original_error)
            context["original_error_type"] = type(original_error).__name__
        super().__init__(message, context=context)
        self.original_error = original_error


class ConditionSyntaxError(ConfigError):
    """A filter condition does not match ``<field> <operator> <value>``."""

    def __init__(self, condition: str):
        super().__init__(
            f"Invalid filter condition: {condition!r}",
            context={"condition": condition},
        )
        self.condition = condition
