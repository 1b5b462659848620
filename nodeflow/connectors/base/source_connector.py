from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from nodeflow.connectors.base.connection_test_result import ConnectionTestResult
from nodeflow.connectors.base.preview_result import PreviewResult
from nodeflow.core.models import RecordSet


class SourceConnector(ABC):
    """Abstract base class for all source connectors.

    A connector is created for a single call with the decrypted config of one
    connection and discarded afterwards; it must not hold client handles
    beyond the call that opened them.
    """

    def __init__(self, connection_config: Dict[str, Any], connection_type: str):
        self.connection_config = connection_config
        self.connection_type = connection_type

    @abstractmethod
    def read(self, options: Dict[str, Any], timeout: float) -> RecordSet:
        """
        Read the full record set described by a source node's config.

        Args:
            options: The source node's config
            timeout: Request timeout in seconds

        Returns:
            The records, in the order the source returned them
        """
        raise NotImplementedError

    @abstractmethod
    def preview(
        self, query: Optional[str], limit: int, timeout: float
    ) -> PreviewResult:
        """
        Read a small sample with column metadata.

        Args:
            query: Custom query (SQL) or endpoint path (REST); optional
            limit: Maximum number of rows to return
            timeout: Request timeout in seconds
        """
        raise NotImplementedError

    @abstractmethod
    def test_connection(self, timeout: float) -> ConnectionTestResult:
        """Check that the connection is reachable. Must not raise."""
        raise NotImplementedError
