from abc import ABC, abstractmethod
from typing import Any, Dict

from nodeflow.core.models import DestinationResult, RecordSet


class DestinationConnector(ABC):
    """Abstract base class for all destination connectors."""

    def __init__(self, connection_config: Dict[str, Any], connection_type: str):
        self.connection_config = connection_config
        self.connection_type = connection_type

    @abstractmethod
    def write(
        self, records: RecordSet, options: Dict[str, Any], timeout: float
    ) -> DestinationResult:
        """
        Deliver the record set to the destination.

        Args:
            records: Records produced by the preceding nodes
            options: The destination node's config
            timeout: Request timeout in seconds

        Returns:
            A ``PassthroughResult`` if the connector handled the records, or a
            ``LocalFileResult`` handing them back to the caller
        """
        raise NotImplementedError
