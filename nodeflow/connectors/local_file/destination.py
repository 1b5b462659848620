from typing import Any, Dict

from nodeflow.connectors.base.destination_connector import DestinationConnector
from nodeflow.core.models import ConnectionType, LocalFileResult, RecordSet
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class LocalFileDestination(DestinationConnector):
    """
    Virtual destination for client-side downloads.

    Nothing is written here: the full record set and the node's config are
    handed back to the caller, which serializes and delivers them (see
    ``nodeflow.connectors.local_file.packaging``).
    """

    def __init__(
        self,
        connection_config: Dict[str, Any],
        connection_type: str = ConnectionType.LOCAL_FILE.value,
    ):
        super().__init__(connection_config, connection_type)

    def write(
        self, records: RecordSet, options: Dict[str, Any], timeout: float
    ) -> LocalFileResult:
        logger.info(f"Local file destination: returning {len(records)} records")
        return LocalFileResult(data=list(records), config=dict(options))
