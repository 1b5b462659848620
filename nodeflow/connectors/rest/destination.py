import json
from typing import Any, Dict

import requests

from nodeflow.connectors.base.destination_connector import DestinationConnector
from nodeflow.connectors.rest.source import RestSource
from nodeflow.core.models import ConnectionType, PassthroughResult, RecordSet
from nodeflow.core.node_configs import RestWriteOptions
from nodeflow.exceptions import DestinationWriteError
from nodeflow.logging import get_logger

logger = get_logger(__name__)


class RestDestination(DestinationConnector):
    """
    Sends records to a REST API as a single JSON array.

    Only nodes that name an ``endpoint`` issue a request; otherwise the
    records are acknowledged without I/O.
    """

    def __init__(
        self,
        connection_config: Dict[str, Any],
        connection_type: str = ConnectionType.REST_API.value,
    ):
        super().__init__(connection_config, connection_type)
        # URL and header handling is shared with the source side
        self._client = RestSource(connection_config, connection_type)

    def write(
        self, records: RecordSet, options: Dict[str, Any], timeout: float
    ) -> PassthroughResult:
        write_options = RestWriteOptions.from_dict(options)

        if not write_options.endpoint:
            logger.info(
                f"No endpoint for REST destination; acknowledging {len(records)} records"
            )
            return PassthroughResult(self.connection_type, len(records))

        if not records:
            logger.info("No records to send")
            return PassthroughResult(self.connection_type, 0)

        url = self._client.build_url(write_options.endpoint)
        headers = self._client.build_headers()
        headers["Content-Type"] = "application/json"

        logger.info(f"Sending {len(records)} records: {write_options.method} {url}")
        try:
            response = requests.request(
                write_options.method,
                url,
                headers=headers,
                data=json.dumps(records, default=str),
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise DestinationWriteError(f"API write failed: {e}") from e

        return PassthroughResult(self.connection_type, len(records))
