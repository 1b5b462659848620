"""REST API Source Connector implementation.

Fetches JSON records from an HTTP endpoint. The URL is the connection's
``baseUrl`` followed by an optional endpoint path; connection-level headers
are sent on every request, plus a bearer token when an ``apiKey`` is set.

APIs wrap their records in different envelopes, so responses are normalized
to a flat list of records (see ``unwrap_records``).
"""

from typing import Any, Dict, List, Optional

import requests

from nodeflow.connectors.base.connection_test_result import ConnectionTestResult
from nodeflow.connectors.base.preview_result import PreviewResult
from nodeflow.connectors.base.source_connector import SourceConnector
from nodeflow.core.models import ConnectionType, RecordSet
from nodeflow.core.node_configs import RestRequestOptions
from nodeflow.exceptions import ApiPreviewError, MissingConfigError, SourceFetchError
from nodeflow.logging import get_logger, mask_secrets

logger = get_logger(__name__)

# Keys searched, in order, for the record array of an enveloped response
ENVELOPE_KEYS = ("data", "results", "items")

USER_AGENT = "NodeFlow-REST-Connector/1.0"


def unwrap_records(body: Any) -> List[Any]:
    """Normalize a decoded JSON body to a flat list of records.

    An object is searched for the first of ``data``, ``results`` and
    ``items`` that holds an array. Anything that is still not an array is
    wrapped as a single record; an empty (null) body yields no records.
    """
    if body is None:
        return []

    if isinstance(body, dict):
        for key in ENVELOPE_KEYS:
            if isinstance(body.get(key), list):
                return body[key]

    if not isinstance(body, list):
        return [body]
    return body


def json_type(value: Any) -> str:
    """Name of the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


class RestSource(SourceConnector):
    """
    Reads records from a REST API.

    The connection config provides ``baseUrl`` and optionally ``endpoint``,
    ``headers`` and ``apiKey``. Source nodes may override the endpoint and
    set ``method`` and ``queryParams``.
    """

    def __init__(
        self,
        connection_config: Dict[str, Any],
        connection_type: str = ConnectionType.REST_API.value,
    ):
        super().__init__(connection_config, connection_type)

    @property
    def base_url(self) -> str:
        base_url = str(self.connection_config.get("baseUrl") or "").strip()
        if not base_url:
            raise MissingConfigError("baseUrl", "REST API connection requires 'baseUrl'")
        return base_url

    def build_url(self, endpoint: Optional[str] = None) -> str:
        return f"{self.base_url}{endpoint or ''}"

    def build_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        headers.update(self.connection_config.get("headers") or {})
        api_key = self.connection_config.get("apiKey")
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def _request(
        self,
        method: str,
        url: str,
        timeout: float,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        headers = self.build_headers()
        logger.debug(
            f"{method} {url} params={params or {}} headers={mask_secrets(headers)}"
        )
        response = requests.request(
            method, url, headers=headers, params=params or {}, timeout=timeout
        )
        logger.debug(f"API response status: {response.status_code}")
        response.raise_for_status()
        return response

    def read(self, options: Dict[str, Any], timeout: float) -> RecordSet:
        request_options = RestRequestOptions.from_dict(options)
        endpoint = request_options.endpoint or self.connection_config.get("endpoint")
        url = self.build_url(endpoint)
        logger.info(f"Fetching from API: {request_options.method} {url}")

        try:
            response = self._request(
                request_options.method,
                url,
                timeout,
                params=request_options.query_params,
            )
            records = unwrap_records(response.json())
        except requests.RequestException as e:
            raise SourceFetchError(f"API request failed: {e}") from e
        except ValueError as e:
            raise SourceFetchError(f"API response is not valid JSON: {e}") from e

        logger.info(f"API returned {len(records)} records")
        return records

    def preview(
        self, query: Optional[str], limit: int, timeout: float
    ) -> PreviewResult:
        # For REST connections the preview "query" is an endpoint path
        try:
            response = self._request("GET", self.build_url(query), timeout)
            records = unwrap_records(response.json())
        except (requests.RequestException, ValueError, MissingConfigError) as e:
            raise ApiPreviewError(f"API preview error: {e}") from e

        columns = []
        if records and isinstance(records[0], dict):
            columns = [
                {"name": key, "type": json_type(value)}
                for key, value in records[0].items()
            ]

        return PreviewResult(
            data=records[:limit], columns=columns, connection_type=self.connection_type
        )

    def test_connection(self, timeout: float) -> ConnectionTestResult:
        try:
            response = requests.get(
                self.base_url, headers=self.build_headers(), timeout=timeout
            )
        except (requests.RequestException, MissingConfigError) as e:
            return ConnectionTestResult(success=False, message=str(e))

        return ConnectionTestResult(
            success=response.status_code == 200,
            message=f"API responded with status {response.status_code}",
        )
