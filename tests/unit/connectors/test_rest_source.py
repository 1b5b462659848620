"""Tests for the REST source connector."""

import pytest
import requests
import requests_mock

from nodeflow.connectors.rest.source import RestSource, json_type, unwrap_records
from nodeflow.exceptions import ApiPreviewError, MissingConfigError, SourceFetchError

BASE_URL = "https://api.example.com"


@pytest.fixture
def source():
    return RestSource(
        {
            "baseUrl": BASE_URL,
            "headers": {"X-Team": "data"},
            "apiKey": "secret-key",
        }
    )


def test_unwrap_results_envelope():
    assert unwrap_records({"results": [{"a": 1}]}) == [{"a": 1}]


def test_unwrap_envelope_key_order():
    body = {"items": [{"i": 1}], "data": [{"d": 1}], "results": [{"r": 1}]}
    assert unwrap_records(body) == [{"d": 1}]


def test_unwrap_skips_non_array_envelope_values():
    body = {"data": {"total": 2}, "items": [{"i": 1}]}
    assert unwrap_records(body) == [{"i": 1}]


def test_unwrap_wraps_single_object():
    assert unwrap_records({"a": 1}) == [{"a": 1}]


def test_unwrap_array_and_null():
    assert unwrap_records([{"a": 1}, {"a": 2}]) == [{"a": 1}, {"a": 2}]
    assert unwrap_records(None) == []
    assert unwrap_records([]) == []


def test_json_type():
    assert json_type("x") == "string"
    assert json_type(1.5) == "number"
    assert json_type(True) == "boolean"
    assert json_type(None) == "null"
    assert json_type({"a": 1}) == "object"


def test_read_builds_url_and_headers(source):
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/users", json={"data": [{"id": 1}, {"id": 2}]})
        records = source.read({"endpoint": "/users"}, timeout=30)

        assert records == [{"id": 1}, {"id": 2}]
        request = m.last_request
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert request.headers["X-Team"] == "data"
        assert request.timeout == 30


def test_read_sends_method_and_query_params(source):
    with requests_mock.Mocker() as m:
        m.post(f"{BASE_URL}/search", json=[{"id": 7}])
        records = source.read(
            {"endpoint": "/search", "method": "post", "queryParams": {"page": 2}},
            timeout=30,
        )

        assert records == [{"id": 7}]
        assert m.last_request.method == "POST"
        assert m.last_request.qs == {"page": ["2"]}


def test_read_falls_back_to_connection_endpoint():
    source = RestSource({"baseUrl": BASE_URL, "endpoint": "/default"})
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/default", json={"id": 1})
        assert source.read({}, timeout=30) == [{"id": 1}]
        assert "Authorization" not in m.last_request.headers


def test_read_http_error(source):
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/users", status_code=500)
        with pytest.raises(SourceFetchError) as exc_info:
            source.read({"endpoint": "/users"}, timeout=30)
        assert "500" in str(exc_info.value)


def test_read_connection_error(source):
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/users", exc=requests.exceptions.ConnectTimeout)
        with pytest.raises(SourceFetchError):
            source.read({"endpoint": "/users"}, timeout=30)


def test_read_invalid_json(source):
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/users", text="<html>oops</html>")
        with pytest.raises(SourceFetchError):
            source.read({"endpoint": "/users"}, timeout=30)


def test_missing_base_url():
    with pytest.raises(MissingConfigError):
        RestSource({}).read({}, timeout=30)


def test_preview_truncates_and_describes_columns(source):
    rows = [{"id": i, "name": f"n{i}", "active": True, "meta": None} for i in range(15)]
    with requests_mock.Mocker() as m:
        m.get(f"{BASE_URL}/users", json={"items": rows})
        result = source.preview("/users", limit=10, timeout=10)

    assert result.count == 10
    assert result.connection_type == "rest_api"
    assert result.columns == [
        {"name": "id", "type": "number"},
        {"name": "name", "type": "string"},
        {"name": "active", "type": "boolean"},
        {"name": "meta", "type": "null"},
    ]


def test_preview_error_is_wrapped(source):
    with requests_mock.Mocker() as m:
        m.get(BASE_URL, status_code=404)
        with pytest.raises(ApiPreviewError) as exc_info:
            source.preview(None, limit=10, timeout=10)
    assert str(exc_info.value).startswith("API preview error:")


def test_connection_test(source):
    with requests_mock.Mocker() as m:
        m.get(BASE_URL, status_code=200)
        result = source.test_connection(timeout=5)
        assert result.success is True
        assert result.message == "API responded with status 200"

        m.get(BASE_URL, status_code=401)
        result = source.test_connection(timeout=5)
        assert result.success is False
        assert result.message == "API responded with status 401"


def test_connection_test_unreachable(source):
    with requests_mock.Mocker() as m:
        m.get(BASE_URL, exc=requests.exceptions.ConnectionError("refused"))
        result = source.test_connection(timeout=5)
    assert result.success is False
    assert "refused" in result.message
