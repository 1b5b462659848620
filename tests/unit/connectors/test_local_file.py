"""Tests for the local file destination and its packaging."""

import json

import pytest

from nodeflow.connectors.local_file.destination import LocalFileDestination
from nodeflow.connectors.local_file.packaging import (
    package_local_file,
    resolve_filename,
    resolve_format,
)
from nodeflow.core.models import LocalFileResult
from nodeflow.exceptions import ConfigError


def test_destination_returns_records_and_node_config():
    records = [{"id": 1}, {"id": 2}]
    node_config = {"dataSourceId": "file", "fileName": "users"}
    result = LocalFileDestination({"format": "json"}).write(records, node_config, 30)

    assert isinstance(result, LocalFileResult)
    assert result.data == records
    assert result.config == node_config
    assert result.record_count == 2
    assert result.to_dict() == {"type": "local_file", "config": node_config}


def test_destination_does_not_alias_input():
    records = [{"id": 1}]
    result = LocalFileDestination({}).write(records, {}, 30)
    records.append({"id": 2})
    assert result.record_count == 1


def test_resolve_format_order():
    assert resolve_format({}) == "csv"
    assert resolve_format({}, {"format": "JSON"}) == "json"
    assert resolve_format({"format": "csv"}, {"format": "json"}) == "csv"
    assert resolve_format({"fileFormat": "json", "format": "csv"}) == "json"
    with pytest.raises(ConfigError):
        resolve_format({"fileFormat": "xlsx"})


def test_resolve_filename():
    assert resolve_filename({}, "csv") == "pipeline_output.csv"
    assert resolve_filename({"fileName": "users"}, "json") == "users.json"
    assert resolve_filename({"filePath": "/exports/users.csv"}, "json") == "users.json"


def test_package_csv_keeps_nested_values_in_one_cell():
    result = LocalFileResult(
        data=[
            {"id": 1, "rating": {"rate": 4.5}, "tags": ["a", "b"]},
            {"id": 2, "rating": {"rate": 3.0}, "tags": []},
        ],
        config={"fileName": "products"},
    )
    package = package_local_file(result)

    assert package.filename == "products.csv"
    assert package.media_type == "text/csv"
    assert package.record_count == 2
    lines = package.content.decode("utf-8").splitlines()
    assert lines == [
        "id,rating,tags",
        '1,"{""rate"": 4.5}","[""a"", ""b""]"',
        '2,"{""rate"": 3.0}",[]',
    ]


def test_package_csv_uses_connection_delimiter_and_headers():
    result = LocalFileResult(data=[{"id": 1, "tags": {"a": 1}}])
    package = package_local_file(
        result, {"format": "csv", "delimiter": ";", "includeHeaders": False}
    )

    assert package.content.decode("utf-8").splitlines() == ['1;"{""a"": 1}"']


def test_package_csv_node_options_win():
    result = LocalFileResult(
        data=[{"id": 1, "name": "Alice"}],
        config={"delimiter": "|", "includeHeaders": "true"},
    )
    package = package_local_file(result, {"delimiter": ";", "includeHeaders": False})

    assert package.content.decode("utf-8").splitlines() == ["id|name", "1|Alice"]


def test_package_csv_defaults():
    result = LocalFileResult(data=[{"id": 1, "name": "Smith, J"}])
    package = package_local_file(result, {"delimiter": ""})

    assert package.content.decode("utf-8").splitlines() == ["id,name", '1,"Smith, J"']


def test_package_json_uses_connection_format():
    result = LocalFileResult(data=[{"id": 1, "active": True}], config={})
    package = package_local_file(result, {"format": "json"})

    assert package.filename == "pipeline_output.json"
    assert package.media_type == "application/json"
    assert json.loads(package.content) == [{"id": 1, "active": True}]


def test_package_empty_csv():
    package = package_local_file(LocalFileResult(data=[], config={}))
    assert package.content == b""
    assert package.record_count == 0
