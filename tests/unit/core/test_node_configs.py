"""Tests for the typed node config views."""

import pytest

from nodeflow.core.node_configs import (
    DestinationNodeConfig,
    RestRequestOptions,
    RestWriteOptions,
    RuleType,
    Severity,
    SourceNodeConfig,
    SqlQueryOptions,
    SqlWriteOptions,
    TransformNodeConfig,
    ValidateNodeConfig,
)
from nodeflow.exceptions import ConfigError, MissingConfigError


def test_source_requires_data_source_id():
    with pytest.raises(MissingConfigError) as exc_info:
        SourceNodeConfig.from_dict({"table": "users"})
    assert str(exc_info.value) == "No data source specified in source node"


def test_source_keeps_raw_config():
    config = SourceNodeConfig.from_dict({"dataSourceId": "db", "table": "users"})
    assert config.data_source_id == "db"
    assert config.raw["table"] == "users"


def test_destination_requires_data_source_id():
    with pytest.raises(MissingConfigError) as exc_info:
        DestinationNodeConfig.from_dict({"dataSourceId": "  "})
    assert str(exc_info.value) == "No destination data source specified"


def test_sql_query_options():
    options = SqlQueryOptions.from_dict({"query": " SELECT 1 ", "limit": "10"})
    assert options.query == "SELECT 1"
    assert options.table is None
    assert options.limit == 10


def test_sql_query_options_zero_limit_is_no_limit():
    assert SqlQueryOptions.from_dict({"limit": 0}).limit is None


def test_sql_query_options_invalid_limit():
    with pytest.raises(ConfigError):
        SqlQueryOptions.from_dict({"limit": "ten"})
    with pytest.raises(ConfigError):
        SqlQueryOptions.from_dict({"limit": -1})


def test_rest_request_options_defaults():
    options = RestRequestOptions.from_dict({})
    assert options.method == "GET"
    assert options.endpoint is None
    assert options.query_params == {}


def test_rest_request_options_rejects_non_mapping_params():
    with pytest.raises(ConfigError):
        RestRequestOptions.from_dict({"queryParams": ["a"]})


def test_transform_filter():
    config = TransformNodeConfig.from_dict(
        {"transformType": "filter", "condition": "price > 50"}
    )
    assert config.is_filter
    assert config.condition == "price > 50"
    assert not TransformNodeConfig.from_dict({"transformType": "aggregate"}).is_filter


def test_validate_rules():
    config = ValidateNodeConfig.from_dict(
        {
            "rules": [
                {"ruleType": "not_null", "columnName": "email", "severity": "critical"},
                {"type": "range", "column": "age", "config": {"min": 0}},
                {"ruleType": "unique", "columnName": "id", "isActive": False},
            ]
        }
    )
    assert [rule.rule_type for rule in config.rules] == [
        RuleType.NOT_NULL,
        RuleType.RANGE,
        RuleType.UNIQUE,
    ]
    assert config.rules[0].severity == Severity.CRITICAL
    assert config.rules[1].severity == Severity.WARNING
    assert config.rules[1].column == "age"
    assert len(config.active_rules) == 2


def test_validate_unknown_rule_type_is_kept_unsupported():
    config = ValidateNodeConfig.from_dict(
        {
            "rules": [
                {"type": "not_null", "field": "email", "severity": "critical"},
                {"type": "email", "field": "email", "severity": "error"},
                {"ruleType": "range", "severity": "blocker"},
            ]
        }
    )
    supported, unknown_type, unknown_severity = config.rules

    assert supported.is_supported
    assert supported.column == "email"
    assert unknown_type.rule_type is None
    assert unknown_type.type_name == "email"
    assert unknown_type.column == "email"
    assert unknown_severity.rule_type == RuleType.RANGE
    assert unknown_severity.severity is None
    assert unknown_severity.severity_name == "blocker"
    assert config.active_rules == [supported]
    assert config.unsupported_rules == [unknown_type, unknown_severity]


def test_validate_rule_must_be_mapping():
    with pytest.raises(ConfigError):
        ValidateNodeConfig.from_dict({"rules": ["not_null"]})


def test_sql_write_options():
    assert SqlWriteOptions.from_dict({}).write_mode == "append"
    assert SqlWriteOptions.from_dict({"writeMode": "REPLACE"}).write_mode == "replace"
    with pytest.raises(ConfigError):
        SqlWriteOptions.from_dict({"writeMode": "upsert"})


def test_rest_write_options():
    assert RestWriteOptions.from_dict({"endpoint": "/x"}).method == "POST"
    with pytest.raises(ConfigError):
        RestWriteOptions.from_dict({"method": "DELETE"})
