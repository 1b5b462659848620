"""Typed views over the untyped node config maps.

A pipeline definition stores each node's ``config`` as a plain dict whose
shape depends on the node type and, for sources and destinations, on the
type of the referenced connection. The dict is kept as-is at the
deserialization boundary (``Node.config``); handlers and connectors parse the
part they need into one of the dataclasses below.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from nodeflow.exceptions import ConfigError, MissingConfigError


def _text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: Any, key: str) -> Optional[int]:
    if value in (None, "", 0, False):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from e
    if number < 0:
        raise ConfigError(f"'{key}' must not be negative, got {number}")
    return number or None


def _data_source_id(config: Dict[str, Any], message: str) -> str:
    data_source_id = _text(config.get("dataSourceId"))
    if data_source_id is None:
        raise MissingConfigError("dataSourceId", message)
    return data_source_id


# Source nodes


@dataclass(frozen=True)
class SourceNodeConfig:
    data_source_id: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "SourceNodeConfig":
        return cls(
            data_source_id=_data_source_id(
                config, "No data source specified in source node"
            ),
            raw=dict(config),
        )


@dataclass(frozen=True)
class SqlQueryOptions:
    """Options of a source node reading from a SQL connection."""

    query: Optional[str] = None
    table: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "SqlQueryOptions":
        return cls(
            query=_text(config.get("query")),
            table=_text(config.get("table")),
            limit=_positive_int(config.get("limit"), "limit"),
        )


@dataclass(frozen=True)
class RestRequestOptions:
    """Options of a source node reading from a REST connection."""

    endpoint: Optional[str] = None
    method: str = "GET"
    query_params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RestRequestOptions":
        query_params = config.get("queryParams") or {}
        if not isinstance(query_params, dict):
            raise ConfigError("'queryParams' must be a mapping")
        return cls(
            endpoint=_text(config.get("endpoint")),
            method=(_text(config.get("method")) or "GET").upper(),
            query_params=dict(query_params),
        )


# Transform nodes


class TransformType(str, Enum):
    FILTER = "filter"
    # Accepted by the builder, executed as pass-through for now
    AGGREGATE = "aggregate"
    JOIN = "join"
    MAP = "map"


@dataclass(frozen=True)
class TransformNodeConfig:
    transform_type: Optional[str] = None
    condition: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "TransformNodeConfig":
        return cls(
            transform_type=_text(config.get("transformType")),
            condition=_text(config.get("condition")),
        )

    @property
    def is_filter(self) -> bool:
        return self.transform_type == TransformType.FILTER.value


# Validate nodes


class RuleType(str, Enum):
    NOT_NULL = "not_null"
    UNIQUE = "unique"
    RANGE = "range"
    FORMAT = "format"
    CUSTOM = "custom"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationRule:
    """A data quality rule attached to a validate node.

    Rule types and severities outside the known enums are kept rather than
    rejected: ``rule_type`` or ``severity`` is then None and the original
    value stays available in ``type_name``/``severity_name``.
    """

    rule_type: Optional[RuleType]
    type_name: Optional[str] = None
    column: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    severity: Optional[Severity] = Severity.WARNING
    severity_name: str = Severity.WARNING.value
    name: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRule":
        if not isinstance(data, dict):
            raise ConfigError(f"Validation rule must be a mapping, got {data!r}")
        type_name = _text(data.get("ruleType", data.get("type")))
        severity_name = _text(data.get("severity")) or Severity.WARNING.value
        return cls(
            rule_type=_enum_or_none(RuleType, type_name),
            type_name=type_name,
            column=_text(
                data.get("columnName", data.get("column", data.get("field")))
            ),
            config=dict(data.get("config") or {}),
            severity=_enum_or_none(Severity, severity_name),
            severity_name=severity_name,
            name=_text(data.get("name")),
            is_active=bool(data.get("isActive", True)),
        )

    @property
    def is_supported(self) -> bool:
        return self.rule_type is not None and self.severity is not None


def _enum_or_none(enum_cls, value: Optional[str]):
    try:
        return enum_cls(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class ValidateNodeConfig:
    rules: List[ValidationRule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "ValidateNodeConfig":
        raw_rules = config.get("rules") or []
        if not isinstance(raw_rules, list):
            raise ConfigError("'rules' must be a list")
        return cls(rules=[ValidationRule.from_dict(rule) for rule in raw_rules])

    @property
    def active_rules(self) -> List[ValidationRule]:
        return [rule for rule in self.rules if rule.is_active and rule.is_supported]

    @property
    def unsupported_rules(self) -> List[ValidationRule]:
        return [rule for rule in self.rules if rule.is_active and not rule.is_supported]


# Destination nodes


@dataclass(frozen=True)
class DestinationNodeConfig:
    data_source_id: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "DestinationNodeConfig":
        return cls(
            data_source_id=_data_source_id(
                config, "No destination data source specified"
            ),
            raw=dict(config),
        )


@dataclass(frozen=True)
class SqlWriteOptions:
    """Options of a destination node writing to a SQL connection."""

    table: Optional[str] = None
    write_mode: str = "append"

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "SqlWriteOptions":
        write_mode = (_text(config.get("writeMode")) or "append").lower()
        if write_mode not in ("append", "replace"):
            raise ConfigError(
                f"'writeMode' must be 'append' or 'replace', got {write_mode!r}"
            )
        return cls(table=_text(config.get("table")), write_mode=write_mode)


@dataclass(frozen=True)
class RestWriteOptions:
    """Options of a destination node posting to a REST connection."""

    endpoint: Optional[str] = None
    method: str = "POST"

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RestWriteOptions":
        method = (_text(config.get("method")) or "POST").upper()
        if method not in ("POST", "PUT", "PATCH"):
            raise ConfigError(f"Unsupported write method: {method}")
        return cls(endpoint=_text(config.get("endpoint")), method=method)
