"""Serialization of local file results for download.

The engine returns ``LocalFileResult`` payloads untouched; whoever invoked the
pipeline turns them into a file with ``package_local_file``. Nested objects are
JSON-encoded into a single CSV cell and kept as-is for JSON.
"""

import json
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Dict, Optional

import pandas as pd

from nodeflow.core.models import LocalFileResult
from nodeflow.exceptions import ConfigError

FORMATS = {
    "csv": "text/csv",
    "json": "application/json",
}
DEFAULT_FORMAT = "csv"
DEFAULT_BASENAME = "pipeline_output"
DEFAULT_DELIMITER = ","


@dataclass(frozen=True)
class LocalFilePackage:
    filename: str
    file_format: str
    media_type: str
    content: bytes
    record_count: int


def resolve_format(
    config: Dict[str, Any], connection_config: Optional[Dict[str, Any]] = None
) -> str:
    """Node ``fileFormat``, then node ``format``, then the connection's ``format``."""
    connection_config = connection_config or {}
    file_format = str(
        config.get("fileFormat")
        or config.get("format")
        or connection_config.get("format")
        or DEFAULT_FORMAT
    ).lower()
    if file_format not in FORMATS:
        raise ConfigError(
            f"Unsupported file format {file_format!r} "
            f"(expected one of: {', '.join(sorted(FORMATS))})"
        )
    return file_format


def resolve_filename(config: Dict[str, Any], file_format: str) -> str:
    """Base name from ``filePath``/``fileName`` with the extension matching the format."""
    raw = config.get("filePath") or config.get("fileName") or DEFAULT_BASENAME
    stem = PurePath(str(raw)).stem or DEFAULT_BASENAME
    return f"{stem}.{file_format}"


def _csv_cell(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return json.dumps(value, default=str)
    return value


def _csv_option(
    key: str,
    config: Dict[str, Any],
    connection_config: Dict[str, Any],
    default: Any,
) -> Any:
    for source in (config, connection_config):
        value = source.get(key)
        if value is not None and value != "":
            return value
    return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "off")
    return bool(value)


def to_csv_bytes(
    records: list,
    config: Optional[Dict[str, Any]] = None,
    connection_config: Optional[Dict[str, Any]] = None,
) -> bytes:
    """Render records as CSV.

    ``delimiter`` and ``includeHeaders`` are read from the node config, then
    from the connection config. Nested values become JSON strings in one cell.
    """
    if not records:
        return b""
    config = config or {}
    connection_config = connection_config or {}
    delimiter = str(_csv_option("delimiter", config, connection_config, DEFAULT_DELIMITER))
    include_headers = _as_bool(
        _csv_option("includeHeaders", config, connection_config, True)
    )

    df = pd.DataFrame.from_records(records)
    df = df.apply(lambda column: column.map(_csv_cell))
    return df.to_csv(sep=delimiter, header=include_headers, index=False).encode("utf-8")


def to_json_bytes(records: list) -> bytes:
    return json.dumps(records, indent=2, default=str).encode("utf-8")


def package_local_file(
    result: LocalFileResult, connection_config: Optional[Dict[str, Any]] = None
) -> LocalFilePackage:
    """Serialize a local file result into a downloadable file.

    Args:
        result: Payload returned by a local file destination
        connection_config: Decrypted config of the destination connection, if known

    Raises:
        ConfigError: If the configured file format is not supported
    """
    file_format = resolve_format(result.config, connection_config)
    if file_format == "json":
        content = to_json_bytes(result.data)
    else:
        content = to_csv_bytes(result.data, result.config, connection_config)

    return LocalFilePackage(
        filename=resolve_filename(result.config, file_format),
        file_format=file_format,
        media_type=FORMATS[file_format],
        content=content,
        record_count=result.record_count,
    )
