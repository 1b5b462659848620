"""Workspace files for the CLI.

A workspace is a YAML file listing the connections and pipelines the CLI can
run, for example::

    connections:
      - id: users_db
        name: Users database
        type: sqlite
        config:
          path: users.db
      - id: export
        type: local_file
        encrypted_config: "9f0c...:4be1..."

    pipelines:
      - id: active_users
        name: Active users
        nodes:
          - {id: n1, type: source, name: Users, config: {dataSourceId: users_db, table: users}}
          - {id: n2, type: destination, name: Export, config: {dataSourceId: export}}

Connection configs may be given as plaintext ``config`` or as
``encrypted_config``. Plaintext configs are encrypted while loading, so the
registry only ever holds ciphertext.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from nodeflow.core.models import ConnectionDescriptor, PipelineDefinition
from nodeflow.core.stores import InMemoryConnectionRegistry, InMemoryPipelineStore
from nodeflow.exceptions import ConfigError
from nodeflow.logging import get_logger
from nodeflow.security.credentials import ConnectionCredentialStore

logger = get_logger(__name__)


class WorkspaceError(ConfigError):
    """A workspace file is missing or malformed."""


@dataclass
class Workspace:
    path: Path
    connections: InMemoryConnectionRegistry
    pipelines: InMemoryPipelineStore


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise WorkspaceError(f"Workspace file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise WorkspaceError(f"Invalid YAML in workspace {path}: {e}") from e
    if not isinstance(data, dict):
        raise WorkspaceError(f"Workspace {path} must be a mapping")
    return data


def _load_connection(
    entry: Dict[str, Any], credential_store: ConnectionCredentialStore
) -> ConnectionDescriptor:
    connection_id = entry.get("id")
    connection_type = entry.get("type")
    if not connection_id or not connection_type:
        raise WorkspaceError(f"Connection entries need 'id' and 'type': {entry!r}")

    encrypted_config = entry.get("encrypted_config")
    if encrypted_config is None:
        config = entry.get("config") or {}
        if not isinstance(config, dict):
            raise WorkspaceError(f"Config of connection {connection_id} must be a mapping")
        encrypted_config = credential_store.encrypt_config(config)

    return ConnectionDescriptor(
        id=str(connection_id),
        type=str(connection_type),
        encrypted_config=str(encrypted_config),
        name=str(entry.get("name") or connection_id),
        status=str(entry.get("status") or "active"),
    )


def _entries(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = data.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise WorkspaceError(f"'{key}' must be a list of mappings")
    return entries


def load_workspace(
    path: Union[str, Path], credential_store: ConnectionCredentialStore
) -> Workspace:
    """Load a workspace file into in-memory stores.

    Args:
        path: Path to the workspace YAML file
        credential_store: Used to encrypt plaintext connection configs

    Returns:
        Workspace with populated connection registry and pipeline store

    Raises:
        WorkspaceError: If the file is missing or malformed
    """
    path = Path(path)
    data = _read_yaml(path)

    connections = InMemoryConnectionRegistry(
        [_load_connection(e, credential_store) for e in _entries(data, "connections")]
    )
    pipelines = InMemoryPipelineStore(
        [PipelineDefinition.from_dict(e) for e in _entries(data, "pipelines")]
    )

    logger.debug(
        f"Loaded workspace {path}: {len(connections.list())} connections, "
        f"{len(pipelines.list())} pipelines"
    )
    return Workspace(path=path, connections=connections, pipelines=pipelines)
