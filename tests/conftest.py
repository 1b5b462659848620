"""Pytest configuration for NodeFlow tests."""

import sqlite3
from pathlib import Path
from typing import Any, Dict, List

import pytest

from nodeflow.config import Settings
from nodeflow.connectors.base import (
    ConnectionTestResult,
    DestinationConnector,
    PreviewResult,
    SourceConnector,
)
from nodeflow.connectors.local_file.destination import LocalFileDestination
from nodeflow.connectors.registry.destination_registry import (
    DestinationConnectorRegistry,
)
from nodeflow.connectors.registry.source_registry import SourceConnectorRegistry
from nodeflow.core.models import ConnectionDescriptor, PassthroughResult, RecordSet
from nodeflow.core.stores import (
    InMemoryConnectionRegistry,
    InMemoryExecutionStore,
    InMemoryPipelineStore,
)
from nodeflow.security.credentials import ConnectionCredentialStore

TEST_SECRET = "nodeflow-test-secret"


@pytest.fixture
def settings() -> Settings:
    return Settings(secret=TEST_SECRET)


@pytest.fixture
def credential_store(settings: Settings) -> ConnectionCredentialStore:
    return ConnectionCredentialStore.from_secret(settings.secret)


@pytest.fixture
def make_connection(credential_store: ConnectionCredentialStore):
    """Build a ConnectionDescriptor whose config is encrypted with the test key."""

    def _make(
        connection_id: str, connection_type: str, config: Dict[str, Any]
    ) -> ConnectionDescriptor:
        return ConnectionDescriptor(
            id=connection_id,
            type=connection_type,
            encrypted_config=credential_store.encrypt_config(config),
            name=connection_id.replace("_", " ").title(),
        )

    return _make


@pytest.fixture
def connection_registry() -> InMemoryConnectionRegistry:
    return InMemoryConnectionRegistry()


@pytest.fixture
def execution_store() -> InMemoryExecutionStore:
    return InMemoryExecutionStore()


@pytest.fixture
def pipeline_store() -> InMemoryPipelineStore:
    return InMemoryPipelineStore()


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """SQLite database with a case-sensitive ``Users`` table and an ``orders`` table.

    Returns
    -------
        Path to the database file

    """
    path = tmp_path / "nodeflow_test.db"
    connection = sqlite3.connect(str(path))
    try:
        connection.executescript(
            """
            CREATE TABLE "Users" (id INTEGER PRIMARY KEY, name TEXT, active BOOLEAN);
            INSERT INTO "Users" VALUES (1, 'Alice', 1), (2, 'Bob', 0), (3, 'Carol', 1);

            CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER, price REAL);
            INSERT INTO orders VALUES (1, 1, 75.0), (2, 1, 30.0), (3, 3, 120.5);
            """
        )
        connection.commit()
    finally:
        connection.close()
    return path


class StaticSource(SourceConnector):
    """Source connector that returns the records stored in its connection config."""

    def read(self, options: Dict[str, Any], timeout: float) -> RecordSet:
        if self.connection_config.get("explode"):
            raise RuntimeError("source exploded")
        return [dict(record) for record in self.connection_config.get("records", [])]

    def preview(self, query, limit, timeout) -> PreviewResult:
        return PreviewResult(
            data=self.read({}, timeout)[:limit], connection_type=self.connection_type
        )

    def test_connection(self, timeout) -> ConnectionTestResult:
        return ConnectionTestResult(True, "Static source is always reachable")


class RecordingDestination(DestinationConnector):
    """Destination connector that keeps every write in ``RecordingDestination.writes``."""

    writes: List[Dict[str, Any]] = []

    def write(
        self, records: RecordSet, options: Dict[str, Any], timeout: float
    ) -> PassthroughResult:
        RecordingDestination.writes.append(
            {"records": list(records), "options": dict(options), "timeout": timeout}
        )
        return PassthroughResult(self.connection_type)


@pytest.fixture
def connector_registries():
    """Source and destination registries holding the static test connectors."""
    RecordingDestination.writes = []

    sources = SourceConnectorRegistry()
    sources.register("static", StaticSource)

    destinations = DestinationConnectorRegistry()
    destinations.register("recording", RecordingDestination)
    destinations.register("local_file", LocalFileDestination)

    return sources, destinations
