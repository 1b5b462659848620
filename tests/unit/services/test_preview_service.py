"""Tests for connection preview and connection tests."""

import pytest
import requests_mock

from nodeflow.config import Settings
from nodeflow.core.models import ConnectionDescriptor
from nodeflow.exceptions import (
    ConnectionNotFoundError,
    DecryptionError,
    UnsupportedSourceTypeError,
)
from nodeflow.security.credentials import ConnectionCredentialStore
from nodeflow.services import preview
from nodeflow.services.preview import ConnectionService, preview_connection

ROWS = [{"id": i, "name": f"user{i}"} for i in range(1, 26)]


@pytest.fixture
def sources(connector_registries):
    return connector_registries[0]


@pytest.fixture
def service(connection_registry, credential_store, make_connection, sources):
    connection_registry.add(make_connection("users", "static", {"records": ROWS}))
    connection_registry.add(make_connection("download", "local_file", {}))
    return ConnectionService(
        connection_registry,
        credential_store,
        Settings(secret="nodeflow-test-secret", preview_limit=5),
        sources=sources,
    )


def test_preview_connection_respects_limit(sources):
    result = preview_connection("static", {"records": ROWS}, limit=3, registry=sources)

    assert result.count == 3
    assert result.data == ROWS[:3]
    assert result.to_dict()["dataSourceType"] == "static"


def test_preview_unsupported_type(sources):
    with pytest.raises(UnsupportedSourceTypeError, match="Preview not supported for local_file"):
        preview_connection("local_file", {}, registry=sources)


def test_connection_unsupported_type_does_not_raise(sources):
    result = preview.test_connection("local_file", {}, registry=sources)

    assert not result.success
    assert result.message == "Connection test not implemented for this type"


def test_connection_delegates_to_connector(sources):
    result = preview.test_connection("static", {}, registry=sources)

    assert result.success
    assert result.to_dict() == {
        "success": True,
        "message": "Static source is always reachable",
    }


def test_rest_preview_with_default_registry():
    with requests_mock.Mocker() as m:
        m.get("https://api.example.com/users", json={"items": ROWS})
        result = preview_connection(
            "rest_api", {"baseUrl": "https://api.example.com"}, query="/users", limit=2
        )

    assert result.data == ROWS[:2]
    assert result.columns == [
        {"name": "id", "type": "number"},
        {"name": "name", "type": "string"},
    ]


class TestConnectionService:
    def test_preview_uses_default_limit(self, service):
        assert service.preview("users").count == 5

    def test_preview_explicit_limit(self, service):
        assert service.preview("users", limit=12).count == 12

    def test_preview_unknown_connection(self, service):
        with pytest.raises(ConnectionNotFoundError):
            service.preview("nope")

    def test_preview_unsupported_type(self, service):
        with pytest.raises(UnsupportedSourceTypeError):
            service.preview("download")

    def test_test_connection(self, service):
        assert service.test("users").success
        assert not service.test("download").success

    def test_undecryptable_config(self, service, connection_registry):
        other_store = ConnectionCredentialStore.from_secret("another-secret")
        connection_registry.add(
            ConnectionDescriptor(
                id="foreign",
                type="static",
                encrypted_config=other_store.encrypt_config({"records": []}),
            )
        )

        with pytest.raises(DecryptionError):
            service.test("foreign")
