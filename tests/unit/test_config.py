"""Tests for runtime settings."""

import os

import pytest

from nodeflow.config import Settings
from nodeflow.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "NODEFLOW_SECRET",
        "JWT_SECRET",
        "NODEFLOW_LOG_LEVEL",
        "NODEFLOW_PREVIEW_TIMEOUT",
        "NODEFLOW_EXECUTION_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    # No .env file above tmp_path should leak into these tests
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = Settings(secret="s")
    assert settings.preview_timeout == 10
    assert settings.execution_timeout == 30
    assert settings.connection_test_timeout == 5
    assert settings.preview_limit == 10


def test_secret_not_in_repr():
    assert "hunter2" not in repr(Settings(secret="hunter2"))


def test_missing_secret():
    with pytest.raises(ConfigError):
        Settings(secret="")


def test_unknown_log_level():
    with pytest.raises(ConfigError):
        Settings(secret="s", log_level="chatty")


def test_from_env_prefers_nodeflow_secret(monkeypatch, tmp_path):
    monkeypatch.setenv("NODEFLOW_SECRET", "primary")
    monkeypatch.setenv("JWT_SECRET", "legacy")
    assert Settings.from_env(str(tmp_path)).secret == "primary"


def test_from_env_falls_back_to_jwt_secret(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET", "legacy")
    assert Settings.from_env(str(tmp_path)).secret == "legacy"


def test_from_env_without_secret(tmp_path):
    with pytest.raises(ConfigError):
        Settings.from_env(str(tmp_path))


def test_from_env_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text(
        "NODEFLOW_SECRET=from-file\nNODEFLOW_EXECUTION_TIMEOUT=45\n"
    )
    try:
        settings = Settings.from_env(str(tmp_path))
        assert settings.secret == "from-file"
        assert settings.execution_timeout == 45.0
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("NODEFLOW_SECRET", None)
        os.environ.pop("NODEFLOW_EXECUTION_TIMEOUT", None)
