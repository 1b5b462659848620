"""Tests for environment variable utilities."""

import os
import tempfile
from pathlib import Path

from nodeflow.utils.env import find_env_file, get_env_var, setup_environment


class TestEnvironmentUtils:
    """Test environment variable utilities."""

    def test_get_env_var_existing(self):
        """Test getting an existing environment variable."""
        os.environ["NODEFLOW_TEST_VAR"] = "test_value"

        try:
            assert get_env_var("NODEFLOW_TEST_VAR") == "test_value"
        finally:
            del os.environ["NODEFLOW_TEST_VAR"]

    def test_get_env_var_missing_with_default(self):
        result = get_env_var("NODEFLOW_NONEXISTENT_VAR", "default_value")
        assert result == "default_value"

    def test_get_env_var_missing_without_default(self):
        assert get_env_var("NODEFLOW_NONEXISTENT_VAR") is None

    def test_get_env_var_empty_is_unset(self):
        """Empty values fall back to the default."""
        os.environ["NODEFLOW_TEST_VAR"] = ""

        try:
            assert get_env_var("NODEFLOW_TEST_VAR", "fallback") == "fallback"
        finally:
            del os.environ["NODEFLOW_TEST_VAR"]

    def test_find_env_file_in_parent(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir).resolve()
            env_file = temp_path / ".env"
            env_file.write_text("A=1\n")

            subdir = temp_path / "workspaces" / "team"
            subdir.mkdir(parents=True)

            assert find_env_file(str(subdir)) == env_file

    def test_find_env_file_from_file_path(self):
        """A file path searches from the file's directory."""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir).resolve()
            env_file = temp_path / ".env"
            env_file.write_text("A=1\n")
            workspace = temp_path / "workspace.yml"
            workspace.write_text("connections: []\n")

            assert find_env_file(str(workspace)) == env_file

    def test_setup_environment_loads_file(self):
        """Test setting up environment from a subdirectory."""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir).resolve()
            (temp_path / ".env").write_text("NODEFLOW_SETUP_TEST_VAR=setup_value\n")

            subdir = temp_path / "subdir"
            subdir.mkdir()

            try:
                assert setup_environment(str(subdir)) is True
                assert os.environ.get("NODEFLOW_SETUP_TEST_VAR") == "setup_value"
            finally:
                os.environ.pop("NODEFLOW_SETUP_TEST_VAR", None)

    def test_setup_environment_does_not_override(self):
        """Variables already in the environment win over the .env file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            (temp_path / ".env").write_text("NODEFLOW_SETUP_TEST_VAR=from_file\n")
            os.environ["NODEFLOW_SETUP_TEST_VAR"] = "from_env"

            try:
                setup_environment(str(temp_path))
                assert os.environ["NODEFLOW_SETUP_TEST_VAR"] == "from_env"
            finally:
                os.environ.pop("NODEFLOW_SETUP_TEST_VAR", None)
