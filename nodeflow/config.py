"""Process-wide configuration for NodeFlow.

Settings are read once at startup and passed explicitly to the components
that need them. The credential key in particular is derived from
``Settings.secret`` by the caller and injected into
``ConnectionCredentialStore``; nothing in this package reads the environment
on its own.
"""

from dataclasses import dataclass, field
from typing import Optional

from nodeflow.exceptions import ConfigError
from nodeflow.logging import LOG_LEVELS
from nodeflow.utils.env import get_env_var, setup_environment

# Environment variable names
SECRET_ENV_VARS = ("NODEFLOW_SECRET", "JWT_SECRET")
LOG_LEVEL_ENV_VAR = "NODEFLOW_LOG_LEVEL"

# Request timeouts in seconds
DEFAULT_PREVIEW_TIMEOUT = 10
DEFAULT_EXECUTION_TIMEOUT = 30
DEFAULT_CONNECTION_TEST_TIMEOUT = 5

DEFAULT_PREVIEW_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        secret: Shared secret the credential encryption key is derived from
        preview_timeout: Timeout for preview requests
        execution_timeout: Timeout for requests issued while running a pipeline
        connection_test_timeout: Timeout for connection tests
        preview_limit: Default number of rows returned by a preview
        log_level: Name of the root log level
    """

    secret: str = field(repr=False)
    preview_timeout: float = DEFAULT_PREVIEW_TIMEOUT
    execution_timeout: float = DEFAULT_EXECUTION_TIMEOUT
    connection_test_timeout: float = DEFAULT_CONNECTION_TEST_TIMEOUT
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    log_level: str = "info"

    def __post_init__(self):
        if not self.secret:
            raise ConfigError("An encryption secret is required")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls, start_path: Optional[str] = None) -> "Settings":
        """Build settings from the environment, loading a .env file first.

        ``NODEFLOW_SECRET`` is preferred; ``JWT_SECRET`` is accepted so that
        connection configs encrypted by an existing deployment stay readable.

        Raises:
            ConfigError: If no secret is configured
        """
        setup_environment(start_path)

        secret = None
        for name in SECRET_ENV_VARS:
            secret = get_env_var(name)
            if secret:
                break
        if not secret:
            raise ConfigError(
                "Missing required environment variable: "
                + " or ".join(SECRET_ENV_VARS)
            )

        return cls(
            secret=secret,
            preview_timeout=float(
                get_env_var("NODEFLOW_PREVIEW_TIMEOUT", str(DEFAULT_PREVIEW_TIMEOUT))
            ),
            execution_timeout=float(
                get_env_var(
                    "NODEFLOW_EXECUTION_TIMEOUT", str(DEFAULT_EXECUTION_TIMEOUT)
                )
            ),
            log_level=get_env_var(LOG_LEVEL_ENV_VAR, "info").lower(),
        )
