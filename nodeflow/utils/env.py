"""Environment variable utilities for NodeFlow.

This module loads environment variables from a ``.env`` file sitting next to a
NodeFlow workspace (or in one of its parent directories), following the
standard .env file conventions.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from nodeflow.logging import get_logger

logger = get_logger(__name__)


def find_env_file(start_path: Optional[str] = None) -> Optional[Path]:
    """Find the nearest ``.env`` file walking up from ``start_path``.

    Args:
    ----
        start_path: Path to start searching from (defaults to current directory)

    Returns:
    -------
        Path to the .env file, or None if not found
    """
    if start_path is None:
        start_path = os.getcwd()

    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    for parent in [current, *current.parents]:
        env_file = parent / ".env"
        if env_file.is_file():
            logger.debug(f"Found .env file at: {env_file}")
            return env_file

    logger.debug("No .env file found")
    return None


def setup_environment(start_path: Optional[str] = None) -> bool:
    """Load the nearest ``.env`` file into the process environment.

    Variables already present in the environment take precedence over the
    file, so deployments can override local development values.

    Args:
    ----
        start_path: Path to start searching from (defaults to current directory)

    Returns:
    -------
        True if a .env file was found and loaded, False otherwise
    """
    env_file = find_env_file(start_path)
    if env_file is None:
        return False

    loaded = load_dotenv(env_file, override=False)
    if loaded:
        logger.debug(f"Loaded environment variables from: {env_file}")
    else:
        logger.debug(f".env file had no variables: {env_file}")
    return loaded


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get an environment variable with optional default.

    Empty values are treated as unset.
    """
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value
