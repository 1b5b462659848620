"""Logging setup for NodeFlow.

Every module logs through ``get_logger(__name__)``. The CLI calls
``configure_logging`` once at startup to pick the root level from its flags
or ``NODEFLOW_LOG_LEVEL``.
"""

import logging
import sys
from typing import Any, Dict, Mapping, Optional, TextIO

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Per-record and per-request chatter; held at WARNING outside verbose runs
TECHNICAL_MODULES = [
    "nodeflow.connectors.database.source",
    "nodeflow.connectors.rest.source",
    "nodeflow.core.evaluator",
]

NOISY_THIRD_PARTY = [
    "urllib3",
    "requests",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
]

# Connection config keys whose values must never reach a log line
SECRET_KEYS = {"password", "apikey", "api_key", "token", "secret", "authorization"}
MASK = "[HIDDEN]"


def _stream_handler(stream: Optional[TextIO] = None) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the specified name.

    Args:
        name: The name for the logger, typically __name__

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_stream_handler())
        # Own handler, so records must not reach the root handler as well
        logger.propagate = False
    return logger


def resolve_level(
    verbose: bool = False, quiet: bool = False, level: Optional[str] = None
) -> int:
    """Root level for the given flags; ``quiet`` beats ``verbose`` beats ``level``."""
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return LOG_LEVELS.get((level or "").lower(), DEFAULT_LOG_LEVEL)


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    level: Optional[str] = None,
) -> None:
    """Configure logging settings based on command line flags.

    Args:
        verbose: Show debug output, including the technical modules
        quiet: Only show warnings and errors
        level: Named root level (see LOG_LEVELS) used when neither flag is set
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(verbose, quiet, level))

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    handler = _stream_handler(sys.stdout)
    root_logger.addHandler(handler)

    technical_level = logging.DEBUG if verbose else logging.WARNING
    for module_name in TECHNICAL_MODULES:
        module_logger = logging.getLogger(module_name)
        module_logger.setLevel(technical_level)
        if not module_logger.handlers:
            module_logger.addHandler(handler)
            module_logger.propagate = False


def suppress_third_party_loggers():
    """Hold HTTP and SQLAlchemy library loggers at WARNING."""
    for logger_name in NOISY_THIRD_PARTY:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def mask_secrets(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of a connection config that is safe to log.

    Secret values are replaced with a fixed mask, including those nested
    one level down (e.g. an ``Authorization`` entry inside ``headers``).

    Args:
        config: Decrypted connection or node configuration

    Returns:
        Masked copy of the configuration
    """
    masked: Dict[str, Any] = {}
    for key, value in config.items():
        if str(key).lower() in SECRET_KEYS:
            masked[key] = MASK
        elif isinstance(value, Mapping):
            masked[key] = {
                k: (MASK if str(k).lower() in SECRET_KEYS else v)
                for k, v in value.items()
            }
        else:
            masked[key] = value
    return masked
