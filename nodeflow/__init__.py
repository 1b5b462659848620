"""NodeFlow - run node-based data pipelines against external connections."""

__version__ = "0.1.0"
__package_name__ = "nodeflow"

from .exceptions import (
    ConfigError,
    DataConnectionError,
    DecryptionError,
    FatalSetupError,
    NodeflowError,
    UnsupportedTypeError,
)

__all__ = [
    "NodeflowError",
    "ConfigError",
    "DataConnectionError",
    "DecryptionError",
    "UnsupportedTypeError",
    "FatalSetupError",
]
