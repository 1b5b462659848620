"""Utility modules for NodeFlow."""

from .env import get_env_var, setup_environment

__all__ = ["setup_environment", "get_env_var"]
