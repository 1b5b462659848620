"""Command-line interface for NodeFlow."""
