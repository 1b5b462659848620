"""Core of NodeFlow: data model, condition evaluator and pipeline execution."""
