#!/usr/bin/env python3
"""NodeFlow CLI

Runs pipelines from a workspace file, previews and tests connections, and
encrypts connection configs for storage in a workspace.
"""

import json
import uuid
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nodeflow.cli.display import (
    display_connection_test,
    display_execution_result,
    display_generic_error,
    display_json_output,
    display_local_file_saved,
    display_preview,
)
from nodeflow.cli.workspace import Workspace, load_workspace
from nodeflow.config import Settings
from nodeflow.connectors.local_file.packaging import package_local_file
from nodeflow.core.executors.engine import PipelineEngine
from nodeflow.core.models import LocalFileResult
from nodeflow.core.stores import InMemoryExecutionStore
from nodeflow.exceptions import NodeflowError
from nodeflow.logging import get_logger
from nodeflow.security.credentials import ConnectionCredentialStore
from nodeflow.services.preview import ConnectionService

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="nodeflow",
    help="NodeFlow CLI - Run data pipelines against registered connections",
    add_completion=False,
)


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show warnings and errors"
    ),
) -> None:
    """NodeFlow CLI - Run data pipelines against registered connections.

    Examples:
        nodeflow run workspace.yml active_users --output users.csv
        nodeflow preview workspace.yml users_db --limit 5
        nodeflow encrypt-config connection.json
    """
    if version:
        from nodeflow import __version__

        console.print(f"NodeFlow CLI v{__version__}")
        raise typer.Exit()

    _setup_environment(verbose, quiet)


def _setup_environment(verbose: bool = False, quiet: bool = False) -> None:
    """Load .env and configure logging.

    Args:
        verbose: Enable verbose output
        quiet: Reduce output to essentials
    """
    from nodeflow.logging import configure_logging, suppress_third_party_loggers
    from nodeflow.utils.env import get_env_var, setup_environment

    env_loaded = setup_environment()
    configure_logging(
        verbose=verbose, quiet=quiet, level=get_env_var("NODEFLOW_LOG_LEVEL")
    )
    suppress_third_party_loggers()

    if verbose and env_loaded:
        console.print("✓ [dim]Environment variables loaded from .env file[/dim]")


def _load(workspace_path: Path):
    settings = Settings.from_env()
    credential_store = ConnectionCredentialStore.from_secret(settings.secret)
    workspace = load_workspace(workspace_path, credential_store)
    return settings, credential_store, workspace


def _save_local_file(
    result: LocalFileResult,
    workspace: Workspace,
    credential_store: ConnectionCredentialStore,
    output: Optional[Path],
) -> None:
    connection_config = None
    data_source_id = result.config.get("dataSourceId")
    if data_source_id:
        connection = workspace.connections.get_by_id(str(data_source_id))
        connection_config = credential_store.decrypt_config(connection.encrypted_config)

    package = package_local_file(result, connection_config)
    path = output or Path(package.filename)
    path.write_bytes(package.content)
    display_local_file_saved(package, str(path))


@app.command()
def version() -> None:
    """Show NodeFlow version information."""
    import sys

    import rich

    from nodeflow import __version__

    console.print("📦 [bold blue]NodeFlow Version Information[/bold blue]")
    console.print(f"Version: [cyan]{__version__}[/cyan]")
    console.print(f"Python: [cyan]{sys.version.split()[0]}[/cyan]")
    console.print(f"Typer: [dim]{typer.__version__}[/dim]")
    console.print(f"Rich: [dim]{getattr(rich, '__version__', 'unknown')}[/dim]")


@app.command()
def run(
    workspace_path: Path = typer.Argument(..., help="Workspace YAML file"),
    pipeline_id: str = typer.Argument(..., help="ID of the pipeline to run"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to save a local file payload (default: suggested filename)",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the execution result as JSON"
    ),
) -> None:
    """Run a pipeline from a workspace.

    Exits with status 1 if any node failed.
    """
    try:
        settings, credential_store, workspace = _load(workspace_path)
        pipeline = workspace.pipelines.get_by_id(pipeline_id)

        executions = InMemoryExecutionStore()
        execution_id = f"exec_{uuid.uuid4().hex[:8]}"
        executions.create(execution_id, pipeline.id)

        engine = PipelineEngine(
            connection_registry=workspace.connections,
            execution_store=executions,
            pipeline_store=workspace.pipelines,
            credential_store=credential_store,
            settings=settings,
        )
        outcome = engine.execute(pipeline, execution_id)
        execution = executions.get_by_id(execution_id)

        if json_output:
            display_json_output(outcome.to_dict())
        else:
            display_execution_result(pipeline, outcome, execution)
            logger.debug(f"Execution log:\n{execution.logs}")

        if isinstance(outcome.destination_result, LocalFileResult):
            _save_local_file(
                outcome.destination_result, workspace, credential_store, output
            )
    except NodeflowError as e:
        display_generic_error(e, "pipeline execution")
        raise typer.Exit(1)
    except OSError as e:
        display_generic_error(e, "saving output")
        raise typer.Exit(1)

    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def preview(
    workspace_path: Path = typer.Argument(..., help="Workspace YAML file"),
    connection_id: str = typer.Argument(..., help="ID of the connection"),
    query: Optional[str] = typer.Option(
        None, "--query", help="SQL query, or endpoint path for REST connections"
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Maximum number of rows"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print rows as JSON"),
) -> None:
    """Preview rows from a connection."""
    try:
        settings, credential_store, workspace = _load(workspace_path)
        service = ConnectionService(workspace.connections, credential_store, settings)
        result = service.preview(connection_id, query=query, limit=limit)
    except NodeflowError as e:
        display_generic_error(e, "preview")
        raise typer.Exit(1)

    if json_output:
        display_json_output(result.to_dict())
    else:
        display_preview(result)


@app.command("test-connection")
def test_connection_command(
    workspace_path: Path = typer.Argument(..., help="Workspace YAML file"),
    connection_id: str = typer.Argument(..., help="ID of the connection"),
) -> None:
    """Check that a connection is reachable."""
    try:
        settings, credential_store, workspace = _load(workspace_path)
        service = ConnectionService(workspace.connections, credential_store, settings)
        result = service.test(connection_id)
    except NodeflowError as e:
        display_generic_error(e, "connection test")
        raise typer.Exit(1)

    display_connection_test(connection_id, result)
    if not result.success:
        raise typer.Exit(1)


@app.command("encrypt-config")
def encrypt_config(
    json_file: Path = typer.Argument(..., help="JSON file with a connection config"),
) -> None:
    """Encrypt a connection config for the ``encrypted_config`` workspace field."""
    try:
        with open(json_file, "r", encoding="utf-8") as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError("Connection config must be a JSON object")
        settings = Settings.from_env()
        credential_store = ConnectionCredentialStore.from_secret(settings.secret)
    except (OSError, ValueError, NodeflowError) as e:
        display_generic_error(e, "encryption")
        raise typer.Exit(1)

    typer.echo(credential_store.encrypt_config(config))


def cli() -> None:
    """Entry point for the CLI application."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n⚠️  [yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    cli()
