"""Rich display functions for the NodeFlow CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nodeflow.connectors.base.connection_test_result import ConnectionTestResult
from nodeflow.connectors.base.preview_result import PreviewResult
from nodeflow.connectors.local_file.packaging import LocalFilePackage
from nodeflow.core.models import ExecutionOutcome, ExecutionState, PipelineDefinition

console = Console()

STATUS_STYLES = {
    "SUCCESS": "green",
    "FAILURE": "red",
    "SKIPPED": "yellow",
}

# Rows shown by a preview before truncating
MAX_PREVIEW_ROWS = 20


def display_execution_result(
    pipeline: PipelineDefinition,
    outcome: ExecutionOutcome,
    execution: Optional[ExecutionState] = None,
) -> None:
    """Display the result of a pipeline run with a per-node breakdown.

    Args:
        pipeline: The pipeline that ran
        outcome: Result returned by the engine
        execution: Execution record after the run, if available
    """
    if outcome.success:
        console.print("✅ [bold green]Pipeline executed successfully[/bold green]")
    else:
        console.print(
            f"⚠️  [bold yellow]Pipeline finished with {outcome.errors_count} "
            f"error(s)[/bold yellow]"
        )

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Property", style="cyan", width=12)
    table.add_column("Value", style="white")

    table.add_row("Pipeline", pipeline.name)
    if execution is not None:
        table.add_row("Execution", execution.id)
        table.add_row("Status", execution.status.value)
    table.add_row("Records", str(outcome.records_processed))
    table.add_row("Errors", str(outcome.errors_count))
    destination = outcome.destination_result
    table.add_row(
        "Destination", destination.to_dict()["type"] if destination else "-"
    )
    console.print(table)

    if outcome.node_outcomes:
        nodes = Table(show_header=True, header_style="bold blue")
        nodes.add_column("#", justify="right")
        nodes.add_column("Node", style="cyan")
        nodes.add_column("Type")
        nodes.add_column("Status")
        nodes.add_column("Result")
        for index, node_outcome in enumerate(outcome.node_outcomes, start=1):
            style = STATUS_STYLES.get(node_outcome.status, "white")
            nodes.add_row(
                str(index),
                node_outcome.node_name,
                node_outcome.node_type,
                f"[{style}]{node_outcome.status}[/{style}]",
                escape(node_outcome.error_message or node_outcome.message),
            )
        console.print(nodes)


def display_local_file_saved(package: LocalFilePackage, path: str) -> None:
    console.print(
        f"📄 [bold green]Saved {package.record_count} records[/bold green] "
        f"({package.file_format}) to [cyan]{path}[/cyan]"
    )


def display_preview(result: PreviewResult) -> None:
    """Display previewed rows as a table."""
    console.print(
        f"🔍 [bold blue]Preview of {result.connection_type} connection[/bold blue] "
        f"({result.count} rows)"
    )
    if not result.data:
        console.print("[dim]No rows returned[/dim]")
        return

    names = [column["name"] for column in result.columns]
    if not names and isinstance(result.data[0], dict):
        names = list(result.data[0].keys())

    table = Table(show_header=True, header_style="bold blue")
    for column in result.columns or [{"name": name} for name in names]:
        column_type = column.get("type")
        header = f"{column['name']}\n[dim]{column_type}[/dim]" if column_type else column["name"]
        table.add_column(header)

    for row in result.data[:MAX_PREVIEW_ROWS]:
        row = row if isinstance(row, dict) else {"value": row}
        table.add_row(*[_cell(row.get(name)) for name in names])
    console.print(table)

    if result.count > MAX_PREVIEW_ROWS:
        console.print(f"  ... and {result.count - MAX_PREVIEW_ROWS} more rows")


def _cell(value: Any) -> str:
    if value is None:
        return "[dim]null[/dim]"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return escape(str(value))


def display_connection_test(connection_id: str, result: ConnectionTestResult) -> None:
    message = escape(result.message or "")
    if result.success:
        console.print(
            f"✅ [bold green]Connection {connection_id} OK[/bold green]: {message}"
        )
    else:
        console.print(
            f"❌ [bold red]Connection {connection_id} failed[/bold red]: {message}"
        )


def display_generic_error(error: Exception, context: str = "") -> None:
    """Display generic error with context.

    Args:
        error: Exception that occurred
        context: Optional context about where the error occurred
    """
    context_text = f" during {context}" if context else ""
    console.print(f"❌ [bold red]Error{context_text}[/bold red]")
    console.print(f"🔍 [dim]{escape(str(error))}[/dim]")


def display_info_panel(title: str, content: str, style: str = "blue") -> None:
    panel = Panel(content, title=title, border_style=style)
    console.print(panel)


def display_json_output(data: Any) -> None:
    """Display JSON output with proper formatting.

    Args:
        data: Data to display as JSON
    """
    try:
        json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        console.print_json(json_str)
    except (TypeError, ValueError) as e:
        console.print(f"❌ [red]Error formatting JSON output: {e}[/red]")
