"""
evolvedash CLI - feature request commands.

- request: submit a feature request and run the generator
- requests: show the request history
"""

import json

import typer
from rich.table import Table

from evolvedash.cli.common import console, err_console, load_project_config
from evolvedash.core.errors import StoreError, ValidationError
from evolvedash.core.requests import FeatureRequestStatus
from evolvedash.core.services import open_services

STATUS_STYLES = {
    FeatureRequestStatus.PENDING: "yellow",
    FeatureRequestStatus.PROCESSING: "cyan",
    FeatureRequestStatus.COMPLETED: "green",
    FeatureRequestStatus.FAILED: "red",
}


def request(
    ctx: typer.Context,
    description: str = typer.Argument(..., help="What the dashboard should be able to do"),
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Submit a feature request and run the generator.

    Examples:
        evolvedash request "Add a clock panel showing UTC and local time"
        evolvedash request "Add a CPU usage chart" --json
    """
    project_dir, config = load_project_config(ctx)

    with open_services(config, project_dir) as services:
        if not json_output:
            console.print(f"[cyan]Generating with {services.generator.name}...[/cyan]")
        try:
            result = services.orchestrator.submit(description)
        except ValidationError as e:
            err_console.print(f"[red]Invalid request:[/red] {e}")
            raise typer.Exit(2)
        except StoreError as e:
            err_console.print(f"[red]Spec document error:[/red] {e}")
            raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    elif result.processing.success:
        console.print(
            f"[green]✓[/green] Request {result.feature_request.id} completed: "
            f"{result.processing.message}"
        )
        for path in result.processing.generated_files:
            console.print(f"  • {path}")
    else:
        console.print(
            f"[red]✗[/red] Request {result.feature_request.id} failed: "
            f"{result.processing.message}"
        )

    if not result.processing.success:
        raise typer.Exit(1)


def list_requests(
    ctx: typer.Context,
    status: FeatureRequestStatus | None = typer.Option(
        None, "--status", "-s", help="Only show requests with this status"
    ),
    limit: int = typer.Option(20, "--limit", "-n", min=1, max=100, help="Maximum rows"),
    json_output: bool = typer.Option(False, "--json", help="Print requests as JSON"),
) -> None:
    """
    Show feature requests, newest first.

    Examples:
        evolvedash requests
        evolvedash requests --status failed
    """
    project_dir, config = load_project_config(ctx)

    with open_services(config, project_dir) as services:
        requests = services.request_log.list(status=status, limit=limit)

    if json_output:
        payload = [r.model_dump(mode="json", by_alias=True) for r in requests]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not requests:
        console.print("[dim]No feature requests yet[/dim]")
        return

    table = Table(title="Feature Requests")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Status")
    table.add_column("Created", no_wrap=True)
    table.add_column("Description")
    table.add_column("Files", justify="right")

    for r in requests:
        style = STATUS_STYLES.get(r.status, "white")
        table.add_row(
            r.id[:8],
            f"[{style}]{r.status.value}[/{style}]",
            r.timestamp.strftime("%Y-%m-%d %H:%M"),
            r.description if len(r.description) <= 60 else r.description[:57] + "...",
            str(len(r.generated_components)),
        )

    console.print(table)
