"""
evolvedash CLI - spec document commands.
"""

import json

import typer
import yaml

from evolvedash.cli.common import console, err_console, load_project_config
from evolvedash.core.errors import StoreError
from evolvedash.core.spec import SpecStore

app = typer.Typer(
    name="spec",
    help="Inspect and extend the spec document",
    no_args_is_help=True,
)


def _store(ctx: typer.Context) -> SpecStore:
    project_dir, config = load_project_config(ctx)
    return SpecStore(config.resolve(project_dir, config.storage.spec_path))


@app.command()
def show(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print as JSON instead of YAML"),
) -> None:
    """Print the spec document."""
    store = _store(ctx)
    try:
        document = store.read_spec()
    except StoreError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        err_console.print("[dim]Run 'evolvedash init' to create one.[/dim]")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(document, indent=2, default=str))
    else:
        typer.echo(yaml.safe_dump(document, default_flow_style=False, sort_keys=False))


@app.command("add-workflow")
def add_workflow(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Workflow name"),
    description: str = typer.Option(..., "--description", "-d", help="What the workflow does"),
    schedule: str | None = typer.Option(
        None, "--schedule", "-s", help="Cron schedule (manual trigger when omitted)"
    ),
    action: str | None = typer.Option(None, "--action", "-a", help="Action to run"),
) -> None:
    """
    Add a workflow to the spec document.

    Examples:
        evolvedash spec add-workflow "Nightly report" -d "Email a summary" -s "0 2 * * *"
    """
    if not name.strip() or not description.strip():
        err_console.print("[red]Error:[/red] Workflow name and description are required")
        raise typer.Exit(2)

    store = _store(ctx)
    try:
        workflow = store.add_workflow(name, description, schedule=schedule, action=action)
    except StoreError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Added workflow {workflow['id']} ({workflow['name']})")
