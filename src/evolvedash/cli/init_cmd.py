"""
evolvedash CLI - init command.

Prepare a project directory: state directory, database, spec document and
the components directory the generator writes into.
"""

import typer

from evolvedash.cli.common import console, load_project_config
from evolvedash.core.db import get_connection
from evolvedash.core.spec import SpecStore


def main(
    ctx: typer.Context,
    app_name: str = typer.Option(
        "Self-Evolving Dashboard",
        "--app-name",
        help="Application name recorded in a new spec document",
    ),
) -> None:
    """
    Initialize evolvedash in the current project.

    Creates anything that is missing and leaves existing files alone, so it
    is safe to run more than once.

    Examples:
        evolvedash init
        evolvedash init --app-name "Ops Dashboard"
    """
    project_dir, config = load_project_config(ctx)
    storage = config.storage

    db_path = config.resolve(project_dir, storage.db_path)
    with get_connection(db_path):
        pass
    console.print(f"[green]✓[/green] Database: {db_path}")

    spec_store = SpecStore(config.resolve(project_dir, storage.spec_path))
    if spec_store.initialize(app_name):
        console.print(f"[green]✓[/green] Created spec document: {spec_store.spec_path}")
    else:
        console.print(f"[dim]Spec document exists: {spec_store.spec_path}[/dim]")

    components_dir = config.resolve(project_dir, config.discovery.components_dir)
    components_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"[green]✓[/green] Components directory: {components_dir}")

    console.print("\n[bold]Next:[/bold] evolvedash serve")
