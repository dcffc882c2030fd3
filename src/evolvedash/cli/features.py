"""
evolvedash CLI - features command.
"""

import json

import typer
from rich.table import Table

from evolvedash.cli.common import console, load_project_config
from evolvedash.core.discovery import ComponentScanner, FeatureStatus, GenerationManifest


def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print features as JSON"),
) -> None:
    """
    List generated components, newest first.

    Examples:
        evolvedash features
        evolvedash features --json
    """
    project_dir, config = load_project_config(ctx)

    scanner = ComponentScanner(
        config.resolve(project_dir, config.discovery.components_dir),
        config.discovery,
        GenerationManifest(config.resolve(project_dir, config.storage.manifest_path)),
    )
    features = scanner.scan()

    if json_output:
        payload = [f.model_dump(mode="json", by_alias=True) for f in features]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not features:
        console.print(f"[dim]No components in {scanner.components_dir}[/dim]")
        return

    table = Table(title="Generated Components")
    table.add_column("Name", style="bold")
    table.add_column("Status")
    table.add_column("Created", no_wrap=True)
    table.add_column("Description")

    for f in features:
        status = (
            "[green]active[/green]"
            if f.status == FeatureStatus.ACTIVE
            else "[yellow]inactive[/yellow]"
        )
        table.add_row(f.name, status, f.created_at.strftime("%Y-%m-%d %H:%M"), f.description)

    console.print(table)
