"""
Helpers shared by CLI commands.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console

from evolvedash.core.config import DashConfig, load_config
from evolvedash.utils.project import resolve_project_dir

console = Console()
err_console = Console(stderr=True)


def get_project_dir(ctx: typer.Context) -> Path:
    """Project root chosen by `--project-dir`, else discovered from the cwd."""
    obj = ctx.find_root().obj or {}
    explicit = obj.get("project_dir")
    if explicit is not None:
        return Path(explicit).resolve()
    return resolve_project_dir()


def is_debug(ctx: typer.Context) -> bool:
    obj = ctx.find_root().obj or {}
    return bool(obj.get("debug", False))


def load_project_config(ctx: typer.Context) -> tuple[Path, DashConfig]:
    """
    Load configuration for the current project and configure logging.

    Raises:
        typer.Exit: If the configuration is invalid
    """
    project_dir = get_project_dir(ctx)
    try:
        config = load_config(project_dir)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1)

    level = logging.DEBUG if is_debug(ctx) else getattr(logging, config.logging.level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return project_dir, config
