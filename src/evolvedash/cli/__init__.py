"""
evolvedash CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

from pathlib import Path

import typer

from evolvedash import __version__
from evolvedash.cli import features, init_cmd, requests, serve, spec
from evolvedash.cli.common import console
from evolvedash.core.config.env import load_layered_env
from evolvedash.utils.project import resolve_project_dir

# Help panel names for command grouping
PANEL_SETUP = "Set Up and Run"
PANEL_FEATURES = "Feature Requests"
PANEL_SPEC = "Spec Document"

app = typer.Typer(
    name="evolvedash",
    help="Backend for a dashboard that grows new components from feature requests",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"evolvedash {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    project_dir: Path | None = typer.Option(
        None,
        "--project-dir",
        "-C",
        help="Project root (default: discovered from the current directory)",
        file_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    evolvedash - self-evolving dashboard backend.

    Quick Start:
        1. evolvedash init                         # Create state and spec document
        2. evolvedash serve                        # Start the API
        3. evolvedash request "Add a clock panel"  # Or submit from the shell
    """
    # Load .env files early so generator credentials reach the subprocess.
    # Precedence: OS env > project .env > user .env
    load_layered_env(project_dir=project_dir or resolve_project_dir())

    # Store global options in context for subcommands
    ctx.obj = {"debug": debug, "project_dir": project_dir}


app.command(name="init", rich_help_panel=PANEL_SETUP)(init_cmd.main)
app.command(name="serve", rich_help_panel=PANEL_SETUP)(serve.main)

app.command(name="request", rich_help_panel=PANEL_FEATURES)(requests.request)
app.command(name="requests", rich_help_panel=PANEL_FEATURES)(requests.list_requests)
app.command(name="features", rich_help_panel=PANEL_FEATURES)(features.main)

app.add_typer(spec.app, name="spec", rich_help_panel=PANEL_SPEC)


def cli_main() -> None:
    """Entry point for the console script."""
    app()
