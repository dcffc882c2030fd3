"""
evolvedash CLI - serve command.

Run the HTTP API with uvicorn.
"""

import typer

from evolvedash.cli.common import console, is_debug, load_project_config


def main(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", help="Interface to bind (default from config)"),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to run the server on (default from config)"
    ),
) -> None:
    """
    Start the API server.

    Examples:
        evolvedash serve                # Use server settings from config
        evolvedash serve --port 8000
    """
    project_dir, config = load_project_config(ctx)
    debug = is_debug(ctx)

    server = config.server.model_copy(
        update={k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    )
    config = config.model_copy(update={"server": server})

    import uvicorn

    from evolvedash.api.app import create_app

    url = f"http://{server.host}:{server.port}"
    console.print("[bold cyan]Starting evolvedash API...[/bold cyan]")
    console.print(f"[dim]Project: {project_dir}[/dim]")
    console.print(f"[dim]Health: {url}/api/health[/dim]")
    console.print(f"[dim]Docs: {url}/docs[/dim]")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        uvicorn.run(
            create_app(config=config, project_dir=project_dir),
            host=server.host,
            port=server.port,
            log_level="debug" if debug else "info",
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
