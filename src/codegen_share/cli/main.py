"""codegen-share command line: run the server, inspect configuration."""

import os
from pathlib import Path
from typing import Annotated, Any

import orjson
import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from codegen_share import __version__
from codegen_share.config.settings import OVERRIDES_ENV_VAR, get_settings
from codegen_share.core.logging import setup_logging
from codegen_share.exceptions import ConfigurationError


console = Console()

app = typer.Typer(
    name="codegen-share",
    help="AI code generation service with accounts, quotas and share links.",
    no_args_is_help=True,
    add_completion=False,
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"codegen-share {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """codegen-share command line."""


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            rows.extend(_flatten(value, name))
        else:
            rows.append((name, "" if value is None else str(value)))
    return rows


@app.command()
def serve(
    host: Annotated[
        str | None, typer.Option("--host", "-h", help="Interface to bind.")
    ] = None,
    port: Annotated[
        int | None, typer.Option("--port", "-p", help="Port to listen on.")
    ] = None,
    reload: Annotated[
        bool, typer.Option("--reload", help="Restart on code changes.")
    ] = False,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="DEBUG, INFO, WARNING...")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a TOML configuration file."),
    ] = None,
) -> None:
    """Run the API server with uvicorn."""
    server_overrides: dict[str, Any] = {}
    if host is not None:
        server_overrides["host"] = host
    if port is not None:
        server_overrides["port"] = port
    if log_level is not None:
        server_overrides["log_level"] = log_level
    if reload:
        server_overrides["reload"] = True

    if config is not None:
        os.environ["CONFIG_FILE"] = str(config)
    if server_overrides:
        # Workers started by the reloader read their options from here
        os.environ[OVERRIDES_ENV_VAR] = orjson.dumps(
            {"server": server_overrides}
        ).decode()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    setup_logging(
        json_logs=settings.server.json_logs,
        log_level_name=settings.server.log_level,
        log_file=settings.server.log_file,
    )
    uvicorn.run(
        "codegen_share.api.app:get_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_config=None,
    )


@app.command(name="config")
def show_config(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a TOML configuration file."),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print JSON instead of a table.")
    ] = False,
) -> None:
    """Show the effective configuration with secrets masked."""
    try:
        settings = get_settings(config)
    except ConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    data = settings.model_dump_safe()
    if as_json:
        typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())
        return

    table = Table(title="codegen-share configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in _flatten(data):
        table.add_row(name, value)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
