"""Typer CLI for lsrv - Main entry point."""

from pathlib import Path

import typer

from . import __version__
from .commands import config_cmd, servers_cmd
from .console import enable_debug

app = typer.Typer(
    name="lsrv",
    help="Lists all running web servers across repos and worktrees.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"lsrv version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    show_pid: bool = typer.Option(False, "--show-pid", help="Show a PID column"),
    debug: bool = typer.Option(False, "--debug", help="Print debug output to stderr"),
    profile: Path | None = typer.Option(
        None, "--profile", help="Write a cProfile profile to FILE for analysis", metavar="FILE"
    ),
) -> None:
    """Lists all running web servers across repos and worktrees.

    Supported: Ruby (rails, puma), Node.js (node, npm, yarn), Python (gunicorn,
    uvicorn), Go, Java, PHP (php-fpm, apache2, httpd), Rust (cargo), .NET
    (dotnet, kestrel), Deno, Bun, Elixir/Phoenix (beam.smp, mix).

    Only servers whose working directory is inside a git repository are shown.
    """
    if debug:
        enable_debug()

    if ctx.invoked_subcommand is None:
        servers_cmd(show_pid=show_pid, profile=profile)


# Register subcommands
app.command(name="config")(config_cmd)


def main() -> None:
    """Main entry point."""
    app()
