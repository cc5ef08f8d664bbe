"""Config command - show configuration file and effective settings."""

import typer
from rich.markup import escape
from rich.table import Table

from ..config import get_config_path
from .common import console, get_settings


def config_cmd(
    path: bool = typer.Option(False, "--path", help="Print only the config file path"),
) -> None:
    """Show lsrv configuration.

    Examples:
        lsrv config
        lsrv config --path
    """
    config_path = get_config_path()

    if path:
        print(config_path)
        return

    settings = get_settings()
    exists = "" if config_path.exists() else " [dim](not found, using defaults)[/dim]"
    console.print(f"Config file: {escape(str(config_path))}{exists}")

    table = Table(title="Settings")
    table.add_column("Key", style="green")
    table.add_column("Value", style="yellow")

    table.add_row("extra_ports", ", ".join(str(p) for p in settings.extra_ports) or "-")
    table.add_row("ignore_processes", escape(", ".join(settings.ignore_processes)) or "-")
    table.add_row("max_workers", str(settings.max_workers))

    console.print(table)
