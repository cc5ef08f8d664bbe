"""Console utilities for lsrv."""

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

# Shared console instances
console = Console()
error_console = Console(stderr=True)

# Debug mode - enabled by LSRV_DEBUG environment variable or --debug
DEBUG = os.getenv("LSRV_DEBUG", "").lower() in ("1", "true", "yes")


def enable_debug() -> None:
    """Turn on debug output for the rest of the run."""
    global DEBUG
    DEBUG = True


def debug(message: str, **kwargs: Any) -> None:
    """Print debug message to stderr if DEBUG mode is enabled.

    Messages are plain text; paths and command output are printed verbatim.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    if DEBUG:
        error_console.print(f"[dim][DEBUG][/dim] {escape(message)}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print warning message in yellow to stderr.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    error_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print error message in red to stderr.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    error_console.print(f"[red]Error:[/red] {escape(message)}", **kwargs)
