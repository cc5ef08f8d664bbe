"""Servers command - list running development servers."""

import cProfile
from pathlib import Path

import typer
from rich.markup import escape

from ..detector import find_servers
from ..formatter import print_results
from ..system import ScanError, command_exists, is_macos
from .common import debug, error, error_console, get_settings


def print_lsof_missing() -> None:
    """Explain how to install lsof on this platform."""
    error("lsof command not found, please install it")
    error_console.print("")
    if is_macos():
        error_console.print(
            "On macOS, lsof should be pre-installed. If missing, reinstall Command Line Tools:"
        )
        error_console.print("  xcode-select --install")
    else:
        error_console.print("On Linux, install lsof:")
        error_console.print("  sudo apt-get install lsof  # Debian/Ubuntu")
        error_console.print("  sudo yum install lsof      # RHEL/CentOS")


def servers_cmd(show_pid: bool = False, profile: Path | None = None) -> None:
    """List running development servers across repos and worktrees.

    Args:
        show_pid: Add a PID column to the table
        profile: Write cProfile statistics to this file
    """
    if not command_exists("lsof"):
        print_lsof_missing()
        raise typer.Exit(1)

    settings = get_settings()
    debug(f"Settings: {settings}")

    profiler: cProfile.Profile | None = None
    if profile:
        error_console.print(f"Profiling enabled, writing to {escape(str(profile))}")
        profiler = cProfile.Profile()
        profiler.enable()

    try:
        found = find_servers(settings=settings)
    except ScanError as e:
        error(f"finding servers: {e}")
        raise typer.Exit(1)
    finally:
        if profiler is not None:
            profiler.disable()
            profiler.dump_stats(str(profile))

    print_results(found, show_pid=show_pid)

    if profile:
        error_console.print(f"Profile written to {escape(str(profile))}")
        error_console.print(f"Analyze with: python -m pstats {escape(str(profile))}")
