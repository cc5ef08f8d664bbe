"""Table output for discovered servers."""

from rich import box
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .console import console
from .detector import ServerEntry
from .project import ProjectType, detect_project_type

# Nerd Font glyphs where no emoji fits
RUBY_ICON = "\ue791"
GO_ICON = "\ue627"
JAVA_ICON = "\ue738"
RUST_ICON = "\ue7a8"
DOTNET_ICON = "\ue77f"
ELIXIR_ICON = "\ue275"
NODE_ICON = "⬢"
PYTHON_ICON = "🐍"
PHP_ICON = "🐘"
BUN_ICON = "🍞"
DENO_ICON = "🦕"
DEFAULT_ICON = "🌐"

PROCESS_ICONS: dict[tuple[str, ...], str] = {
    ("ruby", "rails", "puma"): RUBY_ICON,
    ("node", "npm", "yarn"): NODE_ICON,
    ("python", "gunicorn", "uvicorn"): PYTHON_ICON,
    ("go",): GO_ICON,
    ("java",): JAVA_ICON,
    ("php", "php-fpm", "apache2", "httpd"): PHP_ICON,
    ("cargo",): RUST_ICON,
    ("dotnet", "kestrel"): DOTNET_ICON,
    ("bun",): BUN_ICON,
    ("deno",): DENO_ICON,
    ("elixir", "beam.smp", "mix"): ELIXIR_ICON,
}

PROJECT_ICONS: dict[ProjectType, str] = {
    ProjectType.GO: GO_ICON,
    ProjectType.RUST: RUST_ICON,
    ProjectType.NODE: NODE_ICON,
    ProjectType.PYTHON: PYTHON_ICON,
    ProjectType.RUBY: RUBY_ICON,
}

PROJECT_STYLES: dict[ProjectType, str] = {
    ProjectType.GO: "cyan",
    ProjectType.RUST: "red",
    ProjectType.NODE: "green",
    ProjectType.PYTHON: "yellow",
    ProjectType.RUBY: "red",
}

# Substring match on the process name when the project type is unknown
PROCESS_STYLES: dict[str, str] = {
    "ruby": "red",
    "node": "green",
    "python": "yellow",
    "cargo": "red",
}

DEFAULT_STYLE = "white"


def process_icon(process: str, project_type: ProjectType) -> str:
    """Pick an icon from the process name, then from the project type.

    Args:
        process: Command name from lsof
        project_type: Detected type of the working directory

    Returns:
        Icon string
    """
    for names, icon in PROCESS_ICONS.items():
        if process in names:
            return icon
    return PROJECT_ICONS.get(project_type, DEFAULT_ICON)


def process_style(process: str, project_type: ProjectType) -> str:
    """Pick the process column colour from the project type, then the name."""
    if project_type in PROJECT_STYLES:
        return PROJECT_STYLES[project_type]
    for name, style in PROCESS_STYLES.items():
        if name in process:
            return style
    return DEFAULT_STYLE


def build_table(servers: list[ServerEntry], show_pid: bool = False) -> Table:
    """Build the server table.

    Args:
        servers: Sorted server list
        show_pid: Add a PID column

    Returns:
        Rich table ready to print
    """
    table = Table(box=box.ROUNDED, border_style="bright_black", header_style="bold white")
    table.add_column("REPO")
    table.add_column("BRANCH")
    table.add_column("PROCESS")
    if show_pid:
        table.add_column("PID", justify="right")
    table.add_column("URL", style="blue")

    for server in servers:
        project_type = detect_project_type(server.cwd)
        icon = process_icon(server.process, project_type)
        style = process_style(server.process, project_type)

        row: list[str | Text] = [
            escape(server.repo),
            escape(server.branch),
            Text(f"{icon} {server.process}", style=style),
        ]
        if show_pid:
            row.append(str(server.pid))
        row.append(server.url)
        table.add_row(*row)

    return table


def print_results(servers: list[ServerEntry], show_pid: bool = False) -> None:
    """Print servers as a table, or a notice when there are none."""
    if not servers:
        console.print("No running web servers found.")
        return

    console.print(build_table(servers, show_pid=show_pid))
