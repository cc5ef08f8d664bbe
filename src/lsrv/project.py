"""Project type detection from marker files."""

from enum import Enum
from pathlib import Path


class ProjectType(str, Enum):
    """Language or toolchain of a project directory."""

    GO = "go"
    RUST = "rust"
    NODE = "node"
    PYTHON = "python"
    RUBY = "ruby"
    UNKNOWN = "unknown"


# Checked in order, first match wins
MARKERS: list[tuple[tuple[str, ...], ProjectType]] = [
    (("go.mod", "go.sum"), ProjectType.GO),
    (("Cargo.toml",), ProjectType.RUST),
    (("package.json",), ProjectType.NODE),
    (("requirements.txt", "pyproject.toml", "setup.py"), ProjectType.PYTHON),
    (("Gemfile",), ProjectType.RUBY),
]


def detect_project_type(path: str | Path) -> ProjectType:
    """Identify the project type by looking for marker files.

    Args:
        path: Project directory

    Returns:
        Detected ProjectType, UNKNOWN if nothing matched
    """
    directory = Path(path)
    for filenames, project_type in MARKERS:
        for filename in filenames:
            try:
                if (directory / filename).exists():
                    return project_type
            except OSError:
                continue
    return ProjectType.UNKNOWN
