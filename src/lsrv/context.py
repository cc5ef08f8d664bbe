"""Git repository detection and metadata for lsrv."""

import os
import subprocess
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .console import debug

NO_BRANCH = "N/A"
DEFAULT_MAX_WORKERS = 16


@dataclass(frozen=True)
class RepoContext:
    """Git information for a working directory."""

    name: str  # Repository name from origin or directory name
    branch: str  # Current branch, or NO_BRANCH


def _validate_dir(path: str) -> Path | None:
    """Return the absolute directory for ``path``, or None if it is not one."""
    if not path:
        return None
    try:
        cleaned = Path(os.path.abspath(path))
        if not cleaned.is_dir():
            return None
    except (OSError, ValueError):
        return None
    return cleaned


def _git(path: Path, *args: str) -> str | None:
    """Run a git command scoped to ``path``.

    Args:
        path: Directory to run against
        *args: git arguments

    Returns:
        Stripped stdout, or None if git failed
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(path), *args],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        debug(f"git {' '.join(args)} in {path} failed: {e}")
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip()


def is_repo(path: str) -> bool:
    """Check whether a directory is inside a git repository.

    Args:
        path: Directory to check

    Returns:
        True if ``.git`` is a directory there or git recognizes it
    """
    cleaned = _validate_dir(path)
    if cleaned is None:
        return False

    try:
        if (cleaned / ".git").is_dir():
            return True
    except OSError:
        pass

    # Worktrees and submodules have a .git file instead
    return _git(cleaned, "rev-parse", "--git-dir") is not None


def _extract_repo_name(remote_url: str) -> str:
    """Extract repository name from remote URL.

    Args:
        remote_url: Git remote URL

    Returns:
        Repository name

    Examples:
        git@github.com:user/repo.git -> repo
        https://github.com/user/repo.git -> repo
        https://github.com/user/repo -> repo
    """
    name = remote_url.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name


def get_repo_name(path: str) -> str:
    """Get the repository name for a directory.

    Uses the origin remote URL when configured, otherwise the directory name.
    """
    cleaned = _validate_dir(path)
    if cleaned is None:
        debug(f"Not a directory, using basename for {path!r}")
        return os.path.basename(path.rstrip("/"))

    remote = _git(cleaned, "config", "--get", "remote.origin.url")
    if remote:
        name = _extract_repo_name(remote)
        if name:
            return name
    return cleaned.name


def get_branch(path: str) -> str:
    """Get the current branch for a directory.

    Args:
        path: Directory inside a git repository

    Returns:
        Abbreviated HEAD name, or NO_BRANCH if it cannot be determined
    """
    cleaned = _validate_dir(path)
    if cleaned is None:
        debug(f"Not a directory, no branch for {path!r}")
        return NO_BRANCH

    branch = _git(cleaned, "rev-parse", "--abbrev-ref", "HEAD")
    if not branch:
        debug(f"Failed to get branch for {cleaned}")
        return NO_BRANCH
    return branch


def get_repo_context(path: str) -> RepoContext:
    """Resolve repository name and branch concurrently.

    Args:
        path: Directory already known to be in a repository

    Returns:
        RepoContext for the directory
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        name = executor.submit(get_repo_name, path)
        branch = executor.submit(get_branch, path)
        return RepoContext(name=name.result(), branch=branch.result())


def check_repos(
    dirs: Iterable[str], max_workers: int = DEFAULT_MAX_WORKERS
) -> dict[str, bool]:
    """Check many directories for git repositories in parallel.

    Args:
        dirs: Directories to check
        max_workers: Thread pool size

    Returns:
        Mapping of directory to membership result
    """
    unique = list(dict.fromkeys(dirs))
    if not unique:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(is_repo, unique))
    return dict(zip(unique, results))


def resolve_contexts(
    dirs: Iterable[str], max_workers: int = DEFAULT_MAX_WORKERS
) -> dict[str, RepoContext]:
    """Resolve repository name and branch for many directories in parallel.

    Only pass directories for which ``is_repo`` was true.

    Args:
        dirs: Repository directories
        max_workers: Thread pool size

    Returns:
        Mapping of directory to RepoContext
    """
    unique = list(dict.fromkeys(dirs))
    if not unique:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        contexts = list(executor.map(get_repo_context, unique))
    return dict(zip(unique, contexts))
