"""Shared helpers for tests."""

import subprocess
from pathlib import Path

from lsrv.cwd import CwdResolver
from lsrv.system import ListenerScanner

LSOF_HEADER = "COMMAND     PID   USER   FD   TYPE             DEVICE SIZE/OFF NODE NAME"


def lsof_line(command: str, pid: int, port: int) -> str:
    """Build an lsof -iTCP -sTCP:LISTEN output line."""
    return f"{command:<9} {pid:>5} dev   23u  IPv4 0x1a2b3c4d5e6f      0t0  TCP *:{port} (LISTEN)"


def init_repo(
    path: Path, remote: str | None = None, branch: str = "main", commit: bool = True
) -> Path:
    """Initialize a git repository at path."""
    path.mkdir(parents=True, exist_ok=True)

    def git(*args: str) -> None:
        subprocess.run(["git", *args], cwd=path, capture_output=True, check=True)

    git("init")
    git("symbolic-ref", "HEAD", f"refs/heads/{branch}")
    git("config", "user.email", "test@example.com")
    git("config", "user.name", "Test User")
    if remote:
        git("remote", "add", "origin", remote)
    if commit:
        (path / "README.md").write_text("# Test")
        git("add", ".")
        git("commit", "-m", "Initial commit")
    return path


class FakeScanner(ListenerScanner):
    """Scanner that parses canned lsof output."""

    def __init__(self, output: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.output = output

    def _run_lsof(self) -> str:
        return self.output


class FakeResolver(CwdResolver):
    """Resolver backed by a PID -> cwd dict."""

    def __init__(self, cwds: dict[int, str]) -> None:
        self.cwds = cwds

    def resolve_one(self, pid: int) -> str | None:
        return self.cwds.get(pid)
