"""Working directory lookup for listening processes."""

import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from .console import debug
from .system import is_macos, validate_pid


def _clean_path(path: str) -> str | None:
    """Convert a path to absolute, normalized form.

    Args:
        path: Raw path from lsof or readlink

    Returns:
        Cleaned path, or None if the path cannot be used
    """
    if not path:
        return None
    try:
        return os.path.abspath(path)
    except (OSError, ValueError):
        return None


def parse_lsof_cwd_output(output: str) -> dict[int, str]:
    """Parse ``lsof -Fn`` field output into a PID -> cwd mapping.

    Records look like ``p<pid>`` followed by ``n<path>``. Each path is
    attached to the most recent PID marker, and the marker is cleared
    afterwards so a stray path never lands on a stale PID.

    Args:
        output: Raw lsof stdout

    Returns:
        Mapping of PID to working directory
    """
    cwd_map: dict[int, str] = {}
    current_pid: int | None = None

    for line in output.splitlines():
        if line.startswith("p"):
            try:
                pid = int(line[1:])
            except ValueError:
                continue
            current_pid = pid if validate_pid(pid) else None
        elif line.startswith("n") and current_pid is not None:
            cleaned = _clean_path(line[1:])
            if cleaned:
                cwd_map[current_pid] = cleaned
            current_pid = None

    return cwd_map


class CwdResolver(ABC):
    """Strategy for resolving process working directories."""

    def resolve(self, pids: Iterable[int]) -> dict[int, str]:
        """Resolve working directories for many processes.

        PIDs whose directory cannot be determined are left out.

        Args:
            pids: Process IDs

        Returns:
            Mapping of PID to absolute working directory
        """
        cwd_map: dict[int, str] = {}
        for pid in dict.fromkeys(pids):
            cwd = self.resolve_one(pid)
            if cwd:
                cwd_map[pid] = cwd
        return cwd_map

    @abstractmethod
    def resolve_one(self, pid: int) -> str | None:
        """Resolve the working directory of a single process.

        Args:
            pid: Process ID

        Returns:
            Absolute working directory, or None if unknown
        """


class LsofCwdResolver(CwdResolver):
    """Resolve working directories with lsof, batching all PIDs in one call."""

    def resolve(self, pids: Iterable[int]) -> dict[int, str]:
        """Resolve working directories with a single lsof call.

        Falls back to one lsof call per PID if the batched call fails.

        Args:
            pids: Process IDs

        Returns:
            Mapping of PID to absolute working directory
        """
        unique = [pid for pid in dict.fromkeys(pids) if validate_pid(pid)]
        if not unique:
            return {}

        output = self._run_lsof(unique)
        if output is None:
            debug(f"Batched cwd lookup failed, retrying {len(unique)} PIDs one by one")
            return super().resolve(unique)

        return parse_lsof_cwd_output(output)

    def resolve_one(self, pid: int) -> str | None:
        """Resolve the working directory of a single process with lsof."""
        if not validate_pid(pid):
            return None

        output = self._run_lsof([pid])
        if output is None:
            return None

        for line in output.splitlines():
            if line.startswith("n"):
                return _clean_path(line[1:])
        return None

    def _run_lsof(self, pids: list[int]) -> str | None:
        """Run lsof for the cwd descriptors of the given PIDs.

        Args:
            pids: Process IDs

        Returns:
            lsof stdout, or None if lsof failed
        """
        pid_list = ",".join(str(pid) for pid in pids)
        try:
            result = subprocess.run(
                ["lsof", "-a", "-p", pid_list, "-d", "cwd", "-Fn"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            debug(f"lsof cwd lookup for {pid_list} failed: {e}")
            return None

        if result.returncode != 0:
            debug(f"lsof cwd lookup for {pid_list} exited with {result.returncode}")
            return None
        return result.stdout


class ProcCwdResolver(CwdResolver):
    """Resolve working directories from the /proc/<pid>/cwd symlink."""

    def __init__(self, proc_root: Path | None = None) -> None:
        """Initialize resolver.

        Args:
            proc_root: procfs mount point. Defaults to /proc.
        """
        self.proc_root = proc_root or Path("/proc")

    def resolve_one(self, pid: int) -> str | None:
        """Read the cwd symlink of a single process."""
        if not validate_pid(pid):
            return None

        link = self.proc_root / str(pid) / "cwd"
        try:
            if not link.is_symlink():
                return None
            target = os.readlink(link)
        except OSError as e:
            debug(f"Cannot read {link}: {e}")
            return None

        return _clean_path(target)


def get_cwd_resolver() -> CwdResolver:
    """Pick the working directory strategy for this platform.

    Returns:
        LsofCwdResolver on macOS, ProcCwdResolver where /proc is available
    """
    if is_macos():
        return LsofCwdResolver()
    if Path("/proc/self/cwd").is_symlink():
        return ProcCwdResolver()
    return LsofCwdResolver()
