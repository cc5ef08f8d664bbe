"""Listening socket enumeration for lsrv."""

import re
import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .console import debug

# Format: node 4242 user 23u IPv4 0x... 0t0 TCP *:3000 (LISTEN)
PORT_PATTERN = re.compile(r":(\d+)\s+\(LISTEN\)")

MIN_LSOF_FIELDS = 9
MAX_PID = 2147483647

# Ports below this are system services
RESERVED_PORT_LIMIT = 1024
DEV_PORT_FLOOR = 3000
ALTERNATE_DEV_PORT = 2000


class ScanError(Exception):
    """Raised when the listening sockets cannot be enumerated."""

    pass


@dataclass(frozen=True)
class ListenerRecord:
    """A process listening on a TCP port."""

    pid: int
    command: str
    port: int


def is_macos() -> bool:
    """Check whether we are running on macOS."""
    return Path("/System/Library/CoreServices/Finder.app").exists()


def command_exists(name: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(name) is not None


def validate_pid(pid: int) -> bool:
    """Check that a PID is within valid bounds.

    Args:
        pid: Process ID to check

    Returns:
        True if the PID is positive and fits a 32-bit signed int
    """
    return 0 < pid <= MAX_PID


def is_dev_port(port: int, extra_ports: Iterable[int] = ()) -> bool:
    """Decide whether a port looks like a development server port.

    Ports below 1024 are skipped, everything from 3000 up is accepted,
    and 2000 is the only accepted port in between. ``extra_ports`` come
    from the user settings and are accepted as well.

    Args:
        port: Port number
        extra_ports: Additional ports to accept

    Returns:
        True if the port should be reported
    """
    if port in extra_ports:
        return True
    if port < RESERVED_PORT_LIMIT:
        return False
    if port >= DEV_PORT_FLOOR:
        return True
    return port == ALTERNATE_DEV_PORT


def extract_port(line: str) -> int:
    """Extract the local port from an lsof output line.

    Args:
        line: Raw lsof line

    Returns:
        Port number, or 0 if none could be found
    """
    match = PORT_PATTERN.search(line)
    if match:
        return int(match.group(1))

    # Fallback: NAME column, e.g. 127.0.0.1:8080
    fields = line.split()
    if len(fields) >= MIN_LSOF_FIELDS:
        tail = fields[8].split(":")[-1]
        if tail.isdigit():
            return int(tail)
    return 0


def parse_lsof_output(
    output: str,
    extra_ports: Iterable[int] = (),
    ignore_processes: Iterable[str] = (),
) -> list[ListenerRecord]:
    """Parse ``lsof -iTCP -sTCP:LISTEN`` output into listener records.

    Malformed lines, invalid PIDs and non-development ports are dropped.

    Args:
        output: Raw lsof stdout
        extra_ports: Additional ports to accept
        ignore_processes: Command names to leave out

    Returns:
        Records in output order
    """
    extra = set(extra_ports)
    ignored = set(ignore_processes)
    records: list[ListenerRecord] = []

    for line in output.splitlines():
        if line.startswith("COMMAND"):
            continue

        fields = line.split()
        if len(fields) < MIN_LSOF_FIELDS:
            continue

        command, pid_str = fields[0], fields[1]

        port = extract_port(line)
        if port == 0 or not is_dev_port(port, extra):
            continue

        try:
            pid = int(pid_str)
        except ValueError:
            continue

        if not validate_pid(pid):
            continue

        if command in ignored:
            debug(f"Ignoring {command} (pid {pid}) on port {port}")
            continue

        records.append(ListenerRecord(pid=pid, command=command, port=port))

    return records


class ListenerScanner:
    """Enumerate processes listening on TCP ports."""

    def __init__(
        self,
        extra_ports: Iterable[int] = (),
        ignore_processes: Iterable[str] = (),
    ) -> None:
        """Initialize scanner.

        Args:
            extra_ports: Additional ports to accept
            ignore_processes: Command names to leave out
        """
        self.extra_ports = tuple(extra_ports)
        self.ignore_processes = tuple(ignore_processes)

    def get_listeners(self) -> list[ListenerRecord]:
        """Get all development-port listeners.

        Returns:
            Listener records in lsof output order

        Raises:
            ScanError: If lsof cannot be run or exits with an error
        """
        output = self._run_lsof()
        records = parse_lsof_output(output, self.extra_ports, self.ignore_processes)
        debug(f"Found {len(records)} listeners on development ports")
        return records

    def _run_lsof(self) -> str:
        """Run lsof for TCP sockets in LISTEN state.

        Returns:
            Raw lsof stdout
        """
        try:
            result = subprocess.run(
                ["lsof", "-iTCP", "-sTCP:LISTEN", "-n", "-P"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise ScanError(f"failed to run lsof: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise ScanError(f"failed to run lsof: {message}")

        return result.stdout
