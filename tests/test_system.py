"""Tests for system module."""

import subprocess

import pytest

from lsrv.system import (
    ListenerRecord,
    ListenerScanner,
    ScanError,
    extract_port,
    is_dev_port,
    parse_lsof_output,
    validate_pid,
)

from .helpers import LSOF_HEADER, lsof_line


@pytest.mark.parametrize(
    "port,expected",
    [
        (22, False),
        (80, False),
        (1023, False),
        (1024, False),
        (1999, False),
        (2000, True),
        (2001, False),
        (2999, False),
        (3000, True),
        (5173, True),
        (8080, True),
        (65535, True),
    ],
)
def test_is_dev_port(port, expected):
    """Test the development port rules."""
    assert is_dev_port(port) is expected


def test_is_dev_port_extra_ports():
    """Test that configured extra ports are accepted."""
    assert is_dev_port(1337) is False
    assert is_dev_port(1337, extra_ports=[1337]) is True
    assert is_dev_port(1338, extra_ports=[1337]) is False


def test_validate_pid():
    """Test PID bounds."""
    assert validate_pid(1)
    assert validate_pid(2147483647)
    assert not validate_pid(0)
    assert not validate_pid(-5)
    assert not validate_pid(2147483648)


def test_extract_port_listen_pattern():
    """Test extracting port from the (LISTEN) marker."""
    assert extract_port(lsof_line("node", 100, 3001)) == 3001
    line = "python3   4242 dev 5u IPv6 0xabc 0t0 TCP [::1]:8000 (LISTEN)"
    assert extract_port(line) == 8000


def test_extract_port_fallback_to_name_field():
    """Test fallback to the ninth field when (LISTEN) is missing."""
    line = "node 101 dev 23u IPv4 0xabc 0t0 TCP 127.0.0.1:4000"
    assert extract_port(line) == 4000


def test_extract_port_not_found():
    """Test lines without a usable port."""
    assert extract_port("node 102 dev 23u IPv4 0xabc 0t0 TCP localhost:http") == 0
    assert extract_port("garbage") == 0


def test_parse_lsof_output():
    """Test parsing a realistic lsof listing."""
    output = "\n".join(
        [
            LSOF_HEADER,
            lsof_line("node", 100, 3001),
            lsof_line("ruby", 200, 3000),
            lsof_line("sshd", 1, 22),
            lsof_line("ControlCe", 300, 2000),
            lsof_line("postgres", 400, 1500),
        ]
    )

    records = parse_lsof_output(output)

    assert records == [
        ListenerRecord(pid=100, command="node", port=3001),
        ListenerRecord(pid=200, command="ruby", port=3000),
        ListenerRecord(pid=300, command="ControlCe", port=2000),
    ]


def test_parse_lsof_output_skips_short_lines():
    """Test that lines with fewer than nine fields are skipped."""
    output = "\n".join(
        [
            "node 100 dev 23u IPv4 0xabc 0t0 *:3001 (LISTEN)",  # 9 fields
            "node 101 dev 23u IPv4 0xabc *:3002 (LISTEN)",  # 8 fields
            "node 102",
            "",
        ]
    )

    records = parse_lsof_output(output)

    assert [r.pid for r in records] == [100]


def test_parse_lsof_output_skips_invalid_pids():
    """Test that non-numeric and out of range PIDs are dropped."""
    output = "\n".join(
        [
            lsof_line("node", 0, 3001),
            "node abc dev 23u IPv4 0xabc 0t0 TCP *:3002 (LISTEN)",
            "node 2147483648 dev 23u IPv4 0xabc 0t0 TCP *:3003 (LISTEN)",
            "node -1 dev 23u IPv4 0xabc 0t0 TCP *:3004 (LISTEN)",
        ]
    )

    assert parse_lsof_output(output) == []


def test_parse_lsof_output_skips_port_zero():
    """Test that lines without a port are dropped."""
    output = "node 100 dev 23u IPv4 0xabc 0t0 TCP localhost:http"
    assert parse_lsof_output(output) == []


def test_parse_lsof_output_settings():
    """Test extra ports and ignored processes."""
    output = "\n".join(
        [
            lsof_line("node", 100, 1337),
            lsof_line("Docker", 200, 5432),
            lsof_line("node", 300, 3000),
        ]
    )

    records = parse_lsof_output(output, extra_ports=[1337], ignore_processes=["Docker"])

    assert [(r.pid, r.port) for r in records] == [(100, 1337), (300, 3000)]


def test_scanner_runs_lsof(monkeypatch):
    """Test that the scanner invokes lsof and parses its output."""
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        stdout = "\n".join([LSOF_HEADER, lsof_line("node", 100, 3001)])
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    records = ListenerScanner().get_listeners()

    assert calls == [["lsof", "-iTCP", "-sTCP:LISTEN", "-n", "-P"]]
    assert records == [ListenerRecord(pid=100, command="node", port=3001)]


def test_scanner_nonzero_exit_is_fatal(monkeypatch):
    """Test that a failing lsof raises ScanError."""

    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="lsof: boom")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ScanError, match="boom"):
        ListenerScanner().get_listeners()


def test_scanner_missing_lsof_is_fatal(monkeypatch):
    """Test that a missing lsof binary raises ScanError."""

    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "lsof")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ScanError):
        ListenerScanner().get_listeners()
