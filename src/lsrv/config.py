"""Configuration management for lsrv."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import platformdirs
import yaml

from .console import debug, warning
from .context import DEFAULT_MAX_WORKERS


@dataclass
class Settings:
    """User settings loaded from config.yaml."""

    extra_ports: list[int] = field(default_factory=list)  # Accepted besides the dev range
    ignore_processes: list[str] = field(default_factory=list)  # Command names to hide
    max_workers: int = DEFAULT_MAX_WORKERS  # Thread pool size for git lookups


def get_config_path() -> Path:
    """Get the configuration file path.

    ``LSRV_CONFIG`` overrides the platform default.

    Returns:
        Path to config.yaml
    """
    override = os.getenv("LSRV_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir("lsrv", "lsrv")) / "config.yaml"


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults on any problem.

    Args:
        path: Config file. Defaults to get_config_path().

    Returns:
        Settings instance
    """
    path = path or get_config_path()
    if not path.exists():
        debug(f"No config file at {path}, using defaults")
        return Settings()

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        return _settings_from_dict(data or {})
    except (OSError, yaml.YAMLError) as e:
        warning(f"Could not read {path}: {e}")
    except (TypeError, ValueError) as e:
        warning(f"Invalid settings in {path}: {e}")
    return Settings()


def _settings_from_dict(data: Any) -> Settings:
    """Validate raw YAML data into Settings.

    Raises:
        TypeError: If the document or a key has the wrong type
        ValueError: If a value is out of range
    """
    if not isinstance(data, dict):
        raise TypeError("top level must be a mapping")

    extra_ports = data.get("extra_ports") or []
    ignore_processes = data.get("ignore_processes") or []
    max_workers = data.get("max_workers", DEFAULT_MAX_WORKERS)

    if not isinstance(extra_ports, list):
        raise TypeError("extra_ports must be a list")
    if not isinstance(ignore_processes, list):
        raise TypeError("ignore_processes must be a list")

    ports = [int(p) for p in extra_ports]
    for port in ports:
        if not 1 <= port <= 65535:
            raise ValueError(f"port out of range: {port}")

    workers = int(max_workers)
    if workers < 1:
        raise ValueError("max_workers must be at least 1")

    return Settings(
        extra_ports=ports,
        ignore_processes=[str(p) for p in ignore_processes],
        max_workers=workers,
    )
