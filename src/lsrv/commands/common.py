"""Common utilities for CLI commands."""

from ..config import Settings, load_settings
from ..console import console, debug, error, error_console, warning

# Re-export console utilities
__all__ = ["console", "error_console", "debug", "warning", "error", "get_settings"]


def get_settings() -> Settings:
    """Get settings for this run."""
    return load_settings()
