"""Command modules for lsrv CLI."""

from .config import config_cmd
from .servers import servers_cmd

__all__ = [
    "config_cmd",
    "servers_cmd",
]
