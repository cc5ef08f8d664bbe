"""Allow running lsrv as ``python -m lsrv``."""

from .cli import main

main()
