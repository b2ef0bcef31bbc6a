"""Allow running as ``python -m acommit``."""

from .cli import main

main()
