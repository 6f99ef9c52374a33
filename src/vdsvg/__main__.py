"""Allow running as `python -m vdsvg`."""

from .cli import main

main()
