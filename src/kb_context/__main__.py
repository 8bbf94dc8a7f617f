"""Allow running the package with ``python -m kb_context``."""

from kb_context.cli import main

main()
