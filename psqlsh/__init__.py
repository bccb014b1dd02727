"""Interactive session layer for a psql-style command-line client."""

from __future__ import annotations

__version__ = "0.1.0"

COMMAND_NAME = "psqlsh"

__all__ = ["COMMAND_NAME", "__version__"]
