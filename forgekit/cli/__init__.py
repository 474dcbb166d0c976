"""Command-line interface for ForgeKit."""

from forgekit.cli.parser import CLI, main

__all__ = ["CLI", "main"]
