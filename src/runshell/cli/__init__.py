"""Command-line interface for runshell."""

from runshell.cli.app import entrypoint, main

__all__ = ["entrypoint", "main"]
