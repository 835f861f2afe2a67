"""`runshell guard` command implementation."""

import argparse

from runshell.cli.shared import configure_logging
from runshell.terminal import run_guarded


def build_parser() -> argparse.ArgumentParser:
    """Build parser for the guard command."""
    parser = argparse.ArgumentParser(
        prog="runshell guard",
        description="Run a command and restore the terminal's modes once it exits",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("command", help="Command to run")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")
    return parser


def run(argv: list[str]) -> int:
    """Execute the guard command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)
    return run_guarded([args.command, *args.args])
