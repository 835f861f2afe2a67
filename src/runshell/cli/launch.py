"""Shell launch CLI implementation."""

import argparse
import logging
import shlex
import sys

from runshell import __version__
from runshell.cli.shared import configure_logging
from runshell.shell import (
    IntegrationSetupError,
    build_launch_config,
    decide_integration_mode,
    decide_shell,
    run_shell,
)

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build parser for shell launch mode."""
    parser = argparse.ArgumentParser(
        prog="runshell",
        description="Launch your shell with terminal integration hooks",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-s",
        "--shell",
        default="",
        help=(
            "Shell command line to run. Empty uses the configured shell, "
            "'.' uses the shell this was started from"
        ),
    )
    parser.add_argument(
        "-i",
        "--shell-integration",
        default="",
        help="Space separated integration tokens, for example 'enabled no-cursor'",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be executed instead of running it",
    )
    return parser


def run(argv: list[str]) -> int:
    """Resolve the shell and exec it."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    shell = decide_shell(args.shell)
    mode = decide_integration_mode(args.shell_integration)
    log.debug(
        "shell %s (%s), integration %r (%s)", shell.value, shell.source, mode.value, mode.source
    )

    try:
        if args.dry_run:
            launch = build_launch_config(shell.value, mode.value)
            print(f"executable: {launch.executable}")
            print(f"argv: {shlex.join(launch.argv)}")
            print(f"shell source: {shell.source}")
            print(f"integration: {mode.value or '(none)'} ({mode.source})")
            print("integration applied: " + ("yes" if launch.integration_applied else "no"))
            return 0
        run_shell(shell.value, mode.value)
    except IntegrationSetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: could not run {shell.value[0]}: {e}", file=sys.stderr)
        return 1
