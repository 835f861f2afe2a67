"""Command-line entry for runshell.

Two modes share one executable:

    runshell [--shell CMD] [--shell-integration MODE] [--dry-run]
        resolve the shell and integration mode, then exec the shell
    runshell guard COMMAND [ARGS...]
        run COMMAND and restore the terminal state once it exits

Anything that is not a known subcommand name is handed to launch mode, so
launch options never need a subcommand in front of them.
"""

import sys
from collections.abc import Callable

from runshell.cli import guard, launch

SUBCOMMANDS: dict[str, Callable[[list[str]], int]] = {
    "guard": guard.run,
}


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    handler = SUBCOMMANDS.get(args[0]) if args else None
    if handler is None:
        return launch.run(args)
    return handler(args[1:])


def entrypoint() -> None:
    raise SystemExit(main())
