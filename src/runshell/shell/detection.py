"""Shell resolution: requested value, configuration, parent process, fallback."""

import logging
import os
import pwd
import shlex
import shutil

from runshell.config import get_config
from runshell.constants import EXTRA_EXE_DIRS, FALLBACK_SHELL
from runshell.models import Decision
from runshell.shell.ancestry import ProcessTable, find_shell_in_ancestry

log = logging.getLogger(__name__)


def login_shell_for_current_user() -> str:
    """Return the login shell recorded in the password database."""
    try:
        entry = pwd.getpwuid(os.geteuid())
    except KeyError as e:
        raise LookupError(f"no password entry for uid {os.geteuid()}") from e
    if not entry.pw_shell.strip():
        raise LookupError(f"no login shell set for {entry.pw_name}")
    return entry.pw_shell


def shell_from_config() -> Decision[str]:
    """Return the configured shell, expanding "." to the user's login shell."""
    shell = get_config().shell
    if shell != ".":
        return Decision(shell, "config")
    try:
        return Decision(login_shell_for_current_user(), "login-shell")
    except LookupError as e:
        log.debug("login shell lookup failed (%s), using %s", e, FALLBACK_SHELL)
        return Decision(FALLBACK_SHELL, "login-shell", fallback=True)


def _search_path() -> str:
    dirs = [d for d in os.environ.get("PATH", "").split(os.pathsep) if d]
    dirs.extend(os.path.expanduser(d) for d in EXTRA_EXE_DIRS)
    return os.pathsep.join(dirs)


def find_exe(name: str) -> str:
    """Resolve an executable name or path, returning `name` when nothing is found."""
    has_sep = os.path.sep in name or (os.path.altsep is not None and os.path.altsep in name)
    if has_sep:
        return os.path.abspath(os.path.expanduser(name))
    return shutil.which(name, path=_search_path()) or name


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def decide_shell(requested: str, table: ProcessTable | None = None) -> Decision[list[str]]:
    """Turn a requested shell into an argv and report which branch produced it.

    "" uses the configuration. "." looks for a supported shell among the
    parent processes first, then uses the configuration. Anything else is
    taken as a command line. When the first word does not name an executable
    file the result is ["/bin/sh"], dropping any arguments.
    """
    if requested == "":
        chosen = shell_from_config()
    elif requested == ".":
        name = find_shell_in_ancestry(table)
        if name:
            chosen = Decision(name, "ancestry")
        else:
            from_config = shell_from_config()
            chosen = Decision(from_config.value, from_config.source, fallback=True)
    else:
        chosen = Decision(requested, "requested")

    try:
        shell_cmd = shlex.split(chosen.value)
    except ValueError as e:
        log.debug("could not split %r (%s), using it as one word", chosen.value, e)
        shell_cmd = [chosen.value]
    if not shell_cmd:
        shell_cmd = [chosen.value]

    exe = find_exe(shell_cmd[0])
    if not _is_executable(exe):
        log.debug("%s is not executable, falling back to %s", exe, FALLBACK_SHELL)
        return Decision([FALLBACK_SHELL], "safe-fallback", fallback=True)
    shell_cmd = [exe, *shell_cmd[1:]]
    log.debug("shell %s from %s", shell_cmd, chosen.source)
    return Decision(shell_cmd, chosen.source, fallback=chosen.fallback)


def resolve_shell(requested: str) -> list[str]:
    return decide_shell(requested).value
