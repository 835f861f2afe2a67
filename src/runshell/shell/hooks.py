"""Shell startup hooks that emit prompt marks, cursor shapes, title and cwd.

Each supported shell gets a script in the integration data directory plus an
argv/env rewrite that makes the shell load it ahead of the user's own startup
files. The scripts read RUNSHELL_SHELL_INTEGRATION at shell runtime so the
`no-*` tokens switch individual features off.
"""

import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

log = logging.getLogger(__name__)

BASH_SCRIPT_NAME = "runshell.bash"
ZSH_DIR_NAME = "zsh"
FISH_CONF_NAME = "runshell-shell-integration.fish"

BASH_SCRIPT = r"""# runshell bash integration, loaded through $ENV by `bash --posix`.
if [[ -n "$RUNSHELL_BASH_INJECT" ]]; then
    if [[ -n "${RUNSHELL_BASH_ORIG_ENV+x}" ]]; then
        builtin export ENV="$RUNSHELL_BASH_ORIG_ENV"
        builtin unset RUNSHELL_BASH_ORIG_ENV
    else
        builtin unset ENV
    fi
    _runshell_inject=" $RUNSHELL_BASH_INJECT "
    builtin unset RUNSHELL_BASH_INJECT
    [[ "$_runshell_inject" == *" posix "* ]] || builtin set +o posix
    if builtin shopt -q login_shell; then
        if [[ "$_runshell_inject" != *" no-profile "* ]]; then
            [[ -r /etc/profile ]] && builtin source /etc/profile
            for _runshell_f in ~/.bash_profile ~/.bash_login ~/.profile; do
                if [[ -r "$_runshell_f" ]]; then
                    builtin source "$_runshell_f"
                    break
                fi
            done
        fi
    elif [[ "$_runshell_inject" != *" no-rc "* ]]; then
        if [[ -n "$RUNSHELL_BASH_RCFILE" ]]; then
            _runshell_f="$RUNSHELL_BASH_RCFILE"
        else
            [[ -r /etc/bash.bashrc ]] && builtin source /etc/bash.bashrc
            _runshell_f=~/.bashrc
        fi
        [[ -r "$_runshell_f" ]] && builtin source "$_runshell_f"
    fi
    builtin unset _runshell_f _runshell_inject RUNSHELL_BASH_RCFILE
fi

if [[ $- == *i* && -z "$_runshell_installed" ]]; then
    _runshell_installed=1
    _runshell_opts=" $RUNSHELL_SHELL_INTEGRATION "
    _runshell_prompted=0
    _runshell_precmd() {
        local ret=$?
        if [[ "$_runshell_opts" != *" no-prompt-mark "* ]]; then
            (( _runshell_prompted )) && builtin printf '\e]133;D;%s\a' "$ret"
            builtin printf '\e]133;A\a'
        fi
        [[ "$_runshell_opts" == *" no-cursor "* ]] || builtin printf '\e[5 q'
        [[ "$_runshell_opts" == *" no-title "* ]] || builtin printf '\e]2;%s\a' "${PWD/#$HOME/\~}"
        [[ "$_runshell_opts" == *" no-cwd "* ]] || builtin printf '\e]7;file://%s%s\a' "$HOSTNAME" "$PWD"
        _runshell_prompted=1
        return $ret
    }
    [[ "$_runshell_opts" == *" no-prompt-mark "* ]] || PS0="${PS0}\e]133;C\a"
    [[ "$_runshell_opts" == *" no-cursor "* ]] || PS0="${PS0}\e[0 q"
    PROMPT_COMMAND="_runshell_precmd${PROMPT_COMMAND:+; $PROMPT_COMMAND}"
fi
"""

ZSH_ZSHENV = r"""# runshell zsh integration, loaded because ZDOTDIR points here.
if [[ -n "$RUNSHELL_ORIG_ZDOTDIR" ]]; then
    builtin export ZDOTDIR="$RUNSHELL_ORIG_ZDOTDIR"
    builtin unset RUNSHELL_ORIG_ZDOTDIR
else
    builtin unset ZDOTDIR
fi
builtin typeset _runshell_zshenv="${ZDOTDIR:-$HOME}/.zshenv"
[[ -r "$_runshell_zshenv" ]] && builtin source "$_runshell_zshenv"
builtin unset _runshell_zshenv

if [[ -o interactive ]]; then
    builtin typeset -g _runshell_opts=" $RUNSHELL_SHELL_INTEGRATION "
    builtin typeset -gi _runshell_prompted=0
    _runshell_precmd() {
        local ret=$?
        if [[ "$_runshell_opts" != *" no-prompt-mark "* ]]; then
            (( _runshell_prompted )) && builtin printf '\e]133;D;%s\a' "$ret"
            builtin printf '\e]133;A\a'
        fi
        [[ "$_runshell_opts" == *" no-cursor "* ]] || builtin printf '\e[5 q'
        [[ "$_runshell_opts" == *" no-title "* ]] || builtin printf '\e]2;%s\a' "${(D)PWD}"
        [[ "$_runshell_opts" == *" no-cwd "* ]] || builtin printf '\e]7;file://%s%s\a' "$HOST" "$PWD"
        _runshell_prompted=1
        return $ret
    }
    _runshell_preexec() {
        [[ "$_runshell_opts" == *" no-prompt-mark "* ]] || builtin printf '\e]133;C\a'
        [[ "$_runshell_opts" == *" no-cursor "* ]] || builtin printf '\e[0 q'
    }
    builtin autoload -Uz add-zsh-hook
    add-zsh-hook precmd _runshell_precmd
    add-zsh-hook preexec _runshell_preexec
fi
"""

FISH_CONF = r"""# runshell fish integration, loaded through XDG_DATA_DIRS.
if set -q RUNSHELL_FISH_XDG_DATA_DIR
    set --local keep
    for d in (string split : -- $XDG_DATA_DIRS)
        test "$d" = "$RUNSHELL_FISH_XDG_DATA_DIR"; or set --append keep $d
    end
    if set -q keep[1]
        set --global --export XDG_DATA_DIRS (string join : -- $keep)
    else
        set --erase XDG_DATA_DIRS
    end
    set --erase RUNSHELL_FISH_XDG_DATA_DIR
end

status is-interactive; or exit 0

set --global _runshell_opts (string split ' ' -- $RUNSHELL_SHELL_INTEGRATION)
set --global _runshell_prompted 0

function _runshell_prompt --on-event fish_prompt
    set --local ret $status
    if not contains no-prompt-mark $_runshell_opts
        test $_runshell_prompted -eq 1; and printf '\e]133;D;%s\a' $ret
        printf '\e]133;A\a'
    end
    contains no-cursor $_runshell_opts; or printf '\e[5 q'
    contains no-title $_runshell_opts; or printf '\e]2;%s\a' (prompt_pwd)
    contains no-cwd $_runshell_opts; or printf '\e]7;file://%s%s\a' $hostname $PWD
    set --global _runshell_prompted 1
end

function _runshell_preexec --on-event fish_preexec
    contains no-prompt-mark $_runshell_opts; or printf '\e]133;C\a'
    contains no-cursor $_runshell_opts; or printf '\e[0 q'
end
"""


class IntegrationSetupError(RuntimeError):
    """Shell integration was requested but could not be installed."""


def integration_data_dir() -> Path:
    """Return the directory holding the generated integration scripts."""
    xdg = os.environ.get("XDG_DATA_HOME", "").strip()
    base = Path(xdg).expanduser() if xdg else Path.home() / ".local" / "share"
    return base / "runshell" / "shell-integration"


def _write_if_changed(path: Path, content: str) -> None:
    """Atomically write `content` to `path` unless it already holds it."""
    try:
        if path.read_text(encoding="utf-8") == content:
            return
    except (OSError, UnicodeDecodeError):
        pass
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_file = path.with_name(f".{path.name}.{os.getpid()}.{time.time_ns()}.tmp")
    fd = os.open(temp_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(content)
    os.replace(temp_file, path)
    log.debug("wrote %s", path)


def write_bash_script() -> str:
    """Write the bash integration script and return its path."""
    path = integration_data_dir() / "bash" / BASH_SCRIPT_NAME
    _write_if_changed(path, BASH_SCRIPT)
    return str(path)


def write_zsh_rcdir() -> str:
    """Write a ZDOTDIR whose .zshenv installs the zsh hooks."""
    rcdir = integration_data_dir() / ZSH_DIR_NAME
    _write_if_changed(rcdir / ".zshenv", ZSH_ZSHENV)
    return str(rcdir)


def write_fish_data_dir() -> str:
    """Write a data directory carrying a fish vendor_conf.d snippet."""
    data_dir = integration_data_dir() / "fish-data"
    _write_if_changed(data_dir / "fish" / "vendor_conf.d" / FISH_CONF_NAME, FISH_CONF)
    return str(data_dir)


_BASH_OPTIONS_WITH_VALUE = {"-O", "+O", "-o", "+o", "--rcfile", "--init-file"}


def _runs_command_or_script(args: list[str]) -> bool:
    """Return whether bash would run `-c` or a script file rather than a session.

    Bash reads $ENV only in interactive shells, so posix mode would never be
    switched off again in these cases.
    """
    it = iter(args)
    for arg in it:
        if arg in _BASH_OPTIONS_WITH_VALUE:
            next(it, None)
        elif arg in {"-", "--"}:
            return next(it, None) is not None
        elif arg.startswith("--"):
            continue
        elif arg.startswith("+") and len(arg) > 1:
            continue
        elif arg.startswith("-"):
            if "c" in arg:
                return True
            if "s" in arg:
                # Commands come from stdin; later operands are positional parameters.
                return False
        else:
            return True
    return False


def _setup_bash(argv: list[str], env: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    if _runs_command_or_script(argv[1:]):
        log.debug("bash runs a command or script, skipping startup injection: %s", argv)
        return argv, env
    inject = ["1"]
    rest: list[str] = []
    args = iter(argv[1:])
    for arg in args:
        if arg in {"--rcfile", "--init-file"}:
            rcfile = next(args, None)
            if rcfile is not None:
                env["RUNSHELL_BASH_RCFILE"] = rcfile
        elif arg == "--norc":
            inject.append("no-rc")
        elif arg == "--noprofile":
            inject.append("no-profile")
        elif arg == "--posix":
            inject.append("posix")
        else:
            rest.append(arg)
    if "ENV" in env:
        env["RUNSHELL_BASH_ORIG_ENV"] = env["ENV"]
    env["ENV"] = write_bash_script()
    env["RUNSHELL_BASH_INJECT"] = " ".join(inject)
    return [argv[0], "--posix", *rest], env


def _setup_zsh(argv: list[str], env: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    rcdir = write_zsh_rcdir()
    if "ZDOTDIR" in env:
        env["RUNSHELL_ORIG_ZDOTDIR"] = env["ZDOTDIR"]
    env["ZDOTDIR"] = rcdir
    return argv, env


def _setup_fish(argv: list[str], env: dict[str, str]) -> tuple[list[str], dict[str, str]]:
    data_dir = write_fish_data_dir()
    existing = env.get("XDG_DATA_DIRS", "")
    env["XDG_DATA_DIRS"] = f"{data_dir}{os.pathsep}{existing}" if existing else data_dir
    env["RUNSHELL_FISH_XDG_DATA_DIR"] = data_dir
    return argv, env


_SETUP: dict[str, Callable[[list[str], dict[str, str]], tuple[list[str], dict[str, str]]]] = {
    "bash": _setup_bash,
    "zsh": _setup_zsh,
    "fish": _setup_fish,
}


def setup_shell_integration(
    shell_name: str, mode: str, argv: list[str], env: dict[str, str]
) -> tuple[list[str], dict[str, str]]:
    """Return argv and environment rewritten so the shell loads runshell's hooks.

    Neither input is modified. Raises IntegrationSetupError for an unknown
    shell or when the scripts cannot be written.
    """
    handler = _SETUP.get(shell_name)
    if handler is None:
        raise IntegrationSetupError(f"shell integration is not available for {shell_name!r}")
    new_env = dict(env)
    new_env["RUNSHELL_SHELL_INTEGRATION"] = " ".join(mode.lower().split())
    try:
        return handler(list(argv), new_env)
    except OSError as e:
        raise IntegrationSetupError(f"could not install {shell_name} integration: {e}") from e
