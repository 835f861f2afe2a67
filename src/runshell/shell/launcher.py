"""Replace the current process with the resolved shell."""

import logging
import os
import sys
from collections.abc import Mapping
from typing import NoReturn

from runshell.models import ShellLaunchConfig
from runshell.shell.detection import find_exe
from runshell.shell.hooks import setup_shell_integration
from runshell.shell.integration import rc_modification_allowed
from runshell.shell.names import is_supported_shell, shell_name

log = logging.getLogger(__name__)


def build_launch_config(
    shell_cmd: list[str],
    integration_mode: str,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> ShellLaunchConfig:
    """Prepare the exec call for `shell_cmd`, injecting integration when it applies.

    IntegrationSetupError from the setup step is not caught: integration was
    asked for and cannot be honored, so the launch must not go ahead quietly.
    """
    if environ is None:
        environ = os.environ
    if platform is None:
        platform = sys.platform

    argv = list(shell_cmd)
    name = shell_name(argv[0])
    env: dict[str, str] = dict(environ)
    applied = False
    if rc_modification_allowed(integration_mode) and is_supported_shell(name):
        argv, env = setup_shell_integration(name, integration_mode, argv, env)
        applied = True
        log.debug("%s integration %r: argv=%s", name, integration_mode, argv)

    executable = find_exe(argv[0])
    if platform == "darwin":
        # Shells on macOS only read profile files in login mode and users
        # expect those to be loaded in every new terminal.
        argv[0] = "-" + os.path.basename(argv[0])

    return ShellLaunchConfig(
        shell_name=name,
        executable=executable,
        argv=argv,
        env=env,
        integration_applied=applied,
    )


def run_shell(shell_cmd: list[str], integration_mode: str) -> NoReturn:
    """Exec the shell. Only returns by raising (IntegrationSetupError or OSError)."""
    launch = build_launch_config(shell_cmd, integration_mode)
    log.debug("exec %s %s", launch.executable, launch.argv)
    os.execve(launch.executable, launch.argv, launch.env)
