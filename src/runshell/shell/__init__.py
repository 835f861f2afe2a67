"""Shell resolution, integration setup and launch."""

from runshell.shell.ancestry import find_shell_in_ancestry
from runshell.shell.detection import decide_shell, resolve_shell
from runshell.shell.hooks import IntegrationSetupError, setup_shell_integration
from runshell.shell.integration import decide_integration_mode, effective_integration_mode
from runshell.shell.launcher import build_launch_config, run_shell

__all__ = [
    "IntegrationSetupError",
    "build_launch_config",
    "decide_integration_mode",
    "decide_shell",
    "effective_integration_mode",
    "find_shell_in_ancestry",
    "resolve_shell",
    "run_shell",
    "setup_shell_integration",
]
