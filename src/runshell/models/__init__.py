"""Model package for runshell."""

from runshell.models.decision import Decision
from runshell.models.shell_launch_config import ShellLaunchConfig
from runshell.models.shell_options import ShellOptions

__all__ = [
    "Decision",
    "ShellLaunchConfig",
    "ShellOptions",
]
