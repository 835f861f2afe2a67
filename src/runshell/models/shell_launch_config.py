"""Shell launch model."""

from dataclasses import dataclass


@dataclass
class ShellLaunchConfig:
    """Everything needed to replace the current process with a shell."""

    shell_name: str
    executable: str
    argv: list[str]
    env: dict[str, str]
    integration_applied: bool = False
