"""Shell name normalization and the supported-shell catalog."""

import os

from runshell.constants import SUPPORTED_SHELLS


def shell_name(argv0: str) -> str:
    """Return the canonical shell name for an argv[0] or executable path.

    `/usr/local/bin/zsh`, `-bash` and `bash.exe` become `zsh`, `bash` and
    `bash`.
    """
    name = os.path.basename(argv0)
    if name.lower().endswith(".exe"):
        name = name[:-4]
    if name.startswith("-"):
        name = name[1:]
    return name


def is_supported_shell(name: str) -> bool:
    return name in SUPPORTED_SHELLS
