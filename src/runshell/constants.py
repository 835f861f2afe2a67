"""Shared constants for runshell."""

CONFIG_FILE_NAME = "runshell.conf"

# "." means: login shell when read from config, parent-process shell when
# passed on the command line.
DEFAULT_SHELL = "."
DEFAULT_SHELL_INTEGRATION = "enabled"
FALLBACK_SHELL = "/bin/sh"

ALLOWED_SHELL_INTEGRATION_VALUES = frozenset(
    {
        "enabled",
        "disabled",
        "no-rc",
        "no-cursor",
        "no-title",
        "no-prompt-mark",
        "no-cwd",
    }
)

SUPPORTED_SHELLS = frozenset({"bash", "zsh", "fish"})

# Directories searched after $PATH when resolving a bare shell name.
EXTRA_EXE_DIRS = (
    "~/.local/bin",
    "~/bin",
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/opt/local/bin",
    "/usr/bin",
    "/bin",
)

# xterm private modes saved/restored around guarded commands: cursor keys,
# autowrap, cursor visibility, mouse tracking, focus events, SGR mouse and
# bracketed paste.
PRIVATE_MODES = (1, 7, 25, 1000, 1002, 1003, 1004, 1006, 2004)
SAVE_PRIVATE_MODE_VALUES = "\x1b[?" + ";".join(map(str, PRIVATE_MODES)) + "s"
RESTORE_PRIVATE_MODE_VALUES = "\x1b[?" + ";".join(map(str, PRIVATE_MODES)) + "r"

RESET_KEYBOARD_PROTOCOL = "\x1b[=u"
BLINKING_BLOCK_CURSOR = "\x1b[1 q"
SHOW_CURSOR = "\x1b[?25h"
RESET_CURSOR_COLOR = "\x1b]112\a"
