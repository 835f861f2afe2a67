"""Configuration discovery and the process-wide configuration snapshot."""

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Generic, TypeVar

from runshell.constants import CONFIG_FILE_NAME
from runshell.models import ShellOptions

log = logging.getLogger(__name__)

T = TypeVar("T")

RECOGNIZED_KEYS = frozenset({"shell", "shell_integration"})


class OnceValue(Generic[T]):
    """Compute a value on first call and hand the same result to every caller.

    The factory runs at most once even when several threads race on the
    first call; the losers block on the lock and then read the stored value.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None

    def __call__(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    self._value = self._factory()
                    self._done = True
        return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        """Forget the cached value. Only meant for tests."""
        with self._lock:
            self._done = False
            self._value = None


def config_dir() -> Path:
    """Return the directory holding runshell.conf."""
    override = os.environ.get("RUNSHELL_CONFIG_DIRECTORY", "").strip()
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg).expanduser() / "runshell"
    return Path.home() / ".config" / "runshell"


def config_file() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def _parse_lines(lines: list[str]) -> dict[str, str]:
    """Collect recognized `key value` pairs; later lines win."""
    values: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, *rest = line.split(None, 1)
        if key in RECOGNIZED_KEYS:
            values[key] = rest[0].strip() if rest else ""
    return values


def read_shell_options(path: Path) -> ShellOptions:
    """Read shell settings from `path`, returning defaults when it is unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("config %s not read (%s), using defaults", path, e)
        return ShellOptions()
    values = _parse_lines(text.splitlines())
    log.debug("config %s: %s", path, values)
    return ShellOptions(**values)


get_config: OnceValue[ShellOptions] = OnceValue(lambda: read_shell_options(config_file()))
