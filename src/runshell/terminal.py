"""Run subordinate commands without leaving the terminal in a broken state.

A program that dies while the terminal is in raw mode, with the cursor
hidden, with mouse tracking on or with the kitty keyboard protocol pushed
leaves the user's terminal unusable. `run_guarded` snapshots the terminal
attributes and the private modes listed in `constants.PRIVATE_MODES` before
the command starts and puts everything back once it ends, however it ends.

Not reentrant: a terminal has one current state, so two overlapping guarded
calls on the same terminal would restore each other's snapshots.
"""

import logging
import os
import signal
import subprocess
import sys
import termios
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TextIO

from runshell.constants import (
    BLINKING_BLOCK_CURSOR,
    RESET_CURSOR_COLOR,
    RESET_KEYBOARD_PROTOCOL,
    RESTORE_PRIVATE_MODE_VALUES,
    SAVE_PRIVATE_MODE_VALUES,
    SHOW_CURSOR,
)
from runshell.shell.detection import find_exe

log = logging.getLogger(__name__)

RESTORE_SEQUENCE = "".join(
    [
        RESTORE_PRIVATE_MODE_VALUES,
        RESET_KEYBOARD_PROTOCOL,
        BLINKING_BLOCK_CURSOR,
        SHOW_CURSOR,
        RESET_CURSOR_COLOR,
    ]
)


class ControllingTerminal:
    """A file descriptor on the process's controlling terminal."""

    def __init__(self, fd: int) -> None:
        self.fd = fd

    @classmethod
    def open(cls, path: str = "/dev/tty") -> "ControllingTerminal":
        return cls(os.open(path, os.O_RDWR | os.O_NOCTTY | os.O_CLOEXEC))

    def get_attributes(self) -> list[Any]:
        return termios.tcgetattr(self.fd)

    def set_attributes(self, attrs: list[Any], when: int = termios.TCSANOW) -> None:
        termios.tcsetattr(self.fd, when, attrs)

    def write(self, text: str) -> None:
        data = text.encode()
        while data:
            written = os.write(self.fd, data)
            data = data[written:]

    def close(self) -> None:
        if self.fd >= 0:
            os.close(self.fd)
            self.fd = -1


TerminalOpener = Callable[[], ControllingTerminal]


def _restore(term: ControllingTerminal, state_before: list[Any]) -> None:
    """Reset private modes and cursor, then put the attributes back.

    Every step is attempted even if an earlier one fails.
    """
    steps: list[tuple[str, Callable[[], None]]] = [
        ("reset modes", lambda: term.write(RESTORE_SEQUENCE)),
        ("restore attributes", lambda: term.set_attributes(state_before)),
    ]
    for label, step in steps:
        try:
            step()
        except (OSError, termios.error) as e:
            log.debug("terminal %s failed: %s", label, e)


@contextmanager
def preserved_terminal_state(opener: TerminalOpener = ControllingTerminal.open) -> Iterator[None]:
    """Snapshot the controlling terminal and restore it when the block exits.

    Without a controlling terminal, or when its attributes cannot be read,
    the block still runs, just without a snapshot.
    """
    try:
        term = opener()
    except OSError as e:
        log.debug("no controlling terminal (%s), running without state capture", e)
        term = None
    if term is None:
        yield
        return

    try:
        try:
            state_before = term.get_attributes()
        except (OSError, termios.error) as e:
            log.debug("could not read terminal attributes (%s)", e)
            state_before = None
        if state_before is None:
            yield
            return

        try:
            term.write(SAVE_PRIVATE_MODE_VALUES)
        except OSError as e:
            log.debug("could not save private modes: %s", e)
        try:
            yield
        finally:
            _restore(term, state_before)
    finally:
        term.close()


def _describe_status(returncode: int) -> str:
    if returncode < 0:
        try:
            return f"killed by signal {signal.Signals(-returncode).name}"
        except ValueError:
            return f"killed by signal {-returncode}"
    return f"exit status {returncode}"


def run_guarded(
    cmd: list[str],
    opener: TerminalOpener = ControllingTerminal.open,
    stderr: TextIO | None = None,
) -> int:
    """Run `cmd` on the caller's stdio and restore the terminal afterward.

    Returns a shell-style exit code (128 + signal number for signals, 127
    when the command cannot be started). Failures are reported on stderr,
    never raised.
    """
    if not cmd:
        raise ValueError("no command to run")
    stream = stderr if stderr is not None else sys.stderr
    exe = find_exe(cmd[0])

    with preserved_terminal_state(opener):
        try:
            result = subprocess.run([exe, *cmd[1:]], check=False)
        except OSError as e:
            print(f"{cmd[0]} failed with error: {e}", file=stream)
            return 127

    if result.returncode != 0:
        print(f"{cmd[0]} failed with error: {_describe_status(result.returncode)}", file=stream)
    if result.returncode < 0:
        return 128 - result.returncode
    return result.returncode
