"""Walk the parent-process chain looking for a supported shell."""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol

import psutil

from runshell.shell.names import is_supported_shell, shell_name

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessRecord:
    pid: int
    ppid: int
    cmdline: list[str] = field(default_factory=list)


class ProcessTable(Protocol):
    def lookup(self, pid: int) -> ProcessRecord:
        """Return the record for `pid`, raising ProcessLookupError if it is gone."""
        ...


class PsutilProcessTable:
    """Process introspection backed by psutil."""

    def lookup(self, pid: int) -> ProcessRecord:
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                ppid = proc.ppid()
                try:
                    cmdline = proc.cmdline()
                except (psutil.AccessDenied, psutil.ZombieProcess):
                    cmdline = []
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            raise ProcessLookupError(pid) from e
        return ProcessRecord(pid=pid, ppid=ppid, cmdline=cmdline)


def iter_ancestors(start_pid: int, table: ProcessTable) -> Iterator[ProcessRecord]:
    """Yield `start_pid` and then each of its ancestors, nearest first.

    The walk ends when a lookup fails (the process exited or the root was
    reached), when a parent pid is not positive, or when a pid repeats.
    Real process trees have no cycles, so the last check only matters for a
    misbehaving platform API; without it such an API would loop forever.
    """
    seen: set[int] = set()
    pid = start_pid
    while pid > 0 and pid not in seen:
        seen.add(pid)
        try:
            record = table.lookup(pid)
        except ProcessLookupError:
            log.debug("process %d vanished, ending ancestry walk", pid)
            return
        yield record
        pid = record.ppid


def find_shell_in_ancestry(table: ProcessTable | None = None, start_pid: int | None = None) -> str:
    """Return the name of the nearest supported shell above this process, or ""."""
    if table is None:
        table = PsutilProcessTable()
    if start_pid is None:
        start_pid = os.getppid()
    for record in iter_ancestors(start_pid, table):
        if not record.cmdline:
            continue
        name = shell_name(record.cmdline[0])
        if is_supported_shell(name):
            log.debug("found shell %s in ancestor %d", name, record.pid)
            return name
    return ""
