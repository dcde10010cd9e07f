"""Parsing of /proc/[pid]/stat."""

from __future__ import annotations

import mmap
import re
from dataclasses import dataclass
from typing import Union

# USER_HZ is fixed at 100 on all common platforms.
USER_HZ = 100

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")
_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class ProcStat:
    """Status information of a process."""

    pid: int
    comm: str = ""
    state: str = ""
    ppid: int = 0
    pgrp: int = 0
    session: int = 0
    tty: int = 0
    tpgid: int = 0
    flags: int = 0
    min_flt: int = 0
    cmin_flt: int = 0
    maj_flt: int = 0
    cmaj_flt: int = 0
    utime: int = 0
    stime: int = 0
    cutime: int = 0
    cstime: int = 0
    priority: int = 0
    nice: int = 0
    num_threads: int = 0
    starttime: int = 0
    vsize: int = 0
    rss: int = 0

    def virtual_memory(self) -> int:
        """Virtual memory size in bytes."""
        return self.vsize

    def resident_memory(self) -> int:
        """Resident memory size in bytes."""
        return self.rss * mmap.PAGESIZE

    def cpu_time(self) -> float:
        """Total user and system CPU time in seconds."""
        return (self.utime + self.stime) / USER_HZ


def _signed(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"expected integer, got {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _unsigned(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"expected unsigned integer, got {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"integer out of range: {text!r}")
    return value


# Converters for the fields after comm, in file order; None is a skipped field.
_FIELDS = (
    ("state", str),
    ("ppid", _signed),
    ("pgrp", _signed),
    ("session", _signed),
    ("tty", _signed),
    ("tpgid", _signed),
    ("flags", _unsigned),
    ("min_flt", _unsigned),
    ("cmin_flt", _unsigned),
    ("maj_flt", _unsigned),
    ("cmaj_flt", _unsigned),
    ("utime", _unsigned),
    ("stime", _unsigned),
    ("cutime", _unsigned),
    ("cstime", _unsigned),
    ("priority", _signed),
    ("nice", _signed),
    ("num_threads", _signed),
    (None, _signed),
    ("starttime", _unsigned),
    ("vsize", _unsigned),
    ("rss", _unsigned),
)


def parse_proc_stat(data: Union[str, bytes], pid: int) -> ProcStat:
    """Parse the contents of a stat file of the process with the given pid."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data

    left = text.find("(")
    right = text.rfind(")")
    if left < 0 or right < 0 or left > right:
        raise ValueError(f"unexpected format, couldn't extract comm: {text}")

    stat = ProcStat(pid=pid, comm=text[left + 1 : right])
    tokens = text[right + 2 :].split()
    if len(tokens) < len(_FIELDS):
        raise ValueError(
            f"unexpected end of stat data: expected {len(_FIELDS)} fields "
            f"after comm, got {len(tokens)}"
        )
    for (name, convert), token in zip(_FIELDS, tokens):
        value = convert(token)
        if name is not None:
            setattr(stat, name, value)
    return stat