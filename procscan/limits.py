"""Parsing of /proc/[pid]/limits."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_LIMITS_FIELDS = 3
_UNLIMITED = "unlimited"
_DELIMITER = re.compile(r"  +")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class ProcLimits:
    """Soft resource limits of a process; -1 stands for unlimited."""

    cpu_time: int = 0
    file_size: int = 0
    data_size: int = 0
    stack_size: int = 0
    core_file_size: int = 0
    resident_set: int = 0
    processes: int = 0
    open_files: int = 0
    locked_memory: int = 0
    address_space: int = 0
    file_locks: int = 0
    pending_signals: int = 0
    msgqueue_size: int = 0
    nice_priority: int = 0
    realtime_priority: int = 0
    realtime_timeout: int = 0


_LIMIT_NAMES = {
    "Max cpu time": "cpu_time",
    "Max file size": "file_size",
    "Max data size": "data_size",
    "Max stack size": "stack_size",
    "Max core file size": "core_file_size",
    "Max resident set": "resident_set",
    "Max processes": "processes",
    "Max open files": "open_files",
    "Max locked memory": "locked_memory",
    "Max address space": "address_space",
    "Max file locks": "file_locks",
    "Max pending signals": "pending_signals",
    "Max msgqueue size": "msgqueue_size",
    "Max nice priority": "nice_priority",
    "Max realtime priority": "realtime_priority",
    "Max realtime timeout": "realtime_timeout",
}


def _parse_limit(text: str) -> int:
    if text == _UNLIMITED:
        return -1
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"couldn't parse value {text}: invalid syntax")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"couldn't parse value {text}: value out of range")
    return value


def _strip_line_end(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_limits(stream: Iterable[str]) -> ProcLimits:
    """Parse the lines of a limits file into the soft limits it lists."""
    limits = ProcLimits()
    for raw_line in stream:
        line = _strip_line_end(raw_line)
        fields = _DELIMITER.split(line, maxsplit=_LIMITS_FIELDS - 1)
        if len(fields) != _LIMITS_FIELDS:
            raise ValueError(f"couldn't parse limits line {line}")
        attribute = _LIMIT_NAMES.get(fields[0])
        if attribute is not None:
            setattr(limits, attribute, _parse_limit(fields[1]))
    return limits