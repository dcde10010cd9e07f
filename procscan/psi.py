"""Parsing of pressure stall information from /proc/pressure/*."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

_FLOAT = r"([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
_SPACE = r"[ \t]*"


def _line_pattern(prefix: str) -> re.Pattern:
    return re.compile(
        prefix
        + _SPACE
        + "avg10="
        + _FLOAT
        + _SPACE
        + "avg60="
        + _FLOAT
        + _SPACE
        + "avg300="
        + _FLOAT
        + _SPACE
        + r"total=\+?([0-9]+)"
    )


_PATTERNS = {"some": _line_pattern("some"), "full": _line_pattern("full")}
_UINT64_MAX = 2**64 - 1


@dataclass
class PSILine:
    """Averages (percent over 10, 60 and 300 seconds) and total stall time in µs."""

    avg10: float = 0.0
    avg60: float = 0.0
    avg300: float = 0.0
    total: int = 0


@dataclass
class PSIStats:
    """Pressure stall information of one resource."""

    some: Optional[PSILine] = None
    full: Optional[PSILine] = None


def _parse_line(prefix: str, line: str) -> PSILine:
    match = _PATTERNS[prefix].match(line)
    if match is None:
        raise ValueError(f"malformed {prefix} pressure line: {line!r}")
    avg10, avg60, avg300, total = match.groups()
    total_value = int(total)
    if total_value > _UINT64_MAX:
        raise ValueError(f"total out of range: {total!r}")
    return PSILine(float(avg10), float(avg60), float(avg300), total_value)


def parse_psi_stats(resource: str, stream: Iterable[str]) -> PSIStats:
    """Parse the lines of a pressure file; lines of unknown kind are ignored."""
    stats = PSIStats()
    for raw_line in stream:
        line = raw_line.rstrip("\n")
        prefix = line.split(" ")[0]
        if prefix == "some":
            stats.some = _parse_line(prefix, line)
        elif prefix == "full":
            stats.full = _parse_line(prefix, line)
    return stats