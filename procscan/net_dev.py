"""Parsing of /proc/net/dev and /proc/[pid]/net/dev."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from typing import Iterable, Union

_UINT64_MAX = 2**64 - 1
_UINT_RE = re.compile(r"[0-9]+")
_HEADER_LINES = 2
_COUNTER_FIELDS = 16


@dataclass
class NetDevLine:
    """Counters of a single network interface."""

    name: str
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0
    rx_fifo: int = 0
    rx_frame: int = 0
    rx_compressed: int = 0
    rx_multicast: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0
    tx_fifo: int = 0
    tx_collisions: int = 0
    tx_carrier: int = 0
    tx_compressed: int = 0


_COUNTER_NAMES = tuple(f.name for f in fields(NetDevLine) if f.name != "name")


class NetDev(dict[str, NetDevLine]):
    """Interface statistics keyed by interface name."""

    def total(self) -> NetDevLine:
        """Sum the counters of all interfaces.

        The name of the result is a sorted, comma separated list of the
        interface names.
        """
        sums = {
            counter: sum(getattr(line, counter) for line in self.values())
            for counter in _COUNTER_NAMES
        }
        name = ", ".join(sorted(line.name for line in self.values()))
        return NetDevLine(name=name, **sums)


def _parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_net_dev_line(raw_line: str) -> NetDevLine:
    """Parse one interface line of a net/dev file (header lines excluded)."""
    name, sep, rest = raw_line.partition(":")
    if not sep:
        raise ValueError("invalid net/dev line, missing colon")
    name = name.strip()
    if not name:
        raise ValueError("invalid net/dev line, empty interface name")

    values = rest.split()
    if len(values) < _COUNTER_FIELDS:
        raise ValueError(
            f"invalid net/dev line, expected {_COUNTER_FIELDS} fields "
            f"but got {len(values)}"
        )
    counters = [_parse_uint(v) for v in values[:_COUNTER_FIELDS]]
    return NetDevLine(name, *counters)


def parse_net_dev(stream: Iterable[str]) -> NetDev:
    """Parse the lines of a net/dev file, skipping its two header lines."""
    net_dev = NetDev()
    for number, raw_line in enumerate(stream):
        if number < _HEADER_LINES:
            continue
        line = parse_net_dev_line(raw_line)
        net_dev[line.name] = line
    return net_dev


def read_net_dev(path: Union[str, os.PathLike]) -> NetDev:
    """Read and parse the net/dev file at the given path."""
    with open(path, encoding="utf-8") as stream:
        return parse_net_dev(stream)