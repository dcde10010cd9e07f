"""Parsing of /proc/net/rpc/nfs and /proc/net/rpc/nfsd."""

from __future__ import annotations

import os
import re
from typing import Callable, Iterable, Sequence, TypeVar, Union

from ..proc import DEFAULT_MOUNT_POINT, FS
from .stats import (
    ClientRPCStats,
    ServerRPCStats,
    parse_client_rpc,
    parse_client_v4_stats,
    parse_file_handles,
    parse_input_output,
    parse_network,
    parse_read_ahead_cache,
    parse_reply_cache,
    parse_server_rpc,
    parse_server_v4_stats,
    parse_threads,
    parse_v2_stats,
    parse_v3_stats,
    parse_v4_ops,
)

_UINT_RE = re.compile(r"[0-9]+")
_UINT64_MAX = 2**64 - 1

_T = TypeVar("_T")
_LineParser = Callable[[Sequence[int]], object]

_CLIENT_LINES: dict[str, tuple[str, _LineParser]] = {
    "net": ("network", parse_network),
    "rpc": ("client_rpc", parse_client_rpc),
    "proc2": ("v2_stats", parse_v2_stats),
    "proc3": ("v3_stats", parse_v3_stats),
    "proc4": ("client_v4_stats", parse_client_v4_stats),
}

_SERVER_LINES: dict[str, tuple[str, _LineParser]] = {
    "rc": ("reply_cache", parse_reply_cache),
    "fh": ("file_handles", parse_file_handles),
    "io": ("input_output", parse_input_output),
    "th": ("threads", parse_threads),
    "ra": ("read_ahead_cache", parse_read_ahead_cache),
    "net": ("network", parse_network),
    "rpc": ("server_rpc", parse_server_rpc),
    "proc2": ("v2_stats", parse_v2_stats),
    "proc3": ("v3_stats", parse_v3_stats),
    "proc4": ("server_v4_stats", parse_server_v4_stats),
    "proc4ops": ("v4_ops", parse_v4_ops),
}


def parse_uint64s(fields: Iterable[str]) -> list[int]:
    """Parse decimal unsigned 64-bit integers."""
    values = []
    for text in fields:
        if not _UINT_RE.fullmatch(text):
            raise ValueError(f"invalid unsigned integer: {text!r}")
        value = int(text)
        if value > _UINT64_MAX:
            raise ValueError(f"value out of range: {text!r}")
        values.append(value)
    return values


def _strip_line_end(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _parse_stats(
    stream: Iterable[str],
    stats: _T,
    table: dict[str, tuple[str, _LineParser]],
    label: str,
) -> _T:
    for raw_line in stream:
        line = _strip_line_end(raw_line)
        parts = line.split()
        # At least <key> <value>.
        if len(parts) < 2:
            raise ValueError(f"invalid {label} metric line {line!r}")
        key = parts[0]

        if table is _SERVER_LINES and key == "th":
            # Only the thread count and the full count are kept.
            if len(parts) < 3:
                raise ValueError(f"invalid {label} th metric line {line!r}")
            raw_values = parts[1:3]
        else:
            raw_values = parts[1:]
        try:
            values = parse_uint64s(raw_values)
        except ValueError as exc:
            raise ValueError(f"error parsing {label} metric line: {exc}") from exc

        entry = table.get(key)
        if entry is None:
            raise ValueError(f"unknown {label} metric line {key!r}")
        attribute, parser = entry
        try:
            setattr(stats, attribute, parser(values))
        except ValueError as exc:
            raise ValueError(f"errors parsing {label} metric line: {exc}") from exc
    return stats


def parse_client_rpc_stats(stream: Iterable[str]) -> ClientRPCStats:
    """Parse the lines of /proc/net/rpc/nfs."""
    return _parse_stats(stream, ClientRPCStats(), _CLIENT_LINES, "NFS")


def parse_server_rpc_stats(stream: Iterable[str]) -> ServerRPCStats:
    """Parse the lines of /proc/net/rpc/nfsd."""
    return _parse_stats(stream, ServerRPCStats(), _SERVER_LINES, "NFSd")


class NFSProcFS:
    """NFS statistics of a proc filesystem at a given mount point."""

    def __init__(self, mount_point: Union[str, os.PathLike] = DEFAULT_MOUNT_POINT):
        mount_point = os.fspath(mount_point)
        if not mount_point.strip():
            mount_point = DEFAULT_MOUNT_POINT
        self._fs = FS(mount_point)

    @property
    def mount_point(self) -> str:
        """The mount point of the proc filesystem."""
        return self._fs.mount_point

    def __repr__(self) -> str:
        return f"NFSProcFS({self.mount_point!r})"

    def client_rpc_stats(self) -> ClientRPCStats:
        """NFS client RPC statistics from net/rpc/nfs."""
        with open(self._fs.path("net", "rpc", "nfs"), encoding="utf-8") as stream:
            return parse_client_rpc_stats(stream)

    def server_rpc_stats(self) -> ServerRPCStats:
        """NFS daemon RPC statistics from net/rpc/nfsd."""
        with open(self._fs.path("net", "rpc", "nfsd"), encoding="utf-8") as stream:
            return parse_server_rpc_stats(stream)