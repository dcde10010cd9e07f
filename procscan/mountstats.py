"""Parsing of /proc/[pid]/mountstats."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Iterator, Optional

_DEVICE_ENTRY_LEN = 8
_STAT_VERSION_10 = "1.0"
_STAT_VERSION_11 = "1.1"

# Expected number of transport fields (after the protocol name) per version.
_TRANSPORT_LENGTHS = {
    _STAT_VERSION_10: {"tcp": 10, "udp": 7},
    _STAT_VERSION_11: {"tcp": 13, "udp": 10},
}
_TRANSPORT_FULL_LEN = 13
_OPERATION_FIELDS = 9

_UINT64_MAX = 2**64 - 1
_UINT_RE = re.compile(r"[0-9]+")
_SECONDS_RE = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")

_DEVICE_FORMAT = ((0, "device"), (2, "mounted"), (3, "on"), (5, "with"), (6, "fstype"))
_NFS_TYPES = ("nfs", "nfs4")


@dataclass
class NFSBytesStats:
    """Byte counters of an NFS client."""

    read: int = 0
    write: int = 0
    direct_read: int = 0
    direct_write: int = 0
    read_total: int = 0
    write_total: int = 0
    read_pages: int = 0
    write_pages: int = 0


@dataclass
class NFSEventsStats:
    """Counters of NFS event occurrences."""

    inode_revalidate: int = 0
    dnode_revalidate: int = 0
    data_invalidate: int = 0
    attribute_invalidate: int = 0
    vfs_open: int = 0
    vfs_lookup: int = 0
    vfs_access: int = 0
    vfs_update_page: int = 0
    vfs_read_page: int = 0
    vfs_read_pages: int = 0
    vfs_write_page: int = 0
    vfs_write_pages: int = 0
    vfs_getdents: int = 0
    vfs_setattr: int = 0
    vfs_flush: int = 0
    vfs_fsync: int = 0
    vfs_lock: int = 0
    vfs_file_release: int = 0
    congestion_wait: int = 0
    truncation: int = 0
    write_extension: int = 0
    silly_rename: int = 0
    short_read: int = 0
    short_write: int = 0
    jukebox_delay: int = 0
    pnfs_read: int = 0
    pnfs_write: int = 0


@dataclass
class NFSOperationStats:
    """Statistics for a single NFS operation."""

    operation: str
    requests: int = 0
    transmissions: int = 0
    major_timeouts: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0
    cumulative_queue_milliseconds: int = 0
    cumulative_total_response_milliseconds: int = 0
    cumulative_total_request_milliseconds: int = 0


@dataclass
class NFSTransportStats:
    """Statistics of the RPC transport of an NFS mount."""

    protocol: str = ""
    port: int = 0
    bind: int = 0
    connect: int = 0
    connect_idle_time: int = 0
    idle_time_seconds: int = 0
    sends: int = 0
    receives: int = 0
    bad_transaction_ids: int = 0
    cumulative_active_requests: int = 0
    cumulative_backlog: int = 0
    # Only present with stat version 1.1.
    maximum_rpc_slots_used: int = 0
    cumulative_sending_queue: int = 0
    cumulative_pending_queue: int = 0


@dataclass
class MountStatsNFS:
    """Detailed statistics of an NFSv3 or NFSv4 mount."""

    stat_version: str
    opts: dict[str, str] = field(default_factory=dict)
    age: timedelta = field(default_factory=timedelta)
    bytes: NFSBytesStats = field(default_factory=NFSBytesStats)
    events: NFSEventsStats = field(default_factory=NFSEventsStats)
    operations: list[NFSOperationStats] = field(default_factory=list)
    transport: NFSTransportStats = field(default_factory=NFSTransportStats)


@dataclass
class Mount:
    """A device mount, with NFS statistics where available."""

    device: str
    mount: str
    type: str
    stats: Optional[MountStatsNFS] = None


def _parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_uints(fields: Iterable[str]) -> list[int]:
    return [_parse_uint(f) for f in fields]


def parse_mount_stats(stream: Iterable[str]) -> list[Mount]:
    """Parse the lines of a mountstats file into a list of mounts."""
    lines = iter(stream)
    mounts: list[Mount] = []
    for line in lines:
        fields = line.split()
        if not fields or fields[0] != "device":
            continue

        mount = _parse_mount(fields)
        if len(fields) > _DEVICE_ENTRY_LEN:
            if mount.type not in _NFS_TYPES:
                raise ValueError(f"cannot parse MountStats for fstype {mount.type!r}")
            stat_version = fields[8].removeprefix("statvers=")
            mount.stats = _parse_mount_stats_nfs(lines, stat_version)
        mounts.append(mount)
    return mounts


def _parse_mount(fields: list[str]) -> Mount:
    if len(fields) < _DEVICE_ENTRY_LEN or any(
        fields[i] != word for i, word in _DEVICE_FORMAT
    ):
        raise ValueError(f"invalid device entry: {fields}")
    return Mount(device=fields[1], mount=fields[4], type=fields[7])


def _parse_age(text: str) -> timedelta:
    if not _SECONDS_RE.fullmatch(text):
        raise ValueError(f"invalid duration: {text!r}")
    return timedelta(seconds=float(text))


def _parse_opts(text: str) -> dict[str, str]:
    opts = {}
    for opt in text.split(","):
        parts = opt.split("=")
        if len(parts) == 2:
            opts[parts[0]] = parts[1]
        else:
            opts[opt] = ""
    return opts


def _parse_mount_stats_nfs(lines: Iterator[str], stat_version: str) -> MountStatsNFS:
    stats = MountStatsNFS(stat_version=stat_version)
    for line in lines:
        fields = line.split()
        if not fields:
            break
        if len(fields) < 2:
            raise ValueError(f"not enough information for NFS stats: {fields}")

        key = fields[0]
        if key == "opts:":
            stats.opts.update(_parse_opts(fields[1]))
        elif key == "age:":
            stats.age = _parse_age(fields[1])
        elif key == "bytes:":
            stats.bytes = _parse_bytes_stats(fields[1:])
        elif key == "events:":
            stats.events = _parse_events_stats(fields[1:])
        elif key == "xprt:":
            if len(fields) < 3:
                raise ValueError(
                    f"not enough information for NFS transport stats: {fields}"
                )
            stats.transport = _parse_transport_stats(fields[1:], stat_version)
        elif key == "per-op":
            # Per-operation statistics come last before the next device entry.
            break

    stats.operations = _parse_operation_stats(lines)
    return stats


def _parse_bytes_stats(fields: list[str]) -> NFSBytesStats:
    if len(fields) != 8:
        raise ValueError(f"invalid NFS bytes stats: {fields}")
    return NFSBytesStats(*_parse_uints(fields))


def _parse_events_stats(fields: list[str]) -> NFSEventsStats:
    if len(fields) != 27:
        raise ValueError(f"invalid NFS events stats: {fields}")
    return NFSEventsStats(*_parse_uints(fields))


def _parse_operation_stats(lines: Iterator[str]) -> list[NFSOperationStats]:
    operations = []
    for line in lines:
        fields = line.split()
        if not fields:
            break
        if len(fields) != _OPERATION_FIELDS:
            raise ValueError(f"invalid NFS per-operations stats: {fields}")
        operations.append(
            NFSOperationStats(fields[0].removesuffix(":"), *_parse_uints(fields[1:]))
        )
    return operations


def _parse_transport_stats(fields: list[str], stat_version: str) -> NFSTransportStats:
    protocol, values = fields[0], fields[1:]

    lengths = _TRANSPORT_LENGTHS.get(stat_version)
    if lengths is None:
        raise ValueError(f"unrecognized NFS transport stats version: {stat_version!r}")
    expected = lengths.get(protocol)
    if expected is None:
        raise ValueError(
            f'invalid NFS protocol "{protocol}" in stats {stat_version} statement: {values}'
        )
    if len(values) != expected:
        raise ValueError(
            f"invalid NFS transport stats {stat_version} statement: {values}"
        )

    numbers = _parse_uints(values)
    numbers += [0] * (_TRANSPORT_FULL_LEN - len(numbers))

    # UDP has no connect count, connect idle time or idle time.
    if protocol == "udp":
        numbers = numbers[:2] + [0, 0, 0] + numbers[2:]

    return NFSTransportStats(protocol, *numbers[:_TRANSPORT_FULL_LEN])