"""Statistics records of /proc/net/rpc/nfs and /proc/net/rpc/nfsd, and their line parsers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional, Sequence, TypeVar

_T = TypeVar("_T")


@dataclass
class ReplyCache:
    """The "rc" line."""

    hits: int = 0
    misses: int = 0
    no_cache: int = 0


@dataclass
class FileHandles:
    """The "fh" line."""

    stale: int = 0
    total_lookups: int = 0
    anon_lookups: int = 0
    dir_no_cache: int = 0
    no_dir_no_cache: int = 0


@dataclass
class InputOutput:
    """The "io" line."""

    read: int = 0
    write: int = 0


@dataclass
class Threads:
    """The "th" line."""

    threads: int = 0
    full_cnt: int = 0


@dataclass
class ReadAheadCache:
    """The "ra" line."""

    cache_size: int = 0
    cache_histogram: list[int] = field(default_factory=list)
    not_found: int = 0


@dataclass
class Network:
    """The "net" line."""

    net_count: int = 0
    udp_count: int = 0
    tcp_count: int = 0
    tcp_connect: int = 0


@dataclass
class ClientRPC:
    """The client "rpc" line."""

    rpc_count: int = 0
    retransmissions: int = 0
    auth_refreshes: int = 0


@dataclass
class ServerRPC:
    """The server "rpc" line."""

    rpc_count: int = 0
    bad_cnt: int = 0
    bad_fmt: int = 0
    bad_auth: int = 0
    badc_int: int = 0


@dataclass
class V2Stats:
    """The "proc2" line."""

    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    root: int = 0
    lookup: int = 0
    read_link: int = 0
    read: int = 0
    wr_cache: int = 0
    write: int = 0
    create: int = 0
    remove: int = 0
    rename: int = 0
    link: int = 0
    sym_link: int = 0
    mk_dir: int = 0
    rm_dir: int = 0
    read_dir: int = 0
    fs_stat: int = 0


@dataclass
class V3Stats:
    """The "proc3" line."""

    null: int = 0
    get_attr: int = 0
    set_attr: int = 0
    lookup: int = 0
    access: int = 0
    read_link: int = 0
    read: int = 0
    write: int = 0
    create: int = 0
    mk_dir: int = 0
    sym_link: int = 0
    mk_nod: int = 0
    remove: int = 0
    rm_dir: int = 0
    rename: int = 0
    link: int = 0
    read_dir: int = 0
    read_dir_plus: int = 0
    fs_stat: int = 0
    fs_info: int = 0
    path_conf: int = 0
    commit: int = 0


@dataclass
class ClientV4Stats:
    """The client "proc4" line."""

    null: int = 0
    read: int = 0
    write: int = 0
    commit: int = 0
    open: int = 0
    open_confirm: int = 0
    open_noattr: int = 0
    open_downgrade: int = 0
    close: int = 0
    setattr: int = 0
    fs_info: int = 0
    renew: int = 0
    set_client_id: int = 0
    set_client_id_confirm: int = 0
    lock: int = 0
    lockt: int = 0
    locku: int = 0
    access: int = 0
    getattr: int = 0
    lookup: int = 0
    lookup_root: int = 0
    remove: int = 0
    rename: int = 0
    link: int = 0
    symlink: int = 0
    create: int = 0
    pathconf: int = 0
    stat_fs: int = 0
    read_link: int = 0
    read_dir: int = 0
    server_caps: int = 0
    deleg_return: int = 0
    get_acl: int = 0
    set_acl: int = 0
    fs_locations: int = 0
    release_lockowner: int = 0
    secinfo: int = 0
    fsid_present: int = 0
    exchange_id: int = 0
    create_session: int = 0
    destroy_session: int = 0
    sequence: int = 0
    get_lease_time: int = 0
    reclaim_complete: int = 0
    layout_get: int = 0
    get_device_info: int = 0
    layout_commit: int = 0
    layout_return: int = 0
    secinfo_no_name: int = 0
    test_state_id: int = 0
    free_state_id: int = 0
    get_device_list: int = 0
    bind_conn_to_session: int = 0
    destroy_client_id: int = 0
    seek: int = 0
    allocate: int = 0
    de_allocate: int = 0
    layout_stats: int = 0
    clone: int = 0


@dataclass
class ServerV4Stats:
    """The server "proc4" line."""

    null: int = 0
    compound: int = 0


@dataclass
class V4Ops:
    """The "proc4ops" line: counters of NFSv4 operations."""

    op0_unused: int = 0
    op1_unused: int = 0
    op2_future: int = 0
    access: int = 0
    close: int = 0
    commit: int = 0
    create: int = 0
    deleg_purge: int = 0
    deleg_return: int = 0
    get_attr: int = 0
    get_fh: int = 0
    link: int = 0
    lock: int = 0
    lockt: int = 0
    locku: int = 0
    lookup: int = 0
    lookup_root: int = 0
    nverify: int = 0
    open: int = 0
    open_attr: int = 0
    open_confirm: int = 0
    open_dgrd: int = 0
    put_fh: int = 0
    put_pub_fh: int = 0
    put_root_fh: int = 0
    read: int = 0
    read_dir: int = 0
    read_link: int = 0
    remove: int = 0
    rename: int = 0
    renew: int = 0
    restore_fh: int = 0
    save_fh: int = 0
    sec_info: int = 0
    set_attr: int = 0
    verify: int = 0
    write: int = 0
    rel_lock_owner: int = 0


@dataclass
class ClientRPCStats:
    """All statistics of /proc/net/rpc/nfs."""

    network: Network = field(default_factory=Network)
    client_rpc: ClientRPC = field(default_factory=ClientRPC)
    v2_stats: V2Stats = field(default_factory=V2Stats)
    v3_stats: V3Stats = field(default_factory=V3Stats)
    client_v4_stats: ClientV4Stats = field(default_factory=ClientV4Stats)


@dataclass
class ServerRPCStats:
    """All statistics of /proc/net/rpc/nfsd."""

    reply_cache: ReplyCache = field(default_factory=ReplyCache)
    file_handles: FileHandles = field(default_factory=FileHandles)
    input_output: InputOutput = field(default_factory=InputOutput)
    threads: Threads = field(default_factory=Threads)
    read_ahead_cache: ReadAheadCache = field(default_factory=ReadAheadCache)
    network: Network = field(default_factory=Network)
    server_rpc: ServerRPC = field(default_factory=ServerRPC)
    v2_stats: V2Stats = field(default_factory=V2Stats)
    v3_stats: V3Stats = field(default_factory=V3Stats)
    server_v4_stats: ServerV4Stats = field(default_factory=ServerV4Stats)
    v4_ops: V4Ops = field(default_factory=V4Ops)


def _fixed(cls: type[_T], label: str, values: Sequence[int]) -> _T:
    """Build a record from a line holding exactly one value per field."""
    if len(values) != len(fields(cls)):
        raise ValueError(f"invalid {label} line {list(values)}")
    return cls(*values)


def _counted(
    label: str,
    values: Sequence[int],
    minimum: int = 0,
    exact: Optional[int] = None,
) -> list[int]:
    """Check a line whose first value counts the values that follow it."""
    if not values:
        raise ValueError(f"invalid {label} line {list(values)}")
    count = values[0]
    if (
        len(values) - 1 != count
        or count < minimum
        or (exact is not None and count != exact)
    ):
        raise ValueError(f"invalid {label} line {list(values)}")
    return list(values[1:])


def _from_counted(cls: type[_T], values: list[int]) -> _T:
    return cls(*values[: len(fields(cls))])


def parse_reply_cache(values: Sequence[int]) -> ReplyCache:
    """Parse the values of an "rc" line."""
    return _fixed(ReplyCache, "ReplyCache", values)


def parse_file_handles(values: Sequence[int]) -> FileHandles:
    """Parse the values of an "fh" line."""
    return _fixed(FileHandles, "FileHandles,", values)


def parse_input_output(values: Sequence[int]) -> InputOutput:
    """Parse the values of an "io" line."""
    return _fixed(InputOutput, "InputOutput", values)


def parse_threads(values: Sequence[int]) -> Threads:
    """Parse the values of a "th" line."""
    return _fixed(Threads, "Threads", values)


def parse_read_ahead_cache(values: Sequence[int]) -> ReadAheadCache:
    """Parse the values of an "ra" line."""
    if len(values) != 12:
        raise ValueError(f"invalid ReadAheadCache line {list(values)}")
    return ReadAheadCache(
        cache_size=values[0],
        cache_histogram=list(values[1:11]),
        not_found=values[11],
    )


def parse_network(values: Sequence[int]) -> Network:
    """Parse the values of a "net" line."""
    return _fixed(Network, "Network", values)


def parse_server_rpc(values: Sequence[int]) -> ServerRPC:
    """Parse the values of a server "rpc" line."""
    return _fixed(ServerRPC, "RPC", values)


def parse_client_rpc(values: Sequence[int]) -> ClientRPC:
    """Parse the values of a client "rpc" line."""
    return _fixed(ClientRPC, "RPC", values)


def parse_v2_stats(values: Sequence[int]) -> V2Stats:
    """Parse the values of a "proc2" line, count first."""
    return _from_counted(V2Stats, _counted("V2Stats", values, minimum=18))


def parse_v3_stats(values: Sequence[int]) -> V3Stats:
    """Parse the values of a "proc3" line, count first."""
    return _from_counted(V3Stats, _counted("V3Stats", values, minimum=22))


def parse_client_v4_stats(values: Sequence[int]) -> ClientV4Stats:
    """Parse the values of a client "proc4" line, count first.

    Older kernels report fewer operations; the missing ones are zero.
    """
    counters = _counted("ClientV4Stats", values)
    wanted = len(fields(ClientV4Stats))
    counters += [0] * (wanted - len(counters))
    return _from_counted(ClientV4Stats, counters)


def parse_server_v4_stats(values: Sequence[int]) -> ServerV4Stats:
    """Parse the values of a server "proc4" line, count first."""
    return _from_counted(ServerV4Stats, _counted("V4Stats", values, exact=2))


def parse_v4_ops(values: Sequence[int]) -> V4Ops:
    """Parse the values of a "proc4ops" line, count first."""
    return _from_counted(V4Ops, _counted("V4Ops", values, minimum=39))