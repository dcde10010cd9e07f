"""Access to processes and system statistics under a proc filesystem."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Union

from .limits import ProcLimits, parse_limits
from .mountstats import Mount, parse_mount_stats
from .net_dev import NetDev, read_net_dev
from .net_unix import NetUnix, read_net_unix
from .psi import PSIStats, parse_psi_stats
from .stat import ProcStat, parse_proc_stat

DEFAULT_MOUNT_POINT = "/proc"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT32_MAX = 2**32 - 1

_IO_KEYS = (
    ("rchar", r"\+?[0-9]+"),
    ("wchar", r"\+?[0-9]+"),
    ("syscr", r"\+?[0-9]+"),
    ("syscw", r"\+?[0-9]+"),
    ("read_bytes", r"\+?[0-9]+"),
    ("write_bytes", r"\+?[0-9]+"),
    ("cancelled_write_bytes", r"[+-]?[0-9]+"),
)
_IO_RE = re.compile(
    "".join(
        rf" *{key}: *({number}) *" + (r"\n" if i < len(_IO_KEYS) - 1 else r"(?:\n|$)")
        for i, (key, number) in enumerate(_IO_KEYS)
    )
)


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


@dataclass(frozen=True)
class ProcIO:
    """I/O counters of a process, from /proc/[pid]/io."""

    rchar: int = 0
    wchar: int = 0
    syscr: int = 0
    syscw: int = 0
    read_bytes: int = 0
    write_bytes: int = 0
    cancelled_write_bytes: int = 0


@dataclass(frozen=True)
class Namespace:
    """A namespace a process belongs to."""

    type: str
    inode: int


def parse_proc_io(text: str) -> ProcIO:
    """Parse the contents of an io file."""
    match = _IO_RE.match(text)
    if match is None:
        raise ValueError(f"unexpected io format: {text!r}")
    return ProcIO(*(int(group) for group in match.groups()))


@dataclass(frozen=True, order=True)
class FS:
    """A proc filesystem mounted at a given mount point."""

    mount_point: str = DEFAULT_MOUNT_POINT

    def __post_init__(self) -> None:
        mount_point = os.fspath(self.mount_point)
        object.__setattr__(self, "mount_point", mount_point)
        if not os.path.isdir(os.stat(mount_point) and mount_point):
            raise NotADirectoryError(f"mount point {mount_point} is not a directory")

    def path(self, *args: str) -> str:
        """Join path elements onto the mount point."""
        return os.path.join(self.mount_point, *args)

    def self_proc(self) -> "Proc":
        """Return the process reached through the 'self' link."""
        target = os.readlink(self.path("self"))
        pid = _parse_int(target.replace(self.mount_point, ""))
        return self.proc(pid)

    def proc(self, pid: int) -> "Proc":
        """Return the process with the given pid; raise if it does not exist."""
        os.stat(self.path(str(pid)))
        return Proc(pid=pid, fs=self)

    def all_procs(self) -> list["Proc"]:
        """Return all processes currently listed under the mount point."""
        procs = []
        for name in os.listdir(self.path()):
            if _INT_RE.fullmatch(name):
                procs.append(Proc(pid=int(name), fs=self))
        return procs

    def net_dev(self) -> NetDev:
        """Network interface statistics from net/dev."""
        return read_net_dev(self.path("net", "dev"))

    def net_unix(self) -> NetUnix:
        """Unix domain sockets from net/unix."""
        return read_net_unix(self.path("net", "unix"))

    def psi_stats_for_resource(self, resource: str) -> PSIStats:
        """Pressure stall information for a resource such as cpu, memory or io."""
        try:
            stream = open(self.path("pressure", resource), encoding="utf-8")
        except OSError as exc:
            raise OSError(f"psi_stats: unavailable for {resource}") from exc
        with stream:
            return parse_psi_stats(resource, stream)


@dataclass(frozen=True, order=True)
class Proc:
    """A running process."""

    pid: int
    fs: FS = field(default_factory=FS)

    def path(self, *args: str) -> str:
        """Path of a file in the process directory."""
        return self.fs.path(str(self.pid), *args)

    def _read_bytes(self, *args: str) -> bytes:
        with open(self.path(*args), "rb") as stream:
            return stream.read()

    def _readlink_or_empty(self, name: str) -> str:
        try:
            return os.readlink(self.path(name))
        except FileNotFoundError:
            return ""

    def cmdline(self) -> list[str]:
        """Command line arguments of the process."""
        data = self._read_bytes("cmdline")
        if not data:
            return []
        return data.rstrip(b"\x00").decode("utf-8", "surrogateescape").split("\x00")

    def comm(self) -> str:
        """Command name of the process."""
        return self._read_bytes("comm").decode("utf-8", "surrogateescape").strip()

    def executable(self) -> str:
        """Absolute path of the executable, or '' if unavailable."""
        return self._readlink_or_empty("exe")

    def cwd(self) -> str:
        """Current working directory, or '' if unavailable."""
        return self._readlink_or_empty("cwd")

    def root_dir(self) -> str:
        """Root directory as set by chroot, or '' if unavailable."""
        return self._readlink_or_empty("root")

    def _fd_names(self) -> list[str]:
        return os.listdir(self.path("fd"))

    def file_descriptors(self) -> list[int]:
        """Currently open file descriptor numbers."""
        fds = []
        for name in self._fd_names():
            try:
                fds.append(_parse_int(name))
            except ValueError as exc:
                raise ValueError(f"could not parse fd {name}: {exc}") from exc
        return fds

    def file_descriptor_targets(self) -> list[str]:
        """Link targets of the open file descriptors; '' where not a link."""
        targets = []
        for name in self._fd_names():
            try:
                targets.append(os.readlink(self.path("fd", name)))
            except OSError:
                targets.append("")
        return targets

    def file_descriptors_len(self) -> int:
        """Number of open file descriptors."""
        return len(self._fd_names())

    def mount_stats(self) -> list[Mount]:
        """Mount statistics of the process's mount namespace."""
        with open(self.path("mountstats"), encoding="utf-8") as stream:
            return parse_mount_stats(stream)

    def environ(self) -> list[str]:
        """Environment entries of the process."""
        data = self._read_bytes("environ").decode("utf-8", "surrogateescape")
        return data.split("\x00")[:-1]

    def io(self) -> ProcIO:
        """I/O counters of the process."""
        return parse_proc_io(self._read_bytes("io").decode("utf-8", "replace"))

    def namespaces(self) -> dict[str, Namespace]:
        """Namespaces of the process, keyed by entry name."""
        result = {}
        for name in os.listdir(self.path("ns")):
            target = os.readlink(self.path("ns", name))
            kind, sep, rest = target.partition(":")
            if not sep:
                raise ValueError(
                    f"failed to parse namespace type and inode from '{target}'"
                )
            inode_text = rest.strip("[]")
            if not inode_text.isdigit() or int(inode_text) > _UINT32_MAX:
                raise ValueError(f"failed to parse inode from '{rest}'")
            result[name] = Namespace(kind, int(inode_text))
        return result

    def limits(self) -> ProcLimits:
        """Soft resource limits of the process."""
        with open(self.path("limits"), encoding="utf-8") as stream:
            return parse_limits(stream)

    def stat(self) -> ProcStat:
        """Status information of the process."""
        return parse_proc_stat(self._read_bytes("stat"), self.pid)

    def net_dev(self) -> NetDev:
        """Network interface statistics in the process's network namespace."""
        return read_net_dev(self.path("net", "dev"))


def self_proc() -> Proc:
    """The current process, under the default mount point."""
    return FS().self_proc()


def new_proc(pid: int) -> Proc:
    """The process with the given pid, under the default mount point."""
    return FS().proc(pid)


def all_procs() -> list[Proc]:
    """All processes under the default mount point."""
    return FS().all_procs()