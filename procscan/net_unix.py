"""Parsing of /proc/net/unix."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Iterable, Union

_KERNEL_PTR_IDX = 0
_REF_COUNT_IDX = 1
_FLAGS_IDX = 3
_TYPE_IDX = 4
_STATE_IDX = 5
_INODE_IDX = 6
# Inode and Path are optional.
_STATIC_FIELDS = 6

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_SIGNED_HEX_RE = re.compile(r"[+-]?[0-9a-fA-F]+")
_DEC_RE = re.compile(r"[0-9]+")


class NetUnixType(int):
    """Socket type of a unix domain socket."""

    STREAM = 1
    DGRAM = 2
    SEQPACKET = 5

    def __str__(self) -> str:
        return {1: "stream", 2: "dgram", 5: "seqpacket"}.get(int(self), "unknown")


class NetUnixFlags(int):
    """Flags of a unix domain socket."""

    LISTEN = 1 << 16

    def __str__(self) -> str:
        return "listen" if int(self) == self.LISTEN else "default"


class NetUnixState(int):
    """Connection state of a unix domain socket."""

    UNCONNECTED = 1
    CONNECTING = 2
    CONNECTED = 3
    DISCONNECTED = 4

    def __str__(self) -> str:
        return {
            1: "unconnected",
            2: "connecting",
            3: "connected",
            4: "disconnected",
        }.get(int(self), "unknown")


@dataclass
class NetUnixLine:
    """One socket entry of /proc/net/unix."""

    kernel_ptr: str
    ref_count: int = 0
    protocol: int = 0
    flags: NetUnixFlags = NetUnixFlags(0)
    type: NetUnixType = NetUnixType(0)
    state: NetUnixState = NetUnixState(0)
    inode: int = 0
    path: str = ""


@dataclass
class NetUnix:
    """All socket entries of /proc/net/unix."""

    rows: list[NetUnixLine] = field(default_factory=list)


def _parse_hex_uint(text: str, bits: int) -> int:
    if not _HEX_RE.fullmatch(text):
        raise ValueError(f"invalid hexadecimal number: {text!r}")
    value = int(text, 16)
    if value >= 1 << bits:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_hex_int(text: str, bits: int) -> int:
    if not _SIGNED_HEX_RE.fullmatch(text):
        raise ValueError(f"invalid hexadecimal number: {text!r}")
    value = int(text, 16)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_dec_uint(text: str) -> int:
    if not _DEC_RE.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value >= 1 << 64:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _parse_kernel_ptr(text: str) -> str:
    if not text.endswith(":"):
        raise ValueError("Invalid Num(the kernel table slot number) format")
    return text[:-1]


def _parse_field(fields: list[str], index: int, label: str, parser):
    text = fields[index]
    try:
        return parser(text)
    except ValueError as exc:
        raise ValueError(f"Parse Unix domain {label}({text}) failed: {exc}") from exc


def _parse_line(line: str, has_inode: bool, min_fields: int) -> NetUnixLine:
    fields = line.split()
    if len(fields) < min_fields:
        raise ValueError(
            f"Parse Unix domain failed: expect at least {min_fields} fields "
            f"but got {len(fields)}"
        )

    row = NetUnixLine(
        kernel_ptr=_parse_field(fields, _KERNEL_PTR_IDX, "num", _parse_kernel_ptr),
        ref_count=_parse_field(
            fields, _REF_COUNT_IDX, "ref count", lambda t: _parse_hex_uint(t, 32)
        ),
        flags=NetUnixFlags(
            _parse_field(fields, _FLAGS_IDX, "flags", lambda t: _parse_hex_uint(t, 32))
        ),
        type=NetUnixType(
            _parse_field(fields, _TYPE_IDX, "type", lambda t: _parse_hex_uint(t, 16))
        ),
        state=NetUnixState(
            _parse_field(fields, _STATE_IDX, "state", lambda t: _parse_hex_int(t, 8))
        ),
    )
    if has_inode:
        row.inode = _parse_field(fields, _INODE_IDX, "inode", _parse_dec_uint)

    if len(fields) > min_fields:
        path_index = _INODE_IDX + 1 if has_inode else _INODE_IDX
        row.path = fields[path_index]
    return row


def parse_net_unix(stream: Iterable[str]) -> NetUnix:
    """Parse the lines of a net/unix file, the first being its header.

    The Inode column is read only when the header names it.
    """
    lines = iter(stream)
    header = next(lines, "")
    has_inode = "Inode" in header
    min_fields = _STATIC_FIELDS + 1 if has_inode else _STATIC_FIELDS

    return NetUnix(rows=[_parse_line(line, has_inode, min_fields) for line in lines])


def read_net_unix(path: Union[str, os.PathLike]) -> NetUnix:
    """Read and parse the net/unix file at the given path."""
    with open(path, encoding="utf-8") as stream:
        return parse_net_unix(stream)