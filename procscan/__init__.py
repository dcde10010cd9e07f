"""Parsers for the Linux /proc pseudo-filesystem: processes, network, pressure, mount and NFS statistics."""

__version__ = "0.1.0"