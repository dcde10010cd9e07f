"""Parsers for NFS client and server RPC statistics."""