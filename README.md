# procscan

Read and parse the Linux `/proc` pseudo-filesystem into plain Python objects
(dataclasses, lists and dicts).

procscan covers:

- processes (`procscan.proc`): command line, command name, executable,
  working and root directory, open file descriptors and their targets,
  environment, I/O counters, namespaces, resource limits and
  `/proc/[pid]/stat`
- `/proc/[pid]/mountstats`, with detailed NFS statistics
  (`procscan.mountstats`)
- `/proc/net/dev` network interface counters (`procscan.net_dev`)
- `/proc/net/unix` Unix domain sockets (`procscan.net_unix`)
- `/proc/pressure/*` pressure stall information (`procscan.psi`)
- `/proc/[pid]/limits` (`procscan.limits`) and `/proc/[pid]/stat`
  (`procscan.stat`)
- `/proc/net/rpc/nfs` and `/proc/net/rpc/nfsd` NFS client and server
  statistics (`procscan.nfs.rpc`, records in `procscan.nfs.stats`)

It has no dependencies beyond the standard library.

## Installation

```
pip install procscan
```

## Usage

### Processes

```python
from procscan.proc import FS, self_proc, all_procs

me = self_proc()
print(me.cmdline(), me.comm(), me.executable())
print(me.file_descriptors_len(), "open files")

stat = me.stat()
print(stat.cpu_time(), "seconds of CPU")
print(stat.resident_memory(), "bytes resident")

limits = me.limits()
print(limits.open_files)          # -1 means unlimited

for proc in all_procs():
    print(proc.pid)

fs = FS("/proc")
print(fs.proc(1).namespaces())
```

`FS` accepts any directory laid out like `/proc`, which makes it easy to work
on saved snapshots. `FS.proc(pid)` raises if the process directory does not
exist. `Proc.executable()`, `Proc.cwd()` and `Proc.root_dir()` return `""`
when the link is missing.

### Network devices and sockets

```python
from procscan.proc import FS

fs = FS("/proc")
devices = fs.net_dev()            # NetDev: a dict keyed by interface name
print(devices["lo"].rx_bytes)
print(devices.total())            # counters summed over all interfaces

for row in fs.net_unix().rows:
    print(row.path, str(row.type), str(row.state))
```

The parsers also work on any iterable of lines: `parse_net_dev`,
`parse_net_dev_line`, `parse_net_unix`, or `read_net_dev(path)` and
`read_net_unix(path)` for a file.

### Mount statistics

```python
from procscan.mountstats import parse_mount_stats

with open("/proc/self/mountstats") as stream:
    for mount in parse_mount_stats(stream):
        print(mount.device, mount.mount, mount.type)
        if mount.stats is not None:   # NFS mounts only
            print(mount.stats.age, mount.stats.transport.protocol)
```

`Proc.mount_stats()` does the same for a process.

### Pressure stall information

```python
from procscan.proc import FS

stats = FS("/proc").psi_stats_for_resource("memory")
if stats.some is not None:
    print(stats.some.avg10, stats.some.total)
```

### NFS RPC statistics

```python
from procscan.nfs.rpc import NFSProcFS, parse_server_rpc_stats

client = NFSProcFS("/proc").client_rpc_stats()
print(client.client_rpc.rpc_count)

with open("/proc/net/rpc/nfsd") as stream:
    server = parse_server_rpc_stats(stream)
print(server.v4_ops.read)
```

## Errors

Parsing failures raise `ValueError`. Missing files raise the usual `OSError`
subclasses; `FS.psi_stats_for_resource` raises `OSError` with a message
naming the unavailable resource.

## What it does not do

- `ProcStat` has no process start time as a timestamp: the system-wide
  `/proc/stat` (boot time) is not parsed, only the `starttime` field in
  clock ticks is given.
- `/proc/[pid]/mountinfo` is not parsed.
- There is no command-line tool; procscan is a library only.

## Running the tests

```
pip install -e .[test]
pytest
```