import pytest

from procscan.nfs.stats import (
    ClientRPC,
    ClientRPCStats,
    ClientV4Stats,
    FileHandles,
    InputOutput,
    Network,
    ReplyCache,
    ServerRPC,
    ServerRPCStats,
    ServerV4Stats,
    Threads,
    V2Stats,
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


def _ints(text):
    return [int(t) for t in text.split()]


PROC2 = _ints("18 2 69 0 0 4410 0 0 0 0 0 0 0 0 0 0 0 99 2")
PROC3_SERVER = _ints("22 2 112 0 2719 111 0 0 0 0 0 0 0 0 0 0 0 27 216 0 2 1 0")
PROC3_CLIENT = _ints(
    "22 0 1061909262 48906 4077635 117661341 5 29391916 2570425 2993289 590 "
    "0 0 7815 15 1130 0 3983 92385 13332 2 1 23729"
)
PROC4_OLD = _ints(
    "48 98 51 54 83 85 23 24 1 28 73 68 83 12 84 39 68 59 58 88 29 74 69 96 "
    "21 84 15 53 86 54 66 56 97 36 49 32 85 81 11 58 32 67 13 28 35 90 1 26 1337"
)
PROC4_NEW = _ints(
    "61 1 0 0 0 0 0 0 0 0 0 0 0 1 1 0 0 0 0 0 0 0 2 0 0 0 0 0 0 0 0 0 0 0 0 0 "
    "0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0"
)
PROC4OPS = _ints(
    "72 0 0 0 1098 2 0 0 0 0 8179 5896 0 0 0 0 5900 0 0 2 0 2 0 9609 0 2 150 "
    "1272 0 0 0 1236 0 0 0 0 3 3" + " 0" * 35
)


def test_reply_cache():
    assert parse_reply_cache([0, 6, 18622]) == ReplyCache(0, 6, 18622)


def test_file_handles():
    assert parse_file_handles([0, 0, 0, 0, 0]) == FileHandles()


def test_input_output():
    assert parse_input_output([157286400, 0]) == InputOutput(read=157286400, write=0)


def test_threads():
    assert parse_threads([8, 0]) == Threads(threads=8, full_cnt=0)


def test_read_ahead_cache():
    ra = parse_read_ahead_cache(_ints("32 0 0 0 0 0 0 0 0 0 0 0"))
    assert ra.cache_size == 32
    assert ra.cache_histogram == [0, 0, 0, 0, 0, 0, 0, 0, 0, 0]
    assert ra.not_found == 0


def test_read_ahead_cache_histogram_order():
    values = list(range(100, 112))
    ra = parse_read_ahead_cache(values)
    assert ra.cache_histogram == values[1:11]
    assert ra.not_found == values[11]


def test_network():
    assert parse_network([18628, 0, 18628, 6]) == Network(18628, 0, 18628, 6)


def test_server_rpc():
    assert parse_server_rpc([18628, 0, 0, 0, 0]) == ServerRPC(rpc_count=18628)


def test_client_rpc():
    rpc = parse_client_rpc([1218785755, 374636, 1218815394])
    assert rpc == ClientRPC(1218785755, 374636, 1218815394)


@pytest.mark.parametrize(
    "parser, values",
    [
        (parse_reply_cache, [1, 2]),
        (parse_file_handles, [1, 2, 3, 4]),
        (parse_input_output, [1]),
        (parse_threads, [1, 2, 3]),
        (parse_read_ahead_cache, [1] * 11),
        (parse_network, [1, 2, 3, 4, 5]),
        (parse_server_rpc, [1, 2, 3]),
        (parse_client_rpc, [1, 2, 3, 4, 5]),
    ],
)
def test_fixed_length_lines_reject_wrong_length(parser, values):
    with pytest.raises(ValueError):
        parser(values)


def test_v2_stats():
    v2 = parse_v2_stats(PROC2)
    assert v2.null == 2
    assert v2.get_attr == 69
    assert v2.lookup == 4410
    assert v2.read_dir == 99
    assert v2.fs_stat == 2
    assert v2.write == 0


def test_v3_stats_server_line():
    v3 = parse_v3_stats(PROC3_SERVER)
    assert v3.null == 2
    assert v3.get_attr == 112
    assert v3.lookup == 2719
    assert v3.access == 111
    assert v3.read_dir == 27
    assert v3.read_dir_plus == 216
    assert v3.fs_info == 2
    assert v3.path_conf == 1
    assert v3.commit == 0


def test_v3_stats_client_line():
    v3 = parse_v3_stats(PROC3_CLIENT)
    assert v3.get_attr == 1061909262
    assert v3.access == 117661341
    assert v3.read == 29391916
    assert v3.commit == 23729


@pytest.mark.parametrize(
    "parser", [parse_v2_stats, parse_v3_stats, parse_client_v4_stats, parse_v4_ops]
)
def test_counted_lines_reject_count_mismatch(parser):
    with pytest.raises(ValueError):
        parser([5, 1, 2])


@pytest.mark.parametrize(
    "parser",
    [parse_v2_stats, parse_v3_stats, parse_client_v4_stats, parse_server_v4_stats, parse_v4_ops],
)
def test_counted_lines_reject_empty(parser):
    with pytest.raises(ValueError):
        parser([])


def test_v2_stats_rejects_too_few_operations():
    with pytest.raises(ValueError):
        parse_v2_stats([3, 1, 2, 3])


def test_v3_stats_rejects_too_few_operations():
    with pytest.raises(ValueError):
        parse_v3_stats(PROC2)


def test_client_v4_stats_old_kernel_is_padded():
    v4 = parse_client_v4_stats(PROC4_OLD)
    assert v4.null == 98
    assert v4.read == 51
    assert v4.getattr == 88
    assert v4.layout_return == 1337
    assert v4.secinfo_no_name == 0
    assert v4.clone == 0


def test_client_v4_stats_full_line():
    v4 = parse_client_v4_stats(PROC4_NEW)
    assert v4.null == 1
    assert v4.set_client_id == 1
    assert v4.set_client_id_confirm == 1
    assert v4.remove == 2
    assert v4.clone == 0


def test_client_v4_stats_does_not_change_input():
    values = list(PROC4_OLD)
    parse_client_v4_stats(values)
    assert values == PROC4_OLD


def test_server_v4_stats():
    assert parse_server_v4_stats([2, 2, 10853]) == ServerV4Stats(null=2, compound=10853)


def test_server_v4_stats_requires_exactly_two():
    with pytest.raises(ValueError):
        parse_server_v4_stats([3, 1, 2, 3])


def test_v4_ops():
    ops = parse_v4_ops(PROC4OPS)
    assert ops.op0_unused == 0
    assert ops.access == 1098
    assert ops.close == 2
    assert ops.get_attr == 8179
    assert ops.get_fh == 5896
    assert ops.lookup == 5900
    assert ops.open == 2
    assert ops.open_confirm == 2
    assert ops.put_fh == 9609
    assert ops.put_root_fh == 2
    assert ops.read == 150
    assert ops.read_dir == 1272
    assert ops.renew == 1236
    assert ops.verify == 3
    assert ops.write == 3
    assert ops.rel_lock_owner == 0


def test_v4_ops_rejects_too_few_operations():
    with pytest.raises(ValueError):
        parse_v4_ops([38] + [0] * 38)


def test_aggregate_defaults_are_independent():
    first = ServerRPCStats()
    second = ServerRPCStats()
    first.read_ahead_cache.cache_histogram.append(1)
    assert second.read_ahead_cache.cache_histogram == []
    assert ClientRPCStats().v2_stats == V2Stats()
    assert ClientRPCStats().client_v4_stats == ClientV4Stats()