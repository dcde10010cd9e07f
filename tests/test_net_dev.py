import pytest

from procscan.net_dev import (
    NetDev,
    NetDevLine,
    parse_net_dev,
    parse_net_dev_line,
    read_net_dev,
)

HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|"
    "bytes    packets errs drop fifo colls carrier compressed\n"
)

SYSTEM_NET_DEV = HEADER + (
    "vethf345468:     648       8    0    0    0     0          0         0"
    "      438       5    0    0    0     0       0          0\n"
    "    lo: 1664039048 1566805    0    0    0     0          0         0"
    " 1664039048 1566805    0    0    0     0       0          0\n"
    "docker0:    2568      38    0    0    0     0          0         0"
    "      438       5    0    0    0     0       0          0\n"
    "  eth0: 874354587 1036395    0    0    0     0          0         0"
    " 563352563  732147    0    0    0     0       0          0\n"
)

PROC_NET_DEV = HEADER + (
    "    lo:       0       0    0    0    0     0          0         0"
    "        0       0    0    0    0     0       0          0\n"
    "  eth0:     438       5    0    0    0     0          0         0"
    "      648       8    0    0    0     0       0          0\n"
)


def test_parse_line():
    raw = (
        "  eth0: 1 2 3    4    5     6          7         8 9  10    11    12"
        "    13     14       15          16"
    )
    have = parse_net_dev_line(raw)
    assert have == NetDevLine(
        "eth0", 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16
    )


def test_read_net_dev(tmp_path):
    path = tmp_path / "dev"
    path.write_text(SYSTEM_NET_DEV)
    net_dev = read_net_dev(path)

    expected = {
        "vethf345468": NetDevLine(
            name="vethf345468", rx_bytes=648, rx_packets=8, tx_bytes=438, tx_packets=5
        ),
        "lo": NetDevLine(
            name="lo",
            rx_bytes=1664039048,
            rx_packets=1566805,
            tx_bytes=1664039048,
            tx_packets=1566805,
        ),
        "docker0": NetDevLine(
            name="docker0", rx_bytes=2568, rx_packets=38, tx_bytes=438, tx_packets=5
        ),
        "eth0": NetDevLine(
            name="eth0",
            rx_bytes=874354587,
            rx_packets=1036395,
            tx_bytes=563352563,
            tx_packets=732147,
        ),
    }
    assert dict(net_dev) == expected


def test_proc_net_dev():
    net_dev = parse_net_dev(PROC_NET_DEV.splitlines(keepends=True))
    assert dict(net_dev) == {
        "lo": NetDevLine(name="lo"),
        "eth0": NetDevLine(
            name="eth0", rx_bytes=438, rx_packets=5, tx_bytes=648, tx_packets=8
        ),
    }


def test_headers_only_gives_empty_result():
    assert len(parse_net_dev(HEADER.splitlines())) == 0


def test_missing_colon():
    with pytest.raises(ValueError, match="missing colon"):
        parse_net_dev_line("eth0 1 2 3")


def test_empty_interface_name():
    with pytest.raises(ValueError, match="empty interface name"):
        parse_net_dev_line("   : " + " ".join(["1"] * 16))


def test_invalid_number():
    with pytest.raises(ValueError):
        parse_net_dev_line("eth0: " + " ".join(["1"] * 15 + ["x"]))


def test_negative_number_rejected():
    with pytest.raises(ValueError):
        parse_net_dev_line("eth0: -1 " + " ".join(["1"] * 15))


def test_too_few_fields():
    with pytest.raises(ValueError):
        parse_net_dev_line("eth0: 1 2 3")


def test_bad_line_in_file():
    with pytest.raises(ValueError):
        parse_net_dev((HEADER + "garbage\n").splitlines())


def test_total():
    net_dev = parse_net_dev(SYSTEM_NET_DEV.splitlines())
    total = net_dev.total()
    assert total.name == "docker0, eth0, lo, vethf345468"
    assert total.rx_bytes == 648 + 1664039048 + 2568 + 874354587
    assert total.rx_packets == 8 + 1566805 + 38 + 1036395
    assert total.tx_bytes == 438 + 1664039048 + 438 + 563352563
    assert total.tx_packets == 5 + 1566805 + 5 + 732147
    assert total.rx_errors == 0


def test_total_of_empty():
    assert NetDev().total() == NetDevLine(name="")