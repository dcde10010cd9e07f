import io

import pytest

from procscan.psi import PSILine, PSIStats, parse_psi_stats

CPU = "some avg10=0.10 avg60=2.00 avg300=3.85 total=15\n"
MEMORY = (
    "some avg10=0.10 avg60=2.00 avg300=3.85 total=15\n"
    "full avg10=0.20 avg60=3.00 avg300=4.95 total=25\n"
)


def test_cpu_has_only_some():
    stats = parse_psi_stats("cpu", io.StringIO(CPU))
    assert stats.full is None
    assert stats.some == PSILine(avg10=0.1, avg60=2.0, avg300=3.85, total=15)


@pytest.mark.parametrize("resource", ["memory", "io"])
def test_some_and_full(resource):
    stats = parse_psi_stats(resource, io.StringIO(MEMORY))
    assert stats.some.avg10 == 0.1
    assert stats.some.avg60 == 2.0
    assert stats.some.avg300 == 3.85
    assert stats.some.total == 15
    assert stats.full.avg10 == 0.2
    assert stats.full.avg60 == 3.0
    assert stats.full.avg300 == 4.95
    assert stats.full.total == 25


def test_unknown_measurement_type_is_ignored():
    stats = parse_psi_stats("fake", io.StringIO("nonesense haha test=fake"))
    assert stats == PSIStats()


def test_malformed_some_line():
    raw = (
        "some avg10=0.10 avg60=2.00 avg300=3.85 total=oops\n"
        "full avg10=0.20 avg60=3.00 avg300=teddy total=25"
    )
    with pytest.raises(ValueError):
        parse_psi_stats("fake", io.StringIO(raw))


def test_malformed_full_line():
    raw = (
        "some avg10=0.10 avg60=2.00 avg300=3.85 total=1\n"
        "full avg10=0.20 avg60=3.00 avg300=test total=25"
    )
    with pytest.raises(ValueError):
        parse_psi_stats("fake", io.StringIO(raw))


def test_empty_input():
    assert parse_psi_stats("cpu", io.StringIO("")) == PSIStats()