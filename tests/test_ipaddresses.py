import pytest

from swssdb.ipaddress import IpAddress
from swssdb.ipaddresses import IpAddresses


def test_parse_and_sorted_string():
    ips = IpAddresses("10.0.0.2,10.0.0.1")
    assert str(ips) == "10.0.0.1,10.0.0.2"
    assert len(ips) == 2


def test_string_round_trip():
    ips = IpAddresses("192.168.0.1,fe80::1,10.0.0.1")
    assert IpAddresses(str(ips)) == ips


def test_empty():
    ips = IpAddresses()
    assert len(ips) == 0
    assert str(ips) == ""
    assert IpAddresses("") == ips


def test_contains_string_and_address():
    ips = IpAddresses("10.0.0.1,fe80::1")
    assert ips.contains("10.0.0.1")
    assert ips.contains(IpAddress("fe80::1"))
    assert not ips.contains("10.0.0.2")
    assert "10.0.0.1" in ips
    assert 42 not in ips


def test_contains_subset():
    ips = IpAddresses("10.0.0.1,10.0.0.2,10.0.0.3")
    assert ips.contains(IpAddresses("10.0.0.1,10.0.0.3"))
    assert not ips.contains(IpAddresses("10.0.0.1,10.0.0.4"))
    assert ips.contains(IpAddresses())


def test_add_and_remove():
    ips = IpAddresses("10.0.0.1")
    ips.add("10.0.0.2")
    ips.add(IpAddress("10.0.0.2"))
    assert len(ips) == 2
    ips.remove("10.0.0.1")
    assert not ips.contains("10.0.0.1")
    ips.remove(IpAddress("10.0.0.9"))
    assert len(ips) == 1


def test_equality_ignores_order():
    assert IpAddresses("10.0.0.1,10.0.0.2") == IpAddresses("10.0.0.2,10.0.0.1")
    assert IpAddresses("10.0.0.1") != IpAddresses("10.0.0.2")


def test_iteration_is_sorted():
    ips = IpAddresses("::1,10.0.0.3,10.0.0.1")
    items = list(ips)
    assert items == sorted(items)
    assert items[0] == IpAddress("10.0.0.1")


def test_invalid_member_raises():
    with pytest.raises(ValueError, match="Error converting"):
        IpAddresses("10.0.0.1,not-an-ip")


def test_from_iterable():
    ips = IpAddresses(["10.0.0.1", IpAddress("10.0.0.2")])
    assert ips == IpAddresses("10.0.0.1,10.0.0.2")