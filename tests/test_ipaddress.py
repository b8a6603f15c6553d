import pytest

from swssdb.ipaddress import AddrScope, IpAddress


@pytest.mark.parametrize("text", ["10.0.0.1", "0.0.0.0", "255.255.255.255"])
def test_v4_round_trip(text):
    ip = IpAddress(text)
    assert ip.is_v4()
    assert str(ip) == text


@pytest.mark.parametrize("text", ["fe80::1", "::1", "2001:db8::5"])
def test_v6_round_trip(text):
    ip = IpAddress(text)
    assert not ip.is_v4()
    assert str(ip) == text


def test_v6_text_is_normalised():
    assert str(IpAddress("FE80::0")) == "fe80::"


@pytest.mark.parametrize(
    "text", ["", "1.2.3", "256.0.0.1", "abc", "1:::2", "10.0.0.1/24"]
)
def test_invalid_text_raises(text):
    with pytest.raises(ValueError, match="Error converting"):
        IpAddress(text)


def test_int_zero_is_v4_zero():
    ip = IpAddress(0)
    assert ip.is_v4()
    assert ip.is_zero()
    assert ip == IpAddress("0.0.0.0")


def test_int_out_of_range_raises():
    with pytest.raises(ValueError):
        IpAddress(1 << 32)
    with pytest.raises(ValueError):
        IpAddress(-1)


def test_is_zero_v6():
    assert IpAddress("::").is_zero()
    assert not IpAddress("::1").is_zero()


def test_packed_round_trip():
    for text in ("10.0.0.1", "2001:db8::5"):
        ip = IpAddress(text)
        assert IpAddress(ip.packed) == ip


def test_bad_packed_length_raises():
    with pytest.raises(ValueError):
        IpAddress(b"\x01\x02\x03")


def test_int_round_trip():
    ip = IpAddress("192.168.1.7")
    assert IpAddress(int(ip)) == ip


def test_families_are_never_equal():
    assert IpAddress("0.0.0.0") != IpAddress("::")


def test_v4_orders_before_v6():
    assert IpAddress("255.255.255.255") < IpAddress("::")
    assert not IpAddress("::") < IpAddress("0.0.0.0")


def test_ordering_within_family():
    a, b = IpAddress("10.0.0.1"), IpAddress("10.0.0.2")
    assert sorted([b, a]) == [a, b]
    assert IpAddress("9.255.255.255") < IpAddress("10.0.0.0")


def test_hash_matches_equality():
    assert len({IpAddress("10.0.0.1"), IpAddress("10.0.0.1")}) == 1
    assert hash(IpAddress("::1")) == hash(IpAddress("0::1"))


@pytest.mark.parametrize(
    "text, scope",
    [
        ("169.254.0.0", AddrScope.LINK),
        ("169.254.10.20", AddrScope.LINK),
        ("127.0.0.1", AddrScope.HOST),
        ("127.0.0.2", AddrScope.GLOBAL),
        ("224.0.0.0", AddrScope.MCAST),
        ("239.1.2.3", AddrScope.MCAST),
        ("10.0.0.1", AddrScope.GLOBAL),
        ("FE80::0", AddrScope.LINK),
        ("febf::1", AddrScope.LINK),
        ("fec0::1", AddrScope.GLOBAL),
        ("::1", AddrScope.HOST),
        ("FF00::0", AddrScope.MCAST),
        ("ff02::1", AddrScope.MCAST),
        ("2001:db8::1", AddrScope.GLOBAL),
    ],
)
def test_addr_scope(text, scope):
    assert IpAddress(text).get_addr_scope() is scope


def test_wrong_type_raises():
    with pytest.raises(TypeError):
        IpAddress(1.5)