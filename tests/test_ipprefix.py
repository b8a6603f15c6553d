import pytest

from swssdb.ipaddress import IpAddress
from swssdb.ipprefix import IpPrefix


@pytest.mark.parametrize("text", ["10.1.2.0/24", "0.0.0.0/0", "2001:db8::/32", "::1/128"])
def test_string_round_trip(text):
    assert str(IpPrefix(text)) == text


def test_no_slash_is_full_mask():
    v4 = IpPrefix("10.0.0.1")
    v6 = IpPrefix("fe80::1")
    assert v4.mask_length == 32
    assert v6.mask_length == 128
    assert v4.is_full_mask() and v6.is_full_mask()
    assert v4.is_v4() and not v6.is_v4()


def test_empty_address_means_zero():
    prefix = IpPrefix("/0")
    assert prefix.ip == IpAddress(0)
    assert prefix.is_default_route()


def test_mask_text_parsed_like_stoi():
    assert IpPrefix("10.0.0.0/ 8").mask_length == 8
    assert IpPrefix("10.0.0.0/8x").mask_length == 8


@pytest.mark.parametrize("text", ["10.0.0.0/abc", "10.0.0.0/", "10.0.0.0/33", "10.0.0.0/-1", "::/129"])
def test_invalid_mask_raises(text):
    with pytest.raises(ValueError):
        IpPrefix(text)


def test_invalid_address_raises():
    with pytest.raises(ValueError, match="Error converting"):
        IpPrefix("10.0.0/8")


def test_address_and_mask_constructor():
    assert IpPrefix(0, 0).is_default_route()
    assert IpPrefix("10.0.0.0", 8) == IpPrefix("10.0.0.0/8")
    with pytest.raises(ValueError, match="prefix and mask"):
        IpPrefix(0, 33)
    with pytest.raises(ValueError, match="prefix and mask"):
        IpPrefix(0, -1)


def test_v4_mask_and_broadcast():
    prefix = IpPrefix("10.1.2.3/24")
    assert str(prefix.get_mask()) == "255.255.255.0"
    assert str(prefix.get_broadcast_ip()) == "10.1.2.255"


def test_v4_subnet():
    assert str(IpPrefix("10.1.2.3/24").get_subnet()) == "10.1.2.0/24"


def test_zero_length_mask_is_zero():
    assert IpPrefix("10.0.0.0/0").get_mask().is_zero()
    assert IpPrefix("fe80::/0").get_mask().is_zero()


def test_full_mask_broadcast_is_address():
    for text in ("10.0.0.7/32", "2001:db8::7/128"):
        prefix = IpPrefix(text)
        assert prefix.get_broadcast_ip() == prefix.ip
        assert prefix.get_subnet() == prefix


def test_v6_subnet_invariants():
    prefix = IpPrefix("2001:db8::5/64")
    subnet = prefix.get_subnet()
    assert subnet.mask_length == prefix.mask_length
    assert subnet.get_subnet() == subnet
    assert subnet.is_address_in_subnet(prefix.ip)
    assert subnet.ip != prefix.ip
    broadcast = prefix.get_broadcast_ip()
    assert prefix.is_address_in_subnet(broadcast)
    assert broadcast != prefix.ip


def test_address_in_subnet():
    prefix = IpPrefix("192.168.0.0/16")
    assert prefix.is_address_in_subnet(IpAddress("192.168.200.1"))
    assert not prefix.is_address_in_subnet(IpAddress("192.169.0.1"))
    assert not prefix.is_address_in_subnet(IpAddress("::"))
    assert IpPrefix("0.0.0.0/0").is_address_in_subnet(IpAddress("8.8.8.8"))


def test_ordering_by_mask_first():
    longer = IpPrefix("10.0.0.0/24")
    shorter = IpPrefix("192.168.0.0/16")
    assert sorted([longer, shorter]) == [shorter, longer]
    assert IpPrefix("10.0.0.0/8") < IpPrefix("11.0.0.0/8")


def test_hash_and_equality():
    assert len({IpPrefix("10.0.0.0/8"), IpPrefix("10.0.0.0", 8)}) == 1
    assert IpPrefix("10.0.0.0/8") != IpPrefix("10.0.0.0/9")


def test_mask_must_be_int():
    with pytest.raises(TypeError):
        IpPrefix("10.0.0.0", "8")