"""IP prefixes: an address together with a mask length."""

from __future__ import annotations

import re
from functools import total_ordering

from .ipaddress import IpAddress

_MASK_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1


def _parse_mask(text: str) -> int:
    match = _MASK_RE.match(text)
    if match is None:
        raise ValueError("Failed to convert mask: no digits in " + repr(text))
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError("Failed to convert mask: out of range " + repr(text))
    return value


@total_ordering
class IpPrefix:
    """An immutable IPv4 or IPv6 prefix such as ``10.0.0.0/8``.

    With no mask, ``value`` is text of the form ``addr[/len]``; an empty
    address means ``0.0.0.0``. With a mask, ``value`` is anything that
    ``IpAddress`` accepts.
    """

    __slots__ = ("_ip", "_mask")

    def __init__(self, value: str | int | IpAddress = "", mask: int | None = None) -> None:
        if mask is None:
            if not isinstance(value, str):
                raise TypeError("a prefix without a mask must be given as text")
            ip_text, sep, mask_text = value.partition("/")
            self._ip = IpAddress(ip_text) if ip_text else IpAddress(0)
            if not sep:
                self._mask = self._full_length()
                return
            self._mask = _parse_mask(mask_text)
            if not self._is_valid():
                raise ValueError("Invalid IpPrefix from string")
        else:
            if isinstance(mask, bool) or not isinstance(mask, int):
                raise TypeError("mask must be an int")
            self._ip = IpAddress(value)
            self._mask = mask
            if not self._is_valid():
                raise ValueError("Invalid IpPrefix from prefix and mask")

    def _full_length(self) -> int:
        return 32 if self._ip.is_v4() else 128

    def _is_valid(self) -> bool:
        return 0 <= self._mask <= self._full_length()

    def _mask_int(self) -> int:
        bits = self._full_length()
        return ((1 << self._mask) - 1) << (bits - self._mask)

    def _from_int(self, value: int) -> IpAddress:
        return IpAddress(value.to_bytes(self._full_length() // 8, "big"))

    def is_v4(self) -> bool:
        return self._ip.is_v4()

    @property
    def ip(self) -> IpAddress:
        return self._ip

    @property
    def mask_length(self) -> int:
        return self._mask

    def get_mask(self) -> IpAddress:
        """The netmask as an address of the same family."""
        return self._from_int(self._mask_int())

    def get_broadcast_ip(self) -> IpAddress:
        """The address with every host bit set."""
        all_ones = (1 << self._full_length()) - 1
        return self._from_int(int(self._ip) | (~self._mask_int() & all_ones))

    def is_default_route(self) -> bool:
        return self._mask == 0

    def is_full_mask(self) -> bool:
        return self._mask == self._full_length()

    def is_address_in_subnet(self, addr: IpAddress) -> bool:
        if addr.version != self._ip.version:
            return False
        mask = self._mask_int()
        return int(self._ip) & mask == int(addr) & mask

    def get_subnet(self) -> IpPrefix:
        """The prefix with host bits cleared."""
        network = self._from_int(int(self._ip) & self._mask_int())
        return IpPrefix(network, self._mask)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IpPrefix):
            return NotImplemented
        return self._ip == other._ip and self._mask == other._mask

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IpPrefix):
            return NotImplemented
        return (self._mask, self._ip) < (other._mask, other._ip)

    def __hash__(self) -> int:
        return hash((self._ip, self._mask))

    def __str__(self) -> str:
        return f"{self._ip}/{self._mask}"

    def __repr__(self) -> str:
        return f"IpPrefix({str(self)!r})"