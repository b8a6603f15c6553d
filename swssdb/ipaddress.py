"""IPv4 and IPv6 addresses with scope classification."""

from __future__ import annotations

import enum
import socket
from functools import total_ordering

_V4_LEN = 4
_V6_LEN = 16


class AddrScope(enum.Enum):
    """Scope of an IP address."""

    GLOBAL = 0
    LINK = 1
    HOST = 2
    MCAST = 3


@total_ordering
class IpAddress:
    """An immutable IPv4 or IPv6 address.

    Accepts a textual address, a 32-bit integer (IPv4), packed bytes of
    length 4 or 16, or another ``IpAddress``.
    """

    __slots__ = ("_packed",)

    def __init__(self, value: str | int | bytes | IpAddress = 0) -> None:
        if isinstance(value, IpAddress):
            self._packed = value._packed
        elif isinstance(value, bool):
            raise TypeError("IpAddress cannot be built from a bool")
        elif isinstance(value, int):
            if not 0 <= value < 1 << 32:
                raise ValueError(f"Error converting {value} to IP address")
            self._packed = value.to_bytes(_V4_LEN, "big")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            packed = bytes(value)
            if len(packed) not in (_V4_LEN, _V6_LEN):
                raise ValueError(
                    f"IP address must be {_V4_LEN} or {_V6_LEN} bytes, got {len(packed)}"
                )
            self._packed = packed
        elif isinstance(value, str):
            self._packed = self._parse(value)
        else:
            raise TypeError(f"cannot build IpAddress from {type(value).__name__}")

    @staticmethod
    def _parse(text: str) -> bytes:
        family = socket.AF_INET6 if ":" in text else socket.AF_INET
        try:
            return socket.inet_pton(family, text)
        except (OSError, ValueError):
            raise ValueError(f"Error converting {text} to IP address") from None

    @property
    def packed(self) -> bytes:
        """The address in network byte order."""
        return self._packed

    @property
    def version(self) -> int:
        """4 for IPv4, 6 for IPv6."""
        return 4 if len(self._packed) == _V4_LEN else 6

    @property
    def family(self) -> int:
        """The socket address family of this address."""
        return socket.AF_INET if self.is_v4() else socket.AF_INET6

    def is_v4(self) -> bool:
        return len(self._packed) == _V4_LEN

    def is_zero(self) -> bool:
        return not any(self._packed)

    def __int__(self) -> int:
        return int.from_bytes(self._packed, "big")

    def get_addr_scope(self) -> AddrScope:
        """Classify the address as link, host, multicast or global scope."""
        if self.is_v4():
            value = int(self)
            if value & 0xFFFF0000 == int(_V4_LINK):
                return AddrScope.LINK
            if self == _V4_HOST:
                return AddrScope.HOST
            if value & 0xF0000000 == int(_V4_MCAST):
                return AddrScope.MCAST
        else:
            first, second = self._packed[0], self._packed[1]
            link = _V6_LINK.packed
            if first == link[0] and (second & 0xC0) == link[1]:
                return AddrScope.LINK
            if self == _V6_HOST:
                return AddrScope.HOST
            if first == _V6_MCAST.packed[0]:
                return AddrScope.MCAST
        return AddrScope.GLOBAL

    def __str__(self) -> str:
        return socket.inet_ntop(self.family, self._packed)

    def __repr__(self) -> str:
        return f"IpAddress({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IpAddress):
            return NotImplemented
        return self._packed == other._packed

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IpAddress):
            return NotImplemented
        return (self.version, self._packed) < (other.version, other._packed)

    def __hash__(self) -> int:
        return hash(self._packed)


_V4_LINK = IpAddress("169.254.0.0")
_V6_LINK = IpAddress("FE80::0")
_V4_HOST = IpAddress("127.0.0.1")
_V6_HOST = IpAddress("::1")
_V4_MCAST = IpAddress("224.0.0.0")
_V6_MCAST = IpAddress("FF00::0")