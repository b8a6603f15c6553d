"""A set of IP addresses with a comma-separated text form."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .ipaddress import IpAddress

IP_DELIMITER = ","


class IpAddresses:
    """A mutable set of ``IpAddress`` values kept in sorted order for output."""

    def __init__(self, ips: str | Iterable[str | IpAddress] | None = None) -> None:
        self._ips: set[IpAddress] = set()
        if ips is None:
            return
        if isinstance(ips, str):
            tokens: Iterable[str | IpAddress] = (
                token for token in ips.split(IP_DELIMITER) if token
            )
        else:
            tokens = ips
        for ip in tokens:
            self.add(ip)

    def add(self, ip: str | IpAddress) -> None:
        self._ips.add(IpAddress(ip))

    def contains(self, ip: str | IpAddress | IpAddresses) -> bool:
        """Whether an address, or every address of another set, is present."""
        if isinstance(ip, IpAddresses):
            return ip._ips <= self._ips
        return IpAddress(ip) in self._ips

    def __contains__(self, ip: object) -> bool:
        if not isinstance(ip, (str, IpAddress, IpAddresses)):
            return False
        return self.contains(ip)

    def remove(self, ip: str | IpAddress) -> None:
        """Remove an address; absent addresses are ignored."""
        self._ips.discard(IpAddress(ip))

    def __len__(self) -> int:
        return len(self._ips)

    def __iter__(self) -> Iterator[IpAddress]:
        return iter(sorted(self._ips))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IpAddresses):
            return NotImplemented
        return self._ips == other._ips

    def __str__(self) -> str:
        return IP_DELIMITER.join(str(ip) for ip in self)

    def __repr__(self) -> str:
        return f"IpAddresses({str(self)!r})"