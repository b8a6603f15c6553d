"""Ethernet MAC addresses."""

from __future__ import annotations

from functools import total_ordering

MAC_ADDRESS_LENGTH = 6
_MAC_TEXT_LENGTH = MAC_ADDRESS_LENGTH * 2 + 5
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def parse_mac_string(text: str) -> bytes:
    """Parse ``aa:bb:cc:dd:ee:ff`` or ``aa-bb-cc-dd-ee-ff`` into six bytes.

    The separators must all be the same; no surrounding spaces are allowed.
    """
    error = ValueError(f"can't parse mac address '{text}'")
    if len(text) != _MAC_TEXT_LENGTH:
        raise error
    separators = set(text[2::3])
    if len(separators) != 1 or not separators <= {":", "-"}:
        raise error
    pairs = [text[pos:pos + 2] for pos in range(0, _MAC_TEXT_LENGTH, 3)]
    if any(char not in _HEX_DIGITS for pair in pairs for char in pair):
        raise error
    return bytes(int(pair, 16) for pair in pairs)


def format_mac(mac: bytes) -> str:
    """Format six bytes as lower-case colon-separated hex."""
    if len(mac) != MAC_ADDRESS_LENGTH:
        raise ValueError(f"MAC address must be {MAC_ADDRESS_LENGTH} bytes, got {len(mac)}")
    return ":".join(f"{byte:02x}" for byte in mac)


@total_ordering
class MacAddress:
    """An immutable MAC address; the default is all zeros."""

    __slots__ = ("_mac",)

    def __init__(self, value: str | bytes | MacAddress | None = None) -> None:
        if value is None:
            self._mac = bytes(MAC_ADDRESS_LENGTH)
        elif isinstance(value, MacAddress):
            self._mac = value._mac
        elif isinstance(value, str):
            self._mac = parse_mac_string(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            mac = bytes(value)
            if len(mac) != MAC_ADDRESS_LENGTH:
                raise ValueError(
                    f"MAC address must be {MAC_ADDRESS_LENGTH} bytes, got {len(mac)}"
                )
            self._mac = mac
        else:
            raise TypeError(f"cannot build MacAddress from {type(value).__name__}")

    def __bytes__(self) -> bytes:
        return self._mac

    def __str__(self) -> str:
        return format_mac(self._mac)

    def __repr__(self) -> str:
        return f"MacAddress({str(self)!r})"

    def __bool__(self) -> bool:
        return any(self._mac)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MacAddress):
            return NotImplemented
        return self._mac == other._mac

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, MacAddress):
            return NotImplemented
        return self._mac < other._mac

    def __hash__(self) -> int:
        return hash(self._mac)