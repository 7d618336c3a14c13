"""
Address classification for the 16-bit mesh address space.

Responsibilities
- Define AddressKind, the tag carried by every address value.
- Provide a pure classifier (address_kind) and the predicates built on it.

Design principles
-----------------
Classification is a pure function of the value, not a type hierarchy: ranges and
range sets stay generic and ask the classifier when they need a kind.

| Kind          | Values          |
|---------------|-----------------|
| unassigned    | 0x0000          |
| unicast       | 0x0001..0x7FFF  |
| virtual       | 0x8000..0xBFFF  |
| group         | 0xC000..0xFEFF  |
| reserved      | 0xFF00..0xFFFB  |
| fixed_group   | 0xFFFC..0xFFFF  |

Only unicast and group addresses can be allocated to a Provisioner.

Examples
--------
>>> from meshprov.core.address import AddressKind, address_kind, is_unicast
>>> address_kind(0x0001) == AddressKind.UNICAST
True
>>> address_kind(0xFFFF) == AddressKind.FIXED_GROUP
True
>>> is_unicast(0x8000)
False
"""

from __future__ import annotations

from enum import Enum

from .constants import (
    MAX_ADDRESS,
    MAX_GROUP_ADDRESS,
    MAX_RESERVED_ADDRESS,
    MAX_UNICAST_ADDRESS,
    MAX_VIRTUAL_ADDRESS,
    UNASSIGNED_ADDRESS,
)

__all__ = [
    "AddressKind",
    "ALLOCATABLE_KINDS",
    "address_kind",
    "is_unicast",
    "is_group",
    "is_allocatable",
]


class AddressKind(Enum):
    """Kind of a 16-bit mesh address."""

    UNASSIGNED = "unassigned"
    UNICAST = "unicast"
    VIRTUAL = "virtual"
    GROUP = "group"
    RESERVED = "reserved"
    FIXED_GROUP = "fixed_group"


ALLOCATABLE_KINDS: frozenset[AddressKind] = frozenset({AddressKind.UNICAST, AddressKind.GROUP})


def address_kind(address: int) -> AddressKind:
    """
    Classify an address by value.

    Args:
        address (int): Address in 0x0000..0xFFFF.

    Returns:
        AddressKind: The kind the addressing scheme assigns to the value.

    Raises:
        ValueError: If address is outside the 16-bit address space.
    """
    if address < 0 or address > MAX_ADDRESS:
        raise ValueError(f"address must be in 0x0000..0x{MAX_ADDRESS:04X}, got {address!r}")
    if address == UNASSIGNED_ADDRESS:
        return AddressKind.UNASSIGNED
    if address <= MAX_UNICAST_ADDRESS:
        return AddressKind.UNICAST
    if address <= MAX_VIRTUAL_ADDRESS:
        return AddressKind.VIRTUAL
    if address <= MAX_GROUP_ADDRESS:
        return AddressKind.GROUP
    if address <= MAX_RESERVED_ADDRESS:
        return AddressKind.RESERVED
    return AddressKind.FIXED_GROUP


def is_unicast(address: int) -> bool:
    """Return True if address is a unicast address (out-of-space values are not)."""
    return 0 <= address <= MAX_ADDRESS and address_kind(address) is AddressKind.UNICAST


def is_group(address: int) -> bool:
    """Return True if address is an allocatable group address."""
    return 0 <= address <= MAX_ADDRESS and address_kind(address) is AddressKind.GROUP


def is_allocatable(kind: AddressKind | None) -> bool:
    return kind in ALLOCATABLE_KINDS
