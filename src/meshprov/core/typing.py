"""
Lightweight typing aliases used across core ranges and the Provisioner entity.

Provides a minimal NewType and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from meshprov.core.typing import Address
    >>> def next_address(a: Address) -> Address:
    ...     return Address(int(a) + 1)
    >>> next_address(Address(0x0001))
    2
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "Address",
    "JsonDict",
]

# 16-bit mesh address (unicast, virtual, group, ...).
Address = NewType("Address", int)

# JSON-like mapping alias for serde boundaries.
JsonDict = dict[str, Any]
