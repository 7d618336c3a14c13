"""
Numeric bounds of the mesh addressing scheme.

Defines the 16-bit address space partition (unicast, virtual, group, reserved,
fixed group) and the scene number domain consumed by the classifier in
``meshprov.core.address`` and the named full-space ranges in
``meshprov.core.ranges``. This module is zero-IO and uses only the Python
standard library.

Notes:
    - Bounds are inclusive on both ends.
    - Call sites should use the named ranges (ALL_UNICAST_ADDRESSES, ...) rather
      than composing these values by hand.
"""

from __future__ import annotations

__all__ = [
    "MAX_ADDRESS",
    "UNASSIGNED_ADDRESS",
    "MIN_UNICAST_ADDRESS",
    "MAX_UNICAST_ADDRESS",
    "MAX_VIRTUAL_ADDRESS",
    "MIN_GROUP_ADDRESS",
    "MAX_GROUP_ADDRESS",
    "MAX_RESERVED_ADDRESS",
    "MIN_SCENE",
    "MAX_SCENE",
]

# Addresses are unsigned 16-bit integers.
MAX_ADDRESS: int = 0xFFFF

UNASSIGNED_ADDRESS: int = 0x0000

MIN_UNICAST_ADDRESS: int = 0x0001
MAX_UNICAST_ADDRESS: int = 0x7FFF

# Virtual addresses start right after the unicast block.
MAX_VIRTUAL_ADDRESS: int = 0xBFFF

# Allocatable group addresses.
MIN_GROUP_ADDRESS: int = 0xC000
MAX_GROUP_ADDRESS: int = 0xFEFF

# RFU block between allocatable and fixed group addresses; everything above it is
# all-proxies, all-friends, all-relays, all-nodes.
MAX_RESERVED_ADDRESS: int = 0xFFFB

# Scene number 0x0000 is prohibited.
MIN_SCENE: int = 0x0001
MAX_SCENE: int = 0xFFFF
