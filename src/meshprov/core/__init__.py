"""
Core package aggregator for meshprov contracts (addresses, ranges, Provisioner, serde).

## Contracts (single source of truth)
- Constants — numeric bounds of the 16-bit address space and scene numbers.
- Address — AddressKind and the pure address classifier.
- Ranges — AddressRange/SceneRange value types, named full-space ranges, merged(), RangeSet.
- Provisioner — identity plus unicast/group/scene RangeSets; allocation and conflict queries.
- Schema/Serde — persisted Provisioner record and canonical JSON helpers.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Every public mutation leaves each RangeSet sorted, non-overlapping, coalesced and free
  of empty ranges.
- Allocation is permissive by default: invalid input is ignored and the reason returned.

## Downstream usage
- meshprov.io — loads/saves networks of Provisioners and checks admission conflicts.

## Examples
```python
from meshprov.core import AddressRange, Provisioner

a = Provisioner("a", unicast_ranges=[AddressRange(low=1, high=100)])
b = Provisioner("b", unicast_ranges=[AddressRange(low=50, high=60)])
a.has_overlapping_unicast_ranges(b)  # True
a.allocate_range(AddressRange(low=0x7000, high=0xC100))  # AllocationRejection.WRONG_ADDRESS_KIND
```
"""

from .address import AddressKind, address_kind, is_group, is_unicast
from .errors import AllocationError, RangeError, SchemaError
from .provisioner import AllocationRejection, Provisioner
from .ranges import (
    ALL_GROUP_ADDRESSES,
    ALL_SCENES,
    ALL_UNICAST_ADDRESSES,
    AddressRange,
    RangeKind,
    RangeSet,
    SceneRange,
    merged,
)

__all__ = [
    "AddressKind",
    "address_kind",
    "is_unicast",
    "is_group",
    "AddressRange",
    "SceneRange",
    "ALL_UNICAST_ADDRESSES",
    "ALL_GROUP_ADDRESSES",
    "ALL_SCENES",
    "RangeKind",
    "RangeSet",
    "merged",
    "AllocationRejection",
    "Provisioner",
    "AllocationError",
    "RangeError",
    "SchemaError",
]
