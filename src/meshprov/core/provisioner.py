"""
Provisioner entity: identity plus three independently normalized range sets.

Responsibilities
- Hold a Provisioner's UUID, name and allocated unicast, group and scene ranges.
- Route allocations to the right RangeSet by classifying the range, and keep every
  set in canonical form.
- Answer allocation and cross-Provisioner conflict queries by delegating to RangeSet.

Allocation policy
- Permissive by default: a range that is empty, straddles address kinds, or is not
  unicast/group (or, for scenes, not a valid scene range) leaves the Provisioner
  unchanged. allocate_range returns the AllocationRejection instead of raising.
- strict=True raises AllocationError with the same reason; the no-mutation outcome
  is identical.

Identity
- Two Provisioners are equal iff their UUIDs are equal; name and ranges do not take
  part in equality or hashing.

Examples
--------
>>> from meshprov.core.provisioner import Provisioner
>>> from meshprov.core.ranges import AddressRange
>>> a = Provisioner("a", unicast_ranges=[AddressRange(low=1, high=100)])
>>> b = Provisioner("b", unicast_ranges=[AddressRange(low=50, high=60)])
>>> a.has_overlapping_unicast_ranges(b)
True
>>> a.has_allocated(0x0005, count=10)
True
"""

from __future__ import annotations

import logging
import uuid as uuid_lib
from collections.abc import Iterable
from enum import Enum

from .address import AddressKind, address_kind, is_allocatable
from .constants import MAX_ADDRESS, MIN_UNICAST_ADDRESS
from .errors import AllocationError
from .ranges import (
    ALL_GROUP_ADDRESSES,
    ALL_SCENES,
    ALL_UNICAST_ADDRESSES,
    AddressRange,
    RangeKind,
    RangeSet,
    SceneRange,
)
from .typing import Address

__all__ = [
    "AllocationRejection",
    "Provisioner",
]

logger = logging.getLogger(__name__)


class AllocationRejection(Enum):
    """Reason an allocation left the Provisioner unchanged."""

    INVALID_RANGE = "invalid_range"
    WRONG_ADDRESS_KIND = "wrong_address_kind"


class Provisioner:
    """
    A mesh network participant with allocated address and scene ranges.

    Args:
        name (str): Human-readable name.
        uuid (uuid.UUID | None): Identifier; a random UUID4 when omitted.
        unicast_ranges (Iterable[AddressRange] | None): Initial unicast ranges;
            ALL_UNICAST_ADDRESSES when omitted.
        group_ranges (Iterable[AddressRange] | None): Initial group ranges;
            ALL_GROUP_ADDRESSES when omitted.
        scene_ranges (Iterable[SceneRange] | None): Initial scene ranges;
            ALL_SCENES when omitted.

    Notes:
        Explicit ranges are merged immediately but not filtered by kind: a
        Provisioner built from stored data keeps what it was given, and ``is_valid``
        reports whether that data fits the addressing scheme. Use allocate_range
        to add ranges with kind routing.
    """

    def __init__(
        self,
        name: str,
        uuid: uuid_lib.UUID | None = None,
        unicast_ranges: Iterable[AddressRange] | None = None,
        group_ranges: Iterable[AddressRange] | None = None,
        scene_ranges: Iterable[SceneRange] | None = None,
    ) -> None:
        self._uuid = uuid if uuid is not None else uuid_lib.uuid4()
        self.name = name
        self._unicast_ranges: RangeSet[AddressRange] = RangeSet(
            RangeKind.UNICAST,
            [ALL_UNICAST_ADDRESSES] if unicast_ranges is None else unicast_ranges,
        )
        self._group_ranges: RangeSet[AddressRange] = RangeSet(
            RangeKind.GROUP,
            [ALL_GROUP_ADDRESSES] if group_ranges is None else group_ranges,
        )
        self._scene_ranges: RangeSet[SceneRange] = RangeSet(
            RangeKind.SCENE,
            [ALL_SCENES] if scene_ranges is None else scene_ranges,
        )

    @property
    def uuid(self) -> uuid_lib.UUID:
        return self._uuid

    @property
    def unicast_ranges(self) -> RangeSet[AddressRange]:
        return self._unicast_ranges

    @property
    def group_ranges(self) -> RangeSet[AddressRange]:
        return self._group_ranges

    @property
    def scene_ranges(self) -> RangeSet[SceneRange]:
        return self._scene_ranges

    @property
    def is_valid(self) -> bool:
        """True if all three range sets are non-empty and valid for their kind."""
        return (
            self._unicast_ranges.is_valid
            and self._group_ranges.is_valid
            and self._scene_ranges.is_valid
        )

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def allocate_range(
        self, r: AddressRange | SceneRange, *, strict: bool = False
    ) -> AllocationRejection | None:
        """
        Allocate a range, merging it with the ranges already held.

        Address ranges go to the unicast or group set depending on their kind;
        scene ranges go to the scene set.

        Args:
            r (AddressRange | SceneRange): Range to allocate.
            strict (bool): Raise instead of returning a rejection.

        Returns:
            AllocationRejection | None: None if the range was allocated, otherwise
            the reason it was ignored.

        Raises:
            AllocationError: If strict is True and the range was rejected.
            TypeError: If r is neither an AddressRange nor a SceneRange.
        """
        if isinstance(r, SceneRange):
            rejection = self._allocate_scene_range(r)
        elif isinstance(r, AddressRange):
            rejection = self._allocate_address_range(r)
        else:
            raise TypeError(f"cannot allocate {type(r).__name__}")

        if rejection is None:
            logger.debug("provisioner %s allocated %r", self._uuid, r)
            return None
        logger.debug("provisioner %s ignored %r: %s", self._uuid, r, rejection.value)
        if strict:
            raise AllocationError(
                f"cannot allocate 0x{r.low:04X}-0x{r.high:04X}: {rejection.value}",
                reason=rejection,
            )
        return rejection

    def _allocate_address_range(self, r: AddressRange) -> AllocationRejection | None:
        if r.is_empty:
            return AllocationRejection.INVALID_RANGE
        kind = r.kind
        if not is_allocatable(kind):
            return AllocationRejection.WRONG_ADDRESS_KIND
        if kind is AddressKind.UNICAST:
            self._unicast_ranges.insert(r)
        else:
            self._group_ranges.insert(r)
        return None

    def _allocate_scene_range(self, r: SceneRange) -> AllocationRejection | None:
        if not r.is_valid:
            return AllocationRejection.INVALID_RANGE
        self._scene_ranges.insert(r)
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_allocated(self, address: Address, count: int = 1) -> bool:
        """
        Return True if ``count`` addresses starting at ``address`` are allocated.

        Args:
            address (Address): First address; unicast or group.
            count (int): Number of consecutive addresses.

        Returns:
            bool: True if ``address`` and ``address + count - 1`` lie in the same
            allocated range of the address's kind. False for addresses that are
            neither unicast nor group, and for ``count < 1``.
        """
        if count < 1 or not 0 <= address <= MAX_ADDRESS:
            return False
        kind = address_kind(address)
        if kind is AddressKind.UNICAST:
            ranges = self._unicast_ranges
        elif kind is AddressKind.GROUP:
            ranges = self._group_ranges
        else:
            return False
        return ranges.contains_block(address, address + count - 1)

    def has_overlapping_ranges(self, other: Provisioner) -> bool:
        """Return True if any unicast, group or scene range overlaps ``other``'s."""
        return (
            self.has_overlapping_unicast_ranges(other)
            or self.has_overlapping_group_ranges(other)
            or self.has_overlapping_scene_ranges(other)
        )

    def has_overlapping_unicast_ranges(self, other: Provisioner) -> bool:
        return self._unicast_ranges.overlaps(other._unicast_ranges)

    def has_overlapping_group_ranges(self, other: Provisioner) -> bool:
        return self._group_ranges.overlaps(other._group_ranges)

    def has_overlapping_scene_ranges(self, other: Provisioner) -> bool:
        return self._scene_ranges.overlaps(other._scene_ranges)

    def overlapping_kinds(self, other: Provisioner) -> list[RangeKind]:
        """Return the range kinds on which this Provisioner conflicts with ``other``."""
        pairs = (
            (RangeKind.UNICAST, self.has_overlapping_unicast_ranges),
            (RangeKind.GROUP, self.has_overlapping_group_ranges),
            (RangeKind.SCENE, self.has_overlapping_scene_ranges),
        )
        return [kind for kind, check in pairs if check(other)]

    def first_allocated_unicast_address(
        self, greater_or_equal_to: Address = Address(MIN_UNICAST_ADDRESS)
    ) -> Address | None:
        """
        Look up an allocated unicast address at or above a bound.

        Args:
            greater_or_equal_to (Address): Lower bound of the look-up.

        Returns:
            Address | None: The bound itself if some allocated range starts at or above
            it or contains it; None otherwise.

        Notes:
            The bound is returned unchanged even when it lies below the first
            qualifying range. Use lowest_allocated_unicast_address for the smallest
            allocated address at or above the bound.
        """
        for r in self._unicast_ranges:
            if r.low >= greater_or_equal_to or r.contains(greater_or_equal_to):
                return greater_or_equal_to
        return None

    def lowest_allocated_unicast_address(
        self, greater_or_equal_to: Address = Address(MIN_UNICAST_ADDRESS)
    ) -> Address | None:
        """Return the smallest allocated unicast address ``>= greater_or_equal_to``, or None."""
        for r in self._unicast_ranges:
            if r.contains(greater_or_equal_to):
                return greater_or_equal_to
            if r.low > greater_or_equal_to:
                return Address(r.low)
        return None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Provisioner):
            return NotImplemented
        return self._uuid == other._uuid

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Provisioner):
            return NotImplemented
        return self._uuid != other._uuid

    def __hash__(self) -> int:
        return hash(self._uuid)

    def __repr__(self) -> str:
        return (
            f"Provisioner(name={self.name!r}, uuid={self._uuid}, "
            f"unicast={self._unicast_ranges!r}, group={self._group_ranges!r}, "
            f"scene={self._scene_ranges!r})"
        )
