import logging
import uuid

import pytest

from meshprov.core.errors import AllocationError
from meshprov.core.provisioner import AllocationRejection, Provisioner
from meshprov.core.ranges import (
    ALL_GROUP_ADDRESSES,
    ALL_SCENES,
    ALL_UNICAST_ADDRESSES,
    AddressRange,
    SceneRange,
)


def _empty(name: str = "p") -> Provisioner:
    return Provisioner(name, unicast_ranges=[], group_ranges=[], scene_ranges=[])


def _bounds(rs) -> list[tuple[int, int]]:
    return [(r.low, r.high) for r in rs]


def test_default_ranges_cover_full_space() -> None:
    p = Provisioner("phone")
    assert p.unicast_ranges.ranges == (ALL_UNICAST_ADDRESSES,)
    assert p.group_ranges.ranges == (ALL_GROUP_ADDRESSES,)
    assert p.scene_ranges.ranges == (ALL_SCENES,)
    assert p.is_valid
    assert isinstance(p.uuid, uuid.UUID)


def test_explicit_ranges_are_merged_on_construction() -> None:
    p = Provisioner(
        "p",
        unicast_ranges=[AddressRange(low=6, high=10), AddressRange(low=1, high=5)],
        group_ranges=[AddressRange(low=0xC010, high=0xC020), AddressRange(low=0xC000, high=0xC00F)],
        scene_ranges=[SceneRange(low=3, high=4), SceneRange(low=1, high=2)],
    )
    assert _bounds(p.unicast_ranges) == [(1, 10)]
    assert _bounds(p.group_ranges) == [(0xC000, 0xC020)]
    assert _bounds(p.scene_ranges) == [(1, 4)]


def test_unicast_and_group_ranges_are_routed_by_kind() -> None:
    p = _empty()
    assert p.allocate_range(AddressRange(low=0x0001, high=0x00FF)) is None
    assert p.allocate_range(AddressRange(low=0xC000, high=0xC0FF)) is None
    assert _bounds(p.unicast_ranges) == [(0x0001, 0x00FF)]
    assert _bounds(p.group_ranges) == [(0xC000, 0xC0FF)]


def test_allocation_merges_with_existing_ranges() -> None:
    p = _empty()
    p.allocate_range(AddressRange(low=1, high=5))
    p.allocate_range(AddressRange(low=7, high=10))
    assert _bounds(p.unicast_ranges) == [(1, 5), (7, 10)]
    p.allocate_range(AddressRange(low=6, high=6))
    assert _bounds(p.unicast_ranges) == [(1, 10)]


@pytest.mark.parametrize(
    "low,high,reason",
    [
        (0x7000, 0xC100, AllocationRejection.WRONG_ADDRESS_KIND),  # straddles kinds
        (0x8000, 0x80FF, AllocationRejection.WRONG_ADDRESS_KIND),  # virtual
        (0xFFFC, 0xFFFF, AllocationRejection.WRONG_ADDRESS_KIND),  # fixed group
        (0x0000, 0x0001, AllocationRejection.WRONG_ADDRESS_KIND),  # includes unassigned
        (0x0010, 0x0001, AllocationRejection.INVALID_RANGE),  # empty
    ],
)
def test_rejected_address_ranges_leave_provisioner_unchanged(
    low: int, high: int, reason: AllocationRejection
) -> None:
    p = Provisioner(
        "p",
        unicast_ranges=[AddressRange(low=1, high=10)],
        group_ranges=[AddressRange(low=0xC000, high=0xC010)],
    )
    unicast_before = p.unicast_ranges.ranges
    group_before = p.group_ranges.ranges

    assert p.allocate_range(AddressRange(low=low, high=high)) is reason

    assert p.unicast_ranges.ranges == unicast_before
    assert p.group_ranges.ranges == group_before


def test_scene_allocation() -> None:
    p = _empty()
    assert p.allocate_range(SceneRange(low=1, high=10)) is None
    assert p.allocate_range(SceneRange(low=11, high=20)) is None
    assert _bounds(p.scene_ranges) == [(1, 20)]
    assert p.allocate_range(SceneRange(low=0, high=5)) is AllocationRejection.INVALID_RANGE
    assert p.allocate_range(SceneRange(low=9, high=8)) is AllocationRejection.INVALID_RANGE
    assert _bounds(p.scene_ranges) == [(1, 20)]


def test_strict_allocation_raises_without_mutating() -> None:
    p = _empty()
    with pytest.raises(AllocationError) as ei:
        p.allocate_range(AddressRange(low=0x7000, high=0xC100), strict=True)
    assert ei.value.reason is AllocationRejection.WRONG_ADDRESS_KIND
    assert len(p.unicast_ranges) == 0
    assert len(p.group_ranges) == 0


def test_allocate_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        _empty().allocate_range((1, 2))  # type: ignore[arg-type]


def test_rejection_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    p = _empty()
    with caplog.at_level(logging.DEBUG, logger="meshprov.core.provisioner"):
        p.allocate_range(AddressRange(low=0x8000, high=0x8001))
    assert "wrong_address_kind" in caplog.text


def test_has_allocated_boundaries() -> None:
    p = Provisioner("p", unicast_ranges=[AddressRange(low=100, high=110)])
    assert p.has_allocated(105, count=5) is True
    assert p.has_allocated(108, count=5) is False
    assert p.has_allocated(100) is True
    assert p.has_allocated(110) is True
    assert p.has_allocated(111) is False
    assert p.has_allocated(105, count=0) is False


def test_has_allocated_uses_group_ranges_for_group_addresses() -> None:
    p = Provisioner(
        "p",
        unicast_ranges=[AddressRange(low=1, high=10)],
        group_ranges=[AddressRange(low=0xC000, high=0xC00F)],
    )
    assert p.has_allocated(0xC000, count=16) is True
    assert p.has_allocated(0xC000, count=17) is False
    assert p.has_allocated(0x0005) is True


@pytest.mark.parametrize("address", [0x0000, 0x8000, 0xFF00, 0xFFFF, 0x10000, -1])
def test_has_allocated_is_false_for_other_kinds(address: int) -> None:
    assert Provisioner("p").has_allocated(address) is False


def test_has_allocated_does_not_span_gaps() -> None:
    p = Provisioner("p", unicast_ranges=[AddressRange(low=1, high=5), AddressRange(low=7, high=10)])
    assert p.has_allocated(4, count=4) is False
    p.allocate_range(AddressRange(low=6, high=6))
    assert p.has_allocated(4, count=4) is True


def test_first_allocated_unicast_address_returns_the_query() -> None:
    p = Provisioner("p", unicast_ranges=[AddressRange(low=100, high=110), AddressRange(low=200, high=210)])
    assert p.first_allocated_unicast_address(105) == 105
    # Below the first range: the query comes back unchanged.
    assert p.first_allocated_unicast_address(50) == 50
    assert p.first_allocated_unicast_address(150) == 150
    assert p.first_allocated_unicast_address(211) is None
    assert p.first_allocated_unicast_address() == 1


def test_lowest_allocated_unicast_address() -> None:
    p = Provisioner("p", unicast_ranges=[AddressRange(low=100, high=110), AddressRange(low=200, high=210)])
    assert p.lowest_allocated_unicast_address(105) == 105
    assert p.lowest_allocated_unicast_address(50) == 100
    assert p.lowest_allocated_unicast_address(150) == 200
    assert p.lowest_allocated_unicast_address(211) is None
    assert _empty().lowest_allocated_unicast_address() is None


def test_is_valid_requires_all_three_sets() -> None:
    p = Provisioner("p", scene_ranges=[])
    assert not p.is_valid
    p.allocate_range(SceneRange(low=1, high=1))
    assert p.is_valid
    assert not Provisioner("p", unicast_ranges=[AddressRange(low=0x8000, high=0x8001)]).is_valid


@pytest.mark.parametrize(
    "low,high",
    [
        (0x0000, 0x0000),  # unassigned
        (0x8000, 0x8001),  # virtual
        (0xFF00, 0xFF10),  # reserved
        (0xFFFC, 0xFFFF),  # fixed group
    ],
)
def test_only_unicast_and_group_ranges_are_allocatable(low: int, high: int) -> None:
    p = _empty()
    rejection = p.allocate_range(AddressRange(low=low, high=high))
    assert rejection is AllocationRejection.WRONG_ADDRESS_KIND
    assert not p.unicast_ranges and not p.group_ranges
