import uuid

from meshprov.core.provisioner import Provisioner
from meshprov.core.ranges import AddressRange, RangeKind, SceneRange


def _unicast_only(name: str, low: int, high: int) -> Provisioner:
    return Provisioner(
        name,
        unicast_ranges=[AddressRange(low=low, high=high)],
        group_ranges=[],
        scene_ranges=[],
    )


def test_conflict_detection_end_to_end() -> None:
    a = _unicast_only("a", 1, 100)
    b = _unicast_only("b", 50, 60)
    assert a.has_overlapping_unicast_ranges(b)
    assert b.has_overlapping_unicast_ranges(a)
    assert a.has_overlapping_ranges(b)

    # Ranges only grow through allocation, so re-ranging b means rebuilding it.
    moved = _unicast_only(b.name, 200, 210)
    assert not a.has_overlapping_unicast_ranges(moved)
    assert not moved.has_overlapping_unicast_ranges(a)
    assert not a.has_overlapping_ranges(moved)


def test_adjacent_ranges_do_not_conflict() -> None:
    a = _unicast_only("a", 1, 100)
    b = _unicast_only("b", 101, 200)
    assert not a.has_overlapping_ranges(b)


def test_each_kind_is_checked_independently() -> None:
    a = Provisioner(
        "a",
        unicast_ranges=[AddressRange(low=1, high=10)],
        group_ranges=[AddressRange(low=0xC000, high=0xC0FF)],
        scene_ranges=[SceneRange(low=1, high=10)],
    )
    b = Provisioner(
        "b",
        unicast_ranges=[AddressRange(low=11, high=20)],
        group_ranges=[AddressRange(low=0xC100, high=0xC1FF)],
        scene_ranges=[SceneRange(low=10, high=20)],
    )
    assert not a.has_overlapping_unicast_ranges(b)
    assert not a.has_overlapping_group_ranges(b)
    assert a.has_overlapping_scene_ranges(b)
    assert a.has_overlapping_ranges(b)
    assert a.overlapping_kinds(b) == [RangeKind.SCENE]


def test_default_provisioners_conflict_on_every_kind() -> None:
    a = Provisioner("a")
    b = Provisioner("b")
    assert a.overlapping_kinds(b) == [RangeKind.UNICAST, RangeKind.GROUP, RangeKind.SCENE]


def test_equality_uses_uuid_only() -> None:
    shared = uuid.uuid4()
    a = Provisioner("a", uuid=shared, unicast_ranges=[AddressRange(low=1, high=2)])
    b = Provisioner("b", uuid=shared, unicast_ranges=[AddressRange(low=5, high=6)])
    assert a == b
    assert not (a != b)
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_identical_fields_with_different_uuid_are_unequal() -> None:
    a = Provisioner("p", unicast_ranges=[AddressRange(low=1, high=2)])
    b = Provisioner("p", unicast_ranges=[AddressRange(low=1, high=2)])
    assert a != b
    assert not (a == b)
    assert a != "p"


def test_name_is_mutable() -> None:
    p = Provisioner("old")
    before = p.uuid
    p.name = "new"
    assert p.name == "new"
    assert p.uuid == before
