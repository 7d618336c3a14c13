from __future__ import annotations

import logging
import uuid

import pytest

from meshprov.core.errors import AllocationError
from meshprov.core.provisioner import AllocationRejection, Provisioner
from meshprov.core.ranges import AddressRange, RangeKind, SceneRange
from meshprov.io.config import MeshSettings
from meshprov.io.errors import DuplicateProvisionerError, ProvisionerConflictError
from meshprov.io.network import ProvisionerNetwork


def _prov(name: str, unicast: tuple[int, int], group=None, scene=None) -> Provisioner:
    return Provisioner(
        name,
        unicast_ranges=[AddressRange(low=unicast[0], high=unicast[1])],
        group_ranges=[] if group is None else [AddressRange(low=group[0], high=group[1])],
        scene_ranges=[] if scene is None else [SceneRange(low=scene[0], high=scene[1])],
    )


def test_disjoint_provisioners_are_admitted() -> None:
    net = ProvisionerNetwork()
    net.add(_prov("a", (1, 100), group=(0xC000, 0xC0FF), scene=(1, 10)))
    net.add(_prov("b", (101, 200), group=(0xC100, 0xC1FF), scene=(11, 20)))
    assert len(net) == 2
    assert net.find_conflicts() == []


def test_overlap_raises_by_default() -> None:
    a = _prov("a", (1, 100))
    b = _prov("b", (50, 60))
    net = ProvisionerNetwork(provisioners=[a])
    with pytest.raises(ProvisionerConflictError) as ei:
        net.add(b)
    assert ei.value.existing == a
    assert ei.value.candidate == b
    assert ei.value.kinds == [RangeKind.UNICAST]
    assert b not in net


def test_overlap_is_logged_under_warn_policy(caplog: pytest.LogCaptureFixture) -> None:
    net = ProvisionerNetwork(MeshSettings(conflict_policy="warn"))
    net.add(_prov("a", (1, 100)))
    with caplog.at_level(logging.WARNING, logger="meshprov.io.network"):
        net.add(_prov("b", (50, 60)))
    assert "overlaps" in caplog.text
    assert len(net) == 2
    ((first, second, kinds),) = net.find_conflicts()
    assert (first.name, second.name, kinds) == ("a", "b", [RangeKind.UNICAST])


def test_ignore_policy_admits_silently(caplog: pytest.LogCaptureFixture) -> None:
    net = ProvisionerNetwork(MeshSettings(conflict_policy="ignore"))
    with caplog.at_level(logging.WARNING):
        net.add(Provisioner("a"))
        net.add(Provisioner("b"))
    assert caplog.text == ""
    assert len(net.find_conflicts()) == 1


def test_duplicate_uuid_is_rejected() -> None:
    shared = uuid.uuid4()
    net = ProvisionerNetwork()
    net.add(Provisioner("a", uuid=shared, unicast_ranges=[], group_ranges=[], scene_ranges=[]))
    with pytest.raises(DuplicateProvisionerError):
        net.add(Provisioner("b", uuid=shared, unicast_ranges=[], group_ranges=[], scene_ranges=[]))


def test_get_remove_and_contains() -> None:
    a = _prov("a", (1, 10))
    net = ProvisionerNetwork(provisioners=[a])
    assert net.get(a.uuid) is a
    assert a.uuid in net
    assert net.remove(a.uuid) is a
    assert a not in net
    with pytest.raises(KeyError):
        net.remove(a.uuid)


def test_allocate_checks_other_members_first() -> None:
    a = _prov("a", (1, 100))
    b = _prov("b", (200, 300))
    net = ProvisionerNetwork(provisioners=[a, b])
    with pytest.raises(ProvisionerConflictError):
        net.allocate(b.uuid, AddressRange(low=90, high=110))
    assert [(r.low, r.high) for r in b.unicast_ranges] == [(200, 300)]

    assert net.allocate(b.uuid, AddressRange(low=101, high=199)) is None
    assert [(r.low, r.high) for r in b.unicast_ranges] == [(101, 300)]


def test_allocate_follows_strict_setting() -> None:
    a = _prov("a", (1, 100))
    lenient = ProvisionerNetwork(provisioners=[a])
    assert (
        lenient.allocate(a.uuid, AddressRange(low=0x8000, high=0x8001))
        is AllocationRejection.WRONG_ADDRESS_KIND
    )

    strict = ProvisionerNetwork(MeshSettings(strict_allocation=True), provisioners=[_prov("b", (1, 2))])
    (b,) = strict.provisioners
    with pytest.raises(AllocationError):
        strict.allocate(b.uuid, SceneRange(low=0, high=3))


def test_allocate_unknown_uuid() -> None:
    with pytest.raises(KeyError):
        ProvisionerNetwork().allocate(uuid.uuid4(), AddressRange(low=1, high=2))
