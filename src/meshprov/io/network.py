"""
ProvisionerNetwork: the set of Provisioners sharing one mesh network.

Responsibilities
- Admit Provisioners after checking their ranges against every admitted Provisioner,
  reacting to overlaps per MeshSettings.conflict_policy.
- Route allocations to a member Provisioner, checking the new range against the
  other members first.
- Load and save the network as a JSON document ``{"provisioners": [...]}``.

Source of truth
- Range normalization, allocation routing and overlap tests are meshprov.core's;
  this module only decides what to do with their results.
- The record layout is meshprov.core.schema.ProvisionerRecord.

Notes
- Conflicts are detected, never resolved: no range is ever moved or trimmed here.
- Write path: tmp file -> fsync -> os.replace(tmp, final) on the same filesystem.
- Not thread-safe; callers serialize mutations.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import uuid as uuid_lib
from collections.abc import Iterable, Iterator
from itertools import combinations
from pathlib import Path
from typing import Any

from meshprov.core.address import AddressKind
from meshprov.core.errors import SchemaError
from meshprov.core.provisioner import AllocationRejection, Provisioner
from meshprov.core.ranges import AddressRange, RangeKind, RangeSet, SceneRange
from meshprov.core.serde import json_dumps_canonical, provisioner_from_dict, provisioner_to_dict
from meshprov.core.typing import JsonDict

from .config import MeshSettings
from .errors import DuplicateProvisionerError, NetworkFileError, ProvisionerConflictError

__all__ = [
    "Conflict",
    "ProvisionerNetwork",
]

logger = logging.getLogger(__name__)

# (first, second, overlapping kinds)
Conflict = tuple[Provisioner, Provisioner, list[RangeKind]]


class ProvisionerNetwork:
    """
    Provisioners admitted to one network, with conflict detection on admission.

    Args:
        settings (MeshSettings | None): Conflict and allocation policy; defaults to
            MeshSettings().
        provisioners (Iterable[Provisioner]): Provisioners to admit, in order.

    Raises:
        ProvisionerConflictError: If conflict_policy is "raise" and an initial
            Provisioner overlaps an earlier one.
        DuplicateProvisionerError: If two initial Provisioners share a UUID.

    Examples:
        >>> from meshprov.core import AddressRange, Provisioner
        >>> from meshprov.io import MeshSettings, ProvisionerNetwork
        >>> net = ProvisionerNetwork(MeshSettings(conflict_policy="ignore"))
        >>> net.add(Provisioner("a", unicast_ranges=[AddressRange(low=1, high=100)]))
        >>> net.add(Provisioner("b", unicast_ranges=[AddressRange(low=50, high=60)]))
        >>> [kinds for _, _, kinds in net.find_conflicts()][0][0].value
        'unicast'
    """

    def __init__(
        self,
        settings: MeshSettings | None = None,
        provisioners: Iterable[Provisioner] = (),
    ) -> None:
        self.settings = settings or MeshSettings()
        self._provisioners: list[Provisioner] = []
        for p in provisioners:
            self.add(p)

    @property
    def provisioners(self) -> tuple[Provisioner, ...]:
        return tuple(self._provisioners)

    def __len__(self) -> int:
        return len(self._provisioners)

    def __iter__(self) -> Iterator[Provisioner]:
        return iter(tuple(self._provisioners))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Provisioner):
            return item in self._provisioners
        if isinstance(item, uuid_lib.UUID):
            return self.get(item) is not None
        return False

    def get(self, uuid: uuid_lib.UUID) -> Provisioner | None:
        for p in self._provisioners:
            if p.uuid == uuid:
                return p
        return None

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def conflicts_with(self, candidate: Provisioner) -> list[tuple[Provisioner, list[RangeKind]]]:
        """
        List admitted Provisioners whose ranges overlap the candidate's.

        Args:
            candidate (Provisioner): Provisioner to check; itself is skipped if admitted.

        Returns:
            list[tuple[Provisioner, list[RangeKind]]]: Each conflicting Provisioner with
            the kinds on which it overlaps, in admission order.
        """
        out: list[tuple[Provisioner, list[RangeKind]]] = []
        for existing in self._provisioners:
            if existing == candidate:
                continue
            kinds = candidate.overlapping_kinds(existing)
            if kinds:
                out.append((existing, kinds))
        return out

    def find_conflicts(self) -> list[Conflict]:
        """Return every overlapping pair among admitted Provisioners."""
        out: list[Conflict] = []
        for a, b in combinations(self._provisioners, 2):
            kinds = a.overlapping_kinds(b)
            if kinds:
                out.append((a, b, kinds))
        return out

    def add(self, candidate: Provisioner) -> None:
        """
        Admit a Provisioner.

        Raises:
            DuplicateProvisionerError: If a Provisioner with the same UUID is admitted.
            ProvisionerConflictError: If conflict_policy is "raise" and the candidate's
                ranges overlap an admitted Provisioner's.
        """
        if candidate in self._provisioners:
            raise DuplicateProvisionerError(f"provisioner {candidate.uuid} is already admitted")
        self._react(candidate, self.conflicts_with(candidate))
        self._provisioners.append(candidate)
        logger.debug("admitted provisioner %r (%s)", candidate.name, candidate.uuid)

    def remove(self, uuid: uuid_lib.UUID) -> Provisioner:
        """
        Remove and return the Provisioner with the given UUID.

        Raises:
            KeyError: If no such Provisioner is admitted.
        """
        p = self.get(uuid)
        if p is None:
            raise KeyError(uuid)
        self._provisioners.remove(p)
        return p

    def _react(
        self, candidate: Provisioner, conflicts: list[tuple[Provisioner, list[RangeKind]]]
    ) -> None:
        if not conflicts:
            return
        policy = self.settings.conflict_policy
        if policy == "raise":
            existing, kinds = conflicts[0]
            raise ProvisionerConflictError(candidate, existing, kinds)
        if policy == "warn":
            for existing, kinds in conflicts:
                logger.warning(
                    "provisioner %r (%s) overlaps %r (%s) on %s ranges",
                    candidate.name,
                    candidate.uuid,
                    existing.name,
                    existing.uuid,
                    ", ".join(k.value for k in kinds),
                )

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def allocate(
        self, uuid: uuid_lib.UUID, r: AddressRange | SceneRange
    ) -> AllocationRejection | None:
        """
        Allocate a range to a member Provisioner.

        The range is first checked against the other members' ranges of the same kind
        and conflict_policy applies; then Provisioner.allocate_range runs with
        ``strict=settings.strict_allocation``.

        Raises:
            KeyError: If no Provisioner with the UUID is admitted.
            ProvisionerConflictError: If conflict_policy is "raise" and the range
                overlaps another member's ranges. Nothing is allocated.
            meshprov.core.errors.AllocationError: If strict_allocation is set and the
                range is rejected.
        """
        target = self.get(uuid)
        if target is None:
            raise KeyError(uuid)

        kind = _range_set_kind(r)
        if kind is not None:
            probe: RangeSet[Any] = RangeSet(kind, [r])
            conflicts = [
                (other, [kind])
                for other in self._provisioners
                if other != target and probe.overlaps(_ranges_of(other, kind))
            ]
            self._react(target, conflicts)

        return target.allocate_range(r, strict=self.settings.strict_allocation)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> JsonDict:
        return {"provisioners": [provisioner_to_dict(p) for p in self._provisioners]}

    @classmethod
    def from_dict(cls, data: Any, settings: MeshSettings | None = None) -> ProvisionerNetwork:
        """
        Build a network from its document form, merging every range list.

        Raises:
            NetworkFileError: If the document or a record is malformed.
            ProvisionerConflictError: Per conflict_policy, as in add().
        """
        if not isinstance(data, dict) or not isinstance(data.get("provisioners"), list):
            raise NetworkFileError("network document must be an object with a 'provisioners' list")
        provisioners: list[Provisioner] = []
        for i, item in enumerate(data["provisioners"]):
            try:
                provisioners.append(provisioner_from_dict(item))
            except SchemaError as e:
                raise NetworkFileError(f"provisioner #{i}: {e}") from e
        return cls(settings, provisioners)

    def save(self, path: str | os.PathLike[str]) -> Path:
        """
        Write the network as JSON atomically (tmp -> fsync -> replace).

        Returns:
            Path: The final path written.
        """
        final = Path(path)
        doc = self.to_dict()
        if self.settings.indent > 0:
            text = json.dumps(doc, indent=self.settings.indent, ensure_ascii=False) + "\n"
        else:
            text = json_dumps_canonical(doc)
        tmp = final.with_name(final.name + ".tmp")
        try:
            final.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("wb") as fh:
                fh.write(text.encode("utf-8"))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, final)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise NetworkFileError(f"failed to write network file {final}: {e}") from e
        logger.debug("saved %d provisioner(s) to %s", len(self._provisioners), final)
        return final

    @classmethod
    def load(
        cls, path: str | os.PathLike[str], settings: MeshSettings | None = None
    ) -> ProvisionerNetwork:
        """
        Read a network file written by save() (or any file of the same shape).

        Raises:
            NetworkFileError: If the file cannot be read or is not a valid network document.
            ProvisionerConflictError: Per conflict_policy, as in add().
        """
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NetworkFileError(f"network file not found: {p}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise NetworkFileError(f"cannot read network file {p}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise NetworkFileError(f"network file {p} is not valid JSON: {e}") from e
        return cls.from_dict(data, settings)


def _range_set_kind(r: AddressRange | SceneRange) -> RangeKind | None:
    if isinstance(r, SceneRange):
        return RangeKind.SCENE if r.is_valid else None
    kind = r.kind
    if kind is AddressKind.UNICAST:
        return RangeKind.UNICAST
    if kind is AddressKind.GROUP:
        return RangeKind.GROUP
    return None


def _ranges_of(p: Provisioner, kind: RangeKind) -> RangeSet[Any]:
    if kind is RangeKind.UNICAST:
        return p.unicast_ranges
    if kind is RangeKind.GROUP:
        return p.group_ranges
    return p.scene_ranges
