"""
Custom exceptions for the meshprov.io module.

Purpose
- Provide IO-layer error types for configuration, network files and admission.
- Keep meshprov.core as the source of truth for range/allocation/schema errors
  (see meshprov.core.errors).

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meshprov.core.provisioner import Provisioner
    from meshprov.core.ranges import RangeKind


class MeshIoError(Exception):
    """Base class for errors raised by meshprov.io."""


class MeshConfigError(MeshIoError):
    """
    Raised when configuration is invalid and cannot fall back to a default.

    Examples:
        - An explicit TOML path that does not exist or does not parse
    """


class NetworkFileError(MeshIoError):
    """
    Raised when a network file is missing, not JSON, or holds malformed records.

    Notes:
        Wraps meshprov.core.errors.SchemaError for record-level failures.
    """


class DuplicateProvisionerError(MeshIoError):
    """Raised when a Provisioner with an already admitted UUID is added again."""


class ProvisionerConflictError(MeshIoError):
    """
    Raised when a Provisioner's ranges overlap those of an admitted Provisioner.

    Attributes:
        candidate: The Provisioner being admitted.
        existing: The admitted Provisioner it conflicts with.
        kinds: Range kinds on which the two overlap.
    """

    def __init__(
        self, candidate: Provisioner, existing: Provisioner, kinds: list[RangeKind]
    ) -> None:
        names = ", ".join(k.value for k in kinds)
        super().__init__(
            f"provisioner {candidate.name!r} ({candidate.uuid}) overlaps "
            f"{existing.name!r} ({existing.uuid}) on {names} ranges"
        )
        self.candidate = candidate
        self.existing = existing
        self.kinds = kinds
