"""
Pydantic v2 record model for the persisted shape of a Provisioner.

The record mirrors the mesh configuration database layout: a UUID, a name and
three lists of ranges keyed by their on-disk names. Records are plain data; the
conversion to and from the Provisioner entity is where ranges get merged.

Responsibilities
- Validate the persisted shape (key names, hex bounds, UUID text).
- Convert to a Provisioner (ranges normalized) and back.

Style
- Zero-IO (stdlib + pydantic only).
- JSON mode renders addresses and scene numbers as 4-digit uppercase hex and the
  UUID as 32 uppercase hex digits without dashes.

Table mappings
    | Record field  | Key                    | Provisioner attribute |
    |---------------|------------------------|-----------------------|
    | uuid          | uuid                   | uuid                  |
    | name          | provisionerName        | name                  |
    | unicast       | allocatedUnicastRange  | unicast_ranges        |
    | group         | allocatedGroupRange    | group_ranges          |
    | scene         | allocatedSceneRange    | scene_ranges          |
"""

from __future__ import annotations

import uuid as uuid_lib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .errors import SchemaError
from .provisioner import Provisioner
from .ranges import AddressRange, SceneRange

__all__ = [
    "ProvisionerRecord",
]


class ProvisionerRecord(BaseModel):
    """
    Serialized Provisioner.

    Attributes:
        uuid (uuid.UUID): Provisioner identifier (``uuid``); dashed or undashed on input.
        name (str): Human-readable name (``provisionerName``).
        unicast (list[AddressRange]): ``allocatedUnicastRange``, as stored.
        group (list[AddressRange]): ``allocatedGroupRange``, as stored.
        scene (list[SceneRange]): ``allocatedSceneRange``, as stored.

    Notes:
        Stored range lists are not assumed canonical; to_provisioner() merges them.

    Raises:
        pydantic.ValidationError: On missing keys, unknown keys, malformed UUID or
            malformed range bounds.

    Examples:
        >>> from meshprov.core.schema import ProvisionerRecord
        >>> rec = ProvisionerRecord.model_validate({
        ...     "uuid": "5AE5C7B2A53F4F5C8A3B6F1F0F5B1C2D",
        ...     "provisionerName": "phone",
        ...     "allocatedUnicastRange": [{"lowAddress": "0001", "highAddress": "00FF"}],
        ...     "allocatedGroupRange": [],
        ...     "allocatedSceneRange": [],
        ... })
        >>> rec.to_provisioner().unicast_ranges.contains(0x00FF)
        True
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    uuid: uuid_lib.UUID = Field(...)
    name: str = Field(..., alias="provisionerName")
    unicast: list[AddressRange] = Field(..., alias="allocatedUnicastRange")
    group: list[AddressRange] = Field(..., alias="allocatedGroupRange")
    scene: list[SceneRange] = Field(..., alias="allocatedSceneRange")

    @field_validator("uuid", mode="before")
    @classmethod
    def _parse_uuid(cls, v: Any) -> Any:
        """
        Accept UUID instances and 32-digit hex text with or without dashes.

        Raises:
            SchemaError: If the text is not a UUID.
        """
        if isinstance(v, uuid_lib.UUID):
            return v
        try:
            return uuid_lib.UUID(str(v))
        except ValueError as e:
            raise SchemaError(f"invalid provisioner UUID {v!r}") from e

    @field_serializer("uuid", when_used="json")
    def _format_uuid(self, v: uuid_lib.UUID) -> str:
        return v.hex.upper()

    @classmethod
    def from_provisioner(cls, p: Provisioner) -> ProvisionerRecord:
        return cls(
            uuid=p.uuid,
            name=p.name,
            unicast=list(p.unicast_ranges),
            group=list(p.group_ranges),
            scene=list(p.scene_ranges),
        )

    def to_provisioner(self) -> Provisioner:
        """Build the Provisioner entity; range lists are merged on the way in."""
        return Provisioner(
            self.name,
            uuid=self.uuid,
            unicast_ranges=self.unicast,
            group_ranges=self.group,
            scene_ranges=self.scene,
        )
