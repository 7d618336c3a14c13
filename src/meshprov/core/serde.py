"""
JSON serialization/deserialization for Provisioners.

Provides the canonical JSON policy (sorted keys, compact separators, unicode kept
as-is) and conversions between Provisioner entities and their persisted mapping
form. This module is zero-IO: it works on strings and dicts only.

Notes:
    - Deserialization always merges range lists; stored data may not be canonical.
    - Malformed input surfaces as SchemaError, chained to the pydantic.ValidationError.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .errors import SchemaError
from .provisioner import Provisioner
from .schema import ProvisionerRecord
from .typing import JsonDict

__all__ = [
    "json_dumps_canonical",
    "json_loads",
    "provisioner_to_dict",
    "provisioner_from_dict",
    "provisioner_to_json",
    "provisioner_from_json",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: JSON with sort_keys=True, compact separators and ensure_ascii=False.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_loads(s: str) -> Any:
    return json.loads(s)


def provisioner_to_dict(p: Provisioner) -> JsonDict:
    """
    Convert a Provisioner to its persisted mapping.

    Returns:
        JsonDict: Mapping keyed by ``uuid``, ``provisionerName`` and the three
        ``allocated*Range`` lists, with hex-encoded bounds.

    Examples:
        >>> from meshprov.core.provisioner import Provisioner
        >>> from meshprov.core.serde import provisioner_to_dict
        >>> d = provisioner_to_dict(Provisioner("phone"))
        >>> d["allocatedGroupRange"]
        [{'lowAddress': 'C000', 'highAddress': 'FEFF'}]
    """
    return ProvisionerRecord.from_provisioner(p).model_dump(mode="json", by_alias=True)


def provisioner_from_dict(data: Any) -> Provisioner:
    """
    Build a Provisioner from its persisted mapping, merging all range lists.

    Raises:
        SchemaError: If the mapping does not match the persisted shape.
    """
    try:
        record = ProvisionerRecord.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"invalid provisioner record ({e.error_count()} error(s)): {e}") from e
    return record.to_provisioner()


def provisioner_to_json(p: Provisioner) -> str:
    return json_dumps_canonical(provisioner_to_dict(p))


def provisioner_from_json(s: str) -> Provisioner:
    """
    Parse a Provisioner from JSON text.

    Raises:
        SchemaError: If the text is not JSON or does not match the persisted shape.
    """
    try:
        data = json_loads(s)
    except json.JSONDecodeError as e:
        raise SchemaError(f"provisioner JSON is malformed: {e}") from e
    return provisioner_from_dict(data)
