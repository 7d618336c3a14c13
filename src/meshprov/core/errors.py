"""
Core exception types raised at range parsing and allocation boundaries.

Provides typed exceptions for core-domain failures:
- RangeError for malformed range bounds (non-hex text, outside the 16-bit space).
- AllocationError for rejected allocations when the caller opted into strict mode.
- SchemaError for serialized Provisioner records that do not have the expected shape.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - The default allocation policy is permissive: Provisioner.allocate_range returns a
      rejection reason instead of raising. AllocationError is only raised with strict=True.
    - RangeError raised inside pydantic validators surfaces as pydantic.ValidationError.

Examples:
    >>> from meshprov.core.errors import AllocationError
    >>> try:
    ...     raise AllocationError("range straddles unicast and group addresses")
    ... except ValueError as e:
    ...     msg = str(e)
    >>> "straddles" in msg
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .provisioner import AllocationRejection

__all__ = [
    "RangeError",
    "AllocationError",
    "SchemaError",
]


class RangeError(ValueError):
    """Malformed range bound (not an integer or hex string, or outside 0x0000..0xFFFF)."""


class AllocationError(ValueError):
    """
    Allocation rejected in strict mode.

    Attributes:
        reason (AllocationRejection | None): Why the range was rejected, when known.
    """

    def __init__(self, message: str, reason: AllocationRejection | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class SchemaError(ValueError):
    """Serialized Provisioner record failed shape or type checks."""
