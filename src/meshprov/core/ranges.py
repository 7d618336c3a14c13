"""
Range value types and the normalized RangeSet collection.

Pydantic v2 models for closed address and scene ranges, the named full-space
ranges supplied by the addressing scheme, and RangeSet, a generic ordered
collection that keeps its ranges in canonical form after every mutation.

Responsibilities
- Define AddressRange and SceneRange (inclusive ``low``/``high`` bounds) with
  hex-or-int parsing at the boundary and hex output in JSON mode.
- Classify address ranges by kind (range_kind) via the pure classifier in
  meshprov.core.address.
- Provide merged(), the normalization algorithm, and RangeSet, which applies it
  on construction and on every insert.

Canonical form
- Sorted ascending by low bound.
- No two ranges overlap.
- No two ranges are adjacent (``a.high + 1 == b.low`` ranges are coalesced).
- Empty ranges (``low > high``) are never stored.

Style
- Zero-IO (stdlib + pydantic only).
- Range models are frozen; RangeSet swaps in a freshly merged list as a single
  assignment so readers never observe a partially normalized set.

Examples
--------
>>> from meshprov.core.ranges import AddressRange, RangeKind, RangeSet
>>> rs = RangeSet(RangeKind.UNICAST, [AddressRange(low=6, high=10), AddressRange(low=1, high=5)])
>>> [(r.low, r.high) for r in rs]
[(1, 10)]
>>> rs.contains(7)
True
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .address import AddressKind, address_kind
from .constants import (
    MAX_ADDRESS,
    MAX_GROUP_ADDRESS,
    MAX_SCENE,
    MAX_UNICAST_ADDRESS,
    MIN_GROUP_ADDRESS,
    MIN_SCENE,
    MIN_UNICAST_ADDRESS,
)
from .errors import RangeError

__all__ = [
    "ClosedRange",
    "AddressRange",
    "SceneRange",
    "ALL_UNICAST_ADDRESSES",
    "ALL_GROUP_ADDRESSES",
    "ALL_SCENES",
    "range_kind",
    "merged",
    "RangeKind",
    "RangeSet",
]

logger = logging.getLogger(__name__)


# ============================================================================
# Range value types
# ============================================================================


class ClosedRange(BaseModel):
    """
    Inclusive ``[low, high]`` range of 16-bit values.

    Attributes:
        low (int): First value in the range.
        high (int): Last value in the range.

    Notes:
        ``low > high`` is representable and denotes an empty range. Such ranges are
        reported by ``is_empty`` and discarded by merged(); constructing them is not
        an error, so that allocation can degrade to a no-op instead of raising.

    Raises:
        pydantic.ValidationError: If a bound is not an int or hex string, or lies
            outside 0x0000..0xFFFF.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    low: int = Field(..., ge=0, le=MAX_ADDRESS)
    high: int = Field(..., ge=0, le=MAX_ADDRESS)

    @field_validator("low", "high", mode="before")
    @classmethod
    def _parse_bound(cls, v: Any) -> Any:
        """
        Accept ints and hex strings ("7FFF", "0x7fff") for range bounds.

        Args:
            v (Any): Proposed bound.

        Returns:
            Any: The integer bound; range checks are applied by the field constraints.

        Raises:
            RangeError: If the value is a bool, a non-hex string, or another type.
        """
        if isinstance(v, bool):
            raise RangeError(f"range bound must be an int or hex string, got {v!r}")
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            try:
                return int(v.strip(), 16)
            except ValueError as e:
                raise RangeError(f"range bound is not a hex number: {v!r}") from e
        raise RangeError(f"range bound must be an int or hex string, got {type(v).__name__}")

    @field_serializer("low", "high", when_used="json")
    def _format_bound(self, v: int) -> str:
        return f"{v:04X}"

    @property
    def is_empty(self) -> bool:
        return self.low > self.high

    @property
    def is_valid(self) -> bool:
        return not self.is_empty

    @property
    def size(self) -> int:
        """Number of values in the range (0 for an empty range)."""
        return max(0, self.high - self.low + 1)

    def contains(self, value: int) -> bool:
        """Return True if ``low <= value <= high``."""
        return self.low <= value <= self.high

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.contains(value)

    def overlaps(self, other: ClosedRange) -> bool:
        """
        Return True if the two closed intervals share at least one value.

        Empty ranges overlap nothing. The relation is symmetric.
        """
        if self.is_empty or other.is_empty:
            return False
        return self.low <= other.high and other.low <= self.high


class AddressRange(ClosedRange):
    """
    Inclusive range of mesh addresses.

    Attributes:
        low (int): Low address (serialized as ``lowAddress``).
        high (int): High address (serialized as ``highAddress``).

    Examples:
        >>> from meshprov.core.ranges import AddressRange
        >>> r = AddressRange(lowAddress="0001", highAddress="00FF")
        >>> r.is_unicast_range, r.size
        (True, 255)
        >>> r.model_dump(mode="json", by_alias=True)
        {'lowAddress': '0001', 'highAddress': '00FF'}
    """

    low: int = Field(..., alias="lowAddress", ge=0, le=MAX_ADDRESS)
    high: int = Field(..., alias="highAddress", ge=0, le=MAX_ADDRESS)

    @property
    def kind(self) -> AddressKind | None:
        return range_kind(self)

    @property
    def is_unicast_range(self) -> bool:
        return self.kind is AddressKind.UNICAST

    @property
    def is_group_range(self) -> bool:
        return self.kind is AddressKind.GROUP


class SceneRange(ClosedRange):
    """
    Inclusive range of scene numbers.

    Attributes:
        low (int): First scene (serialized as ``firstScene``).
        high (int): Last scene (serialized as ``lastScene``).

    Notes:
        Scene numbers are opaque identifiers; there is no unicast/group distinction.
        Scene 0x0000 is prohibited, so a range starting at 0 is never valid.
    """

    low: int = Field(..., alias="firstScene", ge=0, le=MAX_SCENE)
    high: int = Field(..., alias="lastScene", ge=0, le=MAX_SCENE)

    @property
    def is_valid(self) -> bool:
        return MIN_SCENE <= self.low <= self.high


ALL_UNICAST_ADDRESSES = AddressRange(low=MIN_UNICAST_ADDRESS, high=MAX_UNICAST_ADDRESS)
ALL_GROUP_ADDRESSES = AddressRange(low=MIN_GROUP_ADDRESS, high=MAX_GROUP_ADDRESS)
ALL_SCENES = SceneRange(low=MIN_SCENE, high=MAX_SCENE)


def range_kind(r: AddressRange) -> AddressKind | None:
    """
    Classify an address range by the kind shared by all of its addresses.

    Args:
        r (AddressRange): Range to classify.

    Returns:
        AddressKind | None: The common kind, or None if the range is empty or
        straddles more than one kind.

    Notes:
        Each kind occupies one contiguous block of the address space, so checking
        both endpoints is equivalent to checking every address in between.
    """
    if r.is_empty:
        return None
    kind = address_kind(r.low)
    if address_kind(r.high) is not kind:
        return None
    return kind


# ============================================================================
# Normalization
# ============================================================================

R = TypeVar("R", bound=ClosedRange)


def merged(ranges: Iterable[R]) -> list[R]:
    """
    Return the canonical form of a collection of ranges.

    Args:
        ranges (Iterable[R]): Ranges in any order, possibly overlapping, adjacent
            or empty.

    Returns:
        list[R]: Ranges sorted by low bound, with overlapping and adjacent ranges
        coalesced and empty ranges dropped.

    Notes:
        - Idempotent: ``merged(merged(x)) == merged(x)``.
        - The result does not depend on input order.

    Examples:
        >>> from meshprov.core.ranges import AddressRange, merged
        >>> [(r.low, r.high) for r in merged([AddressRange(low=7, high=10), AddressRange(low=1, high=5)])]
        [(1, 5), (7, 10)]
    """
    candidates = sorted((r for r in ranges if not r.is_empty), key=lambda r: r.low)
    out: list[R] = []
    for r in candidates:
        if out and r.low <= out[-1].high + 1:
            current = out[-1]
            if r.high > current.high:
                out[-1] = current.model_copy(update={"high": r.high})
        else:
            out.append(r)
    return out


class RangeKind(Enum):
    """Kind of a RangeSet; determines its element type and legal bounds."""

    UNICAST = "unicast"
    GROUP = "group"
    SCENE = "scene"

    @property
    def bounds(self) -> ClosedRange:
        """Full-space range for this kind."""
        return _BOUNDS_BY_KIND[self]

    @property
    def range_type(self) -> type[ClosedRange]:
        return SceneRange if self is RangeKind.SCENE else AddressRange


_BOUNDS_BY_KIND: dict[RangeKind, ClosedRange] = {
    RangeKind.UNICAST: ALL_UNICAST_ADDRESSES,
    RangeKind.GROUP: ALL_GROUP_ADDRESSES,
    RangeKind.SCENE: ALL_SCENES,
}


class RangeSet(Generic[R]):
    """
    Ordered collection of ranges of one kind, always in canonical form.

    Args:
        kind (RangeKind): Kind of the set; fixes element type and legal bounds.
        ranges (Iterable[R]): Initial ranges, normalized immediately.

    Raises:
        TypeError: If a range of the wrong type is given (e.g. a SceneRange for
            a unicast set).

    Notes:
        Mutations (insert, merge) build the new canonical list before replacing
        the old one. Mutations of a single set must be serialized by the caller;
        concurrent readers are fine between mutations.
    """

    __slots__ = ("_kind", "_ranges")

    def __init__(self, kind: RangeKind, ranges: Iterable[R] = ()) -> None:
        self._kind = kind
        items = list(ranges)
        for r in items:
            self._check_type(r)
        self._ranges: list[R] = []
        self._store(items)

    def _check_type(self, r: Any) -> None:
        if not isinstance(r, self._kind.range_type):
            raise TypeError(
                f"{self._kind.value} range set expects {self._kind.range_type.__name__}, "
                f"got {type(r).__name__}"
            )

    @property
    def kind(self) -> RangeKind:
        return self._kind

    @property
    def ranges(self) -> tuple[R, ...]:
        """Immutable snapshot of the ranges."""
        return tuple(self._ranges)

    def _store(self, items: list[R]) -> None:
        normalized = merged(items)
        if len(normalized) != len(items):
            logger.debug(
                "merged %s ranges: %d -> %d", self._kind.value, len(items), len(normalized)
            )
        self._ranges = normalized

    def merge(self) -> None:
        """Normalize the stored ranges in place (no-op when already canonical)."""
        self._store(list(self._ranges))

    def insert(self, r: R) -> None:
        """Add a range and re-normalize."""
        self._check_type(r)
        self._store([*self._ranges, r])

    @property
    def is_valid(self) -> bool:
        """
        True if the set is non-empty and every range is non-empty and lies within
        the legal bounds of the set's kind.
        """
        bounds = self._kind.bounds
        return bool(self._ranges) and all(
            bounds.low <= r.low <= r.high <= bounds.high for r in self._ranges
        )

    def contains(self, value: int) -> bool:
        return any(r.contains(value) for r in self._ranges)

    def contains_block(self, first: int, last: int) -> bool:
        """
        Return True if a single stored range contains both ``first`` and ``last``.

        In canonical form this is equivalent to every value in ``[first, last]``
        being covered by the set.
        """
        return any(r.contains(first) and r.contains(last) for r in self._ranges)

    def overlaps(self, other: RangeSet[Any]) -> bool:
        """Return True if any range in this set intersects any range in ``other``."""
        return any(a.overlaps(b) for a in self._ranges for b in other._ranges)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.contains(value)

    def __iter__(self) -> Iterator[R]:
        return iter(tuple(self._ranges))

    def __len__(self) -> int:
        return len(self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self._kind is other._kind and self._ranges == other._ranges

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"0x{r.low:04X}-0x{r.high:04X}" for r in self._ranges)
        return f"RangeSet({self._kind.value}, [{body}])"
