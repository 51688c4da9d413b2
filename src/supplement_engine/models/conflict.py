"""Conflict reports produced by the detector.

Conflicts are plain reports, recomputed from scratch after every
resolution step; nothing holds on to them between steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from supplement_engine.models.enums import ScopeDimension
from supplement_engine.models.scope import DateRange


@dataclass(frozen=True)
class Conflict:
    """Two values whose scopes overlap on the listed dimensions."""

    value_ids: tuple[str, str]
    conflicting_parameters: tuple[ScopeDimension, ...] = field(default_factory=tuple)

    def involves(self, value_id: str) -> bool:
        return value_id in self.value_ids

    def other(self, value_id: str) -> str:
        """Return the id of the other value in the pair."""
        first, second = self.value_ids
        if value_id == first:
            return second
        if value_id == second:
            return first
        raise KeyError(value_id)

    @property
    def weight(self) -> int:
        """Number of overlapping dimensions; summed to measure progress."""
        return len(self.conflicting_parameters)


@dataclass(frozen=True)
class ScopeOverlap:
    """The concrete intersection of two scopes.

    ``date_ranges`` holds the intersecting intervals (a wildcard on both
    sides yields one ``date.min..date.max`` interval). For room types and
    rate plans ``None`` means the overlap is "all" (both sides wildcard).
    """

    date_ranges: tuple[DateRange, ...] = field(default_factory=tuple)
    room_type_ids: frozenset[str] | None = frozenset()
    rate_plan_ids: frozenset[str] | None = frozenset()

    @property
    def dates_overlap(self) -> bool:
        return len(self.date_ranges) > 0

    @property
    def room_types_overlap(self) -> bool:
        return self.room_type_ids is None or len(self.room_type_ids) > 0

    @property
    def rate_plans_overlap(self) -> bool:
        return self.rate_plan_ids is None or len(self.rate_plan_ids) > 0

    def overlaps(self, dimension: ScopeDimension) -> bool:
        if dimension == ScopeDimension.DATE_RANGES:
            return self.dates_overlap
        if dimension == ScopeDimension.ROOM_TYPES:
            return self.room_types_overlap
        return self.rate_plans_overlap
