"""Scope comparator: pure pairwise overlap predicates, one per dimension.

An empty list is a wildcard and overlaps with anything, including another
wildcard. Room types and rate plans compare by ``id`` only.
"""

from __future__ import annotations

from typing import Callable, Sequence

from supplement_engine.math.date_ranges import overlap_intervals, ranges_intersect, split_valid
from supplement_engine.models.conflict import ScopeOverlap
from supplement_engine.models.enums import ScopeDimension
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType


def date_ranges_overlap(a: Sequence[DateRange], b: Sequence[DateRange]) -> bool:
    """True when some valid range of ``a`` intersects some valid range of ``b``.

    Inverted ranges are ignored. A list holding only inverted ranges is
    still scoped, so it covers no dates rather than all of them.
    """
    if not a and not b:
        return True
    valid_a, _ = split_valid(a)
    valid_b, _ = split_valid(b)
    if not a:
        return bool(valid_b)
    if not b:
        return bool(valid_a)
    return any(ranges_intersect(r1, r2) for r1 in valid_a for r2 in valid_b)


def _ids_overlap(a: Sequence[RoomType | RatePlan], b: Sequence[RoomType | RatePlan]) -> bool:
    if not a or not b:
        return True
    ids_b = {item.id for item in b}
    return any(item.id in ids_b for item in a)


def room_types_overlap(a: Sequence[RoomType], b: Sequence[RoomType]) -> bool:
    """True when either side is a wildcard or the id sets intersect."""
    return _ids_overlap(a, b)


def rate_plans_overlap(a: Sequence[RatePlan], b: Sequence[RatePlan]) -> bool:
    """True when either side is a wildcard or the id sets intersect."""
    return _ids_overlap(a, b)


_PREDICATES: dict[ScopeDimension, Callable[[Sequence, Sequence], bool]] = {
    ScopeDimension.DATE_RANGES: date_ranges_overlap,
    ScopeDimension.ROOM_TYPES: room_types_overlap,
    ScopeDimension.RATE_PLANS: rate_plans_overlap,
}


def dimension_overlaps(
    dimension: ScopeDimension, a: ParameterSet, b: ParameterSet
) -> bool:
    """Apply the predicate for one dimension to two parameter sets."""
    return _PREDICATES[dimension](a.dimension(dimension), b.dimension(dimension))


def _id_intersection(
    a: Sequence[RoomType | RatePlan], b: Sequence[RoomType | RatePlan]
) -> frozenset[str] | None:
    if not a and not b:
        return None
    if not a:
        return frozenset(item.id for item in b)
    if not b:
        return frozenset(item.id for item in a)
    return frozenset(item.id for item in a) & frozenset(item.id for item in b)


def scope_overlap(a: ParameterSet, b: ParameterSet) -> ScopeOverlap:
    """Compute the concrete intersection of two scopes on every dimension."""
    return ScopeOverlap(
        date_ranges=overlap_intervals(a.date_ranges, b.date_ranges),
        room_type_ids=_id_intersection(a.room_types, b.room_types),
        rate_plan_ids=_id_intersection(a.rate_plans, b.rate_plans),
    )
