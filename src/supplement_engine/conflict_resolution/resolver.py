"""Overlap resolver: rewrites one value's scope to remove an overlap."""

from __future__ import annotations

import logging
from typing import Sequence

from supplement_engine.conflict_resolution.strategies import strategy_for
from supplement_engine.exceptions import DanglingReferenceError, UnresolvableOverlapError
from supplement_engine.math.date_ranges import (
    FULL_RANGE,
    overlap_intervals,
    split_valid,
    subtract_intervals,
)
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ScopeDimension
from supplement_engine.models.scope import ParameterSet, RatePlan, RoomType, ScopeItem
from supplement_engine.models.session import AssignPriority, KeepValue, RemoveOverlap
from supplement_engine.models.supplement import SupplementValue, index_values

logger = logging.getLogger(__name__)


class OverlapResolver:
    """Computes narrowed scopes and applies resolution actions.

    A wildcard (empty) dimension can still be narrowed: dates become the
    complement of the other value's ranges, room types and rate plans
    become the hotel inventory minus the other value's ids. Without an
    inventory a wildcard room type / rate plan list cannot be narrowed.

    The resolver never returns an empty list for a dimension: that would
    silently turn a scoped value into one that applies to everything.
    Such requests raise UnresolvableOverlapError.
    """

    def __init__(
        self,
        room_types: Sequence[RoomType] = (),
        rate_plans: Sequence[RatePlan] = (),
    ) -> None:
        self.room_types = tuple(room_types)
        self.rate_plans = tuple(rate_plans)

    # ------------------------------------------------------------------
    # Scope narrowing
    # ------------------------------------------------------------------

    def narrow(
        self,
        target: ParameterSet,
        other: ParameterSet,
        dimension: ScopeDimension,
    ) -> ParameterSet:
        """Return ``target`` with its overlap with ``other`` removed on one dimension."""
        if dimension == ScopeDimension.DATE_RANGES:
            items = self._narrow_dates(target, other)
        else:
            items = self._narrow_ids(target, other, dimension)
        return target.with_dimension(dimension, items)

    def _narrow_dates(self, target: ParameterSet, other: ParameterSet) -> tuple[ScopeItem, ...]:
        base, dropped = split_valid(target.date_ranges)
        if dropped:
            logger.warning(
                "Ignoring %d inverted date range(s) on parameters %s: %s",
                len(dropped),
                target.id or "<unnamed>",
                ", ".join(f"{r.start_date}..{r.end_date}" for r in dropped),
            )
        if not target.date_ranges:
            base = (FULL_RANGE,)
        elif not base:
            raise UnresolvableOverlapError("Value has no valid date ranges to narrow")

        other_valid, _ = split_valid(other.date_ranges)
        if other.date_ranges and not other_valid:
            raise UnresolvableOverlapError("The other value has no valid date ranges")
        cuts = overlap_intervals(base, other_valid)
        remaining = subtract_intervals(base, cuts)

        if not remaining:
            raise UnresolvableOverlapError(
                "Removing the overlap would leave no dates, which would make "
                "the value apply to all dates"
            )
        if remaining == base:
            raise UnresolvableOverlapError("There is no date overlap to remove")
        return remaining

    def _narrow_ids(
        self,
        target: ParameterSet,
        other: ParameterSet,
        dimension: ScopeDimension,
    ) -> tuple[ScopeItem, ...]:
        label = "room types" if dimension == ScopeDimension.ROOM_TYPES else "rate plans"
        base = target.dimension(dimension)
        if not base:
            base = self.room_types if dimension == ScopeDimension.ROOM_TYPES else self.rate_plans
            if not base:
                raise UnresolvableOverlapError(
                    f"Value applies to all {label}; cannot narrow it without the "
                    f"hotel's {label} inventory"
                )

        other_items = other.dimension(dimension)
        if not other_items:
            raise UnresolvableOverlapError(
                f"The other value applies to all {label}; removing them would leave none"
            )

        other_ids = {item.id for item in other_items}
        remaining = tuple(item for item in base if item.id not in other_ids)
        if not remaining:
            raise UnresolvableOverlapError(
                f"Removing the overlap would leave no {label}, which would make "
                f"the value apply to all {label}"
            )
        if len(remaining) == len(base):
            raise UnresolvableOverlapError(f"There is no {label} overlap to remove")
        return remaining

    # ------------------------------------------------------------------
    # Options and application
    # ------------------------------------------------------------------

    def removal_options(
        self, values: Sequence[SupplementValue], conflict: Conflict
    ) -> list[RemoveOverlap]:
        """Every (dimension, target) removal that would actually apply."""
        by_id = index_values(values)
        if not all(vid in by_id for vid in conflict.value_ids):
            return []

        options: list[RemoveOverlap] = []
        for dimension in conflict.conflicting_parameters:
            for target_id in conflict.value_ids:
                target = by_id[target_id]
                other = by_id[conflict.other(target_id)]
                try:
                    self.narrow(target.parameters, other.parameters, dimension)
                except UnresolvableOverlapError:
                    continue
                options.append(RemoveOverlap(dimension=dimension, target_value_id=target_id))
        return options

    def is_total_overlap(self, values: Sequence[SupplementValue], conflict: Conflict) -> bool:
        """No partial removal exists: keeping one value is the only way out."""
        return not self.removal_options(values, conflict)

    def resolve(
        self,
        values: Sequence[SupplementValue],
        conflict: Conflict,
        action: RemoveOverlap | KeepValue | AssignPriority,
    ) -> tuple[list[SupplementValue], str]:
        """Apply one resolution action. Returns the new list and a trace note."""
        by_id = index_values(values)
        missing = [vid for vid in conflict.value_ids if vid not in by_id]
        if missing:
            raise DanglingReferenceError(
                f"Conflict references value {missing[0]}, which is no longer present",
                value_id=missing[0],
            )
        return strategy_for(action).apply(values, conflict, self)


def resolve_overlap(
    values: Sequence[SupplementValue],
    conflict: Conflict,
    strategy: RemoveOverlap | KeepValue | AssignPriority,
    room_types: Sequence[RoomType] = (),
    rate_plans: Sequence[RatePlan] = (),
) -> list[SupplementValue]:
    """Resolve one conflict and return the updated value list.

    Raises UnresolvableOverlapError or DanglingReferenceError when the
    strategy cannot be applied.
    """
    new_values, _ = OverlapResolver(room_types, rate_plans).resolve(values, conflict, strategy)
    return new_values
