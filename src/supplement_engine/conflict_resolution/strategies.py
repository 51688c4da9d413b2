"""Resolution strategies for a single conflicting pair of values."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from supplement_engine.exceptions import DanglingReferenceError, UnresolvableOverlapError
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ScopeDimension
from supplement_engine.models.session import AssignPriority, KeepValue, RemoveOverlap
from supplement_engine.models.supplement import SupplementValue, index_values

if TYPE_CHECKING:
    from supplement_engine.conflict_resolution.resolver import OverlapResolver

logger = logging.getLogger(__name__)


def _pair(
    values: Sequence[SupplementValue], conflict: Conflict
) -> tuple[SupplementValue, SupplementValue]:
    by_id = index_values(values)
    missing = [vid for vid in conflict.value_ids if vid not in by_id]
    if missing:
        raise DanglingReferenceError(
            f"Conflict references value(s) no longer present: {', '.join(missing)}",
            value_id=missing[0],
        )
    first, second = conflict.value_ids
    return by_id[first], by_id[second]


class ResolutionStrategy(ABC):
    """Base class for conflict resolution strategies."""

    @abstractmethod
    def apply(
        self,
        values: Sequence[SupplementValue],
        conflict: Conflict,
        resolver: OverlapResolver,
    ) -> tuple[list[SupplementValue], str]:
        """Resolve one conflict.

        Returns the new value list (input order preserved) and a
        human-readable note for the session trace.
        """
        ...


class NarrowScope(ResolutionStrategy):
    """Remove the overlap from one value's scope on one dimension.

    Dates are sliced around the overlap (drop, truncate or split); room
    types and rate plans lose the ids the other value also covers.
    """

    def __init__(self, dimension: ScopeDimension, target_value_id: str) -> None:
        self.dimension = dimension
        self.target_value_id = target_value_id

    def apply(
        self,
        values: Sequence[SupplementValue],
        conflict: Conflict,
        resolver: OverlapResolver,
    ) -> tuple[list[SupplementValue], str]:
        if not conflict.involves(self.target_value_id):
            raise UnresolvableOverlapError(
                f"Value {self.target_value_id} is not part of this conflict"
            )
        if self.dimension not in conflict.conflicting_parameters:
            raise UnresolvableOverlapError(
                f"The pair does not overlap on {self.dimension.value}"
            )

        first, second = _pair(values, conflict)
        target, other = (first, second) if first.id == self.target_value_id else (second, first)
        narrowed = resolver.narrow(target.parameters, other.parameters, self.dimension)
        updated = target.with_parameters(narrowed)

        logger.info(
            "Removed %s overlap with %s from value %s",
            self.dimension.value,
            other.id,
            target.id,
        )
        new_values = [updated if v.id == target.id else v for v in values]
        return new_values, f"Removed {self.dimension.value} overlap from {target.id}"


class KeepOne(ResolutionStrategy):
    """Keep one value of a totally overlapping pair and discard the other.

    Only allowed when no partial removal exists for either value.
    """

    def __init__(self, keep_value_id: str) -> None:
        self.keep_value_id = keep_value_id

    def apply(
        self,
        values: Sequence[SupplementValue],
        conflict: Conflict,
        resolver: OverlapResolver,
    ) -> tuple[list[SupplementValue], str]:
        if not conflict.involves(self.keep_value_id):
            raise UnresolvableOverlapError(
                f"Value {self.keep_value_id} is not part of this conflict"
            )
        _pair(values, conflict)
        if resolver.removal_options(values, conflict):
            raise UnresolvableOverlapError(
                "Overlap is partial; narrow one of the values instead of discarding one"
            )

        dropped = conflict.other(self.keep_value_id)
        logger.info("Kept value %s, discarded %s", self.keep_value_id, dropped)
        return [v for v in values if v.id != dropped], f"Kept {self.keep_value_id}, discarded {dropped}"


class PriorityOrder(ResolutionStrategy):
    """Leave both scopes untouched and give the values explicit precedence."""

    def __init__(self, priorities: dict[str, int]) -> None:
        self.priorities = dict(priorities)

    def apply(
        self,
        values: Sequence[SupplementValue],
        conflict: Conflict,
        resolver: OverlapResolver,
    ) -> tuple[list[SupplementValue], str]:
        by_id = index_values(values)
        unknown = [vid for vid in self.priorities if vid not in by_id]
        if unknown:
            raise DanglingReferenceError(
                f"Priority given for unknown value(s): {', '.join(unknown)}",
                value_id=unknown[0],
            )
        first, second = _pair(values, conflict)
        p_first = self.priorities.get(first.id, first.priority)
        p_second = self.priorities.get(second.id, second.priority)
        if p_first is None or p_second is None or p_first == p_second:
            raise UnresolvableOverlapError(
                "Both values need distinct priorities to order the overlap"
            )

        new_values = [
            v.with_priority(self.priorities[v.id]) if v.id in self.priorities else v
            for v in values
        ]
        winner = first.id if p_first > p_second else second.id
        logger.info("Ordered %s by priority, %s takes precedence", conflict.value_ids, winner)
        return new_values, f"{winner} takes precedence (priority {max(p_first, p_second)})"


def strategy_for(action: RemoveOverlap | KeepValue | AssignPriority) -> ResolutionStrategy:
    """Map a session action to the strategy that carries it out."""
    if isinstance(action, RemoveOverlap):
        return NarrowScope(action.dimension, action.target_value_id)
    if isinstance(action, KeepValue):
        return KeepOne(action.value_id)
    if isinstance(action, AssignPriority):
        return PriorityOrder(dict(action.priorities))
    raise TypeError(f"Not a resolution action: {action!r}")
