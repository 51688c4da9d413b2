"""Scope records: the date ranges, room types and rate plans a value applies to.

An empty tuple in any scope dimension is a wildcard ("applies to all"),
never "applies to none". Records are frozen; the resolver builds new
records with ``dataclasses.replace`` instead of mutating shared ones.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Union

from supplement_engine.exceptions import InvalidRangeError
from supplement_engine.models.amounts import OccupantAmounts, RoomAmounts
from supplement_engine.models.enums import ChargeType, DayOfWeek, ScopeDimension


@dataclass(frozen=True)
class DateRange:
    """Closed date interval, inclusive on both ends."""

    start_date: date
    end_date: date
    id: str | None = field(default=None, compare=False)

    @classmethod
    def create(cls, start_date: date, end_date: date, id: str | None = None) -> DateRange:
        """Build a range, rejecting one that ends before it starts."""
        if start_date > end_date:
            raise InvalidRangeError(
                f"Date range ends before it starts: {start_date} > {end_date}"
            )
        return cls(start_date=start_date, end_date=end_date, id=id)

    @property
    def is_valid(self) -> bool:
        return self.start_date <= self.end_date

    @property
    def day_count(self) -> int:
        """Number of calendar days covered, 0 for an inverted range."""
        if not self.is_valid:
            return 0
        return (self.end_date - self.start_date).days + 1

    @property
    def is_open_start(self) -> bool:
        return self.start_date == date.min

    @property
    def is_open_end(self) -> bool:
        return self.end_date == date.max

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class RoomType:
    """Hotel room type reference data. Equality is by ``id`` only."""

    id: str
    name: str = field(default="", compare=False)
    code: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class RatePlan:
    """Hotel rate plan reference data. Equality is by ``id`` only."""

    id: str
    name: str = field(default="", compare=False)
    code: str | None = field(default=None, compare=False)


ScopeItem = Union[DateRange, RoomType, RatePlan]

_DIMENSION_FIELDS: dict[ScopeDimension, str] = {
    ScopeDimension.DATE_RANGES: "date_ranges",
    ScopeDimension.ROOM_TYPES: "room_types",
    ScopeDimension.RATE_PLANS: "rate_plans",
}


@dataclass(frozen=True)
class ParameterSet:
    """The scope and charge configuration of one priced value.

    Only ``date_ranges``, ``room_types`` and ``rate_plans`` take part in
    conflict detection. The remaining fields are carried along for pricing
    and display.
    """

    id: str = ""
    date_ranges: tuple[DateRange, ...] = field(default_factory=tuple)
    room_types: tuple[RoomType, ...] = field(default_factory=tuple)
    rate_plans: tuple[RatePlan, ...] = field(default_factory=tuple)
    charge_type: ChargeType = ChargeType.PER_ROOM

    # Applicability filters, empty/None means unrestricted
    days_of_week: tuple[DayOfWeek, ...] = field(default_factory=tuple)
    lead_time: int | None = None  # minimum days between booking and arrival
    min_stay: int | None = None  # minimum nights

    description: str = ""
    room_amounts: RoomAmounts | None = None
    occupant_amounts: OccupantAmounts | None = None

    def dimension(self, dimension: ScopeDimension) -> tuple[ScopeItem, ...]:
        """Return the items of one scope dimension."""
        return getattr(self, _DIMENSION_FIELDS[dimension])

    def with_dimension(
        self, dimension: ScopeDimension, items: tuple[ScopeItem, ...]
    ) -> ParameterSet:
        """Return a copy with one scope dimension replaced."""
        return dataclasses.replace(self, **{_DIMENSION_FIELDS[dimension]: tuple(items)})

    def is_wildcard(self, dimension: ScopeDimension) -> bool:
        return len(self.dimension(dimension)) == 0

    @property
    def room_type_ids(self) -> frozenset[str]:
        return frozenset(r.id for r in self.room_types)

    @property
    def rate_plan_ids(self) -> frozenset[str]:
        return frozenset(p.id for p in self.rate_plans)
