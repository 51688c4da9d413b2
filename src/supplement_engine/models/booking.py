"""Booking snapshot used to price supplements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from supplement_engine.models.enums import INFANT_MAX_AGE


@dataclass(frozen=True)
class Booking:
    """A stay in one room: arrival, length, room/rate and the guests."""

    check_in: date
    nights: int
    room_type_id: str
    rate_plan_id: str
    adults: int = 2
    child_ages: tuple[int, ...] = field(default_factory=tuple)
    booked_on: date | None = None  # None = booked on arrival day

    @property
    def check_out(self) -> date:
        return self.check_in + timedelta(days=self.nights)

    @property
    def lead_days(self) -> int:
        if self.booked_on is None:
            return 0
        return (self.check_in - self.booked_on).days

    @property
    def children(self) -> tuple[int, ...]:
        """Ages of guests charged as children (infants excluded)."""
        return tuple(a for a in self.child_ages if a >= INFANT_MAX_AGE)

    @property
    def infants(self) -> int:
        return sum(1 for a in self.child_ages if a < INFANT_MAX_AGE)

    @property
    def occupants(self) -> int:
        return self.adults + len(self.child_ages)
