"""Amount breakdowns attached to a value's parameters, one per charge type."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RoomAmounts:
    """Per-room charge: a base amount plus extras for additional guests."""

    base_amount: float
    extra_adult_amount: float = 0.0
    extra_child_amount: float = 0.0
    extra_infant_amount: float = 0.0
    included_adults: int = 2  # adults covered by the base amount


@dataclass(frozen=True)
class AgeRange:
    """Child price override for an inclusive age band."""

    min_age: int
    max_age: int
    amount: float
    id: str | None = field(default=None, compare=False)

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class OccupancyPricing:
    """Flat price for a given total number of occupants."""

    occupant_count: int
    amount: float
    id: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class PositionPricing:
    """Price for the Nth guest of a category (1-indexed)."""

    position: int
    amount: float
    id: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class OccupantAmounts:
    """Per-guest charges used by the per-adult-child and per-occupant types."""

    adult_amount: float = 0.0
    child_amount: float = 0.0
    infant_amount: float = 0.0
    child_age_ranges: tuple[AgeRange, ...] = field(default_factory=tuple)
    occupancy_pricing: tuple[OccupancyPricing, ...] = field(default_factory=tuple)
    adult_pricing: tuple[PositionPricing, ...] = field(default_factory=tuple)
    child_pricing: tuple[PositionPricing, ...] = field(default_factory=tuple)
    infant_pricing: tuple[PositionPricing, ...] = field(default_factory=tuple)
