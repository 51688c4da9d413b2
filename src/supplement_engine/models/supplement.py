"""Supplement records: priced values and the supplement that owns them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable

from supplement_engine.models.enums import SupplementType
from supplement_engine.models.scope import ParameterSet


@dataclass(frozen=True)
class SupplementValue:
    """One priced value and the scope it applies to.

    ``priority`` is optional precedence; when two overlapping values carry
    different priorities the higher one wins at pricing time.
    """

    id: str
    amount: float
    currency: str
    parameters: ParameterSet = field(default_factory=ParameterSet)
    priority: int | None = None

    def with_parameters(self, parameters: ParameterSet) -> SupplementValue:
        """Same value (same id), new scope."""
        return dataclasses.replace(self, parameters=parameters)

    def with_priority(self, priority: int | None) -> SupplementValue:
        return dataclasses.replace(self, priority=priority)


@dataclass(frozen=True)
class MealInclusion:
    """Meals covered by a mealplan supplement."""

    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False

    @property
    def labels(self) -> tuple[str, ...]:
        names = (("breakfast", self.breakfast), ("lunch", self.lunch), ("dinner", self.dinner))
        return tuple(n for n, included in names if included)


@dataclass(frozen=True)
class Supplement:
    """A saved supplement and all of its priced values."""

    id: str
    name: str
    type: SupplementType = SupplementType.MEALPLAN
    description: str = ""
    code: str | None = None
    meal_included: MealInclusion | None = None
    values: tuple[SupplementValue, ...] = field(default_factory=tuple)


def index_values(values: Iterable[SupplementValue]) -> dict[str, SupplementValue]:
    """Map value id -> value. Later duplicates win."""
    return {v.id: v for v in values}
