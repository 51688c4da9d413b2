"""Shared test fixtures: hotel inventory, value factory, orchestrators."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from supplement_engine.conflict_resolution.resolver import OverlapResolver
from supplement_engine.detection.detector import ConflictDetector
from supplement_engine.models.enums import ChargeType
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType
from supplement_engine.models.supplement import SupplementValue
from supplement_engine.orchestrator import ResolutionOrchestrator

ROOMS = (
    RoomType(id="1", name="Standard Room"),
    RoomType(id="2", name="Deluxe Room"),
    RoomType(id="3", name="Junior Suite"),
)

PLANS = (
    RatePlan(id="1", name="Best Available Rate"),
    RatePlan(id="2", name="Advanced Purchase"),
    RatePlan(id="3", name="Retail Rate"),
)


def _d(text: str) -> date:
    """'2024-06-01' -> date(2024, 6, 1)."""
    return date.fromisoformat(text)


def _rng(start: str, end: str) -> DateRange:
    return DateRange(_d(start), _d(end))


@pytest.fixture
def room_types() -> tuple[RoomType, ...]:
    return ROOMS


@pytest.fixture
def rate_plans() -> tuple[RatePlan, ...]:
    return PLANS


@pytest.fixture
def make_value() -> Callable[..., SupplementValue]:
    """Factory: make_value("a", dates=[("2024-01-01", "2024-01-31")], rooms=["1"])."""

    def _make(
        value_id: str,
        dates: list[tuple[str, str]] | None = None,
        rooms: list[str] | None = None,
        plans: list[str] | None = None,
        amount: float = 25.0,
        currency: str = "USD",
        priority: int | None = None,
        charge_type: ChargeType = ChargeType.PER_ROOM,
        **params,
    ) -> SupplementValue:
        return SupplementValue(
            id=value_id,
            amount=amount,
            currency=currency,
            priority=priority,
            parameters=ParameterSet(
                id=f"p-{value_id}",
                date_ranges=tuple(_rng(s, e) for s, e in dates or []),
                room_types=tuple(r for r in ROOMS if r.id in (rooms or [])),
                rate_plans=tuple(p for p in PLANS if p.id in (plans or [])),
                charge_type=charge_type,
                **params,
            ),
        )

    return _make


@pytest.fixture
def resolver() -> OverlapResolver:
    return OverlapResolver(ROOMS, PLANS)


@pytest.fixture
def orchestrator(resolver: OverlapResolver) -> ResolutionOrchestrator:
    """Strict-policy orchestrator with the test inventory."""
    return ResolutionOrchestrator(detector=ConflictDetector("strict"), resolver=resolver)


@pytest.fixture
def any_orchestrator(resolver: OverlapResolver) -> ResolutionOrchestrator:
    return ResolutionOrchestrator(detector=ConflictDetector("any"), resolver=resolver)
