"""Utility helpers bridging the Streamlit UI and the supplement engine.

Pure functions for reference data, building values from form input,
table rows and action labels. No Streamlit imports here.
"""

from __future__ import annotations

import uuid
from datetime import date
from pathlib import Path

from supplement_engine import config
from supplement_engine.describe import (
    DIMENSION_LABELS,
    charge_type_details,
    describe_dates,
    describe_days,
    describe_rate_plans,
    describe_room_types,
    format_amount,
)
from supplement_engine.models.amounts import OccupancyPricing, OccupantAmounts, RoomAmounts
from supplement_engine.models.enums import ChargeType, DayOfWeek, SupplementType
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType
from supplement_engine.models.session import AssignPriority, KeepValue, RemoveOverlap, SessionAction
from supplement_engine.models.supplement import SupplementValue

# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

ROOM_TYPES: tuple[RoomType, ...] = (
    RoomType(id="1", name="Standard Room"),
    RoomType(id="2", name="Deluxe Room"),
    RoomType(id="3", name="Junior Suite"),
    RoomType(id="4", name="Executive Suite"),
    RoomType(id="5", name="Presidential Suite"),
)

RATE_PLANS: tuple[RatePlan, ...] = (
    RatePlan(id="1", name="Best Available Rate"),
    RatePlan(id="2", name="Advanced Purchase"),
    RatePlan(id="3", name="Retail Rate"),
    RatePlan(id="4", name="Package Rate"),
    RatePlan(id="5", name="Weekend Special"),
)

SUPPLEMENT_TYPES: dict[SupplementType, str] = {
    SupplementType.MEALPLAN: "Mealplan",
    SupplementType.SPA: "Spa Access",
    SupplementType.GYM: "Gym Access",
    SupplementType.OTHER: "Other",
}

CHARGE_TYPE_LABELS: dict[ChargeType, str] = {
    ChargeType.PER_ROOM: "Per Room",
    ChargeType.PER_ADULT_CHILD: "Per Adult/Child",
    ChargeType.PER_OCCUPANT: "Per Occupant",
}

STORE_PATH = Path(__file__).parent / "data" / "supplements.json"


# ---------------------------------------------------------------------------
# Building values from form input
# ---------------------------------------------------------------------------


def build_value(form: dict) -> SupplementValue:
    """Build a SupplementValue from the 'Add value' form.

    Selecting every room type (or rate plan) is stored as the wildcard, so
    the value keeps applying to inventory added later.
    """
    room_ids = set(form.get("room_type_ids", []))
    plan_ids = set(form.get("rate_plan_ids", []))
    room_types = tuple(r for r in ROOM_TYPES if r.id in room_ids)
    rate_plans = tuple(p for p in RATE_PLANS if p.id in plan_ids)
    if len(room_types) == len(ROOM_TYPES):
        room_types = ()
    if len(rate_plans) == len(RATE_PLANS):
        rate_plans = ()

    ranges = tuple(
        DateRange.create(start, end) for start, end in form.get("date_ranges", [])
    )
    charge_type = ChargeType(form.get("charge_type", ChargeType.PER_ROOM.value))
    amount = float(form.get("amount", 0.0))

    room_amounts = None
    occupant_amounts = None
    if charge_type == ChargeType.PER_ROOM:
        room_amounts = RoomAmounts(
            base_amount=amount,
            extra_adult_amount=float(form.get("extra_adult_amount", 0.0)),
            extra_child_amount=float(form.get("extra_child_amount", 0.0)),
            extra_infant_amount=float(form.get("extra_infant_amount", 0.0)),
        )
    elif charge_type == ChargeType.PER_ADULT_CHILD:
        occupant_amounts = OccupantAmounts(
            adult_amount=amount,
            child_amount=float(form.get("child_amount", 0.0)),
            infant_amount=float(form.get("infant_amount", 0.0)),
        )
    else:
        occupant_amounts = OccupantAmounts(
            occupancy_pricing=tuple(
                OccupancyPricing(occupant_count=n, amount=a)
                for n, a in sorted(form.get("occupancy_pricing", {}).items())
            ),
        )

    return SupplementValue(
        id=form.get("id") or str(uuid.uuid4()),
        amount=amount,
        currency=form.get("currency", config.DEFAULT_CURRENCY),
        parameters=ParameterSet(
            id=str(uuid.uuid4()),
            date_ranges=ranges,
            room_types=room_types,
            rate_plans=rate_plans,
            charge_type=charge_type,
            days_of_week=tuple(DayOfWeek.from_name(d) for d in form.get("days_of_week", [])),
            lead_time=form.get("lead_time") or None,
            min_stay=form.get("min_stay") or None,
            description=form.get("description", ""),
            room_amounts=room_amounts,
            occupant_amounts=occupant_amounts,
        ),
    )


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def short_id(value_id: str) -> str:
    return value_id[:8]


def value_row(value: SupplementValue) -> dict:
    """One table row for the values list."""
    params = value.parameters
    return {
        "Value": short_id(value.id),
        "Amount": format_amount(value),
        "Date Ranges": describe_dates(params),
        "Days": describe_days(params),
        "Room Types": describe_room_types(params, ROOM_TYPES),
        "Rate Plans": describe_rate_plans(params, RATE_PLANS),
        "Charge Type": charge_type_details(value),
        "Lead Time": f"{params.lead_time} days" if params.lead_time else "-",
        "Priority": value.priority if value.priority is not None else "-",
    }


def action_label(action: SessionAction) -> str:
    """Button text for a resolution action."""
    if isinstance(action, RemoveOverlap):
        return (
            f"Remove {DIMENSION_LABELS[action.dimension].lower()} overlap "
            f"from {short_id(action.target_value_id)}"
        )
    if isinstance(action, KeepValue):
        return f"Keep only {short_id(action.value_id)}"
    if isinstance(action, AssignPriority):
        order = ", ".join(f"{short_id(v)}={p}" for v, p in action.priorities)
        return f"Assign priorities ({order})"
    return type(action).__name__


def default_date_range(today: date | None = None) -> tuple[date, date]:
    start = today or date.today()
    return start, date(start.year, 12, 31)


def currency_index(currency: str) -> int:
    """Position of ``currency`` in the supported list, falling back to the first."""
    try:
        return config.SUPPORTED_CURRENCIES.index(currency)
    except ValueError:
        return 0
