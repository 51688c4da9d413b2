"""Description builder: human-readable labels for values, scopes and conflicts.

Produces the short texts shown next to each value in the editor and in
the conflict view: amounts, charge-type details and scope summaries.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ChargeType, DayOfWeek, ScopeDimension
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType
from supplement_engine.models.supplement import SupplementValue

_CHARGE_LABELS: dict[ChargeType, str] = {
    ChargeType.PER_ROOM: "Per Room",
    ChargeType.PER_ADULT_CHILD: "Per Adult/Child",
    ChargeType.PER_OCCUPANT: "Per Occupant",
}

DIMENSION_LABELS: dict[ScopeDimension, str] = {
    ScopeDimension.DATE_RANGES: "Date Ranges",
    ScopeDimension.ROOM_TYPES: "Room Types",
    ScopeDimension.RATE_PLANS: "Rate Plans",
}


def _fmt_amount(amount: float) -> str:
    return f"{amount:g}"


def format_date(day: date) -> str:
    """e.g. date(2024, 6, 1) -> 'Jun 1, 2024'."""
    return f"{day:%b} {day.day}, {day.year}"


def format_date_range(rng: DateRange) -> str:
    """Format a range; open ends from a wildcard complement read as '…'."""
    start = "…" if rng.is_open_start else format_date(rng.start_date)
    end = "…" if rng.is_open_end else format_date(rng.end_date)
    return f"{start} - {end}"


def format_amount(value: SupplementValue) -> str:
    """Headline amount for a value, e.g. '25 USD per room'."""
    params = value.parameters
    cur = value.currency
    if params.charge_type == ChargeType.PER_ROOM and params.room_amounts:
        return f"{_fmt_amount(params.room_amounts.base_amount)} {cur} per room"
    if params.charge_type == ChargeType.PER_ADULT_CHILD and params.occupant_amounts:
        return f"{_fmt_amount(params.occupant_amounts.adult_amount)} {cur} per adult"
    if params.charge_type == ChargeType.PER_OCCUPANT and params.occupant_amounts:
        pricing = params.occupant_amounts.occupancy_pricing
        if pricing:
            first = pricing[0]
            plural = "s" if first.occupant_count > 1 else ""
            return f"{_fmt_amount(first.amount)} {cur} for {first.occupant_count} occupant{plural}"
    return f"{_fmt_amount(value.amount)} {cur}"


def charge_type_details(value: SupplementValue) -> str:
    """Charge type plus its breakdown, e.g. 'Per Room (+10 USD per extra adult)'."""
    params = value.parameters
    cur = value.currency
    label = _CHARGE_LABELS[params.charge_type]

    if params.charge_type == ChargeType.PER_ROOM:
        ra = params.room_amounts
        if ra is None:
            return label
        extras = []
        if ra.extra_adult_amount > 0:
            extras.append(f"+{_fmt_amount(ra.extra_adult_amount)} {cur} per extra adult")
        if ra.extra_child_amount > 0:
            extras.append(f"+{_fmt_amount(ra.extra_child_amount)} {cur} per extra child")
        if ra.extra_infant_amount > 0:
            extras.append(f"+{_fmt_amount(ra.extra_infant_amount)} {cur} per extra infant")
        return f"{label} ({', '.join(extras)})" if extras else label

    oa = params.occupant_amounts
    if oa is None:
        return label

    if params.charge_type == ChargeType.PER_ADULT_CHILD:
        details = [f"Adult: {_fmt_amount(oa.adult_amount)} {cur}"]
        if oa.child_amount > 0:
            details.append(f"Child: {_fmt_amount(oa.child_amount)} {cur}")
        if oa.infant_amount > 0:
            details.append(f"Infant: {_fmt_amount(oa.infant_amount)} {cur}")
        if oa.child_age_ranges:
            bands = ", ".join(
                f"Ages {r.min_age}-{r.max_age}: {_fmt_amount(r.amount)} {cur}"
                for r in oa.child_age_ranges
            )
            details.append(f"Age Ranges: {bands}")
        return f"{label} ({', '.join(details)})"

    pricing = [
        f"{p.occupant_count} occupant{'s' if p.occupant_count > 1 else ''}: "
        f"{_fmt_amount(p.amount)} {cur}"
        for p in oa.occupancy_pricing
    ]
    return f"{label} ({', '.join(pricing)})" if pricing else label


def describe_dates(params: ParameterSet) -> str:
    if not params.date_ranges:
        return "All dates"
    return "; ".join(format_date_range(r) for r in params.date_ranges)


def _describe_items(
    items: Sequence[RoomType | RatePlan],
    inventory: Sequence[RoomType | RatePlan],
    everything: str,
) -> str:
    # Selecting the whole inventory reads the same as the wildcard
    if not items or (inventory and {i.id for i in items} == {i.id for i in inventory}):
        return everything
    return ", ".join(i.name or i.id for i in items)


def describe_room_types(params: ParameterSet, inventory: Sequence[RoomType] = ()) -> str:
    return _describe_items(params.room_types, inventory, "All room types")


def describe_rate_plans(params: ParameterSet, inventory: Sequence[RatePlan] = ()) -> str:
    return _describe_items(params.rate_plans, inventory, "All rate plans")


def describe_days(params: ParameterSet) -> str:
    if not params.days_of_week or len(set(params.days_of_week)) == len(DayOfWeek):
        return "All days"
    return ", ".join(d.name.title()[:3] for d in sorted(set(params.days_of_week)))


def describe_conflict(conflict: Conflict, index: int | None = None) -> str:
    """One-line summary, e.g. 'Conflict 1: a / b overlap on Date Ranges, Room Types'."""
    prefix = f"Conflict {index + 1}: " if index is not None else ""
    dims = ", ".join(DIMENSION_LABELS[d] for d in conflict.conflicting_parameters)
    first, second = conflict.value_ids
    return f"{prefix}{first} / {second} overlap on {dims}"
