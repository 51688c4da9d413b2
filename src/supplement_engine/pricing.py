"""Supplement pricing: which value applies to a stay night and what it costs.

A value applies to a night when the night falls in its date ranges, the
booking's room type and rate plan are in scope, the weekday is allowed,
and the booking satisfies the lead time and minimum stay. When several
values apply, the highest explicit priority wins; unprioritised values
rank below any prioritised one and ties fall back to list order.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

import numpy as np
import pandas as pd

from supplement_engine.models.amounts import OccupantAmounts, PositionPricing, RoomAmounts
from supplement_engine.models.booking import Booking
from supplement_engine.models.enums import ChargeType, DayOfWeek
from supplement_engine.models.supplement import SupplementValue

logger = logging.getLogger(__name__)

QUOTE_COLUMNS = ["night", "weekday", "value_id", "amount", "currency"]


# ---------------------------------------------------------------------------
# Applicability
# ---------------------------------------------------------------------------


def value_applies(value: SupplementValue, booking: Booking, night: date) -> bool:
    """True when *value* prices *night* of *booking*."""
    params = value.parameters

    if params.date_ranges and not any(r.contains(night) for r in params.date_ranges):
        return False
    if params.room_types and booking.room_type_id not in params.room_type_ids:
        return False
    if params.rate_plans and booking.rate_plan_id not in params.rate_plan_ids:
        return False
    if params.days_of_week and DayOfWeek(night.isoweekday()) not in params.days_of_week:
        return False
    if params.lead_time is not None and booking.lead_days < params.lead_time:
        return False
    if params.min_stay is not None and booking.nights < params.min_stay:
        return False
    return True


def _rank(value: SupplementValue) -> float:
    return -np.inf if value.priority is None else float(value.priority)


def select_value(
    values: Sequence[SupplementValue], booking: Booking, night: date
) -> SupplementValue | None:
    """Pick the value that prices *night*, or None if nothing applies."""
    candidates = [v for v in values if value_applies(v, booking, night)]
    if not candidates:
        return None

    ranks = np.array([_rank(v) for v in candidates])
    best = int(np.argmax(ranks))  # first occurrence of the maximum
    if int(np.count_nonzero(ranks == ranks[best])) > 1:
        logger.warning(
            "Ambiguous supplement on %s: %d values apply with equal precedence, using %s",
            night.isoformat(),
            int(np.count_nonzero(ranks == ranks[best])),
            candidates[best].id,
        )
    return candidates[best]


# ---------------------------------------------------------------------------
# Charges
# ---------------------------------------------------------------------------


def _positional(
    count: int, pricing: Sequence[PositionPricing], default: float
) -> list[float]:
    by_position = {p.position: p.amount for p in pricing}
    return [by_position.get(n, default) for n in range(1, count + 1)]


def _room_charge(amounts: RoomAmounts, booking: Booking) -> float:
    extra_adults = max(0, booking.adults - amounts.included_adults)
    return (
        amounts.base_amount
        + extra_adults * amounts.extra_adult_amount
        + len(booking.children) * amounts.extra_child_amount
        + booking.infants * amounts.extra_infant_amount
    )


def _adult_child_charge(amounts: OccupantAmounts, booking: Booking) -> float:
    adults = _positional(booking.adults, amounts.adult_pricing, amounts.adult_amount)

    child_positions = {p.position: p.amount for p in amounts.child_pricing}
    children: list[float] = []
    for position, age in enumerate(booking.children, start=1):
        if position in child_positions:
            children.append(child_positions[position])
            continue
        band = next((r for r in amounts.child_age_ranges if r.contains(age)), None)
        children.append(band.amount if band is not None else amounts.child_amount)

    infants = _positional(booking.infants, amounts.infant_pricing, amounts.infant_amount)
    return float(np.sum(adults + children + infants))


def _occupant_charge(value: SupplementValue, amounts: OccupantAmounts, booking: Booking) -> float:
    table = sorted(amounts.occupancy_pricing, key=lambda p: p.occupant_count)
    exact = [p for p in table if p.occupant_count == booking.occupants]
    if exact:
        return exact[0].amount
    below = [p for p in table if p.occupant_count < booking.occupants]
    if below:
        return below[-1].amount
    return value.amount * booking.occupants


def charge_for(value: SupplementValue, booking: Booking) -> float:
    """Nightly charge of *value* for the booking's guests."""
    params = value.parameters

    if params.charge_type == ChargeType.PER_ROOM:
        if params.room_amounts is None:
            return value.amount
        return _room_charge(params.room_amounts, booking)

    if params.charge_type == ChargeType.PER_ADULT_CHILD:
        if params.occupant_amounts is None:
            return value.amount * booking.occupants
        return _adult_child_charge(params.occupant_amounts, booking)

    if params.occupant_amounts is None:
        return value.amount * booking.occupants
    return _occupant_charge(value, params.occupant_amounts, booking)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


def quote_stay(values: Sequence[SupplementValue], booking: Booking) -> pd.DataFrame:
    """Night-by-night quote. Nights with no applicable value get amount 0."""
    rows = []
    for night in pd.date_range(booking.check_in, periods=booking.nights, freq="D"):
        day = night.date()
        value = select_value(values, booking, day)
        rows.append(
            {
                "night": day,
                "weekday": DayOfWeek(day.isoweekday()).name.title(),
                "value_id": value.id if value is not None else None,
                "amount": round(charge_for(value, booking), 2) if value is not None else 0.0,
                "currency": value.currency if value is not None else None,
            }
        )
    # object columns keep None for unpriced nights
    frame = pd.DataFrame(rows, columns=QUOTE_COLUMNS, dtype=object)
    frame["amount"] = frame["amount"].astype(float)
    return frame


def quote_totals(quote: pd.DataFrame) -> dict[str, float]:
    """Sum a quote per currency."""
    priced = quote.dropna(subset=["currency"])
    if priced.empty:
        return {}
    totals = priced.groupby("currency")["amount"].sum()
    return {str(cur): round(float(total), 2) for cur, total in totals.items()}
