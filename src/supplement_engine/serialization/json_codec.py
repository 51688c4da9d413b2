"""JSON serialization for supplements, values and conflicts.

Field names follow the saved-supplement record format (camelCase, dates as
ISO strings, charge types as "per-room" etc.). All functions are pure.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from supplement_engine import config
from supplement_engine.models.amounts import (
    AgeRange,
    OccupancyPricing,
    OccupantAmounts,
    PositionPricing,
    RoomAmounts,
)
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ChargeType, DayOfWeek, ScopeDimension, SupplementType
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType
from supplement_engine.models.supplement import MealInclusion, Supplement, SupplementValue


def _without_none(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}


# -- Scope -------------------------------------------------------------------


def date_range_to_dict(rng: DateRange) -> dict:
    return _without_none({
        "id": rng.id,
        "startDate": rng.start_date.isoformat(),
        "endDate": rng.end_date.isoformat(),
    })


def date_range_from_dict(data: dict) -> DateRange:
    """Parse a range; a range ending before it starts raises InvalidRangeError."""
    return DateRange.create(
        date.fromisoformat(data["startDate"][:10]),
        date.fromisoformat(data["endDate"][:10]),
        id=data.get("id"),
    )


def _ref_to_dict(item: RoomType | RatePlan) -> dict:
    return _without_none({"id": item.id, "name": item.name, "code": item.code})


def _positions_to_list(items: tuple[PositionPricing, ...]) -> list[dict]:
    return [_without_none({"id": p.id, "position": p.position, "amount": p.amount}) for p in items]


def _positions_from_list(items: list[dict] | None) -> tuple[PositionPricing, ...]:
    return tuple(
        PositionPricing(position=int(p["position"]), amount=float(p["amount"]), id=p.get("id"))
        for p in items or []
    )


def _room_amounts_to_dict(ra: RoomAmounts) -> dict:
    return {
        "baseAmount": ra.base_amount,
        "extraAdultAmount": ra.extra_adult_amount,
        "extraChildAmount": ra.extra_child_amount,
        "extraInfantAmount": ra.extra_infant_amount,
        "includedAdults": ra.included_adults,
    }


def _room_amounts_from_dict(data: dict) -> RoomAmounts:
    return RoomAmounts(
        base_amount=float(data.get("baseAmount", 0.0)),
        extra_adult_amount=float(data.get("extraAdultAmount", 0.0)),
        extra_child_amount=float(data.get("extraChildAmount", 0.0)),
        extra_infant_amount=float(data.get("extraInfantAmount", 0.0)),
        included_adults=int(data.get("includedAdults", 2)),
    )


def _occupant_amounts_to_dict(oa: OccupantAmounts) -> dict:
    return {
        "adultAmount": oa.adult_amount,
        "childAmount": oa.child_amount,
        "infantAmount": oa.infant_amount,
        "childAgeRanges": [
            _without_none({"id": r.id, "minAge": r.min_age, "maxAge": r.max_age, "amount": r.amount})
            for r in oa.child_age_ranges
        ],
        "occupancyPricing": [
            _without_none({"id": p.id, "occupantCount": p.occupant_count, "amount": p.amount})
            for p in oa.occupancy_pricing
        ],
        "adultPricing": _positions_to_list(oa.adult_pricing),
        "childPricing": _positions_to_list(oa.child_pricing),
        "infantPricing": _positions_to_list(oa.infant_pricing),
    }


def _occupant_amounts_from_dict(data: dict) -> OccupantAmounts:
    return OccupantAmounts(
        adult_amount=float(data.get("adultAmount", 0.0)),
        child_amount=float(data.get("childAmount", 0.0)),
        infant_amount=float(data.get("infantAmount", 0.0)),
        child_age_ranges=tuple(
            AgeRange(
                min_age=int(r["minAge"]),
                max_age=int(r["maxAge"]),
                amount=float(r["amount"]),
                id=r.get("id"),
            )
            for r in data.get("childAgeRanges") or []
        ),
        occupancy_pricing=tuple(
            OccupancyPricing(
                occupant_count=int(p["occupantCount"]), amount=float(p["amount"]), id=p.get("id")
            )
            for p in data.get("occupancyPricing") or []
        ),
        adult_pricing=_positions_from_list(data.get("adultPricing")),
        child_pricing=_positions_from_list(data.get("childPricing")),
        infant_pricing=_positions_from_list(data.get("infantPricing")),
    )


def parameters_to_dict(params: ParameterSet) -> dict:
    return _without_none({
        "id": params.id,
        "dateRanges": [date_range_to_dict(r) for r in params.date_ranges],
        "roomTypes": [_ref_to_dict(r) for r in params.room_types],
        "ratePlans": [_ref_to_dict(p) for p in params.rate_plans],
        "chargeType": params.charge_type.value,
        "daysOfWeek": [d.name.lower() for d in params.days_of_week],
        "leadTime": params.lead_time,
        "minStay": params.min_stay,
        "description": params.description or None,
        "roomAmounts": _room_amounts_to_dict(params.room_amounts) if params.room_amounts else None,
        "occupantAmounts": (
            _occupant_amounts_to_dict(params.occupant_amounts) if params.occupant_amounts else None
        ),
    })


def parameters_from_dict(data: dict) -> ParameterSet:
    charge = data.get("chargeType", ChargeType.PER_ROOM.value)
    if charge == "per-adult":  # older records used the short name
        charge = ChargeType.PER_ADULT_CHILD.value
    return ParameterSet(
        id=data.get("id", ""),
        date_ranges=tuple(date_range_from_dict(r) for r in data.get("dateRanges") or []),
        room_types=tuple(
            RoomType(id=str(r["id"]), name=r.get("name", ""), code=r.get("code"))
            for r in data.get("roomTypes") or []
        ),
        rate_plans=tuple(
            RatePlan(id=str(p["id"]), name=p.get("name", ""), code=p.get("code"))
            for p in data.get("ratePlans") or []
        ),
        charge_type=ChargeType(charge),
        days_of_week=tuple(DayOfWeek.from_name(d) for d in data.get("daysOfWeek") or []),
        lead_time=data.get("leadTime"),
        min_stay=data.get("minStay"),
        description=data.get("description", ""),
        room_amounts=(
            _room_amounts_from_dict(data["roomAmounts"]) if data.get("roomAmounts") else None
        ),
        occupant_amounts=(
            _occupant_amounts_from_dict(data["occupantAmounts"])
            if data.get("occupantAmounts")
            else None
        ),
    )


# -- Values and supplements ------------------------------------------------


def value_to_dict(value: SupplementValue) -> dict:
    return _without_none({
        "id": value.id,
        "amount": value.amount,
        "currency": value.currency,
        "parameters": parameters_to_dict(value.parameters),
        "priority": value.priority,
    })


def value_from_dict(data: dict) -> SupplementValue:
    priority = data.get("priority")
    return SupplementValue(
        id=str(data["id"]),
        amount=float(data["amount"]),
        currency=data.get("currency", config.DEFAULT_CURRENCY),
        parameters=parameters_from_dict(data.get("parameters") or {}),
        priority=int(priority) if priority is not None else None,
    )


def supplement_to_dict(supplement: Supplement) -> dict:
    meals = supplement.meal_included
    return _without_none({
        "id": supplement.id,
        "name": supplement.name,
        "type": supplement.type.value,
        "description": supplement.description,
        "code": supplement.code,
        "mealIncluded": (
            {"breakfast": meals.breakfast, "lunch": meals.lunch, "dinner": meals.dinner}
            if meals is not None
            else None
        ),
        "values": [value_to_dict(v) for v in supplement.values],
    })


def supplement_from_dict(data: dict) -> Supplement:
    meals = data.get("mealIncluded")
    return Supplement(
        id=str(data["id"]),
        name=data.get("name", ""),
        type=SupplementType(data.get("type", SupplementType.MEALPLAN.value)),
        description=data.get("description", ""),
        code=data.get("code"),
        meal_included=MealInclusion(**meals) if meals else None,
        values=tuple(value_from_dict(v) for v in data.get("values") or []),
    )


def conflict_to_dict(conflict: Conflict) -> dict:
    return {
        "valueIds": list(conflict.value_ids),
        "conflictingParameters": [d.value for d in conflict.conflicting_parameters],
    }


def conflict_from_dict(data: dict) -> Conflict:
    first, second = data["valueIds"]
    return Conflict(
        value_ids=(str(first), str(second)),
        conflicting_parameters=tuple(ScopeDimension(d) for d in data["conflictingParameters"]),
    )


def to_json_string(obj: Any, indent: int = 2) -> str:
    """Serialize a Supplement, SupplementValue or Conflict to JSON."""
    if isinstance(obj, Supplement):
        payload = supplement_to_dict(obj)
    elif isinstance(obj, SupplementValue):
        payload = value_to_dict(obj)
    elif isinstance(obj, Conflict):
        payload = conflict_to_dict(obj)
    else:
        raise TypeError(f"Cannot serialize {type(obj).__name__}")
    return json.dumps(payload, indent=indent, ensure_ascii=False)

