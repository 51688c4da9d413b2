"""Data models for the supplement engine."""

from supplement_engine.models.amounts import (
    AgeRange,
    OccupancyPricing,
    OccupantAmounts,
    PositionPricing,
    RoomAmounts,
)
from supplement_engine.models.booking import Booking
from supplement_engine.models.conflict import Conflict, ScopeOverlap
from supplement_engine.models.enums import (
    ALL_DIMENSIONS,
    ChargeType,
    ConflictPolicy,
    DayOfWeek,
    NoticeKind,
    ScopeDimension,
    SessionStatus,
    SupplementType,
)
from supplement_engine.models.scope import DateRange, ParameterSet, RatePlan, RoomType
from supplement_engine.models.session import (
    AcceptAll,
    AssignPriority,
    Cancel,
    Finalize,
    KeepValue,
    RemoveOverlap,
    ResolutionState,
    ResolutionStep,
    SelectConflict,
    SessionAction,
    SessionNotice,
    SessionOutcome,
)
from supplement_engine.models.supplement import MealInclusion, Supplement, SupplementValue

__all__ = [
    "ALL_DIMENSIONS",
    "AcceptAll",
    "AgeRange",
    "AssignPriority",
    "Booking",
    "Cancel",
    "ChargeType",
    "Conflict",
    "ConflictPolicy",
    "DateRange",
    "DayOfWeek",
    "Finalize",
    "KeepValue",
    "MealInclusion",
    "NoticeKind",
    "OccupancyPricing",
    "OccupantAmounts",
    "ParameterSet",
    "PositionPricing",
    "RatePlan",
    "RemoveOverlap",
    "ResolutionState",
    "ResolutionStep",
    "RoomAmounts",
    "RoomType",
    "ScopeDimension",
    "ScopeOverlap",
    "SelectConflict",
    "SessionAction",
    "SessionNotice",
    "SessionOutcome",
    "SessionStatus",
    "Supplement",
    "SupplementType",
    "SupplementValue",
]
