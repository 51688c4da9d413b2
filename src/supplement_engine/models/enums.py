"""Enumerations and constants for the supplement engine."""

from enum import Enum, IntEnum, auto


class ChargeType(str, Enum):
    """How a supplement value is charged against a booking."""

    PER_ROOM = "per-room"
    PER_ADULT_CHILD = "per-adult-child"
    PER_OCCUPANT = "per-occupant"


class ScopeDimension(str, Enum):
    """Scope dimensions evaluated for conflicts.

    Values match the camelCase field names used in saved records.
    """

    DATE_RANGES = "dateRanges"
    ROOM_TYPES = "roomTypes"
    RATE_PLANS = "ratePlans"


# Detection order, also the order dimensions are listed in a Conflict
ALL_DIMENSIONS: tuple[ScopeDimension, ...] = (
    ScopeDimension.DATE_RANGES,
    ScopeDimension.ROOM_TYPES,
    ScopeDimension.RATE_PLANS,
)


class SupplementType(str, Enum):
    """Kinds of supplement a hotel can configure."""

    MEALPLAN = "mealplan"
    SPA = "spa"
    GYM = "gym"
    OTHER = "other"


class DayOfWeek(IntEnum):
    """ISO weekday numbering (Monday=1)."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def from_name(cls, name: str) -> "DayOfWeek":
        """Parse 'monday', 'Mon', 'MONDAY' etc."""
        key = name.strip().upper()
        for day in cls:
            if day.name == key or (len(key) >= 3 and day.name.startswith(key)):
                return day
        raise ValueError(f"Unknown day of week: {name!r}")


class ConflictPolicy(str, Enum):
    """When two values are reported as conflicting.

    STRICT: all three dimensions overlap at once.
    ANY_DIMENSION: at least one dimension overlaps.
    """

    STRICT = "strict"
    ANY_DIMENSION = "any"


class SessionStatus(IntEnum):
    """States of the resolution session."""

    IDLE = auto()
    PRESENTING = auto()
    RESOLVING = auto()
    RECOMPUTING = auto()
    RESOLVED = auto()
    CANCELLED = auto()


class NoticeKind(IntEnum):
    """Recoverable conditions surfaced to the host during a session."""

    INVALID_RANGE = auto()
    DANGLING_REFERENCE = auto()
    NON_CONVERGENCE = auto()
    INCOMPLETE_SELECTION = auto()
    UNRESOLVABLE = auto()
    INVALID_ACTION = auto()


# Children under this age are charged as infants
INFANT_MAX_AGE = 2
