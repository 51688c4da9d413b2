"""Conflict detection: scope comparison and pairwise conflict reports."""

from supplement_engine.detection.comparator import (
    date_ranges_overlap,
    rate_plans_overlap,
    room_types_overlap,
    scope_overlap,
)
from supplement_engine.detection.detector import (
    ConflictDetector,
    conflict_measure,
    detect_conflicts,
)

__all__ = [
    "ConflictDetector",
    "conflict_measure",
    "date_ranges_overlap",
    "detect_conflicts",
    "rate_plans_overlap",
    "room_types_overlap",
    "scope_overlap",
]
