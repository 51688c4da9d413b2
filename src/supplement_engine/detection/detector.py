"""Conflict detector: scans a supplement's values for overlapping scopes."""

from __future__ import annotations

import logging
from typing import Sequence

from supplement_engine.detection.comparator import dimension_overlaps
from supplement_engine.detection.policies import DetectionPolicy, get_policy
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ALL_DIMENSIONS, ConflictPolicy
from supplement_engine.models.supplement import SupplementValue

logger = logging.getLogger(__name__)


def _explicitly_ordered(a: SupplementValue, b: SupplementValue) -> bool:
    """Both values carry a priority and the priorities differ."""
    return a.priority is not None and b.priority is not None and a.priority != b.priority


class ConflictDetector:
    """Reports every unordered pair of values whose scopes conflict.

    Uses a pluggable detection policy. Default is the configured policy
    (StrictAllDimensions unless SUPPLEMENT_CONFLICT_POLICY says otherwise).

    Pairs whose values were given distinct priorities are already ordered
    and are not reported.
    """

    def __init__(self, policy: ConflictPolicy | str | DetectionPolicy | None = None) -> None:
        self.policy = get_policy(policy)

    def detect(self, values: Sequence[SupplementValue]) -> list[Conflict]:
        """Return conflicts for pairs (i, j), i < j, in input order."""
        conflicts: list[Conflict] = []
        for i in range(len(values)):
            for j in range(i + 1, len(values)):
                first, second = values[i], values[j]
                if first.id == second.id or _explicitly_ordered(first, second):
                    continue

                overlapping = tuple(
                    dim
                    for dim in ALL_DIMENSIONS
                    if dimension_overlaps(dim, first.parameters, second.parameters)
                )
                reported = self.policy.conflicting_dimensions(overlapping)
                if reported:
                    conflicts.append(
                        Conflict(
                            value_ids=(first.id, second.id),
                            conflicting_parameters=reported,
                        )
                    )

        logger.debug(
            "Detected %d conflict(s) among %d value(s) [policy=%s]",
            len(conflicts),
            len(values),
            self.policy.policy.value,
        )
        return conflicts


def detect_conflicts(
    values: Sequence[SupplementValue],
    policy: ConflictPolicy | str | DetectionPolicy | None = None,
) -> list[Conflict]:
    """Convenience wrapper: ``ConflictDetector(policy).detect(values)``."""
    return ConflictDetector(policy).detect(values)


def conflict_measure(conflicts: Sequence[Conflict]) -> int:
    """Total overlapping dimensions across all conflicts.

    Every accepted resolution step must strictly reduce this number.
    """
    return sum(c.weight for c in conflicts)
