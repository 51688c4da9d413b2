"""Detection policies: when does a set of overlapping dimensions count as a conflict."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supplement_engine.models.enums import ALL_DIMENSIONS, ConflictPolicy, ScopeDimension


class DetectionPolicy(ABC):
    """Base class for conflict detection policies."""

    policy: ConflictPolicy

    @abstractmethod
    def conflicting_dimensions(
        self, overlapping: tuple[ScopeDimension, ...]
    ) -> tuple[ScopeDimension, ...] | None:
        """Decide whether a pair conflicts.

        Receives the dimensions on which the pair overlaps (in detection
        order) and returns the dimensions to report, or None for no conflict.
        """
        ...


class StrictAllDimensions(DetectionPolicy):
    """A pair conflicts only when dates, room types and rate plans all overlap.

    Partial overlap cannot make both values apply to the same booking, so
    it is not reported.
    """

    policy = ConflictPolicy.STRICT

    def conflicting_dimensions(
        self, overlapping: tuple[ScopeDimension, ...]
    ) -> tuple[ScopeDimension, ...] | None:
        if set(overlapping) == set(ALL_DIMENSIONS):
            return ALL_DIMENSIONS
        return None


class AnyDimension(DetectionPolicy):
    """A pair conflicts as soon as a single dimension overlaps."""

    policy = ConflictPolicy.ANY_DIMENSION

    def conflicting_dimensions(
        self, overlapping: tuple[ScopeDimension, ...]
    ) -> tuple[ScopeDimension, ...] | None:
        return overlapping or None


_POLICIES: dict[ConflictPolicy, type[DetectionPolicy]] = {
    ConflictPolicy.STRICT: StrictAllDimensions,
    ConflictPolicy.ANY_DIMENSION: AnyDimension,
}


def get_policy(policy: ConflictPolicy | str | DetectionPolicy | None = None) -> DetectionPolicy:
    """Resolve a policy name, enum or instance. None reads the configured default."""
    if isinstance(policy, DetectionPolicy):
        return policy
    if policy is None:
        from supplement_engine import config

        policy = config.CONFLICT_POLICY
    try:
        key = ConflictPolicy(policy)
    except ValueError:
        raise ValueError(
            f"Unknown conflict policy {policy!r}; expected one of "
            f"{[p.value for p in ConflictPolicy]}"
        ) from None
    return _POLICIES[key]()
