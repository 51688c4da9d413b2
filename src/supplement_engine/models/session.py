"""Resolution session models: actions, state and the final outcome.

The orchestrator is a pure ``(state, action) -> state`` function; these
records are everything the host keeps between user actions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import NoticeKind, ScopeDimension, SessionStatus
from supplement_engine.models.supplement import SupplementValue


# -- Actions ---------------------------------------------------------------


@dataclass(frozen=True)
class RemoveOverlap:
    """Narrow the target value so it no longer overlaps on one dimension."""

    dimension: ScopeDimension
    target_value_id: str


@dataclass(frozen=True)
class KeepValue:
    """Keep one value of a totally overlapping pair, discard the other."""

    value_id: str


@dataclass(frozen=True)
class AssignPriority:
    """Give the values explicit precedence instead of narrowing a scope."""

    priorities: tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class SelectConflict:
    """Move the presentation to another remaining conflict."""

    index: int


@dataclass(frozen=True)
class AcceptAll:
    """Finish the session keeping the remaining conflicts as they are."""


@dataclass(frozen=True)
class Finalize:
    """Finish the session; blocked while conflicts remain."""


@dataclass(frozen=True)
class Cancel:
    """Abandon the session without persisting anything."""


SessionAction = Union[
    RemoveOverlap, KeepValue, AssignPriority, SelectConflict, AcceptAll, Finalize, Cancel
]


# -- State -----------------------------------------------------------------


@dataclass(frozen=True)
class SessionNotice:
    """A recoverable condition the host should show to the operator."""

    kind: NoticeKind
    message: str
    conflict: Conflict | None = None


@dataclass(frozen=True)
class ResolutionStep:
    """Audit record of one applied action."""

    action: SessionAction
    conflict: Conflict | None
    measure_before: int
    measure_after: int
    notes: str = ""


@dataclass(frozen=True)
class ResolutionState:
    """Everything the session needs between two user actions."""

    values: tuple[SupplementValue, ...]
    original_values: tuple[SupplementValue, ...]
    conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    status: SessionStatus = SessionStatus.IDLE
    current_index: int = 0
    notice: SessionNotice | None = None
    steps: tuple[ResolutionStep, ...] = field(default_factory=tuple)
    accepted_conflicts: tuple[Conflict, ...] = field(default_factory=tuple)

    @property
    def current_conflict(self) -> Conflict | None:
        if self.status != SessionStatus.PRESENTING or not self.conflicts:
            return None
        return self.conflicts[self.current_index]

    @property
    def is_terminal(self) -> bool:
        return self.status in (SessionStatus.RESOLVED, SessionStatus.CANCELLED)


@dataclass(frozen=True)
class SessionOutcome:
    """What the host receives when the session ends.

    Exactly one of ``resolved_values`` / ``cancelled`` is meaningful.
    """

    resolved_values: tuple[SupplementValue, ...] | None = None
    cancelled: bool = False
    accepted_conflicts: tuple[Conflict, ...] = field(default_factory=tuple)
    steps: tuple[ResolutionStep, ...] = field(default_factory=tuple)
    reason: str = ""
