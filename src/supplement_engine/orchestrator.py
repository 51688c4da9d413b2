"""ResolutionOrchestrator: the detect, choose, apply and re-detect loop.

The orchestrator holds no state of its own. ``start()`` builds the first
ResolutionState and ``dispatch()`` is a pure ``(state, action) -> state``
transition; the host (Streamlit app, CLI or a test) owns the state and
feeds user choices back in.

Usage:
    orchestrator = ResolutionOrchestrator(resolver=OverlapResolver(rooms, plans))
    state = orchestrator.start(values)
    state = orchestrator.dispatch(state, RemoveOverlap(ScopeDimension.DATE_RANGES, "a"))
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, Sequence

from supplement_engine import config
from supplement_engine.conflict_resolution.resolver import OverlapResolver
from supplement_engine.detection.detector import ConflictDetector, conflict_measure
from supplement_engine.exceptions import (
    DanglingReferenceError,
    IncompleteSelectionError,
    NonConvergenceError,
    UnresolvableOverlapError,
)
from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import NoticeKind, SessionStatus
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
from supplement_engine.models.supplement import SupplementValue, index_values

logger = logging.getLogger(__name__)

_RESOLUTION_ACTIONS = (RemoveOverlap, KeepValue, AssignPriority)


def _notice(state: ResolutionState, kind: NoticeKind, message: str) -> ResolutionState:
    logger.warning("Resolution session: %s", message)
    return dataclasses.replace(
        state, notice=SessionNotice(kind=kind, message=message, conflict=state.current_conflict)
    )


def _drop_dangling(
    values: Sequence[SupplementValue], conflicts: Sequence[Conflict]
) -> tuple[tuple[Conflict, ...], tuple[Conflict, ...]]:
    """Split conflicts into (live, stale) against the current value ids."""
    by_id = index_values(values)
    live = tuple(c for c in conflicts if all(vid in by_id for vid in c.value_ids))
    stale = tuple(c for c in conflicts if c not in live)
    return live, stale


def _require_complete(state: ResolutionState) -> None:
    if state.conflicts:
        raise IncompleteSelectionError(
            f"{len(state.conflicts)} conflict(s) still need a resolution"
        )


def _require_progress(before: int, after: int) -> None:
    if after >= before:
        raise NonConvergenceError(
            f"That choice did not reduce the conflicts ({before} -> {after}); "
            "pick a different strategy",
            before=before,
            after=after,
        )


class ResolutionOrchestrator:
    """Drives a resolution session as a pure state machine.

    States: IDLE (no conflicts) → PRESENTING(index) → RESOLVING →
    RECOMPUTING → PRESENTING(0) or RESOLVED. RESOLVING and RECOMPUTING are
    passed through inside a single ``dispatch()`` call and show up only in
    the debug log. CANCELLED is reachable from any non-terminal state.

    Every applied action must strictly reduce the conflict measure (total
    overlapping dimensions); otherwise the state is left untouched and a
    NON_CONVERGENCE notice asks for another strategy.
    """

    def __init__(
        self,
        detector: ConflictDetector | None = None,
        resolver: OverlapResolver | None = None,
    ) -> None:
        self.detector = detector or ConflictDetector()
        self.resolver = resolver or OverlapResolver()

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def start(
        self,
        values: Sequence[SupplementValue],
        initial_conflicts: Sequence[Conflict] | None = None,
    ) -> ResolutionState:
        """Open a session over a working copy of *values*.

        When *initial_conflicts* is omitted the detector runs first. Stale
        conflicts (naming values that are gone) are dropped with a notice.
        """
        working = tuple(values)
        conflicts = (
            tuple(self.detector.detect(working))
            if initial_conflicts is None
            else tuple(initial_conflicts)
        )
        live, stale = _drop_dangling(working, conflicts)

        state = ResolutionState(
            values=working,
            original_values=working,
            conflicts=live,
            status=SessionStatus.PRESENTING if live else SessionStatus.IDLE,
        )
        logger.info("Resolution session started: %d value(s), %d conflict(s)", len(working), len(live))

        if stale:
            state = _notice(
                state,
                NoticeKind.DANGLING_REFERENCE,
                f"Dropped {len(stale)} conflict(s) referring to values that no longer exist",
            )

        inverted = [
            v.id for v in working if any(not r.is_valid for r in v.parameters.date_ranges)
        ]
        if inverted:
            state = _notice(
                state,
                NoticeKind.INVALID_RANGE,
                f"Value(s) {', '.join(inverted)} contain date ranges that end before "
                "they start; those ranges are ignored when narrowing",
            )
        return state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def dispatch(self, state: ResolutionState, action: SessionAction) -> ResolutionState:
        """Apply one operator action and return the next state."""
        if state.is_terminal:
            return _notice(state, NoticeKind.INVALID_ACTION, "The session has already ended")

        state = dataclasses.replace(state, notice=None)

        if isinstance(action, Cancel):
            logger.info("Resolution session cancelled after %d step(s)", len(state.steps))
            return dataclasses.replace(
                state,
                values=state.original_values,
                status=SessionStatus.CANCELLED,
            )

        if isinstance(action, Finalize):
            try:
                _require_complete(state)
            except IncompleteSelectionError as exc:
                return _notice(state, NoticeKind.INCOMPLETE_SELECTION, str(exc))
            return dataclasses.replace(state, status=SessionStatus.RESOLVED)

        if isinstance(action, AcceptAll):
            logger.info("Accepted %d remaining conflict(s) as-is", len(state.conflicts))
            return dataclasses.replace(
                state,
                status=SessionStatus.RESOLVED,
                accepted_conflicts=state.conflicts,
            )

        if isinstance(action, SelectConflict):
            if state.status != SessionStatus.PRESENTING or not 0 <= action.index < len(state.conflicts):
                return _notice(
                    state, NoticeKind.INVALID_ACTION, f"No conflict at position {action.index}"
                )
            return dataclasses.replace(state, current_index=action.index)

        if isinstance(action, _RESOLUTION_ACTIONS):
            if state.status != SessionStatus.PRESENTING:
                return _notice(state, NoticeKind.INVALID_ACTION, "There is no conflict to resolve")
            return self._apply(state, action)

        return _notice(state, NoticeKind.INVALID_ACTION, f"Unknown action {action!r}")

    def _apply(
        self,
        state: ResolutionState,
        action: RemoveOverlap | KeepValue | AssignPriority,
    ) -> ResolutionState:
        conflict = state.current_conflict
        if conflict is None:
            return _notice(state, NoticeKind.INVALID_ACTION, "There is no conflict to resolve")
        before = conflict_measure(state.conflicts)

        logger.debug("RESOLVING %s with %r", conflict.value_ids, action)
        try:
            new_values, notes = self.resolver.resolve(state.values, conflict, action)
        except DanglingReferenceError as exc:
            live, _ = _drop_dangling(state.values, state.conflicts)
            state = dataclasses.replace(
                state,
                conflicts=live,
                current_index=0,
                status=SessionStatus.PRESENTING if live else SessionStatus.IDLE,
            )
            return _notice(state, NoticeKind.DANGLING_REFERENCE, str(exc))
        except UnresolvableOverlapError as exc:
            return _notice(state, NoticeKind.UNRESOLVABLE, str(exc))

        logger.debug("RECOMPUTING conflicts over %d value(s)", len(new_values))
        conflicts = tuple(self.detector.detect(new_values))
        after = conflict_measure(conflicts)

        try:
            _require_progress(before, after)
        except NonConvergenceError as exc:
            return _notice(state, NoticeKind.NON_CONVERGENCE, str(exc))

        step = ResolutionStep(
            action=action,
            conflict=conflict,
            measure_before=before,
            measure_after=after,
            notes=notes,
        )
        return dataclasses.replace(
            state,
            values=tuple(new_values),
            conflicts=conflicts,
            current_index=0,
            status=SessionStatus.PRESENTING if conflicts else SessionStatus.RESOLVED,
            steps=state.steps + (step,),
        )

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------

    def available_actions(self, state: ResolutionState) -> list[SessionAction]:
        """Resolution actions that would apply to the current conflict.

        Keep-one is offered only for a total overlap. Priority assignment is
        always possible but needs operator input, so it is not listed.
        """
        conflict = state.current_conflict
        if conflict is None:
            return []
        options: list[SessionAction] = list(self.resolver.removal_options(state.values, conflict))
        if not options and all(vid in index_values(state.values) for vid in conflict.value_ids):
            options.extend(KeepValue(value_id=vid) for vid in conflict.value_ids)
        return options


def run_resolution_session(
    values: Sequence[SupplementValue],
    initial_conflicts: Sequence[Conflict] | None,
    choose_action: Callable[[ResolutionState], SessionAction],
    orchestrator: ResolutionOrchestrator | None = None,
    max_steps: int | None = None,
) -> SessionOutcome:
    """Run a whole session, asking *choose_action* for each operator decision.

    Returns either the resolved values or a cancellation. A host that keeps
    answering without ending the session is cut off after *max_steps*
    (default ``config.MAX_SESSION_STEPS``) and the session is cancelled.
    """
    orchestrator = orchestrator or ResolutionOrchestrator()
    limit = config.MAX_SESSION_STEPS if max_steps is None else max_steps

    state = orchestrator.start(values, initial_conflicts)
    if state.status == SessionStatus.IDLE:
        return SessionOutcome(resolved_values=state.values)

    taken = 0
    while not state.is_terminal:
        if taken >= limit:
            logger.error("Resolution session abandoned after %d step(s) without finishing", taken)
            return SessionOutcome(
                cancelled=True,
                steps=state.steps,
                reason=f"No decision reached within {limit} steps",
            )
        state = orchestrator.dispatch(state, choose_action(state))
        taken += 1

    if state.status == SessionStatus.CANCELLED:
        return SessionOutcome(cancelled=True, steps=state.steps, reason="Cancelled by operator")
    return SessionOutcome(
        resolved_values=state.values,
        accepted_conflicts=state.accepted_conflicts,
        steps=state.steps,
    )
