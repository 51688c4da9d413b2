"""Tests for the resolution session state machine."""

from __future__ import annotations

from datetime import date
from typing import Callable

from supplement_engine.models.conflict import Conflict
from supplement_engine.models.enums import ALL_DIMENSIONS, NoticeKind, ScopeDimension, SessionStatus
from supplement_engine.models.scope import DateRange
from supplement_engine.models.session import (
    AcceptAll,
    AssignPriority,
    Cancel,
    Finalize,
    KeepValue,
    RemoveOverlap,
    ResolutionState,
    SelectConflict,
)
from supplement_engine.models.supplement import SupplementValue
from supplement_engine.orchestrator import ResolutionOrchestrator, run_resolution_session

MakeValue = Callable[..., SupplementValue]

DATES = ScopeDimension.DATE_RANGES
AB = Conflict(value_ids=("a", "b"), conflicting_parameters=ALL_DIMENSIONS)


def _chain(make_value: MakeValue) -> list[SupplementValue]:
    """a overlaps b, b overlaps c, a and c are disjoint."""
    return [
        make_value("a", dates=[("2024-01-01", "2024-01-10")]),
        make_value("b", dates=[("2024-01-05", "2024-01-15")]),
        make_value("c", dates=[("2024-01-12", "2024-01-20")]),
    ]


class TestStart:
    def test_no_conflicts_is_idle(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        state = orchestrator.start([make_value("a", rooms=["1"]), make_value("b", rooms=["2"])])
        assert state.status == SessionStatus.IDLE
        assert state.current_conflict is None

    def test_presents_first_conflict(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        state = orchestrator.start(_chain(make_value))
        assert state.status == SessionStatus.PRESENTING
        assert state.current_conflict.value_ids == ("a", "b")
        assert len(state.conflicts) == 2

    def test_stale_initial_conflict_is_dropped(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        values = [make_value("a"), make_value("b")]
        state = orchestrator.start(values, [Conflict(("a", "gone"), ALL_DIMENSIONS), AB])
        assert state.conflicts == (AB,)
        assert state.notice.kind == NoticeKind.DANGLING_REFERENCE

    def test_inverted_range_is_reported(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        values = [make_value("a", dates=[("2024-07-10", "2024-07-01")]), make_value("b")]
        state = orchestrator.start(values)
        assert state.notice.kind == NoticeKind.INVALID_RANGE
        assert state.notice.message.startswith("Value(s) a ")


class TestResolutionSteps:
    def test_single_step_resolves(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        a = make_value("a", dates=[("2024-06-01", "2024-06-10")], rooms=["1"], plans=["1"])
        b = make_value("b", dates=[("2024-06-05", "2024-06-15")], rooms=["1"], plans=["1"])
        state = orchestrator.dispatch(orchestrator.start([a, b]), RemoveOverlap(DATES, "a"))

        assert state.status == SessionStatus.RESOLVED
        assert state.values[0].parameters.date_ranges == (
            DateRange(date(2024, 6, 1), date(2024, 6, 4)),
        )
        assert len(state.steps) == 1
        assert (state.steps[0].measure_before, state.steps[0].measure_after) == (3, 0)

    def test_inverted_range_does_not_block_resolution(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        a = make_value("a", dates=[("2024-06-01", "2024-06-30")])
        b = make_value("b", dates=[("2024-06-01", "2024-06-10"), ("2024-06-25", "2024-06-20")])
        state = orchestrator.dispatch(orchestrator.start([a, b]), RemoveOverlap(DATES, "a"))

        assert state.status == SessionStatus.RESOLVED
        assert state.values[0].parameters.date_ranges == (
            DateRange(date(2024, 6, 11), date(2024, 6, 30)),
        )
        assert (state.steps[0].measure_before, state.steps[0].measure_after) == (3, 0)

    def test_redetects_and_restarts_from_first(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.start(_chain(make_value))
        state = orchestrator.dispatch(state, RemoveOverlap(DATES, "b"))

        assert state.status == SessionStatus.PRESENTING
        assert state.current_index == 0
        assert [c.value_ids for c in state.conflicts] == [("b", "c")]

        state = orchestrator.dispatch(state, RemoveOverlap(DATES, "c"))
        assert state.status == SessionStatus.RESOLVED
        assert [s.measure_after for s in state.steps] == [3, 0]

    def test_keep_one_for_total_overlap(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.start([make_value("a"), make_value("b")])
        assert orchestrator.available_actions(state) == [KeepValue("a"), KeepValue("b")]

        state = orchestrator.dispatch(state, KeepValue("b"))
        assert state.status == SessionStatus.RESOLVED
        assert [v.id for v in state.values] == ["b"]

    def test_unresolvable_choice_keeps_state(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        a = make_value("a", dates=[("2024-06-05", "2024-06-08")])
        b = make_value("b", dates=[("2024-06-01", "2024-06-10")])
        start = orchestrator.start([a, b])
        state = orchestrator.dispatch(start, RemoveOverlap(DATES, "a"))

        assert state.status == SessionStatus.PRESENTING
        assert state.notice.kind == NoticeKind.UNRESOLVABLE
        assert state.values == start.values
        assert state.steps == ()

    def test_non_convergence_is_reported(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        # a and b tie on priority 1; giving a priority 2 makes it tie with c instead
        values = [make_value("a", priority=1), make_value("b", priority=1), make_value("c", priority=2)]
        start = orchestrator.start(values)
        assert [c.value_ids for c in start.conflicts] == [("a", "b")]

        state = orchestrator.dispatch(start, AssignPriority((("a", 2), ("b", 3))))
        assert state.notice.kind == NoticeKind.NON_CONVERGENCE
        assert state.values == start.values
        assert state.conflicts == start.conflicts
        assert state.status == SessionStatus.PRESENTING

    def test_dangling_conflict_mid_session(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        values = (make_value("a"), make_value("b"))
        stale = Conflict(("a", "gone"), ALL_DIMENSIONS)
        state = ResolutionState(
            values=values,
            original_values=values,
            conflicts=(stale, AB),
            status=SessionStatus.PRESENTING,
        )
        state = orchestrator.dispatch(state, RemoveOverlap(DATES, "a"))
        assert state.notice.kind == NoticeKind.DANGLING_REFERENCE
        assert state.conflicts == (AB,)
        assert state.status == SessionStatus.PRESENTING


class TestSessionControl:
    def test_finalize_blocked_while_conflicts_remain(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.dispatch(orchestrator.start(_chain(make_value)), Finalize())
        assert state.status == SessionStatus.PRESENTING
        assert state.notice.kind == NoticeKind.INCOMPLETE_SELECTION

    def test_finalize_from_idle(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        state = orchestrator.dispatch(orchestrator.start([make_value("a")]), Finalize())
        assert state.status == SessionStatus.RESOLVED

    def test_accept_all_records_remaining(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        start = orchestrator.start(_chain(make_value))
        state = orchestrator.dispatch(start, AcceptAll())
        assert state.status == SessionStatus.RESOLVED
        assert state.accepted_conflicts == start.conflicts

    def test_cancel_restores_original_values(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        values = _chain(make_value)
        state = orchestrator.dispatch(orchestrator.start(values), RemoveOverlap(DATES, "b"))
        state = orchestrator.dispatch(state, Cancel())
        assert state.status == SessionStatus.CANCELLED
        assert state.values == tuple(values)

    def test_terminal_state_rejects_actions(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.dispatch(orchestrator.start(_chain(make_value)), Cancel())
        after = orchestrator.dispatch(state, Finalize())
        assert after.status == SessionStatus.CANCELLED
        assert after.notice.kind == NoticeKind.INVALID_ACTION

    def test_select_conflict(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        state = orchestrator.start(_chain(make_value))
        moved = orchestrator.dispatch(state, SelectConflict(1))
        assert moved.current_conflict.value_ids == ("b", "c")

        invalid = orchestrator.dispatch(state, SelectConflict(5))
        assert invalid.notice.kind == NoticeKind.INVALID_ACTION
        assert invalid.current_index == 0

    def test_resolution_action_without_conflict(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.dispatch(orchestrator.start([make_value("a")]), KeepValue("a"))
        assert state.notice.kind == NoticeKind.INVALID_ACTION

    def test_presenting_state_without_conflicts(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        values = (make_value("a"),)
        state = ResolutionState(values=values, original_values=values, status=SessionStatus.PRESENTING)
        after = orchestrator.dispatch(state, KeepValue("a"))
        assert after.notice.kind == NoticeKind.INVALID_ACTION
        assert after.values == values
        assert after.steps == ()

    def test_available_actions_for_partial_overlap(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        state = orchestrator.start(_chain(make_value))
        assert orchestrator.available_actions(state) == [
            RemoveOverlap(DATES, "a"),
            RemoveOverlap(DATES, "b"),
        ]


class TestRunResolutionSession:
    def test_no_conflicts_returns_values(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        values = [make_value("a", rooms=["1"]), make_value("b", rooms=["2"])]

        def never(state: ResolutionState):
            raise AssertionError("no decision should be needed")

        outcome = run_resolution_session(values, None, never, orchestrator=orchestrator)
        assert outcome.resolved_values == tuple(values)
        assert not outcome.cancelled

    def test_first_option_chooser_resolves_chain(
        self, make_value: MakeValue, orchestrator: ResolutionOrchestrator
    ) -> None:
        def first_option(state: ResolutionState):
            return orchestrator.available_actions(state)[0]

        outcome = run_resolution_session(_chain(make_value), None, first_option, orchestrator=orchestrator)
        assert outcome.resolved_values is not None
        assert orchestrator.detector.detect(outcome.resolved_values) == []
        assert len(outcome.steps) == 2

    def test_cancel(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        outcome = run_resolution_session(
            _chain(make_value), None, lambda state: Cancel(), orchestrator=orchestrator
        )
        assert outcome.cancelled
        assert outcome.resolved_values is None
        assert outcome.reason == "Cancelled by operator"

    def test_step_limit_cancels(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        outcome = run_resolution_session(
            _chain(make_value), None, lambda state: SelectConflict(0),
            orchestrator=orchestrator, max_steps=3,
        )
        assert outcome.cancelled
        assert "3 steps" in outcome.reason

    def test_uses_initial_conflicts(self, make_value: MakeValue, orchestrator: ResolutionOrchestrator) -> None:
        values = _chain(make_value)
        outcome = run_resolution_session(values, [], lambda state: Cancel(), orchestrator=orchestrator)
        assert outcome.resolved_values == tuple(values)

    def test_any_dimension_session(self, make_value: MakeValue, any_orchestrator: ResolutionOrchestrator) -> None:
        values = [
            make_value("a", dates=[("2024-06-01", "2024-06-10")], rooms=["1", "2"], plans=["1"]),
            make_value("b", dates=[("2024-07-01", "2024-07-10")], rooms=["2"], plans=["2"]),
        ]

        def first_option(state: ResolutionState):
            return any_orchestrator.available_actions(state)[0]

        outcome = run_resolution_session(values, None, first_option, orchestrator=any_orchestrator)
        assert outcome.resolved_values[0].parameters.room_type_ids == frozenset({"1"})
