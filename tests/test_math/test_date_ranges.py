"""Tests for whole-day date range arithmetic."""

from datetime import date

from supplement_engine.math.date_ranges import (
    FULL_RANGE,
    coalesce,
    complement,
    days_covered,
    intersection,
    overlap_intervals,
    ranges_intersect,
    split_valid,
    subtract_interval,
    subtract_intervals,
)
from supplement_engine.models.scope import DateRange


def _r(start: str, end: str, id: str | None = None) -> DateRange:
    return DateRange(date.fromisoformat(start), date.fromisoformat(end), id=id)


class TestIntersection:
    def test_single_shared_day_intersects(self) -> None:
        assert ranges_intersect(_r("2024-01-01", "2024-01-10"), _r("2024-01-10", "2024-01-20"))

    def test_adjacent_ranges_do_not_intersect(self) -> None:
        assert not ranges_intersect(_r("2024-01-01", "2024-01-10"), _r("2024-01-11", "2024-01-20"))

    def test_intersection_is_max_start_to_min_end(self) -> None:
        result = intersection(_r("2024-01-01", "2024-01-31"), _r("2024-01-15", "2024-02-15"))
        assert result == _r("2024-01-15", "2024-01-31")

    def test_disjoint_returns_none(self) -> None:
        assert intersection(_r("2024-01-01", "2024-01-05"), _r("2024-02-01", "2024-02-05")) is None


class TestSplitAndCoalesce:
    def test_split_valid_separates_inverted(self) -> None:
        good = _r("2024-01-01", "2024-01-05")
        bad = _r("2024-02-10", "2024-02-01")
        valid, invalid = split_valid([good, bad])
        assert valid == (good,)
        assert invalid == (bad,)

    def test_coalesce_merges_overlapping_and_adjacent(self) -> None:
        merged = coalesce([
            _r("2024-01-10", "2024-01-20"),
            _r("2024-01-01", "2024-01-09"),
            _r("2024-01-15", "2024-01-25"),
            _r("2024-03-01", "2024-03-05"),
        ])
        assert merged == (_r("2024-01-01", "2024-01-25"), _r("2024-03-01", "2024-03-05"))

    def test_coalesce_keeps_gap_of_one_day(self) -> None:
        merged = coalesce([_r("2024-01-01", "2024-01-09"), _r("2024-01-11", "2024-01-20")])
        assert len(merged) == 2

    def test_coalesce_handles_range_ending_at_max(self) -> None:
        merged = coalesce([_r("2024-01-01", "9999-12-31"), _r("2025-01-01", "2025-02-01")])
        assert merged == (DateRange(date(2024, 1, 1), date.max),)

    def test_days_covered_counts_each_day_once(self) -> None:
        assert days_covered([_r("2024-01-01", "2024-01-10"), _r("2024-01-06", "2024-01-15")]) == 15


class TestOverlapIntervals:
    def test_two_wildcards_overlap_everywhere(self) -> None:
        assert overlap_intervals([], []) == (FULL_RANGE,)

    def test_wildcard_overlap_is_other_side(self) -> None:
        ranges = [_r("2024-01-01", "2024-01-31")]
        assert overlap_intervals([], ranges) == tuple(ranges)
        assert overlap_intervals(ranges, []) == tuple(ranges)

    def test_pairwise_pieces_are_coalesced(self) -> None:
        a = [_r("2024-01-01", "2024-01-31"), _r("2024-03-01", "2024-03-31")]
        b = [_r("2024-01-20", "2024-03-10")]
        assert overlap_intervals(a, b) == (
            _r("2024-01-20", "2024-01-31"),
            _r("2024-03-01", "2024-03-10"),
        )

    def test_disjoint_lists_have_no_overlap(self) -> None:
        assert overlap_intervals([_r("2024-01-01", "2024-01-05")], [_r("2024-02-01", "2024-02-05")]) == ()

    def test_inverted_ranges_contribute_nothing(self) -> None:
        a = [_r("2024-06-01", "2024-06-30")]
        b = [_r("2024-06-01", "2024-06-10"), _r("2024-06-25", "2024-06-20")]
        assert overlap_intervals(a, b) == (_r("2024-06-01", "2024-06-10"),)
        assert overlap_intervals([], [_r("2024-06-25", "2024-06-20")]) == ()


class TestSubtractInterval:
    def test_fully_contained_range_is_dropped(self) -> None:
        assert subtract_interval(_r("2024-01-10", "2024-01-20"), _r("2024-01-01", "2024-01-31")) == ()

    def test_cut_at_start_moves_start_after_cut(self) -> None:
        result = subtract_interval(_r("2024-01-01", "2024-01-31", id="x"), _r("2023-12-15", "2024-01-10"))
        assert result == (_r("2024-01-11", "2024-01-31"),)
        assert result[0].id == "x"

    def test_cut_at_end_moves_end_before_cut(self) -> None:
        result = subtract_interval(_r("2024-01-01", "2024-01-31"), _r("2024-01-15", "2024-02-15"))
        assert result == (_r("2024-01-01", "2024-01-14"),)

    def test_cut_inside_splits_in_two(self) -> None:
        result = subtract_interval(_r("2024-01-01", "2024-01-31", id="x"), _r("2024-01-10", "2024-01-20"))
        assert result == (_r("2024-01-01", "2024-01-09"), _r("2024-01-21", "2024-01-31"))
        assert result[0].id == "x"
        assert result[1].id is None

    def test_disjoint_cut_leaves_range_untouched(self) -> None:
        original = _r("2024-01-01", "2024-01-31")
        assert subtract_interval(original, _r("2024-03-01", "2024-03-05")) == (original,)

    def test_split_pieces_plus_cut_reconstruct_original(self) -> None:
        original = _r("2024-01-01", "2024-01-31")
        cut = _r("2024-01-10", "2024-01-20")
        pieces = subtract_interval(original, cut)
        assert days_covered(pieces) + cut.day_count == original.day_count
        assert coalesce(pieces + (cut,)) == (original,)

    def test_single_day_range_at_cut_edge(self) -> None:
        assert subtract_interval(_r("2024-01-10", "2024-01-10"), _r("2024-01-10", "2024-01-15")) == ()


class TestSubtractIntervals:
    def test_multiple_cuts(self) -> None:
        result = subtract_intervals(
            [_r("2024-01-01", "2024-01-31")],
            [_r("2024-01-05", "2024-01-06"), _r("2024-01-20", "2024-02-10")],
        )
        assert result == (
            _r("2024-01-01", "2024-01-04"),
            _r("2024-01-07", "2024-01-19"),
        )

    def test_inverted_inputs_are_ignored(self) -> None:
        result = subtract_intervals([_r("2024-01-31", "2024-01-01")], [_r("2024-01-05", "2024-01-06")])
        assert result == ()

    def test_no_returned_range_is_inverted(self) -> None:
        result = subtract_intervals(
            [_r("2024-01-01", "2024-01-02"), _r("2024-01-03", "2024-01-03")],
            [_r("2024-01-02", "2024-01-03")],
        )
        assert all(r.is_valid for r in result)
        assert result == (_r("2024-01-01", "2024-01-01"),)


class TestComplement:
    def test_complement_of_one_range_is_two_open_ranges(self) -> None:
        result = complement([_r("2024-06-01", "2024-06-30")])
        assert len(result) == 2
        before, after = result
        assert before.is_open_start and before.end_date == date(2024, 5, 31)
        assert after.start_date == date(2024, 7, 1) and after.is_open_end

    def test_complement_of_nothing_is_everything(self) -> None:
        assert complement([]) == (FULL_RANGE,)
