"""Whole-day date range arithmetic: intersection, subtraction and coalescing.

All ranges are closed intervals. "Day before" / "day after" shift by exactly
one calendar day; no function here ever returns an inverted range.
"""

from __future__ import annotations

import dataclasses
from datetime import date, timedelta
from typing import Iterable, Sequence

from supplement_engine.models.scope import DateRange

ONE_DAY = timedelta(days=1)

# Stands in for a wildcard (empty) date list when a concrete interval is needed
FULL_RANGE = DateRange(start_date=date.min, end_date=date.max)


def ranges_intersect(a: DateRange, b: DateRange) -> bool:
    """Closed-interval intersection test."""
    return a.start_date <= b.end_date and a.end_date >= b.start_date


def intersection(a: DateRange, b: DateRange) -> DateRange | None:
    """Return ``max(starts)..min(ends)``, or None when the ranges are disjoint."""
    if not ranges_intersect(a, b):
        return None
    return DateRange(
        start_date=max(a.start_date, b.start_date),
        end_date=min(a.end_date, b.end_date),
    )


def split_valid(ranges: Iterable[DateRange]) -> tuple[tuple[DateRange, ...], tuple[DateRange, ...]]:
    """Partition ranges into (valid, inverted)."""
    valid: list[DateRange] = []
    invalid: list[DateRange] = []
    for r in ranges:
        (valid if r.is_valid else invalid).append(r)
    return tuple(valid), tuple(invalid)


def coalesce(ranges: Iterable[DateRange]) -> tuple[DateRange, ...]:
    """Sort ranges and merge those that overlap or touch (adjacent days)."""
    ordered = sorted((r for r in ranges if r.is_valid), key=lambda r: r.start_date)
    merged: list[DateRange] = []
    for r in ordered:
        if merged:
            last = merged[-1]
            touches = last.end_date == date.max or r.start_date <= last.end_date + ONE_DAY
            if touches:
                if r.end_date > last.end_date:
                    merged[-1] = DateRange(last.start_date, r.end_date, id=last.id)
                continue
        merged.append(r)
    return tuple(merged)


def overlap_intervals(
    a: Sequence[DateRange], b: Sequence[DateRange]
) -> tuple[DateRange, ...]:
    """Coalesced intersection of two date-range lists.

    An empty list is a wildcard: the overlap with a wildcard is the other
    side's ranges, and two wildcards overlap on every date. Inverted ranges
    are ignored on both sides.
    """
    if not a and not b:
        return (FULL_RANGE,)
    if not a:
        return coalesce(b)
    if not b:
        return coalesce(a)

    valid_a, _ = split_valid(a)
    valid_b, _ = split_valid(b)
    pieces: list[DateRange] = []
    for r1 in valid_a:
        for r2 in valid_b:
            piece = intersection(r1, r2)
            if piece is not None and piece.is_valid:
                pieces.append(piece)
    return coalesce(pieces)


def subtract_interval(rng: DateRange, cut: DateRange) -> tuple[DateRange, ...]:
    """Remove ``cut`` from ``rng``.

    - fully contained: dropped
    - cut covers the start: start moves to the day after the cut
    - cut covers the end: end moves to the day before the cut
    - cut strictly inside: split into the parts before and after the cut
    The first surviving piece keeps the original range id.
    """
    overlap = intersection(rng, cut)
    if overlap is None:
        return (rng,)

    os_, oe = overlap.start_date, overlap.end_date
    rs, re_ = rng.start_date, rng.end_date

    if rs >= os_ and re_ <= oe:
        return ()

    if rs < os_ and re_ > oe:
        return (
            dataclasses.replace(rng, end_date=os_ - ONE_DAY),
            DateRange(start_date=oe + ONE_DAY, end_date=re_),
        )

    if rs >= os_:
        pieces = (dataclasses.replace(rng, start_date=oe + ONE_DAY),)
    else:
        pieces = (dataclasses.replace(rng, end_date=os_ - ONE_DAY),)
    return tuple(p for p in pieces if p.is_valid)


def subtract_intervals(
    ranges: Iterable[DateRange], cuts: Iterable[DateRange]
) -> tuple[DateRange, ...]:
    """Remove every cut from every range, preserving input order."""
    remaining = [r for r in ranges if r.is_valid]
    for cut in cuts:
        if not cut.is_valid:
            continue
        next_round: list[DateRange] = []
        for r in remaining:
            next_round.extend(subtract_interval(r, cut))
        remaining = next_round
    return tuple(remaining)


def complement(cuts: Iterable[DateRange]) -> tuple[DateRange, ...]:
    """Every date not covered by ``cuts``, as open-ended ranges where needed."""
    return subtract_intervals((FULL_RANGE,), coalesce(cuts))


def days_covered(ranges: Iterable[DateRange]) -> int:
    """Distinct calendar days covered by the ranges."""
    return sum(r.day_count for r in coalesce(ranges))
