"""Command-line checks over a stored supplement file.

Usage:
    python -m supplement_engine.cli check                  # report conflicts
    python -m supplement_engine.cli check --policy any
    python -m supplement_engine.cli quote --supplement ID --check-in 2024-06-01 \
        --nights 3 --room-type 1 --rate-plan 1 --adults 2 --child-age 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from supplement_engine import config
from supplement_engine.describe import describe_conflict
from supplement_engine.detection.detector import ConflictDetector
from supplement_engine.models.booking import Booking
from supplement_engine.pricing import quote_stay, quote_totals
from supplement_engine.serialization.store import JsonSupplementStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def check(args: argparse.Namespace) -> int:
    """Print conflicts for every stored supplement. Returns 1 if any exist."""
    store = JsonSupplementStore(args.store)
    detector = ConflictDetector(args.policy)
    supplements = store.load_all()
    if args.supplement:
        supplements = [s for s in supplements if s.id == args.supplement]
    if not supplements:
        logger.error("No supplements found in %s", args.store)
        return 2

    found = 0
    for supplement in supplements:
        conflicts = detector.detect(supplement.values)
        found += len(conflicts)
        print(f"{supplement.name} ({supplement.id}): {len(conflicts)} conflict(s)")
        for i, conflict in enumerate(conflicts):
            print(f"  {describe_conflict(conflict, i)}")
    return 1 if found else 0


def quote(args: argparse.Namespace) -> int:
    """Print a night-by-night quote for one supplement."""
    store = JsonSupplementStore(args.store)
    supplement = store.get(args.supplement)
    if supplement is None:
        logger.error("Supplement %s not found in %s", args.supplement, args.store)
        return 2

    booking = Booking(
        check_in=date.fromisoformat(args.check_in),
        nights=args.nights,
        room_type_id=args.room_type,
        rate_plan_id=args.rate_plan,
        adults=args.adults,
        child_ages=tuple(args.child_age or ()),
        booked_on=date.fromisoformat(args.booked_on) if args.booked_on else None,
    )
    table = quote_stay(supplement.values, booking)
    print(table.to_string(index=False))
    for currency, total in quote_totals(table).items():
        print(f"Total: {total:.2f} {currency}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hotel supplement conflict checks")
    parser.add_argument("--store", default=str(config.STORE_PATH), help="Supplement JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Report overlapping values")
    p_check.add_argument("--policy", choices=["strict", "any"], default=config.CONFLICT_POLICY)
    p_check.add_argument("--supplement", help="Only check this supplement id")
    p_check.set_defaults(func=check)

    p_quote = sub.add_parser("quote", help="Price a stay")
    p_quote.add_argument("--supplement", required=True)
    p_quote.add_argument("--check-in", required=True, help="YYYY-MM-DD")
    p_quote.add_argument("--nights", type=int, required=True)
    p_quote.add_argument("--room-type", required=True)
    p_quote.add_argument("--rate-plan", required=True)
    p_quote.add_argument("--adults", type=int, default=2)
    p_quote.add_argument("--child-age", type=int, action="append")
    p_quote.add_argument("--booked-on", help="YYYY-MM-DD")
    p_quote.set_defaults(func=quote)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
