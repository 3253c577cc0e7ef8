#!/usr/bin/env python3
"""Log monthly challenges and wildlife spottings."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from scripts import add_common_arguments, configure_logging

import voluptuous as vol

from sustainability_engine.ledger import SustainabilityLedger
from sustainability_engine.storage import LedgerStore
from sustainability_engine.validation import (
    CHALLENGE_SCHEMA,
    SPOTTING_SCHEMA,
    describe_error,
    validate,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Record garden challenges and wildlife")
    add_common_arguments(parser)
    sub = parser.add_subparsers(dest="action", required=True)

    accept = sub.add_parser("accept", help="Accept a monthly challenge")
    accept.add_argument("month")

    complete = sub.add_parser("complete", help="Complete a monthly challenge")
    complete.add_argument("month")
    complete.add_argument("--sdg", action="append", default=[], help="SDG credited by the challenge")

    sub.add_parser("challenges", help="Show challenge progress")

    spot = sub.add_parser("spot", help="Record a wildlife spotting")
    spot.add_argument("species")
    spot.add_argument("--category", default="birds")
    spot.add_argument("--date")
    spot.add_argument("--notes", default="")
    spot.add_argument("--location", default="garden")

    unspot = sub.add_parser("unspot", help="Remove a wildlife spotting")
    unspot.add_argument("spotting_id")

    sub.add_parser("spottings", help="List wildlife spottings")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    store = LedgerStore(args.store) if args.store else LedgerStore.from_env()
    ledger = SustainabilityLedger(store=store)

    if args.action == "challenges":
        print(json.dumps(ledger.challenge_progress(), indent=2))
        return
    if args.action == "spottings":
        print(json.dumps(ledger.progress()["wildlife_spottings"], indent=2))
        return
    if args.action == "unspot":
        progress = ledger.remove_wildlife_spotting(args.spotting_id)
        print(json.dumps({"wildlife_spottings": len(progress["wildlife_spottings"])}))
        return

    if args.action in ("accept", "complete"):
        raw = {"month": args.month, "sdgs": getattr(args, "sdg", [])}
        schema = CHALLENGE_SCHEMA
    else:
        raw = {
            "species": args.species,
            "category": args.category,
            "notes": args.notes,
            "location": args.location,
        }
        if args.date:
            raw["date"] = args.date
        schema = SPOTTING_SCHEMA
    try:
        data = validate(schema, raw)
    except vol.Invalid as err:
        parser.error(describe_error(raw, err))

    if args.action == "accept":
        progress = ledger.accept_challenge(data["month"])
    elif args.action == "complete":
        progress = ledger.complete_challenge(data["month"], data["sdgs"])
    else:
        progress = ledger.add_wildlife_spotting(
            data["species"],
            category=data["category"],
            spotted_on=data.get("date"),
            notes=data["notes"],
            location=data["location"],
        )
        print(json.dumps(progress["wildlife_spottings"][0]))
        return

    print(json.dumps({"score": progress["score"], "challenges": progress["challenges"]}))


if __name__ == "__main__":  # pragma: no cover
    main()
