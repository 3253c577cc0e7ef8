#!/usr/bin/env python3
"""Manage active sustainable practices in the ledger."""
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

from sustainability_engine.catalog import load_catalog
from sustainability_engine.ledger import SustainabilityLedger
from sustainability_engine.storage import LedgerStore
from sustainability_engine.validation import PRACTICE_SCHEMA, describe_error, validate


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track sustainable gardening practices")
    add_common_arguments(parser)
    sub = parser.add_subparsers(dest="action", required=True)

    add = sub.add_parser("add", help="Mark a practice as active")
    add.add_argument("practice_id")
    add.add_argument("--date", help="ISO date the practice was adopted")

    remove = sub.add_parser("remove", help="Deactivate a practice")
    remove.add_argument("practice_id")

    notes = sub.add_parser("notes", help="Set notes on an active practice")
    notes.add_argument("practice_id")
    notes.add_argument("text")

    sub.add_parser("list", help="Show active practices")

    catalog = sub.add_parser("catalog", help="Show available practices")
    catalog.add_argument("--impact", choices=["low", "medium", "high"])
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    store = LedgerStore(args.store) if args.store else LedgerStore.from_env()
    ledger = SustainabilityLedger(store=store)

    if args.action == "catalog":
        catalog = load_catalog()
        practices = catalog.by_impact(args.impact) if args.impact else catalog.practices()
        for practice in practices:
            print(f"{practice.id}\t{practice.impact}\t{practice.name}")
        return

    if args.action == "list":
        print(json.dumps(ledger.progress()["active_practices"], indent=2))
        return

    raw = {"practice_id": args.practice_id}
    if getattr(args, "date", None):
        raw["date"] = args.date
    try:
        data = validate(PRACTICE_SCHEMA, raw)
    except vol.Invalid as err:
        parser.error(describe_error(raw, err))

    practice_id = data["practice_id"]
    if args.action == "add":
        if practice_id not in ledger.catalog:
            print(f"warning: {practice_id} is not in the practice catalog", file=sys.stderr)
        progress = ledger.add_practice(practice_id, data.get("date"))
    elif args.action == "remove":
        progress = ledger.remove_practice(practice_id)
    else:
        progress = ledger.update_practice_notes(practice_id, args.text)

    print(json.dumps({"score": progress["score"], "active_practices": len(progress["active_practices"])}))


if __name__ == "__main__":  # pragma: no cover
    main()
