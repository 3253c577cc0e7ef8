#!/usr/bin/env python3
"""Record resource usage samples or carbon offsets in the ledger."""
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

from sustainability_engine.constants import RESOURCE_KINDS
from sustainability_engine.ledger import SustainabilityLedger
from sustainability_engine.storage import LedgerStore
from sustainability_engine.validation import (
    OFFSET_SCHEMA,
    USAGE_SCHEMA,
    describe_error,
    validate,
)


def _parse_meta(pairs: list[str]) -> dict[str, str]:
    meta: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise vol.Invalid(f"metadata must be key=value, got {pair!r}")
        meta[key.strip()] = value.strip()
    return meta


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Record garden resource usage")
    add_common_arguments(parser)
    sub = parser.add_subparsers(dest="action", required=True)

    usage = sub.add_parser("usage", help="Record a resource sample")
    usage.add_argument("kind", help=f"One of: {', '.join(RESOURCE_KINDS)}")
    usage.add_argument("amount", help="Quantity; negative values record savings")
    usage.add_argument("--date", help="ISO timestamp of the sample")
    usage.add_argument("--meta", action="append", default=[], help="Extra key=value metadata")

    offset = sub.add_parser("offset", help="Record a carbon offset")
    offset.add_argument("amount", help="kg CO2e avoided")
    offset.add_argument("source", help="Activity credited with the offset")
    offset.add_argument("--date", help="ISO timestamp of the offset")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.action == "usage":
        raw = {"kind": args.kind, "amount": args.amount, "date": args.date}
        schema = USAGE_SCHEMA
    else:
        raw = {"amount": args.amount, "source": args.source, "date": args.date}
        schema = OFFSET_SCHEMA
    try:
        if args.action == "usage":
            raw["metadata"] = _parse_meta(args.meta)
        data = validate(schema, raw)
    except vol.Invalid as err:
        parser.error(describe_error(raw, err))

    store = LedgerStore(args.store) if args.store else LedgerStore.from_env()
    ledger = SustainabilityLedger(store=store)
    if args.action == "usage":
        progress = ledger.record_resource_usage(
            data["kind"], data["amount"], data.get("date"), data["metadata"]
        )
    else:
        progress = ledger.record_carbon_offset(data["amount"], data["source"], data.get("date"))

    print(json.dumps({"score": progress["score"], "sdg_scores": progress["sdg_scores"]}))


if __name__ == "__main__":  # pragma: no cover
    main()
