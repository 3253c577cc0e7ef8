#!/usr/bin/env python3
"""Print a JSON summary of the sustainability ledger."""
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

from sustainability_engine.catalog import load_catalog
from sustainability_engine.metrics import sustainability_summary
from sustainability_engine.reports import dashboard_data
from sustainability_engine.sdg import sdg_impact_level
from sustainability_engine.storage import LedgerStore
from sustainability_engine.utils import save_json


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Summarise garden sustainability progress")
    add_common_arguments(parser)
    parser.add_argument("--output", type=Path, help="Write the report to this JSON file")
    parser.add_argument(
        "--dashboard",
        action="store_true",
        help="Include 30 day trend and SDG radar data",
    )
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    store = LedgerStore(args.store) if args.store else LedgerStore.from_env()
    progress = store.load()
    report = sustainability_summary(progress, load_catalog())
    report["impact_level"] = sdg_impact_level(report["sdg_impact"])
    if args.dashboard:
        report["dashboard"] = dashboard_data(progress)

    if args.output:
        save_json(args.output, report)
    else:
        print(json.dumps(report, indent=2))


if __name__ == "__main__":  # pragma: no cover
    main()
