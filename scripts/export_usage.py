#!/usr/bin/env python3
"""Export recorded resource usage as CSV."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

# Ensure project root is on the Python path when executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from scripts import add_common_arguments, configure_logging

from sustainability_engine.reports import usage_table
from sustainability_engine.storage import LedgerStore


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Export resource usage to CSV")
    add_common_arguments(parser)
    parser.add_argument("--output", type=Path, help="CSV file to write (stdout if omitted)")
    parser.add_argument("--kind", action="append", help="Only export this resource kind")
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    store = LedgerStore(args.store) if args.store else LedgerStore.from_env()
    table = usage_table(store.load())
    if args.kind:
        table = table[table["kind"].isin(args.kind)]

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(args.output, index=False)
    else:
        table.to_csv(sys.stdout, index=False)


if __name__ == "__main__":  # pragma: no cover
    main()
