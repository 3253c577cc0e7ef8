"""Helper utilities for command line scripts."""

import logging
from pathlib import Path


def add_common_arguments(parser) -> None:
    """Register ``--store`` and ``--log-level`` on ``parser``."""
    parser.add_argument(
        "--store",
        type=Path,
        help="Ledger JSON file (defaults to $IRISH_GARDEN_STORAGE_DIR)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.WARNING))
