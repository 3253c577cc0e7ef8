"""Persistence for the single-user sustainability ledger document."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from copy import deepcopy
from pathlib import Path
from typing import Any

from .constants import RESOURCE_KINDS, SDG_KEYS, STORAGE_KEY
from .utils import get_storage_dir, save_json

_LOGGER = logging.getLogger(__name__)

DEFAULT_DATA: dict[str, Any] = {
    "active_practices": [],
    "resource_usage": {kind: [] for kind in RESOURCE_KINDS},
    "milestones": [],
    "score": 0,
    "sdg_scores": {key: 0 for key in SDG_KEYS},
    "wildlife_spottings": [],
    "challenges": {"accepted": [], "completed": []},
}

__all__ = ["DEFAULT_DATA", "LedgerStore", "default_progress", "default_store_path"]


def default_progress() -> dict[str, Any]:
    """Return a fresh, structurally complete ledger document."""

    return deepcopy(DEFAULT_DATA)


def default_store_path() -> Path:
    return get_storage_dir() / f"{STORAGE_KEY}.json"


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


def _patch_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Fill missing or wrongly typed fields of ``data`` in place."""

    for key, default_value in DEFAULT_DATA.items():
        if key not in data:
            data[key] = deepcopy(default_value)
            continue

        current = data[key]
        if isinstance(default_value, dict):
            if not isinstance(current, Mapping):
                data[key] = deepcopy(default_value)
            elif not isinstance(current, dict):
                data[key] = dict(current)
        elif isinstance(default_value, list):
            if not _is_list(current):
                data[key] = deepcopy(default_value)
            elif not isinstance(current, list):
                data[key] = list(current)
        elif isinstance(default_value, int):
            if isinstance(current, bool) or not isinstance(current, int | float):
                data[key] = default_value

    for key in ("active_practices", "wildlife_spottings"):
        entries = data[key]
        kept = [dict(e) for e in entries if isinstance(e, Mapping)]
        if len(kept) != len(entries):
            _LOGGER.warning("Dropped %d malformed %s entries", len(entries) - len(kept), key)
        data[key] = kept

    usage = data["resource_usage"]
    for kind in RESOURCE_KINDS:
        if not _is_list(usage.get(kind)):
            usage[kind] = []

    scores = data["sdg_scores"]
    for sdg in SDG_KEYS:
        value = scores.get(sdg)
        if isinstance(value, bool) or not isinstance(value, int | float):
            scores[sdg] = 0

    challenges = data["challenges"]
    for key in ("accepted", "completed"):
        if not _is_list(challenges.get(key)):
            challenges[key] = []
    return data


class LedgerStore:
    """Read and overwrite one JSON ledger document.

    ``path=None`` models an environment without persistence: loads return
    defaults and saves are dropped. No call here raises for storage or
    parse problems; failures are logged and defaults are used instead.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path: Path | None = Path(path) if path is not None else None

    @classmethod
    def from_env(cls) -> "LedgerStore":
        """Return a store at the configured default location."""

        return cls(default_store_path())

    @property
    def available(self) -> bool:
        return self.path is not None

    def load(self) -> dict[str, Any]:
        if self.path is None:
            _LOGGER.debug("Persistence unavailable, returning default progress")
            return default_progress()
        if not self.path.exists():
            return default_progress()

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
            _LOGGER.error("Error reading ledger %s: %s", self.path, err)
            return default_progress()

        if not isinstance(data, dict):
            _LOGGER.error("Ledger %s does not contain an object", self.path)
            return default_progress()
        return _patch_defaults(data)

    def save(self, data: Mapping[str, Any]) -> bool:
        """Overwrite the persisted document; return ``False`` on failure."""

        if self.path is None:
            _LOGGER.debug("Persistence unavailable, progress not saved")
            return False
        try:
            return save_json(self.path, data)
        except (OSError, TypeError, ValueError) as err:
            _LOGGER.error("Error saving ledger %s: %s", self.path, err)
            return False

    def reset(self) -> dict[str, Any]:
        """Delete the persisted document and return a fresh default."""

        if self.path is not None:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as err:
                _LOGGER.error("Error removing ledger %s: %s", self.path, err)
        return default_progress()
