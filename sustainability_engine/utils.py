"""Utility helpers for datasets, persisted documents and loose numbers."""

from __future__ import annotations

import json
import math
import os
from datetime import date, datetime, timezone
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union

import yaml

__all__ = [
    "save_json",
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "overlay_dir",
    "get_storage_dir",
    "normalize_key",
    "deep_update",
    "coerce_amount",
    "clamp",
    "round_half_up",
    "round_clamped",
    "isoformat",
    "parse_timestamp",
    "utcnow_iso",
]


PathType = Union[str, PathLike]


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def save_json(path: PathType, data: Mapping[str, Any]) -> bool:
    """Atomically replace ``path`` with ``data`` and return ``True`` on success.

    ``data`` is serialised before anything touches the disk, so an
    unserialisable value leaves the existing file intact.
    """

    p = Path(path)
    txt = json.dumps(data, indent=2) + "\n"
    tmp = p.with_suffix(".tmp")
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp.write_text(txt, encoding="utf-8")
    tmp.replace(p)
    return True


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


# Datasets ship inside the package. ``SUSTAINABILITY_DATA_DIR`` replaces the
# packaged directory and ``SUSTAINABILITY_OVERLAY_DIR`` holds user files that
# are merged over the defaults, so a single practice or goal can be adjusted
# without copying the whole catalog.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_ENV = "SUSTAINABILITY_DATA_DIR"
OVERLAY_ENV = "SUSTAINABILITY_OVERLAY_DIR"

# Location of the persisted ledger document
STORAGE_ENV = "IRISH_GARDEN_STORAGE_DIR"
DEFAULT_STORAGE_DIR = Path("~/.irish_garden")

_PATH_CACHE: tuple[Path, ...] | None = None
_ENV_STATE: str | None = None


def get_data_dir() -> Path:
    """Return base dataset directory honoring ``SUSTAINABILITY_DATA_DIR``."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return the overlay directory defined via ``SUSTAINABILITY_OVERLAY_DIR``."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_storage_dir() -> Path:
    """Return directory holding the ledger document."""

    env = os.getenv(STORAGE_ENV)
    return Path(env).expanduser() if env else DEFAULT_STORAGE_DIR.expanduser()


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets.

    Results are cached but refreshed whenever ``SUSTAINABILITY_DATA_DIR``
    changes between calls.
    """

    global _PATH_CACHE, _ENV_STATE
    env_state = os.getenv(DATA_ENV)
    if _PATH_CACHE is None or _ENV_STATE != env_state:
        _PATH_CACHE = (get_data_dir(),)
        _ENV_STATE = env_state
    return _PATH_CACHE


@lru_cache(maxsize=None)
def load_dataset(filename: str) -> Dict[str, Any]:
    """Return dataset ``filename`` merged with any overlay data."""

    data: Dict[str, Any] = {}
    for base in dataset_paths():
        path = base / filename
        if path.exists():
            extra = load_data(str(path))
            if isinstance(extra, dict) and isinstance(data, dict):
                deep_update(data, extra)
            else:
                data = extra

    overlay = overlay_dir()
    if overlay:
        overlay_path = overlay / filename
        if overlay_path.exists():
            extra = load_data(str(overlay_path))
            if isinstance(extra, dict) and isinstance(data, dict):
                deep_update(data, extra)
            else:
                data = extra

    return data


def clear_dataset_cache() -> None:
    """Clear cached dataset results loaded via :func:`load_dataset`."""

    global _PATH_CACHE, _ENV_STATE
    load_dataset.cache_clear()
    _PATH_CACHE = None
    _ENV_STATE = None


def normalize_key(key: str) -> str:
    """Return ``key`` normalized for case-insensitive dataset lookups.

    Whitespace, hyphens and underscores collapse to a single underscore.
    """

    value = str(key).casefold()
    for sep in ("_", "-"):
        value = value.replace(sep, " ")
    parts = [p for p in value.strip().split() if p]
    return "_".join(parts)


def coerce_amount(value: Any) -> float:
    """Return ``value`` as a finite float, treating anything unusable as ``0``."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Return ``value`` limited to ``[low, high]``."""

    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round halves away from negative infinity (``2.5`` -> ``3``)."""

    return int(math.floor(value + 0.5))


def round_clamped(value: float, low: float = 0.0, high: float = 100.0) -> int:
    """Return ``value`` limited to ``[low, high]`` and rounded half up.

    Infinite values land on the nearest bound and ``nan`` on ``low``.
    """

    if math.isnan(value):
        return int(low)
    return round_half_up(clamp(value, low, high))


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def isoformat(value: datetime | date | str | None) -> str:
    """Return an ISO 8601 string for ``value`` defaulting to now (UTC)."""

    if value is None:
        return utcnow_iso()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat()
    return str(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Return an aware :class:`datetime` parsed from ``value`` or ``None``."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
