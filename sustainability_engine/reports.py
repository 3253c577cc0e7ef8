"""Time series views of resource usage built on :mod:`pandas`."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping

import pandas as pd

from .sdg import sdg_radar_data
from .utils import coerce_amount

__all__ = [
    "usage_frame",
    "usage_table",
    "format_trend_data",
    "percentage_change",
    "dashboard_data",
]

MOVING_AVERAGE_WINDOW = 7
DASHBOARD_KINDS = ("water", "compost", "harvest", "carbon")


def _now(now: datetime | pd.Timestamp | None) -> pd.Timestamp:
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts


def usage_frame(entries: Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    """Return ``entries`` as a date sorted frame with ``date`` and ``amount``.

    Entries without a parseable date are dropped; unusable amounts are ``0``.
    """

    records = [
        {"date": e.get("date"), "amount": coerce_amount(e.get("amount"))}
        for e in entries or []
        if isinstance(e, Mapping)
    ]
    frame = pd.DataFrame(records, columns=["date", "amount"])
    frame["date"] = pd.to_datetime(frame["date"], utc=True, errors="coerce", format="ISO8601")
    frame["amount"] = frame["amount"].astype(float)
    frame = frame.dropna(subset=["date"])
    return frame.sort_values("date", kind="stable").reset_index(drop=True)


def usage_table(progress: Mapping[str, Any]) -> pd.DataFrame:
    """Return every resource entry as one row with its kind and metadata."""

    rows = []
    for kind, series in (progress.get("resource_usage") or {}).items():
        for entry in series or []:
            if not isinstance(entry, Mapping):
                continue
            rows.append(
                {
                    "kind": kind,
                    "date": entry.get("date"),
                    "amount": coerce_amount(entry.get("amount")),
                    "metadata": json.dumps(entry.get("metadata") or {}, sort_keys=True),
                }
            )
    return pd.DataFrame(rows, columns=["kind", "date", "amount", "metadata"])


def format_trend_data(
    entries: Iterable[Mapping[str, Any]] | None,
    days: int = 30,
    now: datetime | None = None,
) -> Dict[str, list]:
    """Return chart series for the last ``days`` days with a moving average."""

    frame = usage_frame(entries)
    if frame.empty:
        return {"labels": [], "values": [], "moving_average": []}

    cutoff = _now(now) - pd.Timedelta(days=days)
    frame = frame[frame["date"] >= cutoff]
    averages = frame["amount"].rolling(MOVING_AVERAGE_WINDOW, min_periods=1).mean()
    return {
        "labels": [f"{d.day}/{d.month}" for d in frame["date"]],
        "values": frame["amount"].tolist(),
        "moving_average": averages.tolist(),
    }


def percentage_change(
    entries: Iterable[Mapping[str, Any]] | None,
    days: int = 30,
    now: datetime | None = None,
) -> Dict[str, Any]:
    """Return the change between the current and previous ``days`` periods."""

    frame = usage_frame(entries)
    if len(frame) < 2:
        return {"percentage": 0, "is_positive": False}

    current_start = _now(now) - pd.Timedelta(days=days)
    previous_start = current_start - pd.Timedelta(days=days)
    previous = frame[(frame["date"] >= previous_start) & (frame["date"] < current_start)]
    current = frame[frame["date"] >= current_start]
    if previous.empty or current.empty:
        return {"percentage": 0, "is_positive": False}

    previous_avg = float(previous["amount"].mean())
    current_avg = float(current["amount"].mean())
    if previous_avg == 0:
        return {"percentage": 100, "is_positive": current_avg > 0}

    pct = (current_avg - previous_avg) / previous_avg * 100
    return {"percentage": int(round(pct)), "is_positive": pct > 0}


def dashboard_data(progress: Mapping[str, Any], now: datetime | None = None) -> Dict[str, Any]:
    """Return trend, change and SDG radar data for a dashboard view."""

    usage = progress.get("resource_usage") or {}
    result: Dict[str, Any] = {"sdg_impact": sdg_radar_data(progress.get("sdg_scores"))}
    for kind in DASHBOARD_KINDS:
        series = usage.get(kind) or []
        result[f"{kind}_trend"] = format_trend_data(series, 30, now)
        result[f"{kind}_change"] = percentage_change(series, 30, now)
    return result
