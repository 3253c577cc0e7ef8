"""Derived metrics computed from a loaded ledger document.

All functions are pure and recompute from the full series on every call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Mapping, Sequence

from .catalog import PracticeCatalog
from .constants import LOWER_IS_BETTER, MAX_SCORE, RESOURCE_KINDS
from .utils import coerce_amount, parse_timestamp, round_clamped, round_half_up

__all__ = [
    "CarbonImpact",
    "net_carbon_impact",
    "sdg_impact_percentage",
    "category_completion",
    "classify_trend",
    "resource_trend",
    "resource_totals",
    "highest_emission_source",
    "sustainability_summary",
]

TREND_WINDOW = 3


@dataclass(slots=True)
class CarbonImpact:
    """Carbon emissions against recorded reductions."""

    emissions: float
    reductions: float
    net_impact: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def _entries(progress: Mapping[str, Any], kind: str) -> list[Mapping[str, Any]]:
    usage = progress.get("resource_usage") or {}
    series = usage.get(kind) or []
    return [e for e in series if isinstance(e, Mapping)]


def net_carbon_impact(progress: Mapping[str, Any]) -> CarbonImpact:
    """Return emissions, reductions and their difference for carbon entries."""

    emissions = 0.0
    reductions = 0.0
    for entry in _entries(progress, "carbon"):
        amount = coerce_amount(entry.get("amount"))
        if amount >= 0:
            emissions += amount
        else:
            reductions += abs(amount)
    return CarbonImpact(emissions, reductions, emissions - reductions)


def sdg_impact_percentage(sdg_scores: Mapping[str, Any]) -> int:
    """Return overall SDG impact as a percentage of the maximum possible score."""

    if not sdg_scores:
        return 0
    total = sum(coerce_amount(v) for v in sdg_scores.values())
    max_total = MAX_SCORE * len(sdg_scores)
    return round_clamped(total / max_total * 100, 0, 100)


def category_completion(progress: Mapping[str, Any], catalog: PracticeCatalog) -> Dict[str, int]:
    """Return the share of each catalog category's practices that are active."""

    active = {p.get("id") for p in progress.get("active_practices") or [] if isinstance(p, Mapping)}
    result: Dict[str, int] = {}
    for key, category in catalog.categories.items():
        total = len(category.practices)
        if not total:
            result[key] = 0
            continue
        done = sum(1 for p in category.practices if p.id in active)
        result[key] = round_half_up(done / total * 100)
    return result


def _sorted_by_date(entries: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    indexed = list(enumerate(entries))

    def _key(item: tuple[int, Mapping[str, Any]]):
        ts = parse_timestamp(item[1].get("date"))
        return (ts is None, ts.timestamp() if ts else 0.0, item[0])

    return [entry for _, entry in sorted(indexed, key=_key)]


def classify_trend(entries: Sequence[Mapping[str, Any]], lower_is_better: bool = False) -> str:
    """Return ``improving``, ``worsening`` or ``stable`` for a resource series.

    The mean of the most recent window (up to three entries) is compared with
    the mean of the window before it. Fewer than two entries is ``stable``.
    """

    if len(entries) < 2:
        return "stable"
    ordered = _sorted_by_date(entries)
    window = min(TREND_WINDOW, len(ordered) // 2)
    recent = ordered[-window:]
    previous = ordered[-2 * window : -window]

    recent_avg = sum(coerce_amount(e.get("amount")) for e in recent) / len(recent)
    previous_avg = sum(coerce_amount(e.get("amount")) for e in previous) / len(previous)
    if recent_avg == previous_avg:
        return "stable"
    went_down = recent_avg < previous_avg
    return "improving" if went_down == lower_is_better else "worsening"


def resource_trend(progress: Mapping[str, Any], kind: str) -> str:
    return classify_trend(_entries(progress, kind), kind in LOWER_IS_BETTER)


def resource_totals(progress: Mapping[str, Any]) -> Dict[str, float]:
    """Return the summed amount per resource kind."""

    usage = progress.get("resource_usage") or {}
    kinds = list(RESOURCE_KINDS) + [k for k in usage if k not in RESOURCE_KINDS]
    return {
        kind: round(sum(coerce_amount(e.get("amount")) for e in _entries(progress, kind)), 3)
        for kind in kinds
    }


def highest_emission_source(progress: Mapping[str, Any]) -> str | None:
    """Return the metadata ``activity`` with the largest summed emissions."""

    totals: Dict[str, float] = {}
    for entry in _entries(progress, "carbon"):
        amount = coerce_amount(entry.get("amount"))
        metadata = entry.get("metadata") or {}
        activity = metadata.get("activity") if isinstance(metadata, Mapping) else None
        if amount > 0 and activity:
            totals[activity] = totals.get(activity, 0.0) + amount
    if not totals:
        return None
    return max(totals, key=totals.__getitem__)


def sustainability_summary(progress: Mapping[str, Any], catalog: PracticeCatalog) -> Dict[str, Any]:
    """Return a JSON friendly overview of the ledger."""

    carbon = net_carbon_impact(progress)
    sdg_scores = progress.get("sdg_scores") or {}
    return {
        "score": int(coerce_amount(progress.get("score"))),
        "active_practices": len(progress.get("active_practices") or []),
        "sdg_impact": sdg_impact_percentage(sdg_scores),
        "sdg_scores": {k: round(coerce_amount(v), 2) for k, v in sdg_scores.items()},
        "carbon": {k: round(v, 1) for k, v in carbon.as_dict().items()},
        "highest_emission_source": highest_emission_source(progress),
        "category_completion": category_completion(progress, catalog),
        "resource_totals": resource_totals(progress),
        "trends": {kind: resource_trend(progress, kind) for kind in RESOURCE_KINDS},
        "wildlife_spottings": len(progress.get("wildlife_spottings") or []),
    }
