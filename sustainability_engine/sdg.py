"""SDG impact analysis helpers."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .catalog import Practice, load_sdg_goals
from .constants import MAX_SCORE
from .utils import coerce_amount

__all__ = [
    "SDG_CATEGORIES",
    "DEFAULT_RADAR_SDGS",
    "top_sdgs",
    "categorize_sdg_scores",
    "practices_for_sdg",
    "sdg_radar_data",
    "sdg_impact_level",
]

SDG_CATEGORIES: Dict[str, tuple[str, ...]] = {
    "environment": ("sdg6", "sdg13", "sdg14", "sdg15"),
    "wellbeing": ("sdg2", "sdg3", "sdg4", "sdg11"),
    "economy": ("sdg7", "sdg8", "sdg9", "sdg12"),
}

# Shown on the radar chart before any goal has a score.
DEFAULT_RADAR_SDGS: tuple[str, ...] = ("sdg2", "sdg3", "sdg6", "sdg12", "sdg13", "sdg15")

RADAR_SCALE = 5

_IMPACT_LEVELS: tuple[tuple[float, str], ...] = (
    (75, "Transformative"),
    (50, "Significant"),
    (25, "Moderate"),
)


def top_sdgs(sdg_scores: Mapping[str, Any] | None, limit: int = 5) -> List[str]:
    """Return up to ``limit`` SDG keys with a positive score, highest first."""

    scored = [(k, coerce_amount(v)) for k, v in (sdg_scores or {}).items()]
    scored = [item for item in scored if item[1] > 0]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [k for k, _ in scored[:limit]]


def categorize_sdg_scores(sdg_scores: Mapping[str, Any] | None) -> Dict[str, List[Dict[str, Any]]]:
    """Group positive SDG scores by :data:`SDG_CATEGORIES` with goal info."""

    goals = load_sdg_goals()
    scores = sdg_scores or {}
    result: Dict[str, List[Dict[str, Any]]] = {}
    for category, keys in SDG_CATEGORIES.items():
        rows = []
        for key in keys:
            score = coerce_amount(scores.get(key))
            if score <= 0:
                continue
            row: Dict[str, Any] = {}
            goal = goals.get(key)
            if goal is not None:
                row.update(goal.as_dict())
            row.update({"key": key, "score": score})
            rows.append(row)
        rows.sort(key=lambda r: r["score"], reverse=True)
        result[category] = rows
    return result


def practices_for_sdg(sdg: str, practices: Iterable[Practice]) -> List[Practice]:
    return [p for p in practices if sdg in p.sdgs]


def sdg_radar_data(sdg_scores: Mapping[str, Any] | None) -> Dict[str, list]:
    """Return labels and 0-5 scaled values for a radar chart."""

    scores = sdg_scores or {}
    active = [k for k, v in scores.items() if coerce_amount(v) > 0]
    keys = active or list(DEFAULT_RADAR_SDGS)
    goals = load_sdg_goals()

    labels = [goals[k].name if k in goals else k for k in keys]
    data = [
        min(MAX_SCORE, coerce_amount(scores.get(k))) / MAX_SCORE * RADAR_SCALE for k in keys
    ]
    return {"labels": labels, "sdg_keys": keys, "data": data}


def sdg_impact_level(score: float) -> str:
    """Return a descriptive level for an SDG impact ``score``."""

    value = coerce_amount(score)
    for threshold, level in _IMPACT_LEVELS:
        if value >= threshold:
            return level
    if value > 0:
        return "Initial"
    return "Not Started"
