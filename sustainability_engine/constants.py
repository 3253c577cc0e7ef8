"""Central constants used across the sustainability engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

STORAGE_KEY = "irish-garden-sustainability"

# Development goals tracked by the ledger, in display order.
SDG_KEYS: Tuple[str, ...] = (
    "sdg2",
    "sdg3",
    "sdg4",
    "sdg6",
    "sdg7",
    "sdg8",
    "sdg9",
    "sdg11",
    "sdg12",
    "sdg13",
    "sdg14",
    "sdg15",
)

RESOURCE_KINDS: Tuple[str, ...] = (
    "water",
    "compost",
    "harvest",
    "carbon",
    "energy",
    "waste",
)

# Kinds where a falling series is an improvement.
LOWER_IS_BETTER: frozenset[str] = frozenset({"water", "carbon", "energy"})

MAX_SCORE = 100
PRACTICE_SCORE_POINTS = 10
CHALLENGE_SCORE_POINTS = 15
CHALLENGE_SDG_POINTS = 10

IMPACT_POINTS: Dict[str, int] = {"high": 15, "medium": 10, "low": 5}
IMPACT_LEVELS: Tuple[str, ...] = ("low", "medium", "high")

MONTHS: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

EVENT_PRACTICE_ADDED = "sustainability-practice-added"
EVENT_PRACTICE_REMOVED = "sustainability-practice-removed"
EVENT_RESOURCE_USAGE_UPDATED = "resource-usage-updated"
EVENT_CARBON_OFFSET_RECORDED = "carbon-offset-recorded"
EVENT_DATA_CHANGED = "sustainability-data-changed"


@dataclass(frozen=True, slots=True)
class ResourceImpact:
    """How one resource sample moves a single SDG score.

    With ``conservation_rate`` unset the delta is ``amount * rate``. When set,
    negative amounts count as savings (``+abs(amount) * conservation_rate``)
    and positive amounts as consumption (``-amount * rate``).
    """

    sdg: str
    rate: float
    conservation_rate: float | None = None

    def delta(self, amount: float) -> float:
        if self.conservation_rate is None:
            return amount * self.rate
        if amount < 0:
            return abs(amount) * self.conservation_rate
        return -amount * self.rate


RESOURCE_SDG_IMPACTS: Dict[str, Tuple[ResourceImpact, ...]] = {
    "water": (ResourceImpact("sdg6", 0.01, conservation_rate=0.05),),
    "compost": (ResourceImpact("sdg12", 0.1), ResourceImpact("sdg15", 0.1)),
    "harvest": (ResourceImpact("sdg2", 0.1), ResourceImpact("sdg12", 0.05)),
    "carbon": (ResourceImpact("sdg13", 0.1, conservation_rate=0.2),),
    "energy": (ResourceImpact("sdg7", 0.05, conservation_rate=0.15),),
    "waste": (ResourceImpact("sdg11", 0.1), ResourceImpact("sdg12", 0.15)),
}

__all__ = [
    "STORAGE_KEY",
    "SDG_KEYS",
    "RESOURCE_KINDS",
    "LOWER_IS_BETTER",
    "MAX_SCORE",
    "PRACTICE_SCORE_POINTS",
    "CHALLENGE_SCORE_POINTS",
    "CHALLENGE_SDG_POINTS",
    "IMPACT_POINTS",
    "IMPACT_LEVELS",
    "MONTHS",
    "EVENT_PRACTICE_ADDED",
    "EVENT_PRACTICE_REMOVED",
    "EVENT_RESOURCE_USAGE_UPDATED",
    "EVENT_CARBON_OFFSET_RECORDED",
    "EVENT_DATA_CHANGED",
    "ResourceImpact",
    "RESOURCE_SDG_IMPACTS",
]
